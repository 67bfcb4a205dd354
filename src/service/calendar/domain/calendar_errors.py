"""Calendar Domain Errors"""

from datetime import datetime

from uuid_utils import UUID

from src.platform.exception.exceptions import ConflictError, DomainError, NotFoundError
from src.service.shared_kernel.domain.enum.error_kind import ErrorKind


class AlreadyInCalendarError(ConflictError):
    kind = ErrorKind.ALREADY_IN_CALENDAR

    def __init__(self, *, owner_id: str, event_id: str) -> None:
        super().__init__(f'Event {event_id} is already in the calendar of {owner_id}')
        self.owner_id = owner_id
        self.event_id = event_id


class NotInCalendarError(NotFoundError):
    kind = ErrorKind.NOT_IN_CALENDAR

    def __init__(self, *, owner_id: str, event_id: str) -> None:
        super().__init__(f'Event {event_id} is not in the calendar of {owner_id}')
        self.owner_id = owner_id
        self.event_id = event_id


class InvalidReminderOffsetError(DomainError):
    kind = ErrorKind.INVALID_REMINDER_OFFSET

    def __init__(self, minutes_before: int) -> None:
        super().__init__(
            f'Reminder offset must be a positive number of minutes, got {minutes_before}'
        )
        self.minutes_before = minutes_before


class ReminderInPastError(DomainError):
    kind = ErrorKind.REMINDER_IN_PAST

    def __init__(self, *, fire_at: datetime, now: datetime) -> None:
        super().__init__(
            f'Reminder would fire at {fire_at.isoformat()}, which is not after {now.isoformat()}'
        )
        self.fire_at = fire_at
        self.now = now


class ReminderNotFoundError(NotFoundError):
    kind = ErrorKind.REMINDER_NOT_FOUND

    def __init__(self, reminder_id: UUID) -> None:
        super().__init__(f'Reminder not found: {reminder_id}')
        self.reminder_id = reminder_id


class DuplicateReminderError(ConflictError):
    kind = ErrorKind.DUPLICATE_REMINDER

    def __init__(self, *, entry_id: UUID, minutes_before: int) -> None:
        super().__init__(
            f'A pending reminder {minutes_before} minutes before already exists on entry {entry_id}'
        )
        self.entry_id = entry_id
        self.minutes_before = minutes_before


class MalformedCalendarError(DomainError):
    kind = ErrorKind.MALFORMED_CALENDAR

    def __init__(self, reason: str) -> None:
        super().__init__(f'Malformed calendar document: {reason}')
        self.reason = reason
