from datetime import datetime, timedelta
from typing import Optional

import attrs
from uuid_utils import UUID

from src.service.calendar.domain.enum.reminder_status import ReminderStatus


def _validate_positive(instance: object, attribute: attrs.Attribute, value: int) -> None:
    if value <= 0:
        raise ValueError(f'Reminder {attribute.name} must be positive')


@attrs.frozen
class Reminder:
    """
    Notification scheduled ``minutes_before`` the entry's start.

    ``fire_at`` is always strictly before the start it was computed from.
    The only transition is PENDING -> SENT.
    """

    id: UUID
    entry_id: UUID
    owner_id: str
    event_id: str
    minutes_before: int = attrs.field(validator=_validate_positive)
    fire_at: datetime
    message: str
    status: ReminderStatus = ReminderStatus.PENDING
    sent_at: Optional[datetime] = None

    @staticmethod
    def fire_time(*, start: datetime, minutes_before: int) -> datetime:
        return start - timedelta(minutes=minutes_before)

    @staticmethod
    def default_message(*, title: str, minutes_before: int) -> str:
        hours, minutes = divmod(minutes_before, 60)
        if minutes:
            lead = f'{minutes_before} minutes'
        elif hours % 24 == 0:
            days = hours // 24
            lead = f'{days} day' if days == 1 else f'{days} days'
        else:
            lead = f'{hours} hour' if hours == 1 else f'{hours} hours'
        return f'{title} starts in {lead}'

    @property
    def is_pending(self) -> bool:
        return self.status is ReminderStatus.PENDING

    def mark_sent(self, *, at: datetime) -> 'Reminder':
        if not self.is_pending:
            return self
        return attrs.evolve(self, status=ReminderStatus.SENT, sent_at=at)
