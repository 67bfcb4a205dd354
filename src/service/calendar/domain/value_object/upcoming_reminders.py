from datetime import datetime
from typing import Iterator, Tuple

from src.platform.logging.loguru_io import Logger
from src.service.calendar.domain.entity.reminder_entity import Reminder


class UpcomingReminders:
    """
    Pending reminders of one owner firing after ``now``, earliest first.

    Holds a snapshot taken when it was built: every ``iter()`` walks the
    same reminders again from the start, and later planner changes are not
    reflected. Items are produced lazily, one per step.
    """

    def __init__(self, *, owner_id: str, now: datetime, reminders: Tuple[Reminder, ...]) -> None:
        self.owner_id = owner_id
        self.now = now
        self._reminders = tuple(
            sorted(
                (r for r in reminders if r.is_pending and r.fire_at > now),
                key=lambda r: (r.fire_at, r.minutes_before),
            )
        )

    @Logger.io
    def __iter__(self) -> Iterator[Reminder]:
        for reminder in self._reminders:
            yield reminder

    def __len__(self) -> int:
        return len(self._reminders)

    def __bool__(self) -> bool:
        return bool(self._reminders)
