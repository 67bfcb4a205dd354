from typing import Tuple

import attrs
from uuid_utils import UUID

from src.service.calendar.domain.entity.calendar_entry_entity import CalendarEntry
from src.service.calendar.domain.entity.reminder_entity import Reminder


@attrs.frozen
class CalendarEntryDetail:
    entry: CalendarEntry
    reminders: Tuple[Reminder, ...] = ()

    @property
    def reminder_ids(self) -> Tuple[UUID, ...]:
        return tuple(reminder.id for reminder in self.reminders)
