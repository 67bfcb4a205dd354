import attrs

from src.service.calendar.domain.entity.calendar_entry_entity import CalendarEntry
from src.service.calendar.domain.entity.reminder_entity import Reminder


@attrs.frozen
class DueReminder:
    """What a notification dispatcher needs to deliver one reminder"""

    reminder: Reminder
    entry: CalendarEntry
