from src.service.calendar.domain.value_object.calendar_entry_detail import CalendarEntryDetail
from src.service.calendar.domain.value_object.calendar_file import CalendarFile
from src.service.calendar.domain.value_object.due_reminder import DueReminder
from src.service.calendar.domain.value_object.parsed_calendar_event import ParsedCalendarEvent
from src.service.calendar.domain.value_object.upcoming_reminders import UpcomingReminders

__all__ = [
    'CalendarEntryDetail',
    'CalendarFile',
    'DueReminder',
    'ParsedCalendarEvent',
    'UpcomingReminders',
]
