"""Calendar Interfaces"""

from src.service.calendar.app.interface.i_calendar_entry_repo import ICalendarEntryRepo
from src.service.calendar.app.interface.i_reminder_repo import IReminderRepo

__all__ = ['ICalendarEntryRepo', 'IReminderRepo']
