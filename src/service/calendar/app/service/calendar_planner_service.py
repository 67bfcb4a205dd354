"""
Calendar Planner

Per-user calendar entries for attended events and the reminders derived
from them. Reminder delivery is not done here: a dispatcher polls
``collect_due`` (or ``list_upcoming``) on its own clock tick and reports
back with ``mark_sent``.
"""

from datetime import datetime
from typing import List, Optional, Sequence

from uuid_utils import UUID
import uuid_utils

from src.platform.config.core_setting import settings
from src.platform.logging.loguru_io import Logger
from src.platform.state.keyed_lock import KeyedLock
from src.service.calendar.app.interface.i_calendar_entry_repo import ICalendarEntryRepo
from src.service.calendar.app.interface.i_reminder_repo import IReminderRepo
from src.service.calendar.domain.calendar_errors import (
    AlreadyInCalendarError,
    DuplicateReminderError,
    InvalidReminderOffsetError,
    NotInCalendarError,
    ReminderInPastError,
    ReminderNotFoundError,
)
from src.service.calendar.domain.entity.calendar_entry_entity import CalendarEntry
from src.service.calendar.domain.entity.reminder_entity import Reminder
from src.service.calendar.domain.value_object.calendar_entry_detail import CalendarEntryDetail
from src.service.calendar.domain.value_object.due_reminder import DueReminder
from src.service.calendar.domain.value_object.upcoming_reminders import UpcomingReminders
from src.service.shared_kernel.app.interface.i_clock import IClock
from src.service.shared_kernel.app.interface.i_event_catalog import IEventCatalog


class CalendarPlanner:
    def __init__(
        self,
        *,
        entry_repo: ICalendarEntryRepo,
        reminder_repo: IReminderRepo,
        event_catalog: IEventCatalog,
        clock: IClock,
        default_offsets_minutes: Optional[Sequence[int]] = None,
        locks: Optional[KeyedLock] = None,
    ) -> None:
        self.entry_repo = entry_repo
        self.reminder_repo = reminder_repo
        self.event_catalog = event_catalog
        self.clock = clock
        self.default_offsets_minutes = tuple(
            settings.DEFAULT_REMINDER_OFFSETS_MINUTES
            if default_offsets_minutes is None
            else default_offsets_minutes
        )
        self.locks = locks or KeyedLock(name='calendar')

    # ==================== Entries ====================

    @Logger.io
    async def add(self, *, owner_id: str, event_id: str) -> CalendarEntryDetail:
        """
        Put an event in the owner's calendar with the default reminders.

        Only default reminders that still lie in the future are created, so
        an event starting in an hour gets neither the day-before nor the
        two-hours-before reminder.

        Raises:
            AlreadyInCalendarError: The owner already has this event
            EventNotFoundError: Unknown event
        """
        async with self.locks.hold(('entry', owner_id, event_id)):
            if await self.entry_repo.find_by_owner_and_event(owner_id=owner_id, event_id=event_id):
                raise AlreadyInCalendarError(owner_id=owner_id, event_id=event_id)
            return await self._create_with_defaults(owner_id=owner_id, event_id=event_id)

    @Logger.io
    async def ensure_in_calendar(self, *, owner_id: str, event_id: str) -> CalendarEntryDetail:
        """Like ``add``, but an existing entry is returned untouched instead of failing"""
        async with self.locks.hold(('entry', owner_id, event_id)):
            entry = await self.entry_repo.find_by_owner_and_event(
                owner_id=owner_id, event_id=event_id
            )
            if entry is not None:
                return await self._detail(entry)
            return await self._create_with_defaults(owner_id=owner_id, event_id=event_id)

    async def _create_with_defaults(self, *, owner_id: str, event_id: str) -> CalendarEntryDetail:
        event = await self.event_catalog.get_event(event_id)
        now = self.clock.now()
        entry = CalendarEntry.snapshot(
            id=uuid_utils.uuid7(), owner_id=owner_id, event=event, added_at=now
        )
        await self.entry_repo.upsert(entry)

        reminders: List[Reminder] = []
        for minutes_before in self.default_offsets_minutes:
            fire_at = Reminder.fire_time(start=entry.start, minutes_before=minutes_before)
            if fire_at <= now:
                continue
            reminders.append(
                await self.reminder_repo.upsert(
                    self._new_reminder(entry=entry, minutes_before=minutes_before)
                )
            )

        Logger.base.info(
            f'📅 [CALENDAR] {owner_id} added event {event_id} '
            f'with {len(reminders)} default reminder(s)'
        )
        return CalendarEntryDetail(entry=entry, reminders=self._ordered(reminders))

    @Logger.io
    async def remove(self, *, owner_id: str, event_id: str) -> CalendarEntryDetail:
        """
        Delete the entry and every reminder hanging off it.

        Returns:
            The removed entry with the reminders it had

        Raises:
            NotInCalendarError: The owner does not have this event
        """
        async with self.locks.hold(('entry', owner_id, event_id)):
            entry = await self.entry_repo.find_by_owner_and_event(
                owner_id=owner_id, event_id=event_id
            )
            if entry is None:
                raise NotInCalendarError(owner_id=owner_id, event_id=event_id)
            detail = await self._detail(entry)
            await self.reminder_repo.delete_by_entry(entry_id=entry.id)
            await self.entry_repo.delete(entry.id)

        Logger.base.info(
            f'🗑️ [CALENDAR] {owner_id} removed event {event_id} '
            f'({len(detail.reminders)} reminder(s) dropped)'
        )
        return detail

    @Logger.io
    async def get_entry(self, *, owner_id: str, event_id: str) -> CalendarEntryDetail:
        entry = await self.entry_repo.find_by_owner_and_event(owner_id=owner_id, event_id=event_id)
        if entry is None:
            raise NotInCalendarError(owner_id=owner_id, event_id=event_id)
        return await self._detail(entry)

    @Logger.io
    async def list_entries(self, *, owner_id: str) -> List[CalendarEntryDetail]:
        """The owner's entries, earliest event first"""
        entries = await self.entry_repo.list_by_owner(owner_id=owner_id)
        return [
            await self._detail(entry)
            for entry in sorted(entries, key=lambda e: (e.start, e.title, e.event_id))
        ]

    # ==================== Reminders ====================

    @Logger.io
    async def add_reminder(
        self,
        *,
        owner_id: str,
        event_id: str,
        minutes_before: int,
        message: Optional[str] = None,
    ) -> Reminder:
        """
        Schedule one more reminder for an event.

        When the event is not in the calendar yet an entry is created on the
        fly, carrying only this reminder.

        Raises:
            InvalidReminderOffsetError: minutes_before <= 0
            ReminderInPastError: The reminder would fire now or earlier
            DuplicateReminderError: A pending reminder with this offset exists
            EventNotFoundError: Lazy add of an unknown event
        """
        if minutes_before <= 0:
            raise InvalidReminderOffsetError(minutes_before)

        async with self.locks.hold(('entry', owner_id, event_id)):
            entry = await self.entry_repo.find_by_owner_and_event(
                owner_id=owner_id, event_id=event_id
            )
            now = self.clock.now()
            is_new_entry = entry is None
            if entry is None:
                event = await self.event_catalog.get_event(event_id)
                entry = CalendarEntry.snapshot(
                    id=uuid_utils.uuid7(), owner_id=owner_id, event=event, added_at=now
                )

            fire_at = Reminder.fire_time(start=entry.start, minutes_before=minutes_before)
            if fire_at <= now:
                raise ReminderInPastError(fire_at=fire_at, now=now)

            if not is_new_entry:
                for existing in await self.reminder_repo.list_by_entry(entry_id=entry.id):
                    if existing.is_pending and existing.minutes_before == minutes_before:
                        raise DuplicateReminderError(
                            entry_id=entry.id, minutes_before=minutes_before
                        )
            else:
                await self.entry_repo.upsert(entry)

            reminder = await self.reminder_repo.upsert(
                self._new_reminder(entry=entry, minutes_before=minutes_before, message=message)
            )

        Logger.base.info(
            f'⏰ [REMINDER] {owner_id} scheduled {minutes_before} min before event {event_id} '
            f'(fires {reminder.fire_at.isoformat()})'
        )
        return reminder

    @Logger.io
    async def remove_reminder(self, *, reminder_id: UUID) -> Reminder:
        """
        Raises:
            ReminderNotFoundError: Unknown reminder
        """
        reminder = await self._get_reminder(reminder_id)
        async with self.locks.hold(('entry', reminder.owner_id, reminder.event_id)):
            reminder = await self._get_reminder(reminder_id)
            await self.reminder_repo.delete(reminder_id)
        return reminder

    @Logger.io
    async def list_upcoming(
        self, *, owner_id: str, now: Optional[datetime] = None
    ) -> UpcomingReminders:
        """
        Pending reminders of the owner that fire after ``now`` (the clock when omitted).

        The result can be iterated any number of times, always from the start.
        """
        reminders = await self.reminder_repo.list_by_owner(owner_id=owner_id)
        return UpcomingReminders(
            owner_id=owner_id,
            now=now if now is not None else self.clock.now(),
            reminders=tuple(reminders),
        )

    @Logger.io
    async def mark_sent(self, *, reminder_id: UUID) -> Reminder:
        """
        Record delivery. Marking an already sent reminder again is a no-op.

        Raises:
            ReminderNotFoundError: Unknown reminder
        """
        reminder = await self._get_reminder(reminder_id)
        # Same lock as the entry, so a concurrent remove cannot leave an orphan behind
        async with self.locks.hold(('entry', reminder.owner_id, reminder.event_id)):
            reminder = await self._get_reminder(reminder_id)
            if not reminder.is_pending:
                return reminder
            sent = await self.reminder_repo.upsert(reminder.mark_sent(at=self.clock.now()))
        Logger.base.info(f'📨 [REMINDER] {reminder_id} marked sent')
        return sent

    @Logger.io
    async def collect_due(self, *, now: Optional[datetime] = None) -> List[DueReminder]:
        """Pending reminders whose fire time has been reached, oldest first, with their entries"""
        now = now if now is not None else self.clock.now()
        due: List[DueReminder] = []
        for reminder in self._ordered(await self.reminder_repo.list_pending()):
            if reminder.fire_at > now:
                continue
            entry = await self.entry_repo.get(reminder.entry_id)
            if entry is None:
                continue
            due.append(DueReminder(reminder=reminder, entry=entry))
        if due:
            Logger.base.info(f'🔔 [REMINDER] {len(due)} reminder(s) due at {now.isoformat()}')
        return due

    # ==================== Helpers ====================

    async def _get_reminder(self, reminder_id: UUID) -> Reminder:
        reminder = await self.reminder_repo.get(reminder_id)
        if reminder is None:
            raise ReminderNotFoundError(reminder_id)
        return reminder

    def _new_reminder(
        self, *, entry: CalendarEntry, minutes_before: int, message: Optional[str] = None
    ) -> Reminder:
        return Reminder(
            id=uuid_utils.uuid7(),
            entry_id=entry.id,
            owner_id=entry.owner_id,
            event_id=entry.event_id,
            minutes_before=minutes_before,
            fire_at=Reminder.fire_time(start=entry.start, minutes_before=minutes_before),
            message=message
            or Reminder.default_message(title=entry.title, minutes_before=minutes_before),
        )

    async def _detail(self, entry: CalendarEntry) -> CalendarEntryDetail:
        reminders = await self.reminder_repo.list_by_entry(entry_id=entry.id)
        return CalendarEntryDetail(entry=entry, reminders=self._ordered(reminders))

    @staticmethod
    def _ordered(reminders: Sequence[Reminder]) -> tuple[Reminder, ...]:
        return tuple(sorted(reminders, key=lambda r: (r.fire_at, r.minutes_before)))
