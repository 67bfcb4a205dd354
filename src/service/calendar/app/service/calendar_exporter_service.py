"""
Calendar Exporter

Writes and reads the calendar interchange document:

    BEGIN:VCALENDAR
    VERSION:2.0
    PRODID:<prodid>
    BEGIN:VEVENT
    UID:<id>@<domain>
    DTSTAMP:YYYYMMDDTHHMMSSZ
    DTSTART:YYYYMMDDTHHMMSSZ
    DTEND:YYYYMMDDTHHMMSSZ
    SUMMARY:<title>
    DESCRIPTION:<description>      (only when there is one)
    LOCATION:<location>
    STATUS:CONFIRMED
    END:VEVENT
    ...
    END:VCALENDAR

Values are written as they are, without escaping; a value that contains a
line break spills onto the following lines and is read back as a
continuation of the same field. All timestamps are UTC, truncated to the
second.
"""

from datetime import datetime, timezone
import re
from typing import Dict, Iterable, List, Optional, Union

from src.platform.config.core_setting import settings
from src.platform.logging.loguru_io import Logger
from src.service.calendar.domain.calendar_errors import MalformedCalendarError
from src.service.calendar.domain.entity.calendar_entry_entity import CalendarEntry
from src.service.calendar.domain.value_object.calendar_entry_detail import CalendarEntryDetail
from src.service.calendar.domain.value_object.parsed_calendar_event import ParsedCalendarEvent
from src.service.shared_kernel.app.interface.i_clock import IClock
from src.service.shared_kernel.domain.entity.event_entity import Event


TIMESTAMP_FORMAT = '%Y%m%dT%H%M%SZ'
LINE_BREAK = '\r\n'
_LINE_SPLIT = re.compile(r'\r?\n')

_EVENT_FIELDS = (
    'UID',
    'DTSTAMP',
    'DTSTART',
    'DTEND',
    'SUMMARY',
    'DESCRIPTION',
    'LOCATION',
    'STATUS',
)


def format_timestamp(moment: datetime) -> str:
    if moment.tzinfo is None:
        raise ValueError('Calendar timestamps must be timezone-aware')
    return moment.astimezone(timezone.utc).strftime(TIMESTAMP_FORMAT)


def parse_timestamp(text: str) -> datetime:
    try:
        return datetime.strptime(text.strip(), TIMESTAMP_FORMAT).replace(tzinfo=timezone.utc)
    except ValueError as e:
        raise MalformedCalendarError(f'bad timestamp {text!r}') from e


class CalendarExporter:
    def __init__(
        self,
        *,
        clock: IClock,
        uid_domain: Optional[str] = None,
        prodid: Optional[str] = None,
    ) -> None:
        self.clock = clock
        self.uid_domain = settings.CALENDAR_UID_DOMAIN if uid_domain is None else uid_domain
        self.prodid = settings.CALENDAR_PRODID if prodid is None else prodid

    @Logger.io
    def export_one(self, event: Event) -> str:
        """Single-event document straight from catalog data, UID ``<event id>@<domain>``"""
        block = self._event_block(
            uid=f'{event.id}@{self.uid_domain}',
            start=event.start,
            end=event.effective_end,
            summary=event.title,
            location=event.location,
            description=event.description,
            stamped_at=self.clock.now(),
        )
        return self._wrap([block])

    @Logger.io
    def export_all(self, entries: Iterable[Union[CalendarEntry, CalendarEntryDetail]]) -> str:
        """One document holding every entry, UID ``<entry id>@<domain>``"""
        stamped_at = self.clock.now()
        blocks = []
        for item in entries:
            entry = item.entry if isinstance(item, CalendarEntryDetail) else item
            blocks.append(
                self._event_block(
                    uid=f'{entry.id}@{self.uid_domain}',
                    start=entry.start,
                    end=entry.end,
                    summary=entry.title,
                    location=entry.location,
                    description=entry.description,
                    stamped_at=stamped_at,
                )
            )
        return self._wrap(blocks)

    def _event_block(
        self,
        *,
        uid: str,
        start: datetime,
        end: datetime,
        summary: str,
        location: str,
        description: Optional[str],
        stamped_at: datetime,
    ) -> List[str]:
        lines = [
            'BEGIN:VEVENT',
            f'UID:{uid}',
            f'DTSTAMP:{format_timestamp(stamped_at)}',
            f'DTSTART:{format_timestamp(start)}',
            f'DTEND:{format_timestamp(end)}',
            f'SUMMARY:{summary}',
        ]
        if description:
            lines.append(f'DESCRIPTION:{description}')
        lines += [f'LOCATION:{location}', 'STATUS:CONFIRMED', 'END:VEVENT']
        return lines

    def _wrap(self, blocks: List[List[str]]) -> str:
        lines = ['BEGIN:VCALENDAR', 'VERSION:2.0', f'PRODID:{self.prodid}']
        for block in blocks:
            lines += block
        lines.append('END:VCALENDAR')
        return LINE_BREAK.join(lines) + LINE_BREAK

    @staticmethod
    def suggest_filename(title: str) -> str:
        stem = re.sub(r'[\s/\\]+', '-', title.strip())
        return f'{stem or "event"}.ics'

    @staticmethod
    @Logger.io
    def parse_calendar(text: str) -> List[ParsedCalendarEvent]:
        """
        Read a document produced by ``export_one``/``export_all`` back into its events.

        Raises:
            MalformedCalendarError: Missing container, unterminated event,
                missing required field or unreadable timestamp
        """
        # Split on the writer's line breaks only; str.splitlines also cuts on
        # control and Unicode separators that may sit inside a value
        lines = _LINE_SPLIT.split(text)
        if lines and not lines[-1]:
            lines.pop()
        if not lines or lines[0].strip() != 'BEGIN:VCALENDAR':
            raise MalformedCalendarError('missing BEGIN:VCALENDAR')
        if 'END:VCALENDAR' not in (line.strip() for line in lines):
            raise MalformedCalendarError('missing END:VCALENDAR')

        events: List[ParsedCalendarEvent] = []
        fields: Optional[Dict[str, str]] = None
        last_key: Optional[str] = None

        for line in lines[1:]:
            marker = line.strip()
            if marker == 'BEGIN:VEVENT':
                if fields is not None:
                    raise MalformedCalendarError('nested BEGIN:VEVENT')
                fields, last_key = {}, None
            elif marker == 'END:VEVENT':
                if fields is None:
                    raise MalformedCalendarError('END:VEVENT without BEGIN:VEVENT')
                events.append(CalendarExporter._to_event(fields))
                fields, last_key = None, None
            elif marker == 'END:VCALENDAR':
                break
            elif fields is not None:
                key, sep, value = line.partition(':')
                if sep and key in _EVENT_FIELDS:
                    fields[key] = value
                    last_key = key
                elif last_key is not None:
                    # Unescaped line break inside the previous value
                    fields[last_key] += '\n' + line

        if fields is not None:
            raise MalformedCalendarError('unterminated VEVENT')
        return events

    @staticmethod
    def _to_event(fields: Dict[str, str]) -> ParsedCalendarEvent:
        for required in ('UID', 'DTSTART', 'DTEND', 'SUMMARY'):
            if required not in fields:
                raise MalformedCalendarError(f'event without {required}')
        return ParsedCalendarEvent(
            uid=fields['UID'],
            start=parse_timestamp(fields['DTSTART']),
            end=parse_timestamp(fields['DTEND']),
            summary=fields['SUMMARY'],
            location=fields.get('LOCATION', ''),
            description=fields.get('DESCRIPTION'),
            created_at=parse_timestamp(fields['DTSTAMP']) if 'DTSTAMP' in fields else None,
        )
