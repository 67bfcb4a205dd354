"""
Unit tests for CalendarExporter

Test Coverage:
1. Document layout (container, one block per entry, field order, UTC timestamps)
2. Round trip: export -> parse recovers (start, end, summary, location) to the second
3. Parser rejects broken documents
4. Filename suggestion
"""

from datetime import datetime, timedelta, timezone

import pytest

from src.service.calendar.app.service.calendar_exporter_service import (
    CalendarExporter,
    format_timestamp,
)
from src.service.calendar.domain.calendar_errors import MalformedCalendarError
from src.service.shared_kernel.domain.entity.event_entity import Event


pytestmark = pytest.mark.unit


def make_event(**overrides) -> Event:
    fields = dict(
        id='E9',
        title='Harbour Lights',
        start=datetime(2026, 7, 4, 21, 30, 15, 987654, tzinfo=timezone(timedelta(hours=2))),
        end=datetime(2026, 7, 4, 23, 0, 0, 500, tzinfo=timezone(timedelta(hours=2))),
        location='Pier 4',
        capacity=300,
        description='Bring a jacket',
    )
    fields.update(overrides)
    return Event(**fields)


class TestExportOne:
    def test_document_layout(self, exporter, clock):
        text = exporter.export_one(make_event())

        assert text.endswith('\r\n')
        lines = text.rstrip('\r\n').split('\r\n')
        assert lines == [
            'BEGIN:VCALENDAR',
            'VERSION:2.0',
            'PRODID:-//Ticket Issuance Core//Test//EN',
            'BEGIN:VEVENT',
            'UID:E9@tickets.test',
            f'DTSTAMP:{format_timestamp(clock.now())}',
            'DTSTART:20260704T193015Z',
            'DTEND:20260704T210000Z',
            'SUMMARY:Harbour Lights',
            'DESCRIPTION:Bring a jacket',
            'LOCATION:Pier 4',
            'STATUS:CONFIRMED',
            'END:VEVENT',
            'END:VCALENDAR',
        ]

    def test_description_is_optional(self, exporter):
        text = exporter.export_one(make_event(description=None))

        assert 'DESCRIPTION' not in text

    def test_missing_end_uses_default_duration(self, exporter):
        event = make_event(end=None)

        (parsed,) = exporter.parse_calendar(exporter.export_one(event))

        assert parsed.end - parsed.start == timedelta(hours=1)

    @pytest.mark.parametrize(
        'title,location',
        [
            ('Harbour Lights', 'Pier 4'),
            ('Café: late show', 'Room 1; upstairs'),
            ('Multi\nline title', ''),
        ],
    )
    def test_round_trip_recovers_event_fields(self, exporter, title, location):
        event = make_event(title=title, location=location)

        (parsed,) = exporter.parse_calendar(exporter.export_one(event))

        assert parsed.start == event.start.replace(microsecond=0)
        assert parsed.end == event.end.replace(microsecond=0)
        assert parsed.summary == title
        assert parsed.location == location
        assert parsed.uid == 'E9@tickets.test'
        assert parsed.description == 'Bring a jacket'

    @pytest.mark.parametrize(
        'separator', ['\x0b', '\x0c', '\x1c', '\x1d', '\x1e', '\x85', '\u2028', '\u2029', '\r']
    )
    def test_round_trip_keeps_non_newline_separators(self, exporter, separator):
        title = f'Rock{separator}Roll'
        location = f'Hall{separator}A'
        event = make_event(title=title, location=location)

        (parsed,) = exporter.parse_calendar(exporter.export_one(event))

        assert (parsed.summary, parsed.location) == (title, location)
        assert parsed.start == event.start.replace(microsecond=0)
        assert parsed.end == event.end.replace(microsecond=0)

    def test_explicit_empty_settings_are_kept(self, clock):
        exporter = CalendarExporter(clock=clock, uid_domain='', prodid='')

        text = exporter.export_one(make_event())

        assert 'UID:E9@\r\n' in text
        assert 'PRODID:\r\n' in text


class TestExportAll:
    @pytest.mark.asyncio
    async def test_one_container_many_events(self, exporter, planner):
        first = await planner.add(owner_id='U1', event_id='E1')
        second = await planner.add(owner_id='U1', event_id='E2')

        text = exporter.export_all(await planner.list_entries(owner_id='U1'))

        assert text.count('BEGIN:VCALENDAR') == 1
        assert text.count('BEGIN:VEVENT') == 2
        parsed = exporter.parse_calendar(text)
        assert [p.uid for p in parsed] == [
            f'{first.entry.id}@tickets.test',
            f'{second.entry.id}@tickets.test',
        ]
        assert [p.summary for p in parsed] == ['Jazz Night', 'Open Air Cinema']
        assert parsed[0].start == first.entry.start
        assert parsed[0].location == 'Blue Room'

    def test_empty_calendar_is_still_a_document(self, exporter):
        text = exporter.export_all([])

        assert exporter.parse_calendar(text) == []


class TestParseCalendar:
    @pytest.mark.parametrize(
        'text',
        [
            '',
            'BEGIN:VEVENT\r\nEND:VEVENT\r\n',
            'BEGIN:VCALENDAR\r\nBEGIN:VEVENT\r\nUID:x\r\n',
            'BEGIN:VCALENDAR\r\nBEGIN:VEVENT\r\nUID:x\r\nEND:VCALENDAR\r\n',
            'BEGIN:VCALENDAR\r\nEND:VEVENT\r\nEND:VCALENDAR\r\n',
            'BEGIN:VCALENDAR\r\nBEGIN:VEVENT\r\nUID:x\r\nDTSTART:20260101T000000Z\r\n'
            'DTEND:20260101T010000Z\r\nEND:VEVENT\r\nEND:VCALENDAR\r\n',
            'BEGIN:VCALENDAR\r\nBEGIN:VEVENT\r\nUID:x\r\nDTSTART:tomorrow\r\n'
            'DTEND:20260101T010000Z\r\nSUMMARY:s\r\nEND:VEVENT\r\nEND:VCALENDAR\r\n',
        ],
    )
    def test_broken_documents(self, text):
        with pytest.raises(MalformedCalendarError):
            CalendarExporter.parse_calendar(text)

    def test_accepts_bare_newlines(self):
        text = (
            'BEGIN:VCALENDAR\nVERSION:2.0\nBEGIN:VEVENT\nUID:a@b\n'
            'DTSTART:20260101T100000Z\nDTEND:20260101T110000Z\nSUMMARY:New Year Brunch\n'
            'END:VEVENT\nEND:VCALENDAR\n'
        )

        (parsed,) = CalendarExporter.parse_calendar(text)

        assert parsed.start == datetime(2026, 1, 1, 10, tzinfo=timezone.utc)
        assert parsed.location == ''
        assert parsed.created_at is None


class TestSuggestFilename:
    @pytest.mark.parametrize(
        'title,expected',
        [
            ('Jazz Night', 'Jazz-Night.ics'),
            ('  Open   Air Cinema ', 'Open-Air-Cinema.ics'),
            ('AC/DC Tribute', 'AC-DC-Tribute.ics'),
            ('', 'event.ics'),
        ],
    )
    def test_suggest_filename(self, title, expected):
        assert CalendarExporter.suggest_filename(title) == expected
