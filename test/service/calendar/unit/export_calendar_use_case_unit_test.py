import pytest

from src.service.calendar.app.query.export_calendar_use_case import ExportCalendarUseCase
from src.service.shared_kernel.domain.shared_errors import EventNotFoundError


pytestmark = pytest.mark.unit


@pytest.fixture
def use_case(event_catalog, planner, exporter) -> ExportCalendarUseCase:
    return ExportCalendarUseCase(
        event_catalog=event_catalog, calendar_planner=planner, calendar_exporter=exporter
    )


@pytest.mark.asyncio
async def test_export_event_names_file_after_title(use_case, exporter):
    calendar_file = await use_case.export_event(event_id='E1')

    assert calendar_file.filename == 'Jazz-Night.ics'
    assert calendar_file.media_type == 'text/calendar'
    (parsed,) = exporter.parse_calendar(calendar_file.content)
    assert parsed.uid == 'E1@tickets.test'


@pytest.mark.asyncio
async def test_export_owner_calendar(use_case, planner, exporter):
    await planner.add(owner_id='U1', event_id='E2')
    await planner.add(owner_id='U1', event_id='E1')

    calendar_file = await use_case.export_owner_calendar(owner_id='U1')

    assert calendar_file.filename == 'calendar-U1.ics'
    parsed = exporter.parse_calendar(calendar_file.content)
    # Entries are listed earliest event first
    assert [p.summary for p in parsed] == ['Jazz Night', 'Open Air Cinema']


@pytest.mark.asyncio
async def test_export_unknown_event(use_case):
    with pytest.raises(EventNotFoundError):
        await use_case.export_event(event_id='nope')
