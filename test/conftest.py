"""
Test Configuration and Fixtures

This module provides:
- Test environment variables, set before any application module reads settings
- A frozen clock so every time-dependent rule is deterministic
- In-memory wiring of the ticketing and calendar services around a small event catalog

Unit tests build on these fixtures directly; nothing here touches the network
or the file system.
"""

# =============================================================================
# Environment setup MUST happen before any application import, because
# src.platform.config.core_setting builds its Settings at import time
# =============================================================================
import os
from pathlib import Path


def _early_setup_test_environment() -> None:
    test_log_dir = Path(__file__).parent / 'test_log'
    os.environ['TEST_LOG_DIR'] = str(test_log_dir)
    os.environ.setdefault('LOG_TO_FILE', 'false')
    os.environ.setdefault('TRACING_ENABLED', 'false')
    os.environ.setdefault('SERVICE_NAME', 'ticket-issuance-core-test')


_early_setup_test_environment()

from datetime import datetime, timedelta, timezone  # noqa: E402
from decimal import Decimal  # noqa: E402
from unittest.mock import AsyncMock  # noqa: E402

import pytest  # noqa: E402

from src.platform.state.keyed_lock import KeyedLock  # noqa: E402
from src.service.calendar.app.service.calendar_exporter_service import (  # noqa: E402
    CalendarExporter,
)
from src.service.calendar.app.service.calendar_planner_service import (  # noqa: E402
    CalendarPlanner,
)
from src.service.calendar.driven_adapter.repo.calendar_entry_repo_in_memory_impl import (  # noqa: E402
    CalendarEntryRepoInMemoryImpl,
)
from src.service.calendar.driven_adapter.repo.reminder_repo_in_memory_impl import (  # noqa: E402
    ReminderRepoInMemoryImpl,
)
from src.service.shared_kernel.app.interface.i_clock import IClock  # noqa: E402
from src.service.shared_kernel.domain.entity.event_entity import Event  # noqa: E402
from src.service.shared_kernel.driven_adapter.in_memory_event_catalog import (  # noqa: E402
    InMemoryEventCatalog,
)
from src.service.ticketing.app.interface.i_payment_authorizer import (  # noqa: E402
    IPaymentAuthorizer,
)
from src.service.ticketing.app.service.ticket_inventory_service import (  # noqa: E402
    TicketInventory,
)
from src.service.ticketing.app.service.ticket_ledger_service import TicketLedger  # noqa: E402
from src.service.ticketing.domain.credential_issuer import CredentialIssuer  # noqa: E402
from src.service.ticketing.driven_adapter.repo.ticket_repo_in_memory_impl import (  # noqa: E402
    TicketRepoInMemoryImpl,
)
from src.service.ticketing.driven_adapter.repo.ticket_type_repo_in_memory_impl import (  # noqa: E402
    TicketTypeRepoInMemoryImpl,
)


NOW = datetime(2026, 3, 1, 12, 0, 0, tzinfo=timezone.utc)

# Two-seat event two days out, the sold-out scenario
SMALL_EVENT_ID = 'E1'
# Large free event with no base price
BIG_EVENT_ID = 'E2'
# Starts three hours from NOW: only the two-hour reminder is still feasible
SOON_EVENT_ID = 'E3'
# Starts in thirty minutes: no default reminder is feasible
IMMINENT_EVENT_ID = 'E4'


class FrozenClock(IClock):
    """Clock that only moves when a test moves it"""

    def __init__(self, current: datetime) -> None:
        self.current = current

    def now(self) -> datetime:
        return self.current

    def advance(self, **delta: float) -> datetime:
        self.current += timedelta(**delta)
        return self.current


@pytest.fixture
def clock() -> FrozenClock:
    return FrozenClock(NOW)


@pytest.fixture
def events() -> dict[str, Event]:
    return {
        SMALL_EVENT_ID: Event(
            id=SMALL_EVENT_ID,
            title='Jazz Night',
            start=NOW + timedelta(days=2),
            end=NOW + timedelta(days=2, hours=3),
            location='Blue Room',
            capacity=2,
            base_price=Decimal('25.00'),
            description='Late set with the house trio',
        ),
        BIG_EVENT_ID: Event(
            id=BIG_EVENT_ID,
            title='Open Air Cinema',
            start=NOW + timedelta(days=10),
            location='City Park',
            capacity=100,
        ),
        SOON_EVENT_ID: Event(
            id=SOON_EVENT_ID,
            title='Lunch Talk',
            start=NOW + timedelta(hours=3),
            location='Hall B',
            capacity=50,
            base_price=Decimal('5'),
        ),
        IMMINENT_EVENT_ID: Event(
            id=IMMINENT_EVENT_ID,
            title='Doors Closing',
            start=NOW + timedelta(minutes=30),
            location='Main Stage',
            capacity=10,
        ),
    }


@pytest.fixture
def event_catalog(events: dict[str, Event]) -> InMemoryEventCatalog:
    return InMemoryEventCatalog(events.values())


@pytest.fixture
def ticket_type_repo() -> TicketTypeRepoInMemoryImpl:
    return TicketTypeRepoInMemoryImpl()


@pytest.fixture
def ticket_repo() -> TicketRepoInMemoryImpl:
    return TicketRepoInMemoryImpl()


@pytest.fixture
def entry_repo() -> CalendarEntryRepoInMemoryImpl:
    return CalendarEntryRepoInMemoryImpl()


@pytest.fixture
def reminder_repo() -> ReminderRepoInMemoryImpl:
    return ReminderRepoInMemoryImpl()


@pytest.fixture
def credential_issuer() -> CredentialIssuer:
    return CredentialIssuer(
        scheme_version='TKT1',
        render_base_url='https://qr.example.test/render',
        render_size='300x300',
    )


@pytest.fixture
def inventory(
    ticket_type_repo: TicketTypeRepoInMemoryImpl,
    event_catalog: InMemoryEventCatalog,
    clock: FrozenClock,
) -> TicketInventory:
    return TicketInventory(
        ticket_type_repo=ticket_type_repo,
        event_catalog=event_catalog,
        clock=clock,
        locks=KeyedLock(name='inventory-test'),
    )


@pytest.fixture
def ledger(
    ticket_repo: TicketRepoInMemoryImpl,
    inventory: TicketInventory,
    event_catalog: InMemoryEventCatalog,
    credential_issuer: CredentialIssuer,
    clock: FrozenClock,
) -> TicketLedger:
    return TicketLedger(
        ticket_repo=ticket_repo,
        inventory=inventory,
        event_catalog=event_catalog,
        credential_issuer=credential_issuer,
        clock=clock,
        locks=KeyedLock(name='ledger-test'),
    )


@pytest.fixture
def planner(
    entry_repo: CalendarEntryRepoInMemoryImpl,
    reminder_repo: ReminderRepoInMemoryImpl,
    event_catalog: InMemoryEventCatalog,
    clock: FrozenClock,
) -> CalendarPlanner:
    return CalendarPlanner(
        entry_repo=entry_repo,
        reminder_repo=reminder_repo,
        event_catalog=event_catalog,
        clock=clock,
        default_offsets_minutes=(1440, 120),
        locks=KeyedLock(name='calendar-test'),
    )


@pytest.fixture
def exporter(clock: FrozenClock) -> CalendarExporter:
    return CalendarExporter(
        clock=clock, uid_domain='tickets.test', prodid='-//Ticket Issuance Core//Test//EN'
    )


@pytest.fixture
def payment_authorizer() -> AsyncMock:
    authorizer = AsyncMock(spec=IPaymentAuthorizer)
    authorizer.authorize.return_value = True
    return authorizer
