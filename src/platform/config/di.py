"""
https://python-dependency-injector.ets-labs.org/index.html
"""

from dependency_injector import containers, providers

from src.platform.config.core_setting import Settings
from src.platform.observability.tracing import TracingConfig
from src.platform.state.keyed_lock import KeyedLock
from src.service.calendar.app.service.calendar_exporter_service import CalendarExporter
from src.service.calendar.app.service.calendar_planner_service import CalendarPlanner
from src.service.calendar.driven_adapter.repo.calendar_entry_repo_in_memory_impl import (
    CalendarEntryRepoInMemoryImpl,
)
from src.service.calendar.driven_adapter.repo.reminder_repo_in_memory_impl import (
    ReminderRepoInMemoryImpl,
)
from src.service.shared_kernel.driven_adapter.in_memory_event_catalog import InMemoryEventCatalog
from src.service.shared_kernel.driven_adapter.system_clock import SystemClock
from src.service.ticketing.app.service.ticket_inventory_service import TicketInventory
from src.service.ticketing.app.service.ticket_ledger_service import TicketLedger
from src.service.ticketing.domain.credential_issuer import CredentialIssuer
from src.service.ticketing.driven_adapter.payment.mock_payment_authorizer_impl import (
    MockPaymentAuthorizerImpl,
)
from src.service.ticketing.driven_adapter.repo.ticket_repo_in_memory_impl import (
    TicketRepoInMemoryImpl,
)
from src.service.ticketing.driven_adapter.repo.ticket_type_repo_in_memory_impl import (
    TicketTypeRepoInMemoryImpl,
)


class Container(containers.DeclarativeContainer):
    # Configuration
    config_service = providers.Singleton(Settings)

    # Observability
    tracing = providers.Singleton(TracingConfig, service_name=config_service.provided.PROJECT_NAME)

    # Infrastructure
    clock = providers.Singleton(SystemClock)
    event_catalog = providers.Singleton(InMemoryEventCatalog)
    payment_authorizer = providers.Singleton(MockPaymentAuthorizerImpl)

    # Repositories (single-process in-memory store; swap for durable adapters here)
    ticket_type_repo = providers.Singleton(TicketTypeRepoInMemoryImpl)
    ticket_repo = providers.Singleton(TicketRepoInMemoryImpl)
    calendar_entry_repo = providers.Singleton(CalendarEntryRepoInMemoryImpl)
    reminder_repo = providers.Singleton(ReminderRepoInMemoryImpl)

    # Per-key critical sections, one table per context
    inventory_locks = providers.Singleton(KeyedLock, name='inventory')
    ledger_locks = providers.Singleton(KeyedLock, name='ledger')
    calendar_locks = providers.Singleton(KeyedLock, name='calendar')

    # Ticketing
    credential_issuer = providers.Singleton(
        CredentialIssuer,
        scheme_version=config_service.provided.CREDENTIAL_SCHEME_VERSION,
        render_base_url=config_service.provided.QR_RENDER_BASE_URL,
        render_size=config_service.provided.QR_RENDER_SIZE,
    )
    ticket_inventory = providers.Singleton(
        TicketInventory,
        ticket_type_repo=ticket_type_repo,
        event_catalog=event_catalog,
        clock=clock,
        locks=inventory_locks,
    )
    ticket_ledger = providers.Singleton(
        TicketLedger,
        ticket_repo=ticket_repo,
        inventory=ticket_inventory,
        event_catalog=event_catalog,
        credential_issuer=credential_issuer,
        clock=clock,
        locks=ledger_locks,
    )

    # Calendar
    calendar_planner = providers.Singleton(
        CalendarPlanner,
        entry_repo=calendar_entry_repo,
        reminder_repo=reminder_repo,
        event_catalog=event_catalog,
        clock=clock,
        default_offsets_minutes=config_service.provided.DEFAULT_REMINDER_OFFSETS_MINUTES,
        locks=calendar_locks,
    )
    calendar_exporter = providers.Singleton(
        CalendarExporter,
        clock=clock,
        uid_domain=config_service.provided.CALENDAR_UID_DOMAIN,
        prodid=config_service.provided.CALENDAR_PRODID,
    )


container = Container()


def setup() -> None:
    from src.platform.config.wire_modules import WIRE_MODULES

    config = container.config_service()
    if config.TRACING_ENABLED:
        container.tracing().setup()
    container.wire(modules=WIRE_MODULES)


def cleanup() -> None:
    container.unwire()
    if container.config_service().TRACING_ENABLED:
        container.tracing().shutdown()
    container.reset_singletons()
