"""
Wire Modules Configuration

Defines the modules that need dependency injection wiring.
Shared between production and test environments.
"""

from types import ModuleType

from src.service.calendar.app.query import export_calendar_use_case
from src.service.ticketing.app.command import (
    issue_ticket_credential_use_case,
    purchase_tickets_use_case,
)


WIRE_MODULES: list[ModuleType] = [
    purchase_tickets_use_case,
    issue_ticket_credential_use_case,
    export_calendar_use_case,
]
