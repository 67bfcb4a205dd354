"""Purchase receipt DTO."""

from decimal import Decimal
from typing import Optional, Tuple

import attrs

from src.service.calendar.domain.value_object.calendar_entry_detail import CalendarEntryDetail
from src.service.ticketing.domain.entity.ticket_entity import Ticket
from src.service.ticketing.domain.entity.ticket_type_entity import TicketType
from src.service.ticketing.domain.value_object.issued_credential import IssuedCredential


@attrs.define(frozen=True)
class PurchaseReceipt:
    """
    Everything the buyer gets back from one purchase.

    ``tickets`` already carry their credential reference; ``calendar_entry``
    is None when the caller opted out of the calendar auto-add.
    """

    tickets: Tuple[Ticket, ...]
    total_charged: Decimal
    ticket_type: TicketType
    credentials: Tuple[IssuedCredential, ...]
    calendar_entry: Optional[CalendarEntryDetail] = None
