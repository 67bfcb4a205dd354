from decimal import Decimal
from typing import Tuple

import attrs

from src.service.ticketing.domain.entity.ticket_entity import Ticket
from src.service.ticketing.domain.entity.ticket_type_entity import TicketType


@attrs.frozen
class PurchaseResult:
    tickets: Tuple[Ticket, ...]
    total_charged: Decimal
    ticket_type: TicketType

    @property
    def quantity(self) -> int:
        return len(self.tickets)
