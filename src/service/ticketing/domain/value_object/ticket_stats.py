from decimal import Decimal
from typing import Tuple

import attrs
from uuid_utils import UUID


@attrs.frozen
class TicketTypeStats:
    ticket_type_id: UUID
    name: str
    tickets: int
    revenue: Decimal
    sold: int
    available: int

    @property
    def remaining(self) -> int:
        return self.available - self.sold


@attrs.frozen
class EventTicketStats:
    """
    Per-event ticket counters.

    ``total_tickets`` counts every issued ticket, canceled ones included;
    ``total_revenue`` only sums tickets that still hold a seat
    (confirmed or used).
    """

    event_id: str
    total_tickets: int
    total_revenue: Decimal
    confirmed_tickets: int
    used_tickets: int
    canceled_tickets: int
    by_ticket_type: Tuple[TicketTypeStats, ...] = ()
