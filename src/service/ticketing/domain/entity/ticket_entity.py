from datetime import datetime
from decimal import Decimal
from typing import Optional

import attrs
from uuid_utils import UUID

from src.service.ticketing.domain.enum.ticket_status import TicketStatus
from src.service.ticketing.domain.ticketing_errors import (
    AlreadyUsedError,
    CannotCancelUsedTicketError,
    TicketCanceledError,
)


@attrs.frozen
class Ticket:
    """
    One admission issued to one owner.

    ``unit_price`` is captured at purchase so later price changes on the
    ticket type never rewrite history. ``sequence_index`` numbers the owner's
    tickets for an event (0, 1, 2, ...) and, with ``purchased_at``, makes the
    credential of every ticket unique and re-derivable.
    """

    id: UUID
    event_id: str
    ticket_type_id: UUID
    owner_id: str
    unit_price: Decimal = attrs.field(converter=Decimal)
    ticket_number: str
    purchased_at: datetime
    sequence_index: int
    status: TicketStatus = TicketStatus.CONFIRMED
    credential: Optional[str] = None
    checked_in_at: Optional[datetime] = None
    checked_in_by: Optional[str] = None
    canceled_at: Optional[datetime] = None
    cancel_reason: Optional[str] = None

    def ensure_confirmed_for_check_in(self) -> None:
        """
        Raises:
            AlreadyUsedError: Ticket was already checked in
            TicketCanceledError: Ticket was canceled
        """
        if self.status is TicketStatus.USED:
            raise AlreadyUsedError(self.id)
        if self.status is TicketStatus.CANCELED:
            raise TicketCanceledError(self.id)

    def check_in(self, *, checker_id: str, at: datetime) -> 'Ticket':
        self.ensure_confirmed_for_check_in()
        return attrs.evolve(
            self, status=TicketStatus.USED, checked_in_at=at, checked_in_by=checker_id
        )

    def cancel(self, *, at: datetime, reason: Optional[str] = None) -> 'Ticket':
        """
        Raises:
            CannotCancelUsedTicketError: Ticket was already checked in
            TicketCanceledError: Ticket was already canceled
        """
        if self.status is TicketStatus.USED:
            raise CannotCancelUsedTicketError(self.id)
        if self.status is TicketStatus.CANCELED:
            raise TicketCanceledError(self.id)
        return attrs.evolve(
            self, status=TicketStatus.CANCELED, canceled_at=at, cancel_reason=reason
        )

    def with_credential(self, credential: str) -> 'Ticket':
        return attrs.evolve(self, credential=credential)
