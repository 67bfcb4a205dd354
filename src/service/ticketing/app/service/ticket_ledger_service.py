"""
Ticket Ledger

Issued tickets and their lifecycle:

    CONFIRMED ──check_in──▶ USED
        │
        └──────cancel─────▶ CANCELED

USED and CANCELED are terminal. Check-in is deliberately not idempotent:
a second scan of the same ticket is an error.
"""

from datetime import datetime
from decimal import Decimal
from typing import Iterable, List, Optional

import anyio
from uuid_utils import UUID
import uuid_utils

from src.platform.config.core_setting import settings
from src.platform.logging.loguru_io import Logger
from src.platform.state.keyed_lock import KeyedLock
from src.service.shared_kernel.app.interface.i_clock import IClock
from src.service.shared_kernel.app.interface.i_event_catalog import IEventCatalog
from src.service.ticketing.app.interface.i_ticket_repo import ITicketRepo
from src.service.ticketing.app.service.ticket_inventory_service import TicketInventory
from src.service.ticketing.domain.credential_issuer import CredentialIssuer
from src.service.ticketing.domain.entity.ticket_entity import Ticket
from src.service.ticketing.domain.enum.ticket_status import TicketStatus
from src.service.ticketing.domain.ticketing_errors import (
    CredentialEventMismatchError,
    InvalidQuantityError,
    TicketNotFoundError,
)
from src.service.ticketing.domain.value_object.credential_payload import CredentialPayload
from src.service.ticketing.domain.value_object.purchase_result import PurchaseResult
from src.service.ticketing.domain.value_object.ticket_stats import (
    EventTicketStats,
    TicketTypeStats,
)


class TicketLedger:
    def __init__(
        self,
        *,
        ticket_repo: ITicketRepo,
        inventory: TicketInventory,
        event_catalog: IEventCatalog,
        credential_issuer: CredentialIssuer,
        clock: IClock,
        locks: Optional[KeyedLock] = None,
    ) -> None:
        self.ticket_repo = ticket_repo
        self.inventory = inventory
        self.event_catalog = event_catalog
        self.credential_issuer = credential_issuer
        self.clock = clock
        self.locks = locks or KeyedLock(name='ledger')

    @Logger.io
    async def purchase(
        self,
        *,
        event_id: str,
        owner_id: str,
        quantity: int,
        ticket_type_id: Optional[UUID] = None,
    ) -> PurchaseResult:
        """
        Reserve ``quantity`` seats and issue one confirmed ticket per seat.

        All-or-nothing: the reservation either covers the whole quantity or
        fails before any ticket exists, and a failure while storing tickets
        rolls the stored ones and the reservation back.

        Args:
            event_id: Event to buy for
            owner_id: Buyer
            quantity: Number of tickets, at least 1
            ticket_type_id: Ticket type to draw from; the event's default when None

        Returns:
            Created tickets, total charged and the updated ticket type

        Raises:
            InvalidQuantityError: quantity < 1
            EventNotFoundError: Unknown event
            UnknownTicketTypeError: Unknown ticket type or one of another event
            InsufficientInventoryError: Not enough seats left
        """
        if quantity < 1:
            raise InvalidQuantityError(quantity)

        event = await self.event_catalog.get_event(event_id)
        ticket_type = await self.inventory.resolve_for_event(
            event_id=event.id, ticket_type_id=ticket_type_id
        )

        # Owner lock first, ticket-type lock (inside reserve) second
        async with self.locks.hold(('owner', event.id, owner_id)):
            # Seat count and issued tickets change together or not at all,
            # so a caller's cancellation waits until the pair is settled
            with anyio.CancelScope(shield=True):
                reserved = await self.inventory.reserve(
                    ticket_type_id=ticket_type.id, quantity=quantity
                )
                purchased_at = self.clock.now()
                tickets: List[Ticket] = []
                try:
                    first_index = await self.ticket_repo.count_for_owner_and_event(
                        owner_id=owner_id, event_id=event.id
                    )
                    for offset in range(quantity):
                        ticket = Ticket(
                            id=uuid_utils.uuid7(),
                            event_id=event.id,
                            ticket_type_id=reserved.id,
                            owner_id=owner_id,
                            unit_price=reserved.unit_price,
                            ticket_number=await self._new_ticket_number(purchased_at),
                            purchased_at=purchased_at,
                            sequence_index=first_index + offset,
                        )
                        tickets.append(await self.ticket_repo.upsert(ticket))
                except Exception:
                    Logger.base.warning(
                        f'⚠️ [PURCHASE] Issuing failed after {len(tickets)} ticket(s), '
                        'rolling back'
                    )
                    for ticket in tickets:
                        await self.ticket_repo.delete(ticket.id)
                    await self.inventory.release(ticket_type_id=reserved.id, quantity=quantity)
                    raise

        total_charged = reserved.unit_price * quantity
        Logger.base.info(
            f'🎟️ [PURCHASE] {owner_id} bought {quantity} x "{reserved.name}" '
            f'for event {event.id}, total {total_charged}'
        )
        return PurchaseResult(
            tickets=tuple(tickets), total_charged=total_charged, ticket_type=reserved
        )

    async def _new_ticket_number(self, purchased_at: datetime) -> str:
        while True:
            suffix = uuid_utils.uuid7().hex[-8:].upper()
            ticket_number = f'{settings.TICKET_NUMBER_PREFIX}-{purchased_at:%Y%m%d}-{suffix}'
            if await self.ticket_repo.find_by_ticket_number(ticket_number=ticket_number) is None:
                return ticket_number

    @Logger.io
    async def get_ticket(self, *, ticket_id: UUID) -> Ticket:
        ticket = await self.ticket_repo.get(ticket_id)
        if ticket is None:
            raise TicketNotFoundError(ticket_id)
        return ticket

    @Logger.io
    async def check_in(self, *, ticket_id: UUID, checker_id: str) -> Ticket:
        """
        Raises:
            TicketNotFoundError: Unknown ticket
            AlreadyUsedError: Ticket was already checked in
            TicketCanceledError: Ticket was canceled
        """
        async with self.locks.hold(ticket_id):
            ticket = await self.get_ticket(ticket_id=ticket_id)
            used = ticket.check_in(checker_id=checker_id, at=self.clock.now())
            await self.ticket_repo.upsert(used)
        Logger.base.info(f'✅ [CHECK-IN] {used.ticket_number} admitted by {checker_id}')
        return used

    @Logger.io
    async def bulk_check_in(self, *, ticket_ids: Iterable[UUID], checker_id: str) -> List[Ticket]:
        """Check in every ticket that is still confirmed, skipping the rest"""
        checked_in: List[Ticket] = []
        for ticket_id in ticket_ids:
            async with self.locks.hold(ticket_id):
                ticket = await self.ticket_repo.get(ticket_id)
                if ticket is None or ticket.status is not TicketStatus.CONFIRMED:
                    Logger.base.info(f'⏭️ [CHECK-IN] Skipped {ticket_id}')
                    continue
                used = ticket.check_in(checker_id=checker_id, at=self.clock.now())
                checked_in.append(await self.ticket_repo.upsert(used))
        Logger.base.info(
            f'✅ [CHECK-IN] Bulk admitted {len(checked_in)} ticket(s) by {checker_id}'
        )
        return checked_in

    @Logger.io
    async def cancel(self, *, ticket_id: UUID, reason: Optional[str] = None) -> Ticket:
        """
        Cancel a confirmed ticket and return its seat to the pool.

        Raises:
            TicketNotFoundError: Unknown ticket
            TicketCanceledError: Already canceled
            CannotCancelUsedTicketError: Already checked in
        """
        async with self.locks.hold(ticket_id):
            ticket = await self.get_ticket(ticket_id=ticket_id)
            canceled = ticket.cancel(at=self.clock.now(), reason=reason)
            with anyio.CancelScope(shield=True):
                await self.ticket_repo.upsert(canceled)
                await self.inventory.release(ticket_type_id=canceled.ticket_type_id, quantity=1)
        Logger.base.info(
            f'🚫 [CANCEL] {canceled.ticket_number} canceled ({reason or "no reason"})'
        )
        return canceled

    @Logger.io
    async def verify_credential(
        self, *, code: str, checker_id: str, event_id: Optional[str] = None
    ) -> Ticket:
        """
        Resolve a scanned credential to its ticket and check it in.

        Args:
            code: Credential string as scanned
            checker_id: Staff member scanning
            event_id: When given, the credential must belong to this event

        Raises:
            MalformedCredentialError: The code does not parse
            CredentialEventMismatchError: Credential is for another event
            TicketNotFoundError: No ticket matches the credential
            AlreadyUsedError: Ticket was already checked in
            TicketCanceledError: Ticket was canceled
        """
        payload = self.credential_issuer.parse(code)
        if event_id is not None and payload.event_id != event_id:
            raise CredentialEventMismatchError(
                expected_event_id=event_id, actual_event_id=payload.event_id
            )

        ticket = await self.ticket_repo.find_by_credential_fields(
            event_id=payload.event_id,
            owner_id=payload.owner_id,
            sequence_index=payload.sequence_index,
        )
        if (
            ticket is None
            or CredentialPayload.to_epoch_ms(ticket.purchased_at) != payload.purchased_at_ms
        ):
            raise TicketNotFoundError(
                f'{payload.event_id}/{payload.owner_id}#{payload.sequence_index}'
            )
        return await self.check_in(ticket_id=ticket.id, checker_id=checker_id)

    @Logger.io
    async def attach_credential(self, *, ticket_id: UUID, credential: str) -> Ticket:
        """Store the credential reference once; a ticket that already has one keeps it"""
        async with self.locks.hold(ticket_id):
            ticket = await self.get_ticket(ticket_id=ticket_id)
            if ticket.credential is not None:
                return ticket
            return await self.ticket_repo.upsert(ticket.with_credential(credential))

    @Logger.io
    async def list_tickets_for_owner(self, *, owner_id: str) -> List[Ticket]:
        tickets = await self.ticket_repo.list_by_owner(owner_id=owner_id)
        return sorted(
            tickets, key=lambda t: (t.purchased_at, t.sequence_index), reverse=True
        )

    @Logger.io
    async def list_tickets_for_event(self, *, event_id: str) -> List[Ticket]:
        tickets = await self.ticket_repo.list_by_event(event_id=event_id)
        return sorted(tickets, key=lambda t: (t.purchased_at, t.owner_id, t.sequence_index))

    @Logger.io
    async def get_event_ticket_stats(self, *, event_id: str) -> EventTicketStats:
        ticket_types = await self.inventory.get_or_default_ticket_types(event_id=event_id)
        tickets = await self.ticket_repo.list_by_event(event_id=event_id)

        by_type: List[TicketTypeStats] = []
        for ticket_type in ticket_types:
            of_type = [t for t in tickets if t.ticket_type_id == ticket_type.id]
            by_type.append(
                TicketTypeStats(
                    ticket_type_id=ticket_type.id,
                    name=ticket_type.name,
                    tickets=len(of_type),
                    revenue=sum(
                        (t.unit_price for t in of_type if t.status is not TicketStatus.CANCELED),
                        start=Decimal(0),
                    ),
                    sold=ticket_type.sold,
                    available=ticket_type.available,
                )
            )

        def count(status: TicketStatus) -> int:
            return sum(1 for t in tickets if t.status is status)

        return EventTicketStats(
            event_id=event_id,
            total_tickets=len(tickets),
            total_revenue=sum((s.revenue for s in by_type), start=Decimal(0)),
            confirmed_tickets=count(TicketStatus.CONFIRMED),
            used_tickets=count(TicketStatus.USED),
            canceled_tickets=count(TicketStatus.CANCELED),
            by_ticket_type=tuple(by_type),
        )
