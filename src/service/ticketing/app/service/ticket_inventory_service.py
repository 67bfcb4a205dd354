"""
Ticket Inventory

Owns ticket-type records and their ``sold`` counters. Every counter change
is a read-then-write inside the ticket type's lock, so concurrent
reservations on one type are serialized while other types proceed freely.
"""

from decimal import Decimal
from typing import List, Optional

from uuid_utils import UUID
import uuid_utils

from src.platform.config.core_setting import settings
from src.platform.logging.loguru_io import Logger
from src.platform.state.keyed_lock import KeyedLock
from src.service.shared_kernel.app.interface.i_clock import IClock
from src.service.shared_kernel.app.interface.i_event_catalog import IEventCatalog
from src.service.ticketing.app.interface.i_ticket_type_repo import ITicketTypeRepo
from src.service.ticketing.domain.entity.ticket_type_entity import TicketType
from src.service.ticketing.domain.ticketing_errors import UnknownTicketTypeError


class TicketInventory:
    def __init__(
        self,
        *,
        ticket_type_repo: ITicketTypeRepo,
        event_catalog: IEventCatalog,
        clock: IClock,
        locks: Optional[KeyedLock] = None,
    ) -> None:
        self.ticket_type_repo = ticket_type_repo
        self.event_catalog = event_catalog
        self.clock = clock
        self.locks = locks or KeyedLock(name='inventory')

    @Logger.io
    async def get_or_default_ticket_types(self, *, event_id: str) -> List[TicketType]:
        """
        Ticket types of an event, synthesizing a single default type on first read.

        The default is created at most once per event: the check and the
        insert run under the event's ensure-lock, and later reads find the
        stored record.

        Raises:
            EventNotFoundError: When the event has no types and the catalog does not know it
        """
        ticket_types = await self.ticket_type_repo.list_by_event(event_id=event_id)
        if ticket_types:
            return ticket_types

        async with self.locks.hold(('ensure', event_id)):
            ticket_types = await self.ticket_type_repo.list_by_event(event_id=event_id)
            if ticket_types:
                return ticket_types

            event = await self.event_catalog.get_event(event_id)
            default = TicketType(
                id=uuid_utils.uuid7(),
                event_id=event.id,
                name=settings.DEFAULT_TICKET_TYPE_NAME,
                unit_price=event.base_price if event.base_price is not None else Decimal(0),
                available=event.capacity,
                is_default=True,
                created_at=self.clock.now(),
            )
            await self.ticket_type_repo.upsert(default)
            Logger.base.info(
                f'🎫 [INVENTORY] Default ticket type created for event {event_id} '
                f'(available={default.available}, price={default.unit_price})'
            )
            return [default]

    @Logger.io
    async def create_ticket_type(
        self, *, event_id: str, name: str, unit_price: Decimal, available: int
    ) -> TicketType:
        """
        Publish a ticket type for an event.

        Raises:
            EventNotFoundError: Unknown event
            ValueError: Negative price or allocation, or empty name
        """
        if not name or not name.strip():
            raise ValueError('TicketType name cannot be empty')
        event = await self.event_catalog.get_event(event_id)
        ticket_type = TicketType(
            id=uuid_utils.uuid7(),
            event_id=event.id,
            name=name.strip(),
            unit_price=unit_price,
            available=available,
            created_at=self.clock.now(),
        )
        return await self.ticket_type_repo.upsert(ticket_type)

    @Logger.io
    async def get_ticket_type(self, *, ticket_type_id: UUID) -> TicketType:
        ticket_type = await self.ticket_type_repo.get(ticket_type_id)
        if ticket_type is None:
            raise UnknownTicketTypeError(ticket_type_id)
        return ticket_type

    @Logger.io
    async def resolve_for_event(
        self, *, event_id: str, ticket_type_id: Optional[UUID] = None
    ) -> TicketType:
        """
        Pick the ticket type a purchase draws from.

        Without an explicit id the event's first type is used (the default
        one when none were published).

        Raises:
            UnknownTicketTypeError: The id does not exist or belongs to another event
        """
        if ticket_type_id is None:
            ticket_types = await self.get_or_default_ticket_types(event_id=event_id)
            return ticket_types[0]

        ticket_type = await self.get_ticket_type(ticket_type_id=ticket_type_id)
        if ticket_type.event_id != event_id:
            raise UnknownTicketTypeError(ticket_type_id, event_id=event_id)
        return ticket_type

    @Logger.io
    async def reserve(self, *, ticket_type_id: UUID, quantity: int) -> TicketType:
        """
        Raises:
            UnknownTicketTypeError: Unknown id
            InvalidQuantityError: quantity < 1
            InsufficientInventoryError: available - sold < quantity; nothing changes
        """
        async with self.locks.hold(ticket_type_id):
            current = await self.get_ticket_type(ticket_type_id=ticket_type_id)
            updated = current.reserve(quantity)
            await self.ticket_type_repo.upsert(updated)
        Logger.base.info(
            f'📦 [INVENTORY] Reserved {quantity} of {ticket_type_id} '
            f'(sold={updated.sold}/{updated.available})'
        )
        return updated

    @Logger.io
    async def release(self, *, ticket_type_id: UUID, quantity: int) -> TicketType:
        """
        Return seats to the pool; ``sold`` is clamped at zero.

        Raises:
            UnknownTicketTypeError: Unknown id
        """
        async with self.locks.hold(ticket_type_id):
            current = await self.get_ticket_type(ticket_type_id=ticket_type_id)
            updated = current.release(quantity)
            await self.ticket_type_repo.upsert(updated)
        Logger.base.info(
            f'📦 [INVENTORY] Released {quantity} of {ticket_type_id} '
            f'(sold={updated.sold}/{updated.available})'
        )
        return updated
