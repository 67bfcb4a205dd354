from decimal import Decimal
from typing import List, Optional, Self

from dependency_injector.wiring import Provide, inject
from opentelemetry import trace
from uuid_utils import UUID

from src.platform.config.di import Container
from src.platform.logging.loguru_io import Logger
from src.service.calendar.app.service.calendar_planner_service import CalendarPlanner
from src.service.shared_kernel.app.interface.i_event_catalog import IEventCatalog
from src.service.ticketing.app.dto.purchase_receipt import PurchaseReceipt
from src.service.ticketing.app.interface.i_payment_authorizer import IPaymentAuthorizer
from src.service.ticketing.app.service.ticket_inventory_service import TicketInventory
from src.service.ticketing.app.service.ticket_ledger_service import TicketLedger
from src.service.ticketing.domain.credential_issuer import CredentialIssuer
from src.service.ticketing.domain.entity.ticket_entity import Ticket
from src.service.ticketing.domain.ticketing_errors import (
    InsufficientInventoryError,
    InvalidQuantityError,
    PaymentDeclinedError,
)
from src.service.ticketing.domain.value_object.issued_credential import IssuedCredential


class PurchaseTicketsUseCase:
    """
    Purchase tickets use case

    Flow:
    1. Validate quantity, event and ticket type (Fail Fast)
    2. Authorize payment; a decline stops here, before any seat is taken
    3. Reserve seats and issue tickets through the ledger (all-or-nothing)
    4. Issue and store one credential per ticket
    5. Optionally put the event in the buyer's calendar (an existing entry is kept)

    Dependencies:
    - payment_authorizer: Opaque pass/fail payment boundary
    - ticket_ledger / ticket_inventory: Seat allocation and ticket issuance
    - credential_issuer: Scannable credential derivation
    - calendar_planner: Calendar auto-add
    """

    def __init__(
        self,
        *,
        event_catalog: IEventCatalog,
        payment_authorizer: IPaymentAuthorizer,
        ticket_inventory: TicketInventory,
        ticket_ledger: TicketLedger,
        credential_issuer: CredentialIssuer,
        calendar_planner: CalendarPlanner,
    ) -> None:
        self.event_catalog = event_catalog
        self.payment_authorizer = payment_authorizer
        self.ticket_inventory = ticket_inventory
        self.ticket_ledger = ticket_ledger
        self.credential_issuer = credential_issuer
        self.calendar_planner = calendar_planner
        self.tracer = trace.get_tracer(__name__)

    @classmethod
    @inject
    def depends(
        cls,
        event_catalog: IEventCatalog = Provide[Container.event_catalog],
        payment_authorizer: IPaymentAuthorizer = Provide[Container.payment_authorizer],
        ticket_inventory: TicketInventory = Provide[Container.ticket_inventory],
        ticket_ledger: TicketLedger = Provide[Container.ticket_ledger],
        credential_issuer: CredentialIssuer = Provide[Container.credential_issuer],
        calendar_planner: CalendarPlanner = Provide[Container.calendar_planner],
    ) -> Self:
        return cls(
            event_catalog=event_catalog,
            payment_authorizer=payment_authorizer,
            ticket_inventory=ticket_inventory,
            ticket_ledger=ticket_ledger,
            credential_issuer=credential_issuer,
            calendar_planner=calendar_planner,
        )

    @Logger.io
    async def purchase(
        self,
        *,
        event_id: str,
        owner_id: str,
        quantity: int,
        ticket_type_id: Optional[UUID] = None,
        add_to_calendar: bool = True,
    ) -> PurchaseReceipt:
        """
        Args:
            event_id: Event to buy for
            owner_id: Buyer, also the payer
            quantity: Number of tickets, at least 1
            ticket_type_id: Ticket type; the event's default when None
            add_to_calendar: Put the event in the buyer's calendar afterwards

        Returns:
            Tickets with credentials, total charged and the calendar entry

        Raises:
            InvalidQuantityError: quantity < 1
            EventNotFoundError: Unknown event
            UnknownTicketTypeError: Unknown ticket type or one of another event
            InsufficientInventoryError: Not enough seats left
            PaymentDeclinedError: The payment authorizer refused the charge
        """
        with self.tracer.start_as_current_span(
            'use_case.purchase_tickets',
            attributes={
                'event.id': event_id,
                'owner.id': owner_id,
                'purchase.quantity': quantity,
            },
        ):
            if quantity < 1:
                raise InvalidQuantityError(quantity)

            # Step 1: Fail Fast - nothing is charged for a purchase that cannot succeed
            event = await self.event_catalog.get_event(event_id)
            ticket_type = await self.ticket_inventory.resolve_for_event(
                event_id=event.id, ticket_type_id=ticket_type_id
            )
            if ticket_type.remaining < quantity:
                raise InsufficientInventoryError(
                    ticket_type.id, requested=quantity, remaining=ticket_type.remaining
                )

            # Step 2: Payment before reserve, so a decline never consumes inventory
            amount: Decimal = ticket_type.unit_price * quantity
            if amount > 0:
                authorized = await self.payment_authorizer.authorize(
                    amount=amount, payer_id=owner_id
                )
                if not authorized:
                    raise PaymentDeclinedError(payer_id=owner_id, amount=amount)

            # Step 3: Reserve + issue
            result = await self.ticket_ledger.purchase(
                event_id=event.id,
                owner_id=owner_id,
                quantity=quantity,
                ticket_type_id=ticket_type.id,
            )

            # Step 4: Credentials
            tickets: List[Ticket] = []
            credentials: List[IssuedCredential] = []
            for ticket in result.tickets:
                stored = await self.ticket_ledger.attach_credential(
                    ticket_id=ticket.id, credential=self.credential_issuer.issue(ticket)
                )
                tickets.append(stored)
                credentials.append(
                    IssuedCredential(
                        ticket_id=stored.id,
                        credential=stored.credential,
                        scannable_uri=self.credential_issuer.render_as_scannable(
                            stored.credential
                        ),
                    )
                )

            # Step 5: Calendar
            calendar_entry = None
            if add_to_calendar:
                calendar_entry = await self.calendar_planner.ensure_in_calendar(
                    owner_id=owner_id, event_id=event.id
                )

            Logger.base.info(
                f'🧾 [PURCHASE] {owner_id} completed purchase of {len(tickets)} ticket(s) '
                f'for event {event.id}'
            )
            return PurchaseReceipt(
                tickets=tuple(tickets),
                total_charged=result.total_charged,
                ticket_type=result.ticket_type,
                credentials=tuple(credentials),
                calendar_entry=calendar_entry,
            )
