"""
Ticketing Domain Errors

One class per failure kind. Every class exposes ``kind`` so callers can
branch on a stable name instead of the message text.
"""

from decimal import Decimal
from typing import Optional

from uuid_utils import UUID

from src.platform.exception.exceptions import ConflictError, DomainError, NotFoundError
from src.service.shared_kernel.domain.enum.error_kind import ErrorKind


class UnknownTicketTypeError(NotFoundError):
    kind = ErrorKind.UNKNOWN_TICKET_TYPE

    def __init__(self, ticket_type_id: UUID | str, *, event_id: Optional[str] = None) -> None:
        if event_id is None:
            super().__init__(f'Unknown ticket type: {ticket_type_id}')
        else:
            super().__init__(f'Unknown ticket type {ticket_type_id} for event {event_id}')
        self.ticket_type_id = ticket_type_id
        self.event_id = event_id


class InsufficientInventoryError(ConflictError):
    kind = ErrorKind.INSUFFICIENT_INVENTORY

    def __init__(self, ticket_type_id: UUID, *, requested: int, remaining: int) -> None:
        super().__init__(
            f'Insufficient inventory for ticket type {ticket_type_id}: '
            f'requested {requested}, remaining {remaining}'
        )
        self.ticket_type_id = ticket_type_id
        self.requested = requested
        self.remaining = remaining


class InvalidQuantityError(DomainError):
    kind = ErrorKind.INVALID_QUANTITY

    def __init__(self, quantity: int) -> None:
        super().__init__(f'Quantity must be at least 1, got {quantity}')
        self.quantity = quantity


class PaymentDeclinedError(DomainError):
    kind = ErrorKind.PAYMENT_DECLINED

    def __init__(self, *, payer_id: str, amount: Decimal) -> None:
        super().__init__(f'Payment of {amount} declined for {payer_id}', 402)
        self.payer_id = payer_id
        self.amount = amount


class TicketNotFoundError(NotFoundError):
    kind = ErrorKind.TICKET_NOT_FOUND

    def __init__(self, ticket_ref: UUID | str) -> None:
        super().__init__(f'Ticket not found: {ticket_ref}')
        self.ticket_ref = ticket_ref


class AlreadyUsedError(ConflictError):
    kind = ErrorKind.ALREADY_USED

    def __init__(self, ticket_id: UUID) -> None:
        super().__init__(f'Ticket {ticket_id} has already been used')
        self.ticket_id = ticket_id


class TicketCanceledError(ConflictError):
    kind = ErrorKind.TICKET_CANCELED

    def __init__(self, ticket_id: UUID) -> None:
        super().__init__(f'Ticket {ticket_id} is canceled')
        self.ticket_id = ticket_id


class CannotCancelUsedTicketError(ConflictError):
    kind = ErrorKind.CANNOT_CANCEL_USED_TICKET

    def __init__(self, ticket_id: UUID) -> None:
        super().__init__(f'Cannot cancel ticket {ticket_id}: it has already been used')
        self.ticket_id = ticket_id


class MalformedCredentialError(DomainError):
    kind = ErrorKind.MALFORMED_CREDENTIAL

    def __init__(self, reason: str) -> None:
        super().__init__(f'Malformed credential: {reason}')
        self.reason = reason


class CredentialEventMismatchError(DomainError):
    kind = ErrorKind.CREDENTIAL_EVENT_MISMATCH

    def __init__(self, *, expected_event_id: str, actual_event_id: str) -> None:
        super().__init__(
            f'Ticket does not belong to this event: expected {expected_event_id}, '
            f'credential is for {actual_event_id}'
        )
        self.expected_event_id = expected_event_id
        self.actual_event_id = actual_event_id
