from datetime import datetime
from decimal import Decimal

import attrs
from uuid_utils import UUID

from src.service.ticketing.domain.ticketing_errors import (
    InsufficientInventoryError,
    InvalidQuantityError,
)


def _validate_non_negative(instance: object, attribute: attrs.Attribute, value) -> None:
    if value < 0:
        raise ValueError(f'TicketType {attribute.name} cannot be negative')


@attrs.frozen
class TicketType:
    """
    Sellable allocation for one event.

    Invariant: 0 <= sold <= available. Only ``reserve`` and ``release``
    produce new counter values; name, price and event binding never change
    here.
    """

    id: UUID
    event_id: str
    name: str
    unit_price: Decimal = attrs.field(converter=Decimal, validator=_validate_non_negative)
    available: int = attrs.field(validator=_validate_non_negative)
    sold: int = attrs.field(default=0, validator=_validate_non_negative)
    is_default: bool = False
    created_at: datetime | None = None

    @sold.validator
    def _sold_within_available(self, attribute: attrs.Attribute, value: int) -> None:
        if value > self.available:
            raise ValueError(f'TicketType sold ({value}) exceeds available ({self.available})')

    @property
    def remaining(self) -> int:
        return self.available - self.sold

    def reserve(self, quantity: int) -> 'TicketType':
        """
        Raises:
            InvalidQuantityError: quantity < 1
            InsufficientInventoryError: fewer than ``quantity`` seats remain
        """
        if quantity < 1:
            raise InvalidQuantityError(quantity)
        if self.remaining < quantity:
            raise InsufficientInventoryError(
                self.id, requested=quantity, remaining=self.remaining
            )
        return attrs.evolve(self, sold=self.sold + quantity)

    def release(self, quantity: int) -> 'TicketType':
        if quantity < 1:
            raise InvalidQuantityError(quantity)
        return attrs.evolve(self, sold=max(self.sold - quantity, 0))
