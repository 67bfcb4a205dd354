from datetime import datetime, timedelta
from decimal import Decimal
from typing import Optional

import attrs

from src.platform.config.core_setting import settings


def _validate_non_empty_string(instance: object, attribute: attrs.Attribute, value: str) -> None:
    if not value or not value.strip():
        raise ValueError(f'Event {attribute.name} cannot be empty')


def _validate_aware(
    instance: object, attribute: attrs.Attribute, value: Optional[datetime]
) -> None:
    if value is not None and value.tzinfo is None:
        raise ValueError(f'Event {attribute.name} must be timezone-aware')


def _validate_non_negative(instance: object, attribute: attrs.Attribute, value) -> None:
    if value is not None and value < 0:
        raise ValueError(f'Event {attribute.name} cannot be negative')


@attrs.frozen
class Event:
    """
    Event metadata as published by the catalog.

    Read-only from the core's point of view: ticketing and calendar code
    query it, never change it.
    """

    id: str = attrs.field(validator=_validate_non_empty_string)
    title: str = attrs.field(validator=_validate_non_empty_string)
    start: datetime = attrs.field(validator=_validate_aware)
    location: str = ''
    capacity: int = attrs.field(default=0, validator=_validate_non_negative)
    end: Optional[datetime] = attrs.field(default=None, validator=_validate_aware)
    base_price: Optional[Decimal] = attrs.field(
        default=None,
        converter=attrs.converters.optional(Decimal),
        validator=_validate_non_negative,
    )
    description: Optional[str] = None

    @end.validator
    def _end_after_start(self, attribute: attrs.Attribute, value: Optional[datetime]) -> None:
        if value is not None and value < self.start:
            raise ValueError('Event end cannot be before its start')

    @property
    def effective_end(self) -> datetime:
        if self.end is not None:
            return self.end
        return self.start + timedelta(minutes=settings.DEFAULT_EVENT_DURATION_MINUTES)
