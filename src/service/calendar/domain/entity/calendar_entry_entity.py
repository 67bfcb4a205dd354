from datetime import datetime
from typing import Optional

import attrs
from uuid_utils import UUID

from src.service.shared_kernel.domain.entity.event_entity import Event


@attrs.frozen
class CalendarEntry:
    """
    A user's personal record of an event they attend.

    Title, location and times are copied from the event when the entry is
    added, so later catalog edits do not rewrite the user's calendar.
    At most one entry exists per (owner, event).
    """

    id: UUID
    owner_id: str
    event_id: str
    title: str
    location: str
    start: datetime
    end: datetime
    description: Optional[str] = None
    added_at: Optional[datetime] = None

    @classmethod
    def snapshot(
        cls, *, id: UUID, owner_id: str, event: Event, added_at: Optional[datetime] = None
    ) -> 'CalendarEntry':
        return cls(
            id=id,
            owner_id=owner_id,
            event_id=event.id,
            title=event.title,
            location=event.location,
            start=event.start,
            end=event.effective_end,
            description=event.description,
            added_at=added_at,
        )
