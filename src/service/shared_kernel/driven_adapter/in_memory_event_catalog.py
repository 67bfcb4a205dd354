from typing import Iterable, List

from src.platform.logging.loguru_io import Logger
from src.service.shared_kernel.app.interface.i_event_catalog import IEventCatalog
from src.service.shared_kernel.domain.entity.event_entity import Event
from src.service.shared_kernel.domain.shared_errors import EventNotFoundError
from src.service.shared_kernel.driven_adapter.in_memory_repository import InMemoryRepository


class InMemoryEventCatalog(IEventCatalog):
    """Event catalog fed by ``publish``; stands in for the excluded event-management layer"""

    def __init__(self, events: Iterable[Event] = ()) -> None:
        self._events: InMemoryRepository[str, Event] = InMemoryRepository(
            key_of=lambda event: event.id, initial=events
        )

    async def publish(self, event: Event) -> Event:
        Logger.base.info(f'📅 [CATALOG] Published event {event.id} "{event.title}"')
        return await self._events.upsert(event)

    @Logger.io
    async def get_event(self, event_id: str) -> Event:
        event = await self._events.get(event_id)
        if event is None:
            raise EventNotFoundError(event_id)
        return event

    async def list_events(self) -> List[Event]:
        return sorted(await self._events.list(), key=lambda event: event.start)
