from typing import Iterable, List, Optional

from uuid_utils import UUID

from src.service.calendar.app.interface.i_calendar_entry_repo import ICalendarEntryRepo
from src.service.calendar.domain.entity.calendar_entry_entity import CalendarEntry
from src.service.shared_kernel.driven_adapter.in_memory_repository import InMemoryRepository


class CalendarEntryRepoInMemoryImpl(InMemoryRepository[UUID, CalendarEntry], ICalendarEntryRepo):
    def __init__(self, initial: Iterable[CalendarEntry] = ()) -> None:
        super().__init__(key_of=lambda entry: entry.id, initial=initial)

    async def find_by_owner_and_event(
        self, *, owner_id: str, event_id: str
    ) -> Optional[CalendarEntry]:
        matches = await self.list(
            where=lambda entry: entry.owner_id == owner_id and entry.event_id == event_id
        )
        return matches[0] if matches else None

    async def list_by_owner(self, *, owner_id: str) -> List[CalendarEntry]:
        return await self.list(where=lambda entry: entry.owner_id == owner_id)
