from abc import abstractmethod
from typing import List, Optional

from uuid_utils import UUID

from src.service.calendar.domain.entity.calendar_entry_entity import CalendarEntry
from src.service.shared_kernel.app.interface.i_repository import IRepository


class ICalendarEntryRepo(IRepository[UUID, CalendarEntry]):
    @abstractmethod
    async def find_by_owner_and_event(
        self, *, owner_id: str, event_id: str
    ) -> Optional[CalendarEntry]:
        pass

    @abstractmethod
    async def list_by_owner(self, *, owner_id: str) -> List[CalendarEntry]:
        pass
