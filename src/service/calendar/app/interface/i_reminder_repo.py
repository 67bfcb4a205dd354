from abc import abstractmethod
from typing import List

from uuid_utils import UUID

from src.service.calendar.domain.entity.reminder_entity import Reminder
from src.service.shared_kernel.app.interface.i_repository import IRepository


class IReminderRepo(IRepository[UUID, Reminder]):
    @abstractmethod
    async def list_by_entry(self, *, entry_id: UUID) -> List[Reminder]:
        pass

    @abstractmethod
    async def list_by_owner(self, *, owner_id: str) -> List[Reminder]:
        pass

    @abstractmethod
    async def list_pending(self) -> List[Reminder]:
        pass

    @abstractmethod
    async def delete_by_entry(self, *, entry_id: UUID) -> int:
        """
        Returns:
            Number of reminders removed
        """
        pass
