from typing import Iterable, List

from uuid_utils import UUID

from src.service.calendar.app.interface.i_reminder_repo import IReminderRepo
from src.service.calendar.domain.entity.reminder_entity import Reminder
from src.service.shared_kernel.driven_adapter.in_memory_repository import InMemoryRepository


class ReminderRepoInMemoryImpl(InMemoryRepository[UUID, Reminder], IReminderRepo):
    def __init__(self, initial: Iterable[Reminder] = ()) -> None:
        super().__init__(key_of=lambda reminder: reminder.id, initial=initial)

    async def list_by_entry(self, *, entry_id: UUID) -> List[Reminder]:
        return await self.list(where=lambda reminder: reminder.entry_id == entry_id)

    async def list_by_owner(self, *, owner_id: str) -> List[Reminder]:
        return await self.list(where=lambda reminder: reminder.owner_id == owner_id)

    async def list_pending(self) -> List[Reminder]:
        return await self.list(where=lambda reminder: reminder.is_pending)

    async def delete_by_entry(self, *, entry_id: UUID) -> int:
        removed = 0
        for reminder in await self.list_by_entry(entry_id=entry_id):
            removed += await self.delete(reminder.id)
        return removed
