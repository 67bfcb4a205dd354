from typing import Iterable, List

from uuid_utils import UUID

from src.service.shared_kernel.driven_adapter.in_memory_repository import InMemoryRepository
from src.service.ticketing.app.interface.i_ticket_type_repo import ITicketTypeRepo
from src.service.ticketing.domain.entity.ticket_type_entity import TicketType


class TicketTypeRepoInMemoryImpl(InMemoryRepository[UUID, TicketType], ITicketTypeRepo):
    def __init__(self, initial: Iterable[TicketType] = ()) -> None:
        super().__init__(key_of=lambda ticket_type: ticket_type.id, initial=initial)

    async def list_by_event(self, *, event_id: str) -> List[TicketType]:
        return await self.list(where=lambda ticket_type: ticket_type.event_id == event_id)
