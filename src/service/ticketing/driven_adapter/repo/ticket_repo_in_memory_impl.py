from typing import Iterable, List, Optional

from uuid_utils import UUID

from src.service.shared_kernel.driven_adapter.in_memory_repository import InMemoryRepository
from src.service.ticketing.app.interface.i_ticket_repo import ITicketRepo
from src.service.ticketing.domain.entity.ticket_entity import Ticket


class TicketRepoInMemoryImpl(InMemoryRepository[UUID, Ticket], ITicketRepo):
    def __init__(self, initial: Iterable[Ticket] = ()) -> None:
        super().__init__(key_of=lambda ticket: ticket.id, initial=initial)

    async def list_by_event(self, *, event_id: str) -> List[Ticket]:
        return await self.list(where=lambda ticket: ticket.event_id == event_id)

    async def list_by_owner(self, *, owner_id: str) -> List[Ticket]:
        return await self.list(where=lambda ticket: ticket.owner_id == owner_id)

    async def find_by_credential_fields(
        self, *, event_id: str, owner_id: str, sequence_index: int
    ) -> Optional[Ticket]:
        matches = await self.list(
            where=lambda ticket: ticket.event_id == event_id
            and ticket.owner_id == owner_id
            and ticket.sequence_index == sequence_index
        )
        return matches[0] if matches else None

    async def find_by_ticket_number(self, *, ticket_number: str) -> Optional[Ticket]:
        matches = await self.list(where=lambda ticket: ticket.ticket_number == ticket_number)
        return matches[0] if matches else None

    async def count_for_owner_and_event(self, *, owner_id: str, event_id: str) -> int:
        matches = await self.list(
            where=lambda ticket: ticket.owner_id == owner_id and ticket.event_id == event_id
        )
        return len(matches)
