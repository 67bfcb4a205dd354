from abc import abstractmethod
from typing import List

from uuid_utils import UUID

from src.service.shared_kernel.app.interface.i_repository import IRepository
from src.service.ticketing.domain.entity.ticket_type_entity import TicketType


class ITicketTypeRepo(IRepository[UUID, TicketType]):
    """Ticket-type store; counters are only ever written by TicketInventory"""

    @abstractmethod
    async def list_by_event(self, *, event_id: str) -> List[TicketType]:
        """
        Args:
            event_id: Owning event

        Returns:
            The event's ticket types, oldest first
        """
        pass
