from src.platform.exception.exceptions import NotFoundError
from src.service.shared_kernel.domain.enum.error_kind import ErrorKind


class EventNotFoundError(NotFoundError):
    kind = ErrorKind.EVENT_NOT_FOUND

    def __init__(self, event_id: str) -> None:
        super().__init__(f'Event not found: {event_id}')
        self.event_id = event_id
