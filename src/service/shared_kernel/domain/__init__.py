"""Shared Kernel Domain Layer"""

from src.service.shared_kernel.domain.entity.event_entity import Event
from src.service.shared_kernel.domain.enum.error_kind import ErrorKind
from src.service.shared_kernel.domain.shared_errors import EventNotFoundError

__all__ = ['Event', 'ErrorKind', 'EventNotFoundError']
