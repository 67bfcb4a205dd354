"""Shared Kernel Interfaces"""

from src.service.shared_kernel.app.interface.i_clock import IClock
from src.service.shared_kernel.app.interface.i_event_catalog import IEventCatalog
from src.service.shared_kernel.app.interface.i_repository import IRepository

__all__ = ['IClock', 'IEventCatalog', 'IRepository']
