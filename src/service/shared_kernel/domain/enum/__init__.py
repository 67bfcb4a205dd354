"""Shared Kernel Enums"""

from src.service.shared_kernel.domain.enum.error_kind import ErrorKind

__all__ = ['ErrorKind']
