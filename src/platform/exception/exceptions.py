from typing import ClassVar, Optional


class CustomBaseError(Exception):
    """
    Base class for every failure the core reports to its caller.

    ``@Logger.io`` logs these as a single ERROR line without a traceback.
    Subclasses set ``kind`` to a stable, transport-neutral name so callers can
    branch on it without matching class names or messages.
    """

    kind: ClassVar[Optional[str]] = None

    def __init__(self, message: str, status_code: int) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class DomainError(CustomBaseError):
    def __init__(self, message: str, status_code: int = 400) -> None:
        super().__init__(message, status_code)


class NotFoundError(CustomBaseError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 404)


class ConflictError(CustomBaseError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 409)
