"""Future exception hierarchy."""

from typing import Any, List, Optional


class PromissoryError(Exception):
    """Base exception for all future operations."""

    def __init__(self, message: str, detail: Optional[str] = None):
        self.message = message
        self.detail = detail
        super().__init__(message)


class TypeConstraintError(PromissoryError, TypeError):
    """Malformed API usage, reported synchronously (e.g. non-callable start routine)."""
    pass


class SelfResolutionError(PromissoryError, TypeError):
    """A future was resolved with itself."""
    pass


class InvalidStateError(PromissoryError):
    """Synchronous inspection of a future in the wrong state."""
    pass


class AggregateError(PromissoryError):
    """Every input of when_any() was rejected.

    ``errors`` holds the individual reasons in input order.
    """

    def __init__(self, errors: List[Any], message: str = "All futures were rejected"):
        self.errors = list(errors)
        super().__init__(message, detail=f"{len(self.errors)} reason(s)")


class RejectedValueError(PromissoryError):
    """A future was rejected with a reason that is not an exception."""

    def __init__(self, reason: Any):
        self.reason = reason
        super().__init__(f"Future rejected with non-exception reason: {reason!r}")
