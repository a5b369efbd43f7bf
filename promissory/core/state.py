"""
Future state representation.

The stored state is a tagged union; ``Adopted`` points at another future
whose outcome this one mirrors.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Union


class FutureState(Enum):
    """Observable future states."""
    PENDING = "pending"
    FULFILLED = "fulfilled"
    REJECTED = "rejected"
    ADOPTED = "adopted"


@dataclass(frozen=True)
class Pending:
    tag = FutureState.PENDING


@dataclass(frozen=True)
class Fulfilled:
    value: Any
    tag = FutureState.FULFILLED


@dataclass(frozen=True)
class Rejected:
    reason: Any
    tag = FutureState.REJECTED


@dataclass(frozen=True)
class Adopted:
    target: Any
    tag = FutureState.ADOPTED


State = Union[Pending, Fulfilled, Rejected, Adopted]

PENDING = Pending()


class Latch:
    """One-shot guard: only the first ``trip()`` returns True."""

    def __init__(self):
        self.tripped = False

    def trip(self) -> bool:
        if self.tripped:
            return False
        self.tripped = True
        return True
