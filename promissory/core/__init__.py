"""
Promissory Core

Settle-once futures with ``.then()`` continuations, the resolution
procedure, the scheduler that runs continuations, and combinators.
"""

from .future import Future
from .state import FutureState
from .reactor import Reactor
from .scheduler import AsyncioScheduler, QueueScheduler, Scheduler
from .tracking import RejectionTracker
from .combinators import (
    SettledOutcome,
    all_settled,
    race,
    rejected_with,
    resolved_with,
    when_all,
    when_any,
)

__all__ = [
    'Future',
    'FutureState',
    'Reactor',
    'Scheduler',
    'QueueScheduler',
    'AsyncioScheduler',
    'RejectionTracker',
    'SettledOutcome',
    'resolved_with',
    'rejected_with',
    'when_all',
    'when_any',
    'race',
    'all_settled',
]
