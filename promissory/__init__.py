"""
Promissory - Settle-Once Futures for Python

A future holds a value that is not known yet. It settles exactly once,
fulfilled or rejected, and any number of continuations registered with
``.then()`` run afterwards, always asynchronously and in order.

Features:
- Resolution procedure with adoption of other futures and foreign thenables
- Combinators: when_all, when_any, race, all_settled
- Pluggable FIFO scheduler (asyncio-driven or drained by hand)
- async/await interop
- Instrumentation hooks and unhandled-rejection tracking
"""

from .config import Settings, get_settings
from .core import (
    AsyncioScheduler,
    Future,
    FutureState,
    QueueScheduler,
    Reactor,
    RejectionTracker,
    Scheduler,
    SettledOutcome,
    all_settled,
    race,
    rejected_with,
    resolved_with,
    when_all,
    when_any,
)
from .core import hooks
from .core.combinators import filter_all, map_all, reduce_all
from .exceptions import (
    AggregateError,
    InvalidStateError,
    PromissoryError,
    RejectedValueError,
    SelfResolutionError,
    TypeConstraintError,
)

__version__ = "0.1.0"

__all__ = [
    'Future',
    'FutureState',
    'Reactor',
    'Scheduler',
    'QueueScheduler',
    'AsyncioScheduler',
    'RejectionTracker',
    'SettledOutcome',
    'Settings',
    'get_settings',
    'hooks',
    'resolved_with',
    'rejected_with',
    'when_all',
    'when_any',
    'race',
    'all_settled',
    'map_all',
    'filter_all',
    'reduce_all',
    'PromissoryError',
    'TypeConstraintError',
    'SelfResolutionError',
    'InvalidStateError',
    'AggregateError',
    'RejectedValueError',
]
