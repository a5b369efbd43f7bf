"""
Higher-Order Future Patterns

Utilities for composing and combining futures. Everything here is built
from ``Future(start)`` and ``.then()`` alone.
"""

from functools import partial
from typing import Any, Callable, Iterable, List, Literal, TypeVar

from pydantic import BaseModel, ConfigDict

from ..exceptions import AggregateError
from .future import Future

T = TypeVar('T')
U = TypeVar('U')


class SettledOutcome(BaseModel):
    """Outcome record produced by all_settled()."""

    model_config = ConfigDict(frozen=True)

    status: Literal["fulfilled", "rejected"]
    value: Any = None
    reason: Any = None

    @classmethod
    def fulfilled(cls, value: Any) -> 'SettledOutcome':
        return cls(status="fulfilled", value=value)

    @classmethod
    def rejected(cls, reason: Any) -> 'SettledOutcome':
        return cls(status="rejected", reason=reason)

    @property
    def ok(self) -> bool:
        return self.status == "fulfilled"


def _settled_with(value: Any) -> Future:
    return Future(lambda succeed, fail: succeed(value))


# Pre-settled futures for common scalars
_NONE = _settled_with(None)
_TRUE = _settled_with(True)
_FALSE = _settled_with(False)
_ZERO = _settled_with(0)
_EMPTY_STRING = _settled_with('')


def _memoized(value: Any):
    if value is None:
        return _NONE
    if value is True:
        return _TRUE
    if value is False:
        return _FALSE
    if type(value) is int and value == 0:
        return _ZERO
    if type(value) is str and value == '':
        return _EMPTY_STRING
    return None


def resolved_with(value: Any) -> Future:
    """
    Create a future resolved with ``value``.

    Futures are returned unchanged; foreign thenables are followed.

    Example:
        resolved_with(42).then(print)
    """
    if isinstance(value, Future):
        return value

    memoized = _memoized(value)
    if memoized is not None:
        return memoized

    return _settled_with(value)


def rejected_with(reason: Any) -> Future:
    """Create a future rejected with ``reason``, verbatim."""
    return Future(lambda succeed, fail: fail(reason))


def when_all(values: Iterable[Any]) -> Future:
    """
    Wait for all futures to fulfill.

    Args:
        values: Futures, thenables or plain values

    Returns:
        Future of the list of results in input order, rejected with the
        first rejection reason

    Example:
        when_all([fetch_user(), fetch_orders(), 3]).then(render)
    """
    items = list(values)

    def start(succeed, fail):
        if not items:
            succeed([])
            return

        results = list(items)
        remaining = len(items)

        def settle(index, value):
            nonlocal remaining
            results[index] = value
            remaining -= 1
            if remaining == 0:
                succeed(results)

        for index, item in enumerate(items):
            if isinstance(item, Future):
                item.then(partial(settle, index), fail)
                continue

            # `then` is read once; a foreign then becomes the start routine
            then = getattr(item, 'then', None)
            if callable(then):
                Future(then).then(partial(settle, index), fail)
            else:
                settle(index, item)

    return Future(start)


def race(values: Iterable[Any]) -> Future:
    """
    Settle like the first input to settle.

    Plain values count as already settled. An empty input never settles.
    """
    items = list(values)

    def start(succeed, fail):
        for item in items:
            resolved_with(item).then(succeed, fail)

    return Future(start)


def when_any(values: Iterable[Any]) -> Future:
    """
    Wait for the first future to fulfill.

    Returns:
        Future of the first fulfillment value; rejected with an
        AggregateError of every reason, in input order, once all inputs
        have rejected
    """
    items = list(values)

    def start(succeed, fail):
        if not items:
            fail(AggregateError([]))
            return

        reasons: List[Any] = [None] * len(items)
        remaining = len(items)

        def rejected(index, reason):
            nonlocal remaining
            reasons[index] = reason
            remaining -= 1
            if remaining == 0:
                fail(AggregateError(reasons))

        for index, item in enumerate(items):
            resolved_with(item).then(succeed, partial(rejected, index))

    return Future(start)


def _outcome_of(item: Any) -> Future:
    return resolved_with(item).then(SettledOutcome.fulfilled, SettledOutcome.rejected)


def all_settled(values: Iterable[Any]) -> Future:
    """
    Wait for every input to settle.

    Returns:
        Future of one SettledOutcome per input, in input order; never rejects
    """
    return when_all([_outcome_of(item) for item in values])


def map_all(func: Callable[[T], U], values: Iterable[Any]) -> Future:
    """
    Map a function over future results.

    Example:
        prices = map_all(lambda item: item.price, [get_item(id) for id in ids])
    """
    return when_all(values).then(lambda results: [func(r) for r in results])


def filter_all(predicate: Callable[[T], bool], values: Iterable[Any]) -> Future:
    """Filter future results by predicate."""
    return when_all(values).then(lambda results: [r for r in results if predicate(r)])


def reduce_all(func: Callable[[U, T], U], values: Iterable[Any], initial: U) -> Future:
    """
    Reduce future results.

    Args:
        func: Reduction function
        values: Futures or plain values
        initial: Initial accumulator value
    """
    def reduce(results):
        accumulator = initial
        for result in results:
            accumulator = func(accumulator, result)
        return accumulator

    return when_all(values).then(reduce)
