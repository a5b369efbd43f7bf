"""
Future Core

A single-assignment result container with ``.then()`` continuations.

A future starts pending and settles exactly once, either fulfilled with a
value or rejected with a reason. Continuations registered with ``.then()``
always run later, through the reactor's scheduler, in registration order.
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Generic, List, Optional, TypeVar

from ..exceptions import (
    InvalidStateError,
    RejectedValueError,
    SelfResolutionError,
    TypeConstraintError,
)
from . import hooks
from .reactor import Reactor
from .state import (
    PENDING,
    Adopted,
    Fulfilled,
    FutureState,
    Latch,
    Pending,
    Rejected,
    State,
)

logger = logging.getLogger(__name__)

T = TypeVar('T')

Succeed = Callable[..., None]
Fail = Callable[..., None]
StartRoutine = Callable[[Succeed, Fail], Any]


def _noop(succeed: Succeed, fail: Fail) -> None:
    pass


class _Waiter:
    """A registered continuation and the future it feeds."""

    def __init__(self, on_success, on_failure, future: 'Future'):
        self.on_success = on_success if callable(on_success) else None
        self.on_failure = on_failure if callable(on_failure) else None
        self.future = future


class Future(Generic[T]):
    """
    Asynchronous result container.

    The start routine receives ``succeed(value)`` and ``fail(reason)``; only
    the first call to either has effect. An exception raised by the start
    routine counts as ``fail``.

    Examples:
        # Explicit chaining
        Future(lambda succeed, fail: succeed(21)).then(lambda x: x * 2)

        # Async/await
        result = await future
    """

    def __init__(self, start: StartRoutine):
        """
        Create a future and run its start routine synchronously.

        Args:
            start: Callable receiving ``(succeed, fail)``

        Raises:
            TypeConstraintError if ``start`` is not callable, or if called on
            an object that is not a Future
        """
        if not isinstance(self, Future):
            raise TypeConstraintError("Futures must be constructed via Future(...)")
        if not callable(start):
            raise TypeConstraintError(
                "Future start routine is not callable",
                detail=f"got {type(start).__name__}",
            )

        self._state: State = PENDING
        self._waiters: List[_Waiter] = []

        if start is _noop:
            return
        _do_resolve(start, self)

    def __repr__(self) -> str:
        state = _dereference(self)._state
        if isinstance(state, Fulfilled):
            return f"<{type(self).__name__} fulfilled value={state.value!r}>"
        if isinstance(state, Rejected):
            return f"<{type(self).__name__} rejected reason={state.reason!r}>"
        return f"<{type(self).__name__} pending>"

    # ------------------------------------------------------------------
    # Continuations

    def then(
        self,
        on_success: Optional[Callable[[T], Any]] = None,
        on_failure: Optional[Callable[[Any], Any]] = None,
    ) -> 'Future':
        """
        Register a continuation.

        Args:
            on_success: Called with the value; omitted means pass it through
            on_failure: Called with the reason; omitted means pass it through

        Returns:
            New future resolved with the handler's return value, or rejected
            with what the handler raised

        Example:
            future.then(lambda x: x * 2).then(lambda y: str(y))
        """
        if type(self) is not Future:
            return self._safe_then(on_success, on_failure)

        result = Future(_noop)
        _handle(self, _Waiter(on_success, on_failure, result))
        return result

    def _safe_then(self, on_success, on_failure) -> 'Future':
        """then() for subclasses: the result is built by the subclass constructor."""
        def start(succeed, fail):
            result = Future(_noop)
            result.then(succeed, fail)
            _handle(self, _Waiter(on_success, on_failure, result))

        return type(self)(start)

    def catch(self, on_failure: Callable[[Any], Any]) -> 'Future':
        """Register a failure-only continuation."""
        return self.then(None, on_failure)

    def finally_(self, callback: Callable[[], Any]) -> 'Future':
        """
        Run ``callback()`` on either outcome.

        The returned future mirrors this one once the callback's result has
        settled. If the callback raises, or returns a future that rejects,
        that failure wins.
        """
        from .combinators import rejected_with, resolved_with

        def on_success(value):
            return resolved_with(callback()).then(lambda _: value)

        def on_failure(reason):
            return resolved_with(callback()).then(lambda _: rejected_with(reason))

        return self.then(on_success, on_failure)

    # ------------------------------------------------------------------
    # Synchronous inspection

    @property
    def state(self) -> FutureState:
        """Current state, following adoption."""
        return _dereference(self)._state.tag

    def is_pending(self) -> bool:
        return isinstance(_dereference(self)._state, Pending)

    def is_fulfilled(self) -> bool:
        return isinstance(_dereference(self)._state, Fulfilled)

    def is_rejected(self) -> bool:
        return isinstance(_dereference(self)._state, Rejected)

    def get_value(self) -> T:
        """
        Get the fulfillment value.

        Raises:
            InvalidStateError if the future is not fulfilled
        """
        state = _dereference(self)._state
        if not isinstance(state, Fulfilled):
            raise InvalidStateError(f"Cannot get a value from a {state.tag.value} future")
        return state.value

    def get_reason(self) -> Any:
        """
        Get the rejection reason.

        Raises:
            InvalidStateError if the future is not rejected
        """
        state = _dereference(self)._state
        if not isinstance(state, Rejected):
            raise InvalidStateError(f"Cannot get a reason from a {state.tag.value} future")
        return state.reason

    # ------------------------------------------------------------------
    # asyncio bridge

    def __await__(self):
        """
        Make future awaitable.

        Non-exception rejection reasons are raised as RejectedValueError.
        """
        loop = asyncio.get_running_loop()
        aio_future = loop.create_future()

        def on_success(value):
            if not aio_future.done():
                aio_future.set_result(value)

        def on_failure(reason):
            if aio_future.done():
                return
            if not isinstance(reason, BaseException):
                reason = RejectedValueError(reason)
            aio_future.set_exception(reason)

        self.then(on_success, on_failure)
        return aio_future.__await__()

    @classmethod
    def from_awaitable(cls, awaitable: Awaitable[T]) -> 'Future[T]':
        """
        Wrap a coroutine or asyncio future.

        Must be called with a running event loop.
        """
        task = asyncio.ensure_future(awaitable)

        def start(succeed, fail):
            def done(completed):
                if completed.cancelled():
                    fail(asyncio.CancelledError())
                elif completed.exception() is not None:
                    fail(completed.exception())
                else:
                    succeed(completed.result())

            task.add_done_callback(done)

        return cls(start)


# ----------------------------------------------------------------------
# Resolution procedure


def _dereference(future: Future) -> Future:
    while isinstance(future._state, Adopted):
        future = future._state.target
    return future


def _handle(future: Future, waiter: _Waiter) -> None:
    future = _dereference(future)
    hooks.fire_handle(future)

    if isinstance(future._state, Pending):
        future._waiters.append(waiter)
        return

    _handle_resolved(future, waiter)


def _handle_resolved(future: Future, waiter: _Waiter) -> None:
    Reactor.schedule(lambda: _run_waiter(future, waiter))


def _run_waiter(future: Future, waiter: _Waiter) -> None:
    state = future._state
    if isinstance(state, Fulfilled):
        handler, outcome = waiter.on_success, state.value
    else:
        handler, outcome = waiter.on_failure, state.reason

    if handler is None:
        if isinstance(state, Fulfilled):
            _resolve(waiter.future, outcome)
        else:
            _reject(waiter.future, outcome)
        return

    try:
        result = handler(outcome)
    except Exception as exc:
        _reject(waiter.future, exc)
    else:
        _resolve(waiter.future, result)


def _resolve(future: Future, value: Any) -> None:
    if value is future or (isinstance(value, Future) and _dereference(value) is future):
        logger.debug("Future resolved with itself; rejecting")
        _reject(future, SelfResolutionError("A future cannot be resolved with itself"))
        return

    try:
        then = getattr(value, 'then', None)
    except Exception as exc:
        _reject(future, exc)
        return

    if isinstance(value, Future) and getattr(then, '__func__', None) is Future.then:
        future._state = Adopted(value)
        _finale(future)
        return

    if callable(then):
        _do_resolve(then, future)
        return

    future._state = Fulfilled(value)
    _finale(future)


def _reject(future: Future, reason: Any) -> None:
    # Rejection tracking is installed by the reactor setup
    Reactor.ensure_initialized()
    future._state = Rejected(reason)
    hooks.fire_reject(future, reason)
    _finale(future)


def _finale(future: Future) -> None:
    waiters, future._waiters = future._waiters, []
    for waiter in waiters:
        _handle(future, waiter)


def _do_resolve(start: StartRoutine, future: Future) -> None:
    """Run ``start`` so that only its first completion call takes effect."""
    latch = Latch()

    def succeed(value=None):
        if latch.trip():
            _resolve(future, value)

    def fail(reason=None):
        if latch.trip():
            _reject(future, reason)

    try:
        start(succeed, fail)
    except Exception as exc:
        if latch.trip():
            _reject(future, exc)
