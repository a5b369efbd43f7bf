"""
Continuation Schedulers

FIFO task queues that run future continuations after the current call
stack has unwound.
"""

import asyncio
import logging
from collections import deque
from typing import Callable, Deque, Optional, Protocol, runtime_checkable

logger = logging.getLogger(__name__)

Callback = Callable[[], None]


@runtime_checkable
class Scheduler(Protocol):
    """Anything that can run a callback later, in FIFO order."""

    def schedule(self, callback: Callback) -> None:
        ...


class QueueScheduler:
    """
    Deterministic FIFO scheduler.

    Callbacks accumulate until ``run_until_idle()`` drains them. Callbacks
    queued during a drain run in that same drain, after everything queued
    before them.

    Example:
        scheduler = QueueScheduler()
        scheduler.schedule(lambda: print("later"))
        scheduler.run_until_idle()
    """

    def __init__(self):
        self._queue: Deque[Callback] = deque()
        self._draining = False

    def __len__(self) -> int:
        return len(self._queue)

    def schedule(self, callback: Callback) -> None:
        """Enqueue a callback."""
        self._queue.append(callback)
        self._request_flush()

    def _request_flush(self) -> None:
        """Hook for subclasses that drain on their own."""

    def run_until_idle(self) -> int:
        """
        Run queued callbacks until the queue is empty.

        Returns:
            Number of callbacks run (0 when called re-entrantly)
        """
        if self._draining:
            return 0

        self._draining = True
        ran = 0
        try:
            while self._queue:
                callback = self._queue.popleft()
                ran += 1
                try:
                    callback()
                except Exception:
                    logger.exception(f"Scheduled callback {callback!r} raised")
        finally:
            self._draining = False
        return ran

    def clear(self) -> int:
        """Drop every queued callback. Returns how many were dropped."""
        dropped = len(self._queue)
        self._queue.clear()
        return dropped


class AsyncioScheduler(QueueScheduler):
    """
    FIFO scheduler flushed by an asyncio event loop.

    Whenever a callback is queued while a loop is running (or a loop was
    bound at construction), one flush is requested via ``loop.call_soon``.
    Without a loop, callbacks wait for an explicit ``run_until_idle()``.
    """

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        super().__init__()
        self._loop = loop
        self._flush_loop: Optional[asyncio.AbstractEventLoop] = None

    def _current_loop(self) -> Optional[asyncio.AbstractEventLoop]:
        try:
            return asyncio.get_running_loop()
        except RuntimeError:
            return self._loop

    def _request_flush(self) -> None:
        if self._draining:
            return

        loop = self._current_loop()
        if loop is None or loop.is_closed():
            return

        # One pending flush per loop; a stale request on a closed loop is replaced
        pending = self._flush_loop
        if pending is loop and not pending.is_closed():
            return

        self._flush_loop = loop
        loop.call_soon(self._flush)

    def _flush(self) -> None:
        self._flush_loop = None
        self.run_until_idle()
