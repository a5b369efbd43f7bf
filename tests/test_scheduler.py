"""
Tests for continuation schedulers and the Reactor.
"""

import asyncio
import logging

import pytest

from promissory import Future, Reactor, resolved_with
from promissory.config import Settings
from promissory.core.scheduler import AsyncioScheduler, QueueScheduler, Scheduler


class TestQueueScheduler:
    """Test the deterministic FIFO scheduler."""

    def test_fifo_order(self):
        """Test callbacks run in scheduling order."""
        scheduler = QueueScheduler()
        order = []
        for i in range(5):
            scheduler.schedule(lambda i=i: order.append(i))

        assert order == []
        assert scheduler.run_until_idle() == 5
        assert order == [0, 1, 2, 3, 4]

    def test_nested_schedule_runs_last(self):
        """Test callbacks queued while draining run after earlier ones."""
        scheduler = QueueScheduler()
        order = []

        def outer():
            order.append("outer")
            scheduler.schedule(lambda: order.append("nested"))

        scheduler.schedule(outer)
        scheduler.schedule(lambda: order.append("second"))
        scheduler.run_until_idle()
        assert order == ["outer", "second", "nested"]

    def test_reentrant_drain_is_noop(self):
        """Test draining from inside a callback does nothing."""
        scheduler = QueueScheduler()
        nested_runs = []
        scheduler.schedule(lambda: nested_runs.append(scheduler.run_until_idle()))
        scheduler.schedule(lambda: None)
        assert scheduler.run_until_idle() == 2
        assert nested_runs == [0]

    def test_failing_callback_is_logged(self, caplog):
        """Test a raising callback does not stop the drain."""
        scheduler = QueueScheduler()
        ran = []

        def broken():
            raise RuntimeError("callback failure")

        scheduler.schedule(broken)
        scheduler.schedule(lambda: ran.append(True))

        with caplog.at_level(logging.ERROR, logger="promissory"):
            scheduler.run_until_idle()

        assert ran == [True]
        assert "raised" in caplog.text

    def test_clear(self):
        """Test clearing drops queued callbacks."""
        scheduler = QueueScheduler()
        scheduler.schedule(lambda: None)
        scheduler.schedule(lambda: None)
        assert len(scheduler) == 2
        assert scheduler.clear() == 2
        assert scheduler.run_until_idle() == 0

    def test_satisfies_protocol(self):
        """Test both schedulers satisfy the Scheduler protocol."""
        assert isinstance(QueueScheduler(), Scheduler)
        assert isinstance(AsyncioScheduler(), Scheduler)


class TestAsyncioScheduler:
    """Test the event-loop driven scheduler."""

    def test_without_loop_waits_for_drain(self):
        """Test callbacks queue up when no loop is running."""
        scheduler = AsyncioScheduler()
        ran = []
        scheduler.schedule(lambda: ran.append(1))
        assert ran == []
        assert len(scheduler) == 1

        scheduler.run_until_idle()
        assert ran == [1]

    @pytest.mark.asyncio
    async def test_flushes_on_running_loop(self):
        """Test the running loop drains queued callbacks."""
        scheduler = AsyncioScheduler()
        ran = []
        scheduler.schedule(lambda: ran.append("first"))
        scheduler.schedule(lambda: ran.append("second"))
        assert ran == []

        await asyncio.sleep(0)
        assert ran == ["first", "second"]

    @pytest.mark.asyncio
    async def test_flush_after_manual_drain(self):
        """Test scheduling still flushes after a manual drain."""
        scheduler = AsyncioScheduler()
        ran = []
        scheduler.schedule(lambda: ran.append(1))
        scheduler.run_until_idle()
        scheduler.schedule(lambda: ran.append(2))

        await asyncio.sleep(0)
        await asyncio.sleep(0)
        assert ran == [1, 2]


class TestReactor:
    """Test reactor functionality."""

    def test_reactor_initialized(self):
        """Test the fixture leaves the reactor initialized."""
        assert Reactor.is_initialized()
        assert isinstance(Reactor.scheduler(), AsyncioScheduler)

    def test_initialize_from_settings(self):
        """Test the scheduler is chosen from settings."""
        Reactor.shutdown()
        Reactor.initialize(settings=Settings(scheduler="queue"))
        assert isinstance(Reactor.scheduler(), QueueScheduler)
        assert not isinstance(Reactor.scheduler(), AsyncioScheduler)

    def test_reinitialize_warns(self, caplog):
        """Test explicit arguments to a second initialize are ignored with a warning."""
        current = Reactor.scheduler()

        with caplog.at_level(logging.WARNING, logger="promissory"):
            Reactor.initialize(scheduler=QueueScheduler())

        assert Reactor.scheduler() is current
        assert "already initialized" in caplog.text

    def test_lazy_initialize(self):
        """Test first use initializes the reactor."""
        Reactor.shutdown()
        assert not Reactor.is_initialized()
        Reactor.scheduler()
        assert Reactor.is_initialized()

    def test_shutdown_drops_callbacks(self, caplog):
        """Test shutdown discards queued continuations with a warning."""
        calls = []
        resolved_with(1).then(calls.append)

        with caplog.at_level(logging.WARNING, logger="promissory"):
            Reactor.shutdown()

        assert not Reactor.is_initialized()
        assert "dropped 1" in caplog.text
        Reactor.run_until_idle()
        assert calls == []

    def test_run_until_idle_needs_drainable_scheduler(self):
        """Test draining a scheduler without run_until_idle fails."""
        class Forwarding:
            def __init__(self):
                self.callbacks = []

            def schedule(self, callback):
                self.callbacks.append(callback)

        Reactor.shutdown()
        Reactor.initialize(scheduler=Forwarding(), settings=Settings())
        with pytest.raises(TypeError):
            Reactor.run_until_idle()

    def test_custom_scheduler_receives_continuations(self):
        """Test continuations go through the installed scheduler."""
        scheduler = QueueScheduler()
        Reactor.shutdown()
        Reactor.initialize(scheduler=scheduler, settings=Settings())

        calls = []
        resolved_with("via custom").then(calls.append)
        assert len(scheduler) == 1

        scheduler.run_until_idle()
        assert calls == ["via custom"]

    def test_fifo_across_futures(self, drain):
        """Test continuations of different futures keep settlement order."""
        order = []
        captured = {}
        a = Future(lambda succeed, fail: captured.update(a=succeed))
        b = Future(lambda succeed, fail: captured.update(b=succeed))
        a.then(lambda _: order.append("a"))
        b.then(lambda _: order.append("b"))

        captured['b'](None)
        captured['a'](None)
        drain()
        assert order == ["b", "a"]
