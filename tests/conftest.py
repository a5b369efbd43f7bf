"""pytest configuration and fixtures for future tests."""

import pytest

from promissory import Reactor, hooks
from promissory.config import Settings
from promissory.core.scheduler import AsyncioScheduler


@pytest.fixture(autouse=True)
def reactor():
    """Install a fresh scheduler and clear hooks around every test.

    Yields:
        The Reactor class, initialized with an AsyncioScheduler.
    """
    Reactor.shutdown()
    hooks.clear_all()
    Reactor.initialize(scheduler=AsyncioScheduler(), settings=Settings())
    yield Reactor
    Reactor.shutdown()
    hooks.clear_all()


@pytest.fixture
def drain():
    """Run queued continuations until none are left."""
    return Reactor.run_until_idle
