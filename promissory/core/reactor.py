"""
Reactor Control

Owns the process-wide scheduler that runs future continuations.
"""

import logging
from typing import Optional

from ..config import Settings, configure_logging, get_settings
from .scheduler import AsyncioScheduler, Callback, QueueScheduler, Scheduler
from .tracking import RejectionTracker

logger = logging.getLogger(__name__)


class Reactor:
    """
    Process-wide scheduler manager.

    Every continuation registered through ``Future.then`` is queued here.
    The reactor initializes itself from ``get_settings()`` on first use.
    """

    _initialized = False
    _scheduler: Optional[Scheduler] = None
    _tracker: Optional[RejectionTracker] = None

    @classmethod
    def initialize(
        cls,
        scheduler: Optional[Scheduler] = None,
        settings: Optional[Settings] = None,
    ) -> None:
        """
        Initialize the reactor.

        Calling this again without a shutdown() first keeps the current
        setup; explicit arguments are then ignored with a warning.

        Args:
            scheduler: Scheduler to install (default: built from settings)
            settings: Settings to apply (default: read from the environment)
        """
        if cls._initialized:
            if scheduler is not None or settings is not None:
                logger.warning("Reactor already initialized; call shutdown() first to apply new arguments")
            return

        settings = settings or get_settings()
        configure_logging(settings)

        if scheduler is None:
            if settings.scheduler == "queue":
                scheduler = QueueScheduler()
            else:
                scheduler = AsyncioScheduler()

        cls._scheduler = scheduler
        if settings.track_rejections:
            cls._tracker = RejectionTracker()
            cls._tracker.enable()

        cls._initialized = True
        logger.info(f"Reactor initialized with {type(scheduler).__name__}")

    @classmethod
    def shutdown(cls) -> None:
        """Shutdown the reactor, dropping queued callbacks."""
        if not cls._initialized:
            return

        if cls._tracker is not None:
            cls._tracker.disable()
            cls._tracker = None

        clear = getattr(cls._scheduler, "clear", None)
        if clear is not None:
            dropped = clear()
            if dropped:
                logger.warning(f"Reactor shutdown dropped {dropped} queued callback(s)")

        cls._scheduler = None
        cls._initialized = False
        logger.info("Reactor shut down")

    @classmethod
    def ensure_initialized(cls) -> None:
        """Initialize from the environment unless already initialized."""
        if not cls._initialized:
            cls.initialize()

    @classmethod
    def scheduler(cls) -> Scheduler:
        """Get the active scheduler."""
        cls.ensure_initialized()
        return cls._scheduler

    @classmethod
    def tracker(cls) -> Optional[RejectionTracker]:
        """Get the rejection tracker, if tracking is enabled."""
        return cls._tracker

    @classmethod
    def schedule(cls, callback: Callback) -> None:
        """Queue a callback on the active scheduler."""
        cls.scheduler().schedule(callback)

    @classmethod
    def run_until_idle(cls) -> int:
        """
        Drain the active scheduler.

        Returns:
            Number of callbacks run

        Raises:
            TypeError if the installed scheduler cannot be drained
        """
        scheduler = cls.scheduler()
        run = getattr(scheduler, "run_until_idle", None)
        if run is None:
            raise TypeError(f"{type(scheduler).__name__} cannot be drained synchronously")
        return run()

    @classmethod
    def is_initialized(cls) -> bool:
        """Check if reactor is initialized."""
        return cls._initialized
