"""
Unhandled Rejection Tracking

Built on the instrumentation hooks: a rejected future is remembered until
a continuation is registered on it.
"""

import logging
import weakref
from typing import Any, Callable, Dict, List, Optional, Tuple

from . import hooks

logger = logging.getLogger(__name__)


class RejectionTracker:
    """
    Records rejected futures that nobody has observed yet.

    Example:
        tracker = RejectionTracker(on_unhandled=lambda f, r: alert(r))
        tracker.enable()
        ...
        Reactor.run_until_idle()
        tracker.report()
    """

    def __init__(self, on_unhandled: Optional[Callable[[Any, Any], None]] = None):
        """
        Args:
            on_unhandled: Called with (future, reason) for each reported rejection
        """
        self.on_unhandled = on_unhandled
        self._pending: Dict[Any, Any] = {}
        # Only futures someone still holds can be handled late
        self._reported: "weakref.WeakKeyDictionary[Any, Any]" = weakref.WeakKeyDictionary()
        self.stats = {
            'rejections': 0,
            'reported': 0,
            'handled_late': 0,
        }

    def enable(self) -> None:
        """Install this tracker as the process-wide hooks."""
        hooks.set_on_handle(self._on_handle)
        hooks.set_on_reject(self._on_reject)

    def disable(self) -> None:
        """Remove the hooks."""
        hooks.clear_all()

    def _on_reject(self, future: Any, reason: Any) -> None:
        self.stats['rejections'] += 1
        self._pending[future] = reason

    def _on_handle(self, future: Any) -> None:
        self._pending.pop(future, None)
        if future in self._reported:
            reason = self._reported.pop(future)
            self.stats['handled_late'] += 1
            logger.warning(f"Rejection handled after it was reported: {reason!r}")

    def retained(self) -> int:
        """Number of futures the tracker currently references."""
        return len(self._pending) + len(self._reported)

    def unhandled(self) -> List[Tuple[Any, Any]]:
        """(future, reason) pairs still waiting for a handler, in rejection order."""
        return list(self._pending.items())

    def report(self) -> int:
        """
        Report every currently unhandled rejection.

        Returns:
            Number of rejections reported
        """
        pending = self.unhandled()
        self._pending.clear()
        for future, reason in pending:
            self._reported[future] = reason
            self.stats['reported'] += 1
            logger.error(f"Unhandled rejection: {reason!r}")
            if self.on_unhandled is not None:
                self.on_unhandled(future, reason)
        return len(pending)
