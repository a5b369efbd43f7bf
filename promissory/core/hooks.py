"""
Global instrumentation hooks.

Two optional process-wide callbacks, invoked synchronously:

- on_handle(future): a continuation is being registered on ``future``
  (after following adoption), i.e. its outcome is observed.
- on_reject(future, reason): ``future`` just settled as rejected.

Hooks are purely observational. An exception raised by a hook is logged
and never changes how a future resolves.
"""

import logging
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)

HandleHook = Callable[[Any], None]
RejectHook = Callable[[Any, Any], None]

_on_handle: Optional[HandleHook] = None
_on_reject: Optional[RejectHook] = None


def set_on_handle(hook: HandleHook) -> None:
    global _on_handle
    _on_handle = hook


def clear_on_handle() -> None:
    global _on_handle
    _on_handle = None


def set_on_reject(hook: RejectHook) -> None:
    global _on_reject
    _on_reject = hook


def clear_on_reject() -> None:
    global _on_reject
    _on_reject = None


def clear_all() -> None:
    """Remove both hooks."""
    clear_on_handle()
    clear_on_reject()


def fire_handle(future: Any) -> None:
    hook = _on_handle
    if hook is None:
        return
    try:
        hook(future)
    except Exception:
        logger.exception("on_handle hook raised")


def fire_reject(future: Any, reason: Any) -> None:
    hook = _on_reject
    if hook is None:
        return
    try:
        hook(future, reason)
    except Exception:
        logger.exception("on_reject hook raised")
