"""Hook registry notified when translation runs finish or fail."""

from __future__ import annotations

import time
from dataclasses import dataclass
from threading import RLock
from types import MappingProxyType
from typing import Any, Callable, Dict, Iterable, Mapping

from . import logger

HookFn = Callable[["HookEvent"], None]

TRANSLATION_COMPLETED = "translator.run.completed"
TRANSLATION_FAILED = "translator.run.failed"
DOCUMENT_EXPORTED = "translator.document.exported"


@dataclass(frozen=True)
class HookEvent:
    """Payload passed to registered hook functions."""

    name: str
    payload: Mapping[str, Any]
    timestamp: float


class HookHandle:
    """Disposable handle returned from :func:`register_hook`."""

    def __init__(self, name: str, fn: HookFn) -> None:
        self._name = name
        self._fn = fn
        self._closed = False

    def close(self) -> None:
        if self._closed:
            return
        unregister_hook(self._name, self._fn)
        self._closed = True

    def __enter__(self) -> "HookHandle":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


_LOCK = RLock()
_HOOKS: Dict[str, list[HookFn]] = {}
_LOGGER = logger.get_logger("pfajs.telemetry.hooks")


def register_hook(name: str, fn: HookFn) -> HookHandle:
    """Register ``fn`` for ``name`` and return a disposable handle."""

    if not isinstance(name, str) or not name:
        raise ValueError("hook name must be a non-empty string")
    if not callable(fn):
        raise TypeError("hook callback must be callable")
    with _LOCK:
        _HOOKS.setdefault(name, []).append(fn)
    return HookHandle(name, fn)


def unregister_hook(name: str, fn: HookFn) -> None:
    with _LOCK:
        bucket = _HOOKS.get(name)
        if not bucket or fn not in bucket:
            return
        bucket.remove(fn)
        if not bucket:
            _HOOKS.pop(name, None)


def dispatch(name: str, payload: Mapping[str, Any] | None = None) -> int:
    """Call every hook registered for ``name``; return how many ran cleanly.

    A failing hook is logged and does not stop the others or the caller.
    """

    event = HookEvent(
        name=name,
        payload=MappingProxyType(dict(payload or {})),
        timestamp=time.time(),
    )
    callbacks: Iterable[HookFn]
    with _LOCK:
        callbacks = list(_HOOKS.get(name, ()))
    succeeded = 0
    for fn in callbacks:
        try:
            fn(event)
        except Exception:
            _LOGGER.exception("hook for %s failed", name)
            continue
        succeeded += 1
    return succeeded


def registered_hooks() -> Mapping[str, tuple[HookFn, ...]]:
    with _LOCK:
        return {name: tuple(callbacks) for name, callbacks in _HOOKS.items()}


__all__ = [
    "DOCUMENT_EXPORTED",
    "HookEvent",
    "HookFn",
    "HookHandle",
    "TRANSLATION_COMPLETED",
    "TRANSLATION_FAILED",
    "dispatch",
    "register_hook",
    "registered_hooks",
    "unregister_hook",
]
