"""Extension points fired around a preview session."""

from __future__ import annotations

from itertools import count
from typing import Callable, Dict, Optional

PRE_START = "preview.start"
POST_END = "preview.end"

HookCallback = Callable[[object], None]


class PreviewHooks:
    """Named callbacks per extension point, run in registration order."""

    def __init__(self) -> None:
        self._callbacks: Dict[str, Dict[str, HookCallback]] = {
            PRE_START: {},
            POST_END: {},
        }
        self._ids = count(1)

    def register(
        self, event: str, callback: HookCallback, *, name: Optional[str] = None
    ) -> str:
        bucket = self._bucket(event)
        key = name or f"{event}#{next(self._ids)}"
        bucket[key] = callback
        return key

    def unregister(self, event: str, name: str) -> bool:
        return self._bucket(event).pop(name, None) is not None

    def callbacks(self, event: str) -> tuple[HookCallback, ...]:
        return tuple(self._bucket(event).values())

    def emit(self, event: str, payload: object | None = None) -> None:
        for callback in self.callbacks(event):
            callback(payload)

    def _bucket(self, event: str) -> Dict[str, HookCallback]:
        try:
            return self._callbacks[event]
        except KeyError as exc:
            raise KeyError(f"Unknown preview hook '{event}'") from exc


__all__ = ["POST_END", "PRE_START", "HookCallback", "PreviewHooks"]
