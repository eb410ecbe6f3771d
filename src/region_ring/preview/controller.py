"""Owner of the single preview session of an interaction context."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from region_ring.commands import (
    PREVIEW_ACTIVATE,
    PREVIEW_BACKWARD,
    PREVIEW_FORWARD,
    PREVIEW_KEYMAP,
)
from region_ring.host import PreviewHost
from region_ring.regions import Region, RegionTracker
from region_ring.runtime.config import RingSettings

from .hooks import PreviewHooks
from .session import (
    CommandVerdict,
    PreviewSession,
    PreviewState,
    PreviewStateError,
    SessionAlreadyActiveError,
)

if TYPE_CHECKING:
    from region_ring.keymaps import KeymapRegistry

_HINT_LABELS = (
    (PREVIEW_BACKWARD, "older"),
    (PREVIEW_FORWARD, "newer"),
    (PREVIEW_ACTIVATE, "select"),
)


class PreviewController:
    """Starts sessions over a tracker's history and routes commands to them."""

    def __init__(
        self,
        host: PreviewHost,
        tracker: RegionTracker,
        *,
        settings: Optional[RingSettings] = None,
        hooks: Optional[PreviewHooks] = None,
        registry: Optional["KeymapRegistry"] = None,
    ) -> None:
        self.host = host
        self.tracker = tracker
        self.settings = settings or RingSettings()
        self.hooks = hooks or PreviewHooks()
        self.registry = registry
        self.session: Optional[PreviewSession] = None

    @property
    def active(self) -> bool:
        return self.session is not None and self.session.active

    def start(self) -> PreviewSession:
        if self.active:
            raise SessionAlreadyActiveError()
        session = PreviewSession(
            self.host,
            self.tracker.history,
            hooks=self.hooks,
            usage_hint=self.usage_hint() if self.settings.usage_hint else None,
        )
        session.start()
        self.session = session
        return session

    def advance(self, delta: int) -> Region:
        return self._current("advance").advance(delta)

    def backward(self, count: int = 1) -> Region:
        return self._current("advance").backward(count)

    def forward(self, count: int = 1) -> Region:
        return self._current("advance").forward(count)

    def activate(self) -> Region:
        return self._current("activate").activate()

    def quit(self) -> None:
        if self.session is not None:
            self.session.quit()

    def handle_command(self, command_id: str) -> CommandVerdict:
        if self.session is None:
            return CommandVerdict.EXIT
        return self.session.handle_command(command_id)

    def usage_hint(self) -> str:
        parts = []
        for action_id, label in _HINT_LABELS:
            keys = self._keys_for(action_id)
            if keys:
                parts.append(f"{keys}: {label}")
        entries = len(self.tracker.history or ())
        hint = f"Region history ({entries})"
        return f"{hint}  {', '.join(parts)}" if parts else hint

    def _keys_for(self, action_id: str) -> str:
        if self.registry is None:
            return ""
        bindings = self.registry.bindings_for_action(action_id, PREVIEW_KEYMAP)
        return "/".join(binding.sequence.label for binding in bindings)

    def _current(self, operation: str) -> PreviewSession:
        if self.session is None:
            raise PreviewStateError(operation, PreviewState.INACTIVE)
        return self.session


__all__ = ["PreviewController"]
