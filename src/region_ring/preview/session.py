"""Interactive preview of the region history.

A session walks the history of one document with a highlight overlay.
``start`` shows the newest region, ``advance`` moves through the ring,
``activate`` turns the shown region into the live selection, and ``quit``
puts back whatever selection was active before the preview began.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from region_ring.commands import PREVIEW_COMMANDS, PREVIEW_KEYMAP
from region_ring.host import (
    Dispose,
    HighlightHandle,
    PreviewHost,
    SelectionSnapshot,
    restore_selection,
    snapshot_selection,
)
from region_ring.regions import InvalidCursorError, Region, RegionHistory
from region_ring.runtime import telemetry

from .hooks import POST_END, PRE_START, PreviewHooks


class PreviewError(RuntimeError):
    """Base class for refused preview operations."""


class EmptyHistoryError(PreviewError):
    def __init__(self) -> None:
        super().__init__("No regions recorded in this buffer yet")


class SessionAlreadyActiveError(PreviewError):
    def __init__(self) -> None:
        super().__init__("A region preview is already in progress")


class PreviewStateError(PreviewError):
    """Raised when an operation needs a state the session is not in."""

    def __init__(self, operation: str, state: "PreviewState") -> None:
        super().__init__(f"Cannot {operation} while preview is {state.value}")
        self.operation = operation
        self.state = state


class PreviewState(str, Enum):
    INACTIVE = "inactive"
    PREVIEWING = "previewing"
    ACTIVATED = "activated"
    CANCELLED = "cancelled"


class CommandVerdict(str, Enum):
    STAY = "stay"
    EXIT = "exit"


class PreviewSession:
    """One pass of previewing; not reusable once activated or cancelled."""

    def __init__(
        self,
        host: PreviewHost,
        history: Optional[RegionHistory],
        *,
        hooks: Optional[PreviewHooks] = None,
        usage_hint: Optional[str] = None,
        keymap: object = PREVIEW_KEYMAP,
    ) -> None:
        self.host = host
        self.history = history
        self.hooks = hooks or PreviewHooks()
        self.usage_hint = usage_hint
        self.keymap = keymap
        self.state = PreviewState.INACTIVE
        self.cursor_index = 0
        self.saved_selection_state: Optional[SelectionSnapshot] = None
        self.highlight_handle: Optional[HighlightHandle] = None
        self.shown_region: Optional[Region] = None
        self._dispose_bindings: Optional[Dispose] = None
        self.logger = telemetry.get_logger("region_ring.preview")

    @property
    def active(self) -> bool:
        return self.state is PreviewState.PREVIEWING

    @property
    def region(self) -> Region:
        """The region currently shown."""

        if self.shown_region is not None:
            return self.shown_region
        return self._history().latest(self.cursor_index)

    def start(self) -> Region:
        if self.state is PreviewState.PREVIEWING:
            raise SessionAlreadyActiveError()
        if self.state is not PreviewState.INACTIVE:
            raise PreviewStateError("start", self.state)
        if self.history is None or self.history.is_empty():
            raise EmptyHistoryError()

        self.hooks.emit(PRE_START, self)
        history = self.history
        with telemetry.span(
            "preview::start",
            component="preview",
            metadata={"entries": len(history)},
        ):
            saved = snapshot_selection(self.host)
            region = history.latest(0)
            handle: Optional[HighlightHandle] = None
            try:
                if saved.active:
                    self.host.clear_selection()
                self.host.set_point(region.point)
                handle = self.host.create_highlight(*region.bounds())
                dispose = self.host.install_transient_bindings(
                    self.keymap, self.accepts_command, self._on_bindings_exit
                )
            except Exception:
                if handle is not None:
                    self.host.destroy_highlight(handle)
                self.host.set_point(saved.point)
                restore_selection(self.host, saved)
                raise

            self.cursor_index = 0
            self.shown_region = region
            self.saved_selection_state = saved
            self.highlight_handle = handle
            self._dispose_bindings = dispose
            self.state = PreviewState.PREVIEWING

        if self.usage_hint:
            self.host.show_message(self.usage_hint)
        telemetry.record_event(
            "preview.start",
            data={"entries": len(history), "was_active": saved.active},
        )
        return region

    def advance(self, delta: int) -> Region:
        """Move ``delta`` entries through the ring, older for positive values."""

        self._require_previewing("advance")
        history = self._history()
        if history.is_empty():
            self.quit()
            raise InvalidCursorError(self.cursor_index + delta)

        index = (self.cursor_index + delta) % len(history)
        region = history.latest(index)
        previous = self.host.current_point()
        self.host.set_point(region.point)
        try:
            self.host.move_highlight(self.highlight_handle, *region.bounds())
        except Exception:
            self.host.set_point(previous)
            raise
        self.cursor_index = index
        self.shown_region = region
        telemetry.record_event(
            "preview.advance",
            level="debug",
            data={"delta": delta, "index": index},
        )
        return region

    def backward(self, count: int = 1) -> Region:
        return self.advance(count)

    def forward(self, count: int = 1) -> Region:
        return self.advance(-count)

    def activate(self) -> Region:
        self._require_previewing("activate")
        if self.history is None or self.history.is_empty():
            self.quit()
            raise InvalidCursorError(self.cursor_index)
        region = self.region

        if self.host.selection_active():
            self.host.clear_selection()
        self.host.set_selection(region.point, region.mark)
        self._finish(PreviewState.ACTIVATED)
        telemetry.record_event(
            "preview.activate",
            data={"point": region.point, "mark": region.mark},
        )
        return region

    def quit(self) -> None:
        if self.state is not PreviewState.PREVIEWING:
            return
        self._finish(PreviewState.CANCELLED)
        telemetry.record_event("preview.quit", data={"index": self.cursor_index})

    def accepts_command(self, command_id: str) -> bool:
        return self.active and command_id in PREVIEW_COMMANDS

    def handle_command(self, command_id: str) -> CommandVerdict:
        """Decide whether ``command_id`` continues the preview; quit if not."""

        if self.accepts_command(command_id):
            return CommandVerdict.STAY
        self.quit()
        return CommandVerdict.EXIT

    def _on_bindings_exit(self) -> None:
        # The host has already dropped the intercept.
        self._dispose_bindings = None
        self.logger.debug("preview::bindings_exit")
        self.quit()

    def _finish(self, outcome: PreviewState) -> None:
        handle, self.highlight_handle = self.highlight_handle, None
        dispose, self._dispose_bindings = self._dispose_bindings, None
        self.state = outcome
        saved = self.saved_selection_state
        restore = outcome is PreviewState.CANCELLED and saved is not None and saved.active
        try:
            try:
                if dispose is not None:
                    dispose()
            finally:
                if handle is not None:
                    self.host.destroy_highlight(handle)
        finally:
            if restore and saved is not None:
                restore_selection(self.host, saved)
            self.hooks.emit(POST_END, self)

    def _require_previewing(self, operation: str) -> None:
        if self.state is not PreviewState.PREVIEWING:
            raise PreviewStateError(operation, self.state)

    def _history(self) -> RegionHistory:
        if self.history is None:
            raise InvalidCursorError(self.cursor_index)
        return self.history


__all__ = [
    "CommandVerdict",
    "EmptyHistoryError",
    "PreviewError",
    "PreviewSession",
    "PreviewState",
    "PreviewStateError",
    "SessionAlreadyActiveError",
]
