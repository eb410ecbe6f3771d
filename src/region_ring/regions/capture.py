"""Falling-edge detection of deactivated selections around each command."""

from __future__ import annotations

from typing import Optional

from region_ring.host import SelectionHost
from region_ring.runtime import telemetry
from region_ring.runtime.config import DEFAULT_CAPACITY, validate_capacity

from .geometry import Region
from .history import RegionHistory


class RegionTracker:
    """Per-document capture state.

    The host calls :meth:`before_command` and :meth:`after_command` around
    every command. A selection that was active before and is inactive after
    (with the mark still set) is recorded in :attr:`history`, which is only
    allocated on the first successful capture.

    Any command that drops the selection counts, whether or not it was
    meant to; selections managed outside ``SelectionHost`` go unnoticed.
    """

    def __init__(
        self,
        selection: SelectionHost,
        *,
        capacity: int = DEFAULT_CAPACITY,
        history: Optional[RegionHistory] = None,
        name: str = "default",
    ) -> None:
        self.selection = selection
        self.name = name
        self._capacity = validate_capacity(capacity)
        self.history = history
        self.region_was_active = False

    @property
    def capacity(self) -> int:
        return self._capacity

    @capacity.setter
    def capacity(self, value: int) -> None:
        self._capacity = validate_capacity(value)
        if self.history is not None:
            self.history.resize(value)

    def ensure_history(self) -> RegionHistory:
        if self.history is None:
            self.history = RegionHistory(self._capacity)
        return self.history

    def before_command(self) -> None:
        self.region_was_active = self.selection.selection_active()

    def after_command(self) -> Optional[Region]:
        was_active, self.region_was_active = self.region_was_active, False
        if not was_active or self.selection.selection_active():
            return None
        mark = self.selection.current_mark()
        if mark is None:
            return None
        return self.capture(Region(point=self.selection.current_point(), mark=mark))

    def discard_snapshot(self) -> None:
        """Close the current command without capturing anything."""

        self.region_was_active = False

    def capture(self, region: Region) -> Optional[Region]:
        """Record ``region`` unless the history's duplicate rules reject it."""

        reason = "degenerate" if region.is_degenerate else None
        if reason is None and self.history is not None:
            reason = self.history.rejection_reason(region)
        if reason is not None:
            telemetry.record_event(
                "region.rejected",
                level="debug",
                data={"buffer": self.name, "reason": reason},
            )
            return None

        history = self.ensure_history()
        history.record(region)
        telemetry.record_event(
            "region.recorded",
            data={
                "buffer": self.name,
                "point": region.point,
                "mark": region.mark,
                "size": len(history),
            },
        )
        return region


__all__ = ["RegionTracker"]
