"""Point, mark, and activation state of a buffer's selection."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(slots=True)
class SelectionState:
    """Emacs-style selection: the region spans point..mark while ``active``."""

    point: int = 0
    mark: Optional[int] = None
    active: bool = False

    def set_point(self, point: int) -> None:
        self.point = point

    def set_mark(self, mark: int, *, activate: bool = True) -> None:
        self.mark = mark
        self.active = activate

    def deactivate(self) -> None:
        self.active = False
