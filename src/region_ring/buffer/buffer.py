"""Plain text buffer implementing the selection side of the host protocol."""

from __future__ import annotations

from typing import Optional

from .state import SelectionState
from .validation import ensure_offset


class Buffer:
    def __init__(
        self,
        text: str = "",
        *,
        name: str = "default",
        state: Optional[SelectionState] = None,
    ) -> None:
        self.name = name
        self.text = text
        self.state = state or SelectionState()

    def selection_active(self) -> bool:
        return self.state.active

    def current_point(self) -> int:
        return self.state.point

    def current_mark(self) -> Optional[int]:
        return self.state.mark

    def set_point(self, point: int) -> None:
        self.state.set_point(ensure_offset(self.text, point))

    def clear_selection(self) -> None:
        self.state.deactivate()

    def set_selection(self, point: int, mark: int) -> None:
        mark = ensure_offset(self.text, mark)
        self.state.set_point(ensure_offset(self.text, point))
        self.state.set_mark(mark)

    def insert_text(self, text: str) -> None:
        """Insert at point and deactivate the selection, as typing does."""

        point = self.state.point
        self.text = self.text[:point] + text + self.text[point:]
        if self.state.mark is not None and self.state.mark > point:
            self.state.mark += len(text)
        self.state.set_point(point + len(text))
        self.state.deactivate()
