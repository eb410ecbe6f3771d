"""Protocols the host editor implements for region capture and preview."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional, Protocol

HighlightHandle = object
KeepPredicate = Callable[[str], bool]
Dispose = Callable[[], None]


@dataclass(frozen=True, slots=True)
class SelectionSnapshot:
    """Selection status as it was at some moment: active flag, point, mark."""

    active: bool
    point: int
    mark: Optional[int]


class SelectionHost(Protocol):
    """Read and change the live selection of one document."""

    def selection_active(self) -> bool:
        ...

    def current_point(self) -> int:
        ...

    def current_mark(self) -> Optional[int]:
        """Return the anchor, or ``None`` if no mark was ever set."""
        ...

    def set_point(self, point: int) -> None:
        """Move the cursor; mark and activation are left alone."""
        ...

    def clear_selection(self) -> None:
        """Deactivate the selection; the mark stays where it is."""
        ...

    def set_selection(self, point: int, mark: int) -> None:
        """Place mark and point and activate the selection."""
        ...


class HighlightHost(Protocol):
    """Overlay primitives used for the preview highlight."""

    def create_highlight(self, start: int, end: int) -> HighlightHandle:
        ...

    def move_highlight(self, handle: HighlightHandle, start: int, end: int) -> None:
        ...

    def destroy_highlight(self, handle: HighlightHandle) -> None:
        ...


class TransientBindingHost(Protocol):
    """Short-lived input intercepts."""

    def install_transient_bindings(
        self,
        keymap: object,
        keep_predicate: KeepPredicate,
        on_exit: Callable[[], None],
    ) -> Dispose:
        """Install ``keymap`` until a command fails ``keep_predicate``.

        ``on_exit`` fires once when the host drops the intercept on its own.
        The returned callable removes the intercept without firing it.
        """
        ...


class MessageHost(Protocol):
    def show_message(self, text: str) -> None:
        ...


class PreviewHost(
    SelectionHost, HighlightHost, TransientBindingHost, MessageHost, Protocol
):
    """Everything a preview session needs from the host."""


def snapshot_selection(host: SelectionHost) -> SelectionSnapshot:
    return SelectionSnapshot(
        active=host.selection_active(),
        point=host.current_point(),
        mark=host.current_mark(),
    )


def restore_selection(host: SelectionHost, snapshot: SelectionSnapshot) -> None:
    """Reactivate the selection captured by :func:`snapshot_selection`.

    Inactive snapshots leave the host untouched.
    """

    if snapshot.active and snapshot.mark is not None:
        host.set_selection(snapshot.point, snapshot.mark)


__all__ = [
    "Dispose",
    "HighlightHandle",
    "HighlightHost",
    "KeepPredicate",
    "MessageHost",
    "PreviewHost",
    "SelectionHost",
    "SelectionSnapshot",
    "TransientBindingHost",
    "restore_selection",
    "snapshot_selection",
]
