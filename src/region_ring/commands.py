"""Command identifiers and the context handed to command handlers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Optional

if TYPE_CHECKING:
    from region_ring.preview.controller import PreviewController

PREVIEW_START = "region.preview_start"
PREVIEW_BACKWARD = "region.preview_backward"
PREVIEW_FORWARD = "region.preview_forward"
PREVIEW_ACTIVATE = "region.preview_activate"

# Commands that keep a preview's transient bindings installed.
PREVIEW_COMMANDS = frozenset({PREVIEW_BACKWARD, PREVIEW_FORWARD, PREVIEW_ACTIVATE})

PREVIEW_KEYMAP = "preview"
GLOBAL_KEYMAP = "global"


@dataclass(slots=True)
class CommandContext:
    """What a command handler sees for one invocation."""

    command_id: str
    host: Any
    preview: "PreviewController"
    count: int = 1
    args: tuple[Any, ...] = ()


@dataclass(slots=True)
class CommandResult:
    command_id: str
    status: str = "ok"
    message: Optional[str] = None
    value: Any = None


__all__ = [
    "CommandContext",
    "CommandResult",
    "GLOBAL_KEYMAP",
    "PREVIEW_ACTIVATE",
    "PREVIEW_BACKWARD",
    "PREVIEW_COMMANDS",
    "PREVIEW_FORWARD",
    "PREVIEW_KEYMAP",
    "PREVIEW_START",
]
