"""Preview state machine, its controller, and extension hooks."""

from .controller import PreviewController
from .hooks import POST_END, PRE_START, PreviewHooks
from .session import (
    CommandVerdict,
    EmptyHistoryError,
    PreviewError,
    PreviewSession,
    PreviewState,
    PreviewStateError,
    SessionAlreadyActiveError,
)

__all__ = [
    "CommandVerdict",
    "EmptyHistoryError",
    "POST_END",
    "PRE_START",
    "PreviewController",
    "PreviewError",
    "PreviewHooks",
    "PreviewSession",
    "PreviewState",
    "PreviewStateError",
    "SessionAlreadyActiveError",
]
