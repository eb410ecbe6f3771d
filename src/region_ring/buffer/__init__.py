"""In-memory text buffer with point/mark selection state."""

from .buffer import Buffer
from .state import SelectionState
from .validation import BufferValidationError, ensure_offset

__all__ = [
    "Buffer",
    "BufferValidationError",
    "SelectionState",
    "ensure_offset",
]
