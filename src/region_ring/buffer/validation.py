"""Offset validation shared by buffer operations."""

from __future__ import annotations


class BufferValidationError(RuntimeError):
    """Raised when an offset falls outside the buffer text."""

    def __init__(self, message: str, *, offset: int | None = None) -> None:
        super().__init__(message)
        self.offset = offset


def ensure_offset(text: str, offset: int) -> int:
    if isinstance(offset, bool) or not isinstance(offset, int):
        raise BufferValidationError(f"Offset must be an integer, got {offset!r}")
    if offset < 0 or offset > len(text):
        raise BufferValidationError(
            f"Offset {offset} out of range 0..{len(text)}", offset=offset
        )
    return offset
