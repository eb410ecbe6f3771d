"""Fixed-capacity ring of recently deactivated regions."""

from __future__ import annotations

from typing import Iterator, List, Optional

from region_ring.runtime.config import DEFAULT_CAPACITY, validate_capacity

from .geometry import Region, same_region


class InvalidCursorError(IndexError):
    """Raised when a ring offset is looked up while the ring is empty."""

    def __init__(self, offset: int) -> None:
        super().__init__(f"No region at offset {offset}: history is empty")
        self.offset = offset


class RegionHistory:
    """Circular buffer addressed newest-first.

    Offset ``0`` is the most recent insertion and ``-1`` the oldest; any
    other offset wraps modulo the current length. Slots live in a fixed
    arena indexed by ``(base + offset) % capacity``, with ``base`` pointing
    at the newest entry.
    """

    def __init__(self, capacity: int = DEFAULT_CAPACITY) -> None:
        self._capacity = validate_capacity(capacity)
        self._slots: List[Optional[Region]] = [None] * capacity
        self._base = 0
        self._count = 0

    @property
    def capacity(self) -> int:
        return self._capacity

    def __len__(self) -> int:
        return self._count

    def __iter__(self) -> Iterator[Region]:
        for offset in range(self._count):
            yield self.latest(offset)

    def __repr__(self) -> str:
        entries = ", ".join(f"({r.point},{r.mark})" for r in self)
        return f"RegionHistory(capacity={self._capacity}, [{entries}])"

    def is_empty(self) -> bool:
        return self._count == 0

    def is_full(self) -> bool:
        return self._count == self._capacity

    def latest(self, offset: int = 0) -> Region:
        if self._count == 0:
            raise InvalidCursorError(offset)
        slot = self._slots[self._slot_for(offset)]
        assert slot is not None
        return slot

    def front(self) -> Optional[Region]:
        return None if self._count == 0 else self.latest(0)

    def back(self) -> Optional[Region]:
        return None if self._count == 0 else self.latest(-1)

    def rejection_reason(self, region: Region) -> Optional[str]:
        """Why ``region`` would not be recorded, or ``None`` if it would."""

        if region.is_degenerate:
            return "degenerate"
        if same_region(region, self.front()):
            return "duplicate_front"
        if same_region(region, self.back()):
            return "duplicate_back"
        return None

    def record(self, region: Region) -> bool:
        """Insert ``region`` at the front; returns ``False`` if it was rejected."""

        if self.rejection_reason(region) is not None:
            return False
        self._base = (self._base - 1) % self._capacity
        self._slots[self._base] = region
        if self._count < self._capacity:
            self._count += 1
        return True

    def clear(self) -> None:
        self._slots = [None] * self._capacity
        self._base = 0
        self._count = 0

    def resize(self, capacity: int) -> None:
        """Change capacity in place, keeping the newest entries."""

        validate_capacity(capacity)
        kept = list(self)[:capacity]
        self._capacity = capacity
        self._slots = [None] * capacity
        self._slots[: len(kept)] = kept
        self._base = 0
        self._count = len(kept)

    def _slot_for(self, offset: int) -> int:
        return (self._base + offset % self._count) % self._capacity


__all__ = ["InvalidCursorError", "RegionHistory"]
