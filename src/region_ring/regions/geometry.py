"""Region value type and the endpoint-order-insensitive equality helpers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

Offset = int
Bounds = Tuple[Offset, Offset]  # (start, end), start <= end


@dataclass(frozen=True, slots=True)
class Region:
    """A past selection: ``point`` is where the cursor was, ``mark`` the anchor."""

    point: Offset
    mark: Offset

    @property
    def is_degenerate(self) -> bool:
        return self.point == self.mark

    def bounds(self) -> Bounds:
        return normalize(self.point, self.mark)


def normalize(a: Offset, b: Offset) -> Bounds:
    return (a, b) if a <= b else (b, a)


def same_region(left: Optional[Region], right: Optional[Region]) -> bool:
    """True when both regions cover the same span, whichever end is point."""

    if left is None or right is None:
        return False
    return left.bounds() == right.bounds()


__all__ = ["Bounds", "Offset", "Region", "normalize", "same_region"]
