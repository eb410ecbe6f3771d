"""Region values, the region history ring, and command-loop capture."""

from .capture import RegionTracker
from .geometry import Bounds, Offset, Region, normalize, same_region
from .history import InvalidCursorError, RegionHistory

__all__ = [
    "Bounds",
    "InvalidCursorError",
    "Offset",
    "Region",
    "RegionHistory",
    "RegionTracker",
    "normalize",
    "same_region",
]
