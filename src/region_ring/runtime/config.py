"""User-facing settings for region history and preview."""

from __future__ import annotations

from dataclasses import dataclass, replace

from .telemetry import env_flag, env_value

DEFAULT_CAPACITY = 10


def validate_capacity(capacity: object) -> int:
    if isinstance(capacity, bool) or not isinstance(capacity, int):
        raise ValueError(f"capacity must be an integer, got {capacity!r}")
    if capacity <= 0:
        raise ValueError(f"capacity must be positive, got {capacity}")
    return capacity


@dataclass(frozen=True, slots=True)
class RingSettings:
    """Ring capacity and whether preview start prints a usage hint."""

    capacity: int = DEFAULT_CAPACITY
    usage_hint: bool = True

    def __post_init__(self) -> None:
        validate_capacity(self.capacity)

    @classmethod
    def from_env(cls) -> "RingSettings":
        raw = env_value("CAPACITY")
        try:
            capacity = int(raw) if raw else DEFAULT_CAPACITY
        except ValueError as exc:
            raise ValueError(f"REGION_RING_CAPACITY must be an integer, got {raw!r}") from exc
        return cls(capacity=capacity, usage_hint=env_flag("USAGE_HINT", True))

    def with_changes(self, **changes: object) -> "RingSettings":
        return replace(self, **changes)


__all__ = ["DEFAULT_CAPACITY", "RingSettings", "validate_capacity"]
