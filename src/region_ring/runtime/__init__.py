"""Runtime services: telemetry and settings."""

from . import telemetry
from .config import DEFAULT_CAPACITY, RingSettings

__all__ = ["telemetry", "DEFAULT_CAPACITY", "RingSettings"]
