"""Host implementations of the region_ring protocols."""

from .memory import Editor, Overlay, TransientBindings

__all__ = ["Editor", "Overlay", "TransientBindings"]
