"""Built-in preview actions and their default key bindings."""

from __future__ import annotations

from typing import Iterable, Mapping

from region_ring.commands import (
    GLOBAL_KEYMAP,
    PREVIEW_ACTIVATE,
    PREVIEW_BACKWARD,
    PREVIEW_FORWARD,
    PREVIEW_KEYMAP,
    PREVIEW_START,
)
from region_ring.preview import actions as preview_actions

from .models import ActionRef, Binding, KeySequence
from .registry import KeymapRegistry

DEFAULT_ACTIONS: tuple[ActionRef, ...] = (
    ActionRef(
        id=PREVIEW_START,
        handler=preview_actions.start_preview,
        description="Preview the region history, newest first",
    ),
    ActionRef(
        id=PREVIEW_BACKWARD,
        handler=preview_actions.preview_backward,
        description="Show an older region",
    ),
    ActionRef(
        id=PREVIEW_FORWARD,
        handler=preview_actions.preview_forward,
        description="Show a newer region",
    ),
    ActionRef(
        id=PREVIEW_ACTIVATE,
        handler=preview_actions.preview_activate,
        description="Select the region being shown",
    ),
)


def _binding(binding_id: str, keymap: str, keys: str, action_id: str) -> Binding:
    return Binding(
        id=binding_id,
        keymap=keymap,
        sequence=KeySequence.parse(keys),
        action_id=action_id,
    )


DEFAULT_BINDINGS: tuple[Binding, ...] = (
    _binding("global.preview_start", GLOBAL_KEYMAP, "C-c r", PREVIEW_START),
    _binding("preview.backward", PREVIEW_KEYMAP, "p", PREVIEW_BACKWARD),
    _binding("preview.forward", PREVIEW_KEYMAP, "n", PREVIEW_FORWARD),
    _binding("preview.activate", PREVIEW_KEYMAP, "ENTER", PREVIEW_ACTIVATE),
)


def load_default_keymaps(
    registry: KeymapRegistry,
    *,
    replace: bool = False,
    key_overrides: Mapping[str, str] | None = None,
    extra_bindings: Iterable[Binding] | None = None,
) -> None:
    """Register the preview actions and bindings.

    ``key_overrides`` maps a default binding id to a replacement key
    description, e.g. ``{"preview.backward": "M-p"}``.
    """

    overrides = dict(key_overrides or {})
    unknown = set(overrides) - {binding.id for binding in DEFAULT_BINDINGS}
    if unknown:
        raise KeyError(f"Unknown default bindings: {sorted(unknown)}")

    for action in DEFAULT_ACTIONS:
        registry.register_action(action, replace=replace)

    for binding in DEFAULT_BINDINGS:
        if binding.id in overrides:
            binding = _binding(
                binding.id, binding.keymap, overrides[binding.id], binding.action_id
            )
        registry.register_binding(binding, replace=replace)

    for binding in extra_bindings or ():
        registry.register_binding(binding, replace=replace)


__all__ = ["DEFAULT_ACTIONS", "DEFAULT_BINDINGS", "load_default_keymaps"]
