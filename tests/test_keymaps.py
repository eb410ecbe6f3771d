import pytest

from region_ring.commands import (
    GLOBAL_KEYMAP,
    PREVIEW_BACKWARD,
    PREVIEW_FORWARD,
    PREVIEW_KEYMAP,
    PREVIEW_START,
)
from region_ring.keymaps import (
    ActionRef,
    Binding,
    KeymapConflictError,
    KeymapRegistry,
    KeymapResolver,
    KeySequence,
    KeyStroke,
    load_default_keymaps,
)


def make_registry() -> KeymapRegistry:
    registry = KeymapRegistry()
    load_default_keymaps(registry)
    return registry


def test_keystroke_parse_emacs_and_plus_forms() -> None:
    assert KeyStroke.parse("C-c").token == "ctrl+c"
    assert KeyStroke.parse("C-c").label == "C-c"
    assert KeyStroke.parse("M-S-p").modifiers == ("alt", "shift")
    assert KeyStroke.parse("ctrl+x") == KeyStroke("x", ("ctrl",))
    assert KeyStroke.parse("ENTER").token == "ENTER"
    assert KeyStroke.parse("+").key == "+"


def test_keystroke_rejects_empty_description() -> None:
    with pytest.raises(ValueError):
        KeyStroke.parse("  ")
    with pytest.raises(ValueError):
        KeySequence(())


def test_key_sequence_parse() -> None:
    sequence = KeySequence.parse("C-c r")

    assert sequence.tokens == ("ctrl+c", "r")
    assert sequence.label == "C-c r"


def test_default_keymaps_registered() -> None:
    registry = make_registry()
    stats = registry.stats()

    assert stats.action_count == 4
    assert stats.binding_count == 4
    assert stats.keymaps == (GLOBAL_KEYMAP, PREVIEW_KEYMAP)


def test_same_keys_in_same_keymap_conflict() -> None:
    registry = make_registry()
    clash = Binding(
        id="preview.alt_forward",
        keymap=PREVIEW_KEYMAP,
        sequence=KeySequence.parse("p"),
        action_id=PREVIEW_FORWARD,
    )

    with pytest.raises(KeymapConflictError) as excinfo:
        registry.register_binding(clash)

    assert [b.id for b in excinfo.value.conflicts] == ["preview.backward"]


def test_prefix_keys_conflict_and_replace_evicts() -> None:
    registry = make_registry()
    prefix = Binding(
        id="global.quick_start",
        keymap=GLOBAL_KEYMAP,
        sequence=KeySequence.parse("C-c"),
        action_id=PREVIEW_START,
    )

    with pytest.raises(KeymapConflictError):
        registry.register_binding(prefix)

    registry.register_binding(prefix, replace=True)
    assert [b.id for b in registry.iter_bindings(GLOBAL_KEYMAP)] == [
        "global.quick_start"
    ]


def test_binding_to_unknown_action_is_rejected() -> None:
    registry = KeymapRegistry()

    with pytest.raises(KeyError):
        registry.register_binding(
            Binding(
                id="x",
                keymap=GLOBAL_KEYMAP,
                sequence=KeySequence.parse("x"),
                action_id="missing",
            )
        )


def test_duplicate_action_needs_replace() -> None:
    registry = KeymapRegistry()
    action = ActionRef(id="a", handler=lambda context: None)
    registry.register_action(action)

    with pytest.raises(ValueError):
        registry.register_action(action)
    registry.register_action(action, replace=True)


def test_resolver_match_pending_and_miss() -> None:
    resolver = KeymapResolver(make_registry())

    pending = resolver.resolve(GLOBAL_KEYMAP, ("ctrl+c",))
    assert pending.status == "pending"
    assert pending.next_expected == ("r",)

    match = resolver.resolve(GLOBAL_KEYMAP, ("ctrl+c", "r"))
    assert match.status == "match"
    assert match.match is not None
    assert match.match.action.id == PREVIEW_START

    assert resolver.resolve(GLOBAL_KEYMAP, ("q",)).status == "miss"
    assert resolver.resolve(PREVIEW_KEYMAP, ()).status == "miss"


def test_resolver_sees_registry_changes() -> None:
    registry = make_registry()
    resolver = KeymapResolver(registry)
    assert resolver.resolve(PREVIEW_KEYMAP, ("p",)).status == "match"

    registry.unregister_binding("preview.backward")

    assert resolver.resolve(PREVIEW_KEYMAP, ("p",)).status == "miss"


def test_key_overrides() -> None:
    registry = KeymapRegistry()
    load_default_keymaps(registry, key_overrides={"preview.backward": "M-p"})

    (binding,) = registry.bindings_for_action(PREVIEW_BACKWARD, PREVIEW_KEYMAP)
    assert binding.sequence.label == "M-p"

    with pytest.raises(KeyError):
        load_default_keymaps(KeymapRegistry(), key_overrides={"nope": "x"})
