from __future__ import annotations

from typing import Any, List

import pytest

from region_ring.adapters import Editor
from region_ring.buffer import BufferValidationError
from region_ring.commands import PREVIEW_BACKWARD, PREVIEW_FORWARD
from region_ring.host import SelectionSnapshot
from region_ring.preview import (
    POST_END,
    PRE_START,
    CommandVerdict,
    EmptyHistoryError,
    PreviewHooks,
    PreviewSession,
    PreviewState,
    PreviewStateError,
    SessionAlreadyActiveError,
)
from region_ring.regions import InvalidCursorError, Region
from region_ring.runtime import RingSettings


def make_editor(
    *front_to_back: tuple[int, int],
    hooks: PreviewHooks | None = None,
    usage_hint: bool = False,
) -> Editor:
    editor = Editor(
        "x" * 100,
        settings=RingSettings(capacity=10, usage_hint=usage_hint),
        hooks=hooks,
    )
    if front_to_back:
        history = editor.tracker.ensure_history()
        for point, mark in reversed(front_to_back):
            history.record(Region(point, mark))
    return editor


def overlay_span(editor: Editor) -> tuple[int, int]:
    (overlay,) = editor.overlays.values()
    return overlay.start, overlay.end


def test_start_and_advance_with_wraparound() -> None:
    editor = make_editor((30, 40), (10, 20), (1, 5))

    session = editor.preview.start()
    handle = session.highlight_handle

    assert session.cursor_index == 0
    assert session.region == Region(30, 40)
    assert overlay_span(editor) == (30, 40)
    assert editor.current_point() == 30

    assert session.advance(1) == Region(10, 20)
    assert session.cursor_index == 1
    assert editor.current_point() == 10

    assert session.advance(5) == Region(30, 40)
    assert session.cursor_index == 0
    assert overlay_span(editor) == (30, 40)
    assert session.highlight_handle is handle
    assert len(editor.overlays) == 1


def test_highlight_is_order_normalized_and_point_follows_region_point() -> None:
    editor = make_editor((9, 3))

    editor.preview.start()

    assert overlay_span(editor) == (3, 9)
    assert editor.current_point() == 9


def test_quit_restores_selection_active_before_start() -> None:
    editor = make_editor((30, 40))
    editor.set_selection(5, 2)

    session = editor.preview.start()
    assert not editor.selection_active()

    session.quit()

    assert editor.selection() == SelectionSnapshot(active=True, point=5, mark=2)
    assert editor.overlays == {}
    assert editor.transient_keymap is None
    assert session.state is PreviewState.CANCELLED


def test_quit_without_prior_selection_leaves_it_inactive() -> None:
    editor = make_editor((30, 40), (10, 20))

    session = editor.preview.start()
    session.backward()
    session.quit()

    assert not editor.selection_active()
    assert editor.overlays == {}


def test_activate_selects_previewed_region_without_restoring() -> None:
    editor = make_editor((30, 40), (10, 20), (1, 5))
    editor.set_selection(5, 2)

    session = editor.preview.start()
    session.backward()
    region = session.activate()

    assert region == Region(10, 20)
    assert editor.selection() == SelectionSnapshot(active=True, point=10, mark=20)
    assert editor.overlays == {}
    assert editor.transient_keymap is None
    assert session.state is PreviewState.ACTIVATED


def test_empty_history_refuses_start_without_residue() -> None:
    editor = make_editor()
    editor.set_selection(5, 2)

    with pytest.raises(EmptyHistoryError):
        editor.preview.start()

    editor.tracker.ensure_history()
    with pytest.raises(EmptyHistoryError):
        editor.preview.start()

    assert editor.overlays == {}
    assert editor.transient_keymap is None
    assert editor.preview.session is None
    assert editor.selection() == SelectionSnapshot(active=True, point=5, mark=2)


def test_second_start_is_refused_while_previewing() -> None:
    editor = make_editor((30, 40))
    session = editor.preview.start()

    with pytest.raises(SessionAlreadyActiveError):
        editor.preview.start()
    with pytest.raises(SessionAlreadyActiveError):
        session.start()

    assert len(editor.overlays) == 1
    assert editor.preview.session is session


def test_finished_session_cannot_restart_or_move() -> None:
    editor = make_editor((30, 40))
    session = editor.preview.start()
    session.quit()

    with pytest.raises(PreviewStateError):
        session.start()
    with pytest.raises(PreviewStateError):
        session.advance(1)
    with pytest.raises(PreviewStateError):
        session.activate()


@pytest.mark.parametrize("delta", [-7, -3, -1, 0, 1, 2, 4, 11])
def test_advance_then_reverse_returns_to_same_index(delta: int) -> None:
    editor = make_editor((30, 40), (10, 20), (1, 5))
    session = editor.preview.start()
    session.advance(1)
    before = session.cursor_index

    session.advance(delta)
    session.advance(-delta)

    assert session.cursor_index == before


def test_forward_and_backward_mirror_each_other() -> None:
    editor = make_editor((30, 40), (10, 20), (1, 5))
    session = editor.preview.start()

    assert session.backward() == Region(10, 20)
    assert session.forward() == Region(30, 40)
    assert session.forward() == Region(1, 5)
    assert session.cursor_index == 2
    assert session.backward(2) == Region(10, 20)


def test_hooks_run_in_registration_order_around_session() -> None:
    calls: List[Any] = []
    hooks = PreviewHooks()
    editor = make_editor((30, 40), hooks=hooks)
    hooks.register(PRE_START, lambda s: calls.append(("first", s.state)))
    hooks.register(PRE_START, lambda s: calls.append(("second", s.state)))
    hooks.register(
        POST_END, lambda s: calls.append(("end", s.state, len(editor.overlays)))
    )

    session = editor.preview.start()
    assert calls == [
        ("first", PreviewState.INACTIVE),
        ("second", PreviewState.INACTIVE),
    ]

    session.quit()
    session.quit()
    assert calls[-1] == ("end", PreviewState.CANCELLED, 0)
    assert len(calls) == 3


def test_hooks_do_not_fire_when_start_is_refused() -> None:
    calls: List[object] = []
    hooks = PreviewHooks()
    hooks.register(PRE_START, calls.append)
    editor = make_editor(hooks=hooks)

    with pytest.raises(EmptyHistoryError):
        editor.preview.start()

    assert calls == []


def test_unregistered_hook_is_not_called() -> None:
    calls: List[object] = []
    hooks = PreviewHooks()
    name = hooks.register(POST_END, calls.append, name="status")
    assert name == "status"
    assert hooks.unregister(POST_END, "status")

    editor = make_editor((30, 40), hooks=hooks)
    editor.preview.start().quit()

    assert calls == []
    with pytest.raises(KeyError):
        hooks.register("preview.unknown", calls.append)


def test_handle_command_keeps_preview_commands_only() -> None:
    editor = make_editor((30, 40), (10, 20))
    session = editor.preview.start()

    assert session.handle_command(PREVIEW_BACKWARD) is CommandVerdict.STAY
    assert session.handle_command(PREVIEW_FORWARD) is CommandVerdict.STAY
    assert session.active

    assert session.handle_command("host.noop") is CommandVerdict.EXIT
    assert session.state is PreviewState.CANCELLED
    assert session.handle_command(PREVIEW_BACKWARD) is CommandVerdict.EXIT


def test_emptied_history_forces_quit() -> None:
    editor = make_editor((30, 40), (10, 20))
    editor.set_selection(5, 2)
    session = editor.preview.start()
    assert editor.tracker.history is not None

    editor.tracker.history.clear()
    with pytest.raises(InvalidCursorError):
        session.advance(1)

    assert session.state is PreviewState.CANCELLED
    assert editor.overlays == {}
    assert editor.selection() == SelectionSnapshot(active=True, point=5, mark=2)


class BrokenBindingsEditor(Editor):
    def install_transient_bindings(self, keymap, keep_predicate, on_exit):  # type: ignore[override]
        raise RuntimeError("bindings unavailable")


def test_failed_start_releases_highlight_and_restores_selection() -> None:
    editor = BrokenBindingsEditor(
        "x" * 100, settings=RingSettings(capacity=10, usage_hint=False)
    )
    editor.tracker.ensure_history().record(Region(30, 40))
    editor.set_selection(5, 2)

    with pytest.raises(RuntimeError, match="bindings unavailable"):
        editor.preview.start()

    assert editor.overlays == {}
    assert editor.selection() == SelectionSnapshot(active=True, point=5, mark=2)
    assert editor.preview.session is None


def test_session_can_be_driven_without_controller() -> None:
    editor = make_editor((30, 40), (10, 20))
    session = PreviewSession(editor, editor.tracker.history)

    assert session.start() == Region(30, 40)
    assert session.active
    session.quit()
    assert not session.active


def test_end_hooks_fire_once_after_activate_cleanup() -> None:
    calls: List[Any] = []
    hooks = PreviewHooks()
    editor = make_editor((30, 40), (10, 20), hooks=hooks)
    hooks.register(
        POST_END, lambda s: calls.append(("first", s.state, len(editor.overlays)))
    )
    hooks.register(POST_END, lambda s: calls.append(("second", s.state)))

    session = editor.preview.start()
    session.backward()
    session.activate()
    session.quit()

    assert calls == [
        ("first", PreviewState.ACTIVATED, 0),
        ("second", PreviewState.ACTIVATED),
    ]


def test_activate_on_emptied_history_forces_quit() -> None:
    editor = make_editor((30, 40), (10, 20))
    editor.set_selection(5, 2)
    session = editor.preview.start()
    assert editor.tracker.history is not None

    editor.tracker.history.clear()
    with pytest.raises(InvalidCursorError):
        session.activate()

    assert session.state is PreviewState.CANCELLED
    assert editor.overlays == {}
    assert editor.transient_keymap is None
    assert editor.selection() == SelectionSnapshot(active=True, point=5, mark=2)


def test_activate_after_shrinking_history_selects_shown_region() -> None:
    editor = make_editor((30, 40), (10, 20), (1, 5))
    session = editor.preview.start()
    assert session.advance(2) == Region(1, 5)

    editor.tracker.capacity = 2

    assert session.activate() == Region(1, 5)
    assert editor.selection() == SelectionSnapshot(active=True, point=1, mark=5)


def test_failed_move_leaves_preview_on_current_region() -> None:
    editor = make_editor((30, 40), (200, 210))
    session = editor.preview.start()

    with pytest.raises(BufferValidationError):
        session.backward()

    assert session.active
    assert session.cursor_index == 0
    assert session.region == Region(30, 40)
    assert overlay_span(editor) == (30, 40)
    assert editor.current_point() == 30


class StuckHighlightEditor(Editor):
    def destroy_highlight(self, handle: object) -> None:
        raise RuntimeError("overlay already gone")


def test_failed_highlight_teardown_still_restores_and_notifies() -> None:
    calls: List[object] = []
    hooks = PreviewHooks()
    hooks.register(POST_END, lambda s: calls.append(s.state))
    editor = StuckHighlightEditor(
        "x" * 100, settings=RingSettings(capacity=10, usage_hint=False), hooks=hooks
    )
    editor.tracker.ensure_history().record(Region(30, 40))
    editor.set_selection(5, 2)
    session = editor.preview.start()

    with pytest.raises(RuntimeError, match="overlay already gone"):
        session.quit()

    assert session.state is PreviewState.CANCELLED
    assert calls == [PreviewState.CANCELLED]
    assert editor.transient_keymap is None
    assert editor.selection() == SelectionSnapshot(active=True, point=5, mark=2)
