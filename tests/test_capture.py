from typing import Callable

from region_ring.buffer import Buffer
from region_ring.regions import Region, RegionTracker


def make_tracker(*, capacity: int = 10) -> tuple[Buffer, RegionTracker]:
    buffer = Buffer("0123456789" * 5)
    return buffer, RegionTracker(buffer, capacity=capacity)


def run(tracker: RegionTracker, command: Callable[[], None]) -> Region | None:
    tracker.before_command()
    command()
    return tracker.after_command()


def test_deactivation_records_region() -> None:
    buffer, tracker = make_tracker()
    buffer.set_selection(8, 2)

    recorded = run(tracker, buffer.clear_selection)

    assert recorded == Region(point=8, mark=2)
    assert tracker.history is not None
    assert list(tracker.history) == [Region(8, 2)]


def test_history_is_allocated_on_first_capture() -> None:
    buffer, tracker = make_tracker(capacity=4)
    run(tracker, lambda: None)
    assert tracker.history is None

    buffer.set_selection(1, 6)
    run(tracker, buffer.clear_selection)

    assert tracker.history is not None
    assert tracker.history.capacity == 4


def test_selection_still_active_is_not_recorded() -> None:
    buffer, tracker = make_tracker()
    buffer.set_selection(4, 1)

    assert run(tracker, lambda: buffer.set_point(9)) is None
    assert tracker.history is None


def test_selection_inactive_before_command_is_not_recorded() -> None:
    buffer, tracker = make_tracker()
    buffer.set_selection(7, 3)
    buffer.clear_selection()

    assert run(tracker, lambda: buffer.set_point(1)) is None
    assert tracker.history is None


def test_missing_mark_skips_capture() -> None:
    buffer, tracker = make_tracker()
    buffer.state.active = True

    assert run(tracker, buffer.clear_selection) is None
    assert tracker.history is None


def test_degenerate_region_is_not_recorded() -> None:
    buffer, tracker = make_tracker()
    buffer.set_selection(4, 4)

    assert run(tracker, buffer.clear_selection) is None
    assert tracker.history is None


def test_reactivating_same_selection_is_recorded_once() -> None:
    buffer, tracker = make_tracker()
    buffer.set_selection(2, 8)
    run(tracker, buffer.clear_selection)

    buffer.set_selection(8, 2)
    assert run(tracker, buffer.clear_selection) is None

    assert tracker.history is not None
    assert len(tracker.history) == 1


def test_after_command_consumes_snapshot() -> None:
    buffer, tracker = make_tracker()
    buffer.set_selection(3, 9)

    tracker.before_command()
    buffer.clear_selection()
    assert tracker.after_command() == Region(3, 9)
    assert tracker.after_command() is None


def test_discard_snapshot_skips_capture() -> None:
    buffer, tracker = make_tracker()
    buffer.set_selection(3, 9)

    tracker.before_command()
    buffer.clear_selection()
    tracker.discard_snapshot()

    assert tracker.after_command() is None
    assert tracker.history is None


def test_capacity_change_resizes_existing_history() -> None:
    buffer, tracker = make_tracker(capacity=3)
    for point, mark in ((0, 1), (0, 2), (0, 3)):
        buffer.set_selection(point, mark)
        run(tracker, buffer.clear_selection)

    tracker.capacity = 2

    assert tracker.history is not None
    assert list(tracker.history) == [Region(0, 3), Region(0, 2)]
