"""Tests for the pointer interaction controller.

A gesture is a click unless the pointer travels more than the drag
threshold; only in edit mode does a longer gesture move the node, and
every move is clamped, snapped to the grid and persisted.
"""

import pytest

from compost_core.catalog import EDGES, NODES
from compost_core.interaction import CanvasRect, DragState, InteractionController, build_controller
from compost_core.layout import LayoutEngine
from compost_core.positions import MemoryStore, PositionStore

RECT = CanvasRect(0, 0, 1200, 520)


@pytest.fixture
def backend():
    return MemoryStore()


@pytest.fixture
def controller(backend):
    store = PositionStore(NODES, backend)
    return InteractionController(store, LayoutEngine(NODES, EDGES, store))


def test_click_without_movement(controller):
    assert controller.pointer_down("stage1", 100, 100, RECT).kind == "armed"
    assert controller.state is DragState.ARMED
    event = controller.pointer_up(100, 100)
    assert event.kind == "click"
    assert event.node_id == "stage1"
    assert controller.state is DragState.IDLE


def test_jitter_below_threshold_is_still_a_click(controller):
    controller.set_edit_mode(True)
    controller.pointer_down("stage2", 100, 100, RECT)
    assert controller.pointer_move(103, 103).kind == "none"
    assert controller.pointer_up(103, 104).kind == "click"
    assert controller.store.export_positions() == {}


def test_move_outside_edit_mode_does_nothing(controller):
    controller.pointer_down("stage1", 100, 100, RECT)
    assert controller.pointer_move(300, 300).kind == "none"
    assert controller.state is DragState.ARMED
    event = controller.pointer_up(300, 300)
    assert event.kind == "none"
    assert controller.store.export_positions() == {}


def test_drag_updates_position_and_edges(controller):
    controller.set_edit_mode(True)
    controller.pointer_down("households", 96, 260, RECT)
    event = controller.pointer_move(400, 300)
    assert event.kind == "moved"
    assert controller.state is DragState.DRAGGING
    # (400 - 40) / 1120 and (300 - 40) / 440, snapped to 0.01
    assert (event.position.x, event.position.y) == pytest.approx((0.32, 0.59))
    assert event.node_point == pytest.approx((40 + 0.32 * 1120, 40 + 0.59 * 440))
    assert len(event.edges) == 13
    moved_edge = next(e for e in event.edges if e.edge_id == "food-households-collection")
    assert moved_edge.path_start[0] > 96

    end = controller.pointer_up(400, 300)
    assert end.kind == "drag_end"
    assert (end.position.x, end.position.y) == pytest.approx((0.32, 0.59))
    assert controller.state is DragState.IDLE


def test_drag_is_clamped_to_canvas(controller):
    controller.set_edit_mode(True)
    controller.pointer_down("tea", 800, 150, RECT)
    event = controller.pointer_move(-500, 5000)
    assert (event.position.x, event.position.y) == pytest.approx((0.05, 0.95))
    event = controller.pointer_move(5000, -500)
    assert (event.position.x, event.position.y) == pytest.approx((0.95, 0.05))


def test_drag_persists_across_controllers(controller, backend):
    controller.set_edit_mode(True)
    controller.pointer_down("households", 96, 260, RECT)
    controller.pointer_move(400, 300)
    controller.pointer_up(400, 300)
    fresh = PositionStore(NODES, backend)
    p = fresh.resolve_position("households")
    assert (p.x, p.y) == pytest.approx((0.32, 0.59))


def test_pointer_is_relative_to_canvas_origin(controller):
    controller.set_edit_mode(True)
    rect = CanvasRect(100, 50, 1200, 520)
    controller.pointer_down("stage3", 200, 150, rect)
    event = controller.pointer_move(500, 350)
    assert (event.position.x, event.position.y) == pytest.approx((0.32, 0.59))


def test_stray_events_are_ignored(controller):
    assert controller.pointer_move(10, 10).kind == "none"
    assert controller.pointer_up(10, 10).kind == "none"
    assert controller.state is DragState.IDLE


def test_disabling_edit_mode_mid_drag_cancels(controller):
    controller.set_edit_mode(True)
    controller.pointer_down("stage4", 800, 260, RECT)
    controller.pointer_move(900, 300)
    controller.set_edit_mode(False)
    assert controller.state is DragState.IDLE
    assert controller.pointer_up(900, 300).kind == "none"


def test_cancel_discards_the_gesture(controller):
    controller.pointer_down("stage1", 100, 100, RECT)
    controller.cancel()
    assert controller.pointer_up(100, 100).kind == "none"


def test_gesture_duration(controller):
    controller.pointer_down("tea", 10, 10, RECT, timestamp=1.0)
    event = controller.pointer_up(10, 10, timestamp=1.25)
    assert event.duration == pytest.approx(0.25)


def test_returning_to_start_is_not_a_click(controller):
    controller.pointer_down("stage1", 100, 100, RECT)
    controller.pointer_move(300, 300)
    controller.pointer_move(100, 100)
    assert controller.pointer_up(100, 100).kind == "none"


def test_normalize_pointer_rounds_to_grid(controller):
    p = controller.normalize_pointer(40 + 0.123456 * 1120, 40 + 0.5 * 440, RECT)
    assert p.x == pytest.approx(0.12)
    assert p.y == pytest.approx(0.5)


def test_build_controller_uses_the_given_backend(backend):
    controller = build_controller(backend=backend)
    controller.set_edit_mode(True)
    controller.pointer_down("households", 96, 260, RECT)
    controller.pointer_move(400, 300)
    controller.pointer_up(400, 300)
    p = build_controller(backend=backend).store.resolve_position("households")
    assert (p.x, p.y) == pytest.approx((0.32, 0.59))


def test_build_controller_saves_under_positions_directory(tmp_path, monkeypatch):
    monkeypatch.setenv("COMPOST_POSITIONS_DIR", str(tmp_path))
    controller = build_controller()
    controller.store.set_position("tea", 0.7, 0.3)
    assert (tmp_path / "compost-positions.json").exists()
