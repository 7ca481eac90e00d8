"""Tests for the diagram layout engine."""

import math

import pytest

from compost_core.catalog import DIAGRAM, EDGES, NODES, Edge
from compost_core.geometry import midpoint
from compost_core.layout import CanvasSize, LayoutEngine
from compost_core.positions import MemoryStore, PositionStore

CANVAS = CanvasSize(1200, 520)


@pytest.fixture
def store():
    return PositionStore(NODES, MemoryStore())


@pytest.fixture
def engine(store):
    return LayoutEngine(NODES, EDGES, store)


def test_node_layout_uses_padded_canvas(engine):
    layout = engine.compute_node_layout(CANVAS)
    assert set(layout) == set(NODES)
    # 40 + 0.05 × 1120, 40 + 0.5 × 440
    assert layout["households"] == pytest.approx((96, 260))
    assert layout["customers"] == pytest.approx((40 + 0.95 * 1120, 260))


def test_every_catalog_edge_is_laid_out(engine):
    edges = engine.compute_edge_layout(CANVAS)
    assert [e.edge_id for e in edges] == [e.id for e in EDGES]
    assert len(edges) == 13
    for edge in edges:
        assert edge.path.startswith("M ")
        assert edge.path_start == edge.curve.start
        assert edge.path_end == edge.curve.end


def test_edges_with_missing_endpoints_are_skipped(store):
    ghost = Edge(id="ghost", source="households", target="nowhere", material="food")
    engine = LayoutEngine(NODES, EDGES + [ghost], store)
    ids = [e.edge_id for e in engine.compute_edge_layout(CANVAS)]
    assert "ghost" not in ids
    assert len(ids) == 13


def test_label_sits_above_chord_midpoint(engine):
    edges = {e.edge_id: e for e in engine.compute_edge_layout(CANVAS)}
    labelled = edges["food-households-collection"]
    mid = midpoint(labelled.path_start, labelled.path_end)
    assert labelled.label == "food waste"
    assert labelled.label_point == pytest.approx((mid.x, mid.y - DIAGRAM.label_offset))
    assert edges["food-collection-stage1"].label_point is None


def test_horizontal_neighbours_anchor_on_facing_sides(engine):
    layout = engine.compute_node_layout(CANVAS)
    edge = {e.edge_id: e for e in engine.compute_edge_layout(CANVAS)}["compost-stage1-stage2"]
    assert edge.path_start == pytest.approx((layout["stage1"].x + 60, layout["stage1"].y))
    assert edge.path_end == pytest.approx((layout["stage2"].x - 60, layout["stage2"].y))


def test_override_moves_node_and_its_edges(engine, store):
    before = {e.edge_id: e for e in engine.compute_edge_layout(CANVAS)}
    store.set_position("stage1", 0.5, 0.25)
    layout = engine.compute_node_layout(CANVAS)
    assert layout["stage1"] == pytest.approx((600, 150))
    after = {e.edge_id: e for e in engine.compute_edge_layout(CANVAS)}
    assert after["compost-stage1-stage2"].path != before["compost-stage1-stage2"].path
    assert after["compost-stage3-stage4"].path == before["compost-stage3-stage4"].path


def test_to_normalized_inverts_to_absolute(engine):
    for x, y in [(0, 0), (0.05, 0.95), (0.32, 0.59), (1, 1)]:
        p = engine.to_absolute(x, y, CANVAS)
        assert engine.to_normalized(p.x, p.y, CANVAS) == pytest.approx((x, y))


def test_tiny_canvas_has_no_nan(engine):
    tiny = CanvasSize(50, 50)
    layout = engine.compute_node_layout(tiny)
    for p in layout.values():
        assert math.isfinite(p.x) and math.isfinite(p.y)
    for edge in engine.compute_edge_layout(tiny, layout):
        assert "nan" not in edge.path.lower()
    assert engine.to_normalized(10, 10, tiny) == (0.5, 0.5)


def test_layout_follows_canvas_resize(engine):
    small = engine.compute_node_layout(CanvasSize(600, 260))
    large = engine.compute_node_layout(CANVAS)
    assert small["households"] == pytest.approx((40 + 0.05 * 520, 40 + 0.5 * 180))
    assert large["households"] != small["households"]
