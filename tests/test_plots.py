"""Smoke tests for the plotly figure builders."""

from compost_core.calculator import calculate_full_model
from compost_core.catalog import EDGES, NODES
from compost_core.economics import calculate_capital
from compost_core.layout import CanvasSize, LayoutEngine
from compost_core.metrics import node_metrics
from compost_core.params import DEFAULTS
from compost_core.plots import fig_capital_by_category, fig_flow_diagram, fig_labor_breakdown, fig_revenue_donut
from compost_core.positions import PositionStore

CANVAS = CanvasSize(1200, 520)


def _diagram(selected=None):
    engine = LayoutEngine(NODES, EDGES, PositionStore(NODES))
    node_layout = engine.compute_node_layout(CANVAS)
    edge_layout = engine.compute_edge_layout(CANVAS, node_layout)
    model = calculate_full_model(DEFAULTS)
    return fig_flow_diagram(NODES, node_layout, edge_layout, node_metrics(model), CANVAS, selected=selected)


def test_flow_diagram_shapes_and_markers():
    fig = _diagram()
    shapes = fig.layout.shapes
    assert len(shapes) == len(NODES) + len(EDGES)
    assert sum(1 for s in shapes if s.type == "path") == len(EDGES)
    assert list(fig.data[0].customdata) == list(NODES)
    assert tuple(fig.layout.yaxis.range) == (520, 0)


def test_bidirectional_edges_are_dotted():
    fig = _diagram()
    dotted = [s for s in fig.layout.shapes if s.type == "path" and s.line.dash == "dot"]
    assert len(dotted) == sum(1 for e in EDGES if e.bidirectional)


def test_selected_node_is_highlighted():
    fig = _diagram(selected="stage1")
    widths = [s.line.width for s in fig.layout.shapes if s.type == "rect"]
    assert widths.count(3) == 1


def test_summary_charts():
    model = calculate_full_model(DEFAULTS)
    assert len(fig_labor_breakdown(model.labor).data[0].y) == 5
    assert sum(fig_revenue_donut(model.revenue).data[0].values) == model.revenue.total
    assert len(fig_capital_by_category(calculate_capital(False).by_category).data[0].x) == 4
