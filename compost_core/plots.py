# MIT License
"""Plotly figure builders for the compost coordinator dashboard.

The flow diagram is drawn from the layout engine's output: node boxes
and connector paths are plotly shapes (connectors reuse the SVG path
strings directly), labels are annotations, and an invisible-ish marker
trace at each node centre makes nodes clickable.
"""

from __future__ import annotations
from typing import Dict, List, Mapping, Optional

import plotly.graph_objects as go

from .calculator import BUCKETS, Labor, Revenue
from .catalog import CATEGORY_COLORS, DIAGRAM, DiagramSettings, Node
from .geometry import Point
from .layout import CanvasSize, EdgeLayout


def fig_flow_diagram(
    nodes: Mapping[str, Node],
    node_layout: Mapping[str, Point],
    edge_layout: List[EdgeLayout],
    metrics: Mapping[str, str],
    canvas: CanvasSize,
    settings: DiagramSettings = DIAGRAM,
    selected: Optional[str] = None,
) -> go.Figure:
    """Build the material-flow diagram.

    Parameters
    ----------
    nodes:
        Node catalog, used for labels, icons and category colors.
    node_layout:
        Absolute node centres from :meth:`LayoutEngine.compute_node_layout`.
    edge_layout:
        Connector geometry from :meth:`LayoutEngine.compute_edge_layout`.
    metrics:
        Per-node metric strings.
    canvas:
        Canvas size in pixels; the axes span exactly this area with y
        pointing down.
    selected:
        Node id to highlight, if any.

    Returns
    -------
    plotly.graph_objects.Figure
        A figure whose marker trace carries node ids as ``customdata``.
    """
    fig = go.Figure()
    half_w, half_h = settings.node_width / 2, settings.node_height / 2

    for edge in edge_layout:
        fig.add_shape(
            type="path",
            path=edge.path,
            line=dict(color=edge.color, width=2, dash="dot" if edge.bidirectional else "solid"),
            layer="below",
        )
        if edge.label and edge.label_point is not None:
            fig.add_annotation(
                x=edge.label_point.x,
                y=edge.label_point.y,
                text=edge.label,
                showarrow=False,
                font=dict(size=10, color="#475569"),
            )

    ids: List[str] = []
    xs: List[float] = []
    ys: List[float] = []
    hover: List[str] = []
    for node_id, centre in node_layout.items():
        node = nodes[node_id]
        color = CATEGORY_COLORS.get(node.category, "#94a3b8")
        fig.add_shape(
            type="rect",
            x0=centre.x - half_w,
            x1=centre.x + half_w,
            y0=centre.y - half_h,
            y1=centre.y + half_h,
            line=dict(color=color, width=3 if node_id == selected else 1.5),
            fillcolor=color,
            opacity=0.25 if node_id != selected else 0.45,
            layer="below",
        )
        text = f"{node.icon} <b>{node.label}</b>"
        metric = metrics.get(node_id)
        if metric:
            text += f"<br><span style='font-size:10px'>{metric}</span>"
        fig.add_annotation(x=centre.x, y=centre.y, text=text, showarrow=False, font=dict(size=11))
        ids.append(node_id)
        xs.append(centre.x)
        ys.append(centre.y)
        hover.append(node.description or node.label)

    fig.add_scatter(
        x=xs,
        y=ys,
        mode="markers",
        customdata=ids,
        hovertext=hover,
        hoverinfo="text",
        marker=dict(size=max(settings.node_height - 10, 10), symbol="square", color="rgba(0,0,0,0.01)"),
        showlegend=False,
    )
    fig.update_xaxes(range=[0, canvas.width], visible=False, fixedrange=True)
    fig.update_yaxes(range=[canvas.height, 0], visible=False, fixedrange=True)
    fig.update_layout(
        template="plotly_white",
        width=canvas.width,
        height=canvas.height,
        margin=dict(l=0, r=0, t=0, b=0),
        clickmode="event+select",
        dragmode=False,
    )
    return fig


def fig_labor_breakdown(labor: Labor) -> go.Figure:
    names = list(BUCKETS)
    labels = [BUCKETS[n].label for n in names]
    values = [getattr(labor, n) for n in names]
    fig = go.Figure()
    fig.add_bar(x=labels, y=values, name="Hours", marker_color=CATEGORY_COLORS["labor"])
    fig.update_layout(
        title="Labor by Task Group",
        xaxis_title="Task group",
        yaxis_title="Hours per month",
        template="plotly_white",
    )
    return fig


def fig_revenue_donut(revenue: Revenue) -> go.Figure:
    fig = go.Figure(
        go.Pie(
            labels=["Subscriptions", "Compost", "Worm tea"],
            values=[revenue.subscriptions, revenue.compost, revenue.tea],
            hole=0.55,
        )
    )
    fig.update_layout(template="plotly_white", title="Monthly Revenue Mix")
    return fig


def fig_capital_by_category(by_category: Dict[str, float]) -> go.Figure:
    fig = go.Figure()
    fig.add_bar(x=[k.replace("_", " ").title() for k in by_category], y=list(by_category.values()), name="Cost")
    fig.update_layout(template="plotly_white", title="Startup Equipment by Category", yaxis_title="USD")
    return fig
