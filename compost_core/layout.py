# MIT License
"""Diagram layout: absolute node centres and connector geometry.

The layout is recomputed from scratch on every call from the current
canvas size and the current contents of the :class:`PositionStore`.
The graph is small and fixed, so there is no incremental state to keep
in sync with drags or resizes.
"""
from __future__ import annotations
from typing import Dict, Iterable, List, Mapping, NamedTuple, Optional

from .catalog import DIAGRAM, DiagramSettings, Edge, Node
from .geometry import CubicBezier, Point, bezier_path, midpoint, perimeter_intersection
from .positions import PositionStore


class CanvasSize(NamedTuple):
    width: float
    height: float


class EdgeLayout(NamedTuple):
    edge_id: str
    path_start: Point
    path_end: Point
    curve: CubicBezier
    path: str
    color: str
    label: str
    label_point: Optional[Point]
    bidirectional: bool


class LayoutEngine:
    """Compute where nodes and connectors go on a canvas.

    Parameters
    ----------
    nodes:
        Node catalog keyed by id.
    edges:
        Edge catalog.  Edges whose source or target is not in ``nodes``
        are left out of the layout.
    store:
        Position store resolving normalised node positions.
    settings:
        Node size, curvature, padding and label offset.
    """

    def __init__(
        self,
        nodes: Mapping[str, Node],
        edges: Iterable[Edge],
        store: PositionStore,
        settings: DiagramSettings = DIAGRAM,
    ):
        self.nodes = nodes
        self.edges = list(edges)
        self.store = store
        self.settings = settings

    def _inner(self, canvas: CanvasSize) -> CanvasSize:
        pad = self.settings.padding
        return CanvasSize(max(canvas.width - 2 * pad, 0.0), max(canvas.height - 2 * pad, 0.0))

    def to_absolute(self, x: float, y: float, canvas: CanvasSize) -> Point:
        """Map a normalised coordinate to pixels inside the padded canvas."""
        inner = self._inner(canvas)
        pad = self.settings.padding
        return Point(pad + x * inner.width, pad + y * inner.height)

    def to_normalized(self, px: float, py: float, canvas: CanvasSize) -> Point:
        """Inverse of :meth:`to_absolute`; a collapsed axis maps to 0.5."""
        inner = self._inner(canvas)
        pad = self.settings.padding
        x = (px - pad) / inner.width if inner.width > 0 else 0.5
        y = (py - pad) / inner.height if inner.height > 0 else 0.5
        return Point(x, y)

    def compute_node_layout(self, canvas: CanvasSize) -> Dict[str, Point]:
        layout: Dict[str, Point] = {}
        for node_id in self.nodes:
            pos = self.store.resolve_position(node_id)
            layout[node_id] = self.to_absolute(pos.x, pos.y, canvas)
        return layout

    def compute_edge_layout(self, canvas: CanvasSize, node_layout: Optional[Mapping[str, Point]] = None) -> List[EdgeLayout]:
        """Anchor points, curve and label position for every drawable edge.

        Parameters
        ----------
        canvas:
            Current canvas size in pixels.
        node_layout:
            Precomputed node centres.  Computed from ``canvas`` when omitted.

        Returns
        -------
        list of EdgeLayout
            One entry per edge whose endpoints both exist, in catalog order.
        """
        centres = node_layout if node_layout is not None else self.compute_node_layout(canvas)
        w, h = self.settings.node_width, self.settings.node_height
        result: List[EdgeLayout] = []
        for edge in self.edges:
            if edge.source not in self.nodes or edge.target not in self.nodes:
                continue
            src = centres.get(edge.source)
            dst = centres.get(edge.target)
            if src is None or dst is None:
                continue
            start = perimeter_intersection(src, dst, w, h)
            end = perimeter_intersection(dst, src, w, h)
            curve = bezier_path(start, end, self.settings.edge_curve)
            label_point = None
            if edge.label:
                mid = midpoint(start, end)
                label_point = Point(mid.x, mid.y - self.settings.label_offset)
            result.append(
                EdgeLayout(
                    edge_id=edge.id,
                    path_start=start,
                    path_end=end,
                    curve=curve,
                    path=curve.to_svg(),
                    color=edge.color,
                    label=edge.label,
                    label_point=label_point,
                    bidirectional=edge.bidirectional,
                )
            )
        return result
