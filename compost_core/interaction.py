# MIT License
"""Pointer handling for the flow diagram.

:class:`InteractionController` is a three-state machine::

    IDLE --pointer_down--> ARMED --move past threshold (edit mode)--> DRAGGING
      ^                      |                                          |
      +------pointer_up------+-----------------pointer_up---------------+

A gesture whose displacement never exceeds the threshold is a click and
opens the node's detail view, whatever the edit mode.  Only in edit mode
can it become a drag; each drag update clamps and rounds the normalised
position, writes it to the position store and recomputes the edges.

Every method returns an :class:`InteractionEvent` describing what the
rendering surface should do.  The controller never draws anything.
"""
from __future__ import annotations
import enum
import math
from dataclasses import dataclass, field
from typing import Iterable, List, Mapping, NamedTuple, Optional

import numpy as np

from .catalog import DIAGRAM, EDGES, NODES, DiagramSettings, Edge, Node, NormalizedPoint
from .geometry import Point
from .layout import CanvasSize, EdgeLayout, LayoutEngine
from .positions import JsonFileStore, KeyValueStore, PositionStore, positions_directory


class DragState(str, enum.Enum):
    IDLE = "idle"
    ARMED = "armed"
    DRAGGING = "dragging"


class CanvasRect(NamedTuple):
    """Canvas bounds in screen coordinates at pointer-down time."""

    left: float
    top: float
    width: float
    height: float

    @property
    def size(self) -> CanvasSize:
        return CanvasSize(self.width, self.height)


@dataclass
class DragSession:
    node_id: str
    start: Point
    canvas: CanvasRect
    current: Point
    started_at: Optional[float] = None
    exceeded: bool = False


@dataclass
class InteractionEvent:
    """Outcome of one pointer event.

    ``kind`` is one of ``"none"``, ``"armed"``, ``"moved"``, ``"click"``
    or ``"drag_end"``.  ``moved`` events carry the new normalised
    position, the node's new centre in pixels and the recomputed edges.
    """

    kind: str
    node_id: Optional[str] = None
    position: Optional[NormalizedPoint] = None
    node_point: Optional[Point] = None
    edges: List[EdgeLayout] = field(default_factory=list)
    duration: Optional[float] = None


class InteractionController:
    def __init__(
        self,
        store: PositionStore,
        engine: LayoutEngine,
        settings: DiagramSettings = DIAGRAM,
        edit_mode: bool = False,
    ):
        self.store = store
        self.engine = engine
        self.settings = settings
        self.edit_mode = edit_mode
        self.state = DragState.IDLE
        self.session: Optional[DragSession] = None

    def set_edit_mode(self, enabled: bool) -> None:
        """Enable or disable dragging.  Turning it off ends any drag in progress."""
        self.edit_mode = bool(enabled)
        if not self.edit_mode and self.state is DragState.DRAGGING:
            self._reset()

    def _reset(self) -> None:
        self.state = DragState.IDLE
        self.session = None

    def normalize_pointer(self, x: float, y: float, canvas: CanvasRect) -> NormalizedPoint:
        """Screen pointer position to a clamped, grid-rounded canvas coordinate."""
        raw = self.engine.to_normalized(x - canvas.left, y - canvas.top, canvas.size)
        lo, hi, grid = self.settings.drag_min, self.settings.drag_max, self.settings.drag_grid

        def snap(v: float) -> float:
            v = round(v / grid) * grid
            return round(float(np.clip(v, lo, hi)), 6)

        return NormalizedPoint(x=snap(raw.x), y=snap(raw.y))

    def pointer_down(self, node_id: str, x: float, y: float, canvas: CanvasRect, timestamp: Optional[float] = None) -> InteractionEvent:
        start = Point(float(x), float(y))
        self.session = DragSession(node_id=node_id, start=start, canvas=canvas, current=start, started_at=timestamp)
        self.state = DragState.ARMED
        return InteractionEvent("armed", node_id=node_id)

    def _track(self, x: float, y: float) -> DragSession:
        session = self.session
        session.current = Point(float(x), float(y))
        moved = math.hypot(session.current.x - session.start.x, session.current.y - session.start.y)
        if moved > self.settings.drag_threshold_px:
            session.exceeded = True
        return session

    def pointer_move(self, x: float, y: float) -> InteractionEvent:
        if self.session is None:
            return InteractionEvent("none")
        session = self._track(x, y)
        if self.state is DragState.ARMED and session.exceeded and self.edit_mode:
            self.state = DragState.DRAGGING
        if self.state is not DragState.DRAGGING:
            return InteractionEvent("none", node_id=session.node_id)

        position = self.normalize_pointer(x, y, session.canvas)
        self.store.set_position(session.node_id, position.x, position.y)
        size = session.canvas.size
        return InteractionEvent(
            "moved",
            node_id=session.node_id,
            position=position,
            node_point=self.engine.to_absolute(position.x, position.y, size),
            edges=self.engine.compute_edge_layout(size),
        )

    def pointer_up(self, x: float, y: float, timestamp: Optional[float] = None) -> InteractionEvent:
        if self.session is None:
            return InteractionEvent("none")
        session = self._track(x, y)
        was_dragging = self.state is DragState.DRAGGING
        duration = None
        if timestamp is not None and session.started_at is not None:
            duration = timestamp - session.started_at
        self._reset()
        if not session.exceeded:
            return InteractionEvent("click", node_id=session.node_id, duration=duration)
        if was_dragging:
            return InteractionEvent(
                "drag_end",
                node_id=session.node_id,
                position=self.store.resolve_position(session.node_id),
                duration=duration,
            )
        return InteractionEvent("none", node_id=session.node_id, duration=duration)

    def cancel(self) -> None:
        self._reset()


def build_controller(
    nodes: Mapping[str, Node] = NODES,
    edges: Iterable[Edge] = EDGES,
    backend: Optional[KeyValueStore] = None,
) -> InteractionController:
    """Wire a position store, layout engine and controller together.

    Without an explicit ``backend`` positions are saved as JSON under
    :func:`~compost_core.positions.positions_directory`.
    """
    if backend is None:
        backend = JsonFileStore(positions_directory())
    store = PositionStore(nodes, backend)
    return InteractionController(store, LayoutEngine(nodes, edges, store))
