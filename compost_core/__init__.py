"""Core package for the compost coordinator model.

This package contains the deterministic business model (volumes,
revenue, labor, capital), the diagram layout engine with its geometry
helpers and persisted position overrides, and the pointer interaction
state machine used by the Streamlit dashboard.

Nothing in here imports Streamlit: every function takes plain values
or pydantic models and returns new ones, so the whole core can be
exercised from tests.
"""

from .params import InputParams, apply_input, DEFAULTS, RANGES
from .catalog import Node, Edge, Task, NODES, EDGES, DIAGRAM
from .calculator import calculate_full_model, get_task_breakdown, DerivedModel
from .positions import PositionStore, JsonFileStore, MemoryStore
from .layout import LayoutEngine, CanvasSize
from .interaction import InteractionController, CanvasRect, DragState, build_controller
from .metrics import node_metrics

__all__ = [
    "InputParams",
    "apply_input",
    "DEFAULTS",
    "RANGES",
    "Node",
    "Edge",
    "Task",
    "NODES",
    "EDGES",
    "DIAGRAM",
    "calculate_full_model",
    "get_task_breakdown",
    "DerivedModel",
    "PositionStore",
    "JsonFileStore",
    "MemoryStore",
    "LayoutEngine",
    "CanvasSize",
    "InteractionController",
    "CanvasRect",
    "DragState",
    "build_controller",
    "node_metrics",
]
