# MIT License
"""Per-node metric labels for the flow diagram.

Each node id maps to a pure projection of the
:class:`~compost_core.calculator.DerivedModel` into a short display
string.  Adding a metric for a new node means adding one row here; the
calculator knows nothing about the diagram.
"""
from __future__ import annotations
from typing import Callable, Dict, Optional

from .calculator import DerivedModel

MetricSelector = Callable[[DerivedModel], str]

PILE_DURATION = "3-4 weeks"


def _hours(value: float) -> str:
    return f"{value:.1f} hr/mo"


def _gallons(value: float) -> str:
    return f"{value:,.0f} gal/mo"


def _dollars(value: float) -> str:
    return f"${value:,.0f}/mo"


NODE_METRICS: Dict[str, MetricSelector] = {
    "households": lambda m: f"{m.params.households} homes",
    "collection": lambda m: _hours(m.labor.collection),
    "cardboard": lambda m: _hours(m.labor.cardboard),
    "stage1": lambda m: PILE_DURATION,
    "stage2": lambda m: PILE_DURATION,
    "stage3": lambda m: PILE_DURATION,
    "stage4": lambda m: _gallons(m.outputs.finished_compost_per_month),
    "tea": lambda m: _gallons(m.outputs.worm_tea_concentrate),
    "delivery": lambda m: _hours(m.labor.delivery),
    "customers": lambda m: _dollars(m.revenue.total),
}


def node_metric(node_id: str, model: DerivedModel) -> Optional[str]:
    selector = NODE_METRICS.get(node_id)
    return selector(model) if selector is not None else None


def node_metrics(model: DerivedModel) -> Dict[str, str]:
    """All available metric labels for one model snapshot."""
    return {node_id: selector(model) for node_id, selector in NODE_METRICS.items()}
