# MIT License
"""Business model engine for the compost coordinator.

Every figure on the dashboard is derived here from one
:class:`~compost_core.params.InputParams` object.  The computation is a
strictly ordered pipeline of pure functions:

1. input volumes from the household count,
2. finished compost and worm tea volumes,
3. sellable compost after the household give-back,
4. revenue streams,
5. labor hours per bucket,
6. the effective hourly rate,
7. the per-task breakdown used by the detail view,
8. capital costs and depreciation (see :mod:`compost_core.economics`).

All stages are rerun on every parameter change.  Volumes are gallons,
money is USD and time is hours per month unless stated otherwise.
"""
from __future__ import annotations
from typing import Dict, List, Literal, Mapping, NamedTuple, Optional, Tuple

import pandas as pd
from pydantic import BaseModel

from .catalog import NODES, WEEKS_PER_MONTH, Node
from .economics import AnnualProjection, CapitalSummary, annual_projection, calculate_capital
from .params import InputParams

CARDBOARD_PER_HOUSEHOLD_PER_WEEK = 6.0
FOOD_WASTE_PER_HOUSEHOLD_PER_WEEK = 2.0

REFERENCE_HOUSEHOLDS = 15
REFERENCE_INPUT_VOLUME = (
    (CARDBOARD_PER_HOUSEHOLD_PER_WEEK + FOOD_WASTE_PER_HOUSEHOLD_PER_WEEK) * WEEKS_PER_MONTH * REFERENCE_HOUSEHOLDS
)
# Piles shrink by ~58%: 480 gal in at the reference size gives 200 gal out.
FINISHED_OUTPUT_REFERENCE = 200.0
INPUT_TO_OUTPUT_RATIO = FINISHED_OUTPUT_REFERENCE / REFERENCE_INPUT_VOLUME

TEA_CONCENTRATE_REFERENCE = 20.0
TEA_DILUTION_RATIO = 10.0

MONTHS_PER_YEAR = 12

Scaling = Literal["linear", "damped"]


class InputVolumes(BaseModel):
    cardboard_per_week: float
    food_waste_per_week: float
    cardboard_per_month: float
    food_waste_per_month: float
    total_per_week: float
    total_per_month: float


class OutputVolumes(BaseModel):
    finished_compost_per_month: float
    worm_tea_concentrate: float
    worm_tea_diluted: float
    giveback_per_month: float = 0.0
    sellable_compost: float = 0.0


class Revenue(BaseModel):
    subscriptions: float
    compost: float
    tea: float
    total: float


class Labor(BaseModel):
    collection: float
    cardboard: float
    composting: float
    tea: float
    delivery: float
    total: float


class TaskHours(NamedTuple):
    node_id: str
    name: str
    minutes: float
    period: str
    hours_per_month: float


class LaborBucket(NamedTuple):
    name: str
    label: str
    scaling: Scaling
    node_ids: Tuple[str, ...]


# Collection, cardboard and delivery grow with the route.  Composting and
# tea are batch work: half of the effort is there even with no households.
LABOR_BUCKETS: Tuple[LaborBucket, ...] = (
    LaborBucket("collection", "Collection", "linear", ("collection",)),
    LaborBucket("cardboard", "Cardboard processing", "linear", ("cardboard",)),
    LaborBucket("composting", "Composting", "damped", ("stage1", "stage2", "stage3", "stage4")),
    LaborBucket("tea", "Worm tea", "damped", ("tea",)),
    LaborBucket("delivery", "Delivery", "linear", ("delivery",)),
)
BUCKETS: Dict[str, LaborBucket] = {b.name: b for b in LABOR_BUCKETS}


class DerivedModel(BaseModel):
    """Complete snapshot of the business metrics for one parameter set."""

    params: InputParams
    inputs: InputVolumes
    outputs: OutputVolumes
    revenue: Revenue
    labor: Labor
    hourly_rate: float
    capital: CapitalSummary
    annual: AnnualProjection


# ---------------------------------------------------------------------------
# 1–3: volumes
# ---------------------------------------------------------------------------
def calculate_input_volumes(households: float) -> InputVolumes:
    """Weekly and monthly collected volumes.

    Parameters
    ----------
    households:
        Number of participating households.

    Returns
    -------
    InputVolumes
        Cardboard and food waste per week and per month (gallons).
    """
    cardboard = households * CARDBOARD_PER_HOUSEHOLD_PER_WEEK
    food = households * FOOD_WASTE_PER_HOUSEHOLD_PER_WEEK
    return InputVolumes(
        cardboard_per_week=cardboard,
        food_waste_per_week=food,
        cardboard_per_month=cardboard * WEEKS_PER_MONTH,
        food_waste_per_month=food * WEEKS_PER_MONTH,
        total_per_week=cardboard + food,
        total_per_month=(cardboard + food) * WEEKS_PER_MONTH,
    )


def calculate_output_volumes(inputs: InputVolumes) -> OutputVolumes:
    """Finished compost and worm tea from the monthly input volume.

    Tea concentrate scales with finished compost relative to the
    reference production and is diluted 1:10 for application.
    """
    total_input = inputs.cardboard_per_month + inputs.food_waste_per_month
    finished = total_input * FINISHED_OUTPUT_REFERENCE / REFERENCE_INPUT_VOLUME
    concentrate = TEA_CONCENTRATE_REFERENCE * finished / FINISHED_OUTPUT_REFERENCE
    return OutputVolumes(
        finished_compost_per_month=finished,
        worm_tea_concentrate=concentrate,
        worm_tea_diluted=concentrate * TEA_DILUTION_RATIO,
    )


def calculate_giveback_per_month(households: float, giveback_per_year: float) -> float:
    return households * giveback_per_year / MONTHS_PER_YEAR


def calculate_sellable_output(total_compost: float, households: float, giveback_per_year: float) -> float:
    """Compost left to sell after the give-back, never below zero."""
    sellable = total_compost - calculate_giveback_per_month(households, giveback_per_year)
    return max(0.0, sellable)


# ---------------------------------------------------------------------------
# 4: revenue
# ---------------------------------------------------------------------------
def calculate_revenue(
    households: float,
    subscription_price: float,
    compost_price: float,
    tea_price: float,
    sellable_compost: float,
    tea_concentrate: float,
) -> Revenue:
    subscriptions = households * subscription_price
    compost = sellable_compost * compost_price
    tea = tea_concentrate * tea_price
    return Revenue(subscriptions=subscriptions, compost=compost, tea=tea, total=subscriptions + compost + tea)


# ---------------------------------------------------------------------------
# 5–7: labor
# ---------------------------------------------------------------------------
def household_scale(households: float) -> float:
    return households / REFERENCE_HOUSEHOLDS


def scaling_factor(scaling: Scaling, scale: float) -> float:
    """Multiplier applied to reference hours for a bucket.

    ``linear`` work grows one-for-one with the household scale; ``damped``
    work moves at half sensitivity (``0.5 + 0.5 × scale``).
    """
    if scaling == "damped":
        return 0.5 + 0.5 * scale
    return scale


def bucket_base_hours(bucket: LaborBucket, nodes: Mapping[str, Node] = NODES) -> float:
    """Reference hours per month of a bucket: the sum of its node tasks."""
    return sum(task.hours_per_month for nid in bucket.node_ids if nid in nodes for task in nodes[nid].tasks)


def calculate_labor(households: float, nodes: Mapping[str, Node] = NODES) -> Labor:
    """Monthly labor hours per bucket and in total."""
    scale = household_scale(households)
    hours = {
        b.name: bucket_base_hours(b, nodes) * scaling_factor(b.scaling, scale) for b in LABOR_BUCKETS
    }
    return Labor(total=sum(hours.values()), **hours)


def bucket_for_node(node_id: str) -> Optional[LaborBucket]:
    for bucket in LABOR_BUCKETS:
        if node_id in bucket.node_ids:
            return bucket
    return None


def get_task_breakdown(category: str, households: float, nodes: Mapping[str, Node] = NODES) -> List[TaskHours]:
    """Per-task hours per month for a labor bucket or a single node.

    Parameters
    ----------
    category:
        A bucket name (``"composting"``) or a node id (``"stage2"``).
        Bucket names take precedence when both match.
    households:
        Number of participating households.
    nodes:
        Node catalog holding the task lists.

    Returns
    -------
    list of TaskHours
        Tasks in catalog order.  Each task is scaled with its bucket's
        rule, so summing a bucket's breakdown gives exactly the figure
        from :func:`calculate_labor`.  Unknown categories yield ``[]``.
    """
    bucket = BUCKETS.get(category)
    if bucket is not None:
        node_ids: Tuple[str, ...] = bucket.node_ids
    elif category in nodes:
        node_ids = (category,)
        bucket = bucket_for_node(category)
    else:
        return []
    factor = scaling_factor(bucket.scaling, household_scale(households)) if bucket is not None else 1.0
    rows: List[TaskHours] = []
    for nid in node_ids:
        node = nodes.get(nid)
        if node is None:
            continue
        for task in node.tasks:
            rows.append(TaskHours(nid, task.name, task.minutes, task.period, task.hours_per_month * factor))
    return rows


def task_breakdown_frame(category: str, households: float, nodes: Mapping[str, Node] = NODES) -> pd.DataFrame:
    """:func:`get_task_breakdown` as a DataFrame for tables and CSV export."""
    rows = get_task_breakdown(category, households, nodes)
    return pd.DataFrame(rows, columns=list(TaskHours._fields))


def calculate_hourly_rate(revenue: float, hours: float) -> float:
    """Revenue per labor hour; defined as zero when no hours are worked."""
    if hours == 0:
        return 0.0
    return revenue / hours


# ---------------------------------------------------------------------------
# Full model
# ---------------------------------------------------------------------------
def calculate_full_model(params: InputParams, nodes: Mapping[str, Node] = NODES) -> DerivedModel:
    """Run every stage for one parameter set.

    Parameters
    ----------
    params:
        Current slider values.
    nodes:
        Node catalog supplying the labor task lists.

    Returns
    -------
    DerivedModel
        The full snapshot, including capital and annual projection.
    """
    h = params.households
    inputs = calculate_input_volumes(h)
    outputs = calculate_output_volumes(inputs)
    sellable = calculate_sellable_output(outputs.finished_compost_per_month, h, params.giveback_per_year)
    outputs = outputs.model_copy(
        update={
            "giveback_per_month": calculate_giveback_per_month(h, params.giveback_per_year),
            "sellable_compost": sellable,
        }
    )
    revenue = calculate_revenue(
        households=h,
        subscription_price=params.subscription_price,
        compost_price=params.compost_price,
        tea_price=params.tea_price,
        sellable_compost=sellable,
        tea_concentrate=outputs.worm_tea_concentrate,
    )
    labor = calculate_labor(h, nodes)
    hourly_rate = calculate_hourly_rate(revenue.total, labor.total)
    capital = calculate_capital(params.include_lawn_service)
    annual = annual_projection(revenue.total, revenue.subscriptions, labor.total, labor.collection)
    return DerivedModel(
        params=params,
        inputs=inputs,
        outputs=outputs,
        revenue=revenue,
        labor=labor,
        hourly_rate=hourly_rate,
        capital=capital,
        annual=annual,
    )
