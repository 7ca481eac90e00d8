# MIT License
"""Capital costs, depreciation and seasonal annualisation.

These functions are deliberately independent of the volume and labor
model: they operate on the equipment catalog and on already computed
monthly figures.
"""
from __future__ import annotations

from typing import Dict, Iterable, List, Mapping
from pydantic import BaseModel

from .catalog import ACTIVE_MONTHS, EQUIPMENT, OPTIONAL_EQUIPMENT_CATEGORY, SETUP_COSTS, WINTER_MONTHS, EquipmentItem, SetupCost


class CapitalSummary(BaseModel):
    startup_cost: float
    annual_depreciation: float
    by_category: Dict[str, float]
    include_optional: bool


class AnnualProjection(BaseModel):
    active_months: int
    winter_months: int
    revenue: float
    hours: float
    hourly_rate: float


def _categories(equipment: Mapping[str, List[EquipmentItem]], include_optional: bool) -> List[str]:
    return [c for c in equipment if include_optional or c != OPTIONAL_EQUIPMENT_CATEGORY]


def calculate_startup_cost(include_optional: bool = True, equipment: Mapping[str, List[EquipmentItem]] = EQUIPMENT) -> float:
    """Total one-off equipment cost.

    Parameters
    ----------
    include_optional:
        Whether the optional (lawn service) category is part of the plan.
    equipment:
        Equipment catalog grouped by category.

    Returns
    -------
    float
        Sum of item costs over the included categories.
    """
    return sum(item.cost for cat in _categories(equipment, include_optional) for item in equipment[cat])


def calculate_annual_depreciation(include_optional: bool = True, equipment: Mapping[str, List[EquipmentItem]] = EQUIPMENT) -> float:
    """Straight-line depreciation: ``Σ cost / depreciation_years`` per year."""
    return sum(
        item.cost / item.depreciation_years
        for cat in _categories(equipment, include_optional)
        for item in equipment[cat]
    )


def calculate_capital(include_optional: bool = True, equipment: Mapping[str, List[EquipmentItem]] = EQUIPMENT) -> CapitalSummary:
    by_category = {
        cat: sum(item.cost for item in equipment[cat]) for cat in _categories(equipment, include_optional)
    }
    return CapitalSummary(
        startup_cost=calculate_startup_cost(include_optional, equipment),
        annual_depreciation=calculate_annual_depreciation(include_optional, equipment),
        by_category=by_category,
        include_optional=include_optional,
    )


def setup_cost_total(items: Iterable[SetupCost] = SETUP_COSTS) -> float:
    return sum(i.cost for i in items)


def annual_projection(
    monthly_revenue: float,
    subscription_revenue: float,
    monthly_hours: float,
    collection_hours: float,
    active_months: int = ACTIVE_MONTHS,
    winter_months: int = WINTER_MONTHS,
) -> AnnualProjection:
    """Project a year from the monthly snapshot.

    During the active season every stream and task runs.  In winter only
    subscriptions are billed and only the collection route is worked.

    Returns
    -------
    AnnualProjection
        Annual revenue, hours and the resulting hourly rate (zero when no
        hours are worked).
    """
    revenue = monthly_revenue * active_months + subscription_revenue * winter_months
    hours = monthly_hours * active_months + collection_hours * winter_months
    rate = revenue / hours if hours > 0 else 0.0
    return AnnualProjection(
        active_months=active_months,
        winter_months=winter_months,
        revenue=revenue,
        hours=hours,
        hourly_rate=rate,
    )
