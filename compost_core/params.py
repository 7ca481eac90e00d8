# MIT License
"""Input parameters for the compost coordinator model.

The model is driven by a single flat :class:`InputParams` object built
from the dashboard sliders.  It is defined with
[`pydantic.BaseModel`](https://docs.pydantic.dev/) so that it can be
serialised to JSON, hashed for caching and validated.

Parameter changes never mutate an existing object.  Instead
:func:`apply_input` takes the previous parameter set and the raw values
coming from the controls and returns a new, range-clamped set.
"""
from __future__ import annotations
import math
from typing import Any, Dict, Mapping, Optional
from pydantic import BaseModel, ConfigDict, Field


class SliderRange(BaseModel):
    """Numeric range of one input control."""

    model_config = ConfigDict(frozen=True)

    min: float
    max: float
    step: float = 1.0

    def clamp(self, value: float) -> float:
        return min(max(value, self.min), self.max)


class InputParams(BaseModel):
    """The complete set of user-adjustable levers.

    Attributes
    ----------
    households:
        Number of participating households.
    compost_price:
        Sale price of finished compost (USD per gallon).
    tea_price:
        Sale price of worm tea concentrate (USD per gallon).
    subscription_price:
        Monthly pickup subscription paid by each household (USD).
    giveback_per_year:
        Gallons of finished compost returned to each household per year.
    include_lawn_service:
        Whether the optional leaf/lawn service equipment is part of the
        capital plan.
    """

    model_config = ConfigDict(frozen=True)

    households: int = Field(15, ge=0, description="Participating households")
    compost_price: float = Field(20.0, ge=0.0, description="Compost price (USD/gal)")
    tea_price: float = Field(15.0, ge=0.0, description="Worm tea concentrate price (USD/gal)")
    subscription_price: float = Field(25.0, ge=0.0, description="Subscription price (USD/household/month)")
    giveback_per_year: float = Field(10.0, ge=0.0, description="Give-back (gal/household/year)")
    include_lawn_service: bool = Field(True, description="Include the optional lawn service equipment")


RANGES: Dict[str, SliderRange] = {
    "households": SliderRange(min=5, max=50, step=1),
    "compost_price": SliderRange(min=10, max=40, step=1),
    "tea_price": SliderRange(min=5, max=25, step=1),
    "subscription_price": SliderRange(min=15, max=35, step=1),
    "giveback_per_year": SliderRange(min=5, max=25, step=1),
}

DEFAULTS = InputParams()


_TRUE_STRINGS = {"true", "yes", "on", "1"}
_FALSE_STRINGS = {"false", "no", "off", "0"}


def _coerce_number(value: Any) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return math.nan
    return number


def _coerce_flag(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        text = value.strip().lower()
        if text in _TRUE_STRINGS:
            return True
        if text in _FALSE_STRINGS:
            return False
    return None


def apply_input(previous: InputParams, raw: Optional[Mapping[str, Any]] = None, **changes: Any) -> InputParams:
    """Return a new parameter set with ``raw`` values applied to ``previous``.

    Numeric values are clamped into :data:`RANGES`; the household count
    is rounded to the nearest integer.  Keys that are not parameters are
    ignored, as are numeric values that cannot be parsed and flags that
    are neither booleans nor "true"/"false"-like strings, so a stray
    control event can never produce an invalid model input.

    Parameters
    ----------
    previous:
        The current parameter set.
    raw:
        Mapping of field name to raw control value.  Keyword arguments
        are merged on top of it.

    Returns
    -------
    InputParams
        A new, validated parameter set.
    """
    updates: Dict[str, Any] = dict(raw or {})
    updates.update(changes)
    data = previous.model_dump()
    for key, value in updates.items():
        if key not in data:
            continue
        if key == "include_lawn_service":
            flag = _coerce_flag(value)
            if flag is not None:
                data[key] = flag
            continue
        number = _coerce_number(value)
        if not math.isfinite(number):
            continue
        rng = RANGES.get(key)
        number = rng.clamp(number) if rng is not None else max(number, 0.0)
        data[key] = int(round(number)) if key == "households" else number
    return InputParams(**data)
