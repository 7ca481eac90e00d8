# MIT License
from __future__ import annotations
import hashlib, json
from typing import Any, Dict, List, Tuple

import pandas as pd

from .calculator import DerivedModel
from .params import InputParams


def params_hash(params: InputParams) -> str:
    """Compute a stable hash for a parameter set.

    Serialises the parameters to JSON (with sorted keys) and computes a
    SHA256 hash.  Used to key cached model snapshots.

    Parameters
    ----------
    params:
        InputParams instance.

    Returns
    -------
    str
        Hexadecimal string representation of the hash.
    """
    payload = json.dumps(params.model_dump(mode="json"), sort_keys=True).encode("utf-8")
    return hashlib.sha256(payload).hexdigest()


def _flatten(prefix: str, value: Any, out: List[Tuple[str, Any]]) -> None:
    if isinstance(value, dict):
        for k, v in value.items():
            _flatten(f"{prefix}.{k}" if prefix else str(k), v, out)
    else:
        out.append((prefix, value))


def model_to_frame(model: DerivedModel) -> pd.DataFrame:
    """Flatten a derived model into a two-column ``metric``/``value`` table."""
    rows: List[Tuple[str, Any]] = []
    _flatten("", model.model_dump(mode="json"), rows)
    return pd.DataFrame(rows, columns=["metric", "value"])


def model_summary(model: DerivedModel) -> Dict[str, float]:
    """Headline figures shown at the top of the dashboard."""
    return {
        "revenue": model.revenue.total,
        "hours": model.labor.total,
        "hourly_rate": model.hourly_rate,
        "annual_revenue": model.annual.revenue,
        "annual_rate": model.annual.hourly_rate,
    }
