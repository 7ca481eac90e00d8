"""Tests for download helpers.

These tests ensure that parameter serialisation and results export work
correctly.  They do not interact with Streamlit's download buttons but
verify that the JSON and CSV are well‑formed.
"""

import json

from compost_core.calculator import calculate_full_model, task_breakdown_frame
from compost_core.params import DEFAULTS, InputParams, apply_input
from compost_core.utils import model_summary, model_to_frame, params_hash


def test_params_json_roundtrip():
    params = InputParams()
    data = json.loads(params.model_dump_json())
    params2 = InputParams.model_validate_json(json.dumps(data))
    assert params == params2


def test_params_hash_is_stable():
    assert params_hash(InputParams()) == params_hash(InputParams())
    assert params_hash(DEFAULTS) != params_hash(apply_input(DEFAULTS, households=16))


def test_model_csv_export():
    df = model_to_frame(calculate_full_model(DEFAULTS))
    csv_str = df.to_csv(index=False)
    assert csv_str.splitlines()[0] == "metric,value"
    values = dict(zip(df["metric"], df["value"]))
    assert values["revenue.total"] == 4425
    assert values["params.households"] == 15


def test_task_csv_export():
    csv_str = task_breakdown_frame("composting", 15).to_csv(index=False)
    first_line = csv_str.splitlines()[0]
    assert "name" in first_line and "hours_per_month" in first_line
    assert len(csv_str.splitlines()) == 1 + 9


def test_model_summary():
    summary = model_summary(calculate_full_model(DEFAULTS))
    assert summary["revenue"] == 4425
    assert summary["annual_revenue"] > summary["revenue"]
