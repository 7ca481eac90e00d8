"""Tests for the per-node diagram metrics."""

from compost_core.calculator import calculate_full_model
from compost_core.catalog import NODES
from compost_core.metrics import NODE_METRICS, node_metric, node_metrics
from compost_core.params import DEFAULTS, apply_input


def test_reference_labels():
    labels = node_metrics(calculate_full_model(DEFAULTS))
    assert labels["households"] == "15 homes"
    assert labels["collection"] == "16.0 hr/mo"
    assert labels["cardboard"] == "10.0 hr/mo"
    assert labels["delivery"] == "6.0 hr/mo"
    assert labels["stage1"] == "3-4 weeks"
    assert labels["stage4"] == "200 gal/mo"
    assert labels["tea"] == "20 gal/mo"
    assert labels["customers"] == "$4,425/mo"


def test_labels_follow_the_model():
    model = calculate_full_model(apply_input(DEFAULTS, households=30))
    assert node_metric("households", model) == "30 homes"
    assert node_metric("collection", model) == "32.0 hr/mo"


def test_unknown_node_has_no_metric():
    assert node_metric("nope", calculate_full_model(DEFAULTS)) is None


def test_metrics_only_name_catalog_nodes():
    assert set(NODE_METRICS) <= set(NODES)
