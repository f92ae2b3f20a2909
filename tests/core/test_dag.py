"""Tests for the declared causal graph and generation-order checks."""

from __future__ import annotations

import pytest

from pnc_simulator.core.dag import (
    CAUSAL_GRAPH,
    GENERATION_ORDER,
    PIPELINE_ORDER,
    topological_order,
    validate_order,
)
from pnc_simulator.core.errors import DagOrderError


def test_pipeline_order_is_consistent_with_declared_graph() -> None:
    validate_order(PIPELINE_ORDER)


def test_graph_covers_about_thirty_variables() -> None:
    assert len(CAUSAL_GRAPH) >= 30
    assert set(PIPELINE_ORDER) == set(CAUSAL_GRAPH)


def test_outcome_is_the_sink_with_six_parents() -> None:
    parents = CAUSAL_GRAPH["received_comprehensive_pnc"]
    assert len(parents) == 6
    assert all("received_comprehensive_pnc" not in p for p in CAUSAL_GRAPH.values())


def test_swapping_parent_and_child_is_rejected() -> None:
    order = list(PIPELINE_ORDER)
    i, j = order.index("religion"), order.index("cultural_orientation")
    order[i], order[j] = order[j], order[i]

    with pytest.raises(DagOrderError, match="cultural_orientation"):
        validate_order(order)


def test_risk_aversion_before_risk_profile_is_rejected() -> None:
    order = [name for name in PIPELINE_ORDER if name != "risk_aversion"]
    order.insert(order.index("risk_profile"), "risk_aversion")

    with pytest.raises(DagOrderError, match="risk_profile"):
        validate_order(order)


def test_missing_and_duplicated_variables_are_rejected() -> None:
    with pytest.raises(DagOrderError, match="never generated"):
        validate_order(PIPELINE_ORDER[:-1])
    with pytest.raises(DagOrderError, match="more than once"):
        validate_order(PIPELINE_ORDER + ("income",))


def test_cycle_is_detected() -> None:
    with pytest.raises(DagOrderError, match="cycle"):
        validate_order(["a", "b"], graph={"a": ("b",), "b": ("a",)})


def test_unknown_parent_is_detected() -> None:
    with pytest.raises(DagOrderError, match="unknown parent"):
        validate_order(["a"], graph={"a": ("ghost",)})


def test_topological_order_respects_every_edge() -> None:
    order = topological_order()
    position = {name: i for i, name in enumerate(order)}

    for node, parents in CAUSAL_GRAPH.items():
        for parent in parents:
            assert position[parent] < position[node]


def test_generation_order_excludes_upstream_stages() -> None:
    assert "state" not in GENERATION_ORDER
    assert "income_reported" not in GENERATION_ORDER
