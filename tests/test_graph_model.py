"""Tests for the edge-derived node set and the static circular layout."""

from __future__ import annotations

import math

import pytest

from mst_graph import Edge, GraphModel, edge_weight, format_momentum, short_label

CX, CY, R = 400.0, 250.0, 175.0   # default 800 x 500 surface, radius 0.35 * 500


def _edges(*pairs):
    return [Edge(u, v, correlation=0.5, distance=0.5) for u, v in pairs]


def test_nodes_are_unique_endpoints_in_first_seen_order() -> None:
    model = GraphModel.build(_edges(("B", "A"), ("A", "C"), ("C", "B"), ("A", "B"), ("D", "D")))
    assert model.nodes == ["B", "A", "C", "D"]
    assert len(set(model.nodes)) == len(model.nodes)
    assert set(model.positions) == set(model.nodes)


def test_edges_are_kept_verbatim() -> None:
    edges = _edges(("A", "B"), ("A", "B"))
    model = GraphModel.build(edges)
    assert model.edges == edges
    assert model.degree("A") == 2
    assert model.degree("missing") == 0


@pytest.mark.parametrize("n", [2, 3, 5, 10])
def test_positions_lie_on_circle_with_uniform_spacing(n: int) -> None:
    names = [f"N{i}" for i in range(n)]
    model = GraphModel.build(_edges(*zip(names, names[1:] + names[:1])))
    assert model.nodes == names

    seen = set()
    for i, node in enumerate(model.nodes):
        pos = model.positions[node]
        assert math.hypot(pos.x - CX, pos.y - CY) == pytest.approx(R)
        angle = math.atan2(pos.y - CY, pos.x - CX) % (2 * math.pi)
        assert angle == pytest.approx((2 * math.pi * i / n) % (2 * math.pi), abs=1e-9)
        seen.add((round(pos.x, 6), round(pos.y, 6)))
    assert len(seen) == n


def test_three_nodes_are_120_degrees_apart() -> None:
    model = GraphModel.build([Edge("A", "B", 0.8, 0.3), Edge("B", "C", -0.6, 0.5)])
    angles = [math.atan2(model.positions[n].y - CY, model.positions[n].x - CX) for n in model.nodes]
    for a, b in zip(angles, angles[1:]):
        diff = (b - a) % (2 * math.pi)
        assert diff == pytest.approx(2 * math.pi / 3)


def test_single_node_sits_at_reference_angle() -> None:
    model = GraphModel.build([Edge("SOLO", "SOLO", 1.0, 0.0)])
    assert model.nodes == ["SOLO"]
    pos = model.positions["SOLO"]
    assert (pos.x, pos.y) == pytest.approx((CX + R, CY))


def test_empty_edge_list_gives_empty_model() -> None:
    model = GraphModel.build([])
    assert model.is_empty()
    assert model.nodes == []
    assert model.positions == {}


def test_custom_surface_size_and_radius() -> None:
    model = GraphModel.build(_edges(("A", "B")), width=200, height=100, radius_fraction=0.5)
    assert (model.positions["A"].x, model.positions["A"].y) == pytest.approx((150.0, 50.0))
    assert (model.positions["B"].x, model.positions["B"].y) == pytest.approx((50.0, 50.0))


def test_edge_weight_prefers_distance() -> None:
    assert edge_weight(Edge("A", "B", correlation=0.42, distance=0.7)) == 0.7


@pytest.mark.parametrize("distance", [0.0, None, float("nan")])
def test_edge_weight_falls_back_to_correlation(distance) -> None:
    assert edge_weight(Edge("A", "B", correlation=0.42, distance=distance)) == 0.42


def test_edge_weight_none_when_nothing_numeric() -> None:
    assert edge_weight(Edge("A", "B", correlation=float("nan"), distance=0.0)) is None


def test_short_label_strips_market_suffix() -> None:
    assert short_label("TCS.NS") == "TCS"
    assert short_label("RELIANCE.BO") == "RELIANCE"
    assert short_label("AAPL") == "AAPL"
    assert short_label("NS.NSE") == "NS.NSE"


def test_format_momentum_sign() -> None:
    assert format_momentum(0.02) == "+2.00%"
    assert format_momentum(0.0) == "+0.00%"
    assert format_momentum(-0.03) == "-3.00%"


def test_hub_is_highest_degree_node() -> None:
    model = GraphModel.build(_edges(("A", "B"), ("B", "C"), ("B", "D"), ("C", "D")))
    assert model.hub() == "B"
    assert GraphModel.build(_edges(("X", "Y"))).hub() == "X"
    assert GraphModel.build([]).hub() is None
