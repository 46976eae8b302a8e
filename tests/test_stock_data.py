"""Tests for CSV loading and the dashboard queries built on it."""

from __future__ import annotations

import io
from pathlib import Path

import pytest

from mst_graph import Classification, Edge
from stock_data import (
    Recommendation,
    correlation_color,
    load_all,
    locate_file,
    mock_quote,
    parse_price_history,
    parse_recommendations,
    read_table,
)

from conftest import PRICE_CSV


@pytest.fixture
def data(data_dir: Path):
    return load_all([data_dir])


def test_recommendations_parse_with_zero_defaults(data) -> None:
    by_ticker = {r.ticker: r for r in data.recommendations}
    assert by_ticker["AAPL"] == Recommendation("AAPL", 0.02, 0.55, 2, 0.91, "BUY")
    assert by_ticker["TCS.NS"].momentum == 0.0
    assert by_ticker["MSFT"].degree == 0
    assert [r.ticker for r in data.recommendations] == ["AAPL", "MSFT", "TCS.NS", "GOOG", "ITC.NS"]


def test_recommendations_tolerate_missing_columns() -> None:
    recs = parse_recommendations(read_table(io.StringIO("Ticker,label\nAAPL,BUY\n")))
    assert recs == [Recommendation("AAPL", 0.0, 0.0, 0, 0.0, "BUY")]


def test_correlation_matrix(data) -> None:
    assert data.correlations["AAPL"]["TCS.NS"] == -0.9
    assert data.correlations["MSFT"]["GOOG"] == 0.0


def test_mst_edges_keep_supplied_values(data) -> None:
    assert data.mst_edges == [
        Edge("AAPL", "MSFT", 0.8, 0.63),
        Edge("AAPL", "TCS.NS", -0.9, 0.0),
        Edge("TCS.NS", "GOOG", 0.3, 1.18),
    ]


def test_classifications_for_network(data) -> None:
    classes = data.classifications()
    assert classes["AAPL"] == Classification("BUY", 0.02)
    assert classes["MSFT"] == Classification("AVOID", -0.03)


def test_missing_files_leave_sections_empty(tmp_path: Path) -> None:
    messages = []
    data = load_all([tmp_path / "nowhere"], log=messages.append)
    assert data.recommendations == [] and data.mst_edges == [] and data.correlations == {}
    assert data.returns.empty
    assert data.market_summary() is None
    assert data.market_trend_series() is None
    assert any("mst_edges.csv not found" in m for m in messages)
    assert any("warning: no MST edges" in m for m in messages)


def test_locate_file_tries_candidates_in_order(tmp_path: Path, data_dir: Path) -> None:
    tried = []
    found = locate_file("corr.csv", [tmp_path / "first", data_dir], log=tried.append)
    assert found == data_dir / "corr.csv"
    assert "first" in tried[0]


def test_search_by_ticker_and_name(data) -> None:
    assert data.search("aapl").ticker == "AAPL"
    assert data.search("  tcs ").ticker == "TCS.NS"
    assert data.search("alphabet").ticker == "GOOG"
    assert data.search("NOPE") is None
    assert data.search("   ") is None


def test_search_returns_first_match_in_file_order(data) -> None:
    # "S" appears in MSFT before TCS.NS
    assert data.search("s").ticker == "MSFT"


def test_top_correlated_orders_by_absolute_value(data) -> None:
    assert data.top_correlated("AAPL") == [("TCS.NS", -0.9), ("MSFT", 0.8), ("GOOG", 0.1)]
    assert data.top_correlated("AAPL", n=1) == [("TCS.NS", -0.9)]
    assert data.top_correlated("UNKNOWN") == []


def test_trending_is_top_four_by_score(data) -> None:
    assert [r.ticker for r in data.trending()] == ["TCS.NS", "AAPL", "ITC.NS", "GOOG"]


def test_market_summary(data) -> None:
    summary = data.market_summary()
    assert summary.us_avg_pct == pytest.approx(0.0)
    assert summary.indian_avg_pct == pytest.approx(2.0)
    assert summary.portfolio_value == pytest.approx(10000 * 1.015 * 0.99)


def test_market_trend_series(data) -> None:
    series = data.market_trend_series()
    assert series.dates == ["2024-01-01", "2024-01-02"]
    assert series.us_cumulative_pct == pytest.approx([1.0, 0.0])
    assert series.indian_cumulative_pct == pytest.approx([2.0, 2.0])
    assert series.portfolio_values == pytest.approx([10150.0, 10048.5])


def test_market_trend_series_window(data) -> None:
    assert data.market_trend_series(window=1).dates == ["2024-01-02"]


def test_price_history_drops_invalid_rows() -> None:
    bars = parse_price_history(io.StringIO(PRICE_CSV))
    assert [b.date for b in bars] == ["2024-01-01", "2024-01-03"]
    assert bars[0].close == 100.5 and bars[0].high == 101 and bars[0].low == 99 and bars[0].open == 100
    assert bars[1].open == 101.5


def test_price_history_short_file_is_empty() -> None:
    assert parse_price_history(io.StringIO("Price,Close\nTicker,X\nDate,\n")) == []


def test_price_history_lookup(data) -> None:
    messages = []
    assert [b.date for b in data.price_history("TCS.NS")] == ["2024-01-01", "2024-01-03"]
    assert [b.date for b in data.price_history("TCS.NS", window=1)] == ["2024-01-03"]
    assert data.price_history("AAPL", log=messages.append) == []
    assert any("could not load price data for AAPL" in m for m in messages)


def test_mock_quote() -> None:
    rec = Recommendation("X", 0.02, 0.0, 0, 0.0, "BUY")
    assert mock_quote(rec) == pytest.approx((102.0, 101.9))


def test_correlation_color_thresholds() -> None:
    assert correlation_color(0.6) == "#3fb950"
    assert correlation_color(-0.6) == "#f85149"
    assert correlation_color(0.5) == "#8b949e"


def test_mst_edges_with_unknown_headers_keep_other_tables(data_dir: Path) -> None:
    (data_dir / "mst_edges.csv").write_text(
        "source,target,corr,distance\nAAPL,MSFT,0.8,0.63\n", encoding="utf-8"
    )
    messages = []
    data = load_all([data_dir], log=messages.append)
    assert data.mst_edges == []
    assert len(data.recommendations) == 5
    assert data.correlations["AAPL"]["MSFT"] == 0.8
    assert not data.returns.empty
    assert any("no u/v column" in m for m in messages)


@pytest.mark.parametrize("cell", ["inf", "-inf", "1e400"])
def test_non_finite_numbers_become_zero(cell: str) -> None:
    table = read_table(io.StringIO(
        "Ticker,momentum_mean,avg_corr_mst,degree,score,label\n"
        f"AAPL,{cell},0.5,{cell},{cell},BUY\n"
    ))
    assert parse_recommendations(table) == [Recommendation("AAPL", 0.0, 0.5, 0, 0.0, "BUY")]
