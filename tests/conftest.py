"""Shared fixtures: headless Matplotlib and a small on-disk data directory."""

from __future__ import annotations

from pathlib import Path

import matplotlib

matplotlib.use("Agg")

import pytest  # noqa: E402


RECOMMENDATIONS_CSV = """Ticker,momentum_mean,avg_corr_mst,degree,score,label
AAPL,0.02,0.55,2,0.91,BUY
MSFT,-0.03,0.40,x,0.12,AVOID
TCS.NS,abc,0.10,1,0.95,HOLD
GOOG,0.01,0.30,1,0.50,HOLD
ITC.NS,0.04,0.20,1,0.70,BUY
"""

CORR_CSV = """Ticker,AAPL,MSFT,TCS.NS,GOOG
AAPL,1,0.8,-0.9,0.1
MSFT,0.8,1,0.2,oops
TCS.NS,-0.9,0.2,1,0.3
GOOG,0.1,0,0.3,1
"""

MST_EDGES_CSV = """u,v,corr,distance
AAPL,MSFT,0.8,0.63
AAPL,TCS.NS,-0.9,
TCS.NS,GOOG,0.3,1.18
"""

RETURNS_CSV = """Date,AAPL,TCS.NS
2024-01-01,0.01,0.02
2024-01-02,-0.01,
"""

PRICE_CSV = """Price,Close,High,Low,Open,Volume
Ticker,TCS.NS,TCS.NS,TCS.NS,TCS.NS,TCS.NS
Date,,,,,
2024-01-01,100.5,101,99,100,1000
2024-01-02,0,1,1,1,10
,50,51,49,50,1
2024-01-03,102,103,101,101.5,900
"""


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    d = tmp_path / "data"
    d.mkdir()
    (d / "recommendations.csv").write_text(RECOMMENDATIONS_CSV, encoding="utf-8")
    (d / "corr.csv").write_text(CORR_CSV, encoding="utf-8")
    (d / "mst_edges.csv").write_text(MST_EDGES_CSV, encoding="utf-8")
    (d / "returns.csv").write_text(RETURNS_CSV, encoding="utf-8")
    (d / "TCS.NS.csv").write_text(PRICE_CSV, encoding="utf-8")
    return d
