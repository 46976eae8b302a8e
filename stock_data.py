#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
CSV data layer for StockGraphix.

Reads the tables produced by the offline MST / recommendation pipeline:

* ``recommendations.csv``  Ticker, momentum_mean, avg_corr_mst, degree, score, label
* ``corr.csv``             square correlation matrix, first column ``Ticker``
* ``mst_edges.csv``        u, v, corr, distance
* ``returns.csv``          Date + one daily-return column per ticker
* ``<TICKER>.csv``         price history with three header lines
                           (Price/Ticker/Date), then Date,Close,High,Low,Open,Volume

Each file is looked up in a list of candidate directories. A missing or empty
file leaves its section empty; it never aborts the whole load. Unparseable
numbers in the recommendation, correlation and edge tables become 0.

Besides loading, ``StockData`` answers the dashboard's questions: substring
search, top correlated tickers, trending picks and market-trend aggregates.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, IO, Iterable, List, Optional, Sequence, Tuple, Union

import numpy as np
import pandas as pd

from mst_graph import Classification, Edge

Source = Union[str, Path, IO[str]]
LogFn = Callable[[str], None]

DATA_DIR_CANDIDATES: Tuple[str, ...] = ("data", "./data", "../data")

STOCK_NAMES: Dict[str, str] = {
    "AAPL": "Apple Inc.",
    "MSFT": "Microsoft Corporation",
    "GOOG": "Alphabet Inc.",
    "AMZN": "Amazon.com Inc.",
    "PAYTM.NS": "Paytm",
    "HDFCBANK.NS": "HDFC Bank",
    "ICICIBANK.NS": "ICICI Bank",
    "RELIANCE.NS": "Reliance Industries",
    "ITC.NS": "ITC Limited",
    "TCS.NS": "Tata Consultancy Services",
}

US_TICKERS: Tuple[str, ...] = ("AAPL", "MSFT", "GOOG", "AMZN")
INDIAN_TICKERS: Tuple[str, ...] = (
    "PAYTM.NS", "HDFCBANK.NS", "ICICIBANK.NS", "RELIANCE.NS", "ITC.NS", "TCS.NS",
)

PRICE_WINDOW = 130          # ~6 months of trading days
TREND_WINDOW = 30
TRENDING_COUNT = 4
PORTFOLIO_START = 10000.0
BASE_MOCK_PRICE = 100.0
BSE_FACTOR = 0.999


def _noop(_msg: str) -> None:
    pass


# --------------------------- Records ---------------------------

@dataclass(frozen=True)
class Recommendation:
    ticker: str
    momentum: float
    avg_corr: float
    degree: int
    score: float
    label: str


@dataclass(frozen=True)
class PriceBar:
    date: str
    close: float
    high: float
    low: float
    open: float


@dataclass(frozen=True)
class MarketSummary:
    us_avg_pct: float
    indian_avg_pct: float
    portfolio_value: float


@dataclass(frozen=True)
class TrendSeries:
    dates: List[str]
    us_cumulative_pct: List[float]
    indian_cumulative_pct: List[float]
    portfolio_values: List[float]


# --------------------------- Parsing ---------------------------

def _numbers(col: pd.Series) -> pd.Series:
    """Lenient float parse: anything unparseable or non-finite becomes 0."""
    values = pd.to_numeric(col.astype(str).str.strip(), errors="coerce")
    return values.replace([np.inf, -np.inf], np.nan).fillna(0.0)


def read_table(source: Source) -> pd.DataFrame:
    """Read a headered CSV as stripped strings (no NA conversion)."""
    df = pd.read_csv(source, dtype=str, keep_default_na=False, skip_blank_lines=True)
    df.columns = [str(c).strip() for c in df.columns]
    return df.fillna("").apply(lambda c: c.astype(str).str.strip())


def parse_recommendations(df: pd.DataFrame) -> List[Recommendation]:
    if df.empty:
        return []

    def col(name: str) -> pd.Series:
        if name in df.columns:
            return df[name]
        return pd.Series([""] * len(df), index=df.index)

    momentum = _numbers(col("momentum_mean"))
    avg_corr = _numbers(col("avg_corr_mst"))
    degree = _numbers(col("degree")).astype(int)
    score = _numbers(col("score"))
    return [
        Recommendation(
            ticker=str(t), momentum=float(m), avg_corr=float(a),
            degree=int(d), score=float(s), label=str(lbl),
        )
        for t, m, a, d, s, lbl in zip(col("Ticker"), momentum, avg_corr, degree, score, col("label"))
    ]


def parse_correlations(df: pd.DataFrame) -> Dict[str, Dict[str, float]]:
    """``{row_ticker: {col_ticker: corr}}``; tickers are the headers after the first."""
    if df.empty or len(df.columns) < 2:
        return {}
    key = df.columns[0]
    tickers = list(df.columns[1:])
    out: Dict[str, Dict[str, float]] = {t: {} for t in tickers}
    values = {t: _numbers(df[t]) for t in tickers}
    for i, row_ticker in enumerate(df[key]):
        out[str(row_ticker)] = {t: float(values[t].iloc[i]) for t in tickers}
    return out


def parse_mst_edges(df: pd.DataFrame, log: LogFn = _noop) -> List[Edge]:
    """Edges from ``u, v, corr, distance``; without ``u``/``v`` there is no graph."""
    if df.empty:
        return []
    missing = [c for c in ("u", "v") if c not in df.columns]
    if missing:
        log(f"[load] warning: mst_edges.csv has no {'/'.join(missing)} column; graph skipped")
        return []
    corr = _numbers(df["corr"]) if "corr" in df.columns else pd.Series(0.0, index=df.index)
    dist = _numbers(df["distance"]) if "distance" in df.columns else pd.Series(0.0, index=df.index)
    return [
        Edge(source=str(u), target=str(v), correlation=float(c), distance=float(d))
        for u, v, c, d in zip(df["u"], df["v"], corr, dist)
    ]


def parse_returns(df: pd.DataFrame) -> pd.DataFrame:
    """Keep ``Date`` as text, make every other column numeric (NaN when missing)."""
    out = df.copy()
    for c in out.columns:
        if c != "Date":
            out[c] = pd.to_numeric(out[c], errors="coerce")
    return out


def parse_price_history(source: Source) -> List[PriceBar]:
    """Parse a per-ticker price file.

    Rows need Date, Close, High, Low and Open; rows with an empty date or a
    non-positive close are dropped.
    """
    try:
        df = pd.read_csv(
            source, skiprows=3, header=None,
            names=["Date", "Close", "High", "Low", "Open", "Volume"],
            dtype=str, keep_default_na=False, on_bad_lines="skip",
        )
    except pd.errors.EmptyDataError:
        return []
    if df.empty:
        return []
    df = df[df["Open"].notna()]
    dates = df["Date"].astype(str).str.strip()
    close, high, low, opn = (_numbers(df[c]) for c in ("Close", "High", "Low", "Open"))
    keep = (dates != "") & (close > 0)
    return [
        PriceBar(date=d, close=float(c), high=float(h), low=float(lo), open=float(o))
        for d, c, h, lo, o in zip(dates[keep], close[keep], high[keep], low[keep], opn[keep])
    ]


# --------------------------- Loading ---------------------------

def locate_file(filename: str, candidates: Sequence[Union[str, Path]] = DATA_DIR_CANDIDATES,
                log: LogFn = _noop) -> Optional[Path]:
    """First existing ``<candidate>/<filename>``, or None."""
    for base in candidates:
        path = Path(base) / filename
        log(f"[load] trying {path}")
        if path.is_file():
            return path
    log(f"[load] {filename} not found in any of: {', '.join(str(c) for c in candidates)}")
    return None


def _load_table(filename: str, candidates: Sequence[Union[str, Path]], log: LogFn) -> pd.DataFrame:
    path = locate_file(filename, candidates, log)
    if path is None:
        return pd.DataFrame()
    try:
        df = read_table(path)
    except pd.errors.EmptyDataError:
        log(f"[load] {path} is empty")
        return pd.DataFrame()
    log(f"[load] {path}: {len(df)} rows")
    return df


def load_all(candidates: Sequence[Union[str, Path]] = DATA_DIR_CANDIDATES,
             log: Optional[LogFn] = None) -> "StockData":
    """Load every dashboard table; missing files leave their section empty."""
    log = log or _noop
    recs = parse_recommendations(_load_table("recommendations.csv", candidates, log))
    corr = parse_correlations(_load_table("corr.csv", candidates, log))
    edges = parse_mst_edges(_load_table("mst_edges.csv", candidates, log), log)
    returns = parse_returns(_load_table("returns.csv", candidates, log))

    for what, n in (("recommendations", len(recs)), ("MST edges", len(edges)),
                    ("days of returns", len(returns))):
        log(f"[load] {n} {what}" if n else f"[load] warning: no {what} loaded")

    return StockData(
        recommendations=recs, correlations=corr, mst_edges=edges,
        returns=returns, candidates=tuple(candidates),
    )


# --------------------------- Queries ---------------------------

@dataclass
class StockData:
    recommendations: List[Recommendation] = field(default_factory=list)
    correlations: Dict[str, Dict[str, float]] = field(default_factory=dict)
    mst_edges: List[Edge] = field(default_factory=list)
    returns: pd.DataFrame = field(default_factory=pd.DataFrame)
    names: Dict[str, str] = field(default_factory=lambda: dict(STOCK_NAMES))
    candidates: Tuple[Union[str, Path], ...] = DATA_DIR_CANDIDATES

    def name_of(self, ticker: str) -> str:
        return self.names.get(ticker, ticker)

    def find(self, ticker: str) -> Optional[Recommendation]:
        return next((r for r in self.recommendations if r.ticker == ticker), None)

    def classifications(self) -> Dict[str, Classification]:
        """Per-ticker label + momentum for the network view."""
        return {r.ticker: Classification(r.label, r.momentum) for r in self.recommendations}

    def search(self, query: str) -> Optional[Recommendation]:
        """First recommendation whose ticker or company name contains ``query``."""
        q = query.strip().upper()
        if not q:
            return None
        for rec in self.recommendations:
            if q in rec.ticker.upper() or q in self.names.get(rec.ticker, "").upper():
                return rec
        return None

    def top_correlated(self, ticker: str, n: int = 5) -> List[Tuple[str, float]]:
        """Other tickers ordered by absolute correlation, strongest first."""
        row = self.correlations.get(ticker, {})
        pairs = [(t, c) for t, c in row.items() if t != ticker and not np.isnan(c)]
        pairs.sort(key=lambda p: abs(p[1]), reverse=True)
        return pairs[:n]

    def trending(self, n: int = TRENDING_COUNT) -> List[Recommendation]:
        return sorted(self.recommendations, key=lambda r: r.score, reverse=True)[:n]

    def _return_columns(self, tickers: Optional[Iterable[str]] = None) -> List[str]:
        cols = [c for c in self.returns.columns if c != "Date"]
        if tickers is None:
            return cols
        wanted = set(tickers)
        return [c for c in cols if c in wanted]

    def _mean_pct(self, tickers: Iterable[str]) -> float:
        cols = self._return_columns(tickers)
        if not cols:
            return 0.0
        vals = self.returns[cols].to_numpy(dtype=float).ravel()
        vals = vals[~np.isnan(vals)]
        return float(vals.mean() * 100) if vals.size else 0.0

    def _daily_mean(self, frame: pd.DataFrame, tickers: Optional[Iterable[str]] = None) -> pd.Series:
        cols = self._return_columns(tickers)
        if not cols:
            return pd.Series(np.nan, index=frame.index)
        return frame[cols].mean(axis=1, skipna=True)

    def market_summary(self) -> Optional[MarketSummary]:
        """Average US / Indian returns and an equal-weight portfolio from 10000."""
        if self.returns.empty:
            return None
        daily = self._daily_mean(self.returns).dropna()
        value = PORTFOLIO_START * float((1.0 + daily).prod())
        return MarketSummary(
            us_avg_pct=self._mean_pct(US_TICKERS),
            indian_avg_pct=self._mean_pct(INDIAN_TICKERS),
            portfolio_value=value,
        )

    def market_trend_series(self, window: int = TREND_WINDOW) -> Optional[TrendSeries]:
        """Cumulative US / Indian returns (%) and portfolio value over the last days."""
        if self.returns.empty:
            return None
        tail = self.returns.tail(window)
        us = self._daily_mean(tail, US_TICKERS).fillna(0.0).cumsum() * 100
        india = self._daily_mean(tail, INDIAN_TICKERS).fillna(0.0).cumsum() * 100
        portfolio = (1.0 + self._daily_mean(tail).fillna(0.0)).cumprod() * PORTFOLIO_START
        dates = [str(d) for d in tail["Date"]] if "Date" in tail.columns else [str(i) for i in tail.index]
        return TrendSeries(dates, us.tolist(), india.tolist(), portfolio.tolist())

    def price_history(self, ticker: str, log: Optional[LogFn] = None,
                      window: int = PRICE_WINDOW) -> List[PriceBar]:
        """Last ``window`` bars of ``<ticker>.csv``; empty when unavailable."""
        log = log or _noop
        path = locate_file(f"{ticker}.csv", self.candidates, log)
        if path is None:
            log(f"[load] could not load price data for {ticker}")
            return []
        bars = parse_price_history(path)
        if not bars:
            log(f"[load] no valid price data for {ticker}")
        return bars[-window:]


def mock_quote(rec: Recommendation) -> Tuple[float, float]:
    """Demo (NSE, BSE) prices derived from momentum."""
    nse = round(BASE_MOCK_PRICE * (1.0 + rec.momentum), 2)
    return nse, round(nse * BSE_FACTOR, 2)


def correlation_color(corr: float, style_pos: str = "#3fb950",
                      style_neg: str = "#f85149", neutral: str = "#8b949e") -> str:
    if corr > 0.5:
        return style_pos
    if corr < -0.5:
        return style_neg
    return neutral
