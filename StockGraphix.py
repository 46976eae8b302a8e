#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
StockGraphix (PyQt6): correlation-network dashboard for a small stock universe.

Key features:

* Loads the offline pipeline's CSV tables (recommendations, correlation matrix,
  MST edges, daily returns) in a background QThread; missing files are logged
  and leave their section empty.
* **MST network view**: static circular layout, edges weighted by distance (or
  correlation when no distance), nodes colored BUY / HOLD / AVOID.

  * Hovering a node enlarges it, highlights its edges and shows momentum + label.
  * Clicking the hovered node opens its detail panel.
  * Export the network figure to PNG / SVG.
* Trending cards: top picks by score; click a card to open its details.
* Search by ticker or company name (case-insensitive substring).
* Detail panel: mock NSE/BSE quote, 6-month price chart, analysis figures, top
  correlated tickers and a demo trading ticket (nothing is executed).
* Market trends: average US / Indian returns, equal-weight portfolio value and
  a 30-day cumulative chart.
* Log panel records loading, searches, selections, orders, exports and errors.

Run:
  pip install -e .
  stockgraphix [DATA_DIR]
"""

from __future__ import annotations

import sys
from datetime import datetime
from pathlib import Path
from typing import Callable, List, Optional, Sequence

import numpy as np

from PyQt6.QtCore import Qt, QObject, QThread, pyqtSignal
from PyQt6.QtWidgets import (
    QApplication,
    QMainWindow,
    QWidget,
    QVBoxLayout,
    QHBoxLayout,
    QGridLayout,
    QLineEdit,
    QPushButton,
    QLabel,
    QSpinBox,
    QDoubleSpinBox,
    QComboBox,
    QButtonGroup,
    QMessageBox,
    QPlainTextEdit,
    QProgressBar,
    QGroupBox,
    QFileDialog,
    QScrollArea,
)

from matplotlib.backends.backend_qtagg import FigureCanvasQTAgg
from matplotlib.figure import Figure
from matplotlib.ticker import FuncFormatter

from mst_graph import DEFAULT_STYLE, CorrelationNetwork, Edge, GraphStyle, format_momentum
from stock_data import (
    DATA_DIR_CANDIDATES,
    PriceBar,
    Recommendation,
    StockData,
    TrendSeries,
    correlation_color,
    load_all,
    mock_quote,
)
from trading_ticket import ORDER_TYPES, OrderTicket, TicketError, rupees

LogFn = Callable[[str], None]

EXAMPLE_TICKERS = "AAPL, MSFT, GOOG, AMZN, TCS.NS"


# --------------------------- Workers (QThread targets) -----------------

class DataWorker(QObject):
    """Background worker that reads every CSV table into a ``StockData``."""

    progress = pyqtSignal(int, str)     # percent, message
    message = pyqtSignal(str)           # log line
    finished = pyqtSignal(object)       # StockData
    failed = pyqtSignal(str)

    def __init__(self, candidates: Sequence[str]):
        super().__init__()
        self.candidates = list(candidates)

    def run(self) -> None:
        try:
            self.progress.emit(10, "Loading stock data...")
            data = load_all(self.candidates, log=self.message.emit)
            self.progress.emit(100, "Done.")
            self.finished.emit(data)
        except Exception as e:
            self.failed.emit(f"{type(e).__name__}: {e}")


# --------------------------- Canvases ---------------------------

class MplCanvas(FigureCanvasQTAgg):
    """A Matplotlib chart canvas embedded in Qt with mouse wheel zoom."""

    def __init__(self, parent: Optional[QWidget] = None, figsize=(6.0, 3.0)):
        fig = Figure(figsize=figsize, constrained_layout=True)
        super().__init__(fig)
        self.setParent(parent)
        self.ax = self.figure.add_subplot(111)
        self._zoom_factor = 1.2

    def reset_axes(self):
        """Drop every axes (twins included) and start with a fresh one."""
        self.figure.clear()
        self.ax = self.figure.add_subplot(111)
        return self.ax

    def wheelEvent(self, event):
        """Zoom the x axis keeping the mouse position as focal point."""
        if self.ax is None:
            return
        dpr = self.device_pixel_ratio
        x = event.position().x() * dpr
        # Qt y runs top-down, display coordinates bottom-up
        y = (self.height() - event.position().y()) * dpr
        try:
            xdata, _ = self.ax.transData.inverted().transform((x, y))
        except Exception:
            xlim = self.ax.get_xlim()
            xdata = (xlim[0] + xlim[1]) / 2

        xlim = self.ax.get_xlim()
        scale = 1 / self._zoom_factor if event.angleDelta().y() > 0 else self._zoom_factor
        self.ax.set_xlim([
            xdata - (xdata - xlim[0]) * scale,
            xdata + (xlim[1] - xdata) * scale,
        ])
        self.draw_idle()


class NetworkCanvas(FigureCanvasQTAgg):
    """Qt host for a ``CorrelationNetwork``: forwards pointer events to it.

    The figure follows the widget size while the network axes keep the logical
    surface's aspect ratio, so pointer positions go through the axes transform
    rather than a plain width/height rescale.
    """

    node_selected = pyqtSignal(str)

    def __init__(self, parent: Optional[QWidget] = None, style: GraphStyle = DEFAULT_STYLE):
        fig = Figure(figsize=(style.width / 100, style.height / 100), dpi=100,
                     facecolor=style.background)
        super().__init__(fig)
        self.setParent(parent)
        self.style = style
        self.network: Optional[CorrelationNetwork] = None
        self.setMouseTracking(True)
        self.setCursor(Qt.CursorShape.PointingHandCursor)
        self.setMinimumSize(400, 250)

    def set_network(self, edges: Sequence[Edge], classifications) -> None:
        """Tear down the previous view (if any) and mount a new one."""
        self.clear_network()
        self.network = CorrelationNetwork(
            self.figure, edges, classifications,
            on_select=self.node_selected.emit,
            on_repaint=self.draw_idle,
            style=self.style,
        )

    def clear_network(self) -> None:
        if self.network is not None:
            self.network.close()
            self.network = None
            self.draw_idle()

    def mouseMoveEvent(self, event):
        if self.network is not None:
            dpr = self.device_pixel_ratio
            pos = event.position()
            # Qt y runs top-down, display coordinates bottom-up
            self.network.pointer_move_display(pos.x() * dpr, (self.height() - pos.y()) * dpr)
        super().mouseMoveEvent(event)

    def leaveEvent(self, event):
        if self.network is not None:
            self.network.pointer_leave()
        super().leaveEvent(event)

    def mousePressEvent(self, event):
        if self.network is not None and event.button() == Qt.MouseButton.LeftButton:
            self.network.click()
        super().mousePressEvent(event)


# --------------------------- Chart helpers ---------------------------

def draw_price_chart(ax, bars: List[PriceBar], ticker: str) -> None:
    """Close-price line, green when the period ends at or above its start."""
    ax.clear()
    ax.set_title(f"{ticker}: Price Chart (6 Months)")
    if not bars:
        ax.text(0.5, 0.5, "no price data", ha="center", va="center", transform=ax.transAxes)
        return
    closes = [b.close for b in bars]
    dates = [b.date for b in bars]
    color = "#3fb950" if closes[-1] >= closes[0] else "#f85149"
    x = np.arange(len(bars))
    ax.plot(x, closes, color=color, linewidth=1.5, label="Close Price")
    ax.fill_between(x, closes, min(closes), color=color, alpha=0.1)
    step = max(1, len(bars) // 10)
    ax.set_xticks(x[::step])
    ax.set_xticklabels(dates[::step], rotation=45, ha="right", fontsize=7)
    ax.yaxis.set_major_formatter(FuncFormatter(lambda v, _pos: f"₹{v:.0f}"))
    ax.grid(color="#21262d", alpha=0.3)


def draw_market_trends(canvas: MplCanvas, series: Optional[TrendSeries]) -> None:
    """Cumulative US / Indian returns (left axis) and portfolio value (right axis)."""
    ax = canvas.reset_axes()
    if series is None or not series.dates:
        ax.text(0.5, 0.5, "no returns data", ha="center", va="center", transform=ax.transAxes)
        canvas.draw_idle()
        return
    x = np.arange(len(series.dates))
    lines = []
    for values, color, label in (
        (series.us_cumulative_pct, "#58a6ff", "US Market (Cumulative Return %)"),
        (series.indian_cumulative_pct, "#3fb950", "Indian Market (Cumulative Return %)"),
    ):
        lines += ax.plot(x, values, color=color, label=label)
        ax.fill_between(x, values, 0, color=color, alpha=0.1)
    ax2 = ax.twinx()
    lines += ax2.plot(x, series.portfolio_values, color="#f85149", label="Portfolio Value ($)")

    step = max(1, len(x) // 8)
    ax.set_xticks(x[::step])
    ax.set_xticklabels(series.dates[::step], rotation=45, ha="right", fontsize=7)
    ax.grid(color="#21262d", alpha=0.3)
    ax.legend(lines, [ln.get_label() for ln in lines], loc="upper left", fontsize=7)
    canvas.draw_idle()


# --------------------------- Trading ticket ---------------------------

class TradingPanel(QGroupBox):
    """Demo order form bound to an ``OrderTicket``."""

    def __init__(self, log: LogFn, parent: Optional[QWidget] = None):
        super().__init__("Trade", parent)
        self._log = log
        self.ticket: Optional[OrderTicket] = None
        v = QVBoxLayout(self)

        row_side = QHBoxLayout()
        self.btn_buy = QPushButton("BUY")
        self.btn_sell = QPushButton("SELL")
        self.side_group = QButtonGroup(self)
        for b in (self.btn_buy, self.btn_sell):
            b.setCheckable(True)
            self.side_group.addButton(b)
            row_side.addWidget(b)
        self.btn_buy.setChecked(True)
        v.addLayout(row_side)

        row_type = QHBoxLayout()
        self.type_group = QButtonGroup(self)
        self.type_buttons = {}
        for t in ORDER_TYPES:
            b = QPushButton("MTF" if t == "mtf" else t.capitalize())
            b.setCheckable(True)
            self.type_group.addButton(b)
            self.type_buttons[t] = b
            row_type.addWidget(b)
        self.type_buttons["delivery"].setChecked(True)
        v.addLayout(row_type)

        grid = QGridLayout()
        grid.addWidget(QLabel("Qty"), 0, 0)
        self.combo_exchange = QComboBox()
        self.combo_exchange.addItems(["BSE", "NSE"])
        grid.addWidget(self.combo_exchange, 0, 1)
        self.spin_qty = QSpinBox()
        self.spin_qty.setRange(0, 1_000_000)
        self.spin_qty.setValue(1)
        grid.addWidget(self.spin_qty, 0, 2)

        grid.addWidget(QLabel("Price"), 1, 0)
        self.combo_price_type = QComboBox()
        self.combo_price_type.addItems(["Limit", "Market"])
        grid.addWidget(self.combo_price_type, 1, 1)
        self.spin_price = QDoubleSpinBox()
        self.spin_price.setDecimals(2)
        self.spin_price.setRange(0.0, 1e9)
        grid.addWidget(self.spin_price, 1, 2)

        grid.addWidget(QLabel("Balance:"), 2, 0)
        self.lbl_balance = QLabel(rupees(0))
        grid.addWidget(self.lbl_balance, 2, 1)
        grid.addWidget(QLabel("Approx req.:"), 3, 0)
        self.lbl_requirement = QLabel(rupees(0))
        grid.addWidget(self.lbl_requirement, 3, 1)
        v.addLayout(grid)

        self.btn_submit = QPushButton("Buy")
        self.btn_submit.setMinimumHeight(32)
        v.addWidget(self.btn_submit)

        self.side_group.buttonClicked.connect(self._on_side_changed)
        self.spin_qty.valueChanged.connect(self._update_summary)
        self.spin_price.valueChanged.connect(self._update_summary)
        self.combo_exchange.currentTextChanged.connect(self._on_exchange_changed)
        self.btn_submit.clicked.connect(self._submit)

    def set_ticker(self, ticker: str, nse_price: float) -> None:
        self.ticket = OrderTicket(ticker=ticker, price=nse_price,
                                  exchange=self.combo_exchange.currentText())
        self.spin_price.blockSignals(True)
        self.spin_price.setValue(nse_price)
        self.spin_price.blockSignals(False)
        self._update_summary()

    def _sync_ticket(self) -> Optional[OrderTicket]:
        t = self.ticket
        if t is None:
            return None
        t.side = "sell" if self.btn_sell.isChecked() else "buy"
        t.order_type = next((k for k, b in self.type_buttons.items() if b.isChecked()), "delivery")
        t.price_type = self.combo_price_type.currentText().lower()
        t.quantity = float(self.spin_qty.value())
        t.price = float(self.spin_price.value())
        return t

    def _on_side_changed(self, *_args) -> None:
        self.btn_submit.setText("Sell" if self.btn_sell.isChecked() else "Buy")
        self._update_summary()

    def _on_exchange_changed(self, exchange: str) -> None:
        t = self._sync_ticket()
        if t is None:
            return
        t.set_exchange(exchange)
        self.spin_price.blockSignals(True)
        self.spin_price.setValue(t.price)
        self.spin_price.blockSignals(False)
        self._update_summary()

    def _update_summary(self, *_args) -> None:
        t = self._sync_ticket()
        self.lbl_requirement.setText(rupees(t.requirement if t else 0.0))
        self.lbl_balance.setText(rupees(t.balance if t else 0.0))

    def _submit(self) -> None:
        t = self._sync_ticket()
        if t is None:
            return
        try:
            msg = t.submit()
        except TicketError as e:
            self._log(f"[trade] rejected {t.ticker}: {e}")
            QMessageBox.warning(self, "Invalid order", str(e))
            return
        self._log(f"[trade] demo {t.side} {t.ticker} qty={t.quantity:g} @ {rupees(t.price)} ({t.exchange})")
        QMessageBox.information(self, "Order placed", msg)


# --------------------------- Detail panel ---------------------------

class StockDetailPanel(QWidget):
    """Quote header, price chart, trading ticket and analysis for one stock."""

    def __init__(self, log: LogFn, parent: Optional[QWidget] = None):
        super().__init__(parent)
        self._log = log
        v = QVBoxLayout(self)
        v.setContentsMargins(0, 0, 0, 0)

        head = QHBoxLayout()
        self.lbl_title = QLabel()
        self.lbl_title.setStyleSheet("color: #58a6ff; font-size: 16px; font-weight: 600;")
        head.addWidget(self.lbl_title, 1)
        self.lbl_quote = QLabel()
        self.lbl_quote.setAlignment(Qt.AlignmentFlag.AlignRight)
        head.addWidget(self.lbl_quote)
        v.addLayout(head)

        mid = QHBoxLayout()
        self.price_canvas = MplCanvas(self, figsize=(5.0, 3.0))
        mid.addWidget(self.price_canvas, 3)
        self.trading = TradingPanel(log, self)
        mid.addWidget(self.trading, 2)
        v.addLayout(mid, 1)

        box = QGroupBox("Analysis")
        grid = QGridLayout(box)
        self.analysis = {}
        for i, key in enumerate(("Recommendation", "Momentum", "Score", "Avg Correlation")):
            grid.addWidget(QLabel(key), (i // 2) * 2, i % 2)
            val = QLabel()
            val.setStyleSheet("font-size: 16px; font-weight: bold;")
            grid.addWidget(val, (i // 2) * 2 + 1, i % 2)
            self.analysis[key] = val
        self.lbl_corr_title = QLabel("Top Correlated Stocks:")
        grid.addWidget(self.lbl_corr_title, 4, 0, 1, 2)
        self.corr_row = QHBoxLayout()
        grid.addLayout(self.corr_row, 5, 0, 1, 2)
        v.addWidget(box)

    def set_stock(self, rec: Recommendation, data: StockData) -> None:
        nse, bse = mock_quote(rec)
        sign_color = "#3fb950" if rec.momentum >= 0 else "#f85149"
        momentum = format_momentum(rec.momentum)
        self.lbl_title.setText(f"{rec.ticker} - {data.name_of(rec.ticker)}")
        self.lbl_quote.setText(
            f"NSE ₹{nse:.2f}<br>BSE ₹{bse:.2f}<br>"
            f"<span style='color:{sign_color}'>({momentum})</span>"
        )

        label_color = DEFAULT_STYLE.label_color(rec.label)
        self.analysis["Recommendation"].setText(rec.label)
        self.analysis["Recommendation"].setStyleSheet(f"font-size: 16px; font-weight: bold; color: {label_color};")
        self.analysis["Momentum"].setText(momentum)
        self.analysis["Momentum"].setStyleSheet(f"font-size: 16px; font-weight: bold; color: {sign_color};")
        self.analysis["Score"].setText(f"{rec.score:.3f}")
        self.analysis["Avg Correlation"].setText(f"{rec.avg_corr:.3f}")

        while self.corr_row.count():
            item = self.corr_row.takeAt(0)
            if item.widget() is not None:
                item.widget().deleteLater()
        top = data.top_correlated(rec.ticker)
        self.lbl_corr_title.setVisible(bool(top))
        for t, c in top:
            chip = QLabel(f"{t}<br><span style='color:{correlation_color(c)}'>{c * 100:.1f}%</span>")
            chip.setStyleSheet("border: 1px solid #30363d; border-radius: 6px; padding: 4px 8px;")
            self.corr_row.addWidget(chip)
        self.corr_row.addStretch(1)

        self.trading.set_ticker(rec.ticker, nse)

        bars = data.price_history(rec.ticker, log=self._log)
        draw_price_chart(self.price_canvas.ax, bars, rec.ticker)
        self.price_canvas.draw_idle()


# --------------------------- Main Window -------------------------------

class MainWindow(QMainWindow):
    """Main window: search, trending, network view, market trends and logging."""

    def __init__(self, candidates: Sequence[str] = DATA_DIR_CANDIDATES):
        super().__init__()
        self.setWindowTitle("StockGraphix: MST Correlation Dashboard")
        self.resize(1540, 1000)
        self.candidates = list(candidates)
        self.data = StockData()

        # Left: search + details + trending + log
        left_inner = QWidget()
        left_v = QVBoxLayout(left_inner)

        search_row = QHBoxLayout()
        search_row.addWidget(QLabel("Search:"))
        self.edit_search = QLineEdit()
        self.edit_search.setPlaceholderText("Ticker or company name (e.g. TCS, Apple)")
        search_row.addWidget(self.edit_search, 1)
        self.btn_search = QPushButton("Search")
        search_row.addWidget(self.btn_search)
        left_v.addLayout(search_row)

        self.lbl_result = QLabel()
        self.lbl_result.setWordWrap(True)
        left_v.addWidget(self.lbl_result)

        self.detail = StockDetailPanel(self._log, self)
        self.detail.setVisible(False)
        left_v.addWidget(self.detail)

        trend_box = QGroupBox("Trending")
        self.trend_row = QHBoxLayout(trend_box)
        left_v.addWidget(trend_box)

        log_box = QGroupBox("Log")
        log_v = QVBoxLayout(log_box)
        self.txt_log = QPlainTextEdit()
        self.txt_log.setReadOnly(True)
        self.txt_log.setMinimumHeight(140)
        log_v.addWidget(self.txt_log)
        left_v.addWidget(log_box)
        left_v.addStretch(1)

        self.scroll = QScrollArea(self)
        self.scroll.setWidgetResizable(True)
        self.scroll.setWidget(left_inner)

        # Right: network + market trends + progress
        right = QWidget(self)
        right_v = QVBoxLayout(right)

        net_box = QGroupBox("Correlation Network (MST)")
        net_v = QVBoxLayout(net_box)
        self.canvas = NetworkCanvas(self)
        net_v.addWidget(self.canvas, 1)
        row_export = QHBoxLayout()
        row_export.addStretch(1)
        self.btn_export_png = QPushButton("Export PNG")
        self.btn_export_svg = QPushButton("Export SVG")
        row_export.addWidget(self.btn_export_png)
        row_export.addWidget(self.btn_export_svg)
        net_v.addLayout(row_export)
        right_v.addWidget(net_box, 3)

        market_box = QGroupBox("Market Trends")
        market_v = QVBoxLayout(market_box)
        self.lbl_market = QLabel("(no returns data)")
        market_v.addWidget(self.lbl_market)
        self.market_canvas = MplCanvas(self, figsize=(6.0, 2.5))
        market_v.addWidget(self.market_canvas, 1)
        right_v.addWidget(market_box, 2)

        self.progress = QProgressBar()
        self.progress.setRange(0, 100)
        self.progress.setValue(0)
        right_v.addWidget(self.progress)

        root = QWidget(self)
        root_h = QHBoxLayout(root)
        root_h.addWidget(self.scroll, 3)
        root_h.addWidget(right, 4)
        self.setCentralWidget(root)

        # Connections
        self.btn_search.clicked.connect(self.search_stock)
        self.edit_search.returnPressed.connect(self.search_stock)
        self.canvas.node_selected.connect(self.show_stock_details)
        self.btn_export_png.clicked.connect(self.export_png)
        self.btn_export_svg.clicked.connect(self.export_svg)

        self.load_data()

    # -------- Logging helper --------
    def _log(self, msg: str) -> None:
        if not hasattr(self, "txt_log"):
            return
        ts = datetime.now().strftime("%H:%M:%S")
        self.txt_log.appendPlainText(f"[{ts}] {msg}")

    # -------- Loading --------
    def load_data(self) -> None:
        self.progress.setValue(0)
        self.progress.setFormat("Starting...")
        self.lbl_result.setText("<span style='color:#58a6ff'>Loading stock data...</span>")
        self._log(f"[load] searching {', '.join(self.candidates)}")

        self.thread = QThread()
        self.worker = DataWorker(self.candidates)
        self.worker.moveToThread(self.thread)
        self.thread.started.connect(self.worker.run)
        self.worker.progress.connect(self.on_worker_progress)
        self.worker.message.connect(self._log)
        self.worker.finished.connect(self.on_data_loaded)
        self.worker.failed.connect(self.on_worker_failed)
        self.worker.finished.connect(lambda *_: self._cleanup_worker())
        self.worker.failed.connect(lambda *_: self._cleanup_worker())
        self.thread.start()

    def _cleanup_worker(self) -> None:
        try:
            self.thread.quit()
            self.thread.wait()
        except Exception:
            pass

    def on_worker_progress(self, pct: int, msg: str) -> None:
        self.progress.setValue(pct)
        self.progress.setFormat(msg)

    def on_worker_failed(self, error_msg: str) -> None:
        self._log(f"[error] {error_msg}")
        self.lbl_result.setText(
            "<span style='color:#f85149'>Error loading data. "
            "Make sure the data files are accessible.</span>"
        )
        QMessageBox.warning(self, "Loading failed", error_msg)

    def on_data_loaded(self, data: StockData) -> None:
        self.data = data
        self.lbl_result.setText("")
        self._update_trending()
        self._update_network()
        self._update_market_trends()
        self._log("[load] data loading complete")

    # -------- Sections --------
    def _update_trending(self) -> None:
        while self.trend_row.count():
            item = self.trend_row.takeAt(0)
            if item.widget() is not None:
                item.widget().deleteLater()
        picks = self.data.trending()
        if not picks:
            self._log("[trending] no recommendations available")
            return
        for rec in picks:
            card = QPushButton(
                f"{rec.ticker}\n{self.data.name_of(rec.ticker)}\n"
                f"{format_momentum(rec.momentum)}\n{rec.label}"
            )
            gain = rec.momentum >= 0
            card.setStyleSheet(
                f"QPushButton {{ text-align: left; padding: 8px; border-radius: 8px;"
                f" border: 1px solid {'#3fb950' if gain else '#f85149'}; }}"
            )
            card.setCursor(Qt.CursorShape.PointingHandCursor)
            card.clicked.connect(lambda _=False, t=rec.ticker: self.show_stock_details(t))
            self.trend_row.addWidget(card)
        self._log(f"[trending] {len(picks)} cards")

    def _update_network(self) -> None:
        edges = self.data.mst_edges
        if not edges:
            self.canvas.clear_network()
            self._log("[graph] no MST edges; graph not drawn")
            return
        self.canvas.set_network(edges, self.data.classifications())
        model = self.canvas.network.model
        hub = model.hub()
        self._log(
            f"[graph] nodes={len(model.nodes)}, edges={len(model.edges)}, "
            f"hub={hub} (degree {model.degree(hub)})"
        )

    def _update_market_trends(self) -> None:
        summary = self.data.market_summary()
        if summary is None:
            self.lbl_market.setText("(no returns data)")
            draw_market_trends(self.market_canvas, None)
            return

        def pct(v: float) -> str:
            return f"{'+' if v >= 0 else ''}{v:.2f}%"

        self.lbl_market.setText(
            f"US Market Avg: {pct(summary.us_avg_pct)}   |   "
            f"Indian Market Avg: {pct(summary.indian_avg_pct)}   |   "
            f"Portfolio Value: ${summary.portfolio_value:.2f}"
        )
        draw_market_trends(self.market_canvas, self.data.market_trend_series())

    # -------- Search / details --------
    def search_stock(self) -> None:
        query = self.edit_search.text().strip()
        if not query:
            self.detail.setVisible(False)
            self.lbl_result.setText("<span style='color:#8b949e'>Please enter a stock symbol or name</span>")
            return
        rec = self.data.search(query)
        if rec is None:
            self.detail.setVisible(False)
            self.lbl_result.setText(
                f"<span style='color:#f85149'>Stock \"{query.upper()}\" not found. "
                f"Try: {EXAMPLE_TICKERS}, etc.</span>"
            )
            self._log(f"[search] no match for {query!r}")
            return
        self.lbl_result.setText("")
        self.detail.set_stock(rec, self.data)
        self.detail.setVisible(True)
        self._log(f"[search] {query!r} -> {rec.ticker}")

    def show_stock_details(self, ticker: str) -> None:
        if self.data.find(ticker) is None:
            self._log(f"[select] {ticker} has no recommendation data")
            return
        self._log(f"[select] {ticker}")
        self.edit_search.setText(ticker)
        self.search_stock()
        self.scroll.ensureWidgetVisible(self.edit_search)

    # -------- Export --------
    def export_png(self) -> None:
        """Export the network figure to a PNG image."""
        path, _ = QFileDialog.getSaveFileName(self, "Export PNG", "", "PNG Image (*.png)")
        if not path:
            return
        try:
            self.canvas.figure.savefig(path, dpi=200, facecolor=self.canvas.figure.get_facecolor())
            self._log(f"[export] PNG → {path}")
        except Exception as e:
            self._log(f"[error] export PNG failed: {e}")
            QMessageBox.critical(self, "Export failed", f"Failed to export PNG:\n{e}")

    def export_svg(self) -> None:
        """Export the network figure to an SVG vector file."""
        path, _ = QFileDialog.getSaveFileName(self, "Export SVG", "", "SVG Vector (*.svg)")
        if not path:
            return
        try:
            self.canvas.figure.savefig(path, facecolor=self.canvas.figure.get_facecolor())
            self._log(f"[export] SVG → {path}")
        except Exception as e:
            self._log(f"[error] export SVG failed: {e}")
            QMessageBox.critical(self, "Export failed", f"Failed to export SVG:\n{e}")

    def closeEvent(self, event):
        self.canvas.clear_network()
        super().closeEvent(event)


# --------------------------- Entrypoint ----------------------------

def main() -> None:
    """Qt application entry point: optional data directory as first argument."""
    app = QApplication(sys.argv)
    args = app.arguments()[1:]
    candidates = [str(Path(args[0]))] if args else list(DATA_DIR_CANDIDATES)
    win = MainWindow(candidates)
    win.show()
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
