#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Interactive correlation-network renderer for the StockGraphix dashboard.

Draws the minimum-spanning-tree (MST) of pairwise asset correlations as a
node-link diagram on a Matplotlib axes and reacts to pointer hover / click.

Key pieces:

* ``GraphModel``: edge-derived node set (first-seen order) and a static circular
  layout in surface-logical coordinates (origin top-left, y grows downward).
* ``Renderer``: the single entry point that writes to the drawing surface.
  Paints edges (with weight labels), then nodes (with short tickers and, for the
  focused node, momentum + label), then the BUY / HOLD / AVOID legend.
* ``InteractionController``: Idle / Focused(node) state machine. Pointer moves
  are hit-tested against node centers; a repaint is issued only when the
  focused node actually changes. Clicking a focused node calls ``on_select``.
* ``CorrelationNetwork``: one component instance per view mount that owns the
  three pieces above; ``close()`` tears it down.

Nothing here imports Qt; the widget glue lives in ``StockGraphix.py``.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Mapping, Optional, Sequence, Tuple

import networkx as nx
from matplotlib.axes import Axes
from matplotlib.figure import Figure
from matplotlib.lines import Line2D
from matplotlib.patches import Circle, Patch

NodeId = str


# --------------------------- Configuration ---------------------------

@dataclass(frozen=True)
class GraphStyle:
    """Geometry and colors of the network view.

    Lengths are in surface-logical units; the surface is ``width`` x ``height``
    no matter how large the widget showing it is.
    """
    width: float = 800.0
    height: float = 500.0
    radius_fraction: float = 0.35
    hit_radius: float = 20.0

    node_radius: float = 15.0
    focused_node_radius: float = 20.0
    outline_width: float = 2.0
    focused_outline_width: float = 3.0
    edge_width: float = 2.0
    highlighted_edge_width: float = 3.0
    min_edge_alpha: float = 0.3

    label_offset: float = 30.0
    momentum_offset: float = 35.0
    verdict_offset: float = 48.0
    edge_label_pad: float = 0.4      # fraction of the edge label font size

    background: str = "#0d1117"
    edge_color: Tuple[float, float, float] = (88 / 255, 166 / 255, 1.0)
    edge_label_face: Tuple[float, float, float, float] = (13 / 255, 17 / 255, 23 / 255, 0.85)
    accent: str = "#58a6ff"
    muted: str = "#8b949e"
    text: str = "#e6edf3"
    outline: str = "#161b22"
    buy_color: str = "#3fb950"
    avoid_color: str = "#f85149"
    hold_color: str = "#8b949e"

    font_family: str = "sans-serif"
    node_font_size: float = 12.0
    focused_font_size: float = 13.0
    info_font_size: float = 10.0
    edge_font_size: float = 10.0
    legend_font_size: float = 11.0

    def label_color(self, label: Optional[str]) -> str:
        """BUY → success, AVOID → danger, anything else → neutral."""
        if label == "BUY":
            return self.buy_color
        if label == "AVOID":
            return self.avoid_color
        return self.hold_color


DEFAULT_STYLE = GraphStyle()

# Exchange decorations dropped from on-graph ticker labels.
MARKET_SUFFIXES = (".NS", ".BO")
_SUFFIX_RE = re.compile("(" + "|".join(re.escape(s) for s in MARKET_SUFFIXES) + r")$")

LEGEND_ENTRIES = ("BUY", "HOLD", "AVOID")


# --------------------------- Data structures ---------------------------

@dataclass(frozen=True)
class Edge:
    """One MST edge. ``distance`` is an opaque precomputed value."""
    source: NodeId
    target: NodeId
    correlation: float
    distance: Optional[float] = None


@dataclass(frozen=True)
class Classification:
    """Per-node recommendation used for coloring."""
    label: str
    momentum: float = 0.0


@dataclass(frozen=True)
class NodePosition:
    x: float
    y: float


def edge_weight(edge: Edge) -> Optional[float]:
    """Displayed edge weight: distance when defined and non-zero, else correlation.

    Returns None when the resolved value is not a number.
    """
    d = edge.distance
    if d is not None and not math.isnan(d) and d != 0:
        return d
    c = edge.correlation
    if c is None or math.isnan(c):
        return None
    return c


def short_label(node: NodeId) -> str:
    """Ticker with any market suffix (``.NS``, ``.BO``) stripped."""
    return _SUFFIX_RE.sub("", node)


def format_momentum(momentum: float) -> str:
    """Signed percentage, e.g. ``+2.00%`` / ``-3.00%``."""
    sign = "+" if momentum >= 0 else ""
    return f"{sign}{momentum * 100:.2f}%"


# --------------------------- Graph model ---------------------------

@dataclass
class GraphModel:
    """Edge list, edge-derived node list and static positions.

    ``nodes`` keeps first-seen endpoint order. That order decides the angle at
    which each node is placed and is also the hit-test iteration order; it has
    no other meaning.
    """
    edges: List[Edge]
    nodes: List[NodeId]
    positions: Dict[NodeId, NodePosition]
    graph: nx.MultiGraph = field(repr=False, default_factory=nx.MultiGraph)

    @classmethod
    def build(
        cls,
        edges: Sequence[Edge],
        width: float = DEFAULT_STYLE.width,
        height: float = DEFAULT_STYLE.height,
        radius_fraction: float = DEFAULT_STYLE.radius_fraction,
    ) -> "GraphModel":
        """Collect endpoints and place them on a circle.

        Parameters
        ----------
        edges : Sequence[Edge]
            Any edge list; duplicate pairs and self-loops are accepted.
        width, height : float
            Surface-logical size. The circle is centered in the surface.
        radius_fraction : float
            Circle radius as a fraction of ``min(width, height)``.

        Returns
        -------
        GraphModel
            Node i of N sits at angle ``2π·i/N``; N=1 sits at angle 0.
        """
        G = nx.MultiGraph()
        for e in edges:
            G.add_edge(e.source, e.target, correlation=e.correlation, distance=e.distance)
        nodes: List[NodeId] = list(G.nodes())

        cx, cy = width / 2.0, height / 2.0
        r = min(width, height) * radius_fraction
        positions: Dict[NodeId, NodePosition] = {}
        for i, n in enumerate(nodes):
            angle = 2.0 * math.pi * i / len(nodes)
            positions[n] = NodePosition(cx + r * math.cos(angle), cy + r * math.sin(angle))

        return cls(edges=list(edges), nodes=nodes, positions=positions, graph=G)

    def is_empty(self) -> bool:
        return not self.nodes

    def degree(self, node: NodeId) -> int:
        return int(self.graph.degree(node)) if node in self.graph else 0

    def hub(self) -> Optional[NodeId]:
        """Highest-degree node; ties go to the earliest in node order."""
        if not self.nodes:
            return None
        return max(self.nodes, key=self.degree)


# --------------------------- Renderer ---------------------------

class Renderer:
    """Owns every write to the drawing surface.

    The surface is a Matplotlib axes placed over its whole figure with data
    limits fixed to the logical surface size, so positions from ``GraphModel``
    can be used as-is. The aspect ratio is locked; on a figure of another
    shape the surface is letterboxed, not stretched.
    """

    def __init__(self, ax: Axes, style: GraphStyle = DEFAULT_STYLE):
        self.ax = ax
        self.style = style
        self.ax.set_position((0.0, 0.0, 1.0, 1.0))
        self.ax.set_axis_off()

    def _clear(self) -> None:
        ax = self.ax
        ax.clear()
        ax.set_axis_off()
        ax.set_xlim(0, self.style.width)
        ax.set_ylim(self.style.height, 0)   # y grows downward
        # keep circles round; the axes box shrinks inside the figure instead
        ax.set_aspect("equal", adjustable="box", anchor="C")

    def to_surface(self, x: float, y: float) -> Tuple[float, float]:
        """Map Matplotlib display pixels (origin bottom-left) to surface coordinates."""
        self.ax.apply_aspect()
        lx, ly = self.ax.transData.inverted().transform((x, y))
        return float(lx), float(ly)

    def repaint(
        self,
        model: GraphModel,
        classifications: Mapping[NodeId, Classification],
        hovered_node: Optional[NodeId],
    ) -> None:
        """Clear the surface and paint edges, nodes and legend, in that order.

        An empty model draws nothing at all.
        """
        if model.is_empty():
            return
        self._clear()
        for edge in model.edges:
            self._draw_edge(model, edge, hovered_node)
        for node in model.nodes:
            self._draw_node(model, node, classifications.get(node), node == hovered_node)
        self._draw_legend()

    def _draw_edge(self, model: GraphModel, edge: Edge, hovered_node: Optional[NodeId]) -> None:
        s = self.style
        u = model.positions.get(edge.source)
        v = model.positions.get(edge.target)
        if u is None or v is None:
            return

        highlighted = hovered_node is not None and hovered_node in (edge.source, edge.target)
        if highlighted:
            alpha, width = 1.0, s.highlighted_edge_width
        else:
            corr = abs(edge.correlation) if not math.isnan(edge.correlation) else 0.0
            alpha, width = max(s.min_edge_alpha, min(1.0, corr)), s.edge_width

        gid = f"edge:{edge.source}|{edge.target}"
        self.ax.add_line(Line2D(
            [u.x, v.x], [u.y, v.y],
            color=s.edge_color, alpha=alpha, linewidth=width,
            solid_capstyle="round", zorder=1, gid=gid,
        ))

        weight = edge_weight(edge)
        if weight is None:
            return
        # same zorder as the line: the label box covers its own line only
        self.ax.text(
            (u.x + v.x) / 2.0, (u.y + v.y) / 2.0, f"{weight:.2f}",
            ha="center", va="center", zorder=1, gid=gid + ":label",
            color=s.accent if highlighted else s.muted,
            fontsize=s.edge_font_size, family=s.font_family,
            bbox=dict(boxstyle=f"square,pad={s.edge_label_pad}",
                      facecolor=s.edge_label_face, edgecolor="none"),
        )

    def _draw_node(
        self,
        model: GraphModel,
        node: NodeId,
        cls: Optional[Classification],
        focused: bool,
    ) -> None:
        s = self.style
        pos = model.positions[node]
        fill = s.label_color(cls.label if cls else None)

        self.ax.add_patch(Circle(
            (pos.x, pos.y),
            s.focused_node_radius if focused else s.node_radius,
            facecolor=fill,
            edgecolor=s.accent if focused else s.outline,
            linewidth=s.focused_outline_width if focused else s.outline_width,
            zorder=2, gid=f"node:{node}",
        ))
        self.ax.text(
            pos.x, pos.y - s.label_offset, short_label(node),
            ha="center", va="center", zorder=2, gid=f"node:{node}:label",
            color=s.accent if focused else s.text,
            fontsize=s.focused_font_size if focused else s.node_font_size,
            fontweight="bold" if focused else "normal", family=s.font_family,
        )

        if focused and cls is not None:
            for offset, txt, tag in (
                (s.momentum_offset, format_momentum(cls.momentum), "momentum"),
                (s.verdict_offset, cls.label, "verdict"),
            ):
                self.ax.text(
                    pos.x, pos.y + offset, txt,
                    ha="center", va="center", zorder=2, gid=f"node:{node}:{tag}",
                    color=s.muted, fontsize=s.info_font_size, family=s.font_family,
                )

    def _draw_legend(self) -> None:
        s = self.style
        handles = [
            Patch(facecolor=s.label_color(lbl), edgecolor=s.outline, label=lbl)
            for lbl in LEGEND_ENTRIES
        ]
        legend = self.ax.legend(
            handles=handles, loc="lower left", frameon=False,
            fontsize=s.legend_font_size, labelcolor=s.muted,
            handlelength=1.0, handleheight=1.0,
        )
        legend.set_zorder(3)
        legend.set_gid("legend")


# --------------------------- Interaction ---------------------------

class InteractionController:
    """Idle / Focused(node) state machine driven by pointer events.

    ``on_change`` is called with the new focused node whenever the state
    changes (and on every pointer leave); it is expected to repaint.
    """

    def __init__(
        self,
        model: GraphModel,
        on_change: Callable[[Optional[NodeId]], None],
        on_select: Optional[Callable[[NodeId], None]] = None,
        style: GraphStyle = DEFAULT_STYLE,
    ):
        self.model = model
        self.on_change = on_change
        self.on_select = on_select
        self.style = style
        self.hovered_node: Optional[NodeId] = None

    def to_surface(
        self,
        x: float,
        y: float,
        displayed_width: Optional[float] = None,
        displayed_height: Optional[float] = None,
    ) -> Tuple[float, float]:
        """Map widget (device) coordinates to surface-logical coordinates."""
        sx = self.style.width / displayed_width if displayed_width else 1.0
        sy = self.style.height / displayed_height if displayed_height else 1.0
        return x * sx, y * sy

    def hit_test(self, x: float, y: float) -> Optional[NodeId]:
        """Node within ``hit_radius`` of (x, y); the last match in node order wins."""
        found: Optional[NodeId] = None
        r = self.style.hit_radius
        for node in self.model.nodes:
            pos = self.model.positions[node]
            if math.hypot(x - pos.x, y - pos.y) <= r:
                found = node
        return found

    def pointer_move(
        self,
        x: float,
        y: float,
        displayed_width: Optional[float] = None,
        displayed_height: Optional[float] = None,
    ) -> bool:
        """Hit-test and transition. Returns True if a repaint was issued."""
        lx, ly = self.to_surface(x, y, displayed_width, displayed_height)
        found = self.hit_test(lx, ly)
        if found == self.hovered_node:
            return False
        self.hovered_node = found
        self.on_change(found)
        return True

    def pointer_leave(self) -> None:
        """Back to Idle. Always repaints, even when already Idle."""
        self.hovered_node = None
        self.on_change(None)

    def click(self) -> bool:
        """Select the focused node, if any. Returns True if ``on_select`` ran."""
        if self.hovered_node is None or self.on_select is None:
            return False
        self.on_select(self.hovered_node)
        return True


# --------------------------- Component ---------------------------

class CorrelationNetwork:
    """One mounted network view: model + renderer + controller on a figure.

    Parameters
    ----------
    figure : Figure
        Figure to draw on; an axes covering the whole figure is added.
    edges : Sequence[Edge]
        MST edges as supplied by the loader.
    classifications : Mapping[NodeId, Classification], optional
        Recommendation per ticker; missing tickers are drawn as HOLD.
    on_select : Callable[[NodeId], None], optional
        Called with the focused node on click.
    on_repaint : Callable[[], None], optional
        Called after every repaint (e.g. ``canvas.draw_idle``).
    """

    def __init__(
        self,
        figure: Figure,
        edges: Sequence[Edge],
        classifications: Optional[Mapping[NodeId, Classification]] = None,
        on_select: Optional[Callable[[NodeId], None]] = None,
        on_repaint: Optional[Callable[[], None]] = None,
        style: GraphStyle = DEFAULT_STYLE,
    ):
        self.figure = figure
        self.style = style
        self.classifications: Dict[NodeId, Classification] = dict(classifications or {})
        self.model = GraphModel.build(edges, style.width, style.height, style.radius_fraction)
        self.renderer = Renderer(figure.add_axes((0.0, 0.0, 1.0, 1.0)), style)
        self.controller = InteractionController(self.model, self._on_hover_changed, on_select, style)
        self.on_repaint = on_repaint
        self.repaint_count = 0
        self._closed = False
        self.repaint()

    @property
    def hovered_node(self) -> Optional[NodeId]:
        return self.controller.hovered_node

    def repaint(self) -> None:
        if self._closed:
            return
        self.renderer.repaint(self.model, self.classifications, self.controller.hovered_node)
        self.repaint_count += 1
        if self.on_repaint is not None:
            self.on_repaint()

    def _on_hover_changed(self, _node: Optional[NodeId]) -> None:
        self.repaint()

    def pointer_move(self, x: float, y: float,
                     displayed_width: Optional[float] = None,
                     displayed_height: Optional[float] = None) -> bool:
        if self._closed:
            return False
        return self.controller.pointer_move(x, y, displayed_width, displayed_height)

    def pointer_move_display(self, x: float, y: float) -> bool:
        """Pointer move given in display pixels of the hosting canvas."""
        if self._closed:
            return False
        lx, ly = self.renderer.to_surface(x, y)
        return self.controller.pointer_move(lx, ly)

    def pointer_leave(self) -> None:
        if not self._closed:
            self.controller.pointer_leave()

    def click(self) -> bool:
        if self._closed:
            return False
        return self.controller.click()

    def close(self) -> None:
        """Detach callbacks and wipe the figure."""
        if self._closed:
            return
        self._closed = True
        self.controller.on_select = None
        self.on_repaint = None
        self.figure.clear()
