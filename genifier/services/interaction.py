"""Hover/click interaction and per-frame styling around the force layout.

The layout engine itself is external: it receives the GraphData handed to
``load``, writes positions onto the nodes and swaps link endpoints for node
objects. Everything here reads those objects, it never lays them out.
"""

import logging
from contextlib import contextmanager
from typing import Callable, Iterator, Protocol

from genifier.mappings import (
    APPROX_GLYPH_WIDTH,
    COLOR_FALLBACK,
    GROUP_COLORS,
    HOVER_NODE_COLOR,
    LABEL_BACKGROUNDS,
    LABEL_FONT_FAMILY,
    LABEL_FONT_SIZES,
    LABEL_FONT_WEIGHTS,
    LABEL_FOREGROUNDS,
    LABEL_PADDING,
    LINK_ARROW_LENGTHS,
    LINK_COLORS,
    LINK_WIDTHS,
)
from genifier.models.graph import GraphData, GraphLink, GraphNode, endpoint_id
from genifier.models.render import Frame, LabelBox, LinkLabel, LinkStyle, NodeStyle

logger = logging.getLogger(__name__)

TextMeasure = Callable[[str, float], float]
ClickListener = Callable[[GraphNode], None]


def approx_text_width(text: str, font_size: float) -> float:
    return len(text) * font_size * APPROX_GLYPH_WIDTH


def _pick(pair: tuple, connected: bool):
    return pair[0] if connected else pair[1]


class ResizeSource(Protocol):
    def subscribe(self, callback: Callable[[float, float], None]) -> Callable[[], None]: ...


class ViewportChannel:
    """Resize notifications from whatever hosts the canvas."""

    def __init__(self):
        self._subscribers: list[Callable[[float, float], None]] = []
        self.width = 0.0
        self.height = 0.0

    def subscribe(self, callback: Callable[[float, float], None]) -> Callable[[], None]:
        self._subscribers.append(callback)
        callback(self.width, self.height)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def publish(self, width: float, height: float) -> None:
        self.width, self.height = width, height
        for callback in list(self._subscribers):
            callback(width, height)

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)


class InteractionEngine:
    def __init__(self, label_zoom_threshold: float = 1.2, measure_text: TextMeasure = approx_text_width):
        self.label_zoom_threshold = label_zoom_threshold
        self._measure_text = measure_text
        self.data = GraphData()
        self.hover_node: GraphNode | None = None
        self.width = 0.0
        self.height = 0.0
        self._nodes_by_id: dict[str, GraphNode] = {}
        self._fitted = False
        self._click_listeners: list[ClickListener] = []

    # -- data ------------------------------------------------------------

    def load(self, data: GraphData) -> None:
        """Take ownership of a freshly fetched object graph."""
        self.data = data
        self._nodes_by_id = {n.id: n for n in data.nodes}
        self.hover_node = None
        self._fitted = False
        logger.info("Graph loaded: %d nodes, %d links", len(data.nodes), len(data.links))

    def node(self, node_id: str) -> GraphNode | None:
        return self._nodes_by_id.get(node_id)

    def place(self, positions: dict[str, tuple[float, float]]) -> list[str]:
        """Write layout positions onto the loaded nodes; returns ids not in the graph."""
        unknown = []
        for node_id, (x, y) in positions.items():
            node = self._nodes_by_id.get(node_id)
            if node is None:
                unknown.append(node_id)
                continue
            node.x, node.y = x, y
        return unknown

    # -- viewport --------------------------------------------------------

    @contextmanager
    def mounted(self, source: ResizeSource) -> Iterator["InteractionEngine"]:
        unsubscribe = source.subscribe(self.resize)
        try:
            yield self
        finally:
            unsubscribe()
            self.width = self.height = 0.0

    def resize(self, width: float, height: float) -> None:
        self.width, self.height = width, height

    @property
    def drawable(self) -> bool:
        return self.width > 0 and self.height > 0

    # -- nodes -----------------------------------------------------------

    def node_color(self, node: GraphNode) -> str:
        if self.hover_node is not None and node.id == self.hover_node.id:
            return HOVER_NODE_COLOR
        return GROUP_COLORS.get(node.group, COLOR_FALLBACK)

    def set_hover(self, node: GraphNode | None) -> None:
        self.hover_node = node

    def hover_by_id(self, node_id: str | None) -> GraphNode | None:
        if node_id is None:
            self.set_hover(None)
            return None
        node = self._nodes_by_id.get(node_id)
        if node is None:
            raise KeyError(node_id)
        self.set_hover(node)
        return node

    # -- links -----------------------------------------------------------

    def is_connected(self, link: GraphLink) -> bool:
        if self.hover_node is None:
            return False
        hovered = self.hover_node.id
        return endpoint_id(link.source) == hovered or endpoint_id(link.target) == hovered

    def link_color(self, link: GraphLink) -> str:
        return _pick(LINK_COLORS, self.is_connected(link))

    def link_width(self, link: GraphLink) -> float:
        return _pick(LINK_WIDTHS, self.is_connected(link))

    def link_arrow_length(self, link: GraphLink) -> float:
        return _pick(LINK_ARROW_LENGTHS, self.is_connected(link))

    def _position(self, endpoint: str | GraphNode) -> tuple[float, float] | None:
        node = endpoint if isinstance(endpoint, GraphNode) else self._nodes_by_id.get(endpoint)
        if node is None or node.x is None or node.y is None:
            return None
        return node.x, node.y

    def link_label(self, link: GraphLink, scale: float) -> LinkLabel | None:
        if not link.label:
            return None
        connected = self.is_connected(link)
        if not connected and scale < self.label_zoom_threshold:
            return None
        start = self._position(link.source)
        end = self._position(link.target)
        if start is None or end is None:
            return None

        x = start[0] + (end[0] - start[0]) / 2
        y = start[1] + (end[1] - start[1]) / 2
        font_size = _pick(LABEL_FONT_SIZES, connected) / scale
        weight = _pick(LABEL_FONT_WEIGHTS, connected)
        padding = LABEL_PADDING / scale
        text_width = self._measure_text(link.label, font_size)
        box_width = text_width + padding * 2
        box_height = font_size + padding * 2
        return LinkLabel(
            text=link.label,
            x=x,
            y=y,
            font=f"{weight} {font_size}px {LABEL_FONT_FAMILY}",
            font_size=font_size,
            font_weight=weight,
            background=_pick(LABEL_BACKGROUNDS, connected),
            foreground=_pick(LABEL_FOREGROUNDS, connected),
            box=LabelBox(x=x - box_width / 2, y=y - box_height / 2, width=box_width, height=box_height),
        )

    # -- frames ----------------------------------------------------------

    def render_frame(self, scale: float) -> Frame:
        if scale <= 0:
            raise ValueError("zoom scale must be positive")
        frame = Frame(
            scale=scale,
            hover_node_id=self.hover_node.id if self.hover_node else None,
            empty=not self.data.nodes,
        )
        if not self.drawable:
            return frame

        hovered = frame.hover_node_id
        frame.nodes = [
            NodeStyle(id=n.id, label=n.label, color=self.node_color(n), val=n.val, hovered=n.id == hovered)
            for n in self.data.nodes
        ]
        for link in self.data.links:
            connected = self.is_connected(link)
            frame.links.append(
                LinkStyle(
                    source=endpoint_id(link.source),
                    target=endpoint_id(link.target),
                    color=_pick(LINK_COLORS, connected),
                    width=_pick(LINK_WIDTHS, connected),
                    arrow_length=_pick(LINK_ARROW_LENGTHS, connected),
                    connected=connected,
                )
            )
            label = self.link_label(link, scale)
            if label is not None:
                frame.labels.append(label)
        return frame

    def on_engine_stop(self) -> bool:
        """Whether the view should fit to bounds now: once per load, never when empty."""
        if self._fitted or not self.data.nodes:
            return False
        self._fitted = True
        return True

    # -- clicks ----------------------------------------------------------

    def add_click_listener(self, listener: ClickListener) -> None:
        self._click_listeners.append(listener)

    def on_node_click(self, node: GraphNode) -> None:
        for listener in self._click_listeners:
            try:
                listener(node)
            except Exception:
                logger.exception("Node click listener failed")
