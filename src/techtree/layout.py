"""Layout module — layered tech tree layout.

Phases:
  1. Layer assignment (longest-path depth of each node)
  2. Crossing reduction (one top-down barycenter pass)
  3. Coordinate assignment (x/y positions inside a viewport)

Layer assignment depends only on graph structure. Phases 2 and 3 depend on
structure plus viewport, never on completion state, so a layout can be reused
across toggles.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Iterator, Mapping
from itertools import combinations
from dataclasses import dataclass, field
from typing import Any

import networkx as nx

from techtree.errors import CycleDetectedError, MalformedGraphError
from techtree.graph import Node, TechGraph

logger = logging.getLogger(__name__)

# ─── Layer Assignment ─────────────────────────────────────────────────────────


class LayerAssignment:
    """Result of layer assignment: each node is assigned a layer (depth).

    Layer 0 holds the roots (nodes without prereqs) and is drawn at the top.

    Attributes:
        layers: Maps node id → layer index.
        layer_count: Number of distinct layers (0 for an empty graph).
    """

    def __init__(self, layers: dict[str, int], order: list[str]) -> None:
        self.layers = layers
        self._order = order
        self.layer_count = (max(layers.values()) + 1) if layers else 0

    @property
    def max_layer(self) -> int:
        return max(self.layer_count - 1, 0)

    def groups(self) -> list[list[str]]:
        """Node ids per layer, each layer in input order."""
        groups: list[list[str]] = [[] for _ in range(self.layer_count)]
        for node_id in self._order:
            groups[self.layers[node_id]].append(node_id)
        return groups

    @classmethod
    def assign(cls, graph: TechGraph) -> LayerAssignment:
        """Assign layers to all nodes by longest path from a root.

        Algorithm: depth-first walk over ``prereqs`` with an explicit stack.
        A node's layer is fixed once all its prereqs are fixed:
        layer = 0 without prereqs, else 1 + max(prereq layers). The cache is
        shared across roots so every node is computed exactly once.

        Side effect: sets ``Node.layer`` on every node.

        Raises:
            CycleDetectedError: a node is reached again while it is still on
                the current path.
        """
        layers: dict[str, int] = {}
        on_path: set[str] = set()

        for root in graph:
            if root.id in layers:
                continue
            stack: list[tuple[str, Iterator[str]]] = [(root.id, iter(root.prereqs))]
            on_path.add(root.id)

            while stack:
                node_id, pending = stack[-1]
                for pid in pending:
                    if pid in layers:
                        continue
                    if pid in on_path:
                        cycle_edges = nx.find_cycle(graph.digraph, source=pid)
                        raise CycleDetectedError([u for u, _ in cycle_edges])
                    on_path.add(pid)
                    stack.append((pid, iter(graph.node(pid).prereqs)))
                    break
                else:
                    stack.pop()
                    on_path.discard(node_id)
                    prereqs = graph.node(node_id).prereqs
                    layers[node_id] = 1 + max(layers[p] for p in prereqs) if prereqs else 0

        for node in graph:
            node.layer = layers[node.id]

        result = cls(layers=layers, order=[n.id for n in graph])
        logger.debug("assigned %d nodes to %d layers", len(layers), result.layer_count)
        return result


# ─── Configuration ────────────────────────────────────────────────────────────

# Pixel geometry defaults.
NODE_WIDTH: float = 136
NODE_HEIGHT: float = 44
NODE_GAP: float = 30  # horizontal gap between boxes in one layer
LAYER_PADDING: float = 34  # space above the first and below the last layer

_CONFIG_KEYS: dict[str, str] = {
    "nodeWidth": "node_width",
    "nodeHeight": "node_height",
    "nodeGap": "node_gap",
    "layerPadding": "layer_padding",
}


@dataclass(frozen=True)
class LayoutConfig:
    """Fixed box geometry used by coordinate assignment."""

    node_width: float = NODE_WIDTH
    node_height: float = NODE_HEIGHT
    node_gap: float = NODE_GAP
    layer_padding: float = LAYER_PADDING

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any] | None) -> LayoutConfig:
        """Build from the input's ``config`` block (camelCase keys).

        Missing, null or zero values fall back to the defaults. Anything else
        that is not a number raises MalformedGraphError.
        """
        if not raw:
            return cls()
        values: dict[str, float] = {}
        for key, attr in _CONFIG_KEYS.items():
            value = raw.get(key)
            if not value:
                continue
            if isinstance(value, bool):
                raise MalformedGraphError(f"config {key!r} must be a number, got {value!r}")
            try:
                values[attr] = float(value)
            except (TypeError, ValueError):
                raise MalformedGraphError(f"config {key!r} must be a number, got {value!r}") from None
        return cls(**values)


# ─── Layout Types ─────────────────────────────────────────────────────────────


@dataclass
class Point:
    """A 2D point in viewport pixels."""

    x: float
    y: float


@dataclass
class LayoutNode:
    """A positioned node. ``x`` is the box centre, ``y`` its top edge."""

    id: str
    layer: int
    order: int
    x: float
    y: float


@dataclass
class TreeLayout:
    """Output of one layout pass for a given viewport."""

    width: float
    height: float
    ordering: list[list[str]]
    nodes: dict[str, LayoutNode] = field(default_factory=dict)

    def __getitem__(self, node_id: str) -> LayoutNode:
        return self.nodes[node_id]


# ─── Crossing Reduction + Coordinate Assignment ──────────────────────────────


def layer_y(layer: int, max_layer: int, height: float, config: LayoutConfig) -> float:
    """Top edge of a layer, interpolated between the top and bottom padding.

    With a single layer every node shares the top row.
    """
    if max_layer == 0:
        return config.layer_padding
    return config.layer_padding + (layer / max_layer) * (height - config.layer_padding * 2)


def row_xs(count: int, width: float, config: LayoutConfig) -> list[float]:
    """Centre x of ``count`` boxes laid out left to right, centred as a group."""
    if count == 0:
        return []
    total_width = count * config.node_width + (count - 1) * config.node_gap
    start_x = (width - total_width) / 2 + config.node_width / 2
    step = config.node_width + config.node_gap
    return [start_x + i * step for i in range(count)]


def _barycenter(node: Node, placed: dict[str, LayoutNode]) -> float:
    """Mean x of a node's prereqs (all in earlier, already placed layers)."""
    if not node.prereqs:
        return 0.0
    return sum(placed[p].x for p in node.prereqs) / len(node.prereqs)


def layout_tree(
    graph: TechGraph,
    la: LayerAssignment,
    width: float,
    height: float,
    config: LayoutConfig | None = None,
) -> TreeLayout:
    """Order every layer and assign (x, y) to every node.

    Layers are processed top-down. Layer 0 keeps input order; each later
    layer is stable-sorted by barycenter, the mean x of the node's prereqs,
    so ties keep input order. Each ordered layer is then centred
    horizontally in ``width``.

    Side effect: sets ``Node.x`` / ``Node.y`` on every node.
    """
    config = config or LayoutConfig()
    result = TreeLayout(width=width, height=height, ordering=[])

    for layer_idx, group in enumerate(la.groups()):
        members = [graph.node(nid) for nid in group]
        if layer_idx > 0:
            members.sort(key=lambda n: _barycenter(n, result.nodes))

        y = layer_y(layer_idx, la.max_layer, height, config)
        for order, (node, x) in enumerate(zip(members, row_xs(len(members), width, config))):
            result.nodes[node.id] = LayoutNode(id=node.id, layer=layer_idx, order=order, x=x, y=y)
            node.x = x
            node.y = y
        result.ordering.append([n.id for n in members])

    logger.debug("laid out %d nodes in %gx%g", len(result.nodes), width, height)
    return result


def count_crossings(ordering: list[list[str]], graph: TechGraph) -> int:
    """Count prereq edges that cross between adjacent layers.

    Two edges cross when their prereqs and their dependents sit in opposite
    order. Only edges joining adjacent layers are counted; an edge that skips
    a layer has no fixed position in the layer it passes through.
    """
    slot: dict[str, tuple[int, int]] = {}
    for layer_idx, ids in enumerate(ordering):
        for order, node_id in enumerate(ids):
            slot[node_id] = (layer_idx, order)

    spans: dict[int, list[tuple[int, int]]] = defaultdict(list)
    for prereq, dependent in graph.edges():
        if prereq.id not in slot or dependent.id not in slot:
            continue
        (top, top_order), (bottom, bottom_order) = slot[prereq.id], slot[dependent.id]
        if bottom == top + 1:
            spans[top].append((top_order, bottom_order))

    return sum(
        1
        for pairs in spans.values()
        for (a_top, a_bottom), (b_top, b_bottom) in combinations(pairs, 2)
        if (a_top - b_top) * (a_bottom - b_bottom) < 0
    )


# ─── Edge Curves ──────────────────────────────────────────────────────────────


def edge_curve(from_node: LayoutNode, to_node: LayoutNode, node_height: float) -> list[Point]:
    """Cubic Bézier control polygon for the edge ``from_node`` → ``to_node``.

    Returns [start, control1, control2, end]: start at the bottom centre of
    the prereq box, end at the top centre of the dependent box, both control
    points on the vertical midpoint so the curve leaves and enters vertically.
    """
    x1, y1 = from_node.x, from_node.y + node_height
    x2, y2 = to_node.x, to_node.y
    mid_y = (y1 + y2) / 2
    return [Point(x1, y1), Point(x1, mid_y), Point(x2, mid_y), Point(x2, y2)]
