"""Engine facade: the one object a renderer talks to.

Builds the graph index and layer assignment once, owns the completion state,
and hands out read-only snapshots for a viewport. Layout positions are cached
per viewport and survive toggles; the snapshot (which carries visual state)
is invalidated by every toggle and reset.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from techtree.classify import EdgeState, NodeState, classify_edge, classify_node
from techtree.graph import Node, NodeType, TechGraph
from techtree.layout import LayerAssignment, LayoutConfig, Point, TreeLayout, edge_curve, layout_tree
from techtree.progress import ProgressionState

logger = logging.getLogger(__name__)

TYPE_LABELS: dict[NodeType, str] = {
    NodeType.REQUIRED: "Main Quest",
    NodeType.OPTIONAL: "Side Quest",
    NodeType.GOAL: "Goal of Chapter",
}

HINT_LOCKED = "🔒 Please complete all requirements"
HINT_DONE = "Click to mark as incomplete"
HINT_UNLOCKED = "👆 Click to complete"

# ─── Snapshot Types ───────────────────────────────────────────────────────────


@dataclass(frozen=True)
class NodeView:
    id: str
    label: str
    type: NodeType
    x: float
    y: float
    layer: int
    is_done: bool
    is_unlocked: bool
    state: NodeState


@dataclass(frozen=True)
class EdgeView:
    """Edge prereq (``from_id``) → dependent (``to_id``) with its curve."""

    from_id: str
    to_id: str
    state: EdgeState
    waypoints: tuple[Point, ...]


@dataclass(frozen=True)
class Progress:
    """Completed required nodes out of all required nodes."""

    completed: int
    total: int

    @property
    def ratio(self) -> float:
        if self.total == 0:
            return 0.0
        return self.completed / self.total

    @property
    def text(self) -> str:
        return f"{self.completed} / {self.total} required"


@dataclass(frozen=True)
class Snapshot:
    width: float
    height: float
    nodes: tuple[NodeView, ...]
    edges: tuple[EdgeView, ...]
    progress: Progress

    def node(self, node_id: str) -> NodeView:
        for view in self.nodes:
            if view.id == node_id:
                return view
        raise KeyError(node_id)


@dataclass(frozen=True)
class TooltipData:
    label: str
    type: NodeType
    type_label: str
    description: str
    prereq_labels: tuple[str, ...]
    hint: str

    @property
    def requirements_text(self) -> str:
        if not self.prereq_labels:
            return "No Requirements!"
        return "Requirements: " + " + ".join(self.prereq_labels)


# ─── Engine ───────────────────────────────────────────────────────────────────


class TechTreeEngine:
    """Tech tree engine: layers, completion state and layout behind one API.

    Raises at construction (and never later) for bad input:
        MalformedGraphError: duplicate id or dangling prereq.
        CycleDetectedError: the prereq relation has a cycle.
    """

    def __init__(self, nodes: Iterable[Node], config: LayoutConfig | None = None) -> None:
        self.graph = TechGraph(nodes)
        self.layers = LayerAssignment.assign(self.graph)
        self.config = config or LayoutConfig()
        self.state = ProgressionState(self.graph)
        self._layout: TreeLayout | None = None
        self._snapshot: Snapshot | None = None
        logger.info("tech tree ready: %d nodes in %d layers", len(self.graph), self.layers.layer_count)

    # ── queries ──

    def is_done(self, node_id: str) -> bool:
        return self.state.is_done(self.graph.node(node_id))

    def is_unlocked(self, node_id: str) -> bool:
        return self.state.is_unlocked(self.graph.node(node_id))

    def is_locked(self, node_id: str) -> bool:
        return self.state.is_locked(self.graph.node(node_id))

    def progress(self) -> Progress:
        required = self.graph.required_nodes()
        done = sum(1 for n in required if self.state.is_done(n))
        return Progress(completed=done, total=len(required))

    def get_tooltip_data(self, node_id: str) -> TooltipData:
        node = self.graph.node(node_id)
        if self.state.is_locked(node):
            hint = HINT_LOCKED
        elif self.state.is_done(node):
            hint = HINT_DONE
        else:
            hint = HINT_UNLOCKED
        return TooltipData(
            label=node.label,
            type=node.type,
            type_label=TYPE_LABELS[node.type],
            description=node.desc,
            prereq_labels=tuple(self.graph.node(p).label for p in node.prereqs),
            hint=hint,
        )

    # ── mutations ──

    def toggle_node(self, node_id: str) -> frozenset[str]:
        """Toggle completion of ``node_id``; returns the ids that changed."""
        changed = self.state.toggle(self.graph.node(node_id))
        if changed:
            self._snapshot = None
        return changed

    def complete_many(self, node_ids: Iterable[str]) -> frozenset[str]:
        """Complete ids in order, skipping done and locked ones; returns the ids that changed."""
        changed = self.state.complete_many(node_ids)
        if changed:
            self._snapshot = None
        return changed

    def reset_all(self) -> None:
        self.state.reset()
        self._snapshot = None

    # ── layout / snapshot ──

    def layout(self, width: float, height: float) -> TreeLayout:
        """Positions for a viewport; recomputed only when the viewport changes."""
        cached = self._layout
        if cached is None or (cached.width, cached.height) != (width, height):
            cached = layout_tree(self.graph, self.layers, width, height, self.config)
            self._layout = cached
            self._snapshot = None
        return cached

    def get_snapshot(self, width: float, height: float) -> Snapshot:
        """Positioned nodes and classified edges for the renderer."""
        tree_layout = self.layout(width, height)
        if self._snapshot is not None:
            return self._snapshot

        completed = self.state.completed
        nodes = []
        for node in self.graph:
            pos = tree_layout[node.id]
            nodes.append(
                NodeView(
                    id=node.id,
                    label=node.label,
                    type=node.type,
                    x=pos.x,
                    y=pos.y,
                    layer=pos.layer,
                    is_done=node.id in completed,
                    is_unlocked=self.state.is_unlocked(node),
                    state=classify_node(node, completed),
                )
            )

        edges = []
        for prereq, dependent in self.graph.edges():
            curve = edge_curve(tree_layout[prereq.id], tree_layout[dependent.id], self.config.node_height)
            edges.append(
                EdgeView(
                    from_id=prereq.id,
                    to_id=dependent.id,
                    state=classify_edge(prereq, dependent, completed),
                    waypoints=tuple(curve),
                )
            )

        self._snapshot = Snapshot(
            width=width,
            height=height,
            nodes=tuple(nodes),
            edges=tuple(edges),
            progress=self.progress(),
        )
        return self._snapshot
