"""Tech tree progression engine: layering, unlock state and layered layout."""

from __future__ import annotations

from techtree.classify import EdgeState, NodeState, classify_edge, classify_node
from techtree.engine import EdgeView, NodeView, Progress, Snapshot, TechTreeEngine, TooltipData
from techtree.errors import CycleDetectedError, MalformedGraphError, TechTreeError
from techtree.graph import Node, NodeType, TechGraph
from techtree.layout import LayerAssignment, LayoutConfig
from techtree.loader import load_tree, tree_from_dict
from techtree.progress import ProgressionState

__all__ = [
    "CycleDetectedError",
    "EdgeState",
    "EdgeView",
    "LayerAssignment",
    "LayoutConfig",
    "MalformedGraphError",
    "Node",
    "NodeState",
    "NodeType",
    "NodeView",
    "Progress",
    "ProgressionState",
    "Snapshot",
    "TechGraph",
    "TechTreeEngine",
    "TechTreeError",
    "TooltipData",
    "classify_edge",
    "classify_node",
    "load_tree",
    "tree_from_dict",
]
