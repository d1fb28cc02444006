"""Visual classification of nodes and edges.

Both classifiers are pure functions of a node (or edge) and the set of
completed ids. Precedence:

  node:  done > locked > goal / optional / required (by type)
  edge:  bothDone > locked (either end) > optional (dependent type) > required
"""

from __future__ import annotations

from collections.abc import Set
from enum import Enum

from techtree.graph import Node, NodeType


class NodeState(Enum):
    DONE = "done"
    LOCKED = "locked"
    GOAL = "goal"
    OPTIONAL = "optional"
    REQUIRED = "required"


class EdgeState(Enum):
    BOTH_DONE = "bothDone"
    LOCKED = "locked"
    OPTIONAL = "optional"
    REQUIRED = "required"


_TYPE_STATES: dict[NodeType, NodeState] = {
    NodeType.GOAL: NodeState.GOAL,
    NodeType.OPTIONAL: NodeState.OPTIONAL,
    NodeType.REQUIRED: NodeState.REQUIRED,
}


def is_locked(node: Node, completed: Set[str]) -> bool:
    """Not completed and at least one prereq not completed."""
    return node.id not in completed and not all(p in completed for p in node.prereqs)


def classify_node(node: Node, completed: Set[str]) -> NodeState:
    if node.id in completed:
        return NodeState.DONE
    if is_locked(node, completed):
        return NodeState.LOCKED
    return _TYPE_STATES[node.type]


def classify_edge(prereq: Node, dependent: Node, completed: Set[str]) -> EdgeState:
    """Classify the edge prereq → dependent."""
    if prereq.id in completed and dependent.id in completed:
        return EdgeState.BOTH_DONE
    if is_locked(prereq, completed) or is_locked(dependent, completed):
        return EdgeState.LOCKED
    if dependent.type is NodeType.OPTIONAL:
        return EdgeState.OPTIONAL
    return EdgeState.REQUIRED
