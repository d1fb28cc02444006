"""Tech tree graph model: nodes, node types and the id index.

The graph keeps two views of the same structure:

  * ``nodes`` / ``node(id)``: the input records in input order, which the
    layout relies on for stable ordering.
  * ``digraph``: a networkx ``DiGraph`` with one edge per prerequisite,
    pointing prereq → dependent. Every node carries its ``Node`` record
    under the ``data`` attribute.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from enum import Enum

import networkx as nx

from techtree.errors import CycleDetectedError, MalformedGraphError

logger = logging.getLogger(__name__)


class NodeType(Enum):
    """Role of a node in the tree."""

    REQUIRED = "required"
    OPTIONAL = "optional"
    GOAL = "goal"

    @classmethod
    def parse(cls, value: str | NodeType) -> NodeType:
        """Coerce a raw ``type`` string into a NodeType."""
        if isinstance(value, NodeType):
            return value
        try:
            return cls(value)
        except ValueError:
            raise MalformedGraphError(f"unknown node type {value!r}") from None


@dataclass
class Node:
    """One tech tree entry.

    ``id``, ``label``, ``type``, ``prereqs`` and ``desc`` come from the input
    and never change. ``layer``, ``x`` and ``y`` are written by the engine on
    every recomputation.
    """

    id: str
    label: str
    type: NodeType = NodeType.REQUIRED
    prereqs: tuple[str, ...] = ()
    desc: str = ""
    layer: int = field(default=0, compare=False)
    x: float | None = field(default=None, compare=False)
    y: float | None = field(default=None, compare=False)

    def __post_init__(self) -> None:
        self.type = NodeType.parse(self.type)
        self.prereqs = tuple(self.prereqs)


class TechGraph:
    """Id index over an ordered node list, backed by a networkx DiGraph.

    Construction validates the structure and either succeeds completely or
    raises; there is no partially built graph.

    Raises:
        MalformedGraphError: duplicate node id, repeated or dangling prereq.
        CycleDetectedError: a node listing itself as its own prereq.
    """

    def __init__(self, nodes: Iterable[Node]) -> None:
        ordered = list(nodes)
        index: dict[str, Node] = {}
        for node in ordered:
            if node.id in index:
                raise MalformedGraphError(f"duplicate node id {node.id!r}")
            index[node.id] = node

        digraph: nx.DiGraph = nx.DiGraph()
        for node in ordered:
            digraph.add_node(node.id, data=node)

        for node in ordered:
            seen: set[str] = set()
            for pid in node.prereqs:
                if pid == node.id:
                    raise CycleDetectedError([node.id])
                if pid not in index:
                    raise MalformedGraphError(f"node {node.id!r} requires unknown node {pid!r}")
                if pid in seen:
                    raise MalformedGraphError(f"node {node.id!r} lists prereq {pid!r} more than once")
                seen.add(pid)
                digraph.add_edge(pid, node.id)

        self._nodes = ordered
        self._index = index
        self._position = {node.id: i for i, node in enumerate(ordered)}
        self.digraph = digraph
        logger.debug("indexed %d nodes, %d prereq edges", len(ordered), digraph.number_of_edges())

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> Iterator[Node]:
        return iter(self._nodes)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._index

    @property
    def nodes(self) -> list[Node]:
        """All nodes in input order."""
        return list(self._nodes)

    def node(self, node_id: str) -> Node:
        """Look up a node by id. Raises KeyError for an unknown id."""
        return self._index[node_id]

    def position(self, node_id: str) -> int:
        """Index of the node in the input sequence."""
        return self._position[node_id]

    def dependents(self, node_id: str) -> list[Node]:
        """Nodes that list ``node_id`` as a prereq, in input order."""
        ids = sorted(self.digraph.successors(node_id), key=self.position)
        return [self._index[i] for i in ids]

    def edges(self) -> list[tuple[Node, Node]]:
        """All (prereq, dependent) pairs: dependents in input order, prereqs in list order."""
        return [(self._index[pid], node) for node in self._nodes for pid in node.prereqs]

    def required_nodes(self) -> list[Node]:
        """Nodes of type ``required``, in input order."""
        return [n for n in self._nodes if n.type is NodeType.REQUIRED]
