"""Completion state of a tech tree: unlock queries, toggle and reset."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from techtree.graph import Node, TechGraph

logger = logging.getLogger(__name__)


class ProgressionState:
    """Owns the set of completed node ids for one graph.

    The set only ever holds nodes whose prereqs are all completed: nodes are
    added only when unlocked, and un-completing a node first revokes every
    completed node downstream of it.
    """

    def __init__(self, graph: TechGraph) -> None:
        self._graph = graph
        self._completed: set[str] = set()

    @property
    def completed(self) -> frozenset[str]:
        return frozenset(self._completed)

    def is_done(self, node: Node) -> bool:
        return node.id in self._completed

    def is_unlocked(self, node: Node) -> bool:
        """True when the node has no prereqs or all of them are completed."""
        return all(p in self._completed for p in node.prereqs)

    def is_locked(self, node: Node) -> bool:
        return not self.is_done(node) and not self.is_unlocked(node)

    def toggle(self, node: Node) -> frozenset[str]:
        """Flip the completion state of ``node``.

        A locked, incomplete node is left alone. Un-completing a node also
        un-completes every completed node that depends on it, transitively.

        Returns:
            Ids whose state changed; empty when the toggle was a no-op.
        """
        if node.id in self._completed:
            revoked = self._revoke(node.id)
            logger.debug("revoked %s (cascade: %d nodes)", node.id, len(revoked))
            return revoked

        if not self.is_unlocked(node):
            logger.debug("ignored toggle of locked node %s", node.id)
            return frozenset()

        self._completed.add(node.id)
        logger.debug("completed %s", node.id)
        return frozenset({node.id})

    def _revoke(self, node_id: str) -> frozenset[str]:
        """Remove ``node_id`` and its completed downstream closure."""
        revoked: set[str] = set()
        stack = [node_id]
        while stack:
            current = stack.pop()
            for dependent in self._graph.digraph.successors(current):
                if dependent in self._completed and dependent not in revoked:
                    revoked.add(dependent)
                    stack.append(dependent)
        revoked.add(node_id)
        self._completed -= revoked
        return frozenset(revoked)

    def complete_many(self, node_ids: Iterable[str]) -> frozenset[str]:
        """Complete each id in turn, skipping ids already done or still locked."""
        changed: set[str] = set()
        for node_id in node_ids:
            node = self._graph.node(node_id)
            if self.is_done(node):
                continue
            changed |= self.toggle(node)
        return frozenset(changed)

    def reset(self) -> None:
        self._completed.clear()
