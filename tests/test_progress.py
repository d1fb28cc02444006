"""Tests for progress.py — unlock queries, toggle, cascading revocation, reset."""

from __future__ import annotations

import pytest

from techtree.graph import Node, TechGraph
from techtree.progress import ProgressionState

# ─── Helpers ──────────────────────────────────────────────────────────────────


def make_state(*specs: tuple[str, list[str]]) -> tuple[TechGraph, ProgressionState]:
    graph = TechGraph(Node(id=nid, label=nid, prereqs=tuple(prereqs)) for nid, prereqs in specs)
    return graph, ProgressionState(graph)


def complete(graph: TechGraph, state: ProgressionState, *ids: str) -> None:
    for node_id in ids:
        state.toggle(graph.node(node_id))


@pytest.fixture
def chain() -> tuple[TechGraph, ProgressionState]:
    """A → B → C (C requires B, B requires A), all completed."""
    graph, state = make_state(("A", []), ("B", ["A"]), ("C", ["B"]))
    complete(graph, state, "A", "B", "C")
    return graph, state


# ─── Unlock Tests ─────────────────────────────────────────────────────────────


class TestIsUnlocked:
    def test_root_always_unlocked(self):
        graph, state = make_state(("a", []))
        assert state.is_unlocked(graph.node("a"))

    def test_requires_every_prereq(self):
        graph, state = make_state(("a", []), ("b", ["a"]), ("c", ["a", "b"]))
        c = graph.node("c")
        assert not state.is_unlocked(c)
        complete(graph, state, "a")
        assert not state.is_unlocked(c)
        complete(graph, state, "b")
        assert state.is_unlocked(c)

    def test_locked_means_not_done_and_not_unlocked(self):
        graph, state = make_state(("a", []), ("b", ["a"]))
        assert state.is_locked(graph.node("b"))
        assert not state.is_locked(graph.node("a"))
        complete(graph, state, "a")
        assert not state.is_locked(graph.node("b"))


# ─── Toggle Tests ─────────────────────────────────────────────────────────────


class TestToggle:
    def test_complete_unlocked_node(self):
        graph, state = make_state(("a", []))
        changed = state.toggle(graph.node("a"))
        assert changed == {"a"}
        assert state.completed == {"a"}

    def test_locked_node_is_noop(self):
        graph, state = make_state(("a", []), ("b", ["a"]))
        changed = state.toggle(graph.node("b"))
        assert changed == frozenset()
        assert state.completed == frozenset()

    def test_toggle_done_leaf_removes_it(self):
        graph, state = make_state(("a", []), ("b", ["a"]))
        complete(graph, state, "a", "b")
        assert state.toggle(graph.node("b")) == {"b"}
        assert state.completed == {"a"}

    def test_revoke_root_cascades_whole_chain(self, chain):
        graph, state = chain
        changed = state.toggle(graph.node("A"))
        assert changed == {"A", "B", "C"}
        assert state.completed == frozenset()

    def test_revoke_middle_keeps_upstream(self, chain):
        graph, state = chain
        state.toggle(graph.node("B"))
        assert state.completed == {"A"}

    def test_cascade_skips_incomplete_dependents(self):
        """Only completed dependents are revoked; siblings on other branches survive."""
        graph, state = make_state(("a", []), ("b", ["a"]), ("c", ["a"]), ("d", []), ("e", ["d"]))
        complete(graph, state, "a", "b", "d", "e")
        assert state.toggle(graph.node("a")) == {"a", "b"}
        assert state.completed == {"d", "e"}

    def test_cascade_through_diamond(self):
        graph, state = make_state(("a", []), ("b", ["a"]), ("c", ["a"]), ("d", ["b", "c"]))
        complete(graph, state, "a", "b", "c", "d")
        state.toggle(graph.node("b"))
        assert state.completed == {"a", "c"}

    def test_invariant_after_every_toggle(self):
        """No completed node is ever left with an incomplete prereq."""
        graph, state = make_state(
            ("a", []), ("b", ["a"]), ("c", ["a", "b"]), ("d", ["c"]), ("e", ["b"]), ("f", [])
        )
        for node_id in ["a", "b", "c", "d", "e", "f", "b", "a", "a", "b", "e", "c", "a"]:
            state.toggle(graph.node(node_id))
            for node_id_done in state.completed:
                assert all(p in state.completed for p in graph.node(node_id_done).prereqs)

    def test_spec_scenario(self):
        """Complete a, b, c in turn, then revoke a → nothing left."""
        graph, state = make_state(("a", []), ("b", ["a"]), ("c", ["a", "b"]))
        assert not state.is_unlocked(graph.node("c"))
        complete(graph, state, "a", "b", "c")
        assert state.completed == {"a", "b", "c"}
        state.toggle(graph.node("a"))
        assert state.completed == frozenset()


# ─── Reset / complete_many Tests ──────────────────────────────────────────────


class TestReset:
    def test_reset_clears(self, chain):
        _, state = chain
        state.reset()
        assert state.completed == frozenset()

    def test_reset_idempotent(self, chain):
        _, state = chain
        state.reset()
        state.reset()
        assert state.completed == frozenset()

    def test_completed_is_a_snapshot(self, chain):
        _, state = chain
        before = state.completed
        state.reset()
        assert before == {"A", "B", "C"}


class TestCompleteMany:
    def test_completes_in_order(self):
        graph, state = make_state(("a", []), ("b", ["a"]), ("c", ["b"]))
        assert state.complete_many(["a", "b", "c"]) == {"a", "b", "c"}

    def test_skips_locked_and_done(self):
        graph, state = make_state(("a", []), ("b", ["a"]), ("c", ["b"]))
        complete(graph, state, "a")
        assert state.complete_many(["a", "c", "b"]) == {"b"}
        assert state.completed == {"a", "b"}

    def test_unknown_id(self):
        _, state = make_state(("a", []))
        with pytest.raises(KeyError):
            state.complete_many(["nope"])
