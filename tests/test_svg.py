"""Tests for the SVG renderer."""

from __future__ import annotations

from techtree.engine import TechTreeEngine
from techtree.graph import Node
from techtree.renderers import Renderer, SvgRenderer


def render(engine: TechTreeEngine, width: float = 800, height: float = 400) -> str:
    return SvgRenderer().render(engine.get_snapshot(width, height), engine.config)


def make_engine() -> TechTreeEngine:
    return TechTreeEngine(
        [
            Node(id="a", label="A & B"),
            Node(id="opt", label="Opt", type="optional", prereqs=("a",)),
            Node(id="goal", label="Goal", type="goal", prereqs=("a",)),
        ]
    )


class TestSvgRenderer:
    def test_satisfies_protocol(self):
        renderer: Renderer = SvgRenderer()
        assert callable(renderer.render)

    def test_document_frame(self):
        svg = render(make_engine(), 800, 400)
        assert svg.startswith('<svg xmlns="http://www.w3.org/2000/svg" width="800" height="400" viewBox="0 0 800 400">')
        assert svg.endswith("</svg>")
        assert '<marker id="arrow-req"' in svg
        assert '<filter id="glow"' in svg

    def test_one_group_per_node_and_path_per_edge(self):
        svg = render(make_engine())
        assert svg.count('<g class="node ') == 3
        assert svg.count('marker-end="url(#') == 2

    def test_label_escaped(self):
        assert "A &amp; B" in render(make_engine())

    def test_locked_nodes_show_lock(self):
        svg = render(make_engine())
        assert svg.count("🔒") == 2
        assert 'class="node locked" data-id="opt"' in svg
        assert "cursor:not-allowed" in svg
        assert 'filter="url(#glow)"' not in svg

    def test_unlocked_optional_and_goal(self):
        engine = make_engine()
        engine.toggle_node("a")
        svg = render(engine)
        assert 'class="node done" data-id="a"' in svg
        assert "✓" in svg
        assert ">side</text>" in svg
        assert 'filter="url(#glow)"' in svg
        assert 'stroke-dasharray="5,3"' in svg
        assert 'marker-end="url(#arrow-opt)"' in svg
        assert 'marker-end="url(#arrow-req)"' in svg

    def test_both_done_edge(self):
        engine = make_engine()
        engine.toggle_node("a")
        engine.toggle_node("goal")
        svg = render(engine)
        assert 'marker-end="url(#arrow-done)"' in svg

    def test_node_box_position(self):
        """Box is translated so x is its centre: 400 - 136/2 = 332."""
        engine = TechTreeEngine([Node(id="a", label="A")])
        assert 'transform="translate(332,34)"' in render(engine, 800, 400)

    def test_empty_tree(self):
        svg = render(TechTreeEngine([]))
        assert "<g class=\"node" not in svg
        assert svg.endswith("</svg>")
