"""SVG renderer — renders an engine snapshot to a static SVG string."""

from __future__ import annotations

from dataclasses import dataclass

from techtree.classify import EdgeState, NodeState
from techtree.engine import EdgeView, NodeView, Snapshot
from techtree.graph import NodeType
from techtree.layout import LayoutConfig

# ─── Constants ──────────────────────────────────────────────────────────────

FONT_SIZE = 12.5
FONT_FAMILY = "sans-serif"
CORNER_RADIUS = 7


@dataclass(frozen=True)
class EdgeStyle:
    color: str
    marker: str
    width: float
    opacity: float
    dash: str | None = None


@dataclass(frozen=True)
class NodeStyle:
    fill: str
    border: str
    border_width: float
    text: str
    dash: str | None = None


_EDGE_STYLES: dict[EdgeState, EdgeStyle] = {
    EdgeState.BOTH_DONE: EdgeStyle("#27ae60", "arrow-done", 2.2, 0.7),
    EdgeState.LOCKED: EdgeStyle("#d0d4d8", "arrow-dim", 1.3, 0.3),
    EdgeState.OPTIONAL: EdgeStyle("#9b59b6", "arrow-opt", 1.5, 0.5, "5,3"),
    EdgeState.REQUIRED: EdgeStyle("#4a90e2", "arrow-req", 1.5, 0.5),
}

_NODE_STYLES: dict[NodeState, NodeStyle] = {
    NodeState.DONE: NodeStyle("#e8f8f0", "#27ae60", 2.5, "#1e8449"),
    NodeState.LOCKED: NodeStyle("#f5f6f7", "#d0d4d8", 1.5, "#95999e"),
    NodeState.GOAL: NodeStyle("#fff8e6", "#f39c12", 2.5, "#d68910"),
    NodeState.OPTIONAL: NodeStyle("#f3e8ff", "#9b59b6", 2, "#7d3c98", "5,2.5"),
    NodeState.REQUIRED: NodeStyle("#e8f4fd", "#4a90e2", 2, "#3a7bc8"),
}

_ARROW_COLORS: dict[str, str] = {
    "arrow-req": "#4a90e2",
    "arrow-opt": "#9b59b6",
    "arrow-done": "#27ae60",
    "arrow-dim": "#d0d4d8",
}


def _escape(s: str) -> str:
    return s.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;").replace('"', "&quot;")


def _num(v: float) -> str:
    """Compact number formatting: at most two decimals, no trailing zeros."""
    text = f"{v:.2f}".rstrip("0").rstrip(".")
    return "0" if text == "-0" else text


# ─── Definitions ────────────────────────────────────────────────────────────


def _render_defs() -> str:
    parts = ["<defs>"]
    for marker_id, color in _ARROW_COLORS.items():
        parts.append(
            f'  <marker id="{marker_id}" viewBox="0 0 8 8" refX="7" refY="4" '
            f'markerWidth="5" markerHeight="5" orient="auto">'
            f'<path d="M0,.5 L0,7.5 L7,4Z" fill="{color}"/></marker>'
        )
    parts.extend(
        [
            '  <filter id="glow" x="-40%" y="-40%" width="180%" height="180%">',
            '    <feGaussianBlur in="SourceGraphic" stdDeviation="5" result="blur"/>',
            '    <feMerge><feMergeNode in="blur"/><feMergeNode in="SourceGraphic"/></feMerge>',
            "  </filter>",
            "</defs>",
        ]
    )
    return "\n".join(parts)


# ─── Edge Rendering ─────────────────────────────────────────────────────────


def _render_edge(edge: EdgeView) -> str:
    if len(edge.waypoints) != 4:
        return ""
    start, c1, c2, end = edge.waypoints
    style = _EDGE_STYLES[edge.state]
    d = (
        f"M{_num(start.x)},{_num(start.y)} "
        f"C{_num(c1.x)},{_num(c1.y)} {_num(c2.x)},{_num(c2.y)} {_num(end.x)},{_num(end.y)}"
    )
    dash = f' stroke-dasharray="{style.dash}"' if style.dash else ""
    return (
        f'<path d="{d}" fill="none" stroke="{style.color}" stroke-width="{_num(style.width)}" '
        f'stroke-opacity="{_num(style.opacity)}" marker-end="url(#{style.marker})"{dash}/>'
    )


# ─── Node Rendering ─────────────────────────────────────────────────────────


def _render_node(node: NodeView, config: LayoutConfig) -> str:
    w, h = config.node_width, config.node_height
    style = _NODE_STYLES[node.state]
    is_locked = node.state is NodeState.LOCKED

    cursor = "not-allowed" if is_locked else "pointer"
    parts = [
        f'<g class="node {node.state.value}" data-id="{_escape(node.id)}" '
        f'transform="translate({_num(node.x - w / 2)},{_num(node.y)})" style="cursor:{cursor}">'
    ]

    # Glow behind goals that are reachable but not yet done.
    if node.type is NodeType.GOAL and node.is_unlocked and not node.is_done:
        parts.append(
            f'  <rect width="{_num(w)}" height="{_num(h)}" rx="{CORNER_RADIUS}" '
            f'fill="#f39c12" opacity="0.08" filter="url(#glow)"/>'
        )

    dash = f' stroke-dasharray="{style.dash}"' if style.dash else ""
    parts.append(
        f'  <rect width="{_num(w)}" height="{_num(h)}" rx="{CORNER_RADIUS}" fill="{style.fill}" '
        f'stroke="{style.border}" stroke-width="{_num(style.border_width)}"{dash}/>'
    )
    parts.append(
        f'  <text x="{_num(w / 2)}" y="{_num(h / 2)}" text-anchor="middle" dominant-baseline="middle" '
        f'fill="{style.text}" font-family="{FONT_FAMILY}" font-size="{FONT_SIZE}px" '
        f'font-weight="600">{_escape(node.label)}</text>'
    )

    if node.state is NodeState.OPTIONAL:
        parts.append('  <rect x="3" y="2" width="17" height="9" rx="3" fill="rgba(155, 89, 182, 0.15)"/>')
        parts.append(
            '  <text x="11.5" y="6.5" text-anchor="middle" dominant-baseline="middle" '
            'fill="#9b59b6" font-size="7px" font-weight="600">side</text>'
        )

    if node.state is NodeState.DONE:
        parts.append(
            f'  <text x="{_num(w - 11)}" y="{_num(h / 2)}" text-anchor="middle" dominant-baseline="middle" '
            f'fill="#27ae60" font-size="15px">✓</text>'
        )
    elif is_locked:
        parts.append(
            f'  <text x="{_num(w - 12)}" y="{_num(h / 2 + 1)}" text-anchor="middle" '
            f'dominant-baseline="middle" font-size="11px">🔒</text>'
        )

    parts.append("</g>")
    return "\n".join(parts)


# ─── Public Renderer ────────────────────────────────────────────────────────


class SvgRenderer:
    """SVG renderer — consumes an engine snapshot, produces an SVG string."""

    def render(self, snapshot: Snapshot, config: LayoutConfig) -> str:
        w, h = _num(snapshot.width), _num(snapshot.height)
        parts = [
            f'<svg xmlns="http://www.w3.org/2000/svg" width="{w}" height="{h}" viewBox="0 0 {w} {h}">',
            _render_defs(),
            "<g>",
        ]

        # Edges (behind nodes)
        for edge in snapshot.edges:
            parts.append(_render_edge(edge))

        # Nodes (on top)
        for node in snapshot.nodes:
            parts.append(_render_node(node, config))

        parts.append("</g>")
        parts.append("</svg>")
        return "\n".join(parts)
