"""Load tech tree definitions from JSON."""

from __future__ import annotations

import json
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from techtree.errors import MalformedGraphError
from techtree.graph import Node, NodeType
from techtree.layout import LayoutConfig


def _node_from_dict(raw: Any) -> Node:
    """Build a node from one raw record."""
    if not isinstance(raw, Mapping):
        raise MalformedGraphError(f"node record must be an object, got {type(raw).__name__}")
    if "id" not in raw:
        raise MalformedGraphError(f"node record without id: {dict(raw)!r}")

    node_id = str(raw["id"])
    prereqs = raw.get("prereqs") or []
    if isinstance(prereqs, str) or not isinstance(prereqs, list):
        raise MalformedGraphError(f"node {node_id!r}: prereqs must be a list of ids")

    return Node(
        id=node_id,
        label=str(raw.get("label") or node_id),
        type=NodeType.parse(raw.get("type", NodeType.REQUIRED.value)),
        prereqs=tuple(str(p) for p in prereqs),
        desc=str(raw.get("desc") or ""),
    )


def tree_from_dict(raw: Any) -> tuple[list[Node], LayoutConfig]:
    """Parse an in-memory tree definition.

    Accepts either ``{"nodes": [...], "config": {...}}`` or a bare list of
    node records.
    """
    if isinstance(raw, list):
        records, config = raw, None
    elif isinstance(raw, Mapping):
        records, config = raw.get("nodes") or [], raw.get("config")
    else:
        raise MalformedGraphError(f"tree definition must be an object or a list, got {type(raw).__name__}")

    if not isinstance(records, list):
        raise MalformedGraphError("'nodes' must be a list")
    if config is not None and not isinstance(config, Mapping):
        raise MalformedGraphError("'config' must be an object")

    return [_node_from_dict(item) for item in records], LayoutConfig.from_dict(config)


def load_tree(path: Path | str) -> tuple[list[Node], LayoutConfig]:
    """Read a tree definition from a JSON file."""
    try:
        raw = json.loads(Path(path).read_text(encoding="utf-8"))
    except UnicodeDecodeError as exc:
        raise MalformedGraphError(f"{path}: not valid UTF-8 (byte {exc.start})") from exc
    except json.JSONDecodeError as exc:
        raise MalformedGraphError(f"{path}: invalid JSON ({exc.msg} at line {exc.lineno})") from exc
    return tree_from_dict(raw)
