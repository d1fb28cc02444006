"""Base renderer protocol."""

from __future__ import annotations

from typing import Protocol

from techtree.engine import Snapshot
from techtree.layout import LayoutConfig


class Renderer(Protocol):
    """Anything that turns an engine snapshot into output text."""

    def render(self, snapshot: Snapshot, config: LayoutConfig) -> str:
        """Render a snapshot to an output string."""
        ...
