"""Snapshot renderers."""

from __future__ import annotations

from techtree.renderers.base import Renderer
from techtree.renderers.svg import SvgRenderer

__all__ = ["Renderer", "SvgRenderer"]
