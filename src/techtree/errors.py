"""Errors raised while building a tech tree engine."""

from __future__ import annotations


class TechTreeError(ValueError):
    """Base class for all tech tree input errors."""


class MalformedGraphError(TechTreeError):
    """The node list is structurally invalid (duplicate id, dangling prereq, bad record)."""


class CycleDetectedError(TechTreeError):
    """A node depends on itself, directly or transitively.

    Attributes:
        cycle: Node ids along the cycle, in prereq → dependent order.
    """

    def __init__(self, cycle: list[str]) -> None:
        self.cycle = cycle
        path = " -> ".join([*cycle, cycle[0]]) if cycle else "?"
        super().__init__(f"prerequisite cycle detected: {path}")
