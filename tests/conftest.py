from __future__ import annotations

from pathlib import Path

import pytest

FIXTURES = Path(__file__).parent / "fixtures"


@pytest.fixture
def starter_tree() -> Path:
    """Four-node tree: setup → {basics, extras(optional)} → project(goal)."""
    return FIXTURES / "starter.json"
