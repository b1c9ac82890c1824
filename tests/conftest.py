"""Shared fixtures for the arithmetization tests."""

import sys
from pathlib import Path

import pytest

# tests/ sits inside the project root
root_dir = Path(__file__).parent.parent
if str(root_dir) not in sys.path:
    sys.path.insert(0, str(root_dir))

from constraints.fibonacci import SeedBinding, build_constraint_system  # noqa: E402


@pytest.fixture(scope="module")
def cs5():
    """Fibonacci constraint system with MAX = 5 (six rows)."""
    return build_constraint_system(5)


@pytest.fixture(scope="module", params=list(SeedBinding), ids=lambda b: b.value)
def cs8(request):
    """Fibonacci constraint system with MAX = 8, once per seed binding."""
    return build_constraint_system(8, seed_binding=request.param)
