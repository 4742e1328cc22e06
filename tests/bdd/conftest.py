"""BDD test configuration for step binding."""

from typing import Any

import pytest


@pytest.fixture
def bdd_context() -> dict[str, Any]:
    """Shared context for BDD scenarios."""
    return {
        "engine": None,
        "method": None,
        "result": None,
    }
