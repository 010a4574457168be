# tests/conftest.py
"""
Root conftest.

Test Tiers:
- tier1: Pure logic tests - no I/O, no threads (<5s)
         Run: pytest -m tier1
- tier2: Unit tests with fakes, mock transports or thread pools
         Run: pytest -m "tier1 or tier2"

Tiers are assigned in tests/unit/conftest.py by file name.
"""

from __future__ import annotations

import pytest

from chainloom.core.context import RunContext


@pytest.fixture
def ctx() -> RunContext:
    """Fresh, uncancelled run context."""
    return RunContext()


@pytest.fixture(autouse=True)
def _no_backend_keys(monkeypatch):
    """Keep real API keys out of the unit tests."""
    for name in ("COHERE_API_KEY", "CO_API_KEY", "CHAINLOOM_API_KEY"):
        monkeypatch.delenv(name, raising=False)
