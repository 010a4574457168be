# tests/unit/conftest.py
"""Tier markers for unit tests."""

from __future__ import annotations

import pytest

# Pure logic, no I/O or threads
TIER1_PATTERNS = [
    "test_values",
    "test_logging",
    "test_context",
    "test_retry",
    "test_prompt",
    "test_run_tracker",
    "test_conversation_buffer",
    "test_llm_chain",
    "test_stuff_documents",
    "test_refine_documents",
]


def pytest_collection_modifyitems(items):
    """Mark tier1 files; everything else under tests/unit is tier2."""
    for item in items:
        if "tests/unit" not in item.nodeid.replace("\\", "/"):
            continue
        if any(pattern in item.nodeid for pattern in TIER1_PATTERNS):
            item.add_marker(pytest.mark.tier1)
        else:
            item.add_marker(pytest.mark.tier2)
