"""
Shared pytest fixtures and configuration for ccc tests.

This module provides:
- Settings cache reset for test isolation
- Tracking allocators for memory-contract tests
- Destructor call recorders

Usage:
    Fixtures are auto-discovered by pytest::

        def test_teardown(tracking, released):
            ...
"""

import os
import sys
from pathlib import Path
from typing import Generator

import pytest

# Give rich consoles (created at import of ccc.cli) a wide, stable terminal
# width so table cells are not wrapped by the host terminal size.
os.environ.setdefault("COLUMNS", "200")

# Ensure ccc package is importable
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from ccc.core.memory import TrackingAllocator
from ccc.core.settings import reset_settings


# =============================================================================
# Test Markers Configuration
# =============================================================================


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Mark every test without an explicit marker as a unit test."""
    for item in items:
        markers = {mark.name for mark in item.iter_markers()}
        if "unit" not in markers:
            item.add_marker(pytest.mark.unit)


# =============================================================================
# Settings Isolation
# =============================================================================


@pytest.fixture(autouse=True)
def clean_settings() -> Generator[None, None, None]:
    """Drop cached settings before and after each test."""
    reset_settings()
    yield
    reset_settings()


# =============================================================================
# Memory Fixtures
# =============================================================================


@pytest.fixture
def tracking() -> TrackingAllocator:
    """Unlimited allocator that counts every call."""
    return TrackingAllocator()


@pytest.fixture
def limited() -> TrackingAllocator:
    """Allocator that refuses to hold more than 4 live slots."""
    return TrackingAllocator(limit=4)


@pytest.fixture
def released() -> list:
    """List that a destructor can append released elements to.

    Pass ``released.append`` as the destructor.
    """
    return []
