"""Pytest Configuration and Shared Fixtures

This file is automatically loaded by pytest and makes all fixtures available to all tests.
"""
import sys
from datetime import datetime
from pathlib import Path

import pytest

# Add project root to path for imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from tests.fixtures.market_data import ManualClock  # noqa: E402


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers",
        "unit: Unit tests without threads or sleeps (fast)"
    )
    config.addinivalue_line(
        "markers",
        "integration: Full pipeline and threading tests (slower than unit tests)"
    )


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)

        if "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)


@pytest.fixture
def captured_logs():
    """Capture loguru records emitted during a test."""
    from bargen.logger import logger

    records = []
    handler_id = logger.add(
        lambda message: records.append(message.record),
        level="TRACE",
        format="{message}",
    )
    yield records
    logger.remove(handler_id)


@pytest.fixture
def base_time():
    """A Monday morning session open (naive exchange time)."""
    return datetime(2025, 1, 6, 9, 30)


@pytest.fixture
def manual_clock(base_time):
    return ManualClock(base_time)


@pytest.fixture
def collected_bars():
    """List used as a sink for emitted bars."""
    return []
