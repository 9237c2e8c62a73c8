"""
Pytest configuration and shared fixtures.

This file contains pytest configuration and fixtures that are available
to all test modules in the project.
"""

import pytest

# Import all fixtures from the fixtures module
from tests.fixtures import *


def pytest_configure(config):
    """Configure pytest settings."""
    config.addinivalue_line(
        "markers", "unit: Unit tests that test individual components in isolation"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests that exercise the ASGI app"
    )
    config.addinivalue_line(
        "markers", "slow: Tests that take longer than 1 second to run"
    )
    config.addinivalue_line(
        "markers", "config: Configuration-related tests"
    )
    config.addinivalue_line(
        "markers", "gateway: Gateway endpoint and upstream client tests"
    )
    config.addinivalue_line(
        "markers", "health: Health check tests"
    )


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location and content."""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)

        if "config" in item.name or "settings" in item.name:
            item.add_marker(pytest.mark.config)

        if "character" in item.name or "upstream" in item.name:
            item.add_marker(pytest.mark.gateway)

        if "health" in item.name or "ready" in item.name:
            item.add_marker(pytest.mark.health)
