"""Shared pytest fixtures and configuration for pytest."""

import sys
from unittest.mock import AsyncMock, MagicMock

import pytest

from gboxrun.control.simulated import SimulatedController
from gboxrun.core.types import ExecutionResult


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers for platform-specific tests."""
    config.addinivalue_line("markers", "unix_only: mark test to run only on Unix")


def pytest_collection_modifyitems(
    config: pytest.Config, items: list[pytest.Item]
) -> None:
    """Auto-skip tests based on platform markers."""
    skip_unix = pytest.mark.skip(reason="Unix-only test")

    for item in items:
        if "unix_only" in item.keywords and sys.platform == "win32":
            item.add_marker(skip_unix)


@pytest.fixture
def simulated() -> SimulatedController:
    """Simulated controller with two run configurations."""
    return SimulatedController(["app", "benchmark"])


@pytest.fixture
def spy_controller() -> MagicMock:
    """Controller whose every operation succeeds and records its calls."""
    controller = MagicMock()
    controller.start = AsyncMock(return_value=ExecutionResult(True, "ok", "app"))
    controller.stop = AsyncMock(return_value=ExecutionResult(True, "stopped"))
    controller.debug = AsyncMock(return_value=ExecutionResult(True, "debugging", "app"))
    controller.list_configurations = MagicMock(return_value=["app", "benchmark"])
    controller.select_configuration = MagicMock(
        return_value=ExecutionResult(True, "Configuration 'app' selected")
    )
    return controller
