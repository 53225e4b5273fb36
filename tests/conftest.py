"""
Pytest configuration and shared fixtures.

This module provides central pytest configuration, custom markers,
and shared fixtures for the storecheck test suite.
"""

import shutil
import tempfile
from collections.abc import Generator
from pathlib import Path

import pytest

# =============================================================================
# Plugin Registration
# =============================================================================

pytest_plugins = [
    "storecheck.testing.plugin",
    "tests.fixtures.logging",
]


# =============================================================================
# Pytest Configuration
# =============================================================================


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "unit: Unit tests (fast, isolated, no external dependencies)"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests (use the ephemeral database)"
    )
    config.addinivalue_line(
        "markers", "e2e: Browser-driven scenarios against a running deployment"
    )
    config.addinivalue_line("markers", "property: Property-based tests (hypothesis)")
    config.addinivalue_line("markers", "performance: Performance/benchmark tests")


# =============================================================================
# Shared Fixtures
# =============================================================================


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """
    Provide a temporary directory that is cleaned up after the test.

    Yields:
        Path: Temporary directory path
    """
    temp_path = Path(tempfile.mkdtemp(prefix="storecheck-test-"))
    try:
        yield temp_path
    finally:
        shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture(scope="session", autouse=True)
def _report_build_info(record_testsuite_property) -> None:
    """Attach the harness version and commit to the JUnit report."""
    from storecheck.version import build_info

    for name, value in build_info().properties().items():
        record_testsuite_property(name, value)


# =============================================================================
# Test Collection Hooks
# =============================================================================


def pytest_collection_modifyitems(config, items):
    """
    Modify test collection to add markers.

    Args:
        config: Pytest config object
        items: List of collected test items
    """
    # Add 'unit' marker to tests without other markers
    for item in items:
        if not any(
            mark.name in ["integration", "performance", "e2e"]
            for mark in item.iter_markers()
        ):
            item.add_marker(pytest.mark.unit)


# =============================================================================
# Output Control Hooks
# =============================================================================


def pytest_report_teststatus(report, config):
    """
    Suppress dots and progress output in quiet mode.

    Returns:
        tuple: (outcome, letter, verbose_word) or None
    """
    if config.option.verbose < 0 and report.when == "call":
        return report.outcome, "", ""
    return None
