"""
================================================================================
Root Pytest Configuration
================================================================================

Registers the project's markers and applies them by test location.

Live browser tests (marker `live`) hit https://automationexercise.com and
need installed Playwright browsers; they only run when AE_LIVE_TESTS=1.

================================================================================
"""

import os

import pytest


def pytest_configure(config):
    """Configure pytest with project-wide custom markers."""

    # Priority markers
    config.addinivalue_line(
        "markers", "P0: Critical priority tests - must pass for deployment"
    )
    config.addinivalue_line(
        "markers", "P1: High priority tests - important functionality"
    )
    config.addinivalue_line(
        "markers", "P2: Medium priority tests - edge cases and minor features"
    )

    # Test type markers
    config.addinivalue_line(
        "markers", "smoke: Quick verification tests"
    )
    config.addinivalue_line(
        "markers", "regression: Full regression test suite"
    )
    config.addinivalue_line(
        "markers", "unit: Browser-free tests of the framework core"
    )
    config.addinivalue_line(
        "markers", "ui: Tests that drive a real browser"
    )
    config.addinivalue_line(
        "markers", "live: Tests against the live site (set AE_LIVE_TESTS=1)"
    )


def pytest_collection_modifyitems(config, items):
    """
    Add markers by directory and skip live tests unless enabled.
    """
    run_live = os.getenv("AE_LIVE_TESTS", "").lower() in ("1", "true", "yes")
    skip_live = pytest.mark.skip(reason="live browser tests disabled (set AE_LIVE_TESTS=1)")

    for item in items:
        path = str(item.path)
        if "ui_testing" in path:
            item.add_marker(pytest.mark.ui)
            item.add_marker(pytest.mark.live)
        if f"{os.sep}unit{os.sep}" in path:
            item.add_marker(pytest.mark.unit)

        if "live" in item.keywords and not run_live:
            item.add_marker(skip_live)


def pytest_report_header(config):
    """Add custom header to pytest output."""
    return [
        "",
        "=" * 60,
        "Automation Exercise UI Framework",
        "=" * 60,
        "",
    ]
