"""
================================================================================
UI Testing Pytest Configuration
================================================================================

Fixtures for browser session management and page objects.

Key Features:
- One DriverManager per test, released on every exit path
- Page Object fixtures
- Screenshot capture on failure, attached to Allure

================================================================================
"""

from typing import Generator

import pytest
from loguru import logger

from automation_exercise.ui_testing.framework.screenshot import capture_screenshot_on_failure
from automation_exercise.ui_testing.framework.session_manager import DriverManager
from automation_exercise.ui_testing.framework.settings import SessionSettings, load_settings
from automation_exercise.ui_testing.framework.wait_helper import WaitHelper
from automation_exercise.ui_testing.pages.contact_page import ContactUsPage
from automation_exercise.ui_testing.pages.home_page import HomePage
from automation_exercise.ui_testing.pages.login_page import LoginPage


# ================================================================================
# Session Fixtures
# ================================================================================

@pytest.fixture(scope="session")
def settings() -> SessionSettings:
    """
    Settings snapshot for the whole test session.

    Loaded once from config/config.yaml, config/<AE_ENVIRONMENT>.yaml and
    AE_* environment variables.
    """
    return load_settings()


@pytest.fixture(scope="function")
def driver_manager(settings: SessionSettings) -> Generator[DriverManager, None, None]:
    """
    Function-scoped browser session.

    Each test gets a fresh browser; it is released even if the test fails.
    """
    with DriverManager(settings) as manager:
        yield manager


@pytest.fixture
def wait(driver_manager: DriverManager) -> WaitHelper:
    return WaitHelper.from_manager(driver_manager)


# ================================================================================
# Page Object Fixtures
# ================================================================================

@pytest.fixture
def home_page(driver_manager: DriverManager, wait: WaitHelper) -> HomePage:
    return HomePage(driver_manager, wait)


@pytest.fixture
def login_page(driver_manager: DriverManager, wait: WaitHelper) -> LoginPage:
    return LoginPage(driver_manager, wait)


@pytest.fixture
def contact_page(driver_manager: DriverManager, wait: WaitHelper) -> ContactUsPage:
    return ContactUsPage(driver_manager, wait)


@pytest.fixture
def test_data():
    """
    Provides common test data for UI tests.
    """
    return {
        "invalid_user": {
            "email": "invalid_user@example.com",
            "password": "wrong_password",
        },
        "new_user": {
            "name": "Automation Tester",
            "email": "automation.tester@example.com",
        },
    }


# ================================================================================
# Test Lifecycle Hooks
# ================================================================================

@pytest.hookimpl(hookwrapper=True)
def pytest_runtest_makereport(item, call):
    """
    Capture a screenshot when a UI test fails and attach it to Allure.
    """
    outcome = yield
    report = outcome.get_result()

    if report.when != "call" or not report.failed:
        return

    manager = getattr(item, "funcargs", {}).get("driver_manager")
    if manager is None or not manager.is_active:
        return

    try:
        capture_screenshot_on_failure(
            manager.driver,
            item.cls.__name__ if item.cls else item.module.__name__,
            item.name,
        )
    except Exception as e:
        # Log but don't fail if screenshot capture fails
        logger.warning(f"Failed to capture screenshot on failure: {e}")
