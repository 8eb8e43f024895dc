"""
================================================================================
UI Testing Framework
================================================================================

Playwright-based UI automation core.

Components:
    - settings: Immutable session settings from YAML + AE_* env vars
    - driver: Browser capability interface (session, element, alert)
    - playwright_driver: Playwright implementation of the interface
    - session_manager: Browser session lifecycle (initialize / release)
    - wait_helper: Condition polling with transient-error suppression
    - element_actions: JavaScript, window, alert and element helpers
    - page_base: Base page object
    - screenshot: Screenshot capture

Author: Automation Team
License: MIT
================================================================================
"""

from .exceptions import (
    AlertAlreadyHandled,
    FrameworkError,
    NoAlertPresent,
    NoSuchFrame,
    NotFoundYet,
    SessionStateError,
    SessionUnavailable,
    StaleReference,
    TeardownError,
    UnsupportedConfiguration,
    WaitTimeout,
)
from .settings import BrowserType, SessionSettings, load_settings
from .session_manager import DriverManager, SessionState
from .wait_helper import WaitHelper, WaitRequest
from .element_actions import ElementActions
from .page_base import BasePage

__all__ = [
    "AlertAlreadyHandled",
    "BasePage",
    "BrowserType",
    "DriverManager",
    "ElementActions",
    "FrameworkError",
    "NoAlertPresent",
    "NoSuchFrame",
    "NotFoundYet",
    "SessionSettings",
    "SessionState",
    "SessionStateError",
    "SessionUnavailable",
    "StaleReference",
    "TeardownError",
    "UnsupportedConfiguration",
    "WaitHelper",
    "WaitRequest",
    "WaitTimeout",
    "load_settings",
]
