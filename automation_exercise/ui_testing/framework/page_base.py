"""
================================================================================
Base Page Object
================================================================================

Foundation class for Page Object Model implementation.

Provides:
    - Navigation and URL handling
    - Element interactions that wait before acting
    - Scrolling helpers
    - Screenshot capture

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

import allure
from loguru import logger

from .driver import BrowserSession, WebElement
from .element_actions import ElementActions
from .exceptions import NotFoundYet, StaleReference
from .screenshot import capture_screenshot
from .session_manager import DriverManager
from .settings import SessionSettings
from .wait_helper import WaitHelper


class BasePage:
    """
    Base class for all page objects.

    Usage:
        class LoginPage(BasePage):
            URL_PATH = "/login"

            EMAIL_INPUT = "input[data-qa='login-email']"

            def login(self, email: str, password: str) -> None:
                self.type(self.EMAIL_INPUT, email)
                ...
    """

    # Override in subclasses
    URL_PATH: str = "/"
    PAGE_TITLE: str = ""

    def __init__(
        self,
        manager: DriverManager,
        wait: Optional[WaitHelper] = None,
    ):
        """
        Initialize page object.

        Args:
            manager: Owner of the live browser session
            wait: WaitHelper to use. Built from the manager if omitted.
        """
        self.manager = manager
        self.wait = wait or WaitHelper.from_manager(manager)
        self.actions = ElementActions(manager, self.wait)

    @property
    def driver(self) -> BrowserSession:
        """The live session, fetched from the manager on every access."""
        return self.manager.driver

    @property
    def settings(self) -> SessionSettings:
        return self.manager.settings

    @property
    def page_url(self) -> str:
        """Full URL for this page: base URL joined with URL_PATH."""
        return f"{self.settings.base_url.rstrip('/')}/{self.URL_PATH.lstrip('/')}"

    def navigate(self) -> "BasePage":
        """
        Navigate to this page.

        Returns:
            self, for chaining
        """
        with allure.step(f"Navigate to {self.URL_PATH}"):
            self.driver.navigate(self.page_url)
            logger.debug(f"Navigated to: {self.page_url}")
        return self

    def get_title(self) -> str:
        return self.driver.title

    def get_current_url(self) -> str:
        return self.driver.current_url

    def is_on_page(self) -> bool:
        """Whether the current URL contains this page's path (case-insensitive)."""
        return self.URL_PATH.lower() in self.driver.current_url.lower()

    # =========================================================================
    # Element Interactions
    # =========================================================================

    def find_element(self, locator: str) -> WebElement:
        """Find a single element, waiting for it to be visible first."""
        return self.wait.until_visible(locator)

    def find_elements(self, locator: str) -> List[WebElement]:
        """Find all elements matching the locator without waiting."""
        return self.driver.find_all(locator)

    def click(self, locator: str) -> None:
        """Click an element after waiting for it to be clickable."""
        with allure.step(f"Click: {locator}"):
            self.wait.until_clickable(locator).click()

    def type(self, locator: str, text: str) -> None:
        """Clear an input and type the text into it."""
        masked = "*" * len(text) if "password" in locator.lower() else text
        with allure.step(f"Type into {locator}: {masked}"):
            self.actions.clear_and_type(self.wait.until_visible(locator), text)

    def get_text(self, locator: str) -> str:
        return self.find_element(locator).text

    def get_attribute(self, locator: str, attribute: str) -> Optional[str]:
        return self.find_element(locator).get_attribute(attribute)

    def is_element_displayed(self, locator: str) -> bool:
        """
        Check whether an element is currently displayed.

        Returns False instead of raising when the element is absent or stale.
        """
        try:
            return self.driver.find_one(locator).is_visible()
        except (NotFoundYet, StaleReference):
            return False

    # =========================================================================
    # Scrolling
    # =========================================================================

    def scroll_to_element(self, locator: str) -> None:
        self.actions.scroll_into_view(self.find_element(locator))

    def scroll_to_bottom(self) -> None:
        self.actions.scroll_to_bottom()

    def scroll_to_top(self) -> None:
        self.actions.scroll_to_top()

    # =========================================================================
    # Screenshot
    # =========================================================================

    def screenshot(self, name: str, full_page: bool = False) -> Path:
        """Take a screenshot and attach it to Allure."""
        return capture_screenshot(self.driver, name, full_page=full_page)


__all__ = [
    "BasePage",
]
