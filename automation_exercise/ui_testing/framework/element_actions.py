# ================================================================================
# Element Actions Module
# ================================================================================
#
# Small interaction helpers on top of the driver abstraction that page objects
# and tests reach for repeatedly.
#
# Key Features:
#   - JavaScript execution, JS click, scroll, highlight
#   - Page readiness (document.readyState) and new-window switching,
#     both polled through WaitHelper
#   - Alert acceptance without failing when no dialog is open
#   - Element text/class helpers
#   - Allure step integration
#
# ================================================================================

from __future__ import annotations

from typing import Any, Optional

import allure
from loguru import logger

from .driver import BrowserSession, WebElement
from .exceptions import NoAlertPresent
from .session_manager import DriverManager
from .wait_helper import WaitHelper


SCROLL_INTO_VIEW_SCRIPT = "arguments[0].scrollIntoView({behavior: 'smooth', block: 'center'});"
JS_CLICK_SCRIPT = "arguments[0].click();"
HIGHLIGHT_SCRIPT = "arguments[0].style.border = '3px solid red';"


class ElementActions:
    """
    Convenience actions bound to a driver manager.

    Example:
        actions = ElementActions(manager)
        actions.wait_for_page_load()
        actions.clear_and_type(wait.until_visible("#name"), "Jane")
    """

    def __init__(
        self,
        manager: DriverManager,
        wait: Optional[WaitHelper] = None,
    ):
        """
        Initialize ElementActions.

        Args:
            manager: Owner of the live browser session
            wait: WaitHelper to poll with. Built from the manager if omitted.
        """
        self.manager = manager
        self.wait = wait or WaitHelper.from_manager(manager)

    @property
    def driver(self) -> BrowserSession:
        return self.manager.driver

    # =========================================================================
    # Session-level actions
    # =========================================================================

    def execute_script(self, script: str, *args: Any) -> Any:
        """Execute a JavaScript function body and return its result."""
        return self.driver.execute_script(script, *args)

    @allure.step("Wait for page load")
    def wait_for_page_load(self, timeout: float = 30) -> bool:
        """Wait until document.readyState is 'complete'."""
        return self.wait.until_condition(
            lambda session: session.execute_script("return document.readyState") == "complete",
            timeout=timeout,
            description="document.readyState == 'complete'",
        )

    @allure.step("Switch to new window")
    def switch_to_new_window(
        self,
        original_handle: str,
        timeout: Optional[float] = None,
    ) -> str:
        """
        Switch to the first window that is not `original_handle`.

        Windows opened by a click appear asynchronously, so the lookup is polled.

        Returns:
            Handle of the window switched to
        """
        def new_handle(session: BrowserSession) -> Optional[str]:
            return next((h for h in session.window_handles if h != original_handle), None)

        handle = self.wait.until_condition(
            new_handle,
            timeout=timeout,
            description=f"a window other than {original_handle}",
        )
        self.driver.switch_to_window(handle)
        logger.debug(f"Switched to window: {handle}")
        return handle

    def try_accept_alert(self) -> bool:
        """
        Accept a JavaScript alert if one is open.

        Returns:
            True if an alert was found and accepted, False otherwise
        """
        try:
            alert = self.driver.switch_to_alert()
        except NoAlertPresent:
            return False

        logger.debug(f"Accepting alert: {alert.text!r}")
        alert.accept()
        return True

    @allure.step("Scroll to top")
    def scroll_to_top(self) -> None:
        self.execute_script("window.scrollTo(0, 0);")

    @allure.step("Scroll to bottom")
    def scroll_to_bottom(self) -> None:
        self.execute_script("window.scrollTo(0, document.body.scrollHeight);")

    # =========================================================================
    # Element-level actions
    # =========================================================================

    @staticmethod
    def clear_and_type(element: WebElement, text: str) -> None:
        """Clear the field and type text, as a user would."""
        element.clear()
        element.send_keys(text)

    @staticmethod
    def has_class(element: WebElement, class_name: str) -> bool:
        """Whether the element's class list contains `class_name` (case-insensitive)."""
        classes = (element.get_attribute("class") or "").lower().split()
        return class_name.lower() in classes

    @staticmethod
    def get_trimmed_text(element: WebElement) -> str:
        return element.text.strip()

    def scroll_into_view(self, element: WebElement) -> None:
        self.execute_script(SCROLL_INTO_VIEW_SCRIPT, element)

    def click_via_javascript(self, element: WebElement) -> None:
        """Click through JavaScript, for elements covered by overlays."""
        self.execute_script(JS_CLICK_SCRIPT, element)

    @staticmethod
    def hover(element: WebElement) -> None:
        element.hover()

    def highlight(self, element: WebElement) -> None:
        """Draw a red border around the element (visual debugging)."""
        self.execute_script(HIGHLIGHT_SCRIPT, element)


__all__ = [
    "ElementActions",
]
