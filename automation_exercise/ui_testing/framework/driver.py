"""
================================================================================
Driver Abstraction
================================================================================

The narrow browser capability set the session manager, wait helper and page
objects depend on. One concrete variant per automation backend implements it
(see playwright_driver.py).

Error contract for implementations:
    - find_one() with no match          -> NotFoundYet
    - any call on a detached element    -> StaleReference
    - switch_to_frame() on a non-frame  -> NoSuchFrame
    - switch_to_alert() with no dialog  -> NoAlertPresent
    - Alert.accept()/dismiss() against
      the armed response               -> AlertAlreadyHandled
    - any call after the browser closed -> SessionUnavailable

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import TYPE_CHECKING, Any, List, Optional

if TYPE_CHECKING:
    from .settings import BrowserType, SessionSettings


class WebElement(ABC):
    """Handle to a single DOM node."""

    @abstractmethod
    def is_visible(self) -> bool:
        """Whether the node is rendered (non-empty box, not hidden)."""

    @abstractmethod
    def is_enabled(self) -> bool:
        """Whether the node accepts interaction (not disabled)."""

    @property
    @abstractmethod
    def text(self) -> str:
        """Rendered text of the node."""

    @abstractmethod
    def get_attribute(self, name: str) -> Optional[str]:
        ...

    @abstractmethod
    def click(self) -> None:
        ...

    @abstractmethod
    def clear(self) -> None:
        ...

    @abstractmethod
    def send_keys(self, text: str) -> None:
        ...

    @abstractmethod
    def hover(self) -> None:
        ...

    @abstractmethod
    def scroll_into_view(self) -> None:
        ...


class Alert(ABC):
    """A JavaScript dialog (alert, confirm, prompt) opened by the page."""

    @property
    @abstractmethod
    def text(self) -> str:
        ...

    @abstractmethod
    def accept(self, prompt_text: Optional[str] = None) -> None:
        ...

    @abstractmethod
    def dismiss(self) -> None:
        ...


class BrowserSession(ABC):
    """
    One live browser instance.

    Holds the interaction scope (top-level document or a frame) and the
    timeouts/viewport applied when it was configured.
    """

    implicit_wait: float = 0.0
    page_load_timeout: float = 0.0
    viewport: tuple = (0, 0)

    # -------------------------------------------------------------------------
    # Lookup
    # -------------------------------------------------------------------------

    @abstractmethod
    def find_one(self, locator: str) -> WebElement:
        """Return the first match in the current scope or raise NotFoundYet."""

    @abstractmethod
    def find_all(self, locator: str) -> List[WebElement]:
        """Return every match in the current scope (possibly empty)."""

    # -------------------------------------------------------------------------
    # Navigation state
    # -------------------------------------------------------------------------

    @property
    @abstractmethod
    def current_url(self) -> str:
        ...

    @property
    @abstractmethod
    def title(self) -> str:
        ...

    @abstractmethod
    def navigate(self, url: str) -> None:
        ...

    # -------------------------------------------------------------------------
    # Context switching
    # -------------------------------------------------------------------------

    @abstractmethod
    def switch_to_frame(self, element: WebElement) -> "BrowserSession":
        """Scope further lookups to the frame's document. Returns self."""

    @abstractmethod
    def switch_to_default_content(self) -> None:
        ...

    @abstractmethod
    def switch_to_alert(self) -> Alert:
        ...

    @abstractmethod
    def expect_alert(self, accept: bool = True, prompt_text: Optional[str] = None) -> None:
        """
        Arm the response for the next dialog (one-shot).

        Dialogs are answered as soon as they open; without an armed response
        they are accepted. Call before the action that opens the dialog.
        """

    @property
    @abstractmethod
    def window_handles(self) -> List[str]:
        ...

    @property
    @abstractmethod
    def current_window_handle(self) -> str:
        ...

    @abstractmethod
    def switch_to_window(self, handle: str) -> None:
        ...

    # -------------------------------------------------------------------------
    # Misc
    # -------------------------------------------------------------------------

    @abstractmethod
    def execute_script(self, script: str, *args: Any) -> Any:
        """
        Evaluate a JavaScript function body. Positional args are available
        as `arguments[0..n]`; WebElement args are passed as DOM nodes.
        """

    @abstractmethod
    def screenshot(self, path: Path, full_page: bool = False) -> Path:
        ...

    @property
    @abstractmethod
    def is_alive(self) -> bool:
        ...

    @abstractmethod
    def quit(self) -> None:
        """Close the browser and release every underlying resource."""


class DriverBackend(ABC):
    """Factory for browser sessions of one automation library."""

    name: str = "abstract"

    @abstractmethod
    def create(
        self,
        browser_type: "BrowserType",
        settings: "SessionSettings",
    ) -> BrowserSession:
        """
        Launch a browser and return an unconfigured session.

        Timeouts and viewport are applied separately via configure().
        """

    @abstractmethod
    def configure(
        self,
        session: BrowserSession,
        settings: "SessionSettings",
    ) -> None:
        """Apply post-construction setup: timeouts and viewport."""


__all__ = [
    "WebElement",
    "Alert",
    "BrowserSession",
    "DriverBackend",
]
