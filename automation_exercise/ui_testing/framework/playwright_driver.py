"""
================================================================================
Playwright Driver
================================================================================

Playwright (sync API) implementation of the driver abstraction.

Browser mapping:
    - Chrome  -> bundled Chromium
    - Edge    -> Chromium with the `msedge` channel (requires Edge installed)
    - Firefox -> Firefox

Settings mapping:
    - implicit_wait      -> context default timeout (element actions)
    - page_load_timeout  -> context default navigation timeout
    - window size        -> context viewport
    - headless           -> launch flag

Playwright errors are translated into the framework taxonomy so the wait
helper can tell "not ready yet" from "broken".

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import itertools
from collections import deque
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Callable, Deque, Dict, Iterator, List, Optional, Tuple, Union

from loguru import logger
from playwright.sync_api import (
    Browser,
    BrowserContext,
    Dialog,
    ElementHandle,
    Error as PlaywrightError,
    Frame,
    Page,
    Playwright,
    sync_playwright,
)

from .driver import Alert, BrowserSession, DriverBackend, WebElement
from .exceptions import (
    AlertAlreadyHandled,
    NoAlertPresent,
    NoSuchFrame,
    NotFoundYet,
    SessionUnavailable,
    StaleReference,
    TeardownError,
)
from .settings import BrowserType, SessionSettings


# Substrings of Playwright error messages and the taxonomy they map to
_STALE_MARKERS = (
    "not attached to the dom",
    "element is not attached",
    "execution context was destroyed",
    "node is detached",
    "frame was detached",
    "frame has been detached",
)
_CLOSED_MARKERS = (
    "has been closed",
    "target closed",
    "browser has disconnected",
)

CHROMIUM_ARGS = [
    "--disable-gpu",
    "--no-sandbox",
    "--disable-dev-shm-usage",
]


@contextmanager
def translate_errors(locator: str = "") -> Iterator[None]:
    """Re-raise Playwright errors as StaleReference / SessionUnavailable."""
    try:
        yield
    except PlaywrightError as e:
        message = (e.message or str(e)).lower()
        if any(marker in message for marker in _STALE_MARKERS):
            raise StaleReference(
                f"Element reference is stale{f' ({locator})' if locator else ''}: "
                f"{e.message}"
            ) from e
        if any(marker in message for marker in _CLOSED_MARKERS):
            raise SessionUnavailable(f"Browser session is unavailable: {e.message}") from e
        raise


class PlaywrightElement(WebElement):
    """WebElement backed by a Playwright ElementHandle."""

    def __init__(self, handle: ElementHandle, locator: str = ""):
        self.handle = handle
        self.locator = locator

    def __repr__(self) -> str:
        return f"PlaywrightElement({self.locator!r})"

    def is_visible(self) -> bool:
        with translate_errors(self.locator):
            return self.handle.is_visible()

    def is_enabled(self) -> bool:
        with translate_errors(self.locator):
            return self.handle.is_enabled()

    @property
    def text(self) -> str:
        with translate_errors(self.locator):
            return self.handle.inner_text()

    def get_attribute(self, name: str) -> Optional[str]:
        with translate_errors(self.locator):
            return self.handle.get_attribute(name)

    def click(self) -> None:
        with translate_errors(self.locator):
            self.handle.click()

    def clear(self) -> None:
        with translate_errors(self.locator):
            self.handle.fill("")

    def send_keys(self, text: str) -> None:
        with translate_errors(self.locator):
            self.handle.type(text)

    def hover(self) -> None:
        with translate_errors(self.locator):
            self.handle.hover()

    def scroll_into_view(self) -> None:
        with translate_errors(self.locator):
            self.handle.scroll_into_view_if_needed()


class PlaywrightAlert(Alert):
    """
    Record of a dialog the session already resolved when it opened.

    A Playwright page freezes until its dialog is resolved, so the session
    answers every dialog immediately with the armed response (accept by
    default). accept() / dismiss() then acknowledge the record, and raise
    AlertAlreadyHandled when the dialog was answered the other way.
    """

    def __init__(
        self,
        message: str,
        dialog_type: str,
        accepted: bool,
        prompt_text: Optional[str],
        on_handled: Callable[["PlaywrightAlert"], None],
    ):
        self.message = message
        self.dialog_type = dialog_type
        self.accepted = accepted
        self.prompt_text = prompt_text
        self._on_handled = on_handled

    def __repr__(self) -> str:
        outcome = "accepted" if self.accepted else "dismissed"
        return f"PlaywrightAlert({self.dialog_type}, {self.message!r}, {outcome})"

    @property
    def text(self) -> str:
        return self.message

    def accept(self, prompt_text: Optional[str] = None) -> None:
        if not self.accepted and self.dialog_type != "alert":
            raise AlertAlreadyHandled(
                f"Dialog {self.message!r} was dismissed when it opened. "
                f"Call expect_alert(accept=True) before the action that opens it."
            )
        if prompt_text is not None and prompt_text != self.prompt_text:
            raise AlertAlreadyHandled(
                f"Prompt {self.message!r} was answered with {self.prompt_text!r}. "
                f"Call expect_alert(prompt_text={prompt_text!r}) before the action that opens it."
            )
        self._on_handled(self)

    def dismiss(self) -> None:
        if self.accepted and self.dialog_type != "alert":
            raise AlertAlreadyHandled(
                f"Dialog {self.message!r} was accepted when it opened. "
                f"Call expect_alert(accept=False) before the action that opens it."
            )
        self._on_handled(self)


class PlaywrightSession(BrowserSession):
    """
    BrowserSession over one Playwright browser, context and active page.

    Dialogs are resolved as soon as they open, using the response armed with
    expect_alert() (one-shot, accept by default), and stay queued for
    switch_to_alert() until acknowledged. Pages opened by the application
    (popups, target=_blank) are registered as window handles.
    """

    def __init__(
        self,
        playwright: Playwright,
        browser: Browser,
        context: BrowserContext,
        page: Page,
    ):
        self._playwright = playwright
        self._browser = browser
        self._context = context
        self._dialogs: Deque[PlaywrightAlert] = deque()
        self._armed_response: Optional[Tuple[bool, Optional[str]]] = None
        self._handle_ids = itertools.count(1)
        self._windows: Dict[str, Page] = {}

        self._page = page
        self._scope: Union[Page, Frame] = page
        self._register_page(page)
        context.on("page", self._register_page)

    # -------------------------------------------------------------------------
    # Internal helpers
    # -------------------------------------------------------------------------

    def _register_page(self, page: Page) -> None:
        handle = f"window-{next(self._handle_ids)}"
        self._windows[handle] = page
        page.on("dialog", self._on_dialog)
        logger.debug(f"Registered browser window: {handle}")

    def _on_dialog(self, dialog: Dialog) -> None:
        accept, prompt_text = self._armed_response or (True, None)
        self._armed_response = None
        try:
            if accept:
                dialog.accept(prompt_text=prompt_text)
            else:
                dialog.dismiss()
        except PlaywrightError as e:
            logger.warning(f"Failed to resolve {dialog.type} dialog {dialog.message!r}: {e}")
            return

        self._dialogs.append(PlaywrightAlert(
            dialog.message,
            dialog.type,
            accepted=accept,
            prompt_text=prompt_text if accept else None,
            on_handled=self._discard_dialog,
        ))
        logger.debug(
            f"{'Accepted' if accept else 'Dismissed'} {dialog.type} dialog: {dialog.message!r}"
        )

    def _discard_dialog(self, alert: PlaywrightAlert) -> None:
        if alert in self._dialogs:
            self._dialogs.remove(alert)

    def _pump_events(self) -> None:
        # The sync API only dispatches events (dialogs, popups) inside a call
        with translate_errors():
            self._page.wait_for_timeout(0)

    @property
    def page(self) -> Page:
        """Active Playwright page."""
        return self._page

    @property
    def context(self) -> BrowserContext:
        return self._context

    # -------------------------------------------------------------------------
    # Lookup
    # -------------------------------------------------------------------------

    def find_one(self, locator: str) -> WebElement:
        with translate_errors(locator):
            handle = self._scope.query_selector(locator)
        if handle is None:
            raise NotFoundYet(locator)
        return PlaywrightElement(handle, locator)

    def find_all(self, locator: str) -> List[WebElement]:
        with translate_errors(locator):
            handles = self._scope.query_selector_all(locator)
        return [PlaywrightElement(h, locator) for h in handles]

    # -------------------------------------------------------------------------
    # Navigation state
    # -------------------------------------------------------------------------

    @property
    def current_url(self) -> str:
        with translate_errors():
            return self._page.url

    @property
    def title(self) -> str:
        with translate_errors():
            return self._page.title()

    def navigate(self, url: str) -> None:
        with translate_errors():
            self._page.goto(url)
        self._scope = self._page

    # -------------------------------------------------------------------------
    # Context switching
    # -------------------------------------------------------------------------

    def switch_to_frame(self, element: WebElement) -> BrowserSession:
        if not isinstance(element, PlaywrightElement):
            raise TypeError(f"Expected PlaywrightElement, got {type(element).__name__}")

        with translate_errors(element.locator):
            frame = element.handle.content_frame()
        if frame is None:
            raise NoSuchFrame(
                element.locator,
                f"Element is not a frame or its document is not loaded: {element.locator}",
            )
        self._scope = frame
        logger.debug(f"Switched to frame: {element.locator}")
        return self

    def switch_to_default_content(self) -> None:
        self._scope = self._page

    def switch_to_alert(self) -> Alert:
        self._pump_events()
        if not self._dialogs:
            raise NoAlertPresent()
        return self._dialogs[0]

    def expect_alert(self, accept: bool = True, prompt_text: Optional[str] = None) -> None:
        self._armed_response = (accept, prompt_text)

    @property
    def window_handles(self) -> List[str]:
        self._pump_events()
        return [handle for handle, page in self._windows.items() if not page.is_closed()]

    @property
    def current_window_handle(self) -> str:
        for handle, page in self._windows.items():
            if page is self._page:
                return handle
        raise SessionUnavailable("Active page is not registered")

    def switch_to_window(self, handle: str) -> None:
        page = self._windows.get(handle)
        if page is None or page.is_closed():
            raise SessionUnavailable(f"No open window with handle: {handle}")
        with translate_errors():
            page.bring_to_front()
        self._page = page
        self._scope = page

    # -------------------------------------------------------------------------
    # Misc
    # -------------------------------------------------------------------------

    def execute_script(self, script: str, *args: Any) -> Any:
        arguments = [a.handle if isinstance(a, PlaywrightElement) else a for a in args]
        with translate_errors():
            return self._scope.evaluate(
                f"(args) => (function() {{ {script} }}).apply(null, args)",
                arguments,
            )

    def screenshot(self, path: Path, full_page: bool = False) -> Path:
        path = Path(path)
        with translate_errors():
            self._page.screenshot(path=str(path), full_page=full_page)
        return path

    @property
    def is_alive(self) -> bool:
        return self._browser.is_connected() and not self._page.is_closed()

    def quit(self) -> None:
        """
        Close context, browser and the Playwright driver.

        Every step is attempted even if an earlier one fails.

        Raises:
            TeardownError: If any step failed
        """
        errors: List[str] = []
        for name, close in (
            ("context", self._context.close),
            ("browser", self._browser.close),
            ("playwright", self._playwright.stop),
        ):
            try:
                close()
            except Exception as e:
                errors.append(f"{name}: {e}")

        self._dialogs.clear()
        self._windows.clear()

        if errors:
            raise TeardownError("; ".join(errors))


class PlaywrightBackend(DriverBackend):
    """
    Creates PlaywrightSession instances.

    Usage:
        backend = PlaywrightBackend()
        session = backend.create(BrowserType.CHROME, settings)
        backend.configure(session, settings)
    """

    name = "playwright"

    def create(
        self,
        browser_type: BrowserType,
        settings: SessionSettings,
    ) -> PlaywrightSession:
        playwright = sync_playwright().start()
        try:
            browser = self._launch(playwright, browser_type, settings)
            context = browser.new_context(
                viewport={"width": settings.window_width, "height": settings.window_height},
                ignore_https_errors=True,
            )
            page = context.new_page()
        except Exception:
            playwright.stop()
            raise

        logger.debug(
            f"Browser started: {browser_type.value} "
            f"(headless={settings.headless})"
        )
        return PlaywrightSession(playwright, browser, context, page)

    def configure(
        self,
        session: BrowserSession,
        settings: SessionSettings,
    ) -> None:
        if not isinstance(session, PlaywrightSession):
            raise TypeError(f"Expected PlaywrightSession, got {type(session).__name__}")

        session.context.set_default_timeout(settings.implicit_wait * 1000)
        session.context.set_default_navigation_timeout(settings.page_load_timeout * 1000)
        session.page.set_viewport_size(
            {"width": settings.window_width, "height": settings.window_height}
        )

        session.implicit_wait = settings.implicit_wait
        session.page_load_timeout = settings.page_load_timeout
        session.viewport = (settings.window_width, settings.window_height)

    @staticmethod
    def _launch(
        playwright: Playwright,
        browser_type: BrowserType,
        settings: SessionSettings,
    ) -> Browser:
        if browser_type is BrowserType.FIREFOX:
            return playwright.firefox.launch(headless=settings.headless)

        args = [
            *CHROMIUM_ARGS,
            f"--window-size={settings.window_width},{settings.window_height}",
        ]
        if browser_type is BrowserType.EDGE:
            return playwright.chromium.launch(
                channel="msedge",
                headless=settings.headless,
                args=args,
            )
        return playwright.chromium.launch(headless=settings.headless, args=args)


__all__ = [
    "PlaywrightBackend",
    "PlaywrightSession",
    "PlaywrightElement",
    "PlaywrightAlert",
    "translate_errors",
]
