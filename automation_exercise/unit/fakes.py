"""
In-memory stand-ins for the driver abstraction.

FakeClock drives time: WaitHelper sleeps advance it and fire callbacks
scheduled with `at()`, which is how tests model a page that changes while
a wait is polling.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple

from automation_exercise.ui_testing.framework.driver import (
    Alert,
    BrowserSession,
    DriverBackend,
    WebElement,
)
from automation_exercise.ui_testing.framework.exceptions import (
    AlertAlreadyHandled,
    NoAlertPresent,
    NoSuchFrame,
    NotFoundYet,
    SessionUnavailable,
    StaleReference,
)
from automation_exercise.ui_testing.framework.settings import BrowserType, SessionSettings


class FakeClock:
    def __init__(self):
        self.now = 0.0
        self.sleeps: List[float] = []
        self._events: List[Tuple[float, Callable[[], None]]] = []

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now = round(self.now + seconds, 6)
        self._fire()

    def at(self, when: float, callback: Callable[[], None]) -> None:
        """Run `callback` once the clock reaches `when` seconds."""
        self._events.append((when, callback))
        self._events.sort(key=lambda event: event[0])

    def _fire(self) -> None:
        while self._events and self._events[0][0] <= self.now + 1e-9:
            _, callback = self._events.pop(0)
            callback()


class FakeElement(WebElement):
    def __init__(
        self,
        locator: str = "",
        visible: bool = True,
        enabled: bool = True,
        text: str = "",
        attributes: Optional[Dict[str, str]] = None,
        frame: Optional[str] = None,
    ):
        self.locator = locator
        self.visible = visible
        self.enabled = enabled
        self._text = text
        self.attributes = attributes or {}
        self.frame = frame
        self.stale = False
        self.actions: List[Tuple[str, Any]] = []

    def _check(self) -> None:
        if self.stale:
            raise StaleReference(f"stale: {self.locator}")

    def is_visible(self) -> bool:
        self._check()
        return self.visible

    def is_enabled(self) -> bool:
        self._check()
        return self.enabled

    @property
    def text(self) -> str:
        self._check()
        return self._text

    @text.setter
    def text(self, value: str) -> None:
        self._text = value

    def get_attribute(self, name: str) -> Optional[str]:
        self._check()
        return self.attributes.get(name)

    def click(self) -> None:
        self._check()
        self.actions.append(("click", None))

    def clear(self) -> None:
        self._check()
        self.actions.append(("clear", None))

    def send_keys(self, text: str) -> None:
        self._check()
        self.actions.append(("send_keys", text))

    def hover(self) -> None:
        self._check()
        self.actions.append(("hover", None))

    def scroll_into_view(self) -> None:
        self._check()
        self.actions.append(("scroll_into_view", None))


class FakeAlert(Alert):
    """Dialog answered with the session's armed response when it opened."""

    def __init__(self, session: "FakeSession", text: str = "", accepted: bool = True):
        self._session = session
        self._text = text
        self.accepted = accepted
        self.result: Optional[str] = None

    @property
    def text(self) -> str:
        return self._text

    def accept(self, prompt_text: Optional[str] = None) -> None:
        if not self.accepted:
            raise AlertAlreadyHandled(f"{self._text!r} was dismissed when it opened")
        self.result = "accepted" if prompt_text is None else f"accepted:{prompt_text}"
        self._session.dialogs.remove(self)

    def dismiss(self) -> None:
        if self.accepted:
            raise AlertAlreadyHandled(f"{self._text!r} was accepted when it opened")
        self.result = "dismissed"
        self._session.dialogs.remove(self)



class FakeSession(BrowserSession):
    def __init__(self, browser_type: BrowserType = BrowserType.CHROME):
        self.browser_type = browser_type
        self.elements: Dict[str, List[FakeElement]] = {}
        self.url = "about:blank"
        self.page_title = ""
        self.frame_scope: Optional[str] = None
        self.dialogs: List[FakeAlert] = []
        self.armed_alert: Optional[Tuple[bool, Optional[str]]] = None
        self.windows: List[str] = ["window-1"]
        self.active_window = "window-1"
        self.script_results: Dict[str, Any] = {}
        self.scripts: List[Tuple[str, Tuple[Any, ...]]] = []
        self.navigations: List[str] = []
        self.find_calls: List[str] = []
        self.unavailable = False
        self.closed = False
        self.quit_calls = 0
        self.quit_error: Optional[Exception] = None

    # helpers -----------------------------------------------------------------

    def add(self, locator: str, *elements: FakeElement) -> List[FakeElement]:
        for element in elements:
            element.locator = locator
        self.elements[locator] = list(elements)
        return self.elements[locator]

    def remove(self, locator: str) -> None:
        self.elements.pop(locator, None)

    def open_dialog(self, text: str = "") -> FakeAlert:
        """Simulate the page opening a dialog, answered with the armed response."""
        accept, _ = self.armed_alert or (True, None)
        self.armed_alert = None
        alert = FakeAlert(self, text, accepted=accept)
        self.dialogs.append(alert)
        return alert

    def _check(self) -> None:
        if self.unavailable or self.closed:
            raise SessionUnavailable("browser has been closed")

    # BrowserSession ----------------------------------------------------------

    def find_one(self, locator: str) -> WebElement:
        self._check()
        self.find_calls.append(locator)
        matches = self.elements.get(locator)
        if not matches:
            raise NotFoundYet(locator)
        return matches[0]

    def find_all(self, locator: str) -> List[WebElement]:
        self._check()
        self.find_calls.append(locator)
        return list(self.elements.get(locator, []))

    @property
    def current_url(self) -> str:
        self._check()
        return self.url

    @property
    def title(self) -> str:
        self._check()
        return self.page_title

    def navigate(self, url: str) -> None:
        self._check()
        self.navigations.append(url)
        self.url = url
        self.frame_scope = None

    def switch_to_frame(self, element: WebElement) -> BrowserSession:
        self._check()
        if element.frame is None:
            raise NoSuchFrame(element.locator)
        self.frame_scope = element.frame
        return self

    def switch_to_default_content(self) -> None:
        self.frame_scope = None

    def switch_to_alert(self) -> Alert:
        self._check()
        if not self.dialogs:
            raise NoAlertPresent()
        return self.dialogs[0]

    def expect_alert(self, accept: bool = True, prompt_text: Optional[str] = None) -> None:
        self.armed_alert = (accept, prompt_text)

    @property
    def window_handles(self) -> List[str]:
        self._check()
        return list(self.windows)

    @property
    def current_window_handle(self) -> str:
        return self.active_window

    def switch_to_window(self, handle: str) -> None:
        if handle not in self.windows:
            raise SessionUnavailable(f"No open window with handle: {handle}")
        self.active_window = handle

    def execute_script(self, script: str, *args: Any) -> Any:
        self._check()
        self.scripts.append((script, args))
        result = self.script_results.get(script)
        return result() if callable(result) else result

    def screenshot(self, path: Path, full_page: bool = False) -> Path:
        self._check()
        Path(path).write_bytes(b"\x89PNG fake")
        return Path(path)

    @property
    def is_alive(self) -> bool:
        return not self.closed

    def quit(self) -> None:
        self.quit_calls += 1
        self.closed = True
        if self.quit_error is not None:
            raise self.quit_error


class FakeBackend(DriverBackend):
    """Records create/configure calls and how many sessions were live at each create."""

    name = "fake"

    def __init__(self):
        self.created: List[FakeSession] = []
        self.events: List[Tuple[str, Any]] = []
        self.live_at_create: List[int] = []
        self.configure_error: Optional[Exception] = None

    def create(self, browser_type: BrowserType, settings: SessionSettings) -> FakeSession:
        self.live_at_create.append(sum(1 for s in self.created if not s.closed))
        session = FakeSession(browser_type)
        self.created.append(session)
        self.events.append(("create", browser_type))
        return session

    def configure(self, session: BrowserSession, settings: SessionSettings) -> None:
        self.events.append(("configure", settings.implicit_wait))
        if self.configure_error is not None:
            raise self.configure_error
        session.implicit_wait = settings.implicit_wait
        session.page_load_timeout = settings.page_load_timeout
        session.viewport = (settings.window_width, settings.window_height)
