"""
================================================================================
Driver Manager
================================================================================

Browser session lifecycle management for UI automation.

State machine:
    UNINITIALIZED --initialize()--> ACTIVE --release()--> CLOSED
    CLOSED        --initialize()--> ACTIVE
    ACTIVE        --initialize()--> (release old) --> ACTIVE

Guarantees:
    - At most one live browser per manager
    - Accessing the driver outside ACTIVE fails loudly (SessionStateError)
    - release() is idempotent and never raises; teardown failures are logged
    - `with DriverManager(...)` releases on every exit path

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from enum import Enum
from typing import Optional, Union

from loguru import logger

from .driver import BrowserSession, DriverBackend
from .exceptions import SessionStateError, TeardownError
from .settings import BrowserType, SessionSettings


class SessionState(str, Enum):
    UNINITIALIZED = "uninitialized"
    ACTIVE = "active"
    CLOSED = "closed"


class DriverManager:
    """
    Owns exactly one browser session at a time.

    Usage:
        with DriverManager(settings) as manager:
            manager.driver.navigate(settings.base_url)

        # Or explicitly (e.g. from a pytest fixture)
        manager = DriverManager(settings)
        manager.initialize()
        try:
            ...
        finally:
            manager.release()
    """

    def __init__(
        self,
        settings: SessionSettings,
        backend: Optional[DriverBackend] = None,
    ):
        """
        Initialize driver manager.

        Args:
            settings: Settings snapshot used for every session this manager creates
            backend: Automation backend. Defaults to PlaywrightBackend.
        """
        if backend is None:
            from .playwright_driver import PlaywrightBackend
            backend = PlaywrightBackend()

        self.settings = settings
        self.backend = backend
        self._session: Optional[BrowserSession] = None
        self._state = SessionState.UNINITIALIZED
        self._browser_type: Optional[BrowserType] = None

    def __enter__(self) -> "DriverManager":
        self.initialize()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.release()

    def __repr__(self) -> str:
        browser = self._browser_type.value if self._browser_type else None
        return f"DriverManager(state={self._state.value}, browser={browser})"

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def initialize(
        self,
        browser: Optional[Union[str, BrowserType]] = None,
    ) -> BrowserSession:
        """
        Create and configure a new browser session.

        Any live session is released first.

        Args:
            browser: Browser to launch. Defaults to the settings' browser.

        Returns:
            The new live session

        Raises:
            UnsupportedConfiguration: If the browser name is not supported
                (raised before any resource is touched)
        """
        browser_type = BrowserType.parse(browser if browser is not None else self.settings.browser)

        if self._session is not None:
            logger.debug("Releasing existing session before re-initializing")
            self.release()

        session = self.backend.create(browser_type, self.settings)
        try:
            self.backend.configure(session, self.settings)
        except Exception:
            self._quit_quietly(session)
            raise

        self._session = session
        self._browser_type = browser_type
        self._state = SessionState.ACTIVE
        logger.info(
            f"Browser session started: {browser_type.value} "
            f"(backend={self.backend.name}, headless={self.settings.headless}, "
            f"viewport={self.settings.window_width}x{self.settings.window_height})"
        )
        return session

    def release(self) -> None:
        """
        Quit the browser if one is live. Safe to call any number of times.

        Teardown errors are logged and suppressed so they never mask the
        outcome of the test that is cleaning up.
        """
        session, self._session = self._session, None
        if session is None:
            return

        self._state = SessionState.CLOSED
        self._quit_quietly(session)
        logger.info(f"Browser session released: {self._browser_type.value}")

    @staticmethod
    def _quit_quietly(session: BrowserSession) -> None:
        try:
            session.quit()
        except Exception as e:
            error = e if isinstance(e, TeardownError) else TeardownError(str(e))
            logger.warning(f"Ignoring browser teardown failure: {error!r}")

    # =========================================================================
    # Access
    # =========================================================================

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def is_active(self) -> bool:
        return self._state is SessionState.ACTIVE

    @property
    def browser_type(self) -> Optional[BrowserType]:
        """Browser of the current (or last) session."""
        return self._browser_type

    @property
    def driver(self) -> BrowserSession:
        """
        The live browser session.

        Raises:
            SessionStateError: If called before initialize() or after release()
        """
        if self._session is None:
            if self._state is SessionState.CLOSED:
                raise SessionStateError(
                    "Browser session has been released. Call initialize() to start a new one."
                )
            raise SessionStateError(
                "Browser session has not been initialised. Call initialize() first."
            )
        return self._session

    def get_driver(self) -> BrowserSession:
        """Callable form of `driver`, used as a WaitHelper session provider."""
        return self.driver


__all__ = [
    "DriverManager",
    "SessionState",
]
