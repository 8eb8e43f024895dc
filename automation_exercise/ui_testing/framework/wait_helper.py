# ================================================================================
# Wait Helper Module
# ================================================================================
#
# Condition polling against a live, asynchronously rendering browser.
#
# Every wait polls a condition at a fixed interval until it produces a truthy
# value, the deadline passes, or a non-transient error is raised. "Not found
# yet" and "stale reference" are the steady state of a re-rendering page, so
# each poll is classified as a tagged PollResult (SUCCESS / RETRY / FATAL) and
# the loop only keeps going on RETRY.
#
# Key Features:
#   - Fixed polling interval (default 500ms), deadline-clamped sleeps
#   - NotFoundYet / StaleReference always retried, extra kinds per request
#   - WaitTimeout with elapsed time and a description of what was awaited
#   - Session borrowed from the provider on every poll, never cached
#   - Injectable clock and sleep for deterministic tests
#   - Allure step per wait
#
# Usage:
#   wait = WaitHelper.from_manager(driver_manager)
#   button = wait.until_clickable("button[data-qa='login-button']")
#   wait.until_url_contains("/account", timeout=10)
#
# ================================================================================

from __future__ import annotations

import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Iterable, List, Optional, Tuple, Type, Union

import allure
from loguru import logger

from .driver import Alert, BrowserSession, WebElement
from .exceptions import NotFoundYet, StaleReference, WaitTimeout
from .session_manager import DriverManager


DEFAULT_TIMEOUT = 30.0
DEFAULT_POLL_INTERVAL = 0.5

# Retried on every wait regardless of the request
ALWAYS_IGNORED: Tuple[Type[BaseException], ...] = (NotFoundYet, StaleReference)

Condition = Callable[[BrowserSession], Any]
SessionProvider = Callable[[], BrowserSession]


class PollKind(str, Enum):
    SUCCESS = "success"
    RETRY = "retry"
    FATAL = "fatal"


@dataclass(frozen=True)
class PollResult:
    """
    Outcome of evaluating a condition once.

    Attributes:
        kind: SUCCESS (value is usable), RETRY (not yet), FATAL (stop, raise error)
        value: Condition result when kind is SUCCESS
        error: Suppressed (RETRY) or fatal (FATAL) exception, if any
    """
    kind: PollKind
    value: Any = None
    error: Optional[BaseException] = None

    @classmethod
    def success(cls, value: Any) -> "PollResult":
        return cls(PollKind.SUCCESS, value=value)

    @classmethod
    def retry(cls, error: Optional[BaseException] = None) -> "PollResult":
        return cls(PollKind.RETRY, error=error)

    @classmethod
    def fatal(cls, error: BaseException) -> "PollResult":
        return cls(PollKind.FATAL, error=error)


@dataclass(frozen=True)
class WaitRequest:
    """
    One wait invocation.

    Attributes:
        condition: Called with the live session; a falsy result means "retry"
        description: Human-readable description used in logs and WaitTimeout
        timeout: Deadline in seconds
        poll_interval: Delay between polls in seconds
        ignored_exceptions: Extra exception types treated as "retry"
    """
    condition: Condition
    description: str
    timeout: float = DEFAULT_TIMEOUT
    poll_interval: float = DEFAULT_POLL_INTERVAL
    ignored_exceptions: Tuple[Type[BaseException], ...] = ()

    def __post_init__(self) -> None:
        if self.timeout < 0:
            raise ValueError(f"timeout must be >= 0, got {self.timeout}")
        if self.poll_interval <= 0:
            raise ValueError(f"poll_interval must be > 0, got {self.poll_interval}")
        object.__setattr__(self, "ignored_exceptions", tuple(self.ignored_exceptions))

    @property
    def suppressed(self) -> Tuple[Type[BaseException], ...]:
        return ALWAYS_IGNORED + self.ignored_exceptions


def poll_once(request: WaitRequest, session_provider: SessionProvider) -> PollResult:
    """
    Evaluate the request's condition once and classify the outcome.

    The session is fetched from the provider for this poll only.
    """
    try:
        value = request.condition(session_provider())
    except request.suppressed as e:
        return PollResult.retry(e)
    except Exception as e:
        return PollResult.fatal(e)

    if value is None or value is False:
        return PollResult.retry()
    try:
        if not value:
            return PollResult.retry()
    except (TypeError, ValueError):
        # Objects with ambiguous truthiness (arrays, frames) count as a result
        pass
    return PollResult.success(value)


# =============================================================================
# Conditions
# =============================================================================

def visibility_of(locator: str) -> Condition:
    """Element present and visible -> element."""
    def condition(session: BrowserSession) -> Optional[WebElement]:
        element = session.find_one(locator)
        return element if element.is_visible() else None
    return condition


def visibility_of_all(locator: str) -> Condition:
    """At least one match and every match visible -> list of elements."""
    def condition(session: BrowserSession) -> Optional[List[WebElement]]:
        elements = session.find_all(locator)
        if elements and all(element.is_visible() for element in elements):
            return elements
        return None
    return condition


def invisibility_of(locator: str) -> Condition:
    """Element absent, stale or hidden -> True."""
    def condition(session: BrowserSession) -> bool:
        try:
            return not session.find_one(locator).is_visible()
        except (NotFoundYet, StaleReference):
            return True
    return condition


def clickability_of(locator: str) -> Condition:
    """Element visible and enabled -> element."""
    def condition(session: BrowserSession) -> Optional[WebElement]:
        element = session.find_one(locator)
        return element if element.is_visible() and element.is_enabled() else None
    return condition


def presence_of(locator: str) -> Condition:
    """Element attached to the document -> element."""
    def condition(session: BrowserSession) -> WebElement:
        return session.find_one(locator)
    return condition


def text_in_element(locator: str, text: str) -> Condition:
    """Element's rendered text contains `text` (case-insensitive) -> True."""
    expected = text.lower()

    def condition(session: BrowserSession) -> bool:
        try:
            return expected in session.find_one(locator).text.lower()
        except StaleReference:
            return False
    return condition


def url_contains(part: str) -> Condition:
    expected = part.lower()

    def condition(session: BrowserSession) -> bool:
        return expected in session.current_url.lower()
    return condition


def title_contains(part: str) -> Condition:
    expected = part.lower()

    def condition(session: BrowserSession) -> bool:
        return expected in session.title.lower()
    return condition


def frame_available(locator: str) -> Condition:
    """Frame element present with a document -> session scoped to the frame."""
    def condition(session: BrowserSession) -> BrowserSession:
        return session.switch_to_frame(session.find_one(locator))
    return condition


def alert_present() -> Condition:
    def condition(session: BrowserSession) -> Alert:
        return session.switch_to_alert()
    return condition


# =============================================================================
# WaitHelper
# =============================================================================

class WaitHelper:
    """
    Explicit waits for common browser conditions.

    All `until_*` methods block the calling thread until the condition holds
    or `timeout` seconds (default: the helper's default timeout) elapse, in
    which case WaitTimeout is raised. Not thread-safe: one helper serves one
    sequential test flow.
    """

    def __init__(
        self,
        session_provider: Union[DriverManager, SessionProvider],
        default_timeout: float = DEFAULT_TIMEOUT,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """
        Initialize wait helper.

        Args:
            session_provider: DriverManager, or a zero-arg callable returning
                the live session. Called once per poll.
            default_timeout: Timeout in seconds when a call passes none
            poll_interval: Delay between polls in seconds
            clock: Monotonic clock in seconds
            sleep: Sleep function in seconds
        """
        if isinstance(session_provider, DriverManager):
            session_provider = session_provider.get_driver
        self._session_provider = session_provider
        self.default_timeout = default_timeout
        self.poll_interval = poll_interval
        self._clock = clock
        self._sleep = sleep

    @classmethod
    def from_manager(cls, manager: DriverManager, **kwargs: Any) -> "WaitHelper":
        """Build a helper whose default timeout is the manager's explicit wait."""
        kwargs.setdefault("default_timeout", manager.settings.explicit_wait)
        return cls(manager, **kwargs)

    # =========================================================================
    # Core loop
    # =========================================================================

    def wait(self, request: WaitRequest) -> Any:
        """
        Poll the request's condition until it succeeds.

        Returns:
            The condition's first truthy result

        Raises:
            WaitTimeout: If the deadline passes without success
            Exception: Any non-suppressed error raised by the condition,
                propagated unchanged on the poll that raised it
        """
        with allure.step(f"Wait until {request.description}"):
            start = self._clock()
            attempt = 0
            last_error: Optional[BaseException] = None

            logger.debug(
                f"Starting wait: {request.description} "
                f"(timeout={request.timeout}s, interval={request.poll_interval}s)"
            )

            while True:
                attempt += 1
                result = poll_once(request, self._session_provider)

                if result.kind is PollKind.SUCCESS:
                    logger.debug(
                        f"Wait successful after {attempt} attempts "
                        f"({self._clock() - start:.2f}s): {request.description}"
                    )
                    return result.value

                if result.kind is PollKind.FATAL:
                    logger.debug(
                        f"Wait aborted on attempt {attempt}: {request.description}: "
                        f"{result.error!r}"
                    )
                    raise result.error

                if result.error is not None:
                    last_error = result.error

                elapsed = self._clock() - start
                if elapsed >= request.timeout:
                    error = WaitTimeout(
                        request.description,
                        elapsed=elapsed,
                        timeout=request.timeout,
                        last_error=last_error,
                    )
                    logger.error(str(error))
                    raise error

                logger.trace(
                    f"Attempt {attempt}: condition not met "
                    f"({type(result.error).__name__ if result.error else 'falsy result'})"
                )
                self._sleep(min(request.poll_interval, request.timeout - elapsed))

    def _request(
        self,
        condition: Condition,
        description: str,
        timeout: Optional[float],
        ignored_exceptions: Iterable[Type[BaseException]] = (),
    ) -> WaitRequest:
        return WaitRequest(
            condition=condition,
            description=description,
            timeout=self.default_timeout if timeout is None else timeout,
            poll_interval=self.poll_interval,
            ignored_exceptions=tuple(ignored_exceptions),
        )

    # =========================================================================
    # Element visibility
    # =========================================================================

    def until_visible(self, locator: str, timeout: Optional[float] = None) -> WebElement:
        """Wait until an element is present in the DOM and visible."""
        return self.wait(self._request(
            visibility_of(locator), f"visibility of '{locator}'", timeout,
        ))

    def until_all_visible(self, locator: str, timeout: Optional[float] = None) -> List[WebElement]:
        """Wait until at least one element matches and all matches are visible."""
        return self.wait(self._request(
            visibility_of_all(locator), f"visibility of all '{locator}'", timeout,
        ))

    def until_not_visible(self, locator: str, timeout: Optional[float] = None) -> bool:
        """
        Wait until an element is hidden or no longer in the DOM.

        An element that does not exist, or whose reference went stale, already
        satisfies this condition.
        """
        return self.wait(self._request(
            invisibility_of(locator), f"invisibility of '{locator}'", timeout,
        ))

    # =========================================================================
    # Element clickability / existence
    # =========================================================================

    def until_clickable(self, locator: str, timeout: Optional[float] = None) -> WebElement:
        """Wait until an element is visible and enabled."""
        return self.wait(self._request(
            clickability_of(locator), f"clickability of '{locator}'", timeout,
        ))

    def until_exists(self, locator: str, timeout: Optional[float] = None) -> WebElement:
        """Wait until an element is present in the DOM (may not be visible)."""
        return self.wait(self._request(
            presence_of(locator), f"presence of '{locator}'", timeout,
        ))

    # =========================================================================
    # Text / URL / title
    # =========================================================================

    def until_text_present(
        self,
        locator: str,
        text: str,
        timeout: Optional[float] = None,
    ) -> bool:
        """Wait until the element's text contains `text` (case-insensitive)."""
        return self.wait(self._request(
            text_in_element(locator, text), f"text '{text}' in '{locator}'", timeout,
        ))

    def until_url_contains(self, part: str, timeout: Optional[float] = None) -> bool:
        return self.wait(self._request(
            url_contains(part), f"URL containing '{part}'", timeout,
        ))

    def until_title_contains(self, part: str, timeout: Optional[float] = None) -> bool:
        return self.wait(self._request(
            title_contains(part), f"title containing '{part}'", timeout,
        ))

    # =========================================================================
    # Custom conditions
    # =========================================================================

    def until_condition(
        self,
        condition: Condition,
        timeout: Optional[float] = None,
        description: Optional[str] = None,
        ignored_exceptions: Iterable[Type[BaseException]] = (),
    ) -> Any:
        """
        Wait until a custom condition returns a truthy value.

        Args:
            condition: Receives the live session. Return None/False/empty to retry.
            timeout: Timeout in seconds
            description: Text for logs and WaitTimeout
            ignored_exceptions: Extra exception types to retry on

        Returns:
            The condition's first truthy result
        """
        description = description or getattr(condition, "__name__", "custom condition")
        return self.wait(self._request(condition, description, timeout, ignored_exceptions))

    # =========================================================================
    # Frames / alerts
    # =========================================================================

    def until_frame_available(self, locator: str, timeout: Optional[float] = None) -> BrowserSession:
        """Wait until a frame is available and switch the session into it."""
        return self.wait(self._request(
            frame_available(locator), f"frame '{locator}' to be available", timeout,
        ))

    def until_alert_present(self, timeout: Optional[float] = None) -> Alert:
        """Wait until a JavaScript dialog is open."""
        return self.wait(self._request(
            alert_present(), "alert to be present", timeout,
        ))


__all__ = [
    "WaitHelper",
    "WaitRequest",
    "PollResult",
    "PollKind",
    "poll_once",
    "ALWAYS_IGNORED",
    "DEFAULT_POLL_INTERVAL",
    "DEFAULT_TIMEOUT",
]
