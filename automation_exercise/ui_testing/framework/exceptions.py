"""
================================================================================
Framework Exceptions
================================================================================

Error taxonomy for the UI automation core.

Transient errors (NotFoundYet, StaleReference and their subclasses) are the
normal steady state of an asynchronously rendering page. The wait helper
absorbs them while polling; every other error propagates unchanged.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from typing import Optional


class FrameworkError(Exception):
    """Base exception for all framework errors."""
    pass


# =============================================================================
# Transient (retried while polling)
# =============================================================================

class TransientDriverError(FrameworkError):
    """Target is not ready yet; may succeed on the next poll."""
    pass


class NotFoundYet(TransientDriverError):  # noqa: N818
    """No element matched the locator."""

    def __init__(self, locator: str, message: Optional[str] = None):
        self.locator = locator
        super().__init__(message or f"No element matches locator: {locator}")


class NoSuchFrame(NotFoundYet):  # noqa: N818
    """Located element is not (yet) a frame with a loaded document."""
    pass


class NoAlertPresent(NotFoundYet):  # noqa: N818
    """No JavaScript dialog is pending."""

    def __init__(self, message: str = "No dialog is currently open"):
        super().__init__("<alert>", message)


class StaleReference(TransientDriverError):  # noqa: N818
    """Element handle no longer refers to a node attached to the document."""
    pass


# =============================================================================
# Fatal
# =============================================================================

class WaitTimeout(FrameworkError):  # noqa: N818
    """
    Condition was not satisfied before the deadline.

    Attributes:
        description: Human-readable description of what was awaited
        elapsed: Seconds spent waiting
        timeout: Configured timeout in seconds
        last_error: Last suppressed transient error, if any
    """

    def __init__(
        self,
        description: str,
        elapsed: float,
        timeout: float,
        last_error: Optional[BaseException] = None,
    ):
        self.description = description
        self.elapsed = elapsed
        self.timeout = timeout
        self.last_error = last_error

        message = (
            f"Timed out after {elapsed:.2f}s (timeout={timeout:.2f}s) "
            f"waiting for: {description}"
        )
        if last_error is not None:
            message += f". Last error: {last_error}"
        super().__init__(message)


class SessionStateError(FrameworkError):
    """Browser session accessed outside the ACTIVE state."""
    pass


class SessionUnavailable(FrameworkError):  # noqa: N818
    """Browser, context or page has been closed or crashed."""
    pass


class UnsupportedConfiguration(FrameworkError):  # noqa: N818
    """Settings could not be resolved (unknown browser, invalid values)."""
    pass


class AlertAlreadyHandled(FrameworkError):  # noqa: N818
    """Dialog was resolved differently when it opened than the caller now asks for."""
    pass


class TeardownError(FrameworkError):
    """Releasing the browser failed. Logged by the session manager, never raised."""
    pass


__all__ = [
    "FrameworkError",
    "TransientDriverError",
    "NotFoundYet",
    "NoSuchFrame",
    "NoAlertPresent",
    "StaleReference",
    "WaitTimeout",
    "SessionStateError",
    "SessionUnavailable",
    "UnsupportedConfiguration",
    "AlertAlreadyHandled",
    "TeardownError",
]
