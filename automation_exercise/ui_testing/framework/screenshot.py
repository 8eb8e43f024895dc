"""
================================================================================
Screenshot Capture
================================================================================

Timestamped screenshots for debugging failed tests, optionally attached to
the Allure report.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import re
from datetime import datetime
from pathlib import Path
from typing import Optional, Union

import allure
from loguru import logger

from .driver import BrowserSession


# Default output directory for screenshots
SCREENSHOT_DIR = Path(__file__).parent.parent / "screenshots"

_INVALID_FILENAME_CHARS = re.compile(r'[<>:"/\\|?*\x00-\x1f]+')


def sanitize_file_name(name: str) -> str:
    """Replace characters that are invalid in file names with underscores."""
    parts = [part for part in _INVALID_FILENAME_CHARS.split(name) if part]
    return "_".join(parts) or "screenshot"


def capture_screenshot(
    session: BrowserSession,
    name: str,
    directory: Optional[Union[str, Path]] = None,
    full_page: bool = False,
    attach_to_allure: bool = True,
) -> Path:
    """
    Take a screenshot and save it as `<name>_<timestamp>.png`.

    Args:
        session: Live browser session
        name: Descriptive name (sanitized for the file system)
        directory: Output directory. Defaults to SCREENSHOT_DIR.
        full_page: Capture the full scrollable page
        attach_to_allure: Whether to attach the image to the Allure report

    Returns:
        Path to the saved screenshot
    """
    screenshot_dir = Path(directory) if directory else SCREENSHOT_DIR
    screenshot_dir.mkdir(parents=True, exist_ok=True)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    filepath = screenshot_dir / f"{sanitize_file_name(name)}_{timestamp}.png"

    session.screenshot(filepath, full_page=full_page)

    if attach_to_allure and filepath.exists():
        allure.attach.file(
            str(filepath),
            name=name,
            attachment_type=allure.attachment_type.PNG,
        )

    logger.debug(f"Screenshot saved: {filepath}")
    return filepath


def capture_screenshot_on_failure(
    session: BrowserSession,
    test_class_name: str,
    test_method_name: str,
    directory: Optional[Union[str, Path]] = None,
) -> Path:
    """Capture a screenshot named after the failing test."""
    return capture_screenshot(
        session,
        f"FAIL_{test_class_name}_{test_method_name}",
        directory=directory,
        full_page=True,
    )


__all__ = [
    "capture_screenshot",
    "capture_screenshot_on_failure",
    "sanitize_file_name",
    "SCREENSHOT_DIR",
]
