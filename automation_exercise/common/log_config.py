"""
================================================================================
Logging Configuration
================================================================================

Centralized Loguru setup for the test framework.

The `logging` section of config/config.yaml controls level, format and an
optional rotating log file. LOG_LEVEL overrides the configured level.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Any, Dict, Optional

from loguru import logger

from automation_exercise.ui_testing.framework.settings import load_config_section


DEFAULT_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
    "<level>{message}</level>"
)

_logger_initialized = False


def init_logger(
    level: Optional[str] = None,
    log_file: Optional[str] = None,
    config: Optional[Dict[str, Any]] = None,
    force: bool = False,
) -> None:
    """
    Initializes the loguru logger with standard settings.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR). Defaults to config value.
        log_file: Optional file path to write logs to. Defaults to config value.
        config: `logging` section to use instead of reading config/config.yaml
        force: Re-initialize even if already initialized

    Example:
        init_logger()  # Use config/config.yaml
        init_logger(level="DEBUG", log_file="logs/ui.log")
    """
    global _logger_initialized

    if _logger_initialized and not force:
        return

    config = load_config_section("logging") if config is None else config

    level = (level or os.getenv("LOG_LEVEL") or config.get("level", "INFO")).upper()
    format_string = config.get("format", DEFAULT_FORMAT)

    # Remove default handler
    logger.remove()
    logger.add(
        sys.stderr,
        format=format_string,
        level=level,
        colorize=True,
        backtrace=True,
        diagnose=False,
    )

    log_file = log_file or config.get("file")
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_file,
            format=format_string,
            level=level,
            rotation=config.get("rotation", "10 MB"),
            retention=config.get("retention", "7 days"),
            colorize=False,
        )

    _logger_initialized = True
    logger.debug(f"Logger initialized with level: {level}")


__all__ = [
    "init_logger",
]
