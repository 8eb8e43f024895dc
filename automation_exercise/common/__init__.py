"""
Shared utilities for the automation framework.

Exports:
    - init_logger: Initialize loguru with the project's standard settings
"""

from .log_config import init_logger

__all__ = [
    "init_logger",
]
