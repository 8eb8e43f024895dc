"""
Repository-level pytest configuration.

Why this exists:
  - Provide safe defaults for local runs (no secrets embedded)
  - Initialize logging once per test session
  - Keep behavior explicit and discoverable

Real credentials belong in CI secrets (AE_USER_EMAIL / AE_USER_PASSWORD).
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Generator

import pytest

from automation_exercise.common import init_logger


@pytest.fixture(scope="session")
def project_root() -> Path:
    """Return repo root path."""
    return Path(__file__).parent


@pytest.fixture(scope="session", autouse=True)
def _safe_env_defaults() -> Generator[None, None, None]:
    """
    Set placeholder environment defaults if not already provided by the user/CI.
    """
    defaults = {
        "AE_USER_EMAIL": "demo_user@example.com",
        "AE_USER_PASSWORD": "demo_password",
        "AE_USER_NAME": "demo_user",
    }

    for k, v in defaults.items():
        os.environ.setdefault(k, v)

    yield


@pytest.fixture(scope="session", autouse=True)
def _init_logging() -> None:
    init_logger()
