"""
================================================================================
Session Settings
================================================================================

YAML-based settings for the browser session with environment variable
override support.

Features:
    - Base YAML file (config/config.yaml, `app_settings` section)
    - Optional environment file merged on top (config/<env>.yaml)
    - AE_-prefixed environment variables override both (AE_BROWSER=firefox)
    - Immutable SessionSettings snapshot, validated once

Settings are built once per test session and passed explicitly into the
session manager and wait helper. There is no module-level cache.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import os
from dataclasses import dataclass, fields, replace
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml
from loguru import logger

from .exceptions import UnsupportedConfiguration


# Default configuration file locations
CONFIG_FILE_NAME = "config.yaml"
CONFIG_DIR_VARIABLE = "AE_CONFIG_DIR"
SOURCE_CONFIG_DIR = Path(__file__).parent.parent.parent.parent / "config"

ENV_PREFIX = "AE_"
ENVIRONMENT_VARIABLE = "AE_ENVIRONMENT"
DEFAULT_ENVIRONMENT = "development"
SETTINGS_SECTION = "app_settings"


class BrowserType(str, Enum):
    """Browsers a session can be created for."""

    CHROME = "Chrome"
    FIREFOX = "Firefox"
    EDGE = "Edge"

    @classmethod
    def parse(cls, value: Any) -> "BrowserType":
        """
        Resolve a browser name case-insensitively.

        Args:
            value: Browser name ("chrome", "Firefox", ...) or a BrowserType

        Returns:
            Matching BrowserType

        Raises:
            UnsupportedConfiguration: If the name is not a supported browser
        """
        if isinstance(value, cls):
            return value

        name = str(value).strip().lower()
        for member in cls:
            if member.value.lower() == name:
                return member

        supported = ", ".join(member.value for member in cls)
        raise UnsupportedConfiguration(
            f"Unsupported browser: '{value}'. Supported values: {supported}"
        )


@dataclass(frozen=True)
class SessionSettings:
    """
    Immutable settings snapshot read once at session creation.

    Attributes:
        base_url: Base URL of the application under test
        browser: Browser engine to launch
        headless: Run the browser without a visible window
        implicit_wait: Default timeout for element actions (seconds)
        explicit_wait: Default timeout for WaitHelper conditions (seconds)
        page_load_timeout: Maximum time for a navigation to finish (seconds)
        window_width: Viewport width in pixels
        window_height: Viewport height in pixels
    """
    base_url: str = "https://automationexercise.com"
    browser: BrowserType = BrowserType.CHROME
    headless: bool = False
    implicit_wait: float = 10.0
    explicit_wait: float = 30.0
    page_load_timeout: float = 60.0
    window_width: int = 1920
    window_height: int = 1080

    def __post_init__(self) -> None:
        object.__setattr__(self, "browser", BrowserType.parse(self.browser))

        for name in ("implicit_wait", "explicit_wait", "page_load_timeout"):
            if not _is_positive_number(getattr(self, name)):
                raise UnsupportedConfiguration(
                    f"'{name}' must be a positive number of seconds, "
                    f"got {getattr(self, name)!r}"
                )
        for name in ("window_width", "window_height"):
            value = getattr(self, name)
            if not _is_positive_number(value) or not float(value).is_integer():
                raise UnsupportedConfiguration(
                    f"'{name}' must be a positive pixel count, "
                    f"got {value!r}"
                )

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "SessionSettings":
        """
        Build settings from a plain mapping, ignoring unknown keys.

        Raises:
            UnsupportedConfiguration: If a value has the wrong type
        """
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            logger.warning(f"Ignoring unknown settings keys: {unknown}")

        defaults = cls()
        kwargs: Dict[str, Any] = {}
        for key in known & set(data):
            value = data[key]
            if isinstance(value, str) and key != "browser":
                value = _convert_type(value, getattr(defaults, key), key)
            kwargs[key] = value
        return replace(defaults, **kwargs)

    def with_overrides(self, **overrides: Any) -> "SessionSettings":
        """Return a copy with the given fields replaced."""
        return replace(self, **overrides)


def default_config_path(env: Optional[Mapping[str, str]] = None) -> Path:
    """
    Locate the base config.yaml.

    Lookup order:
        1. $AE_CONFIG_DIR/config.yaml
        2. config/config.yaml of the source checkout
        3. config/config.yaml under the working directory

    Returns:
        First existing candidate, or the working-directory path when none exists
    """
    env = os.environ if env is None else env
    if env.get(CONFIG_DIR_VARIABLE):
        return Path(env[CONFIG_DIR_VARIABLE]) / CONFIG_FILE_NAME

    cwd_path = Path.cwd() / "config" / CONFIG_FILE_NAME
    for candidate in (SOURCE_CONFIG_DIR / CONFIG_FILE_NAME, cwd_path):
        if candidate.exists():
            return candidate
    return cwd_path


def load_settings(
    config_path: Optional[Path] = None,
    environment: Optional[str] = None,
    env: Optional[Mapping[str, str]] = None,
) -> SessionSettings:
    """
    Load session settings from YAML files and environment variables.

    Loading order (later wins):
        1. SessionSettings defaults
        2. `app_settings` section of the base YAML file
        3. `app_settings` section of config/<environment>.yaml (optional)
        4. AE_* environment variables

    Args:
        config_path: Base YAML file. Uses default_config_path() if not specified.
        environment: Environment name. Defaults to $AE_ENVIRONMENT or "development".
        env: Environment mapping to read overrides from (defaults to os.environ)

    Returns:
        Validated SessionSettings

    Raises:
        UnsupportedConfiguration: On invalid YAML or invalid values
    """
    env = os.environ if env is None else env
    config_path = Path(config_path) if config_path else default_config_path(env)
    environment = environment or env.get(ENVIRONMENT_VARIABLE, DEFAULT_ENVIRONMENT)

    data = _read_section(config_path)

    env_config_path = config_path.parent / f"{environment}.yaml"
    if env_config_path.exists():
        data = _deep_merge(data, _read_section(env_config_path))
        logger.debug(f"Merged environment config: {env_config_path}")

    for name in (f.name for f in fields(SessionSettings)):
        env_key = f"{ENV_PREFIX}{name.upper()}"
        if env_key in env:
            data[name] = env[env_key]

    settings = SessionSettings.from_mapping(data)
    logger.debug(f"Resolved session settings: {settings}")
    return settings


def load_config_section(
    section: str,
    config_path: Optional[Path] = None,
) -> Dict[str, Any]:
    """
    Read an arbitrary top-level section of the base YAML file.

    Returns:
        Section dictionary or empty dict if not found
    """
    return _read_yaml(Path(config_path) if config_path else default_config_path()).get(section) or {}


def _read_section(path: Path) -> Dict[str, Any]:
    section = _read_yaml(path).get(SETTINGS_SECTION) or {}
    if not isinstance(section, dict):
        raise UnsupportedConfiguration(
            f"'{SETTINGS_SECTION}' in {path} must be a mapping"
        )
    return dict(section)


def _read_yaml(path: Path) -> Dict[str, Any]:
    """Load a YAML file, returning {} when it does not exist."""
    if not path.exists():
        logger.warning(
            f"Configuration file not found: {path}. "
            f"Using defaults and environment variables only."
        )
        return {}

    try:
        with open(path, "r", encoding="utf-8") as f:
            content = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise UnsupportedConfiguration(
            f"Invalid YAML in configuration file {path}: {e}"
        ) from e

    logger.debug(f"Loaded configuration from: {path}")
    return content


def _deep_merge(base: Dict, override: Dict) -> Dict:
    """Deep merges two dictionaries, with override taking precedence."""
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _is_positive_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and value > 0


def _convert_type(value: str, reference: Any, key: str) -> Any:
    """
    Convert a string value (env var or quoted YAML) to match the default's type.
    """
    if isinstance(reference, bool):
        return value.strip().lower() in ("true", "1", "yes", "on")
    try:
        if isinstance(reference, int):
            return int(value)
        if isinstance(reference, float):
            return float(value)
    except ValueError as e:
        raise UnsupportedConfiguration(
            f"Setting '{key}' expects {type(reference).__name__}, got {value!r}"
        ) from e
    return value


__all__ = [
    "BrowserType",
    "SessionSettings",
    "load_settings",
    "load_config_section",
    "default_config_path",
]
