"""Runtime settings for the Day-0 guard.

Settings are read from environment variables once by the entrypoint and then
passed explicitly into the core functions, so the core never consults the
process environment itself.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import timedelta

from .models import DEFAULT_MAX_DEPENDENCIES

DEFAULT_WINDOW_HOURS = 24.0
DEFAULT_MAX_VIOLATIONS = 100
DEFAULT_REGISTRY_URL = "https://registry.npmjs.org"
DEFAULT_GITHUB_API_URL = "https://api.github.com"
DEFAULT_HTTP_TIMEOUT = 10.0
DEFAULT_CHECK_NAME = "Day-0 Dependency Guard"

_TRUTHY = {"1", "true", "yes", "y"}
_FALSY = {"", "0", "false", "no", "n"}


class ConfigError(RuntimeError):
    """Raised when an environment setting is missing or invalid."""


@dataclass(slots=True, frozen=True)
class Settings:
    """Process-wide knobs for one guard run."""

    window: timedelta = timedelta(hours=DEFAULT_WINDOW_HOURS)
    max_violations: int = DEFAULT_MAX_VIOLATIONS
    max_dependencies: int = DEFAULT_MAX_DEPENDENCIES
    registry_url: str = DEFAULT_REGISTRY_URL
    github_api_url: str = DEFAULT_GITHUB_API_URL
    http_timeout: float = DEFAULT_HTTP_TIMEOUT
    check_name: str = DEFAULT_CHECK_NAME
    warn_only: bool = False

    def __post_init__(self) -> None:
        if self.window <= timedelta(0):
            raise ConfigError("window must be positive")
        if self.max_violations <= 0:
            raise ConfigError("max_violations must be positive")
        if self.max_dependencies <= 0:
            raise ConfigError("max_dependencies must be positive")
        if self.http_timeout <= 0:
            raise ConfigError("http_timeout must be positive")
        if not self.check_name:
            raise ConfigError("check_name must be non-empty")

    @property
    def window_hours(self) -> float:
        return self.window.total_seconds() / 3600


def _positive_number(environ: Mapping[str, str], key: str, default: float) -> float:
    raw = environ.get(key, "").strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError as exc:
        raise ConfigError(f"{key} must be a number, got {raw!r}") from exc
    if value <= 0:
        raise ConfigError(f"{key} must be positive, got {raw!r}")
    return value


def _positive_int(environ: Mapping[str, str], key: str, default: int) -> int:
    raw = environ.get(key, "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise ConfigError(f"{key} must be an integer, got {raw!r}") from exc
    if value <= 0:
        raise ConfigError(f"{key} must be positive, got {raw!r}")
    return value


def _flag(environ: Mapping[str, str], key: str) -> bool:
    raw = environ.get(key, "").strip().lower()
    if raw in _TRUTHY:
        return True
    if raw in _FALSY:
        return False
    raise ConfigError(f"{key} must be a boolean flag, got {raw!r}")


def _url(environ: Mapping[str, str], key: str, default: str) -> str:
    raw = environ.get(key, "").strip() or default
    if not raw.startswith(("http://", "https://")):
        raise ConfigError(f"{key} must be an http(s) URL, got {raw!r}")
    return raw.rstrip("/")


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    """Build Settings from environment variables.

    Args:
        environ: Mapping to read from; defaults to ``os.environ``.

    Raises:
        ConfigError: If any variable is present but invalid.
    """
    env = os.environ if environ is None else environ

    window_hours = _positive_number(env, "DAY0_GUARD_WINDOW_HOURS", DEFAULT_WINDOW_HOURS)

    return Settings(
        window=timedelta(hours=window_hours),
        max_violations=_positive_int(env, "DAY0_GUARD_MAX_VIOLATIONS", DEFAULT_MAX_VIOLATIONS),
        max_dependencies=_positive_int(
            env, "DAY0_GUARD_MAX_DEPENDENCIES", DEFAULT_MAX_DEPENDENCIES
        ),
        registry_url=_url(env, "DAY0_GUARD_REGISTRY_URL", DEFAULT_REGISTRY_URL),
        github_api_url=_url(env, "GITHUB_API_URL", DEFAULT_GITHUB_API_URL),
        http_timeout=_positive_number(env, "DAY0_GUARD_HTTP_TIMEOUT", DEFAULT_HTTP_TIMEOUT),
        check_name=env.get("DAY0_GUARD_CHECK_NAME", "").strip() or DEFAULT_CHECK_NAME,
        warn_only=_flag(env, "DAY0_GUARD_WARN_ONLY"),
    )
