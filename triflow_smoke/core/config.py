from __future__ import annotations

import os
from dataclasses import dataclass, field

from triflow_smoke.core.types import DEFAULT_BASE_URL

_ENV_PREFIX = "TRIFLOW_SMOKE_"

DEFAULT_LAUNCH_ARGS: list[str] = ["--no-sandbox", "--disable-dev-shm-usage"]


def _env(name: str) -> str | None:
    raw = os.environ.get(_ENV_PREFIX + name)
    if raw is None or not raw.strip():
        return None
    return raw.strip()


def _env_int(name: str, default: int) -> int:
    raw = _env(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"{_ENV_PREFIX}{name} must be an integer, got {raw!r}") from exc


def _env_bool(name: str, default: bool) -> bool:
    raw = _env(name)
    if raw is None:
        return default
    return raw.lower() in {"1", "true", "yes", "on"}


@dataclass
class SmokeConfig:
    default_base_url: str = DEFAULT_BASE_URL
    headless: bool = True
    launch_args: list[str] = field(default_factory=lambda: list(DEFAULT_LAUNCH_ARGS))
    # Per-operation bounds (ms)
    element_timeout_ms: int = 20_000
    login_redirect_timeout_ms: int = 30_000
    analysis_timeout_ms: int = 60_000
    response_timeout_ms: int = 60_000
    screenshot_on_success: bool = False
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> SmokeConfig:
        """Build a config from TRIFLOW_SMOKE_* environment variables, falling back to defaults."""
        base = cls()
        launch_raw = _env("LAUNCH_ARGS")
        return cls(
            default_base_url=_env("BASE_URL") or base.default_base_url,
            headless=_env_bool("HEADLESS", base.headless),
            launch_args=launch_raw.split() if launch_raw is not None else base.launch_args,
            element_timeout_ms=_env_int("ELEMENT_TIMEOUT_MS", base.element_timeout_ms),
            login_redirect_timeout_ms=_env_int("LOGIN_TIMEOUT_MS", base.login_redirect_timeout_ms),
            analysis_timeout_ms=_env_int("ANALYSIS_TIMEOUT_MS", base.analysis_timeout_ms),
            response_timeout_ms=_env_int("RESPONSE_TIMEOUT_MS", base.response_timeout_ms),
            screenshot_on_success=_env_bool("SCREENSHOT_ON_SUCCESS", base.screenshot_on_success),
            log_level=(_env("LOG_LEVEL") or base.log_level).upper(),
        )
