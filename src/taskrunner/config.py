# src/taskrunner/config.py

"""Runner options and settings loaded from environment variables (+ optional .env).

Design goals:
- RunnerConfig: immutable per-runner options, validated at construction.
- Settings: one object for the app (logging + default runner options).
- Nothing is read from the environment at import time.
"""

from __future__ import annotations

import dataclasses
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

ENV_PREFIX = "TASKRUNNER"

DEFAULT_CONCURRENCY = 1
DEFAULT_INTER_BATCH_DELAY_MS = 500


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_path(name: str, default: Path | None) -> Path | None:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class RunnerConfig:
    concurrency: int = DEFAULT_CONCURRENCY
    inter_batch_delay_ms: int = DEFAULT_INTER_BATCH_DELAY_MS
    auto_start: bool = True
    retry_on_failure: bool = False

    def __post_init__(self) -> None:
        if isinstance(self.concurrency, bool) or not isinstance(self.concurrency, int):
            raise ValueError(f"concurrency must be an int, got {self.concurrency!r}")
        if self.concurrency < 1:
            raise ValueError(f"concurrency must be >= 1, got {self.concurrency}")
        if isinstance(self.inter_batch_delay_ms, bool) or not isinstance(self.inter_batch_delay_ms, int):
            raise ValueError(f"inter_batch_delay_ms must be an int, got {self.inter_batch_delay_ms!r}")
        if self.inter_batch_delay_ms < 0:
            raise ValueError(f"inter_batch_delay_ms must be >= 0, got {self.inter_batch_delay_ms}")

    @property
    def inter_batch_delay_s(self) -> float:
        return self.inter_batch_delay_ms / 1000.0

    def with_overrides(self, **overrides: Any) -> RunnerConfig:
        """Copy with the given fields replaced (None values are ignored)."""
        clean = {k: v for k, v in overrides.items() if v is not None}
        if not clean:
            return self
        return dataclasses.replace(self, **clean)


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str
    log_dir: Path | None

    # ---- Default runner options ----
    concurrency: int
    inter_batch_delay_ms: int
    auto_start: bool
    retry_on_failure: bool

    @staticmethod
    def from_env(*, dotenv: bool = True) -> "Settings":
        if dotenv:
            load_dotenv(override=False)

        return Settings(
            app_name=_env(_k("APP_NAME"), "taskrunner"),
            log_level=_env(_k("LOG_LEVEL"), "INFO"),
            log_dir=_env_path(_k("LOG_DIR"), None),
            concurrency=_env_int(_k("CONCURRENCY"), DEFAULT_CONCURRENCY),
            inter_batch_delay_ms=_env_int(_k("INTER_BATCH_DELAY_MS"), DEFAULT_INTER_BATCH_DELAY_MS),
            auto_start=_env_bool(_k("AUTO_START"), True),
            retry_on_failure=_env_bool(_k("RETRY_ON_FAILURE"), False),
        )

    def runner_config(self, **overrides: Any) -> RunnerConfig:
        base = RunnerConfig(
            concurrency=self.concurrency,
            inter_batch_delay_ms=self.inter_batch_delay_ms,
            auto_start=self.auto_start,
            retry_on_failure=self.retry_on_failure,
        )
        return base.with_overrides(**overrides)


_SETTINGS: Settings | None = None


def get_settings() -> Settings:
    global _SETTINGS
    if _SETTINGS is None:
        _SETTINGS = Settings.from_env()
    return _SETTINGS


def reset_settings() -> None:
    """Forget the cached Settings (tests, or after changing the environment)."""
    global _SETTINGS
    _SETTINGS = None
