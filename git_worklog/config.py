from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Optional


DEFAULT_MAX_DEPTH = 3
DEFAULT_REPORTS_DIRNAME = "data_reports"
DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 3000


def _env_flag(name: str) -> bool:
    return (os.getenv(name) or "").strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int, *, minimum: int = 0) -> int:
    value = (os.getenv(name) or "").strip()
    if not value:
        return default
    try:
        parsed = int(value)
    except Exception:
        return default
    if parsed < minimum:
        return default
    return parsed


def _git_timeout_seconds() -> Optional[float]:
    value = (os.getenv("GIT_WORKLOG_GIT_TIMEOUT_SECONDS") or "").strip()
    if not value:
        return None
    try:
        seconds = float(value)
        if seconds <= 0:
            return None
        return seconds
    except Exception:
        return None


def default_worker_count() -> int:
    return os.cpu_count() or 1


def verbose_enabled() -> bool:
    return _env_flag("GIT_WORKLOG_VERBOSE") or _env_flag("GIT_WORKLOG_DEBUG")


@dataclass(frozen=True)
class Settings:
    max_depth: int = DEFAULT_MAX_DEPTH
    scan_workers: int = field(default_factory=default_worker_count)
    git_timeout_seconds: Optional[float] = None
    verbose: bool = False
    reports_dir: str = DEFAULT_REPORTS_DIRNAME
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT


def load_settings() -> Settings:
    """Read settings from the environment.

    Callers that want `.env` support run `load_dotenv()` first (the CLI and
    the service entry points do). Malformed numbers fall back to defaults.
    """
    return Settings(
        max_depth=_env_int("GIT_WORKLOG_MAX_DEPTH", DEFAULT_MAX_DEPTH),
        scan_workers=_env_int("GIT_WORKLOG_SCAN_WORKERS", default_worker_count(), minimum=1),
        git_timeout_seconds=_git_timeout_seconds(),
        verbose=verbose_enabled(),
        reports_dir=(os.getenv("GIT_WORKLOG_REPORTS_DIR") or "").strip() or DEFAULT_REPORTS_DIRNAME,
        host=(os.getenv("GIT_WORKLOG_HOST") or "").strip() or DEFAULT_HOST,
        port=_env_int("GIT_WORKLOG_PORT", DEFAULT_PORT, minimum=1),
    )
