from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from env.paths import LOGS_DIR, PROJECT_ROOT

# ------------------------------------------------------------
# Minimal dotenv loader (read-only helper, bootstrap owns usage)
# ------------------------------------------------------------


def _load_dotenv(path: Path) -> None:
    """
    Minimal dotenv loader.
    - Silent
    - Never overrides existing os.environ
    """
    if not path.exists():
        return

    for raw in path.read_text(encoding="utf-8").splitlines():
        line = raw.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue

        k, v = line.split("=", 1)
        k = k.strip()
        v = v.strip()

        # strip inline comments
        if " #" in v:
            v = v.split(" #", 1)[0].rstrip()
        elif "\t#" in v:
            v = v.split("\t#", 1)[0].rstrip()

        # strip quotes
        if len(v) >= 2 and v[0] == v[-1] and v[0] in ("'", '"'):
            v = v[1:-1]

        if k and k not in os.environ:
            os.environ[k] = v


# ------------------------------------------------------------
# Errors / helpers
# ------------------------------------------------------------


class ConfigError(RuntimeError):
    pass


def _as_bool(v: str) -> bool:
    return v.strip().lower() in {"1", "true", "yes", "on"}


def _as_int(v: str, default: int) -> int:
    try:
        return int(v)
    except ValueError:
        return default


def _as_list(v: str) -> tuple[str, ...]:
    return tuple(item.strip() for item in v.split(",") if item.strip())


# ------------------------------------------------------------
# Logging environment (SAFE ANYWHERE)
# ------------------------------------------------------------


@dataclass(frozen=True)
class LoggingEnvironment:
    log_level: str
    log_retention: int
    verbose: bool
    quiet: bool


def get_logging_env() -> LoggingEnvironment:
    return LoggingEnvironment(
        log_level=os.environ.get("LOG_LEVEL", "INFO"),
        log_retention=_as_int(os.environ.get("LOG_RETENTION", "30"), 30),
        verbose=_as_bool(os.environ.get("KEEPLAST_VERBOSE", "0")),
        quiet=_as_bool(os.environ.get("KEEPLAST_QUIET", "0")),
    )


# ------------------------------------------------------------
# Full runtime environment
# ------------------------------------------------------------


class Environment:
    def __init__(self):
        # Logging snapshot (immutable)
        self._logging = get_logging_env()

        self.command = os.environ.get("KEEPLAST_COMMAND", "bootstrap")
        self.run_id = os.environ.get("KEEPLAST_RUN_ID", "")

        # ---- RETENTION POLICY ----
        raw_keep = os.environ.get("KEEPLAST_KEEP", "10")
        try:
            self.keep_count = int(raw_keep)
        except ValueError:
            raise ConfigError(f"KEEPLAST_KEEP must be an integer, got {raw_keep!r}")
        if self.keep_count < 0:
            raise ConfigError(f"KEEPLAST_KEEP must be >= 0, got {self.keep_count}")

        self.dry_run = _as_bool(os.environ.get("KEEPLAST_DRY_RUN", "0"))
        self.purge_directories = _as_bool(
            os.environ.get("KEEPLAST_PURGE_DIRECTORIES", "0")
        )

        # ---- SCANNING ----
        self.includes = _as_list(os.environ.get("KEEPLAST_INCLUDE", ""))
        self.excludes = _as_list(os.environ.get("KEEPLAST_EXCLUDE", ""))
        self.default_excludes = _as_bool(
            os.environ.get("KEEPLAST_DEFAULT_EXCLUDES", "1")
        )

    def as_dict(self) -> dict:
        return {
            "Logging": {
                "log_level": self.log_level,
                "log_retention": self.log_retention,
                "logs_dir": str(LOGS_DIR),
                "verbose": self.verbose,
                "quiet": self.quiet,
            },
            "Run": {
                "command": self.command,
                "run_id": self.run_id,
                "project_root": str(PROJECT_ROOT),
            },
            "Retention": {
                "keep_count": self.keep_count,
                "dry_run": self.dry_run,
                "purge_directories": self.purge_directories,
            },
            "Scanning": {
                "includes": ", ".join(self.includes) or "**",
                "excludes": ", ".join(self.excludes) or "(none)",
                "default_excludes": self.default_excludes,
            },
        }

    # ---- logging passthrough ----
    @property
    def log_level(self) -> str:
        return self._logging.log_level

    @property
    def log_retention(self) -> int:
        return self._logging.log_retention

    @property
    def verbose(self) -> bool:
        return self._logging.verbose

    @property
    def quiet(self) -> bool:
        return self._logging.quiet


_ENV: Optional[Environment] = None


def reset_env_caches() -> None:
    """Invalidate cached views of environment variables."""
    global _ENV
    _ENV = None


def get_env() -> Environment:
    global _ENV
    if _ENV is None:
        _ENV = Environment()
    return _ENV
