from __future__ import annotations

"""bootstrap.py

Process bootstrap for keeplast.

Rules:
1) Only bootstrap is allowed to *mutate* os.environ for shared run context.
2) Call bootstrap_base_env() exactly once at the true entrypoint.
3) Call bootstrap_run_context() after argparse parsing, before init_logging().

Everything else treats environment variables as the source of truth.
"""

import os
from datetime import datetime
from pathlib import Path

from env import CONFIG_DIR, _load_dotenv, reset_env_caches


_BOOTSTRAPPED = False


def bootstrap_base_env(
    *,
    config_dir: Path = CONFIG_DIR,
    env_file: str = ".env",
    required: bool = False,
) -> None:
    global _BOOTSTRAPPED
    if _BOOTSTRAPPED:
        return

    dotenv_path = Path(config_dir) / env_file

    if required and not dotenv_path.exists():
        raise RuntimeError(
            f"Missing required env file: {dotenv_path}\n"
            "Expected config/.env relative to project root."
        )

    _load_dotenv(dotenv_path)

    os.environ.setdefault(
        "KEEPLAST_RUN_ID",
        datetime.now().strftime("%Y-%m-%d_%H-%M-%S"),
    )

    reset_env_caches()
    _BOOTSTRAPPED = True


def bootstrap_run_context(
    *,
    command: str,
    verbose: bool | None = None,
    quiet: bool | None = None,
) -> None:
    """Establish run-scoped context used by logging and the purge command."""

    os.environ["KEEPLAST_COMMAND"] = command

    if verbose is not None:
        os.environ["KEEPLAST_VERBOSE"] = "1" if verbose else "0"
    if quiet is not None:
        os.environ["KEEPLAST_QUIET"] = "1" if quiet else "0"

    # Context changes must invalidate cached env views.
    reset_env_caches()
