import logging
import os
import sys
from pathlib import Path

import pytest


@pytest.fixture(autouse=True)
def clean_env_and_modules(monkeypatch, tmp_path):
    """
    Ensure tests don't leak env, logger state, or cached path resolution.
    """

    for k in list(os.environ):
        if k.startswith("KEEPLAST_"):
            monkeypatch.delenv(k, raising=False)
    for k in ("LOG_LEVEL", "LOG_RETENTION"):
        monkeypatch.delenv(k, raising=False)

    # Never write logs into the project tree
    monkeypatch.setenv("KEEPLAST_LOGS_DIR", str(tmp_path / "_logs"))

    root = logging.getLogger()
    for h in list(root.handlers):
        root.removeHandler(h)

    # Force re-import of path + logger modules
    for mod in [
        "env",
        "env.env",
        "env.paths",
        "bootstrap",
        "logger",
        "logger.state",
        "logger.log_paths",
        "logger.file",
        "logger.console",
        "logger.retention",
        "cli",
        "cli.render",
        "cli.common",
        "cli.cli_logs",
        "cli.cli_env",
        "cli.cli_purge",
        "keeplast",
    ]:
        sys.modules.pop(mod, None)


def _touch(path: Path, mtime: int, *, directory: bool = False) -> Path:
    """Create ``path`` and set its modification time (seconds)."""
    if directory:
        path.mkdir(parents=True, exist_ok=True)
    else:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(path.name)
    os.utime(path, ns=(mtime * 1_000_000_000, mtime * 1_000_000_000))
    return path


@pytest.fixture
def touch():
    return _touch


@pytest.fixture
def make_tree():
    """
    Populate ``root`` with ``count`` files (or directories) named 0..count-1
    whose modification times increase with the name.
    """

    def _make(root: Path, count: int = 10, *, directories: bool = False, base: int = 1_600_000_000):
        root.mkdir(parents=True, exist_ok=True)
        paths = [
            _touch(root / str(i), base + i * 60, directory=directories)
            for i in range(count)
        ]
        return paths

    return _make
