from __future__ import annotations

from pathlib import Path

from retention import GroupSpec, RunMode, purge


def enforce_retention(log_dir: Path, keep: int) -> None:
    """Prune run logs in ``log_dir`` down to the ``keep`` most recent."""
    if keep <= 0:
        return

    purge(
        [GroupSpec(root=log_dir, includes=("*.log",))],
        keep_count=keep,
        mode=RunMode.EXECUTE,
    )
