from __future__ import annotations

import argparse
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from env import LOGS_DIR


# ----------------------------
# Help dispatch (subparser-local)
# ----------------------------


def dispatch_subparser_help(
    parser: argparse.ArgumentParser, path: list[str] | None
) -> int:
    """
    Implements consistent `X help [subcmd ...]` behavior for a subtree parser.
    """
    if not path:
        parser.print_help()
        return 0

    try:
        parser.parse_args(path + ["--help"])
    except SystemExit:
        pass
    return 0


def non_negative_int(value: str) -> int:
    try:
        n = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not an integer: {value!r}")
    if n < 0:
        raise argparse.ArgumentTypeError(f"must be >= 0, got {n}")
    return n


# ----------------------------
# Run log helpers
# ----------------------------


def resolve_log_dir(*, command: str, explicit: str | None) -> Path:
    if explicit:
        return Path(explicit).expanduser().resolve()
    return (LOGS_DIR / command).resolve()


def read_text(path: Path) -> str:
    return path.read_text(encoding="utf-8", errors="replace")


def find_log_file(log_dir: Path, name: str) -> Path | None:
    if not log_dir.exists():
        return None

    for p in (log_dir / name, log_dir / f"{name}.log"):
        if p.is_file():
            return p

    for p in log_dir.glob("*.log"):
        if p.stem == name:
            return p

    return None


def tail_lines(path: Path, lines: int) -> list[str]:
    data = read_text(path).splitlines()
    return data[-lines:] if lines > 0 else data


def infer_run_status(path: Path) -> str:
    """
    Last RUN_STATUS=<value> line wins: completed | failed.
    A log without one belongs to a run that is still going or crashed.
    """
    try:
        text = read_text(path)
    except OSError:
        return "unknown"

    status = "unknown"
    for line in text.splitlines():
        _, sep, value = line.rpartition("RUN_STATUS=")
        if sep:
            status = value.strip() or status
    return status


@dataclass(frozen=True)
class RunLog:
    run_id: str
    path: Path
    mtime: float
    size: int
    status: str


def list_run_logs(log_dir: Path) -> list[RunLog]:
    if not log_dir.exists():
        return []

    items: list[RunLog] = []
    for p in log_dir.glob("*.log"):
        try:
            st = p.stat()
        except OSError:
            continue
        items.append(
            RunLog(
                run_id=p.stem,
                path=p,
                mtime=st.st_mtime,
                size=st.st_size,
                status=infer_run_status(p),
            )
        )

    items.sort(key=lambda r: r.mtime, reverse=True)
    return items


def format_mtime(ts: float) -> str:
    return datetime.fromtimestamp(ts).strftime("%Y-%m-%d %H:%M:%S")
