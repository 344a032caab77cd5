from __future__ import annotations

import argparse
import json
from pathlib import Path
from typing import Sequence

from rich.markup import escape
from rich.table import Table

from cli.common import non_negative_int
from cli.render import RENDER
from env import ConfigError, get_env
from logger import get_logger
from retention import (
    ConfigurationError,
    ExecutionReport,
    GroupSpec,
    RunMode,
    purge,
)

log = get_logger(__name__)


# ------------------------------------------------------------
# Parser
# ------------------------------------------------------------


def build_purge_parser(subparsers: argparse._SubParsersAction) -> None:
    p = subparsers.add_parser(
        "purge",
        help="Delete all but the newest entries under each root",
        description=(
            "Each ROOT is purged independently: its candidates are ranked by "
            "modification time and all but the newest --keep are deleted."
        ),
    )
    p.add_argument("roots", nargs="+", metavar="ROOT", help="Directory to purge")
    p.add_argument(
        "-k",
        "--keep",
        type=non_negative_int,
        default=None,
        help="Entries to keep per root (default: KEEPLAST_KEEP or 10)",
    )
    p.add_argument(
        "-n",
        "--dry-run",
        "--test",
        dest="dry_run",
        action="store_true",
        default=None,
        help="Report what would be deleted without deleting anything",
    )
    p.add_argument(
        "--dirs",
        dest="purge_directories",
        action="store_true",
        default=None,
        help="Purge directories (recursively) instead of files",
    )
    p.add_argument(
        "--include",
        action="append",
        default=None,
        metavar="PATTERN",
        help="Ant-style include pattern, repeatable (default: **)",
    )
    p.add_argument(
        "--exclude",
        action="append",
        default=None,
        metavar="PATTERN",
        help="Ant-style exclude pattern, repeatable",
    )
    p.add_argument(
        "--no-default-excludes",
        dest="default_excludes",
        action="store_false",
        default=None,
        help="Do not skip VCS and editor files (.git, *~, ...)",
    )
    p.add_argument("--json", action="store_true", help="Print reports as JSON")
    p.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    p.add_argument("-q", "--quiet", action="store_true", help="Errors only on console")


# ------------------------------------------------------------
# Output
# ------------------------------------------------------------


def render_reports(reports: Sequence[ExecutionReport]) -> None:
    dry_run = any(r.mode is RunMode.DRY_RUN for r in reports)

    table = Table(title="Dry run (nothing deleted)" if dry_run else "Purge summary")
    table.add_column("root")
    table.add_column("candidates", justify="right")
    table.add_column("keep", justify="right")
    table.add_column("kept", justify="right")
    table.add_column("would delete" if dry_run else "deleted", justify="right")
    table.add_column("failed", justify="right")

    for r in reports:
        removed = r.would_delete if r.mode is RunMode.DRY_RUN else r.deleted
        table.add_row(
            escape(str(r.root)),
            str(r.candidates),
            str(r.effective_keep),
            str(len(r.kept)),
            str(len(removed)),
            str(len(r.failed)),
        )
    RENDER.print(table)

    for r in reports:
        for action in r.failed:
            RENDER.print(
                f"[red]failed[/red] {escape(str(action.entry.path))}: "
                f"{escape(action.reason or '')}"
            )


# ------------------------------------------------------------
# Handler
# ------------------------------------------------------------


def handle_purge(args: argparse.Namespace) -> int:
    try:
        env = get_env()
    except ConfigError as e:
        log.error(str(e))
        log.info("RUN_STATUS=failed")
        return 1

    keep = args.keep if args.keep is not None else env.keep_count
    dry_run = args.dry_run if args.dry_run is not None else env.dry_run
    purge_directories = (
        args.purge_directories
        if args.purge_directories is not None
        else env.purge_directories
    )
    includes = tuple(args.include) if args.include else env.includes
    excludes = tuple(args.exclude) if args.exclude else env.excludes
    default_excludes = (
        args.default_excludes
        if args.default_excludes is not None
        else env.default_excludes
    )

    specs = [
        GroupSpec(
            root=Path(root),
            includes=includes,
            excludes=excludes,
            default_excludes=default_excludes,
        )
        for root in args.roots
    ]
    mode = RunMode.from_flag(dry_run)

    log.info(
        f"Purge: {len(specs)} group(s), keep={keep}, mode={mode.value}, "
        f"{'directories' if purge_directories else 'files'}"
    )

    try:
        reports = purge(
            specs,
            keep_count=keep,
            mode=mode,
            purge_directories=purge_directories,
        )
    except ConfigurationError as e:
        log.error(f"Purge aborted: {e}")
        log.info("RUN_STATUS=failed")
        return 1

    if args.json:
        print(json.dumps([r.as_dict() for r in reports], indent=2))
    else:
        render_reports(reports)

    failed = sum(len(r.failed) for r in reports)
    if failed:
        log.warning(f"{failed} entr{'y' if failed == 1 else 'ies'} could not be deleted")

    log.info("RUN_STATUS=completed")
    return 0
