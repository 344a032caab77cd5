from __future__ import annotations

import argparse

from rich.table import Table

from cli.common import (
    dispatch_subparser_help,
    find_log_file,
    format_mtime,
    list_run_logs,
    resolve_log_dir,
    tail_lines,
)
from cli.render import RENDER


def build_logs_parser(subparsers: argparse._SubParsersAction) -> None:
    logs = subparsers.add_parser("logs", help="Inspect run logs")
    lsub = logs.add_subparsers(dest="logs_cmd", required=True)

    help_p = lsub.add_parser("help", help="Show help for logs")
    help_p.add_argument("path", nargs="*", help="Subcommand path (e.g. list, show)")
    help_p.set_defaults(action="help", _help_parser=logs)

    list_p = lsub.add_parser("list", help="List run logs, newest first")
    list_p.add_argument(
        "--command", default="purge", help="Command whose logs to list (default: purge)"
    )
    list_p.add_argument("--dir", help="Explicit log directory")
    list_p.set_defaults(action="list")

    show_p = lsub.add_parser("show", help="Show a log file (tail)")
    show_p.add_argument("name", help="Log filename or stem")
    show_p.add_argument("--command", default="purge", help="Command the log belongs to")
    show_p.add_argument("--dir", help="Explicit log directory")
    show_p.add_argument("--tail", type=int, default=120, help="Lines from end")
    show_p.set_defaults(action="show")


def handle_logs(args: argparse.Namespace) -> int:
    if args.action == "help":
        return dispatch_subparser_help(
            args._help_parser, list(getattr(args, "path", []) or [])
        )

    log_dir = resolve_log_dir(command=args.command, explicit=args.dir)

    if args.action == "list":
        runs = list_run_logs(log_dir)
        if not runs:
            RENDER.print(f"No logs found in {log_dir}")
            return 0

        table = Table()
        table.add_column("run", overflow="fold")
        table.add_column("status", no_wrap=True)
        table.add_column("modified", no_wrap=True)
        table.add_column("size", justify="right")
        for r in runs:
            table.add_row(r.run_id, r.status, format_mtime(r.mtime), f"{r.size} bytes")
        RENDER.print(table)
        return 0

    if args.action == "show":
        path = find_log_file(log_dir, args.name)
        if not path:
            RENDER.print(f"Log not found: {args.name}")
            return 1
        for line in tail_lines(path, int(args.tail)):
            RENDER.print(line, markup=False, highlight=False)
        return 0

    raise SystemExit(f"Unknown logs action: {args.action}")
