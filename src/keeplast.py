#!/usr/bin/env python3
from __future__ import annotations

import argparse
import sys

from bootstrap import bootstrap_base_env, bootstrap_run_context


def _dispatch_help(argv: list[str]) -> int:
    # Support:
    #   keeplast help
    #   keeplast help purge
    #   keeplast purge help
    argv = [a for a in argv if a != "help"]
    try:
        build_parser().parse_args(argv + ["--help"])
    except SystemExit:
        pass
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="keeplast",
        description="Delete all but the most recently modified entries of each group.",
    )

    sub = p.add_subparsers(dest="command", required=True)

    help_cmd = sub.add_parser("help", help="Show help")
    help_cmd.add_argument("path", nargs="*", help="Command path to show help for")
    help_cmd.set_defaults(_help=True)

    # Keep imports inside builder to avoid early side effects.
    from cli.cli_purge import build_purge_parser
    from cli.cli_logs import build_logs_parser
    from cli.cli_env import build_env_parser

    build_purge_parser(sub)
    build_logs_parser(sub)
    build_env_parser(sub)

    return p


def main(argv: list[str] | None = None) -> int:
    argv = list(sys.argv[1:] if argv is None else argv)

    # Load .env and base environment early
    bootstrap_base_env(required=False)

    if not argv or argv[0] == "help" or argv[-1] == "help":
        return _dispatch_help(argv)

    parser = build_parser()
    args = parser.parse_args(argv)

    # Stamp run context early (so child processes inherit it)
    bootstrap_run_context(
        command=args.command,
        verbose=bool(getattr(args, "verbose", False)) or None,
        quiet=bool(getattr(args, "quiet", False)) or None,
    )

    # Initialize logging AFTER run-context env stamping
    from logger import init_logging, get_logger

    init_logging()

    log = get_logger("keeplast")
    log.debug(f"Command: {args.command}")

    # Dispatch
    if args.command == "purge":
        from cli.cli_purge import handle_purge

        return handle_purge(args)

    if args.command == "logs":
        from cli.cli_logs import handle_logs

        return handle_logs(args)

    if args.command == "env":
        from cli.cli_env import handle_env

        return handle_env(args)

    raise RuntimeError(f"Unknown command: {args.command}")


if __name__ == "__main__":
    raise SystemExit(main())
