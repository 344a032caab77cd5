from __future__ import annotations

import logging
from typing import Iterable, Optional, Sequence

from retention import executor
from retention.errors import ConfigurationError
from retention.models import (
    DEFAULT_KEEP,
    Entry,
    ExecutionReport,
    Group,
    GroupSpec,
    RunMode,
)
from retention.scanner import resolve_group
from retention.selector import select

log = logging.getLogger(__name__)


# ------------------------------------------------------------
# Directory mode
# ------------------------------------------------------------


def scan_root_entry(group: Group) -> Optional[Entry]:
    """
    Return the group's own root when the scan yielded it exactly once.

    A directory scan rooted at R includes R itself. That entry must not
    use up keep budget or ever be deleted.
    """
    if not group.purge_directories:
        return None

    roots = [e for e in group.entries if e.is_root]
    if len(roots) != 1:
        if roots:
            log.warning(
                f"Scan of {group.root} yielded its root {len(roots)} times; "
                "keep count not adjusted"
            )
        return None
    return roots[0]


# ------------------------------------------------------------
# Run
# ------------------------------------------------------------


def purge_group(group: Group, mode: RunMode) -> ExecutionReport:
    if group.keep_count < 0:
        raise ConfigurationError(
            f"Keep count must be >= 0, got {group.keep_count}", group.root
        )

    log.info(f"Purging {group.root}")

    root_entry = scan_root_entry(group)
    keep = group.keep_count + 1 if root_entry is not None else group.keep_count
    decision = select(group.entries, keep, pinned=root_entry)

    report = ExecutionReport(
        root=group.root,
        mode=mode,
        keep_count=group.keep_count,
        effective_keep=keep,
        kept=decision.kept,
    )

    if not decision.to_remove:
        log.info(f"{group.root}: {len(group)} candidate(s), nothing to purge")
        return report

    if mode is RunMode.DRY_RUN:
        for entry in decision.kept:
            log.info(f"Would keep {entry.path}")

    report.actions = executor.apply(decision.to_remove, mode)
    log.info(f"{group.root}: {report.summary()}")
    return report


def run(groups: Iterable[Group], mode: RunMode) -> list[ExecutionReport]:
    """
    Purge each group independently, in the order given.

    Per-entry failures end up in the reports; only a ConfigurationError
    stops the run.
    """
    return [purge_group(group, mode) for group in groups]


def purge(
    specs: Sequence[GroupSpec],
    *,
    keep_count: int = DEFAULT_KEEP,
    mode: RunMode = RunMode.EXECUTE,
    purge_directories: bool = False,
) -> list[ExecutionReport]:
    """
    Resolve every spec, then run.

    All roots are resolved before anything is deleted, so a bad root
    aborts the run with the filesystem untouched.
    """
    if keep_count < 0:
        raise ConfigurationError(f"Keep count must be >= 0, got {keep_count}")

    groups = [
        resolve_group(
            spec, keep_count=keep_count, purge_directories=purge_directories
        )
        for spec in specs
    ]
    return run(groups, mode)
