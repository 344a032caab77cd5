"""
Deletion of the ``to_remove`` partition.

Every entry is attempted independently: a failure is recorded against
that entry and processing moves on to the next one. Nothing here raises
for a single bad entry.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Sequence

from retention.errors import (
    MissingTargetError,
    PartialSubtreeError,
    PermissionOrIOError,
    PurgeError,
)
from retention.models import ActionOutcome, Entry, EntryAction, RunMode

log = logging.getLogger(__name__)


# ------------------------------------------------------------
# Filesystem primitives
# ------------------------------------------------------------


def remove_file(path: Path) -> None:
    try:
        os.unlink(path)
    except FileNotFoundError as e:
        raise MissingTargetError(f"File no longer exists: {path}", path) from e
    except OSError as e:
        raise PermissionOrIOError(f"{e.strerror or e} ({path})", path) from e


def remove_tree(path: Path) -> None:
    """
    Depth-first removal: children first, then the directory itself.

    A directory that is already gone counts as removed. Sibling failures
    do not stop the walk; once the directory's children have all been
    attempted, a single PartialSubtreeError carrying every failure is
    raised and the directory is left in place.
    """
    try:
        with os.scandir(path) as it:
            children = list(it)
    except FileNotFoundError:
        return
    except OSError as e:
        raise PermissionOrIOError(f"{e.strerror or e} ({path})", path) from e

    failures: list[PurgeError] = []
    for child in children:
        child_path = Path(child.path)
        try:
            if child.is_dir(follow_symlinks=False):
                remove_tree(child_path)
            else:
                remove_file(child_path)
        except PartialSubtreeError as e:
            failures.extend(e.failures)
        except PurgeError as e:
            log.debug(f"Nested failure: {e}")
            failures.append(e)

    if failures:
        raise PartialSubtreeError(path, failures)

    try:
        os.rmdir(path)
    except FileNotFoundError:
        return
    except OSError as e:
        raise PermissionOrIOError(f"{e.strerror or e} ({path})", path) from e


def remove_entry(entry: Entry) -> None:
    if entry.is_directory:
        remove_tree(entry.path)
    else:
        remove_file(entry.path)


# ------------------------------------------------------------
# Batch
# ------------------------------------------------------------


def apply(to_remove: Sequence[Entry], mode: RunMode) -> list[EntryAction]:
    actions: list[EntryAction] = []

    for entry in to_remove:
        if mode is RunMode.DRY_RUN:
            log.info(f"Would delete {entry.path}")
            actions.append(EntryAction(entry, ActionOutcome.WOULD_DELETE))
            continue

        log.info(f"Deleting {entry.path}")
        try:
            remove_entry(entry)
        except PurgeError as e:
            log.error(f"Failed to delete {entry.path}: {e}")
            actions.append(EntryAction(entry, ActionOutcome.FAILED, error=e))
            continue

        actions.append(EntryAction(entry, ActionOutcome.DELETED))

    return actions
