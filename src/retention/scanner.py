"""
Resolve a GroupSpec into a concrete, ordered candidate list.

Pattern semantics follow Ant's DirectoryScanner:

- ``*`` and ``?`` match within a single path segment
- ``**`` matches zero or more whole segments
- a trailing ``/`` means ``/**``

Traversal is top-down with names sorted, so identical trees always
produce identical candidate order.
"""

from __future__ import annotations

import fnmatch
import logging
import os
import stat
from pathlib import Path
from typing import Iterable, Sequence

from retention.errors import ConfigurationError
from retention.models import DEFAULT_KEEP, Entry, EntryKind, Group, GroupSpec

log = logging.getLogger(__name__)

DEFAULT_EXCLUDES: tuple[str, ...] = (
    "**/*~",
    "**/#*#",
    "**/.#*",
    "**/%*%",
    "**/._*",
    "**/CVS/**",
    "**/.cvsignore",
    "**/.svn/**",
    "**/.git/**",
    "**/.gitattributes",
    "**/.gitignore",
    "**/.gitmodules",
    "**/.hg/**",
    "**/.hgignore",
    "**/.hgtags",
    "**/.bzr/**",
    "**/.bzrignore",
    "**/.DS_Store",
)


# ------------------------------------------------------------
# Pattern matching
# ------------------------------------------------------------


def split_pattern(pattern: str) -> tuple[str, ...]:
    p = pattern.replace("\\", "/").strip()
    if p.endswith("/"):
        p += "**"
    return tuple(seg for seg in p.split("/") if seg and seg != ".")


def _match_segments(pattern: Sequence[str], path: Sequence[str]) -> bool:
    if not pattern:
        return not path

    head = pattern[0]
    if head == "**":
        return any(
            _match_segments(pattern[1:], path[i:]) for i in range(len(path) + 1)
        )

    if not path:
        return False
    return fnmatch.fnmatchcase(path[0], head) and _match_segments(
        pattern[1:], path[1:]
    )


def match_path(pattern: str, relpath: str) -> bool:
    segments = tuple(seg for seg in relpath.split("/") if seg)
    return _match_segments(split_pattern(pattern), segments)


def _any_match(patterns: Iterable[str], relpath: str) -> bool:
    return any(match_path(p, relpath) for p in patterns)


def is_selected(spec: GroupSpec, relpath: str) -> bool:
    includes = spec.includes or ("**",)
    if not _any_match(includes, relpath):
        return False

    excludes = tuple(spec.excludes)
    if spec.default_excludes:
        excludes += DEFAULT_EXCLUDES
    return not _any_match(excludes, relpath)


# ------------------------------------------------------------
# Traversal
# ------------------------------------------------------------


def _snapshot(path: Path, relpath: str) -> Entry | None:
    try:
        st = os.lstat(path)
    except FileNotFoundError:
        # Vanished between listing and stat
        return None

    kind = EntryKind.DIRECTORY if stat.S_ISDIR(st.st_mode) else EntryKind.FILE
    return Entry(path=path, relpath=relpath, mtime_ns=st.st_mtime_ns, kind=kind)


def _check_root(root: Path) -> Path:
    if not root.exists():
        raise ConfigurationError(f"Group root does not exist: {root}", root)
    if not root.is_dir():
        raise ConfigurationError(f"Group root is not a directory: {root}", root)
    return root.resolve()


def scan(spec: GroupSpec, *, directories: bool = False) -> list[Entry]:
    """
    Return the candidates under ``spec.root``.

    File mode yields files and symlinks. Directory mode yields the
    outermost selected directories, starting with the root itself when
    it is selected (the root does not stop the walk).
    Raises ConfigurationError when the root is unusable.
    """
    root = _check_root(Path(spec.root).expanduser())
    entries: list[Entry] = []

    if directories and is_selected(spec, ""):
        entry = _snapshot(root, "")
        if entry is not None:
            entries.append(entry)

    def walk_error(err: OSError) -> None:
        if Path(err.filename or "") == root:
            raise ConfigurationError(f"Group root is not readable: {root}", root) from err
        log.warning(f"Skipping unreadable directory: {err.filename}")

    for dirpath, dirnames, filenames in os.walk(root, onerror=walk_error):
        dirnames.sort()
        base = Path(dirpath)
        rel_base = base.relative_to(root).as_posix()
        rel_base = "" if rel_base == "." else rel_base + "/"

        if directories:
            names = [n for n in dirnames if not (base / n).is_symlink()]
        else:
            links = [n for n in dirnames if (base / n).is_symlink()]
            names = sorted(filenames + links)

        selected: set[str] = set()
        for name in names:
            relpath = rel_base + name
            if not is_selected(spec, relpath):
                continue
            selected.add(name)
            entry = _snapshot(base / name, relpath)
            if entry is not None:
                entries.append(entry)

        if directories:
            # Only the outermost selected directories compete; anything
            # below one goes with it.
            dirnames[:] = [n for n in dirnames if n not in selected]

    return entries


def resolve_group(
    spec: GroupSpec,
    *,
    keep_count: int = DEFAULT_KEEP,
    purge_directories: bool = False,
) -> Group:
    entries = scan(spec, directories=purge_directories)
    root = Path(spec.root).expanduser().resolve()
    return Group(
        root=root,
        entries=entries,
        keep_count=keep_count,
        purge_directories=purge_directories,
    )
