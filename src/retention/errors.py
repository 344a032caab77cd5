from __future__ import annotations

from pathlib import Path
from typing import Optional, Sequence


class PurgeError(Exception):
    """Base error for anything the retention engine raises or records."""

    def __init__(self, message: str, path: Optional[Path] = None):
        super().__init__(message)
        self.path = path


class ConfigurationError(PurgeError):
    """A group cannot be resolved at all. Aborts the whole run."""


class MissingTargetError(PurgeError):
    """A file slated for deletion no longer exists."""


class PermissionOrIOError(PurgeError):
    """The OS refused the deletion (permissions, in-use, disk error)."""


class PartialSubtreeError(PurgeError):
    """
    Recursive deletion of a directory failed partway.

    Only the first nested failure is used for the message; all of them
    are kept on ``failures``.
    """

    def __init__(self, path: Path, failures: Sequence[PurgeError]):
        first = failures[0] if failures else None
        reason = str(first) if first else "unknown failure"
        super().__init__(
            f"{len(failures)} failure(s) under {path}, first: {reason}", path
        )
        self.failures = list(failures)
