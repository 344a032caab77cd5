from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional

from retention.errors import PurgeError

DEFAULT_KEEP = 10


class EntryKind(str, Enum):
    FILE = "file"
    DIRECTORY = "directory"


class RunMode(str, Enum):
    DRY_RUN = "dry-run"
    EXECUTE = "execute"

    @classmethod
    def from_flag(cls, dry_run: bool) -> "RunMode":
        return cls.DRY_RUN if dry_run else cls.EXECUTE


class ActionOutcome(str, Enum):
    WOULD_DELETE = "would-delete"
    DELETED = "deleted"
    FAILED = "delete-failed"


@dataclass(frozen=True)
class Entry:
    """
    Snapshot of one candidate taken at scan time.

    ``relpath`` is relative to the group root with ``/`` separators;
    the root itself has ``relpath == ""``.
    """

    path: Path
    relpath: str
    mtime_ns: int
    kind: EntryKind = EntryKind.FILE

    @property
    def is_directory(self) -> bool:
        return self.kind is EntryKind.DIRECTORY

    @property
    def is_root(self) -> bool:
        return self.relpath == ""


@dataclass(frozen=True)
class GroupSpec:
    root: Path
    includes: tuple[str, ...] = ()
    excludes: tuple[str, ...] = ()
    default_excludes: bool = True


@dataclass
class Group:
    root: Path
    entries: list[Entry] = field(default_factory=list)
    keep_count: int = DEFAULT_KEEP
    purge_directories: bool = False

    def __len__(self) -> int:
        return len(self.entries)


@dataclass(frozen=True)
class RetentionDecision:
    kept: list[Entry]
    to_remove: list[Entry]


@dataclass(frozen=True)
class EntryAction:
    entry: Entry
    outcome: ActionOutcome
    error: Optional[PurgeError] = None

    @property
    def reason(self) -> Optional[str]:
        return str(self.error) if self.error else None


@dataclass
class ExecutionReport:
    root: Path
    mode: RunMode
    keep_count: int
    effective_keep: int
    kept: list[Entry] = field(default_factory=list)
    actions: list[EntryAction] = field(default_factory=list)

    # ------------------------------------------------------------------
    # Derived views (read-only)
    # ------------------------------------------------------------------

    def _with(self, outcome: ActionOutcome) -> list[EntryAction]:
        return [a for a in self.actions if a.outcome is outcome]

    @property
    def deleted(self) -> list[EntryAction]:
        return self._with(ActionOutcome.DELETED)

    @property
    def would_delete(self) -> list[EntryAction]:
        return self._with(ActionOutcome.WOULD_DELETE)

    @property
    def failed(self) -> list[EntryAction]:
        return self._with(ActionOutcome.FAILED)

    @property
    def candidates(self) -> int:
        return len(self.kept) + len(self.actions)

    def summary(self) -> str:
        if self.mode is RunMode.DRY_RUN:
            return f"{len(self.would_delete)} would be deleted"
        return f"{len(self.deleted)} deleted, {len(self.failed)} failed"

    def as_dict(self) -> dict:
        return {
            "root": str(self.root),
            "mode": self.mode.value,
            "keep_count": self.keep_count,
            "effective_keep": self.effective_keep,
            "kept": [str(e.path) for e in self.kept],
            "actions": [
                {
                    "path": str(a.entry.path),
                    "kind": a.entry.kind.value,
                    "outcome": a.outcome.value,
                    "reason": a.reason,
                }
                for a in self.actions
            ],
        }
