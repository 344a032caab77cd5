from retention.errors import (
    ConfigurationError,
    MissingTargetError,
    PartialSubtreeError,
    PermissionOrIOError,
    PurgeError,
)
from retention.models import (
    DEFAULT_KEEP,
    ActionOutcome,
    Entry,
    EntryAction,
    EntryKind,
    ExecutionReport,
    Group,
    GroupSpec,
    RetentionDecision,
    RunMode,
)
from retention.orchestrator import purge, purge_group, run
from retention.scanner import resolve_group, scan
from retention.selector import select

__all__ = [
    "ConfigurationError",
    "MissingTargetError",
    "PartialSubtreeError",
    "PermissionOrIOError",
    "PurgeError",
    "DEFAULT_KEEP",
    "ActionOutcome",
    "Entry",
    "EntryAction",
    "EntryKind",
    "ExecutionReport",
    "Group",
    "GroupSpec",
    "RetentionDecision",
    "RunMode",
    "purge",
    "purge_group",
    "run",
    "resolve_group",
    "scan",
    "select",
]
