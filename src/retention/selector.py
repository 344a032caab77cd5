from __future__ import annotations

from typing import Optional, Sequence

from retention.models import Entry, RetentionDecision
from retention.ranking import rank


def select(
    entries: Sequence[Entry],
    keep_count: int,
    pinned: Optional[Entry] = None,
) -> RetentionDecision:
    """
    Partition ``entries`` into the ``keep_count`` newest and the rest.

    Pure: nothing here touches the filesystem.
    """
    if keep_count < 0:
        raise ValueError(f"keep_count must be >= 0, got {keep_count}")

    ranked = rank(entries, pinned=pinned)

    if len(ranked) <= keep_count:
        return RetentionDecision(kept=ranked, to_remove=[])

    return RetentionDecision(kept=ranked[:keep_count], to_remove=ranked[keep_count:])
