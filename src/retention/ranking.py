from __future__ import annotations

from typing import Iterable, Optional

from retention.models import Entry


def recency_key(entry: Entry) -> int:
    """Sort key placing the most recently modified entry first."""
    return -entry.mtime_ns


def rank(entries: Iterable[Entry], pinned: Optional[Entry] = None) -> list[Entry]:
    """
    Order entries newest first.

    ``sorted`` is stable, so entries with equal timestamps keep the order
    the scanner produced them in. A ``pinned`` entry is placed ahead of
    everything else.
    """
    ranked = sorted(entries, key=recency_key)
    if pinned is not None and pinned in ranked:
        ranked.remove(pinned)
        ranked.insert(0, pinned)
    return ranked
