"""In-memory holder for the most recent stats snapshot."""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Optional

from bounty_widget.domain.interfaces import CacheEntry, IStatsCache
from bounty_widget.domain.models import StatsSnapshot


class StatsCache(IStatsCache):
    """Single-slot cache. The entry is swapped by one reference assignment."""

    def __init__(self) -> None:
        self._entry: Optional[CacheEntry] = None

    def get(self) -> Optional[CacheEntry]:
        return self._entry

    def store(self, snapshot: StatsSnapshot, stored_at: datetime) -> None:
        self._entry = CacheEntry(snapshot=snapshot, stored_at=stored_at)

    def is_fresh(self, now: datetime, ttl: timedelta) -> bool:
        entry = self._entry
        if entry is None:
            return False
        age = now - entry.stored_at
        return timedelta(0) <= age < ttl
