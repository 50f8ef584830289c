"""Domain-level interfaces defining contracts for aggregation collaborators."""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Any, Callable, Dict, List, Optional, Protocol

from pydantic import BaseModel, ConfigDict

from .models import Bounty, StatsResult, StatsSnapshot

Clock = Callable[[], datetime]


class CacheEntry(BaseModel):
    """A cached snapshot together with the time it was produced."""

    model_config = ConfigDict(frozen=True)

    snapshot: StatsSnapshot
    stored_at: datetime


class IBountyClient(Protocol):
    """Contract for the upstream bounty board adapter."""

    def fetch_bounties(self) -> List[Bounty]:
        """Return the parsed bounty list or raise an ``UpstreamError``."""

    def fetch_stats_overrides(self) -> Dict[str, Any]:
        """Return the pre-aggregated stats object or raise an ``UpstreamError``."""

    def close(self) -> None:
        """Release the underlying HTTP resources."""


class IStatsCache(Protocol):
    """Holds at most one snapshot, replaced wholesale."""

    def get(self) -> Optional[CacheEntry]:
        """Return the current entry, if any."""

    def store(self, snapshot: StatsSnapshot, stored_at: datetime) -> None:
        """Replace the current entry."""

    def is_fresh(self, now: datetime, ttl: timedelta) -> bool:
        """Return True when an entry exists and is younger than ``ttl``."""


class IStatsProvider(Protocol):
    """Read side consumed by the presentation layer."""

    def get_stats(self) -> StatsSnapshot:
        """Always return a usable snapshot."""

    def get_stats_result(self) -> StatsResult:
        """Return the snapshot tagged with where it came from."""
