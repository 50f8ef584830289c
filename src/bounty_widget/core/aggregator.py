"""Stats aggregation facade combining upstream fetches, metrics and caching."""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor, wait
from datetime import timedelta, timezone
from typing import Any, Dict, List, Optional, Tuple, TypeVar

from bounty_widget.analytics.calculator import StatsCalculator
from bounty_widget.core.cache import StatsCache
from bounty_widget.domain.exceptions import UpstreamError, UpstreamUnavailableError
from bounty_widget.domain.interfaces import (
    Clock,
    IBountyClient,
    IStatsCache,
    IStatsProvider,
)
from bounty_widget.domain.models import (
    Bounty,
    SnapshotSource,
    StatsResult,
    StatsSnapshot,
)
from bounty_widget.utils.time_windows import local_now

T = TypeVar("T")

DEFAULT_TTL = timedelta(minutes=5)


class StatsAggregator(IStatsProvider):
    """Serves the current stats snapshot, refreshing it once the TTL lapses.

    ``get_stats`` never raises. When a refresh fails the previous snapshot is
    served unchanged, or a zeroed one when nothing was ever cached. Failed
    refreshes leave the cache untouched.
    """

    def __init__(
        self,
        client: IBountyClient,
        *,
        cache: Optional[IStatsCache] = None,
        calculator: Optional[StatsCalculator] = None,
        clock: Clock = local_now,
        ttl: timedelta = DEFAULT_TTL,
        single_flight: bool = True,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        if ttl <= timedelta(0):
            raise ValueError("ttl must be greater than zero")
        self._client = client
        self._cache = cache if cache is not None else StatsCache()
        self._calculator = calculator or StatsCalculator()
        self._clock = clock
        self._ttl = ttl
        self._single_flight = single_flight
        self._refresh_lock = threading.Lock()
        self.logger = logger or logging.getLogger(
            f"{__name__}.{self.__class__.__name__}"
        )

    @property
    def ttl(self) -> timedelta:
        return self._ttl

    def get_stats(self) -> StatsSnapshot:
        return self.get_stats_result().snapshot

    def get_stats_result(self) -> StatsResult:
        cached = self._cached_result()
        if cached is not None:
            return cached

        if not self._single_flight:
            return self._refresh()

        if self._refresh_lock.acquire(blocking=False):
            try:
                return self._refresh()
            finally:
                self._refresh_lock.release()

        # Another caller is already refreshing.
        entry = self._cache.get()
        if entry is not None:
            self.logger.debug("stats_refresh_in_flight")
            return StatsResult(snapshot=entry.snapshot, source=SnapshotSource.STALE)

        with self._refresh_lock:
            cached = self._cached_result()
            if cached is not None:
                return cached
            return self._refresh()

    def close(self) -> None:
        self._client.close()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _cached_result(self) -> Optional[StatsResult]:
        if not self._cache.is_fresh(self._clock(), self._ttl):
            return None
        entry = self._cache.get()
        if entry is None:
            return None
        return StatsResult(snapshot=entry.snapshot, source=SnapshotSource.CACHED)

    def _refresh(self) -> StatsResult:
        try:
            snapshot = self._build_snapshot()
            self._cache.store(snapshot, stored_at=snapshot.last_updated)
        except UpstreamError as exc:
            self.logger.warning("stats_refresh_failed", extra={"error": str(exc)})
            return self._fallback()
        except Exception:
            self.logger.exception("stats_refresh_failed")
            return self._fallback()

        self.logger.info(
            "stats_refreshed",
            extra={
                "total_bounties": snapshot.total_bounties,
                "active_bounties": snapshot.active_bounties,
                "completed_today": snapshot.completed_today,
            },
        )
        return StatsResult(snapshot=snapshot, source=SnapshotSource.FRESH)

    def _build_snapshot(self) -> StatsSnapshot:
        bounties, overrides = self._fetch_upstream()
        local = self._calculator.summarize(bounties, self._clock())
        merged = local.with_overrides(overrides)
        finished_at = self._clock().astimezone(timezone.utc)
        return merged.model_copy(update={"last_updated": finished_at})

    def _fetch_upstream(self) -> Tuple[List[Bounty], Dict[str, Any]]:
        with ThreadPoolExecutor(
            max_workers=2, thread_name_prefix="bounty-upstream"
        ) as pool:
            bounties_future = pool.submit(self._client.fetch_bounties)
            overrides_future = pool.submit(self._client.fetch_stats_overrides)
            wait((bounties_future, overrides_future))

        bounties: List[Bounty]
        overrides: Dict[str, Any]
        bounties, bounties_error = self._settle(bounties_future, "bounties", [])
        overrides, overrides_error = self._settle(overrides_future, "stats", {})
        if bounties_error is not None and overrides_error is not None:
            raise UpstreamUnavailableError(
                "All upstream requests failed",
                context={"bounties": str(bounties_error), "stats": str(overrides_error)},
            )
        return bounties, overrides

    def _settle(
        self, future: Future[T], endpoint: str, default: T
    ) -> Tuple[T, Optional[UpstreamError]]:
        try:
            return future.result(), None
        except UpstreamError as exc:
            self.logger.warning(
                "upstream_request_failed",
                extra={"endpoint": endpoint, "error": str(exc)},
            )
            return default, exc

    def _fallback(self) -> StatsResult:
        entry = self._cache.get()
        if entry is not None:
            return StatsResult(snapshot=entry.snapshot, source=SnapshotSource.STALE)
        empty = StatsSnapshot.empty(self._clock().astimezone(timezone.utc))
        return StatsResult(snapshot=empty, source=SnapshotSource.EMPTY)
