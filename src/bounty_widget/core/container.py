"""Dependency injection container for building fully-wired widget services."""

from __future__ import annotations

from typing import Optional

import httpx
from fastapi import FastAPI

from bounty_widget.analytics.calculator import StatsCalculator
from bounty_widget.core.aggregator import StatsAggregator
from bounty_widget.core.cache import StatsCache
from bounty_widget.core.config import WidgetConfig
from bounty_widget.domain.interfaces import Clock
from bounty_widget.upstream.client import BountyApiClient, UpstreamConfig
from bounty_widget.utils.time_windows import local_now
from bounty_widget.web.app import create_app

USER_AGENT = "bounty-stats-widget/0.1"


class DIContainer:
    """Factory helpers that assemble the aggregator and web app."""

    @staticmethod
    def create_aggregator(
        config: Optional[WidgetConfig] = None,
        *,
        http_client: Optional[httpx.Client] = None,
        clock: Optional[Clock] = None,
    ) -> StatsAggregator:
        cfg = config or WidgetConfig.from_env()
        upstream_config = UpstreamConfig(
            base_url=cfg.api_base, timeout=cfg.timeout_seconds
        )
        client = BountyApiClient(
            http_client or DIContainer._build_http_client(upstream_config),
            upstream_config,
        )
        return StatsAggregator(
            client,
            cache=StatsCache(),
            calculator=StatsCalculator(),
            clock=clock or local_now,
            ttl=cfg.cache_ttl,
            single_flight=cfg.single_flight,
        )

    @staticmethod
    def create_app(
        config: Optional[WidgetConfig] = None,
        *,
        aggregator: Optional[StatsAggregator] = None,
    ) -> FastAPI:
        cfg = config or WidgetConfig.from_env()
        stats = aggregator or DIContainer.create_aggregator(cfg)
        return create_app(stats, cfg, on_shutdown=stats.close)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    @staticmethod
    def _build_http_client(config: UpstreamConfig) -> httpx.Client:
        return httpx.Client(
            timeout=config.timeout,
            headers={"Accept": "application/json", "User-Agent": USER_AGENT},
        )
