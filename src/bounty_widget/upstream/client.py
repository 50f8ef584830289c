"""Bounty board API adapter built on ``httpx``."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import httpx

from bounty_widget.domain.exceptions import (
    MalformedPayloadError,
    UpstreamStatusError,
    UpstreamTimeoutError,
    UpstreamUnavailableError,
)
from bounty_widget.domain.models import Bounty

from .parsing import parse_bounty_list, parse_stats_overrides

BOUNTIES_PATH = "/bounties"
STATS_PATH = "/stats"


@dataclass(frozen=True)
class UpstreamConfig:
    """Connection settings for the bounty board API."""

    base_url: str
    timeout: float = 10.0

    def __post_init__(self) -> None:
        if not self.base_url:
            raise ValueError("base_url must be provided")
        if self.timeout <= 0:
            raise ValueError("timeout must be greater than zero")


class BountyApiClient:
    """Fetches raw bounties and pre-aggregated stats from the board API."""

    def __init__(
        self,
        http_client: httpx.Client,
        config: UpstreamConfig,
        *,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.config = config
        self._http = http_client
        self._base_url = config.base_url.rstrip("/")
        self.logger = logger or logging.getLogger(
            f"{__name__}.{self.__class__.__name__}"
        )

    def fetch_bounties(self) -> List[Bounty]:
        data = self._get_json(BOUNTIES_PATH)
        bounties = parse_bounty_list(data)
        self.logger.debug("bounties_fetched", extra={"count": len(bounties)})
        return bounties

    def fetch_stats_overrides(self) -> Dict[str, Any]:
        data = self._get_json(STATS_PATH)
        return parse_stats_overrides(data)

    def close(self) -> None:
        self._http.close()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _get_json(self, path: str) -> Any:
        url = f"{self._base_url}{path}"
        self.logger.debug("upstream_request", extra={"url": url})
        try:
            http_response = self._http.get(url, timeout=self.config.timeout)
        except httpx.TimeoutException as exc:
            raise UpstreamTimeoutError(
                context={"url": url, "timeout": self.config.timeout}
            ) from exc
        except httpx.HTTPError as exc:
            raise UpstreamUnavailableError(
                context={"url": url, "error": str(exc)}
            ) from exc

        if not http_response.is_success:
            raise UpstreamStatusError(
                context={"url": url, "status_code": http_response.status_code}
            )

        try:
            return http_response.json()
        except ValueError as exc:
            raise MalformedPayloadError(
                "Upstream body is not valid JSON", context={"url": url}
            ) from exc
