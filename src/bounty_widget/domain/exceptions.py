"""Exception hierarchy for upstream and configuration failures."""

from __future__ import annotations

from typing import Any, Mapping


class BountyWidgetError(Exception):
    """Base class for all domain-level errors in the widget service."""

    default_message = "Bounty widget error occurred"

    def __init__(
        self, message: str | None = None, *, context: Mapping[str, Any] | None = None
    ):
        self.message = message or self.default_message
        self.context: Mapping[str, Any] = dict(context or {})
        formatted = self._format_message()
        super().__init__(formatted)

    def _format_message(self) -> str:
        if self.context:
            return f"{self.message} | context={self.context}"
        return self.message


class UpstreamError(BountyWidgetError):
    """Generic failure talking to the bounty board API."""

    default_message = "Upstream error"


class UpstreamUnavailableError(UpstreamError):
    """Upstream service is down or unreachable."""

    default_message = "Upstream is unavailable"


class UpstreamTimeoutError(UpstreamUnavailableError):
    """Upstream did not answer within the configured deadline."""

    default_message = "Upstream request timed out"


class UpstreamStatusError(UpstreamError):
    """Upstream answered with a non-success HTTP status."""

    default_message = "Upstream returned a non-success status"


class MalformedPayloadError(UpstreamError):
    """Upstream body is not JSON or does not have the expected shape."""

    default_message = "Malformed upstream payload"


class ConfigurationError(BountyWidgetError, ValueError):
    """Raised when configuration values are missing or invalid."""

    default_message = "Invalid configuration"
