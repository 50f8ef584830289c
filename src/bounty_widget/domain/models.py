"""Domain value objects for bounty records and derived statistics."""

from __future__ import annotations

import logging
import math
from datetime import datetime
from enum import Enum
from typing import Any, Mapping, Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
    ValidationError,
    field_validator,
)
from pydantic.alias_generators import to_camel

from bounty_widget.utils.rounding import round_half_up

logger = logging.getLogger(__name__)

_DATETIME = TypeAdapter(datetime)
_OVERRIDE_ADAPTERS = {
    int: TypeAdapter(int),
    float: TypeAdapter(float, config=ConfigDict(allow_inf_nan=False)),
}


class BountyStatus(str, Enum):
    """Status tags the statistics treat specially. Others pass through."""

    OPEN = "open"
    CLAIMED = "claimed"
    COMPLETED = "completed"
    DONE = "done"


COMPLETED_STATUSES = frozenset({BountyStatus.COMPLETED.value, BountyStatus.DONE.value})
CLAIMED_STATUSES = COMPLETED_STATUSES | {BountyStatus.CLAIMED.value}


class Theme(str, Enum):
    """Color schemes available for the rendered widget."""

    DARK = "dark"
    LIGHT = "light"

    @classmethod
    def parse(cls, value: Optional[str], default: Optional["Theme"] = None) -> "Theme":
        fallback = default or cls.DARK
        if not value:
            return fallback
        try:
            return cls(value.strip().lower())
        except ValueError:
            return fallback


class Bounty(BaseModel):
    """Bounty record as published by the board API.

    Parsing is deliberately lenient so every record still counts toward the
    totals: unknown fields are ignored, non-text titles and statuses are
    stringified, timestamps that do not parse become ``None`` and naive
    timestamps are read as local time.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: Union[int, float, str, None] = None
    title: str = ""
    reward: float = 0.0
    status: str = ""
    created_at: Optional[datetime] = None
    claimed_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None

    @field_validator("id", mode="before")
    @classmethod
    def validate_id(cls, value: Any) -> Any:
        if value is None or isinstance(value, (int, float, str)):
            return value
        return str(value)

    @field_validator("title", "status", mode="before")
    @classmethod
    def validate_text(cls, value: Any) -> str:
        if value is None:
            return ""
        return value if isinstance(value, str) else str(value)

    @field_validator("reward", mode="before")
    @classmethod
    def validate_reward(cls, value: Any) -> float:
        if value is None or isinstance(value, bool):
            return 0.0
        try:
            return float(value)
        except (TypeError, ValueError):
            return 0.0

    @field_validator("created_at", "claimed_at", "completed_at", mode="before")
    @classmethod
    def validate_timestamp(cls, value: Any) -> Optional[datetime]:
        if value is None or value == "":
            return None
        try:
            parsed = _DATETIME.validate_python(value)
        except ValidationError:
            return None
        if parsed.tzinfo is None:
            parsed = parsed.astimezone()
        return parsed

    @property
    def is_completed(self) -> bool:
        return self.status in COMPLETED_STATUSES

    @property
    def is_claimed(self) -> bool:
        """True for bounties that were claimed at some point, finished or not."""

        return self.status in CLAIMED_STATUSES

    @property
    def is_open(self) -> bool:
        return self.status == BountyStatus.OPEN.value

    @property
    def completion_hours(self) -> Optional[float]:
        """Hours between claim and completion, when both are known."""

        if self.claimed_at is None or self.completed_at is None:
            return None
        delta = self.completed_at - self.claimed_at
        return delta.total_seconds() / 3600


def _coerce_override(annotation: Any, value: Any) -> Any:
    if annotation is int and isinstance(value, float) and math.isfinite(value):
        value = round_half_up(value)
    return _OVERRIDE_ADAPTERS[annotation].validate_python(value)


class StatsSnapshot(BaseModel):
    """Immutable aggregate statistics served to widget consumers.

    Attributes use snake_case while the wire representation keeps the
    camelCase names the widget scripts read (``completedToday``,
    ``totalUSDCPaid``...).
    """

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    completed_today: int = 0
    completed_week: int = 0
    completed_month: int = 0
    total_usdc_paid: float = Field(default=0.0, alias="totalUSDCPaid")
    avg_completion_hours: float = 0.0
    success_rate: int = 0
    total_bounties: int = 0
    active_bounties: int = 0
    last_updated: datetime

    @classmethod
    def empty(cls, last_updated: datetime) -> "StatsSnapshot":
        """Zeroed placeholder used when no real data has ever been fetched."""

        return cls(last_updated=last_updated)

    def with_overrides(self, overrides: Mapping[str, Any]) -> "StatsSnapshot":
        """Return a copy where every non-null upstream value replaces ours.

        Keys are matched on the wire names and each field is merged on its
        own. ``lastUpdated`` is always kept. Fractional values for integer
        fields are rounded half up; a value that cannot be used at all is
        logged and the local value for that field is kept.
        """

        updates: dict[str, Any] = {}
        for name, field in type(self).model_fields.items():
            if name == "last_updated":
                continue
            alias = field.alias or name
            value = overrides.get(alias)
            if value is None:
                continue
            try:
                updates[name] = _coerce_override(field.annotation, value)
            except ValidationError as exc:
                logger.warning(
                    "stats_override_rejected",
                    extra={"field": alias, "errors": exc.error_count()},
                )
        return self.model_copy(update=updates)

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class SnapshotSource(str, Enum):
    """Where a returned snapshot came from."""

    FRESH = "fresh"
    CACHED = "cached"
    STALE = "stale"
    EMPTY = "empty"


class StatsResult(BaseModel):
    """Snapshot tagged with its provenance for observability."""

    model_config = ConfigDict(frozen=True)

    snapshot: StatsSnapshot
    source: SnapshotSource

    @property
    def is_degraded(self) -> bool:
        return self.source in {SnapshotSource.STALE, SnapshotSource.EMPTY}
