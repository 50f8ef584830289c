"""Calendar helpers for computing reporting window boundaries.

Boundaries are computed on the wall clock. When a moment carries the host's
local offset (what ``local_now`` returns), the result is re-resolved against
the host's timezone rules so a window crossing a DST change starts at the real
local midnight instead of inheriting the current offset.
"""

from __future__ import annotations

import calendar
from datetime import datetime, timedelta, timezone


def local_now() -> datetime:
    """Current wall-clock time as an aware datetime in the local timezone."""

    return datetime.now().astimezone()


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _is_host_local(moment: datetime) -> bool:
    if not isinstance(moment.tzinfo, timezone):
        return False
    return moment.utcoffset() == moment.astimezone().utcoffset()


def _rezone(wall: datetime, like: datetime) -> datetime:
    """Attach ``like``'s zone to the naive-equivalent wall time ``wall``."""

    if _is_host_local(like):
        return wall.replace(tzinfo=None).astimezone()
    return wall


def start_of_day(moment: datetime) -> datetime:
    """Local midnight of ``moment``'s calendar day."""

    return _rezone(moment.replace(hour=0, minute=0, second=0, microsecond=0), moment)


def shift_days(moment: datetime, days: int) -> datetime:
    """Move ``moment`` by whole calendar days, keeping its wall-clock time."""

    return _rezone(moment + timedelta(days=days), moment)


def shift_months(moment: datetime, months: int) -> datetime:
    """Move ``moment`` by whole calendar months.

    The day is clamped to the length of the target month, so March 31 shifted
    back one month lands on the last day of February.
    """

    month_index = moment.month - 1 + months
    year = moment.year + month_index // 12
    month = month_index % 12 + 1
    last_day = calendar.monthrange(year, month)[1]
    shifted = moment.replace(year=year, month=month, day=min(moment.day, last_day))
    return _rezone(shifted, moment)
