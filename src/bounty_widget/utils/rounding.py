"""Rounding helpers matching the widget's published number formats."""

from __future__ import annotations

import math


def round_half_up(value: float, digits: int = 0) -> float:
    """Round with ties going towards positive infinity (``round`` does not)."""

    factor = 10**digits
    return math.floor(value * factor + 0.5) / factor


def percentage(part: int, whole: int) -> int:
    if whole <= 0:
        return 0
    return int(round_half_up(part / whole * 100))
