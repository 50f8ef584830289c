"""Bounty board stats widget following Clean Architecture layering."""

from .core.aggregator import StatsAggregator
from .core.container import DIContainer

__all__ = [
    "StatsAggregator",
    "DIContainer",
    "domain",
    "analytics",
    "core",
    "upstream",
    "utils",
    "web",
]
