"""Pure business-logic helpers deriving widget metrics from bounty lists."""

from __future__ import annotations

from datetime import datetime
from typing import NamedTuple, Sequence

from bounty_widget.domain.models import Bounty, StatsSnapshot
from bounty_widget.utils.rounding import percentage, round_half_up
from bounty_widget.utils.time_windows import shift_days, shift_months, start_of_day


class CompletionWindows(NamedTuple):
    """Inclusive lower bounds of the reporting windows."""

    today: datetime
    week: datetime
    month: datetime


class StatsCalculator:
    """Performs read-only calculations on bounty records."""

    WEEK_DAYS = 7

    def completion_windows(self, now: datetime) -> CompletionWindows:
        today = start_of_day(now)
        return CompletionWindows(
            today=today,
            week=shift_days(today, -self.WEEK_DAYS),
            month=shift_months(today, -1),
        )

    def count_completed_since(
        self, bounties: Sequence[Bounty], cutoff: datetime
    ) -> int:
        return sum(
            1
            for bounty in bounties
            if bounty.is_completed
            and bounty.completed_at is not None
            and bounty.completed_at >= cutoff
        )

    def total_paid(self, bounties: Sequence[Bounty]) -> float:
        return sum(bounty.reward for bounty in bounties if bounty.is_completed)

    def average_completion_hours(self, bounties: Sequence[Bounty]) -> float:
        durations = [
            hours
            for hours in (
                bounty.completion_hours for bounty in bounties if bounty.is_completed
            )
            if hours is not None
        ]
        if not durations:
            return 0.0
        return round_half_up(sum(durations) / len(durations), 1)

    def success_rate(self, bounties: Sequence[Bounty]) -> int:
        completed = sum(1 for bounty in bounties if bounty.is_completed)
        claimed = sum(1 for bounty in bounties if bounty.is_claimed)
        return percentage(completed, claimed)

    def summarize(self, bounties: Sequence[Bounty], now: datetime) -> StatsSnapshot:
        """Compute every metric locally, stamping the snapshot with ``now``."""

        windows = self.completion_windows(now)
        return StatsSnapshot(
            completed_today=self.count_completed_since(bounties, windows.today),
            completed_week=self.count_completed_since(bounties, windows.week),
            completed_month=self.count_completed_since(bounties, windows.month),
            total_usdc_paid=self.total_paid(bounties),
            avg_completion_hours=self.average_completion_hours(bounties),
            success_rate=self.success_rate(bounties),
            total_bounties=len(bounties),
            active_bounties=sum(1 for bounty in bounties if bounty.is_open),
            last_updated=now,
        )
