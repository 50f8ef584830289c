from datetime import datetime, timedelta, timezone

import pytest

from bounty_widget.analytics.calculator import CompletionWindows, StatsCalculator
from bounty_widget.domain.models import Bounty

NOW = datetime(2024, 3, 31, 15, 30, tzinfo=timezone.utc)


def _bounty(
    status: str,
    *,
    reward: float = 0,
    claimed_at: datetime | None = None,
    completed_at: datetime | None = None,
) -> Bounty:
    return Bounty(
        id=1,
        title="task",
        reward=reward,
        status=status,
        claimed_at=claimed_at,
        completed_at=completed_at,
    )


def test_completion_windows_use_local_midnight_and_calendar_month():
    windows = StatsCalculator().completion_windows(NOW)

    assert windows == CompletionWindows(
        today=datetime(2024, 3, 31, tzinfo=timezone.utc),
        week=datetime(2024, 3, 24, tzinfo=timezone.utc),
        month=datetime(2024, 2, 29, tzinfo=timezone.utc),
    )


def test_window_boundaries_are_inclusive():
    calc = StatsCalculator()
    windows = calc.completion_windows(NOW)
    bounties = [
        _bounty("completed", completed_at=windows.today),
        _bounty("completed", completed_at=windows.week),
        _bounty("done", completed_at=windows.month),
        _bounty("done", completed_at=windows.month - timedelta(seconds=1)),
    ]

    assert calc.count_completed_since(bounties, windows.today) == 1
    assert calc.count_completed_since(bounties, windows.week) == 2
    assert calc.count_completed_since(bounties, windows.month) == 3


def test_window_counts_only_consider_completed_statuses():
    calc = StatsCalculator()
    recent = NOW - timedelta(hours=1)
    bounties = [
        _bounty("claimed", completed_at=recent),
        _bounty("open", completed_at=recent),
        _bounty("completed", completed_at=None),
        _bounty("completed", completed_at=recent),
    ]

    assert calc.count_completed_since(bounties, calc.completion_windows(NOW).today) == 1


def test_total_paid_sums_completed_and_done_rewards_only():
    calc = StatsCalculator()
    bounties = [
        _bounty("completed", reward=100),
        _bounty("done", reward=25.5),
        _bounty("claimed", reward=1000),
        _bounty("open", reward=50),
    ]

    assert calc.total_paid(bounties) == pytest.approx(125.5)


def test_average_completion_hours_skips_bounties_without_both_timestamps():
    calc = StatsCalculator()
    start = datetime(2024, 1, 1, tzinfo=timezone.utc)
    bounties = [
        _bounty("completed", claimed_at=start, completed_at=start + timedelta(hours=2)),
        _bounty("done", claimed_at=start, completed_at=start + timedelta(hours=5)),
        _bounty("completed", completed_at=start + timedelta(hours=100)),
        _bounty("claimed", claimed_at=start, completed_at=start + timedelta(hours=50)),
    ]

    assert calc.average_completion_hours(bounties) == 3.5


def test_average_completion_hours_rounds_to_one_decimal_half_up():
    calc = StatsCalculator()
    start = datetime(2024, 1, 1, tzinfo=timezone.utc)
    bounties = [
        _bounty("completed", claimed_at=start, completed_at=start + timedelta(minutes=75)),
    ]

    # 1.25h rounds up, not to even
    assert calc.average_completion_hours(bounties) == 1.3


def test_average_completion_hours_defaults_to_zero():
    assert StatsCalculator().average_completion_hours([_bounty("open")]) == 0.0


def test_success_rate():
    calc = StatsCalculator()
    bounties = [_bounty("completed")] + [_bounty("claimed")] * 7

    assert calc.success_rate(bounties) == 13
    assert calc.success_rate([_bounty("open"), _bounty("expired")]) == 0
    assert calc.success_rate([]) == 0
    assert calc.success_rate([_bounty("done"), _bounty("completed")]) == 100


def test_summarize_single_completed_bounty():
    bounties = [
        Bounty.model_validate(
            {
                "status": "completed",
                "reward": 100,
                "claimed_at": "2024-01-01T00:00:00Z",
                "completed_at": "2024-01-01T02:00:00Z",
            }
        )
    ]

    snapshot = StatsCalculator().summarize(bounties, NOW)

    assert snapshot.total_usdc_paid == 100
    assert snapshot.avg_completion_hours == 2.0
    assert snapshot.success_rate == 100
    assert snapshot.total_bounties == 1
    assert snapshot.active_bounties == 0
    assert snapshot.last_updated == NOW


def test_summarize_empty_list_is_all_zero():
    snapshot = StatsCalculator().summarize([], NOW)

    assert snapshot.completed_today == 0
    assert snapshot.completed_week == 0
    assert snapshot.completed_month == 0
    assert snapshot.total_usdc_paid == 0
    assert snapshot.avg_completion_hours == 0
    assert snapshot.success_rate == 0
    assert snapshot.total_bounties == 0
    assert snapshot.active_bounties == 0


def test_summarize_counts_unknown_statuses_in_totals():
    bounties = [
        _bounty("open"),
        _bounty("open"),
        _bounty("cancelled"),
        _bounty("completed", completed_at=NOW - timedelta(days=3)),
    ]

    snapshot = StatsCalculator().summarize(bounties, NOW)

    assert snapshot.total_bounties == 4
    assert snapshot.active_bounties == 2
    assert snapshot.completed_today == 0
    assert snapshot.completed_week == 1
    assert snapshot.completed_month == 1
