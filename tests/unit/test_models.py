from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from bounty_widget.domain.models import (
    Bounty,
    SnapshotSource,
    StatsResult,
    StatsSnapshot,
    Theme,
)

STAMP = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)


def test_bounty_parses_upstream_record():
    bounty = Bounty.model_validate(
        {
            "id": 7,
            "title": "Fix the docs",
            "reward": 150,
            "status": "completed",
            "created_at": "2024-01-01T00:00:00Z",
            "claimed_at": "2024-01-01T01:00:00Z",
            "completed_at": "2024-01-01T04:30:00Z",
            "tags": ["docs"],
        }
    )

    assert bounty.id == 7
    assert bounty.reward == 150.0
    assert bounty.is_completed
    assert bounty.is_claimed
    assert not bounty.is_open
    assert bounty.completion_hours == pytest.approx(3.5)
    assert bounty.completed_at == datetime(2024, 1, 1, 4, 30, tzinfo=timezone.utc)


def test_bounty_is_lenient_about_missing_and_garbage_values():
    bounty = Bounty.model_validate(
        {
            "id": "abc",
            "reward": None,
            "status": None,
            "claimed_at": "not a date",
            "completed_at": "",
        }
    )

    assert bounty.reward == 0.0
    assert bounty.status == ""
    assert bounty.claimed_at is None
    assert bounty.completed_at is None
    assert bounty.completion_hours is None


def test_bounty_non_numeric_reward_counts_as_zero():
    assert Bounty.model_validate({"reward": "lots"}).reward == 0.0
    assert Bounty.model_validate({"reward": "12.5"}).reward == 12.5


def test_bounty_naive_timestamp_is_made_aware():
    bounty = Bounty.model_validate({"completed_at": "2024-03-10T08:00:00"})

    assert bounty.completed_at is not None
    assert bounty.completed_at.tzinfo is not None


def test_bounty_status_matching_is_exact():
    assert Bounty(status="done").is_completed
    assert Bounty(status="claimed").is_claimed
    assert not Bounty(status="claimed").is_completed
    assert not Bounty(status="Completed").is_completed
    assert Bounty(status="open").is_open


def test_bounty_is_immutable():
    bounty = Bounty(status="open")
    with pytest.raises(ValidationError):
        bounty.status = "done"  # type: ignore[misc]


def test_snapshot_uses_wire_names_in_payload():
    snapshot = StatsSnapshot(
        completed_today=1,
        total_usdc_paid=250.5,
        success_rate=80,
        last_updated=STAMP,
    )

    payload = snapshot.to_payload()

    assert payload["completedToday"] == 1
    assert payload["totalUSDCPaid"] == 250.5
    assert payload["successRate"] == 80
    assert payload["avgCompletionHours"] == 0.0
    assert payload["lastUpdated"].startswith("2024-01-01T12:00:00")
    assert set(payload) == {
        "completedToday",
        "completedWeek",
        "completedMonth",
        "totalUSDCPaid",
        "avgCompletionHours",
        "successRate",
        "totalBounties",
        "activeBounties",
        "lastUpdated",
    }


def test_snapshot_empty_is_all_zero():
    snapshot = StatsSnapshot.empty(STAMP)

    assert snapshot.last_updated == STAMP
    numeric = {k: v for k, v in snapshot.to_payload().items() if k != "lastUpdated"}
    assert all(value == 0 for value in numeric.values())


def test_with_overrides_prefers_upstream_values_including_zero():
    local = StatsSnapshot(
        completed_today=3,
        completed_week=5,
        total_usdc_paid=400,
        success_rate=75,
        last_updated=STAMP,
    )

    merged = local.with_overrides(
        {"completedToday": 0, "totalUSDCPaid": 1000, "successRate": None}
    )

    assert merged.completed_today == 0
    assert merged.completed_week == 5
    assert merged.total_usdc_paid == 1000
    assert merged.success_rate == 75


def test_with_overrides_never_replaces_last_updated():
    local = StatsSnapshot(last_updated=STAMP)

    merged = local.with_overrides({"lastUpdated": "1999-01-01T00:00:00Z"})

    assert merged.last_updated == STAMP


def test_with_overrides_ignores_unknown_keys():
    local = StatsSnapshot(total_bounties=4, last_updated=STAMP)

    merged = local.with_overrides({"somethingElse": 9, "total_bounties": 99})

    assert merged.total_bounties == 4


def test_with_overrides_keeps_local_value_for_unusable_field():
    local = StatsSnapshot(total_bounties=4, success_rate=50, last_updated=STAMP)

    merged = local.with_overrides({"totalBounties": "many", "successRate": 60})

    assert merged.total_bounties == 4
    assert merged.success_rate == 60


def test_with_overrides_rounds_fractional_integer_fields():
    local = StatsSnapshot(success_rate=50, last_updated=STAMP)

    merged = local.with_overrides(
        {"successRate": 87.5, "activeBounties": "3", "avgCompletionHours": 4.25}
    )

    assert merged.success_rate == 88
    assert isinstance(merged.success_rate, int)
    assert merged.active_bounties == 3
    assert merged.avg_completion_hours == 4.25


def test_with_overrides_rejects_non_finite_numbers():
    local = StatsSnapshot(total_usdc_paid=10, completed_week=2, last_updated=STAMP)

    merged = local.with_overrides(
        {"totalUSDCPaid": float("nan"), "completedWeek": float("inf")}
    )

    assert merged.total_usdc_paid == 10
    assert merged.completed_week == 2


def test_bounty_stringifies_non_text_title_and_status():
    bounty = Bounty.model_validate({"id": 2.5, "title": 2024, "status": 7})

    assert bounty.id == 2.5
    assert bounty.title == "2024"
    assert bounty.status == "7"


def test_bounty_accepts_structured_id():
    bounty = Bounty.model_validate({"id": {"slug": "x"}, "status": "open"})

    assert bounty.id == "{'slug': 'x'}"
    assert bounty.is_open


def test_theme_parse_falls_back_to_default():
    assert Theme.parse("light") is Theme.LIGHT
    assert Theme.parse(" DARK ") is Theme.DARK
    assert Theme.parse(None) is Theme.DARK
    assert Theme.parse("neon", Theme.LIGHT) is Theme.LIGHT


def test_stats_result_degraded_flag():
    snapshot = StatsSnapshot.empty(STAMP + timedelta(minutes=1))

    assert StatsResult(snapshot=snapshot, source=SnapshotSource.EMPTY).is_degraded
    assert StatsResult(snapshot=snapshot, source=SnapshotSource.STALE).is_degraded
    assert not StatsResult(snapshot=snapshot, source=SnapshotSource.FRESH).is_degraded
