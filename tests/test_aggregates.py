"""Pure aggregate computations."""
from datetime import date, timedelta
from types import SimpleNamespace

import pytest

from wellnest.services.aggregates import (
    challenge_end_date,
    collect_achievements,
    completion_percentage,
    compute_streak,
    goals_progress,
    progress_summary,
    rank_leaderboard,
    simple_engagement_rate,
)


GOAL = {"target": 10000, "unit": "steps"}


def _row(day: date, completed: bool, percentage: float = 100.0):
    return SimpleNamespace(date=day, is_completed=completed, completion_percentage=percentage)


def test_completion_percentage_prefers_unit_key() -> None:
    assert completion_percentage({"minutes": 99, "steps": 8500}, GOAL) == pytest.approx(85.0)


def test_completion_percentage_falls_back_to_first_value() -> None:
    assert completion_percentage({"count": 2500}, GOAL) == pytest.approx(25.0)


def test_completion_percentage_is_capped_and_tolerant() -> None:
    assert completion_percentage({"steps": 25000}, GOAL) == 100.0
    assert completion_percentage({"steps": "lots"}, GOAL) == 0.0
    assert completion_percentage({}, GOAL) == 0.0


def test_completion_percentage_is_not_rounded_up_to_complete() -> None:
    percentage = completion_percentage({"steps": 9999.6}, GOAL)
    assert percentage < 100
    assert round(percentage, 2) == 100.0


def test_streak_stops_at_incomplete_day() -> None:
    day1 = date(2025, 7, 1)
    rows = [
        _row(day1 + timedelta(days=3), True),
        _row(day1 + timedelta(days=2), False, 40.0),
        _row(day1 + timedelta(days=1), True),
        _row(day1, True),
    ]
    assert compute_streak(rows) == 1


def test_streak_stops_at_calendar_gap() -> None:
    rows = [_row(date(2025, 7, 5), True), _row(date(2025, 7, 4), True), _row(date(2025, 7, 1), True)]
    assert compute_streak(rows) == 2


def test_progress_summary() -> None:
    rows = [_row(date(2025, 7, 1), True), _row(date(2025, 7, 2), False, 50.0)]
    summary = progress_summary(rows)
    assert summary["total_days"] == 2
    assert summary["completed_days"] == 1
    assert summary["average_completion"] == 75.0
    assert summary["current_streak"] == 0
    assert summary["best_day"] == {"date": "2025-07-01", "completion_percentage": 100.0}


def test_leaderboard_breaks_ties_on_completed_days() -> None:
    ranked = rank_leaderboard(
        [
            {"user": "b", "average_completion": 95.0, "completed_days": 1},
            {"user": "a", "average_completion": 95.0, "completed_days": 2},
            {"user": "c", "average_completion": 99.0, "completed_days": 0},
        ]
    )
    assert [entry["user"] for entry in ranked] == ["c", "a", "b"]
    assert [entry["rank"] for entry in ranked] == [1, 2, 3]


def test_challenge_end_date_counts_start_day() -> None:
    assert challenge_end_date(date(2025, 7, 1), 30) == date(2025, 7, 30)
    assert challenge_end_date(date(2025, 7, 1), 1) == date(2025, 7, 1)


def test_simple_engagement_rate() -> None:
    assert simple_engagement_rate(0, 0, 0) == 0.0
    assert simple_engagement_rate(3, 2, 1) == 6.0


def test_goals_progress_newest_row_wins() -> None:
    rows = [
        SimpleNamespace(goals_progress={"steps": 90}),
        SimpleNamespace(goals_progress={"steps": 40, "sleep": 70}),
    ]
    assert goals_progress(rows) == {"steps": 90, "sleep": 70}


def test_achievements_are_deduplicated() -> None:
    rows = [
        SimpleNamespace(insights={"achievements": ["first_5k", "streak_7"]}),
        SimpleNamespace(insights={"achievements": ["streak_7"]}),
        SimpleNamespace(insights=None),
    ]
    assert collect_achievements(rows) == ["first_5k", "streak_7"]
