"""Challenge and dashboard aggregate computations.

These functions encapsulate the arithmetic behind challenge progress,
streaks, leaderboards and the analytics dashboard. By keeping them
free of any database access we avoid cluttering the services with
arithmetic and make unit testing straightforward: every function takes
plain values or already-loaded rows and returns plain Python data.
"""
from __future__ import annotations

from datetime import date, timedelta
from typing import Callable, Iterable, Optional, Sequence


def completion_percentage(progress_data: dict, goal: dict) -> float:
    """Compute how much of a daily goal was achieved.

    The achieved value is read from the progress key named after the
    goal's unit, falling back to the first key of the payload.
    Non-numeric values count as zero.

    Parameters
    ----------
    progress_data: dict
        The participant's reported values for the day.
    goal: dict
        The challenge goal; must carry ``target`` and ``unit``.

    Returns
    -------
    float
        ``min(100, achieved / target * 100)``, unrounded so that callers
        decide completion before rounding for storage.
    """
    if not progress_data:
        return 0.0
    unit = goal.get("unit")
    if unit in progress_data:
        value = progress_data[unit]
    else:
        value = next(iter(progress_data.values()))

    try:
        achieved = float(value)
    except (TypeError, ValueError):
        achieved = 0.0

    target = float(goal.get("target") or 0)
    if target <= 0:
        return 0.0
    return min(100.0, achieved / target * 100)


def compute_streak(rows: Sequence) -> int:
    """Count consecutive completed days ending at the most recent row.

    ``rows`` must be ordered by date, newest first, and expose ``date``
    and ``is_completed``. The scan stops at the first incomplete row or
    at a gap between calendar days.
    """
    streak = 0
    expected: Optional[date] = None
    for row in rows:
        if not row.is_completed:
            break
        if expected is not None and row.date != expected:
            break
        streak += 1
        expected = row.date - timedelta(days=1)
    return streak


def progress_summary(rows: Sequence) -> dict:
    """Summarise a participant's progress rows ordered oldest first."""
    if not rows:
        return {
            "total_days": 0,
            "completed_days": 0,
            "average_completion": 0.0,
            "current_streak": 0,
            "best_day": None,
        }
    completed = sum(1 for row in rows if row.is_completed)
    average = sum(row.completion_percentage for row in rows) / len(rows)
    best = max(rows, key=lambda row: row.completion_percentage)
    return {
        "total_days": len(rows),
        "completed_days": completed,
        "average_completion": round(average, 2),
        "current_streak": compute_streak(list(reversed(rows))),
        "best_day": {"date": best.date.isoformat(), "completion_percentage": best.completion_percentage},
    }


def rank_leaderboard(entries: Iterable[dict]) -> list[dict]:
    """Order leaderboard entries and assign ranks 1..N.

    Each entry carries ``average_completion`` and ``completed_days``.
    Higher averages rank first; ties are broken on completed days.
    """
    ordered = sorted(
        entries,
        key=lambda entry: (entry["average_completion"], entry["completed_days"]),
        reverse=True,
    )
    for position, entry in enumerate(ordered, start=1):
        entry["rank"] = position
    return ordered


def simple_engagement_rate(likes: int, comments: int, shares: int) -> float:
    """Default engagement policy: total interactions as a percentage of 100."""
    total = likes + comments + shares
    return round(total / 100 * 100, 2) if total > 0 else 0.0


EngagementPolicy = Callable[[int, int, int], float]


# Dashboard helpers -----------------------------------------------------


def overview_metrics(rows: Sequence) -> dict:
    """Derive dashboard overview figures from rows ordered newest first."""
    weight_rows = [row for row in rows if row.type.value == "weight_tracking"]
    workout_rows = [row for row in rows if row.type.value == "workout_summary"]
    average_score = round(sum(row.score or 0 for row in rows) / len(rows), 1) if rows else 0
    return {
        "total_analytics": len(rows),
        "average_score": average_score,
        "weight_trend": (weight_rows[0].metrics or {}).get("trend", "no_data") if weight_rows else "no_data",
        "workouts_completed": sum((row.metrics or {}).get("workouts_count", 0) or 0 for row in workout_rows),
    }


def chart_series(rows: Sequence) -> dict:
    """Build the dashboard chart series, each sorted oldest first."""
    ascending = sorted(rows, key=lambda row: row.period_start)
    weight_chart = [
        {
            "date": row.period_start.isoformat(),
            "weight": row.metrics.get("average_weight"),
            "change": row.metrics.get("weight_change"),
        }
        for row in ascending
        if row.type.value == "weight_tracking"
    ]
    workout_chart = [
        {
            "date": row.period_start.isoformat(),
            "workouts": row.metrics.get("workouts_count", 0),
            "duration": row.metrics.get("total_duration", 0),
            "calories": row.metrics.get("calories_burned", 0),
        }
        for row in ascending
        if row.type.value == "workout_summary"
    ]
    score_trend = [
        {"date": row.period_start.isoformat(), "score": row.score or 0, "type": row.type.value}
        for row in ascending
    ]
    return {"weight_chart": weight_chart, "workout_chart": workout_chart, "score_trend": score_trend}


def goals_progress(rows: Sequence) -> dict:
    """Merge the ``goals_progress`` maps, newest row winning per goal."""
    merged: dict = {}
    for row in reversed(rows):
        merged.update(row.goals_progress or {})
    return merged


def collect_insights(rows: Sequence, limit: int = 5) -> list[str]:
    summaries = [row.insights["summary"] for row in rows if row.insights and row.insights.get("summary")]
    return summaries[:limit]


def collect_achievements(rows: Sequence, limit: int = 10) -> list[str]:
    seen: list[str] = []
    for row in rows:
        for achievement in (row.insights or {}).get("achievements", []) or []:
            if achievement not in seen:
                seen.append(achievement)
    return seen[:limit]


def challenge_end_date(start: date, duration_days: int) -> date:
    """Last day of a challenge; the start day counts as day one."""
    return start + timedelta(days=duration_days - 1)
