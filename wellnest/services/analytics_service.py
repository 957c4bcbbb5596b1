"""Analytics snapshots and the per-user dashboard."""
from __future__ import annotations

import copy
import logging
from datetime import datetime
from uuid import UUID

from dateutil.relativedelta import relativedelta

from ..db import db
from ..errors import ForbiddenError
from ..models import Analytics, DashboardSettings, PeriodType, utcnow
from . import aggregates
from .pagination import Page, apply_patch, get_or_404, paginate
from .user_service import find_user

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = (
    "type",
    "period_type",
    "period_start",
    "period_end",
    "metrics",
    "insights",
    "score",
    "goals_progress",
    "comparisons",
)
PERIOD_OFFSETS = {
    PeriodType.DAILY: relativedelta(days=1),
    PeriodType.WEEKLY: relativedelta(weeks=1),
    PeriodType.MONTHLY: relativedelta(months=1),
    PeriodType.YEARLY: relativedelta(years=1),
}
DEFAULT_DASHBOARD_SETTINGS = {
    "widget_preferences": {
        "weight_chart": {"enabled": True, "position": 1},
        "workout_summary": {"enabled": True, "position": 2},
        "goals_progress": {"enabled": True, "position": 3},
        "recent_activities": {"enabled": True, "position": 4},
    },
    "chart_preferences": {
        "weight_chart_type": "line",
        "workout_chart_type": "bar",
        "show_trends": True,
        "show_goals": True,
    },
    "notification_preferences": {
        "weekly_summary": True,
        "goal_achievements": True,
        "milestone_alerts": True,
        "trend_insights": True,
    },
    "theme": "light",
    "units_preference": "metric",
}


def create_analytics(user_id: UUID, data: dict) -> Analytics:
    find_user(user_id)
    record = Analytics(user_id=user_id)
    apply_patch(record, data, EDITABLE_FIELDS)
    db.session.add(record)
    db.session.commit()
    return record


def list_user_analytics(user_id: UUID, filters: dict, page: int = 1, limit: int = 20) -> Page:
    find_user(user_id)
    query = Analytics.query.filter_by(user_id=user_id)
    if filters.get("type") is not None:
        query = query.filter_by(type=filters["type"])
    if filters.get("period_type") is not None:
        query = query.filter_by(period_type=filters["period_type"])
    if filters.get("start_date") is not None:
        query = query.filter(Analytics.period_start >= filters["start_date"])
    if filters.get("end_date") is not None:
        query = query.filter(Analytics.period_start <= filters["end_date"])
    return paginate(query.order_by(Analytics.period_start.desc(), Analytics.id), page, limit)


def find_analytics(analytics_id: UUID, requester_id: UUID) -> Analytics:
    record = get_or_404(Analytics, analytics_id, "Analytics record not found.")
    if record.user_id != requester_id:
        raise ForbiddenError("You can only access your own analytics.")
    return record


def update_analytics(analytics_id: UUID, requester_id: UUID, patch: dict) -> Analytics:
    record = find_analytics(analytics_id, requester_id)
    apply_patch(record, patch, EDITABLE_FIELDS)
    db.session.commit()
    return record


def remove_analytics(analytics_id: UUID, requester_id: UUID) -> None:
    record = find_analytics(analytics_id, requester_id)
    db.session.delete(record)
    db.session.commit()


def dashboard(user_id: UUID, period: PeriodType = PeriodType.WEEKLY, now: datetime | None = None) -> dict:
    """Summarise the analytics whose period started inside the window.

    The window runs from ``now`` minus one ``period`` up to ``now``.
    """
    find_user(user_id)
    end = (now or utcnow()).date()
    start = end - PERIOD_OFFSETS[period]
    rows = (
        Analytics.query.filter(Analytics.user_id == user_id, Analytics.period_start.between(start, end))
        .order_by(Analytics.period_start.desc())
        .all()
    )
    return {
        "period": period.value,
        "window": {"start": start.isoformat(), "end": end.isoformat()},
        "overview": aggregates.overview_metrics(rows),
        "charts": aggregates.chart_series(rows),
        "goals": aggregates.goals_progress(rows),
        "insights": aggregates.collect_insights(rows),
        "achievements": aggregates.collect_achievements(rows),
    }


def get_dashboard_settings(user_id: UUID) -> DashboardSettings:
    """Return the user's settings, creating the defaults on first use."""
    find_user(user_id)
    settings = DashboardSettings.query.filter_by(user_id=user_id).first()
    if settings is None:
        settings = DashboardSettings(user_id=user_id, **_default_settings())
        db.session.add(settings)
        db.session.commit()
    return settings


def update_dashboard_settings(user_id: UUID, patch: dict) -> DashboardSettings:
    settings = get_dashboard_settings(user_id)
    apply_patch(settings, patch)
    db.session.commit()
    return settings


def _default_settings() -> dict:
    return copy.deepcopy(DEFAULT_DASHBOARD_SETTINGS)
