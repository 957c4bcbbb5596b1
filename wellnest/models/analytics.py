"""Periodic analytics snapshots and per-user dashboard settings."""

from __future__ import annotations

import enum
from typing import Optional

from ..db import db
from .base import IdentityMixin


class AnalyticsType(enum.Enum):
    WEIGHT_TRACKING = "weight_tracking"
    WORKOUT_SUMMARY = "workout_summary"
    NUTRITION_ANALYSIS = "nutrition_analysis"
    SLEEP_PATTERN = "sleep_pattern"
    MOOD_TRACKING = "mood_tracking"
    PROGRESS_MILESTONE = "progress_milestone"
    CHALLENGE_PERFORMANCE = "challenge_performance"
    SOCIAL_ENGAGEMENT = "social_engagement"


class PeriodType(enum.Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"


class Analytics(IdentityMixin, db.Model):
    __allow_unmapped__ = True
    __tablename__ = "analytics"

    user_id = db.Column(db.Uuid, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    type: AnalyticsType = db.Column(db.Enum(AnalyticsType), nullable=False)
    period_type: PeriodType = db.Column(db.Enum(PeriodType), nullable=False)
    period_start = db.Column(db.Date, nullable=False)
    period_end = db.Column(db.Date, nullable=False)
    metrics = db.Column(db.JSON, nullable=False)
    insights = db.Column(db.JSON)
    score: Optional[float] = db.Column(db.Float)
    goals_progress = db.Column(db.JSON)
    comparisons = db.Column(db.JSON)

    __table_args__ = (
        db.Index("ix_analytics_user_type_period", "user_id", "type", "period_type", "period_start"),
    )

    def __repr__(self) -> str:
        return f"<Analytics {self.type.value} {self.period_start}>"


class DashboardSettings(IdentityMixin, db.Model):
    __allow_unmapped__ = True
    __tablename__ = "user_dashboard_settings"

    user_id = db.Column(db.Uuid, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True)
    widget_preferences = db.Column(db.JSON, nullable=False)
    chart_preferences = db.Column(db.JSON, nullable=False)
    notification_preferences = db.Column(db.JSON, nullable=False)
    theme: str = db.Column(db.String(50), nullable=False, default="light")
    units_preference: str = db.Column(db.String(20), nullable=False, default="metric")
