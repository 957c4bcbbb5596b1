"""Daily health logs and personal reminders."""

from __future__ import annotations

import enum
from typing import Optional

from ..db import db
from .base import IdentityMixin


class HealthLog(IdentityMixin, db.Model):
    """A user's health metrics for a single day."""

    __allow_unmapped__ = True
    __tablename__ = "health_logs"

    user_id = db.Column(db.Uuid, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    date = db.Column(db.Date, nullable=False)
    calories: Optional[int] = db.Column(db.Integer)
    steps: Optional[int] = db.Column(db.Integer)
    hydration_ml: Optional[int] = db.Column(db.Integer)
    sleep_hours: Optional[float] = db.Column(db.Float)
    vitamin_summary: Optional[str] = db.Column(db.Text)
    additional_metrics = db.Column(db.JSON)

    user = db.relationship("User")

    # Ensure one log per user per day
    __table_args__ = (db.UniqueConstraint("user_id", "date", name="uix_health_log_user_day"),)

    def __repr__(self) -> str:
        return f"<HealthLog {self.user_id} {self.date}>"


class ReminderType(enum.Enum):
    MEDICATION = "medication"
    EXERCISE = "exercise"
    MEAL = "meal"
    WATER = "water"
    SLEEP = "sleep"
    APPOINTMENT = "appointment"
    CUSTOM = "custom"


class ReminderFrequency(enum.Enum):
    ONCE = "once"
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    CUSTOM = "custom"


class ReminderStatus(enum.Enum):
    ACTIVE = "active"
    PAUSED = "paused"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class Reminder(IdentityMixin, db.Model):
    __allow_unmapped__ = True
    __tablename__ = "reminders"

    user_id = db.Column(db.Uuid, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    title: str = db.Column(db.String(200), nullable=False)
    description: Optional[str] = db.Column(db.Text)
    type: ReminderType = db.Column(db.Enum(ReminderType), nullable=False)
    frequency: ReminderFrequency = db.Column(db.Enum(ReminderFrequency), nullable=False)
    time = db.Column(db.Time, nullable=False)
    start_date = db.Column(db.Date)
    end_date = db.Column(db.Date)
    custom_schedule = db.Column(db.JSON)
    status: ReminderStatus = db.Column(db.Enum(ReminderStatus), nullable=False, default=ReminderStatus.ACTIVE)
    is_notification_enabled: bool = db.Column(db.Boolean, nullable=False, default=True)
    # Medication details, exercise info, snooze bookkeeping, ...
    metadata_ = db.Column("metadata", db.JSON)

    user = db.relationship("User")

    def __repr__(self) -> str:
        return f"<Reminder {self.title} at {self.time}>"
