"""In-app notifications and per-channel delivery preferences."""

from __future__ import annotations

import enum
from datetime import datetime
from typing import Optional

from ..db import db
from .base import IdentityMixin


class NotificationType(enum.Enum):
    REMINDER = "reminder"
    ACHIEVEMENT = "achievement"
    CHALLENGE_INVITE = "challenge_invite"
    CHALLENGE_UPDATE = "challenge_update"
    SOCIAL_ACTIVITY = "social_activity"
    HEALTH_INSIGHT = "health_insight"
    GOAL_MILESTONE = "goal_milestone"
    SYSTEM_UPDATE = "system_update"
    FRIEND_REQUEST = "friend_request"
    POST_LIKE = "post_like"
    POST_COMMENT = "post_comment"


class NotificationPriority(enum.Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class DeliveryChannel(enum.Enum):
    IN_APP = "in_app"
    EMAIL = "email"
    PUSH = "push"
    SMS = "sms"


class Notification(IdentityMixin, db.Model):
    __allow_unmapped__ = True
    __tablename__ = "notifications"

    user_id = db.Column(db.Uuid, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    triggered_by_user_id = db.Column(db.Uuid, db.ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    title: str = db.Column(db.String(200), nullable=False)
    message: str = db.Column(db.Text, nullable=False)
    type: NotificationType = db.Column(db.Enum(NotificationType), nullable=False)
    priority: NotificationPriority = db.Column(
        db.Enum(NotificationPriority), nullable=False, default=NotificationPriority.MEDIUM
    )
    data = db.Column(db.JSON)
    action_url: Optional[str] = db.Column(db.String(500))
    action_text: Optional[str] = db.Column(db.String(200))
    image_url: Optional[str] = db.Column(db.String(500))
    category: Optional[str] = db.Column(db.String(100))
    read_at: Optional[datetime] = db.Column(db.DateTime)
    delivered_at: Optional[datetime] = db.Column(db.DateTime)
    clicked_at: Optional[datetime] = db.Column(db.DateTime)
    scheduled_for: Optional[datetime] = db.Column(db.DateTime)
    is_active: bool = db.Column(db.Boolean, nullable=False, default=True)

    user = db.relationship("User", foreign_keys=[user_id])
    triggered_by_user = db.relationship("User", foreign_keys=[triggered_by_user_id])

    __table_args__ = (db.Index("ix_notifications_user_read_created", "user_id", "read_at", "created_at"),)


class NotificationPreference(IdentityMixin, db.Model):
    __allow_unmapped__ = True
    __tablename__ = "notification_preferences"

    user_id = db.Column(db.Uuid, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    notification_type: NotificationType = db.Column(db.Enum(NotificationType), nullable=False)
    delivery_channel: DeliveryChannel = db.Column(db.Enum(DeliveryChannel), nullable=False)
    is_enabled: bool = db.Column(db.Boolean, nullable=False, default=True)
    settings = db.Column(db.JSON)

    __table_args__ = (
        db.UniqueConstraint("user_id", "notification_type", "delivery_channel", name="uix_notification_pref"),
    )
