"""In-app notifications and delivery preferences.

There is no background scheduler: notifications with a future
``scheduled_for`` stay undelivered until the recipient next lists their
notifications, at which point every due one is marked delivered.
"""
from __future__ import annotations

import logging
from datetime import timedelta
from uuid import UUID

from ..db import db
from ..errors import ForbiddenError
from ..models import (
    Notification,
    NotificationPreference,
    NotificationPriority,
    NotificationType,
    utcnow,
)
from .pagination import Page, apply_patch, get_or_404, paginate
from .user_service import find_user

logger = logging.getLogger(__name__)

CONTENT_FIELDS = (
    "title",
    "message",
    "type",
    "priority",
    "data",
    "action_url",
    "action_text",
    "image_url",
    "category",
    "scheduled_for",
)


def _build(data: dict) -> Notification:
    find_user(data["user_id"])
    if data.get("triggered_by_user_id") is not None:
        find_user(data["triggered_by_user_id"])
    notification = Notification(user_id=data["user_id"], triggered_by_user_id=data.get("triggered_by_user_id"))
    apply_patch(notification, data, CONTENT_FIELDS)
    now = utcnow()
    if notification.scheduled_for is None or notification.scheduled_for <= now:
        notification.delivered_at = now
    return notification


def create_notification(data: dict) -> Notification:
    notification = _build(data)
    db.session.add(notification)
    db.session.commit()
    return notification


def create_bulk(items: list[dict]) -> int:
    """Create many notifications in one transaction."""
    notifications = [_build(item) for item in items]
    db.session.add_all(notifications)
    db.session.commit()
    logger.info("Created %d notifications in bulk", len(notifications))
    return len(notifications)


def deliver_scheduled(user_id: UUID | None = None) -> int:
    """Mark every due scheduled notification as delivered."""
    now = utcnow()
    query = Notification.query.filter(
        Notification.scheduled_for <= now,
        Notification.delivered_at.is_(None),
        Notification.is_active.is_(True),
    )
    if user_id is not None:
        query = query.filter(Notification.user_id == user_id)
    due = query.all()
    for notification in due:
        notification.delivered_at = now
    if due:
        db.session.commit()
    return len(due)


def unread_count(user_id: UUID) -> int:
    return Notification.query.filter(
        Notification.user_id == user_id,
        Notification.is_active.is_(True),
        Notification.delivered_at.isnot(None),
        Notification.read_at.is_(None),
    ).count()


def list_user_notifications(user_id: UUID, page=1, limit=20, unread_only=False, category=None) -> tuple[Page, int]:
    """Delivered notifications for a user plus their unread count."""
    find_user(user_id)
    deliver_scheduled(user_id)
    query = Notification.query.filter(
        Notification.user_id == user_id,
        Notification.is_active.is_(True),
        Notification.delivered_at.isnot(None),
    )
    if unread_only:
        query = query.filter(Notification.read_at.is_(None))
    if category:
        query = query.filter(Notification.category == category)
    page_ = paginate(query.order_by(Notification.created_at.desc(), Notification.id), page, limit)
    return page_, unread_count(user_id)


def find_notification(notification_id: UUID, requester_id: UUID) -> Notification:
    notification = get_or_404(Notification, notification_id, "Notification not found.")
    if notification.user_id != requester_id:
        raise ForbiddenError("You can only access your own notifications.")
    return notification


def update_notification(notification_id: UUID, requester_id: UUID, patch: dict) -> Notification:
    notification = find_notification(notification_id, requester_id)
    now = utcnow()
    if patch.get("mark_as_read") and notification.read_at is None:
        notification.read_at = now
    if patch.get("mark_as_clicked"):
        notification.clicked_at = now
        notification.read_at = notification.read_at or now
    if "data" in patch:
        notification.data = patch["data"]
    if "is_active" in patch:
        notification.is_active = patch["is_active"]
    db.session.commit()
    return notification


def mark_read(notification_id: UUID, requester_id: UUID) -> Notification:
    return update_notification(notification_id, requester_id, {"mark_as_read": True})


def mark_all_read(user_id: UUID) -> int:
    now = utcnow()
    updated = Notification.query.filter(
        Notification.user_id == user_id,
        Notification.is_active.is_(True),
        Notification.delivered_at.isnot(None),
        Notification.read_at.is_(None),
    ).update({Notification.read_at: now}, synchronize_session=False)
    db.session.commit()
    return updated


def remove_notification(notification_id: UUID, requester_id: UUID) -> None:
    notification = find_notification(notification_id, requester_id)
    db.session.delete(notification)
    db.session.commit()


def notification_stats(user_id: UUID) -> dict:
    find_user(user_id)
    deliver_scheduled(user_id)
    visible = (
        Notification.user_id == user_id,
        Notification.is_active.is_(True),
        Notification.delivered_at.isnot(None),
    )
    base = Notification.query.filter(*visible)
    by_type = (
        db.session.query(Notification.type, db.func.count(Notification.id))
        .filter(*visible)
        .group_by(Notification.type)
        .all()
    )
    since = utcnow() - timedelta(hours=24)
    return {
        "total_notifications": base.count(),
        "unread_notifications": base.filter(Notification.read_at.is_(None)).count(),
        "notifications_by_type": {kind.value: count for kind, count in by_type},
        "recent_activity": base.filter(Notification.created_at >= since).count() > 0,
    }


# Preferences -----------------------------------------------------------


def upsert_preference(user_id: UUID, data: dict) -> NotificationPreference:
    find_user(user_id)
    preference = NotificationPreference.query.filter_by(
        user_id=user_id,
        notification_type=data["notification_type"],
        delivery_channel=data["delivery_channel"],
    ).first()
    if preference is None:
        preference = NotificationPreference(
            user_id=user_id,
            notification_type=data["notification_type"],
            delivery_channel=data["delivery_channel"],
        )
        db.session.add(preference)
    preference.is_enabled = data.get("is_enabled", True)
    if data.get("settings") is not None:
        preference.settings = data["settings"]
    db.session.commit()
    return preference


def list_preferences(user_id: UUID) -> list[NotificationPreference]:
    find_user(user_id)
    return (
        NotificationPreference.query.filter_by(user_id=user_id)
        .order_by(NotificationPreference.notification_type, NotificationPreference.delivery_channel)
        .all()
    )


def toggle_preference(user_id: UUID, notification_type, delivery_channel) -> NotificationPreference:
    """Flip a preference; an unset preference counts as enabled."""
    preference = NotificationPreference.query.filter_by(
        user_id=user_id, notification_type=notification_type, delivery_channel=delivery_channel
    ).first()
    enabled = preference.is_enabled if preference is not None else True
    return upsert_preference(
        user_id,
        {"notification_type": notification_type, "delivery_channel": delivery_channel, "is_enabled": not enabled},
    )


# Quick creators --------------------------------------------------------


def workout_reminder(user_id: UUID, workout: dict) -> Notification:
    return create_notification(
        {
            "user_id": user_id,
            "title": "Workout Reminder",
            "message": f"Time for your {workout['type']} workout!",
            "type": NotificationType.REMINDER,
            "priority": NotificationPriority.MEDIUM,
            "data": {"workout_id": workout["workout_id"], "type": workout["type"]},
            "action_url": f"/app/workouts/start?id={workout['workout_id']}",
            "action_text": "Start Workout",
            "category": "workouts",
            "scheduled_for": workout.get("scheduled_for"),
        }
    )


def achievement(user_id: UUID, achievement_data: dict) -> Notification:
    return create_notification(
        {
            "user_id": user_id,
            "title": "Achievement Unlocked!",
            "message": f"Congratulations! You've earned: {achievement_data['title']}",
            "type": NotificationType.ACHIEVEMENT,
            "priority": NotificationPriority.HIGH,
            "data": dict(achievement_data),
            "action_url": f"/app/achievements/{achievement_data['id']}",
            "action_text": "View Achievement",
            "category": "achievements",
        }
    )


def social_activity(recipient_id: UUID, triggered_by_id: UUID, social: dict) -> Notification:
    return create_notification(
        {
            "user_id": recipient_id,
            "triggered_by_user_id": triggered_by_id,
            "title": "Social Activity",
            "message": social["message"],
            "type": NotificationType.SOCIAL_ACTIVITY,
            "priority": NotificationPriority.LOW,
            "data": {key: value for key, value in social.items() if key != "user_id"},
            "action_url": social.get("action_url"),
            "action_text": social.get("action_text"),
            "category": "social",
        }
    )
