"""
Routes for notifications and delivery preferences.

Listing notifications also delivers any scheduled ones that have come
due, so there is no separate delivery worker to run.
"""

from __future__ import annotations

from uuid import UUID

from flask import Blueprint

from ..auth import current_user_id, login_required
from ..schemas.common import page_payload
from ..schemas.notifications import (
    AchievementSchema,
    BulkNotificationSchema,
    NotificationCreateSchema,
    NotificationListQuerySchema,
    NotificationPreferenceSchema,
    NotificationSchema,
    NotificationUpdateSchema,
    PreferenceSchema,
    PreferenceToggleSchema,
    SocialActivitySchema,
    WorkoutReminderSchema,
)
from ..services import notification_service
from . import json_body, page_args, query_args

notifications_bp = Blueprint("notifications", __name__)


@notifications_bp.route("/notifications", methods=["POST"])
@login_required
def create_notification() -> tuple[dict, int]:
    notification = notification_service.create_notification(json_body(NotificationCreateSchema()))
    return NotificationSchema().dump(notification), 201


@notifications_bp.route("/notifications/bulk", methods=["POST"])
@login_required
def create_bulk() -> tuple[dict, int]:
    items = json_body(BulkNotificationSchema())["notifications"]
    return {"created_count": notification_service.create_bulk(items)}, 201


@notifications_bp.route("/notifications", methods=["GET"])
@login_required
def list_notifications() -> tuple[dict, int]:
    page, limit = page_args()
    filters = query_args(NotificationListQuerySchema())
    result, unread = notification_service.list_user_notifications(
        current_user_id(), page, limit, unread_only=filters["unread_only"], category=filters.get("category")
    )
    body = page_payload(result, "notifications", NotificationSchema(many=True))
    body["unread_count"] = unread
    return body, 200


@notifications_bp.route("/notifications/unread-count", methods=["GET"])
@login_required
def unread_count() -> tuple[dict, int]:
    return {"unread_count": notification_service.unread_count(current_user_id())}, 200


@notifications_bp.route("/notifications/stats", methods=["GET"])
@login_required
def stats() -> tuple[dict, int]:
    return notification_service.notification_stats(current_user_id()), 200


@notifications_bp.route("/notifications/read-all", methods=["PATCH"])
@login_required
def mark_all_read() -> tuple[dict, int]:
    return {"updated_count": notification_service.mark_all_read(current_user_id())}, 200


@notifications_bp.route("/notifications/preferences", methods=["GET"])
@login_required
def list_preferences() -> tuple[list[dict], int]:
    preferences = notification_service.list_preferences(current_user_id())
    return NotificationPreferenceSchema(many=True).dump(preferences), 200


@notifications_bp.route("/notifications/preferences", methods=["PUT"])
@login_required
def upsert_preference() -> tuple[dict, int]:
    preference = notification_service.upsert_preference(current_user_id(), json_body(PreferenceSchema()))
    return NotificationPreferenceSchema().dump(preference), 200


@notifications_bp.route("/notifications/preferences/toggle", methods=["POST"])
@login_required
def toggle_preference() -> tuple[dict, int]:
    data = json_body(PreferenceToggleSchema())
    preference = notification_service.toggle_preference(
        current_user_id(), data["notification_type"], data["delivery_channel"]
    )
    return NotificationPreferenceSchema().dump(preference), 200


@notifications_bp.route("/notifications/workout-reminder", methods=["POST"])
@login_required
def workout_reminder() -> tuple[dict, int]:
    notification = notification_service.workout_reminder(current_user_id(), json_body(WorkoutReminderSchema()))
    return NotificationSchema().dump(notification), 201


@notifications_bp.route("/notifications/achievement", methods=["POST"])
@login_required
def achievement() -> tuple[dict, int]:
    notification = notification_service.achievement(current_user_id(), json_body(AchievementSchema()))
    return NotificationSchema().dump(notification), 201


@notifications_bp.route("/notifications/social", methods=["POST"])
@login_required
def social_activity() -> tuple[dict, int]:
    """Notify ``user_id`` about something the caller did."""
    data = json_body(SocialActivitySchema())
    notification = notification_service.social_activity(data["user_id"], current_user_id(), data)
    return NotificationSchema().dump(notification), 201


@notifications_bp.route("/notifications/<uuid:notification_id>", methods=["GET"])
@login_required
def get_notification(notification_id: UUID) -> tuple[dict, int]:
    notification = notification_service.find_notification(notification_id, current_user_id())
    return NotificationSchema().dump(notification), 200


@notifications_bp.route("/notifications/<uuid:notification_id>", methods=["PATCH"])
@login_required
def update_notification(notification_id: UUID) -> tuple[dict, int]:
    patch = json_body(NotificationUpdateSchema(), partial=True)
    notification = notification_service.update_notification(notification_id, current_user_id(), patch)
    return NotificationSchema().dump(notification), 200


@notifications_bp.route("/notifications/<uuid:notification_id>/read", methods=["PATCH"])
@login_required
def mark_read(notification_id: UUID) -> tuple[dict, int]:
    notification = notification_service.mark_read(notification_id, current_user_id())
    return NotificationSchema().dump(notification), 200


@notifications_bp.route("/notifications/<uuid:notification_id>", methods=["DELETE"])
@login_required
def delete_notification(notification_id: UUID) -> tuple[str, int]:
    notification_service.remove_notification(notification_id, current_user_id())
    return "", 204
