"""Routes for personal reminders."""

from __future__ import annotations

from uuid import UUID

from flask import Blueprint

from ..auth import current_user_id, login_required
from ..schemas.common import page_payload
from ..schemas.health import (
    ReminderCreateSchema,
    ReminderListQuerySchema,
    ReminderSchema,
    ReminderStatusSchema,
    ReminderUpdateSchema,
    SnoozeSchema,
)
from ..services import reminder_service
from . import json_body, page_args, query_args

reminders_bp = Blueprint("reminders", __name__)


@reminders_bp.route("/reminders", methods=["POST"])
@login_required
def create_reminder() -> tuple[dict, int]:
    reminder = reminder_service.create_reminder(current_user_id(), json_body(ReminderCreateSchema()))
    return ReminderSchema().dump(reminder), 201


@reminders_bp.route("/reminders", methods=["GET"])
@login_required
def list_reminders() -> tuple[dict, int]:
    page, limit = page_args()
    filters = query_args(ReminderListQuerySchema())
    result = reminder_service.list_user_reminders(
        current_user_id(), page, limit, status=filters.get("status"), reminder_type=filters.get("type")
    )
    return page_payload(result, "reminders", ReminderSchema(many=True)), 200


@reminders_bp.route("/reminders/upcoming", methods=["GET"])
@login_required
def upcoming() -> tuple[list[dict], int]:
    return ReminderSchema(many=True).dump(reminder_service.upcoming_reminders(current_user_id())), 200


@reminders_bp.route("/reminders/stats", methods=["GET"])
@login_required
def stats() -> tuple[dict, int]:
    return reminder_service.reminder_stats(current_user_id()), 200


@reminders_bp.route("/reminders/<uuid:reminder_id>", methods=["GET"])
@login_required
def get_reminder(reminder_id: UUID) -> tuple[dict, int]:
    return ReminderSchema().dump(reminder_service.find_reminder(reminder_id, current_user_id())), 200


@reminders_bp.route("/reminders/<uuid:reminder_id>", methods=["PATCH"])
@login_required
def update_reminder(reminder_id: UUID) -> tuple[dict, int]:
    patch = json_body(ReminderUpdateSchema(), partial=True)
    reminder = reminder_service.update_reminder(reminder_id, current_user_id(), patch)
    return ReminderSchema().dump(reminder), 200


@reminders_bp.route("/reminders/<uuid:reminder_id>/status", methods=["PATCH"])
@login_required
def update_status(reminder_id: UUID) -> tuple[dict, int]:
    status = json_body(ReminderStatusSchema())["status"]
    reminder = reminder_service.update_status(reminder_id, current_user_id(), status)
    return ReminderSchema().dump(reminder), 200


@reminders_bp.route("/reminders/<uuid:reminder_id>/snooze", methods=["POST"])
@login_required
def snooze(reminder_id: UUID) -> tuple[dict, int]:
    minutes = json_body(SnoozeSchema())["minutes"]
    reminder = reminder_service.snooze_reminder(reminder_id, current_user_id(), minutes)
    return ReminderSchema().dump(reminder), 200


@reminders_bp.route("/reminders/<uuid:reminder_id>", methods=["DELETE"])
@login_required
def delete_reminder(reminder_id: UUID) -> tuple[str, int]:
    reminder_service.remove_reminder(reminder_id, current_user_id())
    return "", 204
