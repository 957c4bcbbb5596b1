"""Routes for daily health logs. Callers only ever see their own logs."""

from __future__ import annotations

from uuid import UUID

from flask import Blueprint

from ..auth import current_user_id, login_required
from ..schemas.common import DateRangeSchema, page_payload
from ..schemas.health import HealthLogCreateSchema, HealthLogSchema, HealthLogUpdateSchema
from ..services import health_log_service
from . import json_body, page_args, query_args

health_logs_bp = Blueprint("health_logs", __name__)


@health_logs_bp.route("/health-logs", methods=["POST"])
@login_required
def create_log() -> tuple[dict, int]:
    """Record a day's metrics. A second log for the same date returns 409."""
    log = health_log_service.create_health_log(current_user_id(), json_body(HealthLogCreateSchema()))
    return HealthLogSchema().dump(log), 201


@health_logs_bp.route("/health-logs", methods=["GET"])
@login_required
def list_logs() -> tuple[dict, int]:
    page, limit = page_args()
    result = health_log_service.list_user_logs(current_user_id(), page, limit)
    return page_payload(result, "health_logs", HealthLogSchema(many=True)), 200


@health_logs_bp.route("/health-logs/range", methods=["GET"])
@login_required
def logs_in_range() -> tuple[list[dict], int]:
    window = query_args(DateRangeSchema())
    logs = health_log_service.logs_in_range(current_user_id(), window["start_date"], window["end_date"])
    return HealthLogSchema(many=True).dump(logs), 200


@health_logs_bp.route("/health-logs/stats", methods=["GET"])
@login_required
def log_stats() -> tuple[dict, int]:
    window = query_args(DateRangeSchema())
    return health_log_service.log_stats(current_user_id(), window["start_date"], window["end_date"]), 200


@health_logs_bp.route("/health-logs/<uuid:log_id>", methods=["GET"])
@login_required
def get_log(log_id: UUID) -> tuple[dict, int]:
    return HealthLogSchema().dump(health_log_service.find_log(log_id, current_user_id())), 200


@health_logs_bp.route("/health-logs/<uuid:log_id>", methods=["PATCH"])
@login_required
def update_log(log_id: UUID) -> tuple[dict, int]:
    patch = json_body(HealthLogUpdateSchema(), partial=True)
    log = health_log_service.update_health_log(log_id, current_user_id(), patch)
    return HealthLogSchema().dump(log), 200


@health_logs_bp.route("/health-logs/<uuid:log_id>", methods=["DELETE"])
@login_required
def delete_log(log_id: UUID) -> tuple[str, int]:
    health_log_service.remove_health_log(log_id, current_user_id())
    return "", 204
