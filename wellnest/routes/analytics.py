"""Routes for analytics records and the dashboard."""

from __future__ import annotations

from uuid import UUID

from flask import Blueprint

from ..auth import current_user_id, login_required
from ..schemas.analytics import (
    AnalyticsCreateSchema,
    AnalyticsListQuerySchema,
    AnalyticsSchema,
    AnalyticsUpdateSchema,
    DashboardQuerySchema,
    DashboardSettingsSchema,
    DashboardSettingsUpdateSchema,
)
from ..schemas.common import page_payload
from ..services import analytics_service
from . import json_body, page_args, query_args

analytics_bp = Blueprint("analytics", __name__)


@analytics_bp.route("/analytics", methods=["POST"])
@login_required
def create_analytics() -> tuple[dict, int]:
    record = analytics_service.create_analytics(current_user_id(), json_body(AnalyticsCreateSchema()))
    return AnalyticsSchema().dump(record), 201


@analytics_bp.route("/analytics", methods=["GET"])
@login_required
def list_analytics() -> tuple[dict, int]:
    page, limit = page_args()
    filters = query_args(AnalyticsListQuerySchema())
    result = analytics_service.list_user_analytics(current_user_id(), filters, page, limit)
    return page_payload(result, "analytics", AnalyticsSchema(many=True)), 200


@analytics_bp.route("/analytics/dashboard", methods=["GET"])
@login_required
def dashboard() -> tuple[dict, int]:
    """Summary over the last day, week, month or year (``?period=``)."""
    period = query_args(DashboardQuerySchema())["period"]
    return analytics_service.dashboard(current_user_id(), period), 200


@analytics_bp.route("/analytics/dashboard/settings", methods=["GET"])
@login_required
def get_settings() -> tuple[dict, int]:
    return DashboardSettingsSchema().dump(analytics_service.get_dashboard_settings(current_user_id())), 200


@analytics_bp.route("/analytics/dashboard/settings", methods=["PUT"])
@login_required
def update_settings() -> tuple[dict, int]:
    patch = json_body(DashboardSettingsUpdateSchema(), partial=True)
    settings = analytics_service.update_dashboard_settings(current_user_id(), patch)
    return DashboardSettingsSchema().dump(settings), 200


@analytics_bp.route("/analytics/<uuid:analytics_id>", methods=["GET"])
@login_required
def get_analytics(analytics_id: UUID) -> tuple[dict, int]:
    return AnalyticsSchema().dump(analytics_service.find_analytics(analytics_id, current_user_id())), 200


@analytics_bp.route("/analytics/<uuid:analytics_id>", methods=["PATCH"])
@login_required
def update_analytics(analytics_id: UUID) -> tuple[dict, int]:
    patch = json_body(AnalyticsUpdateSchema(), partial=True)
    record = analytics_service.update_analytics(analytics_id, current_user_id(), patch)
    return AnalyticsSchema().dump(record), 200


@analytics_bp.route("/analytics/<uuid:analytics_id>", methods=["DELETE"])
@login_required
def delete_analytics(analytics_id: UUID) -> tuple[str, int]:
    analytics_service.remove_analytics(analytics_id, current_user_id())
    return "", 204
