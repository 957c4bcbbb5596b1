"""Daily health logs; at most one per user per calendar day."""
from __future__ import annotations

import logging
from datetime import date
from uuid import UUID

from ..db import db
from ..errors import ConflictError, ForbiddenError
from ..models import HealthLog
from .pagination import Page, apply_patch, get_or_404, paginate
from .user_service import find_user

logger = logging.getLogger(__name__)

METRIC_FIELDS = ("calories", "steps", "hydration_ml", "sleep_hours", "vitamin_summary", "additional_metrics")
AVERAGED_FIELDS = ("calories", "steps", "hydration_ml", "sleep_hours")


def _check_unique_day(user_id: UUID, day: date, exclude_id: UUID | None = None) -> None:
    query = HealthLog.query.filter_by(user_id=user_id, date=day)
    if exclude_id is not None:
        query = query.filter(HealthLog.id != exclude_id)
    if query.first() is not None:
        raise ConflictError(f"A health log for {day.isoformat()} already exists.")


def create_health_log(user_id: UUID, data: dict) -> HealthLog:
    find_user(user_id)
    _check_unique_day(user_id, data["date"])
    log = HealthLog(user_id=user_id, date=data["date"])
    apply_patch(log, data, METRIC_FIELDS)
    db.session.add(log)
    db.session.commit()
    return log


def list_user_logs(user_id: UUID, page: int = 1, limit: int = 20) -> Page:
    find_user(user_id)
    query = HealthLog.query.filter_by(user_id=user_id).order_by(HealthLog.date.desc(), HealthLog.id)
    return paginate(query, page, limit)


def logs_in_range(user_id: UUID, start: date, end: date) -> list[HealthLog]:
    """Logs with ``start <= date <= end``, oldest first."""
    find_user(user_id)
    return (
        HealthLog.query.filter(HealthLog.user_id == user_id, HealthLog.date.between(start, end))
        .order_by(HealthLog.date.asc())
        .all()
    )


def log_stats(user_id: UUID, start: date, end: date) -> dict:
    """Average each metric over the logs that recorded it."""
    logs = logs_in_range(user_id, start, end)
    stats: dict = {
        "total_entries": len(logs),
        "date_range": {"start_date": start.isoformat(), "end_date": end.isoformat()},
    }
    for field in AVERAGED_FIELDS:
        values = [getattr(log, field) for log in logs if getattr(log, field) is not None]
        stats[f"average_{field}"] = round(sum(values) / len(values), 1) if values else None
    return stats


def find_log(log_id: UUID, requester_id: UUID) -> HealthLog:
    log = get_or_404(HealthLog, log_id, "Health log not found.")
    if log.user_id != requester_id:
        raise ForbiddenError("You can only access your own health logs.")
    return log


def update_health_log(log_id: UUID, requester_id: UUID, patch: dict) -> HealthLog:
    log = find_log(log_id, requester_id)
    if "date" in patch and patch["date"] != log.date:
        _check_unique_day(log.user_id, patch["date"], exclude_id=log.id)
        log.date = patch["date"]
    apply_patch(log, patch, METRIC_FIELDS)
    db.session.commit()
    return log


def remove_health_log(log_id: UUID, requester_id: UUID) -> None:
    log = find_log(log_id, requester_id)
    db.session.delete(log)
    db.session.commit()
