"""Personal reminders."""
from __future__ import annotations

import logging
from collections import Counter
from datetime import timedelta
from uuid import UUID

from ..db import db
from ..errors import ForbiddenError, ValidationError
from ..models import Reminder, ReminderStatus, utcnow
from .pagination import Page, apply_patch, get_or_404, paginate
from .user_service import find_user

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = (
    "title",
    "description",
    "type",
    "frequency",
    "time",
    "start_date",
    "end_date",
    "custom_schedule",
    "is_notification_enabled",
)


def _check_window(reminder: Reminder) -> None:
    if reminder.start_date and reminder.end_date and reminder.end_date <= reminder.start_date:
        raise ValidationError("End date must be after start date.", {"end_date": ["Must be after start_date."]})


def create_reminder(user_id: UUID, data: dict) -> Reminder:
    find_user(user_id)
    reminder = Reminder(user_id=user_id, metadata_=data.get("metadata"))
    apply_patch(reminder, data, EDITABLE_FIELDS)
    _check_window(reminder)
    db.session.add(reminder)
    db.session.commit()
    return reminder


def list_user_reminders(user_id: UUID, page=1, limit=20, status=None, reminder_type=None) -> Page:
    find_user(user_id)
    query = Reminder.query.filter_by(user_id=user_id)
    if status is not None:
        query = query.filter_by(status=status)
    if reminder_type is not None:
        query = query.filter_by(type=reminder_type)
    return paginate(query.order_by(Reminder.created_at.desc(), Reminder.id), page, limit)


def upcoming_reminders(user_id: UUID) -> list[Reminder]:
    """Active reminders with notifications enabled, by time of day."""
    find_user(user_id)
    return (
        Reminder.query.filter_by(user_id=user_id, status=ReminderStatus.ACTIVE, is_notification_enabled=True)
        .order_by(Reminder.time.asc())
        .all()
    )


def reminder_stats(user_id: UUID) -> dict:
    find_user(user_id)
    reminders = Reminder.query.filter_by(user_id=user_id).all()
    return {
        "total_reminders": len(reminders),
        "active_reminders": sum(1 for r in reminders if r.status == ReminderStatus.ACTIVE),
        "completed_reminders": sum(1 for r in reminders if r.status == ReminderStatus.COMPLETED),
        "by_type": dict(Counter(r.type.value for r in reminders)),
        "by_frequency": dict(Counter(r.frequency.value for r in reminders)),
    }


def find_reminder(reminder_id: UUID, requester_id: UUID) -> Reminder:
    reminder = get_or_404(Reminder, reminder_id, "Reminder not found.")
    if reminder.user_id != requester_id:
        raise ForbiddenError("You can only access your own reminders.")
    return reminder


def update_reminder(reminder_id: UUID, requester_id: UUID, patch: dict) -> Reminder:
    reminder = find_reminder(reminder_id, requester_id)
    apply_patch(reminder, patch, EDITABLE_FIELDS)
    if "metadata" in patch:
        reminder.metadata_ = patch["metadata"]
    _check_window(reminder)
    db.session.commit()
    return reminder


def update_status(reminder_id: UUID, requester_id: UUID, status: ReminderStatus) -> Reminder:
    reminder = find_reminder(reminder_id, requester_id)
    reminder.status = status
    db.session.commit()
    return reminder


def snooze_reminder(reminder_id: UUID, requester_id: UUID, minutes: int = 10) -> Reminder:
    """Push the reminder back, recording the snooze in its metadata."""
    reminder = find_reminder(reminder_id, requester_id)
    metadata = dict(reminder.metadata_ or {})
    metadata["snoozed_until"] = (utcnow() + timedelta(minutes=minutes)).isoformat()
    metadata["snooze_count"] = int(metadata.get("snooze_count", 0)) + 1
    # Reassign so the JSON column sees the change.
    reminder.metadata_ = metadata
    db.session.commit()
    return reminder


def remove_reminder(reminder_id: UUID, requester_id: UUID) -> None:
    reminder = find_reminder(reminder_id, requester_id)
    db.session.delete(reminder)
    db.session.commit()
