"""Shared column helpers for the Wellnest models."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from ..db import db


def utcnow() -> datetime:
    """Return the current UTC time as a naive datetime.

    Timestamps are stored without tzinfo so that values read back from
    SQLite and PostgreSQL compare cleanly.
    """
    return datetime.now(timezone.utc).replace(tzinfo=None)


class IdentityMixin:
    """UUID primary key plus creation/update timestamps."""

    id = db.Column(db.Uuid, primary_key=True, default=uuid.uuid4)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)
