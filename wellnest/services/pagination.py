"""Pagination and lookup helpers shared by every service."""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any

from ..db import db
from ..errors import NotFoundError


@dataclass
class Page:
    """One page of a listing query."""

    items: list[Any]
    total: int
    page: int
    limit: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 0


def paginate(query, page: int = 1, limit: int = 20) -> Page:
    """Run ``query`` for a single page.

    The query must already carry its ordering; ties should be broken on
    the primary key so that walking pages 1..N visits each row once.
    """
    result = query.paginate(page=page, per_page=limit, error_out=False, max_per_page=None)
    return Page(items=list(result.items), total=result.total or 0, page=page, limit=limit)


def get_or_404(model, entity_id, message: str | None = None):
    """Load ``model`` by primary key or raise :class:`NotFoundError`."""
    entity = db.session.get(model, entity_id)
    if entity is None:
        raise NotFoundError(message or f"{model.__name__} not found.")
    return entity


def apply_patch(entity, patch: dict, fields: tuple[str, ...] | None = None) -> None:
    """Merge ``patch`` over ``entity``, optionally restricted to ``fields``."""
    for key, value in patch.items():
        if fields is not None and key not in fields:
            continue
        setattr(entity, key, value)
