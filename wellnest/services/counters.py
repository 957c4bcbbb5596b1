"""Denormalised counter updates.

Counters such as ``likes_count`` or ``member_count`` are changed with
SQL-side arithmetic (``SET likes_count = likes_count + 1``) so that two
concurrent requests each apply their own delta rather than both writing
back the same value. After the flush the attribute is expired and the
fresh value is loaded the next time it is read.
"""
from __future__ import annotations

from uuid import UUID

from ..db import db
from ..models import MarketplaceItem, MarketplaceReview


def adjust(entity, field: str, delta: int) -> None:
    """Add ``delta`` to ``entity.<field>`` within the current transaction."""
    column = getattr(type(entity), field)
    setattr(entity, field, column + delta)
    db.session.flush()


def adjust_by_id(model, entity_id: UUID, field: str, delta: int) -> None:
    """Like :func:`adjust` for a row that is not loaded in the session."""
    column = getattr(model, field)
    db.session.execute(
        db.update(model)
        .where(model.id == entity_id)
        .values({column: column + delta})
        .execution_options(synchronize_session=False)
    )


def grouped_counts(key_column, *criteria) -> list[tuple[UUID, int]]:
    """Return ``(key, number of rows)`` pairs for the rows matching ``criteria``."""
    return (
        db.session.query(key_column, db.func.count())
        .filter(*criteria)
        .group_by(key_column)
        .all()
    )


def recount_reviews(item_id: UUID) -> None:
    """Recompute an item's average ``rating`` and ``reviews_count`` from its reviews."""
    average, count = (
        db.session.query(db.func.avg(MarketplaceReview.rating), db.func.count(MarketplaceReview.id))
        .filter(MarketplaceReview.item_id == item_id)
        .one()
    )
    db.session.execute(
        db.update(MarketplaceItem)
        .where(MarketplaceItem.id == item_id)
        .values(
            rating=round(float(average), 2) if average is not None else None,
            reviews_count=count,
        )
        .execution_options(synchronize_session=False)
    )
