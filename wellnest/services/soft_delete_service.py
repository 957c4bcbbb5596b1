"""Soft delete utilities.

To preserve historical data without permanently removing records,
posts, comments and groups are *soft deleted*: their ``is_active``
flag is cleared instead of deleting the row. Queries that should only
return live content must filter ``is_active IS TRUE``.

This module defines helper functions that perform the soft delete and
keep the denormalised counters on parent rows consistent. Changes are
flushed to the database session but not committed, allowing the
caller to decide when to commit.
"""
from __future__ import annotations

from ..db import db
from ..models import Comment, Group, Post
from .counters import adjust


def soft_delete_post(post: Post) -> None:
    """Mark a post as deleted.

    Comments and likes are left untouched so that the history behind
    the post's counters survives.
    """
    post.is_active = False
    db.session.flush()


def soft_delete_comment(comment: Comment) -> int:
    """Soft delete a comment and every active reply beneath it.

    The parent post's ``comments_count`` is decremented once for each
    comment that actually changed state, so deleting an already
    deleted reply has no effect on the counter.

    Parameters
    ----------
    comment: Comment
        The comment to be soft deleted.

    Returns
    -------
    int
        The number of comments that were deactivated.
    """
    deactivated = 0
    pending = [comment]
    while pending:
        current = pending.pop()
        if not current.is_active:
            continue
        current.is_active = False
        deactivated += 1
        pending.extend(current.replies)

    if deactivated:
        adjust(comment.post, "comments_count", -deactivated)
    else:
        db.session.flush()
    return deactivated


def soft_delete_group(group: Group) -> None:
    """Mark a group as deleted; memberships are kept for history."""
    group.is_active = False
    db.session.flush()
