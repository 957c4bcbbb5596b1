"""Comment threads on posts.

Replies reference their parent through ``parent_comment_id``; listings
load one level at a time.
"""
from __future__ import annotations

import logging
from uuid import UUID

from ..db import db
from ..errors import ForbiddenError, NotFoundError, ValidationError
from ..models import Comment, CommentLike, Post
from ..util.sanitization import strip_tags
from .counters import adjust
from .pagination import Page, paginate
from .soft_delete_service import soft_delete_comment
from .user_service import find_user

logger = logging.getLogger(__name__)


def _active_post(post_id: UUID) -> Post:
    post = db.session.get(Post, post_id)
    if post is None or not post.is_active:
        raise NotFoundError("Post not found.")
    return post


def create_comment(post_id: UUID, user_id: UUID, data: dict) -> Comment:
    find_user(user_id)
    post = _active_post(post_id)

    parent_id = data.get("parent_comment_id")
    if parent_id is not None:
        parent = db.session.get(Comment, parent_id)
        if parent is None or not parent.is_active:
            raise NotFoundError("Parent comment not found.")
        if parent.post_id != post.id:
            raise ValidationError(
                "Parent comment belongs to a different post.",
                {"parent_comment_id": ["Must reference a comment on the same post."]},
            )

    comment = Comment(
        post_id=post.id,
        user_id=user_id,
        parent_comment_id=parent_id,
        content=strip_tags(data["content"]),
        media_urls=data.get("media_urls"),
    )
    db.session.add(comment)
    adjust(post, "comments_count", 1)
    db.session.commit()
    return comment


def list_post_comments(post_id: UUID, page: int = 1, limit: int = 50) -> Page:
    """Top-level active comments of a post, newest first."""
    _active_post(post_id)
    query = Comment.query.filter(
        Comment.post_id == post_id,
        Comment.parent_comment_id.is_(None),
        Comment.is_active.is_(True),
    ).order_by(Comment.created_at.desc(), Comment.id)
    return paginate(query, page, limit)


def list_replies(comment_id: UUID) -> list[Comment]:
    comment = find_comment(comment_id)
    return (
        Comment.query.filter_by(parent_comment_id=comment.id, is_active=True)
        .order_by(Comment.created_at.asc(), Comment.id)
        .all()
    )


def find_comment(comment_id: UUID) -> Comment:
    comment = db.session.get(Comment, comment_id)
    if comment is None or not comment.is_active:
        raise NotFoundError("Comment not found.")
    return comment


def update_comment(comment_id: UUID, requester_id: UUID, patch: dict) -> Comment:
    comment = find_comment(comment_id)
    if comment.user_id != requester_id:
        raise ForbiddenError("You can only update your own comments.")
    if "content" in patch:
        comment.content = strip_tags(patch["content"])
    if "media_urls" in patch:
        comment.media_urls = patch["media_urls"]
    db.session.commit()
    return comment


def remove_comment(comment_id: UUID, requester_id: UUID) -> int:
    """Soft delete a comment with its replies; returns how many were removed."""
    comment = find_comment(comment_id)
    if comment.user_id != requester_id:
        raise ForbiddenError("You can only delete your own comments.")
    removed = soft_delete_comment(comment)
    db.session.commit()
    logger.info("Comment %s soft deleted with %d comment(s) in its thread", comment_id, removed)
    return removed


def toggle_like(comment_id: UUID, user_id: UUID) -> dict:
    find_user(user_id)
    comment = find_comment(comment_id)
    existing = CommentLike.query.filter_by(comment_id=comment.id, user_id=user_id).first()
    if existing is not None:
        db.session.delete(existing)
        adjust(comment, "likes_count", -1)
        liked = False
    else:
        db.session.add(CommentLike(comment_id=comment.id, user_id=user_id))
        adjust(comment, "likes_count", 1)
        liked = True
    db.session.commit()
    return {"liked": liked, "likes_count": comment.likes_count}
