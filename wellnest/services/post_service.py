"""Post operations: soft deletion, visibility rules and toggle likes."""
from __future__ import annotations

import logging
from uuid import UUID

from ..db import db
from ..errors import ForbiddenError, NotFoundError
from ..models import Post, PostLike, PostVisibility
from ..util.sanitization import strip_tags
from .aggregates import EngagementPolicy, simple_engagement_rate
from .counters import adjust
from .pagination import Page, apply_patch, paginate
from .soft_delete_service import soft_delete_post
from .user_service import find_user

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ("type", "visibility", "media_urls", "tags")


def create_post(user_id: UUID, data: dict) -> Post:
    find_user(user_id)
    post = Post(
        user_id=user_id,
        content=strip_tags(data["content"]),
        metadata_=data.get("metadata"),
    )
    apply_patch(post, data, EDITABLE_FIELDS)
    db.session.add(post)
    db.session.commit()
    logger.info("User %s created post %s", user_id, post.id)
    return post


def _newest_first(query):
    return query.order_by(Post.created_at.desc(), Post.id)


def list_public_posts(page: int = 1, limit: int = 20, post_type=None) -> Page:
    query = Post.query.filter_by(is_active=True, visibility=PostVisibility.PUBLIC)
    if post_type is not None:
        query = query.filter_by(type=post_type)
    return paginate(_newest_first(query), page, limit)


def list_user_posts(user_id: UUID, requester_id: UUID, page: int = 1, limit: int = 20) -> Page:
    """A user's posts; strangers only see the public ones."""
    find_user(user_id)
    query = Post.query.filter_by(user_id=user_id, is_active=True)
    if requester_id != user_id:
        query = query.filter_by(visibility=PostVisibility.PUBLIC)
    return paginate(_newest_first(query), page, limit)


def search_posts(text: str, page: int = 1, limit: int = 20) -> Page:
    pattern = f"%{text}%"
    query = Post.query.filter(
        Post.is_active.is_(True),
        Post.visibility == PostVisibility.PUBLIC,
        db.or_(Post.content.ilike(pattern), db.cast(Post.tags, db.String).ilike(pattern)),
    )
    return paginate(_newest_first(query), page, limit)


def find_post(post_id: UUID, requester_id: UUID | None = None) -> Post:
    post = db.session.get(Post, post_id)
    if post is None or not post.is_active:
        raise NotFoundError("Post not found.")
    if post.visibility == PostVisibility.PRIVATE and post.user_id != requester_id:
        raise ForbiddenError("You do not have permission to view this post.")
    return post


def update_post(post_id: UUID, requester_id: UUID, patch: dict) -> Post:
    post = find_post(post_id, requester_id)
    if post.user_id != requester_id:
        raise ForbiddenError("You can only update your own posts.")
    if "content" in patch:
        post.content = strip_tags(patch["content"])
    if "metadata" in patch:
        post.metadata_ = patch["metadata"]
    apply_patch(post, patch, EDITABLE_FIELDS)
    db.session.commit()
    return post


def remove_post(post_id: UUID, requester_id: UUID) -> None:
    post = find_post(post_id, requester_id)
    if post.user_id != requester_id:
        raise ForbiddenError("You can only delete your own posts.")
    soft_delete_post(post)
    db.session.commit()
    logger.info("Post %s soft deleted", post_id)


def toggle_like(post_id: UUID, user_id: UUID) -> dict:
    """Like the post, or undo an existing like."""
    find_user(user_id)
    post = find_post(post_id, user_id)
    existing = PostLike.query.filter_by(post_id=post.id, user_id=user_id).first()
    if existing is not None:
        db.session.delete(existing)
        adjust(post, "likes_count", -1)
        liked = False
    else:
        db.session.add(PostLike(post_id=post.id, user_id=user_id))
        adjust(post, "likes_count", 1)
        liked = True
    db.session.commit()
    return {"liked": liked, "likes_count": post.likes_count}


def post_stats(
    post_id: UUID, requester_id: UUID | None = None, policy: EngagementPolicy = simple_engagement_rate
) -> dict:
    post = find_post(post_id, requester_id)
    return {
        "likes_count": post.likes_count,
        "comments_count": post.comments_count,
        "shares_count": post.shares_count,
        "engagement_rate": policy(post.likes_count, post.comments_count, post.shares_count),
    }
