"""User account operations."""
from __future__ import annotations

import logging
from uuid import UUID

from ..db import db
from ..errors import ConflictError, ForbiddenError
from ..models import (
    Comment,
    CommentLike,
    Group,
    GroupMembership,
    MarketplaceFavorite,
    MarketplaceItem,
    MarketplaceReview,
    MembershipStatus,
    Post,
    PostLike,
    User,
)
from ..util.sanitization import clean_optional, normalise_email
from .counters import adjust_by_id, grouped_counts, recount_reviews
from .pagination import Page, apply_patch, get_or_404, paginate
from .soft_delete_service import soft_delete_comment

logger = logging.getLogger(__name__)

PROFILE_FIELDS = ("name", "bio", "profile_image", "cover_image", "fitness_goal", "interests")


def create_user(data: dict) -> User:
    """Register a user; emails are unique case-insensitively."""
    email = normalise_email(data["email"])
    if User.query.filter_by(email=email).first():
        raise ConflictError("A user with that email already exists.")

    user = User(email=email)
    apply_patch(user, data, PROFILE_FIELDS)
    user.bio = clean_optional(user.bio)
    if data.get("password"):
        user.set_password(data["password"])
    db.session.add(user)
    db.session.commit()
    logger.info("Created user %s", user.id)
    return user


def list_users(page: int = 1, limit: int = 20) -> Page:
    query = User.query.filter_by(is_active=True).order_by(User.created_at.desc(), User.id)
    return paginate(query, page, limit)


def find_user(user_id: UUID) -> User:
    return get_or_404(User, user_id, "User not found.")


def find_by_email(email: str) -> User | None:
    return User.query.filter_by(email=normalise_email(email)).first()


def update_user(user_id: UUID, requester_id: UUID, patch: dict) -> User:
    user = find_user(user_id)
    if user.id != requester_id:
        raise ForbiddenError("You can only update your own profile.")

    if "email" in patch:
        email = normalise_email(patch["email"])
        existing = User.query.filter_by(email=email).first()
        if existing is not None and existing.id != user.id:
            raise ConflictError("A user with that email already exists.")
        user.email = email

    apply_patch(user, patch, PROFILE_FIELDS)
    if "bio" in patch:
        user.bio = clean_optional(patch["bio"])
    if patch.get("password"):
        user.set_password(patch["password"])
    db.session.commit()
    return user


def remove_user(user_id: UUID, requester_id: UUID) -> None:
    """Hard delete an account; owned rows go with it via ``ON DELETE CASCADE``.

    Likes, memberships, favourites, comments and reviews the user left on
    other people's content are released first so the counters on those
    rows stay in step with what survives the delete.
    """
    user = find_user(user_id)
    if user.id != requester_id:
        raise ForbiddenError("You can only delete your own account.")
    _release_counters(user.id)
    db.session.delete(user)
    db.session.commit()
    logger.info("Deleted user %s", user_id)


def _release_counters(user_id: UUID) -> None:
    released = (
        (Post, "likes_count", PostLike.post_id, (PostLike.user_id == user_id,)),
        (Comment, "likes_count", CommentLike.comment_id, (CommentLike.user_id == user_id,)),
        (
            Group,
            "member_count",
            GroupMembership.group_id,
            (GroupMembership.user_id == user_id, GroupMembership.status == MembershipStatus.ACTIVE),
        ),
        (MarketplaceItem, "favorites_count", MarketplaceFavorite.item_id, (MarketplaceFavorite.user_id == user_id,)),
    )
    for model, field, key, criteria in released:
        for entity_id, count in grouped_counts(key, *criteria):
            adjust_by_id(model, entity_id, field, -count)

    for comment in Comment.query.filter_by(user_id=user_id, is_active=True).all():
        soft_delete_comment(comment)

    reviewed = [item_id for (item_id,) in db.session.query(MarketplaceReview.item_id).filter_by(user_id=user_id)]
    MarketplaceReview.query.filter_by(user_id=user_id).delete(synchronize_session=False)
    for item_id in reviewed:
        recount_reviews(item_id)
