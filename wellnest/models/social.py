"""Posts, comments and their like rows.

Posts and comments are content rows: removing them flips ``is_active``
rather than deleting, so likes and reply threads stay referentially
intact. ``likes_count`` and ``comments_count`` are denormalised counters
kept equal to the number of live child rows by the services that add or
remove those rows.
"""

from __future__ import annotations

import enum
import uuid
from typing import Optional

from ..db import db
from .base import IdentityMixin, utcnow


class PostType(enum.Enum):
    TEXT = "text"
    IMAGE = "image"
    VIDEO = "video"
    ACHIEVEMENT = "achievement"
    WORKOUT = "workout"
    MEAL = "meal"
    PROGRESS = "progress"
    HEALTH_LOG = "health_log"


class PostVisibility(enum.Enum):
    PUBLIC = "public"
    FRIENDS = "friends"
    PRIVATE = "private"


class Post(IdentityMixin, db.Model):
    __allow_unmapped__ = True
    __tablename__ = "posts"

    user_id = db.Column(db.Uuid, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    content: str = db.Column(db.Text, nullable=False)
    type: PostType = db.Column(db.Enum(PostType), nullable=False, default=PostType.TEXT)
    visibility: PostVisibility = db.Column(
        db.Enum(PostVisibility), nullable=False, default=PostVisibility.PUBLIC
    )
    media_urls = db.Column(db.JSON)
    tags = db.Column(db.JSON)
    # Sub-type specific payload (workout details, meal info, ...)
    metadata_ = db.Column("metadata", db.JSON)

    likes_count: int = db.Column(db.Integer, nullable=False, default=0)
    comments_count: int = db.Column(db.Integer, nullable=False, default=0)
    shares_count: int = db.Column(db.Integer, nullable=False, default=0)
    is_active: bool = db.Column(db.Boolean, nullable=False, default=True)

    user = db.relationship("User")
    comments = db.relationship("Comment", back_populates="post", passive_deletes=True)

    __table_args__ = (db.Index("ix_posts_visibility_active_created", "visibility", "is_active", "created_at"),)

    def __repr__(self) -> str:
        return f"<Post {self.id} by {self.user_id}>"


class PostLike(db.Model):
    """At most one like per user per post."""

    __allow_unmapped__ = True
    __tablename__ = "post_likes"

    id = db.Column(db.Uuid, primary_key=True, default=uuid.uuid4)
    post_id = db.Column(db.Uuid, db.ForeignKey("posts.id", ondelete="CASCADE"), nullable=False)
    user_id = db.Column(db.Uuid, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    __table_args__ = (db.UniqueConstraint("post_id", "user_id", name="uix_post_like"),)


class Comment(IdentityMixin, db.Model):
    """A comment on a post, optionally replying to another comment."""

    __allow_unmapped__ = True
    __tablename__ = "comments"

    post_id = db.Column(db.Uuid, db.ForeignKey("posts.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = db.Column(db.Uuid, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    parent_comment_id = db.Column(
        db.Uuid, db.ForeignKey("comments.id", ondelete="CASCADE"), nullable=True, index=True
    )
    content: str = db.Column(db.Text, nullable=False)
    media_urls = db.Column(db.JSON)
    likes_count: int = db.Column(db.Integer, nullable=False, default=0)
    is_active: bool = db.Column(db.Boolean, nullable=False, default=True)

    post = db.relationship("Post", back_populates="comments")
    user = db.relationship("User")
    parent_comment: Optional["Comment"] = db.relationship(
        "Comment", remote_side="Comment.id", back_populates="replies"
    )
    replies = db.relationship("Comment", back_populates="parent_comment", passive_deletes=True)

    def __repr__(self) -> str:
        return f"<Comment {self.id} on {self.post_id}>"


class CommentLike(db.Model):
    __allow_unmapped__ = True
    __tablename__ = "comment_likes"

    id = db.Column(db.Uuid, primary_key=True, default=uuid.uuid4)
    comment_id = db.Column(db.Uuid, db.ForeignKey("comments.id", ondelete="CASCADE"), nullable=False)
    user_id = db.Column(db.Uuid, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    __table_args__ = (db.UniqueConstraint("comment_id", "user_id", name="uix_comment_like"),)
