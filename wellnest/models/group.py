"""Community groups and their memberships."""

from __future__ import annotations

import enum
from datetime import datetime
from typing import Optional

from ..db import db
from .base import IdentityMixin


class GroupType(enum.Enum):
    PUBLIC = "public"
    PRIVATE = "private"
    INVITE_ONLY = "invite_only"


class GroupCategory(enum.Enum):
    FITNESS = "fitness"
    NUTRITION = "nutrition"
    MENTAL_HEALTH = "mental_health"
    WEIGHT_LOSS = "weight_loss"
    MUSCLE_BUILDING = "muscle_building"
    RUNNING = "running"
    YOGA = "yoga"
    GENERAL = "general"


class MembershipRole(enum.Enum):
    OWNER = "owner"
    ADMIN = "admin"
    MODERATOR = "moderator"
    MEMBER = "member"


class MembershipStatus(enum.Enum):
    PENDING = "pending"
    ACTIVE = "active"
    BANNED = "banned"
    LEFT = "left"


class Group(IdentityMixin, db.Model):
    """A group of users sharing a wellness interest.

    ``member_count`` mirrors the number of memberships whose status is
    ``active``; pending requests are not counted until approved.
    """

    __allow_unmapped__ = True
    __tablename__ = "groups"

    owner_id = db.Column(db.Uuid, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    name: str = db.Column(db.String(200), nullable=False)
    description: Optional[str] = db.Column(db.Text)
    type: GroupType = db.Column(db.Enum(GroupType), nullable=False, default=GroupType.PUBLIC)
    category: GroupCategory = db.Column(db.Enum(GroupCategory), nullable=False, default=GroupCategory.GENERAL)
    image_url: Optional[str] = db.Column(db.String(500))
    cover_image_url: Optional[str] = db.Column(db.String(500))
    rules = db.Column(db.JSON)
    tags = db.Column(db.JSON)
    settings = db.Column(db.JSON)
    member_count: int = db.Column(db.Integer, nullable=False, default=0)
    max_members: Optional[int] = db.Column(db.Integer)
    is_active: bool = db.Column(db.Boolean, nullable=False, default=True)
    is_featured: bool = db.Column(db.Boolean, nullable=False, default=False)

    owner = db.relationship("User")
    memberships = db.relationship("GroupMembership", back_populates="group", passive_deletes=True)

    __table_args__ = (db.Index("ix_groups_type_category_active", "type", "category", "is_active"),)

    def __repr__(self) -> str:
        return f"<Group {self.name}>"


class GroupMembership(IdentityMixin, db.Model):
    __allow_unmapped__ = True
    __tablename__ = "group_memberships"

    group_id = db.Column(db.Uuid, db.ForeignKey("groups.id", ondelete="CASCADE"), nullable=False)
    user_id = db.Column(db.Uuid, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    role: MembershipRole = db.Column(db.Enum(MembershipRole), nullable=False, default=MembershipRole.MEMBER)
    status: MembershipStatus = db.Column(
        db.Enum(MembershipStatus), nullable=False, default=MembershipStatus.PENDING
    )
    joined_at: Optional[datetime] = db.Column(db.DateTime)
    join_message: Optional[str] = db.Column(db.Text)
    permissions = db.Column(db.JSON)

    group = db.relationship("Group", back_populates="memberships")
    user = db.relationship("User")

    # One membership row per user per group; re-joining reuses it.
    __table_args__ = (db.UniqueConstraint("group_id", "user_id", name="uix_group_member"),)

    def __repr__(self) -> str:
        return f"<GroupMembership group={self.group_id} user={self.user_id} {self.status.value}>"
