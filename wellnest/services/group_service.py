"""Groups and their memberships.

A membership row is unique per (group, user) and moves between the
statuses pending, active, banned and left. ``member_count`` always equals
the number of active memberships.
"""
from __future__ import annotations

import logging
from uuid import UUID

from ..db import db
from ..errors import ConflictError, ForbiddenError, NotFoundError
from ..models import Group, GroupMembership, GroupType, MembershipRole, MembershipStatus, utcnow
from ..util.sanitization import clean_optional
from .counters import adjust
from .pagination import Page, apply_patch, paginate
from .soft_delete_service import soft_delete_group
from .user_service import find_user

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = (
    "name",
    "type",
    "category",
    "image_url",
    "cover_image_url",
    "rules",
    "tags",
    "settings",
    "max_members",
)
MANAGER_ROLES = (MembershipRole.OWNER, MembershipRole.ADMIN)


def create_group(owner_id: UUID, data: dict) -> Group:
    """Create a group together with the owner's active membership."""
    find_user(owner_id)
    group = Group(owner_id=owner_id, description=clean_optional(data.get("description")), member_count=1)
    apply_patch(group, data, EDITABLE_FIELDS)
    db.session.add(group)
    db.session.flush()
    db.session.add(
        GroupMembership(
            group_id=group.id,
            user_id=owner_id,
            role=MembershipRole.OWNER,
            status=MembershipStatus.ACTIVE,
            joined_at=utcnow(),
        )
    )
    db.session.commit()
    logger.info("User %s created group %s", owner_id, group.id)
    return group


def list_groups(page: int = 1, limit: int = 20, category=None, group_type=None, search: str | None = None) -> Page:
    query = Group.query.filter_by(is_active=True)
    if category is not None:
        query = query.filter_by(category=category)
    if group_type is not None:
        query = query.filter_by(type=group_type)
    if search:
        pattern = f"%{search}%"
        query = query.filter(db.or_(Group.name.ilike(pattern), Group.description.ilike(pattern)))
    return paginate(query.order_by(Group.created_at.desc(), Group.id), page, limit)


def find_group(group_id: UUID) -> Group:
    group = db.session.get(Group, group_id)
    if group is None or not group.is_active:
        raise NotFoundError("Group not found.")
    return group


def get_membership(group_id: UUID, user_id: UUID) -> GroupMembership | None:
    return GroupMembership.query.filter_by(group_id=group_id, user_id=user_id).first()


def _require_manager(group: Group, user_id: UUID) -> None:
    membership = get_membership(group.id, user_id)
    if (
        membership is None
        or membership.status != MembershipStatus.ACTIVE
        or membership.role not in MANAGER_ROLES
    ):
        raise ForbiddenError("Only group owners and admins can do that.")


def update_group(group_id: UUID, requester_id: UUID, patch: dict) -> Group:
    group = find_group(group_id)
    _require_manager(group, requester_id)
    if "description" in patch:
        group.description = clean_optional(patch["description"])
    apply_patch(group, patch, EDITABLE_FIELDS)
    db.session.commit()
    return group


def remove_group(group_id: UUID, requester_id: UUID) -> None:
    group = find_group(group_id)
    if group.owner_id != requester_id:
        raise ForbiddenError("Only the group owner can delete the group.")
    soft_delete_group(group)
    db.session.commit()
    logger.info("Group %s soft deleted", group_id)


def _check_capacity(group: Group) -> None:
    if group.max_members and group.member_count >= group.max_members:
        raise ConflictError("Group is at maximum capacity.")


def join_group(group_id: UUID, user_id: UUID, join_message: str | None = None) -> GroupMembership:
    """Join or request to join a group.

    Public groups activate the membership at once; private and
    invite-only groups leave it pending until a manager approves it.
    """
    find_user(user_id)
    group = find_group(group_id)
    membership = get_membership(group.id, user_id)

    if membership is not None:
        if membership.status in (MembershipStatus.ACTIVE, MembershipStatus.PENDING):
            raise ConflictError("User is already a member of this group.")
        if membership.status == MembershipStatus.BANNED:
            raise ForbiddenError("User is banned from this group.")
    _check_capacity(group)

    if membership is None:
        membership = GroupMembership(group_id=group.id, user_id=user_id, role=MembershipRole.MEMBER)
        db.session.add(membership)
    else:
        # Rejoining after leaving reuses the row.
        membership.role = MembershipRole.MEMBER
    membership.join_message = clean_optional(join_message)

    if group.type == GroupType.PUBLIC:
        membership.status = MembershipStatus.ACTIVE
        membership.joined_at = utcnow()
        adjust(group, "member_count", 1)
    else:
        membership.status = MembershipStatus.PENDING
        membership.joined_at = None

    db.session.commit()
    logger.info("User %s joined group %s as %s", user_id, group.id, membership.status.value)
    return membership


def leave_group(group_id: UUID, user_id: UUID) -> None:
    group = find_group(group_id)
    membership = get_membership(group.id, user_id)
    if membership is None or membership.status != MembershipStatus.ACTIVE:
        raise NotFoundError("Membership not found.")
    if membership.role == MembershipRole.OWNER:
        raise ForbiddenError("Group owner cannot leave the group.")
    membership.status = MembershipStatus.LEFT
    adjust(group, "member_count", -1)
    db.session.commit()


def list_members(group_id: UUID, status=MembershipStatus.ACTIVE, page: int = 1, limit: int = 20) -> Page:
    group = find_group(group_id)
    query = GroupMembership.query.filter_by(group_id=group.id, status=status).order_by(
        GroupMembership.created_at.asc(), GroupMembership.id
    )
    return paginate(query, page, limit)


def approve_member(group_id: UUID, user_id: UUID, requester_id: UUID) -> GroupMembership:
    group = find_group(group_id)
    _require_manager(group, requester_id)
    membership = get_membership(group.id, user_id)
    if membership is None or membership.status != MembershipStatus.PENDING:
        raise NotFoundError("No pending request for this user.")
    _check_capacity(group)
    membership.status = MembershipStatus.ACTIVE
    membership.joined_at = utcnow()
    adjust(group, "member_count", 1)
    db.session.commit()
    return membership


def update_member_role(group_id: UUID, user_id: UUID, requester_id: UUID, role: MembershipRole) -> GroupMembership:
    group = find_group(group_id)
    _require_manager(group, requester_id)
    membership = get_membership(group.id, user_id)
    if membership is None or membership.status != MembershipStatus.ACTIVE:
        raise NotFoundError("Membership not found.")
    if role == MembershipRole.OWNER or membership.role == MembershipRole.OWNER:
        raise ForbiddenError("The owner role cannot be granted or revoked.")
    membership.role = role
    db.session.commit()
    return membership
