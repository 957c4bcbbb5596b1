"""Role catalogue and role assignment.

Role names are unique and case-sensitive. A user holds a role through a
``UserRole`` row; revoking deletes the row, and deleting a role removes
its assignments via ``ON DELETE CASCADE``.
"""
from __future__ import annotations

import logging
from uuid import UUID

from ..db import db
from ..errors import ConflictError, NotFoundError
from ..models import Role, UserRole
from ..util.sanitization import clean_optional
from .pagination import apply_patch, get_or_404
from .user_service import find_user

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ("name", "description", "permissions", "is_active")


def _name_taken(name: str, exclude_id: UUID | None = None) -> bool:
    query = Role.query.filter_by(name=name)
    if exclude_id is not None:
        query = query.filter(Role.id != exclude_id)
    return db.session.query(query.exists()).scalar()


def create_role(data: dict) -> Role:
    if _name_taken(data["name"]):
        raise ConflictError(f"Role '{data['name']}' already exists.")
    role = Role()
    apply_patch(role, data, EDITABLE_FIELDS)
    role.description = clean_optional(role.description)
    db.session.add(role)
    db.session.commit()
    logger.info("Created role %s", role.name)
    return role


def list_roles() -> list[Role]:
    return Role.query.order_by(Role.name).all()


def find_role(role_id: UUID) -> Role:
    return get_or_404(Role, role_id, "Role not found.")


def update_role(role_id: UUID, patch: dict) -> Role:
    role = find_role(role_id)
    if "name" in patch and patch["name"] != role.name and _name_taken(patch["name"], role.id):
        raise ConflictError(f"Role '{patch['name']}' already exists.")
    apply_patch(role, patch, EDITABLE_FIELDS)
    if "description" in patch:
        role.description = clean_optional(patch["description"])
    db.session.commit()
    return role


def remove_role(role_id: UUID) -> None:
    role = find_role(role_id)
    db.session.delete(role)
    db.session.commit()
    logger.info("Deleted role %s", role_id)


def assign_role(user_id: UUID, role_id: UUID) -> UserRole:
    find_user(user_id)
    role = find_role(role_id)
    if not role.is_active:
        raise ConflictError("Inactive roles cannot be assigned.")

    assignment = UserRole.query.filter_by(user_id=user_id, role_id=role.id).first()
    if assignment is not None and assignment.is_active:
        raise ConflictError("User already has this role.")
    if assignment is None:
        assignment = UserRole(user_id=user_id, role_id=role.id)
        db.session.add(assignment)
    assignment.is_active = True
    db.session.commit()
    logger.info("Assigned role %s to user %s", role.name, user_id)
    return assignment


def revoke_role(user_id: UUID, role_id: UUID) -> None:
    assignment = UserRole.query.filter_by(user_id=user_id, role_id=role_id).first()
    if assignment is None:
        raise NotFoundError("User does not have this role.")
    db.session.delete(assignment)
    db.session.commit()


def list_user_roles(user_id: UUID) -> list[UserRole]:
    find_user(user_id)
    return (
        UserRole.query.join(Role)
        .filter(UserRole.user_id == user_id, UserRole.is_active.is_(True))
        .order_by(Role.name)
        .all()
    )
