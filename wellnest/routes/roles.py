"""
Routes for roles.

``/roles`` manages the role catalogue; ``/users/<id>/roles`` lists and
changes the roles a user holds. Every endpoint requires a bearer token.
"""

from __future__ import annotations

from uuid import UUID

from flask import Blueprint

from ..auth import login_required
from ..schemas.roles import RoleAssignSchema, RoleCreateSchema, RoleSchema, RoleUpdateSchema, UserRoleSchema
from ..services import role_service
from . import json_body

roles_bp = Blueprint("roles", __name__)


@roles_bp.route("/roles", methods=["POST"])
@login_required
def create_role() -> tuple[dict, int]:
    """Create a role. Names are unique."""
    role = role_service.create_role(json_body(RoleCreateSchema()))
    return RoleSchema().dump(role), 201


@roles_bp.route("/roles", methods=["GET"])
@login_required
def list_roles() -> tuple[dict, int]:
    return {"roles": RoleSchema(many=True).dump(role_service.list_roles())}, 200


@roles_bp.route("/roles/<uuid:role_id>", methods=["GET"])
@login_required
def get_role(role_id: UUID) -> tuple[dict, int]:
    return RoleSchema().dump(role_service.find_role(role_id)), 200


@roles_bp.route("/roles/<uuid:role_id>", methods=["PATCH"])
@login_required
def update_role(role_id: UUID) -> tuple[dict, int]:
    role = role_service.update_role(role_id, json_body(RoleUpdateSchema(), partial=True))
    return RoleSchema().dump(role), 200


@roles_bp.route("/roles/<uuid:role_id>", methods=["DELETE"])
@login_required
def delete_role(role_id: UUID) -> tuple[str, int]:
    role_service.remove_role(role_id)
    return "", 204


@roles_bp.route("/users/<uuid:user_id>/roles", methods=["GET"])
@login_required
def list_user_roles(user_id: UUID) -> tuple[dict, int]:
    assignments = role_service.list_user_roles(user_id)
    return {"roles": UserRoleSchema(many=True).dump(assignments)}, 200


@roles_bp.route("/users/<uuid:user_id>/roles", methods=["POST"])
@login_required
def assign_role(user_id: UUID) -> tuple[dict, int]:
    data = json_body(RoleAssignSchema())
    return UserRoleSchema().dump(role_service.assign_role(user_id, data["role_id"])), 201


@roles_bp.route("/users/<uuid:user_id>/roles/<uuid:role_id>", methods=["DELETE"])
@login_required
def revoke_role(user_id: UUID, role_id: UUID) -> tuple[str, int]:
    role_service.revoke_role(user_id, role_id)
    return "", 204
