"""
Routes for groups and memberships.

Any member can join or leave; owners and admins manage the group,
approve pending requests and change member roles.
"""

from __future__ import annotations

from uuid import UUID

from flask import Blueprint

from ..auth import current_user_id, login_required
from ..schemas.common import page_payload
from ..schemas.groups import (
    GroupCreateSchema,
    GroupListQuerySchema,
    GroupMembershipSchema,
    GroupSchema,
    GroupUpdateSchema,
    JoinGroupSchema,
    MemberListQuerySchema,
    MemberRoleSchema,
)
from ..services import group_service
from . import json_body, page_args, query_args

groups_bp = Blueprint("groups", __name__)


@groups_bp.route("/groups", methods=["POST"])
@login_required
def create_group() -> tuple[dict, int]:
    group = group_service.create_group(current_user_id(), json_body(GroupCreateSchema()))
    return GroupSchema().dump(group), 201


@groups_bp.route("/groups", methods=["GET"])
@login_required
def list_groups() -> tuple[dict, int]:
    page, limit = page_args()
    filters = query_args(GroupListQuerySchema())
    result = group_service.list_groups(
        page,
        limit,
        category=filters.get("category"),
        group_type=filters.get("type"),
        search=filters.get("search"),
    )
    return page_payload(result, "groups", GroupSchema(many=True)), 200


@groups_bp.route("/groups/<uuid:group_id>", methods=["GET"])
@login_required
def get_group(group_id: UUID) -> tuple[dict, int]:
    return GroupSchema().dump(group_service.find_group(group_id)), 200


@groups_bp.route("/groups/<uuid:group_id>", methods=["PATCH"])
@login_required
def update_group(group_id: UUID) -> tuple[dict, int]:
    patch = json_body(GroupUpdateSchema(), partial=True)
    group = group_service.update_group(group_id, current_user_id(), patch)
    return GroupSchema().dump(group), 200


@groups_bp.route("/groups/<uuid:group_id>", methods=["DELETE"])
@login_required
def delete_group(group_id: UUID) -> tuple[str, int]:
    group_service.remove_group(group_id, current_user_id())
    return "", 204


@groups_bp.route("/groups/<uuid:group_id>/join", methods=["POST"])
@login_required
def join_group(group_id: UUID) -> tuple[dict, int]:
    data = json_body(JoinGroupSchema())
    membership = group_service.join_group(group_id, current_user_id(), data.get("join_message"))
    return GroupMembershipSchema().dump(membership), 201


@groups_bp.route("/groups/<uuid:group_id>/leave", methods=["POST"])
@login_required
def leave_group(group_id: UUID) -> tuple[str, int]:
    group_service.leave_group(group_id, current_user_id())
    return "", 204


@groups_bp.route("/groups/<uuid:group_id>/members", methods=["GET"])
@login_required
def list_members(group_id: UUID) -> tuple[dict, int]:
    page, limit = page_args()
    status = query_args(MemberListQuerySchema())["status"]
    result = group_service.list_members(group_id, status, page, limit)
    return page_payload(result, "members", GroupMembershipSchema(many=True)), 200


@groups_bp.route("/groups/<uuid:group_id>/members/<uuid:user_id>/approve", methods=["POST"])
@login_required
def approve_member(group_id: UUID, user_id: UUID) -> tuple[dict, int]:
    membership = group_service.approve_member(group_id, user_id, current_user_id())
    return GroupMembershipSchema().dump(membership), 200


@groups_bp.route("/groups/<uuid:group_id>/members/<uuid:user_id>", methods=["PATCH"])
@login_required
def update_member_role(group_id: UUID, user_id: UUID) -> tuple[dict, int]:
    role = json_body(MemberRoleSchema())["role"]
    membership = group_service.update_member_role(group_id, user_id, current_user_id(), role)
    return GroupMembershipSchema().dump(membership), 200
