"""
Routes for user profiles.

Registering with ``POST /users`` is open; every other endpoint requires
a bearer token, and profiles can only be changed by their owner.
"""

from __future__ import annotations

from uuid import UUID

from flask import Blueprint

from ..auth import current_user, current_user_id, login_required
from ..schemas.common import page_payload
from ..schemas.users import UserCreateSchema, UserSchema, UserUpdateSchema
from ..services import user_service
from . import json_body, page_args

users_bp = Blueprint("users", __name__)


@users_bp.route("/users", methods=["POST"])
def create_user() -> tuple[dict, int]:
    """Register a new user. Emails must be unique."""
    user = user_service.create_user(json_body(UserCreateSchema()))
    return UserSchema().dump(user), 201


@users_bp.route("/users", methods=["GET"])
@login_required
def list_users() -> tuple[dict, int]:
    page, limit = page_args()
    result = user_service.list_users(page, limit)
    return page_payload(result, "users", UserSchema(many=True)), 200


@users_bp.route("/users/me", methods=["GET"])
@login_required
def get_me() -> tuple[dict, int]:
    return UserSchema().dump(current_user()), 200


@users_bp.route("/users/<uuid:user_id>", methods=["GET"])
@login_required
def get_user(user_id: UUID) -> tuple[dict, int]:
    return UserSchema().dump(user_service.find_user(user_id)), 200


@users_bp.route("/users/<uuid:user_id>", methods=["PATCH"])
@login_required
def update_user(user_id: UUID) -> tuple[dict, int]:
    patch = json_body(UserUpdateSchema(), partial=True)
    user = user_service.update_user(user_id, current_user_id(), patch)
    return UserSchema().dump(user), 200


@users_bp.route("/users/<uuid:user_id>", methods=["DELETE"])
@login_required
def delete_user(user_id: UUID) -> tuple[str, int]:
    user_service.remove_user(user_id, current_user_id())
    return "", 204
