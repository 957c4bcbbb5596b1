"""
Routes for posts.

Private posts are only visible to their author. Deleting a post hides
it rather than removing the row, and liking a post a second time takes
the like back.
"""

from __future__ import annotations

from uuid import UUID

from flask import Blueprint

from ..auth import current_user_id, login_required
from ..schemas.common import page_payload
from ..schemas.social import (
    PostCreateSchema,
    PostListQuerySchema,
    PostSchema,
    PostSearchQuerySchema,
    PostUpdateSchema,
)
from ..services import post_service
from . import json_body, page_args, query_args

posts_bp = Blueprint("posts", __name__)


@posts_bp.route("/posts", methods=["POST"])
@login_required
def create_post() -> tuple[dict, int]:
    post = post_service.create_post(current_user_id(), json_body(PostCreateSchema()))
    return PostSchema().dump(post), 201


@posts_bp.route("/posts", methods=["GET"])
@login_required
def list_posts() -> tuple[dict, int]:
    """List public posts, newest first. Accepts an optional ``type``."""
    page, limit = page_args()
    filters = query_args(PostListQuerySchema())
    result = post_service.list_public_posts(page, limit, filters.get("type"))
    return page_payload(result, "posts", PostSchema(many=True)), 200


@posts_bp.route("/posts/search", methods=["GET"])
@login_required
def search_posts() -> tuple[dict, int]:
    page, limit = page_args()
    text = query_args(PostSearchQuerySchema())["q"]
    result = post_service.search_posts(text, page, limit)
    return page_payload(result, "posts", PostSchema(many=True)), 200


@posts_bp.route("/users/<uuid:user_id>/posts", methods=["GET"])
@login_required
def list_user_posts(user_id: UUID) -> tuple[dict, int]:
    page, limit = page_args()
    result = post_service.list_user_posts(user_id, current_user_id(), page, limit)
    return page_payload(result, "posts", PostSchema(many=True)), 200


@posts_bp.route("/posts/<uuid:post_id>", methods=["GET"])
@login_required
def get_post(post_id: UUID) -> tuple[dict, int]:
    return PostSchema().dump(post_service.find_post(post_id, current_user_id())), 200


@posts_bp.route("/posts/<uuid:post_id>", methods=["PATCH"])
@login_required
def update_post(post_id: UUID) -> tuple[dict, int]:
    patch = json_body(PostUpdateSchema(), partial=True)
    post = post_service.update_post(post_id, current_user_id(), patch)
    return PostSchema().dump(post), 200


@posts_bp.route("/posts/<uuid:post_id>", methods=["DELETE"])
@login_required
def delete_post(post_id: UUID) -> tuple[str, int]:
    post_service.remove_post(post_id, current_user_id())
    return "", 204


@posts_bp.route("/posts/<uuid:post_id>/like", methods=["POST"])
@login_required
def like_post(post_id: UUID) -> tuple[dict, int]:
    return post_service.toggle_like(post_id, current_user_id()), 200


@posts_bp.route("/posts/<uuid:post_id>/stats", methods=["GET"])
@login_required
def post_stats(post_id: UUID) -> tuple[dict, int]:
    return post_service.post_stats(post_id, current_user_id()), 200
