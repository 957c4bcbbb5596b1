"""Routes for comments and reply threads."""

from __future__ import annotations

from uuid import UUID

from flask import Blueprint

from ..auth import current_user_id, login_required
from ..schemas.common import page_payload
from ..schemas.social import CommentCreateSchema, CommentPaginationSchema, CommentSchema, CommentUpdateSchema
from ..services import comment_service
from . import json_body, page_args

comments_bp = Blueprint("comments", __name__)


@comments_bp.route("/posts/<uuid:post_id>/comments", methods=["POST"])
@login_required
def create_comment(post_id: UUID) -> tuple[dict, int]:
    """Comment on a post, or reply when ``parent_comment_id`` is given."""
    comment = comment_service.create_comment(post_id, current_user_id(), json_body(CommentCreateSchema()))
    return CommentSchema().dump(comment), 201


@comments_bp.route("/posts/<uuid:post_id>/comments", methods=["GET"])
@login_required
def list_comments(post_id: UUID) -> tuple[dict, int]:
    page, limit = page_args(CommentPaginationSchema())
    result = comment_service.list_post_comments(post_id, page, limit)
    return page_payload(result, "comments", CommentSchema(many=True)), 200


@comments_bp.route("/comments/<uuid:comment_id>", methods=["GET"])
@login_required
def get_comment(comment_id: UUID) -> tuple[dict, int]:
    return CommentSchema().dump(comment_service.find_comment(comment_id)), 200


@comments_bp.route("/comments/<uuid:comment_id>/replies", methods=["GET"])
@login_required
def list_replies(comment_id: UUID) -> tuple[list[dict], int]:
    return CommentSchema(many=True).dump(comment_service.list_replies(comment_id)), 200


@comments_bp.route("/comments/<uuid:comment_id>", methods=["PATCH"])
@login_required
def update_comment(comment_id: UUID) -> tuple[dict, int]:
    patch = json_body(CommentUpdateSchema(), partial=True)
    comment = comment_service.update_comment(comment_id, current_user_id(), patch)
    return CommentSchema().dump(comment), 200


@comments_bp.route("/comments/<uuid:comment_id>", methods=["DELETE"])
@login_required
def delete_comment(comment_id: UUID) -> tuple[str, int]:
    comment_service.remove_comment(comment_id, current_user_id())
    return "", 204


@comments_bp.route("/comments/<uuid:comment_id>/like", methods=["POST"])
@login_required
def like_comment(comment_id: UUID) -> tuple[dict, int]:
    return comment_service.toggle_like(comment_id, current_user_id()), 200
