"""
Routes for challenges.

Creators manage their challenges; any user may join a draft or active
challenge, record daily progress while participating and read the
leaderboard.
"""

from __future__ import annotations

from uuid import UUID

from flask import Blueprint

from ..auth import current_user_id, login_required
from ..schemas.challenges import (
    ChallengeCreateSchema,
    ChallengeListQuerySchema,
    ChallengeProgressSchema,
    ChallengeSchema,
    ChallengeUpdateSchema,
    ProgressCreateSchema,
    ProgressQuerySchema,
)
from ..schemas.common import page_payload
from ..services import challenge_service
from . import json_body, page_args, query_args

challenges_bp = Blueprint("challenges", __name__)


@challenges_bp.route("/challenges", methods=["POST"])
@login_required
def create_challenge() -> tuple[dict, int]:
    """Create a challenge. ``end_date`` is derived from the start and duration."""
    challenge = challenge_service.create_challenge(current_user_id(), json_body(ChallengeCreateSchema()))
    return ChallengeSchema().dump(challenge), 201


@challenges_bp.route("/challenges", methods=["GET"])
@login_required
def list_challenges() -> tuple[dict, int]:
    page, limit = page_args()
    filters = query_args(ChallengeListQuerySchema())
    result = challenge_service.list_public_challenges(
        page,
        limit,
        challenge_type=filters.get("type"),
        difficulty=filters.get("difficulty"),
        status=filters.get("status"),
    )
    return page_payload(result, "challenges", ChallengeSchema(many=True)), 200


@challenges_bp.route("/challenges/created", methods=["GET"])
@login_required
def list_created() -> tuple[dict, int]:
    page, limit = page_args()
    result = challenge_service.list_by_creator(current_user_id(), page, limit)
    return page_payload(result, "challenges", ChallengeSchema(many=True)), 200


@challenges_bp.route("/challenges/joined", methods=["GET"])
@login_required
def list_joined() -> tuple[dict, int]:
    page, limit = page_args()
    result = challenge_service.list_by_participant(current_user_id(), page, limit)
    return page_payload(result, "challenges", ChallengeSchema(many=True)), 200


@challenges_bp.route("/challenges/<uuid:challenge_id>", methods=["GET"])
@login_required
def get_challenge(challenge_id: UUID) -> tuple[dict, int]:
    return ChallengeSchema().dump(challenge_service.find_challenge(challenge_id)), 200


@challenges_bp.route("/challenges/<uuid:challenge_id>", methods=["PATCH"])
@login_required
def update_challenge(challenge_id: UUID) -> tuple[dict, int]:
    patch = json_body(ChallengeUpdateSchema(), partial=True)
    challenge = challenge_service.update_challenge(challenge_id, current_user_id(), patch)
    return ChallengeSchema().dump(challenge), 200


@challenges_bp.route("/challenges/<uuid:challenge_id>", methods=["DELETE"])
@login_required
def delete_challenge(challenge_id: UUID) -> tuple[str, int]:
    challenge_service.remove_challenge(challenge_id, current_user_id())
    return "", 204


@challenges_bp.route("/challenges/<uuid:challenge_id>/join", methods=["POST"])
@login_required
def join_challenge(challenge_id: UUID) -> tuple[dict, int]:
    challenge = challenge_service.join_challenge(challenge_id, current_user_id())
    return ChallengeSchema().dump(challenge), 200


@challenges_bp.route("/challenges/<uuid:challenge_id>/leave", methods=["POST"])
@login_required
def leave_challenge(challenge_id: UUID) -> tuple[str, int]:
    challenge_service.leave_challenge(challenge_id, current_user_id())
    return "", 204


@challenges_bp.route("/challenges/<uuid:challenge_id>/progress", methods=["POST"])
@login_required
def record_progress(challenge_id: UUID) -> tuple[dict, int]:
    """Record (or overwrite) the caller's progress for one day."""
    progress = challenge_service.record_progress(challenge_id, current_user_id(), json_body(ProgressCreateSchema()))
    return ChallengeProgressSchema().dump(progress), 200


@challenges_bp.route("/challenges/<uuid:challenge_id>/progress", methods=["GET"])
@login_required
def get_progress(challenge_id: UUID) -> tuple[dict, int]:
    """Progress of the caller, or of ``?user_id=`` when given."""
    user_id = query_args(ProgressQuerySchema()).get("user_id") or current_user_id()
    rows, summary = challenge_service.user_progress(challenge_id, user_id)
    return {"progress": ChallengeProgressSchema(many=True).dump(rows), "summary": summary}, 200


@challenges_bp.route("/challenges/<uuid:challenge_id>/leaderboard", methods=["GET"])
@login_required
def get_leaderboard(challenge_id: UUID) -> tuple[dict, int]:
    return {"leaderboard": challenge_service.leaderboard(challenge_id)}, 200
