"""Challenges, participation, daily progress and leaderboards."""
from __future__ import annotations

import logging
from datetime import date
from uuid import UUID

from ..db import db
from ..errors import ConflictError, ForbiddenError, NotFoundError, ValidationError
from ..models import (
    Challenge,
    ChallengeProgress,
    ChallengeStatus,
    User,
    challenge_participants,
    utcnow,
)
from .aggregates import challenge_end_date, completion_percentage, progress_summary, rank_leaderboard
from .pagination import Page, apply_patch, get_or_404, paginate
from .user_service import find_user

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = (
    "title",
    "description",
    "type",
    "difficulty",
    "goal",
    "duration_days",
    "start_date",
    "status",
    "is_public",
    "max_participants",
    "rewards",
    "rules",
    "image_url",
)
JOINABLE_STATUSES = (ChallengeStatus.DRAFT, ChallengeStatus.ACTIVE)


def _today() -> date:
    return utcnow().date()


def _check_start_date(start_date: date, today: date | None) -> None:
    if start_date < (today or _today()):
        raise ValidationError("Start date cannot be in the past.", {"start_date": ["Must be today or later."]})


def create_challenge(creator_id: UUID, data: dict, today: date | None = None) -> Challenge:
    find_user(creator_id)
    _check_start_date(data["start_date"], today)

    challenge = Challenge(creator_id=creator_id)
    apply_patch(challenge, data, EDITABLE_FIELDS)
    challenge.end_date = challenge_end_date(challenge.start_date, challenge.duration_days)
    db.session.add(challenge)
    db.session.commit()
    logger.info("User %s created challenge %s", creator_id, challenge.id)
    return challenge


def _newest_first(query):
    return query.order_by(Challenge.created_at.desc(), Challenge.id)


def list_public_challenges(page=1, limit=20, challenge_type=None, difficulty=None, status=None) -> Page:
    query = Challenge.query.filter_by(is_public=True)
    if challenge_type is not None:
        query = query.filter_by(type=challenge_type)
    if difficulty is not None:
        query = query.filter_by(difficulty=difficulty)
    if status is not None:
        query = query.filter_by(status=status)
    return paginate(_newest_first(query), page, limit)


def list_by_creator(creator_id: UUID, page=1, limit=20) -> Page:
    find_user(creator_id)
    return paginate(_newest_first(Challenge.query.filter_by(creator_id=creator_id)), page, limit)


def list_by_participant(user_id: UUID, page=1, limit=20) -> Page:
    find_user(user_id)
    query = Challenge.query.join(
        challenge_participants, challenge_participants.c.challenge_id == Challenge.id
    ).filter(challenge_participants.c.user_id == user_id)
    return paginate(_newest_first(query), page, limit)


def find_challenge(challenge_id: UUID) -> Challenge:
    return get_or_404(Challenge, challenge_id, "Challenge not found.")


def is_participant(challenge: Challenge, user_id: UUID) -> bool:
    return any(user.id == user_id for user in challenge.participants)


def _guard_mutation(challenge: Challenge, requester_id: UUID, action: str) -> None:
    if challenge.creator_id != requester_id:
        raise ForbiddenError(f"Only the creator can {action} this challenge.")
    if challenge.status == ChallengeStatus.ACTIVE and challenge.participants:
        raise ConflictError(f"Cannot {action} an active challenge with participants.")


def update_challenge(challenge_id: UUID, requester_id: UUID, patch: dict, today: date | None = None) -> Challenge:
    challenge = find_challenge(challenge_id)
    _guard_mutation(challenge, requester_id, "update")
    if "start_date" in patch:
        _check_start_date(patch["start_date"], today)
    apply_patch(challenge, patch, EDITABLE_FIELDS)
    if "start_date" in patch or "duration_days" in patch:
        challenge.end_date = challenge_end_date(challenge.start_date, challenge.duration_days)
    db.session.commit()
    return challenge


def remove_challenge(challenge_id: UUID, requester_id: UUID) -> None:
    challenge = find_challenge(challenge_id)
    _guard_mutation(challenge, requester_id, "delete")
    db.session.delete(challenge)
    db.session.commit()
    logger.info("Challenge %s deleted", challenge_id)


def join_challenge(challenge_id: UUID, user_id: UUID) -> Challenge:
    user = find_user(user_id)
    challenge = find_challenge(challenge_id)
    if challenge.status not in JOINABLE_STATUSES:
        raise ConflictError("Challenge is not available for joining.")
    if is_participant(challenge, user_id):
        raise ConflictError("User is already a participant in this challenge.")
    if challenge.max_participants and len(challenge.participants) >= challenge.max_participants:
        raise ConflictError("Challenge has reached maximum participants.")
    challenge.participants.append(user)
    db.session.commit()
    logger.info("User %s joined challenge %s", user_id, challenge.id)
    return challenge


def leave_challenge(challenge_id: UUID, user_id: UUID) -> None:
    """Leave a challenge, discarding the user's progress rows."""
    challenge = find_challenge(challenge_id)
    user = next((u for u in challenge.participants if u.id == user_id), None)
    if user is None:
        raise NotFoundError("User is not a participant in this challenge.")
    challenge.participants.remove(user)
    ChallengeProgress.query.filter_by(challenge_id=challenge.id, user_id=user_id).delete()
    db.session.commit()


def record_progress(challenge_id: UUID, user_id: UUID, data: dict) -> ChallengeProgress:
    """Create or replace the participant's progress for one day."""
    challenge = find_challenge(challenge_id)
    find_user(user_id)
    if not is_participant(challenge, user_id):
        raise ConflictError("User is not a participant in this challenge.")

    day = data["date"]
    if day < challenge.start_date or day > challenge.end_date:
        raise ValidationError("Progress date is outside the challenge period.", {"date": ["Out of range."]})

    progress = ChallengeProgress.query.filter_by(challenge_id=challenge.id, user_id=user_id, date=day).first()
    if progress is None:
        progress = ChallengeProgress(challenge_id=challenge.id, user_id=user_id, date=day)
        db.session.add(progress)
    progress.progress_data = data["progress_data"]
    progress.notes = data.get("notes")
    percentage = completion_percentage(progress.progress_data, challenge.goal)
    progress.completion_percentage = round(percentage, 2)
    progress.is_completed = percentage >= 100
    db.session.commit()
    return progress


def user_progress(challenge_id: UUID, user_id: UUID) -> tuple[list[ChallengeProgress], dict]:
    challenge = find_challenge(challenge_id)
    find_user(user_id)
    rows = (
        ChallengeProgress.query.filter_by(challenge_id=challenge.id, user_id=user_id)
        .order_by(ChallengeProgress.date.asc())
        .all()
    )
    return rows, progress_summary(rows)


def leaderboard(challenge_id: UUID) -> list[dict]:
    """Rank participants by average completion, then completed days."""
    challenge = find_challenge(challenge_id)
    average = db.func.avg(ChallengeProgress.completion_percentage)
    completed = db.func.sum(db.case((ChallengeProgress.is_completed.is_(True), 1), else_=0))
    rows = (
        db.session.query(
            User.id,
            User.name,
            average.label("average_completion"),
            db.func.count(ChallengeProgress.id).label("total_entries"),
            completed.label("completed_days"),
        )
        .join(ChallengeProgress, ChallengeProgress.user_id == User.id)
        .filter(ChallengeProgress.challenge_id == challenge.id)
        .group_by(User.id, User.name)
        .order_by(average.desc(), completed.desc())
        .all()
    )
    return rank_leaderboard(
        {
            "user": {"id": str(row.id), "name": row.name},
            "average_completion": round(float(row.average_completion or 0), 2),
            "total_entries": int(row.total_entries or 0),
            "completed_days": int(row.completed_days or 0),
        }
        for row in rows
    )
