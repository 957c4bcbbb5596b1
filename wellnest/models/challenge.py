"""Challenges, their participants and daily progress rows."""

from __future__ import annotations

import enum
from datetime import date
from typing import Optional

from ..db import db
from .base import IdentityMixin


class ChallengeType(enum.Enum):
    STEPS = "steps"
    CALORIES = "calories"
    HYDRATION = "hydration"
    SLEEP = "sleep"
    EXERCISE = "exercise"
    MEDITATION = "meditation"
    CUSTOM = "custom"


class ChallengeStatus(enum.Enum):
    DRAFT = "draft"
    ACTIVE = "active"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class ChallengeDifficulty(enum.Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"
    EXPERT = "expert"


# Participation join table; the composite primary key forbids duplicates.
challenge_participants = db.Table(
    "challenge_participants",
    db.Column("challenge_id", db.Uuid, db.ForeignKey("challenges.id", ondelete="CASCADE"), primary_key=True),
    db.Column("user_id", db.Uuid, db.ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
)


class Challenge(IdentityMixin, db.Model):
    __allow_unmapped__ = True
    __tablename__ = "challenges"

    creator_id = db.Column(db.Uuid, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    title: str = db.Column(db.String(200), nullable=False)
    description: str = db.Column(db.Text, nullable=False)
    type: ChallengeType = db.Column(db.Enum(ChallengeType), nullable=False)
    difficulty: ChallengeDifficulty = db.Column(
        db.Enum(ChallengeDifficulty), nullable=False, default=ChallengeDifficulty.BEGINNER
    )
    # {"target": <number>, "unit": <str>, ...}
    goal = db.Column(db.JSON, nullable=False)
    duration_days: int = db.Column(db.Integer, nullable=False)
    start_date: date = db.Column(db.Date, nullable=False)
    end_date: date = db.Column(db.Date, nullable=False)
    status: ChallengeStatus = db.Column(db.Enum(ChallengeStatus), nullable=False, default=ChallengeStatus.DRAFT)
    is_public: bool = db.Column(db.Boolean, nullable=False, default=False)
    # 0 means unlimited
    max_participants: int = db.Column(db.Integer, nullable=False, default=0)
    rewards = db.Column(db.JSON)
    rules = db.Column(db.JSON)
    image_url: Optional[str] = db.Column(db.Text)

    creator = db.relationship("User")
    participants = db.relationship("User", secondary=challenge_participants, passive_deletes=True)
    progress = db.relationship(
        "ChallengeProgress", back_populates="challenge", cascade="all, delete-orphan", passive_deletes=True
    )

    def __repr__(self) -> str:
        return f"<Challenge {self.title} ({self.status.value})>"


class ChallengeProgress(IdentityMixin, db.Model):
    """One participant's result for one day of a challenge."""

    __allow_unmapped__ = True
    __tablename__ = "challenge_progress"

    challenge_id = db.Column(db.Uuid, db.ForeignKey("challenges.id", ondelete="CASCADE"), nullable=False)
    user_id = db.Column(db.Uuid, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    date = db.Column(db.Date, nullable=False)
    progress_data = db.Column(db.JSON, nullable=False)
    completion_percentage: float = db.Column(db.Float, nullable=False, default=0.0)
    is_completed: bool = db.Column(db.Boolean, nullable=False, default=False)
    notes = db.Column(db.JSON)

    challenge = db.relationship("Challenge", back_populates="progress")
    user = db.relationship("User")

    __table_args__ = (
        db.UniqueConstraint("challenge_id", "user_id", "date", name="uix_challenge_progress_day"),
    )

    def __repr__(self) -> str:
        return f"<ChallengeProgress {self.challenge_id} {self.user_id} {self.date}>"
