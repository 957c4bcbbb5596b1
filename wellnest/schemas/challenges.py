"""Challenge schemas."""

from __future__ import annotations

from marshmallow import Schema, ValidationError, fields, validate, validates

from marshmallow_sqlalchemy import SQLAlchemyAutoSchema

from ..models import Challenge, ChallengeDifficulty, ChallengeProgress, ChallengeStatus, ChallengeType
from .common import QuerySchema, UserSummarySchema, non_empty_mapping


class ChallengeSchema(SQLAlchemyAutoSchema):
    """Schema for serialising ``Challenge`` objects."""

    type = fields.Enum(ChallengeType, by_value=True)
    difficulty = fields.Enum(ChallengeDifficulty, by_value=True)
    status = fields.Enum(ChallengeStatus, by_value=True)
    creator = fields.Nested(UserSummarySchema)
    participants_count = fields.Method("count_participants")

    class Meta:
        model = Challenge
        include_fk = True

    def count_participants(self, challenge: Challenge) -> int:
        return len(challenge.participants)


class ChallengeProgressSchema(SQLAlchemyAutoSchema):
    class Meta:
        model = ChallengeProgress
        include_fk = True


class ChallengeCreateSchema(Schema):
    title = fields.String(required=True, validate=validate.Length(min=1, max=200))
    description = fields.String(required=True, validate=validate.Length(min=1, max=5000))
    type = fields.Enum(ChallengeType, by_value=True, required=True)
    difficulty = fields.Enum(ChallengeDifficulty, by_value=True, load_default=ChallengeDifficulty.BEGINNER)
    goal = fields.Dict(keys=fields.String(), required=True, validate=non_empty_mapping)
    duration_days = fields.Integer(required=True, validate=validate.Range(min=1, max=365))
    start_date = fields.Date(required=True)
    status = fields.Enum(ChallengeStatus, by_value=True)
    is_public = fields.Boolean(load_default=False)
    max_participants = fields.Integer(load_default=0, validate=validate.Range(min=0))
    rewards = fields.Dict(keys=fields.String())
    rules = fields.List(fields.String(validate=validate.Length(max=500)))
    image_url = fields.URL()

    @validates("goal")
    def validate_goal(self, goal, **kwargs):
        missing = [key for key in ("target", "unit") if key not in goal]
        if missing:
            raise ValidationError(f"Goal must include: {', '.join(missing)}.")
        target = goal["target"]
        if isinstance(target, bool) or not isinstance(target, (int, float)) or target <= 0:
            raise ValidationError("Goal target must be a positive number.")


class ChallengeUpdateSchema(ChallengeCreateSchema):
    title = fields.String(validate=validate.Length(min=1, max=200))
    description = fields.String(validate=validate.Length(min=1, max=5000))
    type = fields.Enum(ChallengeType, by_value=True)
    difficulty = fields.Enum(ChallengeDifficulty, by_value=True)
    goal = fields.Dict(keys=fields.String(), validate=non_empty_mapping)
    duration_days = fields.Integer(validate=validate.Range(min=1, max=365))
    start_date = fields.Date()
    is_public = fields.Boolean()
    max_participants = fields.Integer(validate=validate.Range(min=0))


class ChallengeListQuerySchema(QuerySchema):
    type = fields.Enum(ChallengeType, by_value=True)
    difficulty = fields.Enum(ChallengeDifficulty, by_value=True)
    status = fields.Enum(ChallengeStatus, by_value=True)


class ProgressCreateSchema(Schema):
    date = fields.Date(required=True)
    progress_data = fields.Dict(keys=fields.String(), required=True, validate=non_empty_mapping)
    notes = fields.Dict(keys=fields.String())


class ProgressQuerySchema(QuerySchema):
    user_id = fields.UUID()
