"""User schemas."""

from __future__ import annotations

from marshmallow import Schema, fields, validate
from marshmallow_sqlalchemy import SQLAlchemyAutoSchema

from ..models import User


class UserSchema(SQLAlchemyAutoSchema):
    """Schema for serialising ``User`` objects."""

    class Meta:
        model = User
        # Exclude password_hash from the serialised output
        exclude = ("password_hash",)


class UserCreateSchema(Schema):
    email = fields.Email(required=True)
    password = fields.String(load_default=None, validate=validate.Length(min=8, max=128))
    name = fields.String(validate=validate.Length(max=100))
    bio = fields.String(validate=validate.Length(max=1000))
    profile_image = fields.URL()
    cover_image = fields.URL()
    fitness_goal = fields.String(validate=validate.Length(max=100))
    interests = fields.List(fields.String(validate=validate.Length(max=50)))


class UserUpdateSchema(UserCreateSchema):
    """Partial update; every field is optional."""

    email = fields.Email()
