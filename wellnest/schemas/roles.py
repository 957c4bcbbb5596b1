"""Role schemas."""

from __future__ import annotations

from marshmallow import Schema, fields, validate
from marshmallow_sqlalchemy import SQLAlchemyAutoSchema

from ..models import Role, UserRole

ROLE_NAME = validate.And(
    validate.Length(min=1, max=50),
    validate.Regexp(r"^[A-Za-z0-9_-]+$", error="Only letters, digits, '_' and '-' are allowed."),
)


class RoleSchema(SQLAlchemyAutoSchema):
    class Meta:
        model = Role


class UserRoleSchema(SQLAlchemyAutoSchema):
    role = fields.Nested(RoleSchema)

    class Meta:
        model = UserRole
        include_fk = True


class RoleCreateSchema(Schema):
    name = fields.String(required=True, validate=ROLE_NAME)
    description = fields.String(allow_none=True, validate=validate.Length(max=500))
    permissions = fields.Dict(keys=fields.String(), allow_none=True)
    is_active = fields.Boolean()


class RoleUpdateSchema(RoleCreateSchema):
    """Partial update; every field is optional."""

    name = fields.String(validate=ROLE_NAME)


class RoleAssignSchema(Schema):
    role_id = fields.UUID(required=True)
