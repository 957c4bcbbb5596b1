"""Group and membership schemas."""

from __future__ import annotations

from marshmallow import Schema, fields, validate
from marshmallow_sqlalchemy import SQLAlchemyAutoSchema

from ..models import Group, GroupCategory, GroupMembership, GroupType, MembershipRole, MembershipStatus
from .common import QuerySchema, UserSummarySchema


class GroupSchema(SQLAlchemyAutoSchema):
    """Schema for serialising ``Group`` objects."""

    type = fields.Enum(GroupType, by_value=True)
    category = fields.Enum(GroupCategory, by_value=True)
    owner = fields.Nested(UserSummarySchema)

    class Meta:
        model = Group
        include_fk = True


class GroupMembershipSchema(SQLAlchemyAutoSchema):
    role = fields.Enum(MembershipRole, by_value=True)
    status = fields.Enum(MembershipStatus, by_value=True)
    user = fields.Nested(UserSummarySchema)

    class Meta:
        model = GroupMembership
        include_fk = True


class GroupCreateSchema(Schema):
    name = fields.String(required=True, validate=validate.Length(min=1, max=200))
    description = fields.String(validate=validate.Length(max=2000))
    type = fields.Enum(GroupType, by_value=True, load_default=GroupType.PUBLIC)
    category = fields.Enum(GroupCategory, by_value=True, load_default=GroupCategory.GENERAL)
    image_url = fields.URL()
    cover_image_url = fields.URL()
    rules = fields.List(fields.String(validate=validate.Length(max=500)))
    tags = fields.List(fields.String(validate=validate.Length(max=50)))
    settings = fields.Dict(keys=fields.String())
    max_members = fields.Integer(validate=validate.Range(min=1))


class GroupUpdateSchema(GroupCreateSchema):
    name = fields.String(validate=validate.Length(min=1, max=200))
    type = fields.Enum(GroupType, by_value=True)
    category = fields.Enum(GroupCategory, by_value=True)


class GroupListQuerySchema(QuerySchema):
    category = fields.Enum(GroupCategory, by_value=True)
    type = fields.Enum(GroupType, by_value=True)
    search = fields.String(validate=validate.Length(max=200))


class JoinGroupSchema(Schema):
    join_message = fields.String(validate=validate.Length(max=500))


class MemberListQuerySchema(QuerySchema):
    status = fields.Enum(MembershipStatus, by_value=True, load_default=MembershipStatus.ACTIVE)


class MemberRoleSchema(Schema):
    role = fields.Enum(MembershipRole, by_value=True, required=True)
