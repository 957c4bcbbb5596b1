"""Post and comment schemas."""

from __future__ import annotations

from marshmallow import Schema, fields, validate
from marshmallow_sqlalchemy import SQLAlchemyAutoSchema

from ..models import Comment, Post, PostType, PostVisibility
from .common import QuerySchema, UserSummarySchema


class PostSchema(SQLAlchemyAutoSchema):
    """Schema for serialising ``Post`` objects."""

    type = fields.Enum(PostType, by_value=True)
    visibility = fields.Enum(PostVisibility, by_value=True)
    metadata = fields.Raw(attribute="metadata_")
    user = fields.Nested(UserSummarySchema)

    class Meta:
        model = Post
        include_fk = True
        exclude = ("metadata_",)


class PostCreateSchema(Schema):
    content = fields.String(required=True, validate=validate.Length(min=1, max=5000))
    type = fields.Enum(PostType, by_value=True, load_default=PostType.TEXT)
    visibility = fields.Enum(PostVisibility, by_value=True, load_default=PostVisibility.PUBLIC)
    media_urls = fields.List(fields.URL(), validate=validate.Length(max=10))
    tags = fields.List(fields.String(validate=validate.Length(max=50)), validate=validate.Length(max=20))
    metadata = fields.Dict(keys=fields.String())


class PostUpdateSchema(PostCreateSchema):
    content = fields.String(validate=validate.Length(min=1, max=5000))
    type = fields.Enum(PostType, by_value=True)
    visibility = fields.Enum(PostVisibility, by_value=True)


class PostListQuerySchema(QuerySchema):
    type = fields.Enum(PostType, by_value=True)


class PostSearchQuerySchema(QuerySchema):
    q = fields.String(required=True, validate=validate.Length(min=1, max=200))


class CommentSchema(SQLAlchemyAutoSchema):
    """Schema for serialising ``Comment`` objects."""

    user = fields.Nested(UserSummarySchema)

    class Meta:
        model = Comment
        include_fk = True


class CommentCreateSchema(Schema):
    content = fields.String(required=True, validate=validate.Length(min=1, max=2000))
    parent_comment_id = fields.UUID(load_default=None)
    media_urls = fields.List(fields.URL(), validate=validate.Length(max=5))


class CommentUpdateSchema(Schema):
    content = fields.String(validate=validate.Length(min=1, max=2000))
    media_urls = fields.List(fields.URL(), validate=validate.Length(max=5))


class CommentPaginationSchema(QuerySchema):
    page = fields.Integer(load_default=1, validate=validate.Range(min=1))
    limit = fields.Integer(load_default=50, validate=validate.Range(min=1, max=100))
