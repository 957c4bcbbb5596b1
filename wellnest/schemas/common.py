"""Schemas shared by several resources."""

from __future__ import annotations

from marshmallow import EXCLUDE, Schema, fields, validate, validates_schema, ValidationError
from marshmallow_sqlalchemy import SQLAlchemyAutoSchema

from ..models import User


class QuerySchema(Schema):
    """Base for query-string schemas; unrelated parameters are ignored."""

    class Meta:
        unknown = EXCLUDE


class PaginationSchema(QuerySchema):
    page = fields.Integer(load_default=1, validate=validate.Range(min=1))
    limit = fields.Integer(load_default=20, validate=validate.Range(min=1, max=100))


class DateRangeSchema(QuerySchema):
    start_date = fields.Date(required=True)
    end_date = fields.Date(required=True)

    @validates_schema
    def check_order(self, data, **kwargs):
        if data["end_date"] < data["start_date"]:
            raise ValidationError("end_date must not be before start_date.", "end_date")


class UserSummarySchema(SQLAlchemyAutoSchema):
    """Public projection of a user embedded in other resources."""

    class Meta:
        model = User
        fields = ("id", "name", "email", "profile_image")


def non_empty_mapping(value) -> bool:
    """Validator for free-form JSON payload columns."""
    if not value:
        raise ValidationError("Must be a non-empty object.")
    return True


def page_payload(page, key: str, schema) -> dict:
    """Serialise a :class:`~wellnest.services.pagination.Page`."""
    return {
        key: schema.dump(page.items),
        "total": page.total,
        "page": page.page,
        "limit": page.limit,
        "total_pages": page.total_pages,
    }
