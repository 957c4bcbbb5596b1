"""Marketplace schemas."""

from __future__ import annotations

from marshmallow import Schema, ValidationError, fields, validate, validates_schema
from marshmallow_sqlalchemy import SQLAlchemyAutoSchema

from ..models import (
    ItemCondition,
    ListingStatus,
    MarketplaceCategory,
    MarketplaceFavorite,
    MarketplaceItem,
    MarketplaceOrder,
    MarketplaceReview,
    OrderStatus,
)
from .common import QuerySchema, UserSummarySchema

SORT_FIELDS = ("created_at", "price", "views_count", "favorites_count", "rating")


class MarketplaceItemSchema(SQLAlchemyAutoSchema):
    """Schema for serialising ``MarketplaceItem`` objects."""

    category = fields.Enum(MarketplaceCategory, by_value=True)
    condition = fields.Enum(ItemCondition, by_value=True)
    status = fields.Enum(ListingStatus, by_value=True)
    price = fields.Float()
    shipping_cost = fields.Float(allow_none=True)
    seller = fields.Nested(UserSummarySchema)

    class Meta:
        model = MarketplaceItem
        include_fk = True


class MarketplaceReviewSchema(SQLAlchemyAutoSchema):
    reviewer = fields.Nested(UserSummarySchema)

    class Meta:
        model = MarketplaceReview
        include_fk = True


class MarketplaceFavoriteSchema(SQLAlchemyAutoSchema):
    item = fields.Nested(MarketplaceItemSchema, exclude=("seller",))

    class Meta:
        model = MarketplaceFavorite
        include_fk = True


class MarketplaceOrderSchema(SQLAlchemyAutoSchema):
    status = fields.Enum(OrderStatus, by_value=True)
    unit_price = fields.Float()
    total_price = fields.Float()
    shipping_cost = fields.Float(allow_none=True)
    item = fields.Nested(MarketplaceItemSchema, only=("id", "title", "category", "images"), allow_none=True)

    class Meta:
        model = MarketplaceOrder
        include_fk = True


class ItemCreateSchema(Schema):
    title = fields.String(required=True, validate=validate.Length(min=1, max=255))
    description = fields.String(required=True, validate=validate.Length(min=1, max=5000))
    category = fields.Enum(MarketplaceCategory, by_value=True, required=True)
    price = fields.Decimal(required=True, places=2, validate=validate.Range(min=0))
    available_slots = fields.Integer(load_default=1, validate=validate.Range(min=0))
    condition = fields.Enum(ItemCondition, by_value=True, load_default=ItemCondition.NEW)
    images = fields.List(fields.URL(), validate=validate.Length(max=10))
    tags = fields.List(fields.String(validate=validate.Length(max=50)))
    location = fields.String(validate=validate.Length(max=200))
    is_digital = fields.Boolean(load_default=False)
    specifications = fields.Dict(keys=fields.String())
    brand = fields.String(validate=validate.Length(max=100))
    shipping_info = fields.String(validate=validate.Length(max=1000))
    shipping_cost = fields.Decimal(places=2, validate=validate.Range(min=0))


class ItemUpdateSchema(ItemCreateSchema):
    title = fields.String(validate=validate.Length(min=1, max=255))
    description = fields.String(validate=validate.Length(min=1, max=5000))
    category = fields.Enum(MarketplaceCategory, by_value=True)
    price = fields.Decimal(places=2, validate=validate.Range(min=0))
    available_slots = fields.Integer(validate=validate.Range(min=0))
    condition = fields.Enum(ItemCondition, by_value=True)
    is_digital = fields.Boolean()
    status = fields.Enum(ListingStatus, by_value=True)


class ItemBrowseQuerySchema(QuerySchema):
    category = fields.Enum(MarketplaceCategory, by_value=True)
    condition = fields.Enum(ItemCondition, by_value=True)
    min_price = fields.Decimal(validate=validate.Range(min=0))
    max_price = fields.Decimal(validate=validate.Range(min=0))
    location = fields.String(validate=validate.Length(max=200))
    search = fields.String(validate=validate.Length(max=200))
    is_digital = fields.Boolean()
    is_featured = fields.Boolean()
    sort_by = fields.String(load_default="created_at", validate=validate.OneOf(SORT_FIELDS))
    sort_order = fields.String(load_default="desc", validate=validate.OneOf(("asc", "desc")))

    @validates_schema
    def check_price_range(self, data, **kwargs):
        low, high = data.get("min_price"), data.get("max_price")
        if low is not None and high is not None and high < low:
            raise ValidationError("max_price must not be below min_price.", "max_price")


class SellerItemsQuerySchema(QuerySchema):
    status = fields.Enum(ListingStatus, by_value=True)


class ReviewCreateSchema(Schema):
    rating = fields.Integer(required=True, validate=validate.Range(min=1, max=5))
    comment = fields.String(validate=validate.Length(max=2000))
    images = fields.List(fields.URL(), validate=validate.Length(max=5))


class OrderCreateSchema(Schema):
    quantity = fields.Integer(load_default=1, validate=validate.Range(min=1))
    notes = fields.String(validate=validate.Length(max=1000))
    shipping_address = fields.Dict(keys=fields.String())


class OrderStatusSchema(Schema):
    status = fields.Enum(OrderStatus, by_value=True, required=True)
    tracking_number = fields.String(validate=validate.Length(max=100))


class ReviewPaginationSchema(QuerySchema):
    page = fields.Integer(load_default=1, validate=validate.Range(min=1))
    limit = fields.Integer(load_default=10, validate=validate.Range(min=1, max=100))
