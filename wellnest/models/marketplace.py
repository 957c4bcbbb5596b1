"""Marketplace listings, reviews, favourites and orders.

Money columns are fixed-point ``Numeric`` values. ``available_slots`` and
``sold_count`` are changed together by a single guarded ``UPDATE`` when
an order is placed so that concurrent buyers cannot oversell an item.
"""

from __future__ import annotations

import enum
import uuid
from decimal import Decimal
from typing import Optional

from ..db import db
from .base import IdentityMixin, utcnow


class MarketplaceCategory(enum.Enum):
    SUPPLEMENTS = "supplements"
    FITNESS_EQUIPMENT = "fitness_equipment"
    NUTRITION = "nutrition"
    WELLNESS_PRODUCTS = "wellness_products"
    CLOTHING = "clothing"
    BOOKS_GUIDES = "books_guides"
    SERVICES = "services"
    COACHING = "coaching"
    MEAL_PLANS = "meal_plans"
    WORKOUT_PROGRAMS = "workout_programs"


class ItemCondition(enum.Enum):
    NEW = "new"
    LIKE_NEW = "like_new"
    GOOD = "good"
    FAIR = "fair"
    DIGITAL = "digital"


class ListingStatus(enum.Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    SOLD_OUT = "sold_out"
    PENDING = "pending"
    REMOVED = "removed"


class OrderStatus(enum.Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"
    REFUNDED = "refunded"


class MarketplaceItem(IdentityMixin, db.Model):
    __allow_unmapped__ = True
    __tablename__ = "marketplace_items"

    user_id = db.Column(db.Uuid, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    title: str = db.Column(db.String(255), nullable=False)
    description: str = db.Column(db.Text, nullable=False)
    category: MarketplaceCategory = db.Column(db.Enum(MarketplaceCategory), nullable=False)
    price: Decimal = db.Column(db.Numeric(10, 2), nullable=False)
    available_slots: int = db.Column(db.Integer, nullable=False, default=1)
    sold_count: int = db.Column(db.Integer, nullable=False, default=0)
    condition: ItemCondition = db.Column(db.Enum(ItemCondition), nullable=False, default=ItemCondition.NEW)
    status: ListingStatus = db.Column(db.Enum(ListingStatus), nullable=False, default=ListingStatus.ACTIVE)
    images = db.Column(db.JSON)
    tags = db.Column(db.JSON)
    location: Optional[str] = db.Column(db.String(200))
    is_digital: bool = db.Column(db.Boolean, nullable=False, default=False)
    is_featured: bool = db.Column(db.Boolean, nullable=False, default=False)
    specifications = db.Column(db.JSON)
    brand: Optional[str] = db.Column(db.String(100))
    shipping_info: Optional[str] = db.Column(db.Text)
    shipping_cost: Optional[Decimal] = db.Column(db.Numeric(8, 2))
    views_count: int = db.Column(db.Integer, nullable=False, default=0)
    favorites_count: int = db.Column(db.Integer, nullable=False, default=0)
    # Average review rating, recomputed whenever a review is added
    rating: Optional[float] = db.Column(db.Float)
    reviews_count: int = db.Column(db.Integer, nullable=False, default=0)

    seller = db.relationship("User")

    __table_args__ = (
        db.Index("ix_marketplace_items_category_status_created", "category", "status", "created_at"),
        db.Index("ix_marketplace_items_user_status", "user_id", "status"),
    )

    def __repr__(self) -> str:
        return f"<MarketplaceItem {self.title}>"


class MarketplaceReview(IdentityMixin, db.Model):
    __allow_unmapped__ = True
    __tablename__ = "marketplace_reviews"

    item_id = db.Column(db.Uuid, db.ForeignKey("marketplace_items.id", ondelete="CASCADE"), nullable=False)
    user_id = db.Column(db.Uuid, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    rating: int = db.Column(db.Integer, nullable=False)
    comment: Optional[str] = db.Column(db.Text)
    images = db.Column(db.JSON)
    is_verified_purchase: bool = db.Column(db.Boolean, nullable=False, default=False)

    reviewer = db.relationship("User")

    # One review per user per item
    __table_args__ = (db.UniqueConstraint("item_id", "user_id", name="uix_review_item_user"),)


class MarketplaceFavorite(db.Model):
    __allow_unmapped__ = True
    __tablename__ = "marketplace_favorites"

    id = db.Column(db.Uuid, primary_key=True, default=uuid.uuid4)
    item_id = db.Column(db.Uuid, db.ForeignKey("marketplace_items.id", ondelete="CASCADE"), nullable=False)
    user_id = db.Column(db.Uuid, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    item = db.relationship("MarketplaceItem")

    __table_args__ = (db.UniqueConstraint("item_id", "user_id", name="uix_favorite_item_user"),)


class MarketplaceOrder(IdentityMixin, db.Model):
    """A purchase of one or more slots of an item.

    Prices are snapshotted at order time so later listing edits do not
    rewrite order history.
    """

    __allow_unmapped__ = True
    __tablename__ = "marketplace_orders"

    item_id = db.Column(db.Uuid, db.ForeignKey("marketplace_items.id", ondelete="SET NULL"), nullable=True)
    buyer_id = db.Column(db.Uuid, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    seller_id = db.Column(db.Uuid, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    quantity: int = db.Column(db.Integer, nullable=False)
    unit_price: Decimal = db.Column(db.Numeric(10, 2), nullable=False)
    total_price: Decimal = db.Column(db.Numeric(10, 2), nullable=False)
    shipping_cost: Optional[Decimal] = db.Column(db.Numeric(8, 2))
    status: OrderStatus = db.Column(db.Enum(OrderStatus), nullable=False, default=OrderStatus.PENDING)
    notes: Optional[str] = db.Column(db.Text)
    shipping_address = db.Column(db.JSON)
    tracking_number: Optional[str] = db.Column(db.String(100))

    item = db.relationship("MarketplaceItem")

    __table_args__ = (
        db.Index("ix_marketplace_orders_buyer", "buyer_id", "status", "created_at"),
        db.Index("ix_marketplace_orders_seller", "seller_id", "status", "created_at"),
    )
