"""Marketplace listings, reviews, favourites and orders.

Stock is tracked per listing in ``available_slots``. Placing an order
decrements it with a single conditional ``UPDATE`` so that two buyers
racing for the last slot cannot both succeed.
"""
from __future__ import annotations

import logging
from decimal import Decimal
from uuid import UUID

from ..db import db
from ..errors import ConflictError, ForbiddenError, NotFoundError
from ..models import (
    ListingStatus,
    MarketplaceFavorite,
    MarketplaceItem,
    MarketplaceOrder,
    MarketplaceReview,
    OrderStatus,
)
from ..util.sanitization import clean_optional, strip_tags
from .counters import adjust, recount_reviews
from .pagination import Page, apply_patch, get_or_404, paginate
from .user_service import find_user

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = (
    "title",
    "category",
    "price",
    "available_slots",
    "condition",
    "images",
    "tags",
    "location",
    "is_digital",
    "specifications",
    "brand",
    "shipping_info",
    "shipping_cost",
    "status",
)
# Seller-driven order transitions. Buyers may only cancel pending orders.
SELLER_TRANSITIONS = {
    OrderStatus.PENDING: (OrderStatus.CONFIRMED, OrderStatus.CANCELLED),
    OrderStatus.CONFIRMED: (OrderStatus.SHIPPED, OrderStatus.CANCELLED),
    OrderStatus.SHIPPED: (OrderStatus.DELIVERED,),
    OrderStatus.DELIVERED: (OrderStatus.REFUNDED,),
}
CENT = Decimal("0.01")


# Items ---------------------------------------------------------------


def create_item(seller_id: UUID, data: dict) -> MarketplaceItem:
    find_user(seller_id)
    item = MarketplaceItem(user_id=seller_id, description=strip_tags(data["description"]))
    apply_patch(item, data, EDITABLE_FIELDS)
    if item.available_slots == 0:
        item.status = ListingStatus.SOLD_OUT
    db.session.add(item)
    db.session.commit()
    logger.info("User %s listed item %s", seller_id, item.id)
    return item


def browse_items(filters: dict, page: int = 1, limit: int = 20) -> Page:
    """Active listings matching ``filters`` in the requested order."""
    query = MarketplaceItem.query.filter(MarketplaceItem.status == ListingStatus.ACTIVE)
    if filters.get("category") is not None:
        query = query.filter(MarketplaceItem.category == filters["category"])
    if filters.get("condition") is not None:
        query = query.filter(MarketplaceItem.condition == filters["condition"])
    if filters.get("min_price") is not None:
        query = query.filter(MarketplaceItem.price >= filters["min_price"])
    if filters.get("max_price") is not None:
        query = query.filter(MarketplaceItem.price <= filters["max_price"])
    if filters.get("location"):
        query = query.filter(MarketplaceItem.location.ilike(f"%{filters['location']}%"))
    if filters.get("search"):
        pattern = f"%{filters['search']}%"
        query = query.filter(
            db.or_(
                MarketplaceItem.title.ilike(pattern),
                MarketplaceItem.description.ilike(pattern),
                MarketplaceItem.brand.ilike(pattern),
            )
        )
    if filters.get("is_digital") is not None:
        query = query.filter(MarketplaceItem.is_digital.is_(filters["is_digital"]))
    if filters.get("is_featured") is not None:
        query = query.filter(MarketplaceItem.is_featured.is_(filters["is_featured"]))

    # sort_by is validated against a whitelist by the query schema
    column = getattr(MarketplaceItem, filters.get("sort_by", "created_at"))
    ordering = column.asc() if filters.get("sort_order") == "asc" else column.desc()
    return paginate(query.order_by(ordering, MarketplaceItem.id), page, limit)


def marketplace_stats() -> dict:
    total_items = MarketplaceItem.query.count()
    active_items = MarketplaceItem.query.filter_by(status=ListingStatus.ACTIVE).count()
    total_orders = MarketplaceOrder.query.count()
    revenue = (
        db.session.query(db.func.coalesce(db.func.sum(MarketplaceOrder.total_price), 0))
        .filter(MarketplaceOrder.status.notin_((OrderStatus.CANCELLED, OrderStatus.REFUNDED)))
        .scalar()
    )
    by_category = (
        db.session.query(MarketplaceItem.category, db.func.count(MarketplaceItem.id))
        .filter(MarketplaceItem.status == ListingStatus.ACTIVE)
        .group_by(MarketplaceItem.category)
        .all()
    )
    return {
        "total_items": total_items,
        "active_items": active_items,
        "total_orders": total_orders,
        "total_revenue": float(revenue or 0),
        "categories_stats": {category.value: count for category, count in by_category},
    }


def list_seller_items(seller_id: UUID, status=None, page: int = 1, limit: int = 20) -> Page:
    find_user(seller_id)
    query = MarketplaceItem.query.filter_by(user_id=seller_id)
    if status is not None:
        query = query.filter_by(status=status)
    return paginate(query.order_by(MarketplaceItem.created_at.desc(), MarketplaceItem.id), page, limit)


def get_item(item_id: UUID) -> MarketplaceItem:
    item = get_or_404(MarketplaceItem, item_id, "Marketplace item not found.")
    if item.status == ListingStatus.REMOVED:
        raise NotFoundError("Marketplace item not found.")
    return item


def view_item(item_id: UUID) -> MarketplaceItem:
    """Load an item for display, counting the view."""
    item = get_item(item_id)
    adjust(item, "views_count", 1)
    db.session.commit()
    return item


def _owned_item(item_id: UUID, requester_id: UUID) -> MarketplaceItem:
    item = get_item(item_id)
    if item.user_id != requester_id:
        raise ForbiddenError("You can only manage your own listings.")
    return item


def update_item(item_id: UUID, requester_id: UUID, patch: dict) -> MarketplaceItem:
    item = _owned_item(item_id, requester_id)
    if "description" in patch:
        item.description = strip_tags(patch["description"])
    apply_patch(item, patch, EDITABLE_FIELDS)
    db.session.commit()
    return item


def remove_item(item_id: UUID, requester_id: UUID) -> None:
    item = _owned_item(item_id, requester_id)
    item.status = ListingStatus.REMOVED
    db.session.commit()
    logger.info("Item %s removed from the marketplace", item_id)


# Reviews -------------------------------------------------------------


def create_review(item_id: UUID, user_id: UUID, data: dict) -> MarketplaceReview:
    find_user(user_id)
    item = get_item(item_id)
    if item.user_id == user_id:
        raise ForbiddenError("You cannot review your own listing.")
    if MarketplaceReview.query.filter_by(item_id=item.id, user_id=user_id).first():
        raise ConflictError("You have already reviewed this item.")

    purchased = (
        MarketplaceOrder.query.filter_by(item_id=item.id, buyer_id=user_id, status=OrderStatus.DELIVERED).first()
        is not None
    )
    review = MarketplaceReview(
        item_id=item.id,
        user_id=user_id,
        rating=data["rating"],
        comment=clean_optional(data.get("comment")),
        images=data.get("images"),
        is_verified_purchase=purchased,
    )
    db.session.add(review)
    db.session.flush()
    recount_reviews(item.id)
    db.session.commit()
    return review


def list_reviews(item_id: UUID, page: int = 1, limit: int = 10) -> Page:
    item = get_item(item_id)
    query = MarketplaceReview.query.filter_by(item_id=item.id).order_by(
        MarketplaceReview.created_at.desc(), MarketplaceReview.id
    )
    return paginate(query, page, limit)


# Favourites ----------------------------------------------------------


def add_favorite(item_id: UUID, user_id: UUID) -> MarketplaceFavorite:
    find_user(user_id)
    item = get_item(item_id)
    if MarketplaceFavorite.query.filter_by(item_id=item.id, user_id=user_id).first():
        raise ConflictError("Item is already in your favourites.")
    favorite = MarketplaceFavorite(item_id=item.id, user_id=user_id)
    db.session.add(favorite)
    adjust(item, "favorites_count", 1)
    db.session.commit()
    return favorite


def remove_favorite(item_id: UUID, user_id: UUID) -> None:
    item = get_item(item_id)
    favorite = MarketplaceFavorite.query.filter_by(item_id=item.id, user_id=user_id).first()
    if favorite is None:
        raise NotFoundError("Item is not in your favourites.")
    db.session.delete(favorite)
    adjust(item, "favorites_count", -1)
    db.session.commit()


def list_favorites(user_id: UUID, page: int = 1, limit: int = 20) -> Page:
    find_user(user_id)
    query = MarketplaceFavorite.query.filter_by(user_id=user_id).order_by(
        MarketplaceFavorite.created_at.desc(), MarketplaceFavorite.id
    )
    return paginate(query, page, limit)


# Orders --------------------------------------------------------------


def _reserve_slots(item: MarketplaceItem, quantity: int) -> None:
    """Atomically take ``quantity`` slots or raise :class:`ConflictError`."""
    result = db.session.execute(
        db.update(MarketplaceItem)
        .where(
            MarketplaceItem.id == item.id,
            MarketplaceItem.status == ListingStatus.ACTIVE,
            MarketplaceItem.available_slots >= quantity,
        )
        .values(
            available_slots=MarketplaceItem.available_slots - quantity,
            sold_count=MarketplaceItem.sold_count + quantity,
        )
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 0:
        db.session.rollback()
        raise ConflictError("Not enough items available.")
    db.session.refresh(item)
    if item.available_slots == 0:
        item.status = ListingStatus.SOLD_OUT


def _release_slots(item: MarketplaceItem, quantity: int) -> None:
    db.session.execute(
        db.update(MarketplaceItem)
        .where(MarketplaceItem.id == item.id)
        .values(
            available_slots=MarketplaceItem.available_slots + quantity,
            sold_count=MarketplaceItem.sold_count - quantity,
        )
        .execution_options(synchronize_session=False)
    )
    db.session.refresh(item)
    if item.status == ListingStatus.SOLD_OUT and item.available_slots > 0:
        item.status = ListingStatus.ACTIVE


def create_order(item_id: UUID, buyer_id: UUID, data: dict) -> MarketplaceOrder:
    """Buy ``quantity`` slots of an item at its current price."""
    find_user(buyer_id)
    item = get_item(item_id)
    if item.user_id == buyer_id:
        raise ForbiddenError("You cannot buy your own listing.")

    quantity = data.get("quantity", 1)
    unit_price = Decimal(item.price)
    order = MarketplaceOrder(
        item_id=item.id,
        buyer_id=buyer_id,
        seller_id=item.user_id,
        quantity=quantity,
        unit_price=unit_price,
        total_price=(unit_price * quantity).quantize(CENT),
        shipping_cost=item.shipping_cost,
        notes=clean_optional(data.get("notes")),
        shipping_address=data.get("shipping_address"),
    )
    _reserve_slots(item, quantity)
    db.session.add(order)
    db.session.commit()
    logger.info("Order %s placed for %d x item %s", order.id, quantity, item.id)
    return order


def list_buyer_orders(buyer_id: UUID, page: int = 1, limit: int = 20) -> Page:
    find_user(buyer_id)
    query = MarketplaceOrder.query.filter_by(buyer_id=buyer_id).order_by(
        MarketplaceOrder.created_at.desc(), MarketplaceOrder.id
    )
    return paginate(query, page, limit)


def list_seller_orders(seller_id: UUID, page: int = 1, limit: int = 20) -> Page:
    find_user(seller_id)
    query = MarketplaceOrder.query.filter_by(seller_id=seller_id).order_by(
        MarketplaceOrder.created_at.desc(), MarketplaceOrder.id
    )
    return paginate(query, page, limit)


def find_order(order_id: UUID, requester_id: UUID) -> MarketplaceOrder:
    order = get_or_404(MarketplaceOrder, order_id, "Order not found.")
    if requester_id not in (order.buyer_id, order.seller_id):
        raise ForbiddenError("You can only view your own orders.")
    return order


def update_order_status(order_id: UUID, requester_id: UUID, status: OrderStatus, tracking_number: str | None = None):
    order = find_order(order_id, requester_id)
    if requester_id == order.seller_id:
        if status not in SELLER_TRANSITIONS.get(order.status, ()):
            raise ConflictError(f"Cannot move an order from {order.status.value} to {status.value}.")
    elif status != OrderStatus.CANCELLED:
        raise ForbiddenError("Buyers can only cancel orders.")
    elif order.status != OrderStatus.PENDING:
        raise ConflictError("Only pending orders can be cancelled.")

    if status == OrderStatus.CANCELLED and order.item is not None:
        _release_slots(order.item, order.quantity)
    order.status = status
    if tracking_number:
        order.tracking_number = tracking_number
    db.session.commit()
    logger.info("Order %s moved to %s", order.id, status.value)
    return order
