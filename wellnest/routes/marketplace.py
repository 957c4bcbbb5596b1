"""
Routes for the marketplace.

Sellers list items and manage their orders; buyers browse active
listings, review, favourite and order them.
"""

from __future__ import annotations

from uuid import UUID

from flask import Blueprint

from ..auth import current_user_id, login_required
from ..schemas.common import page_payload
from ..schemas.marketplace import (
    ItemBrowseQuerySchema,
    ItemCreateSchema,
    ItemUpdateSchema,
    MarketplaceFavoriteSchema,
    MarketplaceItemSchema,
    MarketplaceOrderSchema,
    MarketplaceReviewSchema,
    OrderCreateSchema,
    OrderStatusSchema,
    ReviewCreateSchema,
    ReviewPaginationSchema,
    SellerItemsQuerySchema,
)
from ..services import marketplace_service
from . import json_body, page_args, query_args

marketplace_bp = Blueprint("marketplace", __name__)


@marketplace_bp.route("/marketplace/items", methods=["POST"])
@login_required
def create_item() -> tuple[dict, int]:
    item = marketplace_service.create_item(current_user_id(), json_body(ItemCreateSchema()))
    return MarketplaceItemSchema().dump(item), 201


@marketplace_bp.route("/marketplace/items", methods=["GET"])
@login_required
def browse_items() -> tuple[dict, int]:
    """Browse active listings.

    Supports ``category``, ``condition``, ``min_price``/``max_price``,
    ``location``, ``search``, ``is_digital``, ``is_featured`` and a
    ``sort_by``/``sort_order`` pair.
    """
    page, limit = page_args()
    filters = query_args(ItemBrowseQuerySchema())
    result = marketplace_service.browse_items(filters, page, limit)
    return page_payload(result, "items", MarketplaceItemSchema(many=True)), 200


@marketplace_bp.route("/marketplace/stats", methods=["GET"])
@login_required
def stats() -> tuple[dict, int]:
    return marketplace_service.marketplace_stats(), 200


@marketplace_bp.route("/marketplace/users/<uuid:user_id>/items", methods=["GET"])
@login_required
def seller_items(user_id: UUID) -> tuple[dict, int]:
    page, limit = page_args()
    status = query_args(SellerItemsQuerySchema()).get("status")
    result = marketplace_service.list_seller_items(user_id, status, page, limit)
    return page_payload(result, "items", MarketplaceItemSchema(many=True)), 200


@marketplace_bp.route("/marketplace/items/<uuid:item_id>", methods=["GET"])
@login_required
def get_item(item_id: UUID) -> tuple[dict, int]:
    return MarketplaceItemSchema().dump(marketplace_service.view_item(item_id)), 200


@marketplace_bp.route("/marketplace/items/<uuid:item_id>", methods=["PATCH"])
@login_required
def update_item(item_id: UUID) -> tuple[dict, int]:
    patch = json_body(ItemUpdateSchema(), partial=True)
    item = marketplace_service.update_item(item_id, current_user_id(), patch)
    return MarketplaceItemSchema().dump(item), 200


@marketplace_bp.route("/marketplace/items/<uuid:item_id>", methods=["DELETE"])
@login_required
def delete_item(item_id: UUID) -> tuple[str, int]:
    marketplace_service.remove_item(item_id, current_user_id())
    return "", 204


@marketplace_bp.route("/marketplace/items/<uuid:item_id>/reviews", methods=["POST"])
@login_required
def create_review(item_id: UUID) -> tuple[dict, int]:
    review = marketplace_service.create_review(item_id, current_user_id(), json_body(ReviewCreateSchema()))
    return MarketplaceReviewSchema().dump(review), 201


@marketplace_bp.route("/marketplace/items/<uuid:item_id>/reviews", methods=["GET"])
@login_required
def list_reviews(item_id: UUID) -> tuple[dict, int]:
    page, limit = page_args(ReviewPaginationSchema())
    result = marketplace_service.list_reviews(item_id, page, limit)
    return page_payload(result, "reviews", MarketplaceReviewSchema(many=True)), 200


@marketplace_bp.route("/marketplace/items/<uuid:item_id>/favorite", methods=["POST"])
@login_required
def add_favorite(item_id: UUID) -> tuple[dict, int]:
    favorite = marketplace_service.add_favorite(item_id, current_user_id())
    return MarketplaceFavoriteSchema().dump(favorite), 201


@marketplace_bp.route("/marketplace/items/<uuid:item_id>/favorite", methods=["DELETE"])
@login_required
def remove_favorite(item_id: UUID) -> tuple[str, int]:
    marketplace_service.remove_favorite(item_id, current_user_id())
    return "", 204


@marketplace_bp.route("/marketplace/favorites", methods=["GET"])
@login_required
def list_favorites() -> tuple[dict, int]:
    page, limit = page_args()
    result = marketplace_service.list_favorites(current_user_id(), page, limit)
    return page_payload(result, "favorites", MarketplaceFavoriteSchema(many=True)), 200


@marketplace_bp.route("/marketplace/items/<uuid:item_id>/orders", methods=["POST"])
@login_required
def create_order(item_id: UUID) -> tuple[dict, int]:
    """Order ``quantity`` slots of an item. Returns 409 when stock runs out."""
    order = marketplace_service.create_order(item_id, current_user_id(), json_body(OrderCreateSchema()))
    return MarketplaceOrderSchema().dump(order), 201


@marketplace_bp.route("/marketplace/orders", methods=["GET"])
@login_required
def list_orders() -> tuple[dict, int]:
    page, limit = page_args()
    result = marketplace_service.list_buyer_orders(current_user_id(), page, limit)
    return page_payload(result, "orders", MarketplaceOrderSchema(many=True)), 200


@marketplace_bp.route("/marketplace/sales", methods=["GET"])
@login_required
def list_sales() -> tuple[dict, int]:
    page, limit = page_args()
    result = marketplace_service.list_seller_orders(current_user_id(), page, limit)
    return page_payload(result, "orders", MarketplaceOrderSchema(many=True)), 200


@marketplace_bp.route("/marketplace/orders/<uuid:order_id>", methods=["GET"])
@login_required
def get_order(order_id: UUID) -> tuple[dict, int]:
    return MarketplaceOrderSchema().dump(marketplace_service.find_order(order_id, current_user_id())), 200


@marketplace_bp.route("/marketplace/orders/<uuid:order_id>/status", methods=["PATCH"])
@login_required
def update_order_status(order_id: UUID) -> tuple[dict, int]:
    data = json_body(OrderStatusSchema())
    order = marketplace_service.update_order_status(
        order_id, current_user_id(), data["status"], data.get("tracking_number")
    )
    return MarketplaceOrderSchema().dump(order), 200
