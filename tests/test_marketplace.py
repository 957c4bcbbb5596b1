"""Marketplace listings, stock, orders and reviews."""
from wellnest.models import MarketplaceItem


def _list_item(client, headers, **overrides) -> dict:
    payload = {
        "title": "Resistance Bands",
        "description": "Set of five bands",
        "category": "fitness_equipment",
        "price": "45.99",
        "shipping_cost": "5.99",
        "available_slots": 10,
    }
    payload.update(overrides)
    response = client.post("/api/marketplace/items", json=payload, headers=headers)
    assert response.status_code == 201, response.get_json()
    return response.get_json()


def _order(client, headers, item_id, quantity=1):
    return client.post(f"/api/marketplace/items/{item_id}/orders", json={"quantity": quantity}, headers=headers)


def test_order_reserves_stock_and_prices_quantity(client, alice, bob, auth_headers) -> None:
    item = _list_item(client, auth_headers(alice))

    response = _order(client, auth_headers(bob), item["id"], quantity=2)

    assert response.status_code == 201
    order = response.get_json()
    assert order["unit_price"] == 45.99
    assert order["total_price"] == 91.98
    assert order["shipping_cost"] == 5.99
    assert order["status"] == "pending"
    stored = MarketplaceItem.query.filter_by(title="Resistance Bands").one()
    assert stored.available_slots == 8
    assert stored.sold_count == 2


def test_order_beyond_stock_conflicts(client, alice, bob, auth_headers) -> None:
    item = _list_item(client, auth_headers(alice), available_slots=2)

    assert _order(client, auth_headers(bob), item["id"], quantity=3).status_code == 409
    assert _order(client, auth_headers(bob), item["id"], quantity=2).status_code == 201

    stored = MarketplaceItem.query.filter_by(title="Resistance Bands").one()
    assert stored.available_slots == 0
    assert stored.status.value == "sold_out"
    assert _order(client, auth_headers(bob), item["id"]).status_code == 409


def test_cannot_buy_own_item(client, alice, auth_headers) -> None:
    item = _list_item(client, auth_headers(alice))
    assert _order(client, auth_headers(alice), item["id"]).status_code == 403


def test_buyer_cancel_restocks(client, alice, bob, auth_headers) -> None:
    item = _list_item(client, auth_headers(alice), available_slots=1)
    order = _order(client, auth_headers(bob), item["id"]).get_json()
    url = f"/api/marketplace/orders/{order['id']}/status"

    assert client.patch(url, json={"status": "shipped"}, headers=auth_headers(bob)).status_code == 403
    cancelled = client.patch(url, json={"status": "cancelled"}, headers=auth_headers(bob))
    assert cancelled.get_json()["status"] == "cancelled"

    stored = MarketplaceItem.query.filter_by(title="Resistance Bands").one()
    assert stored.available_slots == 1
    assert stored.sold_count == 0
    assert stored.status.value == "active"


def test_seller_transitions(client, alice, bob, auth_headers) -> None:
    item = _list_item(client, auth_headers(alice))
    order = _order(client, auth_headers(bob), item["id"]).get_json()
    url = f"/api/marketplace/orders/{order['id']}/status"
    seller = auth_headers(alice)

    assert client.patch(url, json={"status": "delivered"}, headers=seller).status_code == 409
    assert client.patch(url, json={"status": "confirmed"}, headers=seller).status_code == 200
    shipped = client.patch(url, json={"status": "shipped", "tracking_number": "TRK1"}, headers=seller)
    assert shipped.get_json()["tracking_number"] == "TRK1"
    assert client.patch(url, json={"status": "cancelled"}, headers=auth_headers(bob)).status_code == 409

    sales = client.get("/api/marketplace/sales", headers=seller).get_json()
    purchases = client.get("/api/marketplace/orders", headers=auth_headers(bob)).get_json()
    assert sales["total"] == purchases["total"] == 1


def test_orders_are_private_to_parties(client, alice, bob, make_user, auth_headers) -> None:
    carol = make_user("carol@example.com", "Carol")
    item = _list_item(client, auth_headers(alice))
    order = _order(client, auth_headers(bob), item["id"]).get_json()

    assert client.get(f"/api/marketplace/orders/{order['id']}", headers=auth_headers(carol)).status_code == 403
    assert client.get(f"/api/marketplace/orders/{order['id']}", headers=auth_headers(alice)).status_code == 200


def test_reviews_update_rating(client, alice, bob, make_user, auth_headers) -> None:
    carol = make_user("carol@example.com", "Carol")
    item = _list_item(client, auth_headers(alice))
    url = f"/api/marketplace/items/{item['id']}/reviews"

    assert client.post(url, json={"rating": 5}, headers=auth_headers(alice)).status_code == 403
    assert client.post(url, json={"rating": 5}, headers=auth_headers(bob)).status_code == 201
    assert client.post(url, json={"rating": 4}, headers=auth_headers(bob)).status_code == 409
    assert client.post(url, json={"rating": 6}, headers=auth_headers(carol)).status_code == 400
    client.post(url, json={"rating": 2, "comment": "meh"}, headers=auth_headers(carol))

    stored = MarketplaceItem.query.filter_by(title="Resistance Bands").one()
    assert stored.rating == 3.5
    assert stored.reviews_count == 2
    assert client.get(url, headers=auth_headers(bob)).get_json()["total"] == 2


def test_favorites(client, alice, bob, auth_headers) -> None:
    item = _list_item(client, auth_headers(alice))
    url = f"/api/marketplace/items/{item['id']}/favorite"

    assert client.post(url, headers=auth_headers(bob)).status_code == 201
    assert client.post(url, headers=auth_headers(bob)).status_code == 409
    favorites = client.get("/api/marketplace/favorites", headers=auth_headers(bob)).get_json()
    assert favorites["favorites"][0]["item"]["title"] == "Resistance Bands"

    assert client.delete(url, headers=auth_headers(bob)).status_code == 204
    assert client.delete(url, headers=auth_headers(bob)).status_code == 404


def test_browse_filters_and_sorting(client, alice, auth_headers) -> None:
    headers = auth_headers(alice)
    _list_item(client, headers, title="Cheap Mat", price="10.00", category="wellness_products")
    _list_item(client, headers, title="Kettlebell", price="60.00")
    _list_item(client, headers, title="Dumbbells", price="30.00")

    by_price = client.get("/api/marketplace/items?sort_by=price&sort_order=asc", headers=headers).get_json()
    assert [item["title"] for item in by_price["items"]] == ["Cheap Mat", "Dumbbells", "Kettlebell"]

    ranged = client.get("/api/marketplace/items?min_price=20&max_price=50", headers=headers).get_json()
    assert [item["title"] for item in ranged["items"]] == ["Dumbbells"]

    assert client.get("/api/marketplace/items?min_price=50&max_price=20", headers=headers).status_code == 400
    assert client.get("/api/marketplace/items?sort_by=password", headers=headers).status_code == 400

    stats = client.get("/api/marketplace/stats", headers=headers).get_json()
    assert stats["active_items"] == 3
    assert stats["categories_stats"] == {"wellness_products": 1, "fitness_equipment": 2}


def test_removed_item_is_hidden(client, alice, bob, auth_headers) -> None:
    item = _list_item(client, auth_headers(alice))
    assert client.delete(f"/api/marketplace/items/{item['id']}", headers=auth_headers(bob)).status_code == 403
    assert client.delete(f"/api/marketplace/items/{item['id']}", headers=auth_headers(alice)).status_code == 204
    assert client.get(f"/api/marketplace/items/{item['id']}", headers=auth_headers(bob)).status_code == 404
