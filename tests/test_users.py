"""User registration and profile management."""
from wellnest.models import Post, User


def test_register_user_hides_password_hash(client) -> None:
    response = client.post(
        "/api/users",
        json={"email": "New@Example.com", "password": "correct-horse", "name": "New", "bio": "<i>hi</i>"},
    )
    assert response.status_code == 201
    body = response.get_json()
    assert body["email"] == "new@example.com"
    assert body["bio"] == "hi"
    assert "password_hash" not in body

    user = User.query.filter_by(email="new@example.com").one()
    assert user.check_password("correct-horse")
    assert not user.check_password("wrong")


def test_duplicate_email_conflicts(client, alice) -> None:
    response = client.post("/api/users", json={"email": "ALICE@example.com"})
    assert response.status_code == 409
    assert response.get_json()["error"]["code"] == "CONFLICT"


def test_me_returns_caller(client, alice, auth_headers) -> None:
    response = client.get("/api/users/me", headers=auth_headers(alice))
    assert response.status_code == 200
    assert response.get_json()["id"] == str(alice.id)


def test_update_own_profile_only(client, alice, bob, auth_headers) -> None:
    own = client.patch(f"/api/users/{alice.id}", json={"name": "Alice B"}, headers=auth_headers(alice))
    other = client.patch(f"/api/users/{alice.id}", json={"name": "Hacked"}, headers=auth_headers(bob))

    assert own.status_code == 200
    assert own.get_json()["name"] == "Alice B"
    assert other.status_code == 403


def test_delete_account_removes_owned_rows(client, alice, bob, auth_headers) -> None:
    client.post("/api/posts", json={"content": "bye"}, headers=auth_headers(alice))

    assert client.delete(f"/api/users/{alice.id}", headers=auth_headers(bob)).status_code == 403
    assert client.delete(f"/api/users/{alice.id}", headers=auth_headers(alice)).status_code == 204

    assert Post.query.count() == 0
    assert User.query.filter_by(email="alice@example.com").first() is None


def test_delete_account_releases_counters(client, alice, bob, make_user, auth_headers) -> None:
    carol = make_user("carol@example.com", "Carol")
    post = client.post("/api/posts", json={"content": "Leg day"}, headers=auth_headers(alice)).get_json()
    comments_url = f"/api/posts/{post['id']}/comments"
    client.post(comments_url, json={"content": "mine"}, headers=auth_headers(alice))
    theirs = client.post(comments_url, json={"content": "nice"}, headers=auth_headers(bob)).get_json()
    reply = {"content": "thanks", "parent_comment_id": theirs["id"]}
    client.post(comments_url, json=reply, headers=auth_headers(alice))
    client.post(f"/api/posts/{post['id']}/like", headers=auth_headers(bob))

    group_payload = {"name": "Lifters", "category": "muscle_building"}
    group_id = client.post("/api/groups", json=group_payload, headers=auth_headers(alice)).get_json()["id"]
    client.post(f"/api/groups/{group_id}/join", json={}, headers=auth_headers(bob))

    listing_payload = {
        "title": "Kettlebell",
        "description": "12kg",
        "category": "fitness_equipment",
        "price": "30.00",
        "available_slots": 3,
    }
    item = client.post("/api/marketplace/items", json=listing_payload, headers=auth_headers(alice)).get_json()
    item_url = f"/api/marketplace/items/{item['id']}"
    client.post(f"{item_url}/favorite", headers=auth_headers(bob))
    client.post(f"{item_url}/reviews", json={"rating": 5}, headers=auth_headers(bob))
    client.post(f"{item_url}/reviews", json={"rating": 2}, headers=auth_headers(carol))

    assert client.delete(f"/api/users/{bob.id}", headers=auth_headers(bob)).status_code == 204

    stats = client.get(f"/api/posts/{post['id']}/stats", headers=auth_headers(alice)).get_json()
    assert stats["likes_count"] == 0
    assert stats["comments_count"] == 1
    assert client.get(f"/api/groups/{group_id}", headers=auth_headers(alice)).get_json()["member_count"] == 1
    listing = client.get(item_url, headers=auth_headers(alice)).get_json()
    assert listing["favorites_count"] == 0
    assert listing["reviews_count"] == 1
    assert listing["rating"] == 2.0
