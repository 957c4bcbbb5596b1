"""Posts, comments, likes and soft deletion."""
from uuid import UUID

import pytest

from wellnest.db import db
from wellnest.models import Post
from wellnest.services import post_service


def _create_post(client, headers, **overrides) -> dict:
    payload = {"content": "Morning run done", "tags": ["running"]}
    payload.update(overrides)
    response = client.post("/api/posts", json=payload, headers=headers)
    assert response.status_code == 201, response.get_json()
    return response.get_json()


def _create_comment(client, headers, post_id, **overrides) -> dict:
    payload = {"content": "Nice!"}
    payload.update(overrides)
    response = client.post(f"/api/posts/{post_id}/comments", json=payload, headers=headers)
    assert response.status_code == 201, response.get_json()
    return response.get_json()


def test_create_post_strips_markup(client, alice, auth_headers) -> None:
    post = _create_post(client, auth_headers(alice), content="<b>Hello</b> world")
    assert post["content"] == "Hello world"
    assert post["type"] == "text"
    assert post["visibility"] == "public"
    assert post["likes_count"] == 0


def test_like_toggles(client, alice, bob, auth_headers) -> None:
    post = _create_post(client, auth_headers(alice))
    url = f"/api/posts/{post['id']}/like"

    first = client.post(url, headers=auth_headers(bob)).get_json()
    second = client.post(url, headers=auth_headers(bob)).get_json()

    assert first == {"liked": True, "likes_count": 1}
    assert second == {"liked": False, "likes_count": 0}


def test_comment_like_toggles(client, alice, bob, auth_headers) -> None:
    post = _create_post(client, auth_headers(alice))
    comment = _create_comment(client, auth_headers(alice), post["id"])
    url = f"/api/comments/{comment['id']}/like"

    first = client.post(url, headers=auth_headers(bob)).get_json()
    second = client.post(url, headers=auth_headers(bob)).get_json()

    assert first == {"liked": True, "likes_count": 1}
    assert second == {"liked": False, "likes_count": 0}


def test_like_counter_applies_delta_to_stored_value(client, alice, bob, make_user, auth_headers) -> None:
    carol = make_user("carol@example.com", "Carol")
    post = _create_post(client, auth_headers(alice))
    stale = db.session.get(Post, UUID(post["id"]))
    assert stale.likes_count == 0

    client.post(f"/api/posts/{post['id']}/like", headers=auth_headers(bob))
    result = post_service.toggle_like(stale.id, carol.id)

    assert result == {"liked": True, "likes_count": 2}


def test_private_post_is_hidden_from_others(client, alice, bob, auth_headers) -> None:
    post = _create_post(client, auth_headers(alice), visibility="private")

    assert client.get(f"/api/posts/{post['id']}", headers=auth_headers(alice)).status_code == 200
    assert client.get(f"/api/posts/{post['id']}", headers=auth_headers(bob)).status_code == 403
    listing = client.get("/api/posts", headers=auth_headers(bob)).get_json()
    assert listing["total"] == 0


def test_only_author_may_edit(client, alice, bob, auth_headers) -> None:
    post = _create_post(client, auth_headers(alice))
    response = client.patch(f"/api/posts/{post['id']}", json={"content": "mine"}, headers=auth_headers(bob))
    assert response.status_code == 403


def test_deleted_post_disappears(client, alice, auth_headers) -> None:
    headers = auth_headers(alice)
    post = _create_post(client, headers)

    assert client.delete(f"/api/posts/{post['id']}", headers=headers).status_code == 204
    assert client.get(f"/api/posts/{post['id']}", headers=headers).status_code == 404
    assert client.get("/api/posts", headers=headers).get_json()["posts"] == []
    assert client.delete(f"/api/posts/{post['id']}", headers=headers).status_code == 404


def test_search_matches_content_and_tags(client, alice, auth_headers) -> None:
    headers = auth_headers(alice)
    _create_post(client, headers, content="Leg day", tags=["strength"])
    _create_post(client, headers, content="Yoga flow", tags=["mobility"])

    by_content = client.get("/api/posts/search?q=yoga", headers=headers).get_json()
    by_tag = client.get("/api/posts/search?q=strength", headers=headers).get_json()

    assert [post["content"] for post in by_content["posts"]] == ["Yoga flow"]
    assert [post["content"] for post in by_tag["posts"]] == ["Leg day"]


def test_comment_updates_post_counter(client, alice, bob, auth_headers) -> None:
    post = _create_post(client, auth_headers(alice))
    _create_comment(client, auth_headers(bob), post["id"])

    stats = client.get(f"/api/posts/{post['id']}/stats", headers=auth_headers(alice)).get_json()
    assert stats["comments_count"] == 1
    assert stats["engagement_rate"] == 1.0


def test_deleting_comment_removes_its_replies_once(client, alice, bob, auth_headers) -> None:
    post = _create_post(client, auth_headers(alice))
    parent = _create_comment(client, auth_headers(bob), post["id"])
    _create_comment(client, auth_headers(alice), post["id"], parent_comment_id=parent["id"])
    _create_comment(client, auth_headers(alice), post["id"])

    replies = client.get(f"/api/comments/{parent['id']}/replies", headers=auth_headers(bob)).get_json()
    assert len(replies) == 1

    assert client.delete(f"/api/comments/{parent['id']}", headers=auth_headers(bob)).status_code == 204
    assert client.delete(f"/api/comments/{parent['id']}", headers=auth_headers(bob)).status_code == 404

    stats = client.get(f"/api/posts/{post['id']}/stats", headers=auth_headers(alice)).get_json()
    assert stats["comments_count"] == 1
    listing = client.get(f"/api/posts/{post['id']}/comments", headers=auth_headers(alice)).get_json()
    assert listing["total"] == 1


def test_reply_must_belong_to_same_post(client, alice, auth_headers) -> None:
    headers = auth_headers(alice)
    first = _create_post(client, headers)
    second = _create_post(client, headers)
    parent = _create_comment(client, headers, first["id"])

    response = client.post(
        f"/api/posts/{second['id']}/comments",
        json={"content": "wrong thread", "parent_comment_id": parent["id"]},
        headers=headers,
    )
    assert response.status_code == 400


def test_cannot_comment_on_deleted_post(client, alice, auth_headers) -> None:
    headers = auth_headers(alice)
    post = _create_post(client, headers)
    client.delete(f"/api/posts/{post['id']}", headers=headers)

    response = client.post(f"/api/posts/{post['id']}/comments", json={"content": "late"}, headers=headers)
    assert response.status_code == 404


@pytest.mark.parametrize("limit", [0, 101])
def test_limit_out_of_range_is_rejected(client, alice, auth_headers, limit) -> None:
    response = client.get(f"/api/posts?limit={limit}", headers=auth_headers(alice))
    assert response.status_code == 400
