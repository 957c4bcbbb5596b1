"""Paging over listings."""
import math

import pytest


@pytest.mark.parametrize("count, limit", [(23, 5), (20, 5), (1, 20), (0, 10)])
def test_pages_cover_every_row_once(client, alice, auth_headers, count, limit) -> None:
    headers = auth_headers(alice)
    created = {
        client.post("/api/posts", json={"content": f"post {n}"}, headers=headers).get_json()["id"]
        for n in range(count)
    }

    first = client.get(f"/api/posts?limit={limit}", headers=headers).get_json()
    assert first["total"] == count
    assert first["total_pages"] == math.ceil(count / limit)

    seen = []
    for page in range(1, first["total_pages"] + 1):
        body = client.get(f"/api/posts?page={page}&limit={limit}", headers=headers).get_json()
        assert body["page"] == page
        assert len(body["posts"]) <= limit
        seen.extend(post["id"] for post in body["posts"])

    assert len(seen) == len(set(seen)) == count
    assert set(seen) == created


def test_page_past_the_end_is_empty(client, alice, auth_headers) -> None:
    headers = auth_headers(alice)
    client.post("/api/posts", json={"content": "only"}, headers=headers)
    body = client.get("/api/posts?page=3&limit=10", headers=headers).get_json()
    assert body["posts"] == []
    assert body["total"] == 1
