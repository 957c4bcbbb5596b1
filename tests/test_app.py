"""Application factory, error envelope and auth gate."""


def test_health_endpoint(client) -> None:
    """Ensure the health check returns the expected response."""
    response = client.get("/api/health")
    assert response.status_code == 200
    assert response.get_json() == {"status": "ok"}


def test_protected_route_requires_token(client) -> None:
    response = client.get("/api/posts")
    assert response.status_code == 401
    assert response.get_json()["error"]["code"] == "UNAUTHORIZED"


def test_unknown_token_is_rejected(client) -> None:
    response = client.get("/api/posts", headers={"Authorization": "Bearer nope"})
    assert response.status_code == 401


def test_validation_errors_list_fields(client, alice, auth_headers) -> None:
    response = client.post("/api/posts", json={"visibility": "everyone"}, headers=auth_headers(alice))
    assert response.status_code == 400
    error = response.get_json()["error"]
    assert error["code"] == "VALIDATION_ERROR"
    assert "content" in error["fields"]
    assert "visibility" in error["fields"]


def test_unknown_resource_is_404(client, alice, auth_headers) -> None:
    response = client.get("/api/posts/00000000-0000-0000-0000-000000000000", headers=auth_headers(alice))
    assert response.status_code == 404
    assert response.get_json()["error"]["code"] == "NOT_FOUND"
