"""Token resolution and identity provider webhooks."""
import httpx
import pytest

from wellnest.db import db
from wellnest.errors import UnauthorizedError
from wellnest.identity import IdentityProviderError, SupabaseIdentityProvider, build_identity_provider
from wellnest.models import User
from wellnest.services import auth_service


def test_existing_subject_resolves_to_same_user(app, alice, identity_provider) -> None:
    user = auth_service.resolve_caller_from_token("token-alice@example.com")
    assert user.id == alice.id


def test_email_match_links_subject(app, identity_provider) -> None:
    existing = User(email="carol@example.com", name="Carol")
    db.session.add(existing)
    db.session.commit()
    identity_provider.register("t-carol", "sub-carol", "Carol@Example.com")

    user = auth_service.resolve_caller_from_token("t-carol")

    assert user.id == existing.id
    assert user.external_id == "sub-carol"
    assert User.query.count() == 1


def test_new_subject_creates_user_from_profile(app, identity_provider) -> None:
    identity_provider.register("t-dan", "sub-dan", "dan@example.com", full_name="Dan D", avatar_url="http://x/a.png")
    identity_provider.register("t-eve", "sub-eve", "eve@example.com")

    dan = auth_service.resolve_caller_from_token("t-dan")
    eve = auth_service.resolve_caller_from_token("t-eve")

    assert dan.name == "Dan D"
    assert dan.profile_image == "http://x/a.png"
    assert dan.auth_source == "identity_provider"
    assert eve.name == "eve"


def test_inactive_user_is_unauthorized(app, alice) -> None:
    alice.is_active = False
    db.session.commit()
    with pytest.raises(UnauthorizedError):
        auth_service.resolve_caller_from_token("token-alice@example.com")


def test_verify_token_endpoint(client, alice, auth_headers) -> None:
    response = client.post("/api/auth/verify-token", headers=auth_headers(alice))
    assert response.status_code == 200
    body = response.get_json()
    assert body["valid"] is True
    assert body["user"]["email"] == "alice@example.com"
    assert "password_hash" not in body["user"]


def test_webhook_created_and_deleted(client, app) -> None:
    payload = {"event": "user.created", "data": {"id": "sub-frank", "email": "frank@example.com"}}
    assert client.post("/api/auth/webhook", json=payload).status_code == 200
    frank = User.query.filter_by(external_id="sub-frank").one()
    assert frank.is_active

    payload["event"] = "user.deleted"
    assert client.post("/api/auth/webhook", json=payload).status_code == 200
    db.session.refresh(frank)
    assert frank.is_active is False


def test_webhook_rejects_malformed_envelope(client) -> None:
    response = client.post("/api/auth/webhook", json={"data": {"id": "x"}})
    assert response.status_code == 400


def test_webhook_reports_success_when_handling_fails(client, monkeypatch) -> None:
    def explode(event, data):
        raise RuntimeError("database unavailable")

    monkeypatch.setattr(auth_service, "handle_webhook_event", explode)
    response = client.post("/api/auth/webhook", json={"event": "user.updated", "data": {"id": "sub-x"}})
    assert response.status_code == 200
    assert response.get_json()["success"] is True


def test_unknown_webhook_event_is_ignored(client) -> None:
    response = client.post("/api/auth/webhook", json={"event": "session.created", "data": {"id": "sub-y"}})
    assert response.status_code == 200
    assert User.query.count() == 0


def test_supabase_provider_sends_key_and_token(monkeypatch) -> None:
    captured = {}

    def fake_get(url, headers, timeout):
        captured.update(url=url, headers=headers, timeout=timeout)
        return httpx.Response(200, json={"id": "abc", "email": "a@b.c", "user_metadata": {"name": "A"}})

    monkeypatch.setattr(httpx, "get", fake_get)
    provider = SupabaseIdentityProvider("https://auth.example.com/", "anon-key", timeout=2)
    profile = provider.get_user("tok")

    assert captured["url"] == "https://auth.example.com/auth/v1/user"
    assert captured["headers"] == {"apikey": "anon-key", "Authorization": "Bearer tok"}
    assert profile.id == "abc"
    assert profile.user_metadata == {"name": "A"}


def test_supabase_provider_rejects_non_200(monkeypatch) -> None:
    monkeypatch.setattr(httpx, "get", lambda url, headers, timeout: httpx.Response(401, json={}))
    provider = SupabaseIdentityProvider("https://auth.example.com", "k")
    with pytest.raises(IdentityProviderError):
        provider.get_user("bad")


def test_unconfigured_provider_rejects_everything() -> None:
    provider = build_identity_provider({"IDENTITY_PROVIDER": None, "IDENTITY_PROVIDER_URL": ""})
    with pytest.raises(IdentityProviderError):
        provider.get_user("anything")
