"""Shared fixtures for the Wellnest test suite.

Every test gets a fresh in-memory SQLite database and a fake identity
provider. Tokens are registered on the fake provider with
``auth_headers``; the fixture returns ready-to-use request headers.
"""
from __future__ import annotations

import pytest

from wellnest import create_app
from wellnest.db import db
from wellnest.identity import IdentityProviderError, ProviderUser
from wellnest.models import User


class FakeIdentityProvider:
    """In-memory stand-in for the hosted auth service."""

    def __init__(self) -> None:
        self.tokens: dict[str, ProviderUser] = {}
        self.calls = 0

    def register(self, token: str, subject: str, email: str | None, **metadata) -> None:
        self.tokens[token] = ProviderUser(id=subject, email=email, user_metadata=metadata)

    def get_user(self, token: str) -> ProviderUser:
        self.calls += 1
        try:
            return self.tokens[token]
        except KeyError:
            raise IdentityProviderError("unknown token") from None


@pytest.fixture
def identity_provider() -> FakeIdentityProvider:
    return FakeIdentityProvider()


@pytest.fixture
def app(identity_provider):
    app = create_app(
        {
            "TESTING": True,
            "SQLALCHEMY_DATABASE_URI": "sqlite:///:memory:",
            "IDENTITY_PROVIDER": identity_provider,
            "LOG_LEVEL": "WARNING",
        }
    )
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_user(app, identity_provider):
    """Create a user already linked to a provider subject."""

    def _make(email: str = "alice@example.com", name: str = "Alice") -> User:
        user = User(email=email, name=name, external_id=f"sub-{email}", auth_source="identity_provider")
        db.session.add(user)
        db.session.commit()
        identity_provider.register(f"token-{email}", f"sub-{email}", email)
        return user

    return _make


@pytest.fixture
def auth_headers():
    def _headers(user: User) -> dict[str, str]:
        return {"Authorization": f"Bearer token-{user.email}"}

    return _headers


@pytest.fixture
def alice(make_user) -> User:
    return make_user("alice@example.com", "Alice")


@pytest.fixture
def bob(make_user) -> User:
    return make_user("bob@example.com", "Bob")
