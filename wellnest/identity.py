"""Client for the external identity provider.

Access tokens are issued by a hosted auth service (Supabase compatible).
Verifying a token means asking the provider who it belongs to via
``GET {url}/auth/v1/user``; a 200 answer carries the user profile, any
other answer means the token is not usable.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field

import httpx

logger = logging.getLogger(__name__)


class IdentityProviderError(Exception):
    """Raised when a token cannot be verified by the provider."""


@dataclass
class ProviderUser:
    """The subset of a provider profile the application cares about."""

    id: str
    email: str | None
    user_metadata: dict = field(default_factory=dict)

    @classmethod
    def from_payload(cls, payload: dict) -> "ProviderUser":
        if not payload.get("id"):
            raise IdentityProviderError("Identity provider returned a profile without an id.")
        return cls(
            id=str(payload["id"]),
            email=payload.get("email"),
            user_metadata=payload.get("user_metadata") or {},
        )


class SupabaseIdentityProvider:
    """Verify access tokens against a Supabase style auth endpoint."""

    def __init__(self, base_url: str, api_key: str, timeout: float = 5.0) -> None:
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout

    def get_user(self, token: str) -> ProviderUser:
        try:
            response = httpx.get(
                f"{self.base_url}/auth/v1/user",
                headers={"apikey": self.api_key, "Authorization": f"Bearer {token}"},
                timeout=self.timeout,
            )
        except httpx.HTTPError as exc:
            logger.warning("Identity provider request failed: %s", exc)
            raise IdentityProviderError("Identity provider is unreachable.") from exc

        if response.status_code != 200:
            raise IdentityProviderError(f"Token rejected with status {response.status_code}.")
        return ProviderUser.from_payload(response.json())


class UnconfiguredIdentityProvider:
    """Used when no provider URL is configured; rejects every token."""

    def get_user(self, token: str) -> ProviderUser:
        raise IdentityProviderError("No identity provider is configured.")


def build_identity_provider(config):
    """Return the provider named by ``config``.

    An object supplied under ``IDENTITY_PROVIDER`` wins; otherwise a
    :class:`SupabaseIdentityProvider` is built from the URL and key.
    """
    if config.get("IDENTITY_PROVIDER") is not None:
        return config["IDENTITY_PROVIDER"]
    url = config.get("IDENTITY_PROVIDER_URL")
    if not url:
        logger.warning("IDENTITY_PROVIDER_URL is not set; protected endpoints will reject all requests.")
        return UnconfiguredIdentityProvider()
    return SupabaseIdentityProvider(
        url,
        config.get("IDENTITY_PROVIDER_KEY", ""),
        timeout=config.get("IDENTITY_PROVIDER_TIMEOUT", 5.0),
    )
