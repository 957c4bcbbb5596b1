"""Resolve identity provider tokens to local users.

The provider owns credentials; this module only maps its subject ids
onto rows in ``users`` and keeps those rows in step with the provider's
webhook events.
"""
from __future__ import annotations

import logging

from flask import current_app

from ..db import db
from ..errors import UnauthorizedError, ValidationError
from ..identity import IdentityProviderError, ProviderUser
from ..models import User
from ..util.sanitization import normalise_email

logger = logging.getLogger(__name__)

WEBHOOK_EVENTS = ("user.created", "user.updated", "user.deleted")


def _display_name(profile: ProviderUser) -> str | None:
    metadata = profile.user_metadata or {}
    name = metadata.get("full_name") or metadata.get("name")
    if name:
        return name
    if profile.email:
        return profile.email.split("@", 1)[0]
    return None


def sync_user_from_provider(profile: ProviderUser) -> User:
    """Find or create the local user for a provider profile.

    Lookup order is the provider subject id, then the email address
    (linking the subject id to the existing row), then a new row built
    from the profile. Changes are flushed, not committed.
    """
    user = User.query.filter_by(external_id=profile.id).first()
    if user is not None:
        return user

    if profile.email:
        user = User.query.filter_by(email=normalise_email(profile.email)).first()
        if user is not None:
            user.external_id = profile.id
            user.auth_source = "identity_provider"
            db.session.flush()
            logger.info("Linked user %s to provider subject %s", user.id, profile.id)
            return user

    if not profile.email:
        raise UnauthorizedError("Identity provider profile has no email address.")

    user = User(
        email=normalise_email(profile.email),
        name=_display_name(profile),
        profile_image=(profile.user_metadata or {}).get("avatar_url"),
        external_id=profile.id,
        auth_source="identity_provider",
    )
    db.session.add(user)
    db.session.flush()
    logger.info("Created user %s from provider subject %s", user.id, profile.id)
    return user


def resolve_caller_from_token(token: str) -> User:
    """Return the local user owning ``token`` or raise :class:`UnauthorizedError`."""
    provider = current_app.extensions["identity_provider"]
    try:
        profile = provider.get_user(token)
    except IdentityProviderError as exc:
        logger.warning("Rejected bearer token: %s", exc)
        raise UnauthorizedError("Invalid or expired token.") from exc

    user = sync_user_from_provider(profile)
    db.session.commit()
    if not user.is_active:
        raise UnauthorizedError("This account has been deactivated.")
    return user


def parse_webhook(payload) -> tuple[str, dict]:
    """Validate a webhook envelope ``{"event": ..., "data": {...}}``."""
    if not isinstance(payload, dict):
        raise ValidationError("Webhook body must be a JSON object.")
    event = payload.get("event")
    data = payload.get("data")
    errors = {}
    if not isinstance(event, str) or not event:
        errors["event"] = ["Missing webhook event."]
    if not isinstance(data, dict) or not data:
        errors["data"] = ["Missing webhook data."]
    if errors:
        raise ValidationError("Missing event or data in webhook payload.", errors)
    return event, data


def handle_webhook_event(event: str, data: dict) -> None:
    """Apply a provider user event. Unknown events are logged and ignored."""
    if event not in WEBHOOK_EVENTS:
        logger.warning("Unhandled webhook event: %s", event)
        return
    profile = ProviderUser.from_payload(data)
    if event == "user.deleted":
        user = User.query.filter_by(external_id=profile.id).first()
        if user is not None:
            user.is_active = False
            logger.info("Deactivated user %s after provider deletion", user.id)
    else:
        user = sync_user_from_provider(profile)
        if event == "user.updated":
            if profile.email:
                user.email = normalise_email(profile.email)
            metadata = profile.user_metadata or {}
            name = metadata.get("full_name") or metadata.get("name")
            if name:
                user.name = name
            avatar = metadata.get("avatar_url")
            if avatar:
                user.profile_image = avatar
    db.session.commit()
