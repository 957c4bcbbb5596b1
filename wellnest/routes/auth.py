"""
Authentication routes for the Wellnest API.

Tokens are issued by the external identity provider. These endpoints let
clients confirm that a token maps onto a local account and let the
provider push account changes to us through a webhook.
"""

from __future__ import annotations

import logging

from flask import Blueprint, request

from ..auth import bearer_token, current_user, login_required
from ..db import db
from ..schemas.users import UserSchema
from ..services import auth_service

logger = logging.getLogger(__name__)

auth_bp = Blueprint("auth", __name__)


@auth_bp.route("/auth/verify-token", methods=["POST"])
def verify_token() -> tuple[dict, int]:
    """Resolve a token to its local user.

    The token is read from the ``Authorization`` header, or from a
    ``token`` field in the JSON body.
    """
    data = request.get_json(silent=True) or {}
    token = data.get("token") if isinstance(data, dict) else None
    if not token:
        token = bearer_token()
    user = auth_service.resolve_caller_from_token(token)
    return {"valid": True, "user": UserSchema().dump(user)}, 200


@auth_bp.route("/auth/me", methods=["GET"])
@login_required
def me() -> tuple[dict, int]:
    return UserSchema().dump(current_user()), 200


@auth_bp.route("/auth/webhook", methods=["POST"])
def provider_webhook() -> tuple[dict, int]:
    """Apply a user event pushed by the identity provider.

    Malformed envelopes are rejected with 400. Once an event is accepted
    the provider always receives a success answer, even when applying it
    fails, so that it does not keep retrying; failures are logged.
    """
    event, data = auth_service.parse_webhook(request.get_json(silent=True))
    try:
        auth_service.handle_webhook_event(event, data)
    except Exception:
        db.session.rollback()
        logger.exception("Failed to handle webhook event %s", event)
    else:
        logger.info("Processed webhook event %s", event)
    return {"success": True, "message": "Webhook processed successfully"}, 200
