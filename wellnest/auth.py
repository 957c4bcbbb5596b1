"""
Request authentication for protected routes.

``login_required`` reads the bearer token from the ``Authorization``
header, resolves it to a local user through
:func:`wellnest.services.auth_service.resolve_caller_from_token` and
stores the result on ``flask.g`` for the duration of the request.
"""

from __future__ import annotations

from functools import wraps

from flask import g, request

from .errors import UnauthorizedError


def bearer_token() -> str:
    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise UnauthorizedError("Missing bearer token.")
    return token.strip()


def login_required(view):
    """Reject the request with 401 unless it carries a valid token."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        from .services.auth_service import resolve_caller_from_token

        g.current_user = resolve_caller_from_token(bearer_token())
        return view(*args, **kwargs)

    return wrapper


def current_user():
    return g.current_user


def current_user_id():
    return g.current_user.id
