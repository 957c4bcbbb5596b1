"""Centralised error handling and custom exceptions.

The service layer signals failures by raising the exceptions defined
here. None of them know about Flask responses until the handlers
registered by :func:`register_error_handlers` serialise them, which keeps
services free of HTTP concerns and easy to unit test.
"""
from __future__ import annotations

import logging

from flask import jsonify
from marshmallow import ValidationError as SchemaValidationError
from sqlalchemy.exc import IntegrityError

from .db import db

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """Base class for errors that map onto a fixed HTTP status."""

    code = "ERROR"
    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def payload(self) -> dict:
        return {"code": self.code, "message": self.message}

    def to_response(self):
        return jsonify({"error": self.payload()}), self.status_code


class ValidationError(ApiError):
    """Raised when input validation fails."""

    code = "VALIDATION_ERROR"
    status_code = 400

    def __init__(self, message: str, fields: dict | None = None) -> None:
        super().__init__(message)
        self.fields = fields or {}

    def payload(self) -> dict:
        body = super().payload()
        body["fields"] = self.fields
        return body


class UnauthorizedError(ApiError):
    """Raised when the caller cannot be authenticated."""

    code = "UNAUTHORIZED"
    status_code = 401


class ForbiddenError(ApiError):
    """Raised when the caller is authenticated but not allowed to act."""

    code = "FORBIDDEN"
    status_code = 403


class NotFoundError(ApiError):
    """Raised when a requested resource cannot be found."""

    code = "NOT_FOUND"
    status_code = 404


class ConflictError(ApiError):
    """Raised when a uniqueness or state rule would be violated."""

    code = "CONFLICT"
    status_code = 409


def register_error_handlers(app) -> None:
    """Register custom error handlers on the given Flask app."""

    @app.errorhandler(ApiError)
    def handle_api_error(err: ApiError):
        return err.to_response()

    @app.errorhandler(SchemaValidationError)
    def handle_schema_error(err: SchemaValidationError):
        messages = err.messages if isinstance(err.messages, dict) else {"_schema": err.messages}
        return ValidationError("Invalid input.", messages).to_response()

    @app.errorhandler(IntegrityError)
    def handle_integrity_error(err: IntegrityError):
        # Unique constraints are the last line of defence against
        # concurrent duplicate writes.
        db.session.rollback()
        logger.warning("Integrity error: %s", err.orig)
        return ConflictError("The request conflicts with existing data.").to_response()
