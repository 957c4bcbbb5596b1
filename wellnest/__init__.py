"""
Application factory for the Wellnest social wellness API.

This module provides a function to create and configure the Flask
application. The SQLAlchemy and Migrate extensions are initialised here,
the identity provider used by the auth gateway is attached to the app,
and every resource blueprint is registered under ``/api``.

Environment variables control the database connection and the identity
provider (see :mod:`wellnest.config`). SQLite is used when no database
URL is available.
"""

from __future__ import annotations

import logging

from flask import Flask
from flask_migrate import Migrate

# Extensions are created unbound and attached inside create_app().
from .db import db  # use shared db object from db.py
migrate = Migrate()


def create_app(test_config: dict | None = None) -> Flask:
    """Create and configure a Flask application.

    Parameters
    ----------
    test_config: dict | None, optional
        Optional configuration overrides used when running tests.

    Returns
    -------
    Flask
        A configured Flask application instance.
    """
    app = Flask(__name__)
    app.config.from_object("wellnest.config.Config")

    if test_config:
        app.config.update(test_config)

    logging.basicConfig(
        level=app.config["LOG_LEVEL"],
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    db.init_app(app)
    # Import models so that metadata is complete for migrations.
    from . import models  # noqa: F401
    migrate.init_app(app, db)

    from .identity import build_identity_provider
    app.extensions["identity_provider"] = build_identity_provider(app.config)

    from .errors import register_error_handlers
    register_error_handlers(app)

    # Register blueprints. Importing here avoids circular imports.
    from .routes.auth import auth_bp
    from .routes.users import users_bp
    from .routes.posts import posts_bp
    from .routes.comments import comments_bp
    from .routes.groups import groups_bp
    from .routes.challenges import challenges_bp
    from .routes.health_logs import health_logs_bp
    from .routes.reminders import reminders_bp
    from .routes.marketplace import marketplace_bp
    from .routes.notifications import notifications_bp
    from .routes.analytics import analytics_bp
    from .routes.roles import roles_bp

    for blueprint in (
        auth_bp,
        users_bp,
        posts_bp,
        comments_bp,
        groups_bp,
        challenges_bp,
        health_logs_bp,
        reminders_bp,
        marketplace_bp,
        notifications_bp,
        analytics_bp,
        roles_bp,
    ):
        app.register_blueprint(blueprint, url_prefix="/api")

    @app.route("/api/health")
    def health_check() -> dict[str, str]:
        """Return a simple health check response.

        Deployment platforms use this endpoint to verify that the
        application has started correctly.
        """
        return {"status": "ok"}

    return app
