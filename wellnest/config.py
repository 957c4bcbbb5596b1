"""Default configuration for the Wellnest API.

Every value can be overridden through the environment or by passing a
``test_config`` mapping to :func:`wellnest.create_app`.
"""
from __future__ import annotations

import os


class Config:
    SECRET_KEY = os.environ.get("SECRET_KEY", "please-change-this-secret-key")

    SQLALCHEMY_DATABASE_URI = os.environ.get("DATABASE_URL", "sqlite:///wellnest.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # External identity provider (Supabase compatible ``/auth/v1/user``)
    IDENTITY_PROVIDER_URL = os.environ.get("IDENTITY_PROVIDER_URL", "")
    IDENTITY_PROVIDER_KEY = os.environ.get("IDENTITY_PROVIDER_KEY", "")
    IDENTITY_PROVIDER_TIMEOUT = float(os.environ.get("IDENTITY_PROVIDER_TIMEOUT", "5"))
    # A ready-made provider object; tests inject a fake here.
    IDENTITY_PROVIDER = None

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

    DEFAULT_PAGE_SIZE = 20
    MAX_PAGE_SIZE = 100
