"""Database setup utilities.

This module centralises the SQLAlchemy extension object used by every
model in :mod:`wellnest.models`. The application factory binds it to the
Flask app, so import ``db`` from ``wellnest`` rather than creating a new
instance anywhere else.

Referential actions (``ON DELETE CASCADE``) are declared on the foreign
keys themselves. SQLite only honours them when the ``foreign_keys``
pragma is switched on, which the connect hook below does for every new
connection.
"""
from __future__ import annotations

import sqlite3

from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import event
from sqlalchemy.engine import Engine

db = SQLAlchemy()


@event.listens_for(Engine, "connect")
def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    if isinstance(dbapi_connection, sqlite3.Connection):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()
