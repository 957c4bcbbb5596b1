"""User accounts.

Accounts are usually created on first sight of an identity-provider
token (see :mod:`wellnest.services.auth_service`), but they can also be
registered directly with a password, which is stored as a salted hash.
Rows owned by a user reference it with ``ON DELETE CASCADE``, so a hard
delete of the account removes them in the database.
"""

from __future__ import annotations

from typing import Optional

from werkzeug.security import check_password_hash, generate_password_hash

from ..db import db
from .base import IdentityMixin


class User(IdentityMixin, db.Model):
    """A member of the community."""

    __allow_unmapped__ = True
    __tablename__ = "users"

    email: str = db.Column(db.String(255), unique=True, nullable=False)
    name: Optional[str] = db.Column(db.String(100))
    password_hash: Optional[str] = db.Column(db.String(255))
    bio: Optional[str] = db.Column(db.Text)
    profile_image: Optional[str] = db.Column(db.Text)
    cover_image: Optional[str] = db.Column(db.Text)
    fitness_goal: Optional[str] = db.Column(db.String(100))
    interests = db.Column(db.JSON)

    # Subject id assigned by the external identity provider
    external_id: Optional[str] = db.Column(db.String(255), unique=True)
    auth_source: str = db.Column(db.String(50), nullable=False, default="local")
    is_active: bool = db.Column(db.Boolean, nullable=False, default=True)

    def set_password(self, password: str) -> None:
        self.password_hash = generate_password_hash(password)

    def check_password(self, password: str) -> bool:
        if not self.password_hash:
            return False
        return check_password_hash(self.password_hash, password)

    def __repr__(self) -> str:
        return f"<User {self.email}>"
