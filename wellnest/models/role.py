"""Named roles and their assignment to users."""

from __future__ import annotations

from typing import Optional

from ..db import db
from .base import IdentityMixin


class Role(IdentityMixin, db.Model):
    """A named set of permissions, e.g. ``coach`` or ``moderator``."""

    __allow_unmapped__ = True
    __tablename__ = "roles"

    name: str = db.Column(db.String(50), nullable=False, unique=True)
    description: Optional[str] = db.Column(db.Text)
    permissions = db.Column(db.JSON)
    is_active: bool = db.Column(db.Boolean, nullable=False, default=True)

    assignments = db.relationship("UserRole", back_populates="role", passive_deletes=True)

    def __repr__(self) -> str:
        return f"<Role {self.name}>"


class UserRole(IdentityMixin, db.Model):
    __allow_unmapped__ = True
    __tablename__ = "user_roles"

    user_id = db.Column(db.Uuid, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    role_id = db.Column(db.Uuid, db.ForeignKey("roles.id", ondelete="CASCADE"), nullable=False)
    is_active: bool = db.Column(db.Boolean, nullable=False, default=True)

    role = db.relationship("Role", back_populates="assignments")
    user = db.relationship("User")

    __table_args__ = (db.UniqueConstraint("user_id", "role_id", name="uix_user_role"),)
