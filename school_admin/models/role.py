"""SQLAlchemy models for roles and the capabilities they grant."""

from __future__ import annotations

from sqlalchemy import Column, ForeignKey, Integer, String, Table
from sqlalchemy.orm import relationship

from school_admin.models.base import Base, TimestampMixin

permission_role = Table(
    "permission_role",
    Base.metadata,
    Column(
        "permission_id",
        Integer,
        ForeignKey("permissions.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "role_id",
        Integer,
        ForeignKey("roles.id", ondelete="CASCADE"),
        primary_key=True,
    ),
)

role_user = Table(
    "role_user",
    Base.metadata,
    Column(
        "role_id",
        Integer,
        ForeignKey("roles.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "user_id",
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    ),
)


class Permission(TimestampMixin, Base):
    """A named capability such as ``edit-school``."""

    __tablename__ = "permissions"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False, unique=True, index=True)
    label = Column(String(255), nullable=True)


class Role(TimestampMixin, Base):
    """A named bundle of permissions assigned to users."""

    __tablename__ = "roles"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False, unique=True, index=True)

    permissions = relationship(
        "Permission",
        secondary=permission_role,
        lazy="selectin",
    )


__all__ = ["Permission", "Role", "permission_role", "role_user"]
