"""SQLAlchemy model for application users."""

from __future__ import annotations

from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship

from school_admin.models.base import Base, TimestampMixin
from school_admin.models.role import role_user


class User(TimestampMixin, Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(256), nullable=False)

    roles = relationship("Role", secondary=role_user, lazy="selectin")

    @property
    def role_names(self) -> list[str]:
        return sorted(role.name for role in self.roles)

    @property
    def permission_names(self) -> set[str]:
        """Every capability granted through the user's roles."""

        return {
            permission.name
            for role in self.roles
            for permission in role.permissions
        }

    def has_permission(self, name: str) -> bool:
        return name in self.permission_names


__all__ = ["User"]
