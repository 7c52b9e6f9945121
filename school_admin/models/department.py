"""SQLAlchemy model for departments inside a branch."""

from __future__ import annotations

from sqlalchemy import Column, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from school_admin.models.base import Base, SoftDeleteMixin, TimestampMixin


class Department(TimestampMixin, SoftDeleteMixin, Base):
    """A department of a branch, optionally headed by a user."""

    __tablename__ = "departments"

    id = Column(Integer, primary_key=True, index=True)
    branch_id = Column(
        Integer,
        ForeignKey("branches.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name = Column(String(255), nullable=False, index=True)
    code = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    head_user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )

    __table_args__ = (
        UniqueConstraint(
            "branch_id",
            "code",
            name="uq_departments_branch_code",
        ),
    )

    branch = relationship("Branch")
    head = relationship("User", foreign_keys=[head_user_id])


__all__ = ["Department"]
