"""SQLAlchemy model representing educational institutions."""

from __future__ import annotations

from sqlalchemy import Column, Integer, String, Text
from sqlalchemy.orm import relationship

from school_admin.models.base import Base, SoftDeleteMixin, TimestampMixin


class School(TimestampMixin, SoftDeleteMixin, Base):
    __tablename__ = "schools"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False, index=True)
    code = Column(String(255), nullable=True, unique=True)
    address = Column(Text, nullable=False)
    email = Column(String(255), nullable=False, unique=True)
    phone_number = Column(String(255), nullable=False)

    branches = relationship(
        "Branch",
        primaryjoin="and_(School.id == Branch.school_id, Branch.deleted_at.is_(None))",
        order_by="Branch.name",
        viewonly=True,
    )


__all__ = ["School"]
