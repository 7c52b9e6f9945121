"""SQLAlchemy model for the branches (campuses) of a school."""

from __future__ import annotations

from sqlalchemy import Column, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from school_admin.models.base import Base, SoftDeleteMixin, TimestampMixin


class Branch(TimestampMixin, SoftDeleteMixin, Base):
    """A campus owned by a school; its code is unique within that school."""

    __tablename__ = "branches"

    id = Column(Integer, primary_key=True, index=True)
    school_id = Column(
        Integer,
        ForeignKey("schools.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name = Column(String(255), nullable=False, index=True)
    code = Column(String(255), nullable=True)
    address = Column(Text, nullable=False)
    phone_number = Column(String(255), nullable=False)

    __table_args__ = (
        UniqueConstraint(
            "school_id",
            "code",
            name="uq_branches_school_code",
        ),
    )

    school = relationship("School")
    departments = relationship(
        "Department",
        primaryjoin="and_(Branch.id == Department.branch_id, Department.deleted_at.is_(None))",
        order_by="Department.name",
        viewonly=True,
    )


__all__ = ["Branch"]
