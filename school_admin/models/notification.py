"""SQLAlchemy model for per-user inbox notifications."""

from __future__ import annotations

from enum import Enum

from sqlalchemy import JSON, Boolean, Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from school_admin.models.base import Base, utcnow


class NotificationType(str, Enum):
    """Severity tag shown next to a notification."""

    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


class Notification(Base):
    __tablename__ = "notifications"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    type = Column(String(20), nullable=False, default=NotificationType.INFO.value)
    title = Column(String(255), nullable=False)
    message = Column(Text, nullable=False)
    icon = Column(String(50), nullable=True)
    action_url = Column(String(2048), nullable=True)
    read = Column(Boolean, nullable=False, default=False, index=True)
    read_at = Column(DateTime, nullable=True)
    data = Column(JSON, nullable=True)
    created_at = Column(DateTime, nullable=False, default=utcnow, index=True)

    user = relationship("User")

    def mark_as_read(self) -> None:
        """Flag the notification as read; the first read time is kept."""

        if self.read:
            return
        self.read = True
        self.read_at = utcnow()


__all__ = ["Notification", "NotificationType"]
