"""Pydantic schemas for the notification inbox."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict


class NotificationItem(BaseModel):
    id: int
    type: str
    title: str
    message: str
    icon: Optional[str] = None
    action_url: Optional[str] = None
    read: bool
    read_at: Optional[datetime] = None
    data: Optional[dict[str, Any]] = None
    created_at: datetime
    time: str

    model_config = ConfigDict(from_attributes=True)


class NotificationListResponse(BaseModel):
    """The newest notifications of the current user plus the unread total."""

    notifications: list[NotificationItem]
    unread_count: int


__all__ = ["NotificationItem", "NotificationListResponse"]
