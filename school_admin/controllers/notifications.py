"""Inbox endpoints for the notifications written by lifecycle fan-out."""

from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter

from school_admin.controllers.dependencies import CurrentUserDep, SessionDep
from school_admin.models import Notification as NotificationModel
from school_admin.models.base import utcnow
from school_admin.services import notifications as inbox
from school_admin.views import (
    NotificationItem,
    NotificationListResponse,
    SuccessResponse,
)

router = APIRouter(prefix="/notifications", tags=["notifications"])


def _item(notification: NotificationModel, now: datetime) -> NotificationItem:
    return NotificationItem(
        id=notification.id,
        type=notification.type,
        title=notification.title,
        message=notification.message,
        icon=notification.icon,
        action_url=notification.action_url,
        read=notification.read,
        read_at=notification.read_at,
        data=notification.data,
        created_at=notification.created_at,
        time=inbox.humanize_time(notification.created_at, now),
    )


@router.get("", response_model=NotificationListResponse)
async def list_notifications(
    session: SessionDep,
    current_user: CurrentUserDep,
) -> NotificationListResponse:
    """Return the newest notifications of the caller with the unread total."""

    notifications = await inbox.list_for_user(session, current_user.id)
    now = utcnow()
    return NotificationListResponse(
        notifications=[_item(notification, now) for notification in notifications],
        unread_count=await inbox.unread_count(session, current_user.id),
    )


@router.patch("/read-all", response_model=SuccessResponse)
async def mark_all_notifications_read(
    session: SessionDep,
    current_user: CurrentUserDep,
) -> SuccessResponse:
    await inbox.mark_all_as_read(session, current_user.id)
    return SuccessResponse(message="All notifications marked as read")


@router.patch("/{notification_id}/read", response_model=SuccessResponse)
async def mark_notification_read(
    notification_id: int,
    session: SessionDep,
    current_user: CurrentUserDep,
) -> SuccessResponse:
    await inbox.mark_as_read(session, current_user.id, notification_id)
    return SuccessResponse(message="Notification marked as read")


__all__ = ["router"]
