"""Notification fan-out for entity lifecycle events and inbox helpers."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Callable, Mapping

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from school_admin.errors import NotFoundError
from school_admin.models import Notification, User
from school_admin.models.base import utcnow
from school_admin.services.observers import OBSERVERS, EntityObserver, LifecycleEvent
from school_admin.telemetry import record_notification_failure, record_notifications

logger = logging.getLogger(__name__)

INBOX_LIMIT = 50

SessionFactory = Callable[[], AsyncSession]


class NotificationFanout:
    """Writes one notification per existing user for each lifecycle event.

    The fan-out runs after the entity change has been committed and uses
    its own session, so a failure here is logged and dropped without
    touching the primary write.
    """

    def __init__(
        self,
        session_factory: SessionFactory,
        observers: Mapping[type, EntityObserver] | None = None,
    ) -> None:
        self._session_factory = session_factory
        self._observers = dict(OBSERVERS if observers is None else observers)

    def observer_for(self, entity: Any) -> EntityObserver | None:
        return self._observers.get(type(entity))

    def snapshot(self, entity: Any) -> dict[str, Any]:
        observer = self.observer_for(entity)
        return observer.snapshot(entity) if observer else {}

    async def dispatch(
        self,
        event: LifecycleEvent,
        entity: Any,
        actor_id: int | None,
        previous: Mapping[str, Any] | None = None,
    ) -> int:
        """Broadcast ``event`` for ``entity`` and return the rows written."""

        observer = self.observer_for(entity)
        if observer is None:
            return 0

        if event is LifecycleEvent.UPDATED and not observer.has_relevant_changes(
            previous or {}, entity
        ):
            logger.debug(
                "Skipping update notification for %s %s; watched fields unchanged",
                type(entity).__name__,
                entity.id,
            )
            return 0

        try:
            draft = observer.draft(event, entity)
            payload = {
                "created_by": actor_id,
                "timestamp": datetime.now(timezone.utc).isoformat(),
            }
            async with self._session_factory() as session:
                user_ids = (await session.execute(select(User.id))).scalars().all()
                session.add_all(
                    [
                        Notification(
                            user_id=user_id,
                            type=draft.type.value,
                            title=draft.title,
                            message=draft.message,
                            icon=draft.icon,
                            action_url=draft.action_url,
                            data=dict(payload),
                        )
                        for user_id in user_ids
                    ]
                )
                await session.commit()
        except Exception:
            record_notification_failure(event.value)
            logger.exception(
                "Failed to fan out %s notification for %s",
                event.value,
                type(entity).__name__,
            )
            return 0

        record_notifications(event.value, len(user_ids))
        logger.info(
            "Sent %s notification for %s %s to %d users",
            event.value,
            type(entity).__name__,
            entity.id,
            len(user_ids),
        )
        return len(user_ids)


def humanize_time(created_at: datetime, now: datetime | None = None) -> str:
    """Render a relative age such as ``5 minutes ago``."""

    now = now or utcnow()
    minutes = max(0, int((now - created_at).total_seconds() // 60))
    if minutes < 1:
        return "Just now"
    if minutes < 60:
        return f"{minutes} minute{'s' if minutes > 1 else ''} ago"
    if minutes < 1440:
        hours = minutes // 60
        return f"{hours} hour{'s' if hours > 1 else ''} ago"
    days = minutes // 1440
    return f"{days} day{'s' if days > 1 else ''} ago"


async def list_for_user(
    session: AsyncSession,
    user_id: int,
    limit: int = INBOX_LIMIT,
) -> list[Notification]:
    result = await session.execute(
        select(Notification)
        .where(Notification.user_id == user_id)
        .order_by(Notification.created_at.desc(), Notification.id.desc())
        .limit(limit)
    )
    return list(result.scalars().all())


async def unread_count(session: AsyncSession, user_id: int) -> int:
    result = await session.execute(
        select(func.count(Notification.id)).where(
            Notification.user_id == user_id,
            Notification.read.is_(False),
        )
    )
    return result.scalar_one()


async def mark_as_read(
    session: AsyncSession,
    user_id: int,
    notification_id: int,
) -> Notification:
    """Mark one of the user's notifications read; repeating it is a no-op."""

    result = await session.execute(
        select(Notification).where(
            Notification.id == notification_id,
            Notification.user_id == user_id,
        )
    )
    notification = result.scalar_one_or_none()
    if notification is None:
        raise NotFoundError()

    if not notification.read:
        notification.mark_as_read()
        await session.commit()
    return notification


async def mark_all_as_read(session: AsyncSession, user_id: int) -> int:
    result = await session.execute(
        update(Notification)
        .where(
            Notification.user_id == user_id,
            Notification.read.is_(False),
        )
        .values(read=True, read_at=utcnow())
    )
    await session.commit()
    return result.rowcount or 0


__all__ = [
    "INBOX_LIMIT",
    "NotificationFanout",
    "humanize_time",
    "list_for_user",
    "mark_all_as_read",
    "mark_as_read",
    "unread_count",
]
