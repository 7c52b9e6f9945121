"""Lifecycle observers describing the notification each entity event produces."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping

from school_admin.models import Branch, Department, NotificationType, School


class LifecycleEvent(str, Enum):
    CREATED = "created"
    UPDATED = "updated"
    DELETED = "deleted"
    RESTORED = "restored"
    FORCE_DELETED = "force_deleted"


@dataclass(frozen=True)
class NotificationDraft:
    type: NotificationType
    title: str
    message: str
    icon: str
    action_url: str | None = None


_EVENT_TYPES = {
    LifecycleEvent.CREATED: NotificationType.SUCCESS,
    LifecycleEvent.UPDATED: NotificationType.INFO,
    LifecycleEvent.DELETED: NotificationType.WARNING,
    LifecycleEvent.RESTORED: NotificationType.INFO,
    LifecycleEvent.FORCE_DELETED: NotificationType.ERROR,
}

# Removed or purged rows are no longer safely linkable.
_LINKED_EVENTS = {
    LifecycleEvent.CREATED,
    LifecycleEvent.UPDATED,
    LifecycleEvent.RESTORED,
}


class EntityObserver:
    """Builds notification drafts for one entity type."""

    icon: str = "info"
    collection: str = ""
    watched_fields: tuple[str, ...] = ("name", "code")
    titles: Mapping[LifecycleEvent, str] = {}
    messages: Mapping[LifecycleEvent, str] = {}

    def parent_name(self, entity: Any) -> str | None:
        return None

    def snapshot(self, entity: Any) -> dict[str, Any]:
        """Capture the watched fields before an update is applied."""

        return {field: getattr(entity, field) for field in self.watched_fields}

    def has_relevant_changes(self, previous: Mapping[str, Any], entity: Any) -> bool:
        return any(
            previous.get(field) != getattr(entity, field)
            for field in self.watched_fields
        )

    def draft(self, event: LifecycleEvent, entity: Any) -> NotificationDraft:
        message = self.messages[event].format(
            name=entity.name,
            parent=self.parent_name(entity),
        )
        action_url = None
        if event in _LINKED_EVENTS:
            action_url = f"/{self.collection}/{entity.id}"
        return NotificationDraft(
            type=_EVENT_TYPES[event],
            title=self.titles[event],
            message=message,
            icon=self.icon,
            action_url=action_url,
        )


class SchoolObserver(EntityObserver):
    icon = "school"
    collection = "schools"
    titles = {
        LifecycleEvent.CREATED: "New School Registered",
        LifecycleEvent.UPDATED: "School Information Updated",
        LifecycleEvent.DELETED: "School Deleted",
        LifecycleEvent.RESTORED: "School Restored",
        LifecycleEvent.FORCE_DELETED: "School Permanently Deleted",
    }
    messages = {
        LifecycleEvent.CREATED: "A new school '{name}' has been registered in the system.",
        LifecycleEvent.UPDATED: "School '{name}' information has been updated.",
        LifecycleEvent.DELETED: "School '{name}' has been deleted from the system.",
        LifecycleEvent.RESTORED: "School '{name}' has been restored.",
        LifecycleEvent.FORCE_DELETED: "School '{name}' has been permanently deleted from the system.",
    }


class BranchObserver(EntityObserver):
    icon = "building"
    collection = "branches"
    titles = {
        LifecycleEvent.CREATED: "New Branch Created",
        LifecycleEvent.UPDATED: "Branch Information Updated",
        LifecycleEvent.DELETED: "Branch Deleted",
        LifecycleEvent.RESTORED: "Branch Restored",
        LifecycleEvent.FORCE_DELETED: "Branch Permanently Deleted",
    }
    messages = {
        LifecycleEvent.CREATED: "A new branch '{name}' has been created for {parent}.",
        LifecycleEvent.UPDATED: "Branch '{name}' information has been updated.",
        LifecycleEvent.DELETED: "Branch '{name}' has been deleted from {parent}.",
        LifecycleEvent.RESTORED: "Branch '{name}' has been restored.",
        LifecycleEvent.FORCE_DELETED: "Branch '{name}' has been permanently deleted from the system.",
    }

    def parent_name(self, entity: Branch) -> str | None:
        return entity.school.name if entity.school is not None else None


class DepartmentObserver(EntityObserver):
    icon = "users"
    collection = "departments"
    titles = {
        LifecycleEvent.CREATED: "New Department Created",
        LifecycleEvent.UPDATED: "Department Information Updated",
        LifecycleEvent.DELETED: "Department Deleted",
        LifecycleEvent.RESTORED: "Department Restored",
        LifecycleEvent.FORCE_DELETED: "Department Permanently Deleted",
    }
    messages = {
        LifecycleEvent.CREATED: "A new department '{name}' has been created in {parent}.",
        LifecycleEvent.UPDATED: "Department '{name}' information has been updated.",
        LifecycleEvent.DELETED: "Department '{name}' has been deleted from {parent}.",
        LifecycleEvent.RESTORED: "Department '{name}' has been restored.",
        LifecycleEvent.FORCE_DELETED: "Department '{name}' has been permanently deleted from the system.",
    }

    def parent_name(self, entity: Department) -> str | None:
        return entity.branch.name if entity.branch is not None else None


OBSERVERS: dict[type, EntityObserver] = {
    School: SchoolObserver(),
    Branch: BranchObserver(),
    Department: DepartmentObserver(),
}


__all__ = [
    "BranchObserver",
    "DepartmentObserver",
    "EntityObserver",
    "LifecycleEvent",
    "NotificationDraft",
    "OBSERVERS",
    "SchoolObserver",
]
