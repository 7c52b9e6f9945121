"""Authorization policies gating CRUD actions per entity type."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Protocol

from school_admin.errors import ForbiddenError
from school_admin.models import Branch, Department, School

logger = logging.getLogger(__name__)


class Action(str, Enum):
    VIEW_ANY = "view-any"
    VIEW = "view"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    RESTORE = "restore"
    FORCE_DELETE = "force-delete"


class Principal(Protocol):
    id: Any

    def has_permission(self, name: str) -> bool: ...


class Policy(Protocol):
    def allows(
        self,
        user: Principal,
        action: Action,
        instance: Any | None = None,
    ) -> bool: ...


# Capability verb required for each action.
_CAPABILITY_VERBS = {
    Action.VIEW_ANY: "view",
    Action.VIEW: "view",
    Action.CREATE: "create",
    Action.UPDATE: "edit",
    Action.DELETE: "delete",
    Action.RESTORE: "delete",
    Action.FORCE_DELETE: "delete",
}


class CapabilityPolicy:
    """Grant an action when the user holds ``<verb>-<resource>``.

    ``edit-branch`` lets a user update any branch; restore and force delete
    reuse the delete capability.
    """

    def __init__(self, resource: str) -> None:
        self.resource = resource

    def permission_for(self, action: Action) -> str:
        return f"{_CAPABILITY_VERBS[Action(action)]}-{self.resource}"

    def allows(
        self,
        user: Principal,
        action: Action,
        instance: Any | None = None,
    ) -> bool:
        return user.has_permission(self.permission_for(action))


class PolicyRegistry:
    """Maps entity types to the single policy that governs them."""

    def __init__(self) -> None:
        self._policies: dict[type, Policy] = {}

    def register(self, entity_type: type, policy: Policy) -> None:
        self._policies[entity_type] = policy

    def policy_for(self, entity: type | Any) -> Policy:
        entity_type = entity if isinstance(entity, type) else type(entity)
        try:
            return self._policies[entity_type]
        except KeyError:
            raise LookupError(f"No policy registered for {entity_type.__name__}") from None

    def allows(
        self,
        user: Principal,
        action: Action,
        entity: type | Any,
    ) -> bool:
        instance = None if isinstance(entity, type) else entity
        return self.policy_for(entity).allows(user, Action(action), instance)

    def authorize(
        self,
        user: Principal,
        action: Action,
        entity: type | Any,
    ) -> None:
        """Raise ``ForbiddenError`` unless ``user`` may perform ``action``."""

        if not self.allows(user, action, entity):
            entity_type = entity if isinstance(entity, type) else type(entity)
            logger.info(
                "Denied %s on %s for user %s",
                Action(action).value,
                entity_type.__name__,
                getattr(user, "id", None),
            )
            raise ForbiddenError()


policies = PolicyRegistry()
policies.register(School, CapabilityPolicy("school"))
policies.register(Branch, CapabilityPolicy("branch"))
policies.register(Department, CapabilityPolicy("department"))


__all__ = [
    "Action",
    "CapabilityPolicy",
    "Policy",
    "PolicyRegistry",
    "Principal",
    "policies",
]
