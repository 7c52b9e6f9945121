"""Tests for the capability based policy registry."""

from __future__ import annotations

import pytest

from school_admin.errors import ForbiddenError
from school_admin.models import Branch, Department, School
from school_admin.services.policies import Action, CapabilityPolicy, PolicyRegistry, policies


class StubUser:
    id = 1

    def __init__(self, *permissions: str) -> None:
        self.permissions = set(permissions)

    def has_permission(self, name: str) -> bool:
        return name in self.permissions


@pytest.mark.parametrize(
    ("action", "permission"),
    [
        (Action.VIEW_ANY, "view-branch"),
        (Action.VIEW, "view-branch"),
        (Action.CREATE, "create-branch"),
        (Action.UPDATE, "edit-branch"),
        (Action.DELETE, "delete-branch"),
        (Action.RESTORE, "delete-branch"),
        (Action.FORCE_DELETE, "delete-branch"),
    ],
)
def test_action_maps_to_capability(action, permission):
    assert CapabilityPolicy("branch").permission_for(action) == permission


def test_registry_answers_for_types_and_instances():
    viewer = StubUser("view-school", "view-department")

    assert policies.allows(viewer, Action.VIEW_ANY, School)
    assert policies.allows(viewer, Action.VIEW, Department(name="d", code="d", branch_id=1))
    assert not policies.allows(viewer, Action.VIEW, Branch)
    assert not policies.allows(viewer, Action.UPDATE, School)


def test_department_uses_same_capability_rule():
    anyone = StubUser()

    assert not policies.allows(anyone, Action.VIEW_ANY, Department)
    assert not policies.allows(anyone, Action.CREATE, Department)


def test_authorize_raises_forbidden():
    with pytest.raises(ForbiddenError):
        policies.authorize(StubUser("view-school"), Action.DELETE, School)

    policies.authorize(StubUser("delete-school"), Action.FORCE_DELETE, School)


def test_unregistered_type_is_a_lookup_error():
    registry = PolicyRegistry()

    with pytest.raises(LookupError):
        registry.policy_for(School)
