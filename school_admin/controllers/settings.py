"""Settings controller exposing the typed key/value store."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter

from school_admin.controllers.dependencies import CurrentUserDep, SettingsStoreDep
from school_admin.errors import ForbiddenError, NotFoundError
from school_admin.models import Setting as SettingModel
from school_admin.models import User as UserModel
from school_admin.services.settings_store import cast_value
from school_admin.views import SettingEnvelope, SettingResponse, SettingUpdateRequest

router = APIRouter(prefix="/settings", tags=["settings"])


def _require(user: UserModel, permission: str) -> None:
    if not user.has_permission(permission):
        raise ForbiddenError()


def _response(setting: SettingModel, value: Any = None) -> SettingResponse:
    return SettingResponse(
        key=setting.key,
        value=cast_value(setting.value, setting.type) if value is None else value,
        type=setting.type,
        description=setting.description,
        group=setting.group,
        is_public=setting.is_public,
    )


@router.get("/public", response_model=list[SettingResponse])
async def public_settings(store: SettingsStoreDep) -> list[SettingResponse]:
    """Settings flagged public; no authentication required."""

    return [_response(setting) for setting in await store.get_public()]


@router.get("", response_model=list[SettingResponse])
async def list_settings(
    store: SettingsStoreDep,
    current_user: CurrentUserDep,
    group: str = "general",
) -> list[SettingResponse]:
    _require(current_user, "view-settings")
    return [_response(setting) for setting in await store.get_by_group(group)]


@router.get("/{key}", response_model=SettingResponse)
async def get_setting(
    key: str,
    store: SettingsStoreDep,
    current_user: CurrentUserDep,
) -> SettingResponse:
    _require(current_user, "view-settings")
    setting = await store.find(key)
    if setting is None:
        raise NotFoundError("Setting not found.")
    return _response(setting, await store.get(key))


@router.put("/{key}", response_model=SettingEnvelope)
async def update_setting(
    key: str,
    payload: SettingUpdateRequest,
    store: SettingsStoreDep,
    current_user: CurrentUserDep,
) -> SettingEnvelope:
    _require(current_user, "edit-settings")
    setting = await store.set(
        key,
        payload.value,
        type=payload.type.value,
        description=payload.description,
        group=payload.group,
        is_public=payload.is_public,
    )
    return SettingEnvelope(message="Setting updated successfully.", data=_response(setting))


__all__ = ["router"]
