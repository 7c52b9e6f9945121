"""Pydantic schemas for application settings."""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, Field

from school_admin.models import SettingType


class SettingResponse(BaseModel):
    """A stored setting with its value already cast to the declared type."""

    key: str
    value: Any = None
    type: SettingType
    description: Optional[str] = None
    group: str
    is_public: bool


class SettingUpdateRequest(BaseModel):
    value: Any = None
    type: SettingType = SettingType.STRING
    description: Optional[str] = None
    group: str = Field(default="general", min_length=1, max_length=100)
    is_public: bool = False


class SettingEnvelope(BaseModel):
    message: str
    data: SettingResponse


__all__ = ["SettingEnvelope", "SettingResponse", "SettingUpdateRequest"]
