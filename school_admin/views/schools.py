"""Pydantic schemas for School resources."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from school_admin.views.common import PaginationMeta


def blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


class SchoolCreateRequest(BaseModel):
    """Payload for creating a new School."""

    name: str = Field(..., min_length=1, max_length=255)
    code: Optional[str] = Field(None, max_length=255)
    address: str = Field(..., min_length=1)
    email: EmailStr
    phone_number: str = Field(..., min_length=1, max_length=255)

    model_config = ConfigDict(str_strip_whitespace=True)

    @field_validator("code", mode="before")
    @classmethod
    def blank_code_is_none(cls, value: Any) -> Any:
        return blank_to_none(value)


class SchoolUpdateRequest(SchoolCreateRequest):
    """Payload for replacing an existing School's attributes."""


class SchoolSummary(BaseModel):
    id: int
    name: str
    code: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class SchoolBranchItem(BaseModel):
    id: int
    name: str
    code: Optional[str] = None
    address: str
    phone_number: str

    model_config = ConfigDict(from_attributes=True)


class SchoolResponse(BaseModel):
    """Serialized representation of a School with its active branches."""

    id: int
    name: str
    code: Optional[str] = None
    address: str
    email: str
    phone_number: str
    created_at: datetime
    updated_at: datetime
    deleted_at: Optional[datetime] = None
    branches: list[SchoolBranchItem] = Field(default_factory=list)

    model_config = ConfigDict(from_attributes=True)


class SchoolEnvelope(BaseModel):
    message: str
    data: SchoolResponse


class SchoolListResponse(BaseModel):
    data: list[SchoolResponse]
    meta: PaginationMeta
    filters: dict[str, Any]


__all__ = [
    "SchoolCreateRequest",
    "SchoolEnvelope",
    "SchoolListResponse",
    "SchoolResponse",
    "SchoolSummary",
    "SchoolUpdateRequest",
    "blank_to_none",
]
