"""Pydantic schemas for Department resources."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from school_admin.views.branches import BranchSummary
from school_admin.views.common import PaginationMeta
from school_admin.views.schools import blank_to_none


class DepartmentCreateRequest(BaseModel):
    """Payload for creating a Department; the code is unique per branch."""

    branch_id: int
    name: str = Field(..., min_length=1, max_length=255)
    code: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    head_user_id: Optional[int] = None

    model_config = ConfigDict(str_strip_whitespace=True)

    @field_validator("description", mode="before")
    @classmethod
    def blank_description_is_none(cls, value: Any) -> Any:
        return blank_to_none(value)


class DepartmentUpdateRequest(DepartmentCreateRequest):
    """Payload for replacing an existing Department's attributes."""


class UserSummary(BaseModel):
    id: int
    name: str
    email: str

    model_config = ConfigDict(from_attributes=True)


class DepartmentResponse(BaseModel):
    id: int
    branch_id: int
    name: str
    code: str
    description: Optional[str] = None
    head_user_id: Optional[int] = None
    created_at: datetime
    updated_at: datetime
    deleted_at: Optional[datetime] = None
    branch: Optional[BranchSummary] = None
    head: Optional[UserSummary] = None

    model_config = ConfigDict(from_attributes=True)


class DepartmentEnvelope(BaseModel):
    message: str
    data: DepartmentResponse


class DepartmentListResponse(BaseModel):
    data: list[DepartmentResponse]
    meta: PaginationMeta
    filters: dict[str, Any]


__all__ = [
    "DepartmentCreateRequest",
    "DepartmentEnvelope",
    "DepartmentListResponse",
    "DepartmentResponse",
    "DepartmentUpdateRequest",
    "UserSummary",
]
