"""Pydantic schemas for Branch resources."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from school_admin.views.common import PaginationMeta
from school_admin.views.schools import SchoolSummary, blank_to_none


class BranchFields(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    code: Optional[str] = Field(None, max_length=255)
    address: str = Field(..., min_length=1)
    phone_number: str = Field(..., min_length=1, max_length=255)

    model_config = ConfigDict(str_strip_whitespace=True)

    @field_validator("code", mode="before")
    @classmethod
    def blank_code_is_none(cls, value: Any) -> Any:
        return blank_to_none(value)


class BranchCreateRequest(BranchFields):
    """Payload for creating a Branch; the code is unique per school."""

    school_id: int


class BranchUpdateRequest(BranchCreateRequest):
    """Payload for replacing an existing Branch's attributes."""


class BranchSummary(BaseModel):
    id: int
    school_id: int
    name: str
    code: Optional[str] = None
    school: Optional[SchoolSummary] = None

    model_config = ConfigDict(from_attributes=True)


class BranchResponse(BaseModel):
    id: int
    school_id: int
    name: str
    code: Optional[str] = None
    address: str
    phone_number: str
    created_at: datetime
    updated_at: datetime
    deleted_at: Optional[datetime] = None
    school: Optional[SchoolSummary] = None

    model_config = ConfigDict(from_attributes=True)


class BranchEnvelope(BaseModel):
    message: str
    data: BranchResponse


class BranchListResponse(BaseModel):
    data: list[BranchResponse]
    meta: PaginationMeta
    filters: dict[str, Any]


__all__ = [
    "BranchCreateRequest",
    "BranchEnvelope",
    "BranchListResponse",
    "BranchResponse",
    "BranchSummary",
    "BranchUpdateRequest",
]
