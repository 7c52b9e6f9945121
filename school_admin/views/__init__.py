"""Pydantic schemas used as views in the MVC architecture."""

from .auth import CurrentUserResponse, LoginRequest, TokenResponse
from .branches import (
    BranchCreateRequest,
    BranchEnvelope,
    BranchListResponse,
    BranchResponse,
    BranchSummary,
    BranchUpdateRequest,
)
from .common import (
    ErrorResponse,
    MessageResponse,
    PaginationMeta,
    SuccessResponse,
    field_errors,
    validate_fields,
)
from .departments import (
    DepartmentCreateRequest,
    DepartmentEnvelope,
    DepartmentListResponse,
    DepartmentResponse,
    DepartmentUpdateRequest,
    UserSummary,
)
from .languages import (
    AllTranslationsResponse,
    LanguageResponse,
    LanguagesResponse,
    TranslateResponse,
    TranslationKeyDeleteRequest,
    TranslationKeyRequest,
    TranslationsResponse,
    TranslationsUpdateRequest,
)
from .notifications import NotificationItem, NotificationListResponse
from .schools import (
    SchoolCreateRequest,
    SchoolEnvelope,
    SchoolListResponse,
    SchoolResponse,
    SchoolSummary,
    SchoolUpdateRequest,
)
from .settings import SettingEnvelope, SettingResponse, SettingUpdateRequest

__all__ = [
    "AllTranslationsResponse",
    "BranchCreateRequest",
    "BranchEnvelope",
    "BranchListResponse",
    "BranchResponse",
    "BranchSummary",
    "BranchUpdateRequest",
    "CurrentUserResponse",
    "DepartmentCreateRequest",
    "DepartmentEnvelope",
    "DepartmentListResponse",
    "DepartmentResponse",
    "DepartmentUpdateRequest",
    "ErrorResponse",
    "LanguageResponse",
    "LanguagesResponse",
    "LoginRequest",
    "MessageResponse",
    "NotificationItem",
    "NotificationListResponse",
    "PaginationMeta",
    "SchoolCreateRequest",
    "SchoolEnvelope",
    "SchoolListResponse",
    "SchoolResponse",
    "SchoolSummary",
    "SchoolUpdateRequest",
    "SettingEnvelope",
    "SettingResponse",
    "SettingUpdateRequest",
    "SuccessResponse",
    "TokenResponse",
    "TranslateResponse",
    "TranslationKeyDeleteRequest",
    "TranslationKeyRequest",
    "TranslationsResponse",
    "TranslationsUpdateRequest",
    "UserSummary",
    "field_errors",
    "validate_fields",
]
