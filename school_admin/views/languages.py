"""Pydantic schemas for languages and translations."""

from __future__ import annotations

from pydantic import BaseModel, Field


class LanguageResponse(BaseModel):
    code: str
    name: str
    direction: str
    active: bool = True


class LanguagesResponse(BaseModel):
    languages: list[LanguageResponse]
    default: str


class TranslationsResponse(BaseModel):
    language: str
    translations: dict[str, str]


class AllTranslationsResponse(BaseModel):
    translations: dict[str, dict[str, str]]


class TranslateResponse(BaseModel):
    language: str
    key: str
    value: str


class TranslationsUpdateRequest(BaseModel):
    """Replaces the whole mapping of one language."""

    language: str
    translations: dict[str, str]


class TranslationKeyRequest(BaseModel):
    language: str
    key: str = Field(..., min_length=1, max_length=255)
    value: str


class TranslationKeyDeleteRequest(BaseModel):
    language: str
    key: str = Field(..., min_length=1, max_length=255)


__all__ = [
    "AllTranslationsResponse",
    "LanguageResponse",
    "LanguagesResponse",
    "TranslateResponse",
    "TranslationKeyDeleteRequest",
    "TranslationKeyRequest",
    "TranslationsResponse",
    "TranslationsUpdateRequest",
]
