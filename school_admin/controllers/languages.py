"""Language listing and translation file management."""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

from fastapi import APIRouter, Request

from school_admin.controllers.dependencies import CurrentUserDep, TranslationStoreDep
from school_admin.errors import ValidationError
from school_admin.services.translations import SUPPORTED_LANGUAGES, is_supported
from school_admin.views import (
    AllTranslationsResponse,
    LanguageResponse,
    LanguagesResponse,
    SuccessResponse,
    TranslateResponse,
    TranslationKeyDeleteRequest,
    TranslationKeyRequest,
    TranslationsResponse,
    TranslationsUpdateRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/languages", tags=["languages"])

_RESERVED_QUERY = {"language", "key"}


def _require_language(code: str) -> str:
    if not is_supported(code):
        raise ValidationError.single("language", "The selected language is invalid.")
    return code


@router.get("", response_model=LanguagesResponse)
async def list_languages(store: TranslationStoreDep) -> LanguagesResponse:
    return LanguagesResponse(
        languages=[
            LanguageResponse(
                code=language.code,
                name=language.name,
                direction=language.direction,
                active=language.active,
            )
            for language in SUPPORTED_LANGUAGES
        ],
        default=store.default_language,
    )


@router.get("/translations", response_model=TranslationsResponse)
async def get_translations(
    store: TranslationStoreDep,
    language: Optional[str] = None,
) -> TranslationsResponse:
    code = _require_language(language or store.default_language)
    translations = await asyncio.to_thread(store.get, code)
    return TranslationsResponse(language=code, translations=translations)


@router.get("/all-translations", response_model=AllTranslationsResponse)
async def get_all_translations(store: TranslationStoreDep) -> AllTranslationsResponse:
    return AllTranslationsResponse(translations=await asyncio.to_thread(store.all))


@router.get("/translate", response_model=TranslateResponse)
async def translate(
    request: Request,
    store: TranslationStoreDep,
    key: str,
    language: Optional[str] = None,
) -> TranslateResponse:
    """Translate ``key``; any other query parameter fills a ``{{name}}`` placeholder."""

    code = _require_language(language or store.default_language)
    params = {
        name: value
        for name, value in request.query_params.items()
        if name not in _RESERVED_QUERY
    }
    value = await asyncio.to_thread(store.translate, code, key, params)
    return TranslateResponse(language=code, key=key, value=value)


@router.post("/translations", response_model=SuccessResponse)
async def update_translations(
    payload: TranslationsUpdateRequest,
    store: TranslationStoreDep,
    current_user: CurrentUserDep,
) -> SuccessResponse:
    code = _require_language(payload.language)
    await asyncio.to_thread(store.set, code, payload.translations)
    logger.info("User %s replaced %s translations", current_user.id, code)
    return SuccessResponse(message="Translations updated successfully")


@router.post("/translations/add", response_model=SuccessResponse)
async def add_translation_key(
    payload: TranslationKeyRequest,
    store: TranslationStoreDep,
    current_user: CurrentUserDep,
) -> SuccessResponse:
    code = _require_language(payload.language)
    await asyncio.to_thread(store.add_key, code, payload.key, payload.value)
    logger.info("User %s set %s translation '%s'", current_user.id, code, payload.key)
    return SuccessResponse(message="Translation key added successfully")


@router.delete("/translations", response_model=SuccessResponse)
async def delete_translation_key(
    payload: TranslationKeyDeleteRequest,
    store: TranslationStoreDep,
    current_user: CurrentUserDep,
) -> SuccessResponse:
    code = _require_language(payload.language)
    await asyncio.to_thread(store.delete_key, code, payload.key)
    logger.info("User %s removed %s translation '%s'", current_user.id, code, payload.key)
    return SuccessResponse(message="Translation key deleted successfully")


__all__ = ["router"]
