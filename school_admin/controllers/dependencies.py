"""Common FastAPI dependencies reused across controllers."""

from __future__ import annotations

from datetime import date
from typing import Annotated, Any, Optional

from fastapi import Body, Depends, HTTPException, Query, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from school_admin.config.settings import settings
from school_admin.database import get_session, get_session_factory
from school_admin.models import User as UserModel
from school_admin.services.listing import ListingParams
from school_admin.services.notifications import NotificationFanout
from school_admin.services.settings_store import SettingsStore
from school_admin.services.translations import TranslationStore
from school_admin.utils import AuthenticationError, decode_access_token

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login")
SessionDep = Annotated[AsyncSession, Depends(get_session)]
SessionFactoryDep = Annotated[async_sessionmaker[AsyncSession], Depends(get_session_factory)]


async def get_current_user(
    token: Annotated[str, Depends(oauth2_scheme)],
    session: SessionDep,
) -> UserModel:
    """Resolve and validate the user referenced by the bearer token."""

    try:
        payload = decode_access_token(token)
        user_id = int(payload.sub)
    except (AuthenticationError, ValueError):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        ) from None

    result = await session.execute(select(UserModel).where(UserModel.id == user_id))
    user = result.scalar_one_or_none()
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return user


CurrentUserDep = Annotated[UserModel, Depends(get_current_user)]


def get_notifier(session_factory: SessionFactoryDep) -> NotificationFanout:
    return NotificationFanout(session_factory)


def get_settings_store(session: SessionDep) -> SettingsStore:
    return SettingsStore(session)


def get_translation_store() -> TranslationStore:
    return TranslationStore(
        settings.i18n.lang_path,
        default_language=settings.i18n.default_language,
    )


def listing_params(
    search: Optional[str] = None,
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
    sort_by: Optional[str] = None,
    sort_order: Optional[str] = None,
    page: Annotated[Optional[int], Query(ge=1)] = None,
    per_page: Annotated[Optional[int], Query(ge=1)] = None,
    trashed: bool = False,
) -> ListingParams:
    """Collect the listing query string shared by every collection endpoint."""

    return ListingParams(
        search=search,
        date_from=date_from,
        date_to=date_to,
        sort_by=sort_by,
        sort_order=sort_order,
        page=page,
        per_page=per_page,
        trashed=trashed,
    )


NotifierDep = Annotated[NotificationFanout, Depends(get_notifier)]
SettingsStoreDep = Annotated[SettingsStore, Depends(get_settings_store)]
TranslationStoreDep = Annotated[TranslationStore, Depends(get_translation_store)]
ListingParamsDep = Annotated[ListingParams, Depends(listing_params)]

# Raw JSON object, checked by the handler through ``validate_fields``.
RequestBody = Annotated[dict[str, Any], Body()]


__all__ = [
    "CurrentUserDep",
    "ListingParamsDep",
    "NotifierDep",
    "RequestBody",
    "SessionDep",
    "SessionFactoryDep",
    "SettingsStoreDep",
    "TranslationStoreDep",
    "get_current_user",
    "get_notifier",
    "get_settings_store",
    "get_translation_store",
    "listing_params",
    "oauth2_scheme",
]
