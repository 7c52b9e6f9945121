"""Authentication controller providing login and current-user endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, status
from sqlalchemy import select

from school_admin.config.settings import settings
from school_admin.controllers.dependencies import CurrentUserDep, SessionDep
from school_admin.models import User as UserModel
from school_admin.telemetry import increment_login
from school_admin.utils import create_access_token, verify_password
from school_admin.views import CurrentUserResponse, LoginRequest, TokenResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login", response_model=TokenResponse)
async def login(
    payload: LoginRequest,
    session: SessionDep,
) -> TokenResponse:
    """Validate credentials and issue a JWT access token."""

    result = await session.execute(
        select(UserModel).where(UserModel.email == payload.email)
    )
    user = result.scalar_one_or_none()

    if not user or not verify_password(payload.password, user.password_hash):
        logger.info("Rejected login for %s", payload.email)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
        )

    access_token = create_access_token(subject=str(user.id), name=user.name)
    increment_login()

    return TokenResponse(
        access_token=access_token,
        expires_in=settings.security.access_token_expires_minutes * 60,
        name=user.name,
    )


@router.get("/me", response_model=CurrentUserResponse)
async def me(current_user: CurrentUserDep) -> CurrentUserResponse:
    return CurrentUserResponse(
        id=current_user.id,
        name=current_user.name,
        email=current_user.email,
        roles=current_user.role_names,
        permissions=sorted(current_user.permission_names),
    )


__all__ = ["router"]
