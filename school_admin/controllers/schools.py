"""School controller offering CRUD operations for educational institutions."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from school_admin.config.settings import settings
from school_admin.controllers.dependencies import (
    CurrentUserDep,
    ListingParamsDep,
    NotifierDep,
    RequestBody,
    SessionDep,
)
from school_admin.errors import ValidationError
from school_admin.models import School as SchoolModel
from school_admin.services.entities import (
    commit_or_conflict,
    find_active,
    find_any,
    find_trashed,
    purge,
    value_taken,
)
from school_admin.services.listing import SCHOOL_LISTING, build_listing_query, paginate
from school_admin.services.observers import LifecycleEvent
from school_admin.services.policies import Action, policies
from school_admin.views import (
    MessageResponse,
    PaginationMeta,
    SchoolCreateRequest,
    SchoolEnvelope,
    SchoolListResponse,
    SchoolResponse,
    SchoolUpdateRequest,
    validate_fields,
)

router = APIRouter(prefix="/schools", tags=["schools"])

_LOAD = (selectinload(SchoolModel.branches),)


async def _validate(
    session: AsyncSession,
    body: dict[str, Any],
    schema: type[SchoolCreateRequest],
    ignore_id: int | None = None,
) -> SchoolCreateRequest:
    payload, values, errors = validate_fields(schema, body)
    for field in ("email", "code"):
        if await value_taken(
            session, SchoolModel, field, values.get(field), ignore_id=ignore_id
        ):
            errors.setdefault(field, []).append(f"The {field} has already been taken.")
    if errors or payload is None:
        raise ValidationError(errors)
    return payload


def _envelope(message: str, school: SchoolModel) -> SchoolEnvelope:
    return SchoolEnvelope(message=message, data=SchoolResponse.model_validate(school))


@router.get("", response_model=SchoolListResponse)
async def list_schools(
    session: SessionDep,
    current_user: CurrentUserDep,
    params: ListingParamsDep,
) -> SchoolListResponse:
    policies.authorize(current_user, Action.VIEW_ANY, SchoolModel)

    query = build_listing_query(
        SCHOOL_LISTING,
        params,
        default_per_page=settings.per_page,
        max_per_page=settings.max_per_page,
    )
    page = await paginate(session, query, SchoolModel, options=_LOAD)
    return SchoolListResponse(
        data=[SchoolResponse.model_validate(school) for school in page.items],
        meta=PaginationMeta.from_meta(page.meta()),
        filters=page.filters,
    )


@router.post("", response_model=SchoolEnvelope, status_code=status.HTTP_201_CREATED)
async def create_school(
    body: RequestBody,
    session: SessionDep,
    current_user: CurrentUserDep,
    notifier: NotifierDep,
) -> SchoolEnvelope:
    policies.authorize(current_user, Action.CREATE, SchoolModel)
    payload = await _validate(session, body, SchoolCreateRequest)

    school = SchoolModel(**payload.model_dump())
    session.add(school)
    await commit_or_conflict(session, fields=("code", "email"))

    school = await find_any(session, SchoolModel, school.id, options=_LOAD)
    await notifier.dispatch(LifecycleEvent.CREATED, school, current_user.id)
    return _envelope("School created successfully.", school)


@router.get("/{school_id}", response_model=SchoolResponse)
async def get_school(
    school_id: int,
    session: SessionDep,
    current_user: CurrentUserDep,
) -> SchoolResponse:
    school = await find_active(session, SchoolModel, school_id, options=_LOAD)
    policies.authorize(current_user, Action.VIEW, school)
    return SchoolResponse.model_validate(school)


@router.put("/{school_id}", response_model=SchoolEnvelope)
async def update_school(
    school_id: int,
    body: RequestBody,
    session: SessionDep,
    current_user: CurrentUserDep,
    notifier: NotifierDep,
) -> SchoolEnvelope:
    school = await find_active(session, SchoolModel, school_id, options=_LOAD)
    policies.authorize(current_user, Action.UPDATE, school)
    payload = await _validate(session, body, SchoolUpdateRequest, ignore_id=school.id)

    previous = notifier.snapshot(school)
    for field, value in payload.model_dump().items():
        setattr(school, field, value)
    await commit_or_conflict(session, fields=("code", "email"))

    school = await find_any(session, SchoolModel, school_id, options=_LOAD)
    await notifier.dispatch(LifecycleEvent.UPDATED, school, current_user.id, previous)
    return _envelope("School updated successfully.", school)


@router.delete("/{school_id}", response_model=MessageResponse)
async def delete_school(
    school_id: int,
    session: SessionDep,
    current_user: CurrentUserDep,
    notifier: NotifierDep,
) -> MessageResponse:
    school = await find_active(session, SchoolModel, school_id, options=_LOAD)
    policies.authorize(current_user, Action.DELETE, school)

    school.soft_delete()
    await session.commit()

    await notifier.dispatch(LifecycleEvent.DELETED, school, current_user.id)
    return MessageResponse(message="School deleted successfully.")


@router.post("/{school_id}/restore", response_model=SchoolEnvelope)
async def restore_school(
    school_id: int,
    session: SessionDep,
    current_user: CurrentUserDep,
    notifier: NotifierDep,
) -> SchoolEnvelope:
    school = await find_trashed(session, SchoolModel, school_id)
    policies.authorize(current_user, Action.RESTORE, school)

    school.restore()
    await session.commit()

    school = await find_any(session, SchoolModel, school_id, options=_LOAD)
    await notifier.dispatch(LifecycleEvent.RESTORED, school, current_user.id)
    return _envelope("School restored successfully.", school)


@router.delete("/{school_id}/force", response_model=MessageResponse)
async def force_delete_school(
    school_id: int,
    session: SessionDep,
    current_user: CurrentUserDep,
    notifier: NotifierDep,
) -> MessageResponse:
    school = await find_any(session, SchoolModel, school_id)
    policies.authorize(current_user, Action.FORCE_DELETE, school)

    await purge(session, school)
    await notifier.dispatch(LifecycleEvent.FORCE_DELETED, school, current_user.id)
    return MessageResponse(message="School permanently deleted.")


__all__ = ["router"]
