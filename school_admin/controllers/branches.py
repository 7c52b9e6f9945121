"""Branch controller, including the branches nested under a school."""

from __future__ import annotations

from dataclasses import replace
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
from school_admin.models import Branch as BranchModel
from school_admin.models import School as SchoolModel
from school_admin.models import User as UserModel
from school_admin.services.entities import (
    active_exists,
    commit_or_conflict,
    find_active,
    find_any,
    find_trashed,
    purge,
    value_taken,
)
from school_admin.services.listing import (
    BRANCH_LISTING,
    ListingParams,
    build_listing_query,
    paginate,
)
from school_admin.services.notifications import NotificationFanout
from school_admin.services.observers import LifecycleEvent
from school_admin.services.policies import Action, policies
from school_admin.views import (
    BranchCreateRequest,
    BranchEnvelope,
    BranchListResponse,
    BranchResponse,
    BranchUpdateRequest,
    MessageResponse,
    PaginationMeta,
    validate_fields,
)

router = APIRouter(prefix="/branches", tags=["branches"])
school_router = APIRouter(prefix="/schools/{school_id}/branches", tags=["branches"])

_LOAD = (selectinload(BranchModel.school),)


async def _validate(
    session: AsyncSession,
    body: dict[str, Any],
    schema: type[BranchCreateRequest],
    ignore_id: int | None = None,
) -> BranchCreateRequest:
    payload, values, errors = validate_fields(schema, body)
    school_id = values.get("school_id")
    if school_id is not None and not await active_exists(session, SchoolModel, school_id):
        errors.setdefault("school_id", []).append("The selected school id is invalid.")
    if school_id is not None and await value_taken(
        session,
        BranchModel,
        "code",
        values.get("code"),
        scope={"school_id": school_id},
        ignore_id=ignore_id,
    ):
        errors.setdefault("code", []).append(
            "The code has already been taken for this school."
        )
    if errors or payload is None:
        raise ValidationError(errors)
    return payload


async def _list(session: AsyncSession, params: ListingParams) -> BranchListResponse:
    query = build_listing_query(
        BRANCH_LISTING,
        params,
        default_per_page=settings.per_page,
        max_per_page=settings.max_per_page,
    )
    page = await paginate(session, query, BranchModel, options=_LOAD)
    return BranchListResponse(
        data=[BranchResponse.model_validate(branch) for branch in page.items],
        meta=PaginationMeta.from_meta(page.meta()),
        filters=page.filters,
    )


async def _create(
    session: AsyncSession,
    body: dict[str, Any],
    current_user: UserModel,
    notifier: NotificationFanout,
) -> BranchEnvelope:
    policies.authorize(current_user, Action.CREATE, BranchModel)
    payload = await _validate(session, body, BranchCreateRequest)

    branch = BranchModel(**payload.model_dump())
    session.add(branch)
    await commit_or_conflict(session)

    branch = await find_any(session, BranchModel, branch.id, options=_LOAD)
    await notifier.dispatch(LifecycleEvent.CREATED, branch, current_user.id)
    return BranchEnvelope(
        message="Branch created successfully.",
        data=BranchResponse.model_validate(branch),
    )


@router.get("", response_model=BranchListResponse)
async def list_branches(
    session: SessionDep,
    current_user: CurrentUserDep,
    params: ListingParamsDep,
    school_id: int | None = None,
) -> BranchListResponse:
    policies.authorize(current_user, Action.VIEW_ANY, BranchModel)
    return await _list(session, replace(params, filters={"school_id": school_id}))


@router.post("", response_model=BranchEnvelope, status_code=status.HTTP_201_CREATED)
async def create_branch(
    body: RequestBody,
    session: SessionDep,
    current_user: CurrentUserDep,
    notifier: NotifierDep,
) -> BranchEnvelope:
    return await _create(session, body, current_user, notifier)


@router.get("/{branch_id}", response_model=BranchResponse)
async def get_branch(
    branch_id: int,
    session: SessionDep,
    current_user: CurrentUserDep,
) -> BranchResponse:
    branch = await find_active(session, BranchModel, branch_id, options=_LOAD)
    policies.authorize(current_user, Action.VIEW, branch)
    return BranchResponse.model_validate(branch)


@router.put("/{branch_id}", response_model=BranchEnvelope)
async def update_branch(
    branch_id: int,
    body: RequestBody,
    session: SessionDep,
    current_user: CurrentUserDep,
    notifier: NotifierDep,
) -> BranchEnvelope:
    branch = await find_active(session, BranchModel, branch_id, options=_LOAD)
    policies.authorize(current_user, Action.UPDATE, branch)
    payload = await _validate(session, body, BranchUpdateRequest, ignore_id=branch.id)

    previous = notifier.snapshot(branch)
    for field, value in payload.model_dump().items():
        setattr(branch, field, value)
    await commit_or_conflict(session)

    branch = await find_any(session, BranchModel, branch_id, options=_LOAD)
    await notifier.dispatch(LifecycleEvent.UPDATED, branch, current_user.id, previous)
    return BranchEnvelope(
        message="Branch updated successfully.",
        data=BranchResponse.model_validate(branch),
    )


@router.delete("/{branch_id}", response_model=MessageResponse)
async def delete_branch(
    branch_id: int,
    session: SessionDep,
    current_user: CurrentUserDep,
    notifier: NotifierDep,
) -> MessageResponse:
    branch = await find_active(session, BranchModel, branch_id, options=_LOAD)
    policies.authorize(current_user, Action.DELETE, branch)

    branch.soft_delete()
    await session.commit()

    await notifier.dispatch(LifecycleEvent.DELETED, branch, current_user.id)
    return MessageResponse(message="Branch deleted successfully.")


@router.post("/{branch_id}/restore", response_model=BranchEnvelope)
async def restore_branch(
    branch_id: int,
    session: SessionDep,
    current_user: CurrentUserDep,
    notifier: NotifierDep,
) -> BranchEnvelope:
    branch = await find_trashed(session, BranchModel, branch_id)
    policies.authorize(current_user, Action.RESTORE, branch)

    branch.restore()
    await session.commit()

    branch = await find_any(session, BranchModel, branch_id, options=_LOAD)
    await notifier.dispatch(LifecycleEvent.RESTORED, branch, current_user.id)
    return BranchEnvelope(
        message="Branch restored successfully.",
        data=BranchResponse.model_validate(branch),
    )


@router.delete("/{branch_id}/force", response_model=MessageResponse)
async def force_delete_branch(
    branch_id: int,
    session: SessionDep,
    current_user: CurrentUserDep,
    notifier: NotifierDep,
) -> MessageResponse:
    branch = await find_any(session, BranchModel, branch_id, options=_LOAD)
    policies.authorize(current_user, Action.FORCE_DELETE, branch)

    await purge(session, branch)
    await notifier.dispatch(LifecycleEvent.FORCE_DELETED, branch, current_user.id)
    return MessageResponse(message="Branch permanently deleted.")


@school_router.get("", response_model=BranchListResponse)
async def list_school_branches(
    school_id: int,
    session: SessionDep,
    current_user: CurrentUserDep,
    params: ListingParamsDep,
) -> BranchListResponse:
    await find_active(session, SchoolModel, school_id)
    policies.authorize(current_user, Action.VIEW_ANY, BranchModel)
    return await _list(session, replace(params, filters={"school_id": school_id}))


@school_router.post("", response_model=BranchEnvelope, status_code=status.HTTP_201_CREATED)
async def create_school_branch(
    school_id: int,
    body: RequestBody,
    session: SessionDep,
    current_user: CurrentUserDep,
    notifier: NotifierDep,
) -> BranchEnvelope:
    await find_active(session, SchoolModel, school_id)
    return await _create(session, {**body, "school_id": school_id}, current_user, notifier)


__all__ = ["router", "school_router"]
