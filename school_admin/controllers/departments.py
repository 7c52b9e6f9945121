"""Department controller offering CRUD operations scoped to a branch."""

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
from school_admin.models import Department as DepartmentModel
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
from school_admin.services.listing import DEPARTMENT_LISTING, build_listing_query, paginate
from school_admin.services.observers import LifecycleEvent
from school_admin.services.policies import Action, policies
from school_admin.views import (
    DepartmentCreateRequest,
    DepartmentEnvelope,
    DepartmentListResponse,
    DepartmentResponse,
    DepartmentUpdateRequest,
    MessageResponse,
    PaginationMeta,
    validate_fields,
)

router = APIRouter(prefix="/departments", tags=["departments"])

_LOAD = (
    selectinload(DepartmentModel.branch).selectinload(BranchModel.school),
    selectinload(DepartmentModel.head),
)


async def _validate(
    session: AsyncSession,
    body: dict[str, Any],
    schema: type[DepartmentCreateRequest],
    ignore_id: int | None = None,
) -> DepartmentCreateRequest:
    payload, values, errors = validate_fields(schema, body)
    branch_id = values.get("branch_id")
    head_user_id = values.get("head_user_id")
    if branch_id is not None and not await active_exists(session, BranchModel, branch_id):
        errors.setdefault("branch_id", []).append("The selected branch id is invalid.")
    if head_user_id is not None and not await active_exists(
        session, UserModel, head_user_id
    ):
        errors.setdefault("head_user_id", []).append(
            "The selected head user id is invalid."
        )
    if branch_id is not None and await value_taken(
        session,
        DepartmentModel,
        "code",
        values.get("code"),
        scope={"branch_id": branch_id},
        ignore_id=ignore_id,
    ):
        errors.setdefault("code", []).append(
            "The code has already been taken for this branch."
        )
    if errors or payload is None:
        raise ValidationError(errors)
    return payload


def _envelope(message: str, department: DepartmentModel) -> DepartmentEnvelope:
    return DepartmentEnvelope(
        message=message,
        data=DepartmentResponse.model_validate(department),
    )


@router.get("", response_model=DepartmentListResponse)
async def list_departments(
    session: SessionDep,
    current_user: CurrentUserDep,
    params: ListingParamsDep,
    branch_id: int | None = None,
) -> DepartmentListResponse:
    policies.authorize(current_user, Action.VIEW_ANY, DepartmentModel)

    query = build_listing_query(
        DEPARTMENT_LISTING,
        replace(params, filters={"branch_id": branch_id}),
        default_per_page=settings.per_page,
        max_per_page=settings.max_per_page,
    )
    page = await paginate(session, query, DepartmentModel, options=_LOAD)
    return DepartmentListResponse(
        data=[DepartmentResponse.model_validate(item) for item in page.items],
        meta=PaginationMeta.from_meta(page.meta()),
        filters=page.filters,
    )


@router.post("", response_model=DepartmentEnvelope, status_code=status.HTTP_201_CREATED)
async def create_department(
    body: RequestBody,
    session: SessionDep,
    current_user: CurrentUserDep,
    notifier: NotifierDep,
) -> DepartmentEnvelope:
    policies.authorize(current_user, Action.CREATE, DepartmentModel)
    payload = await _validate(session, body, DepartmentCreateRequest)

    department = DepartmentModel(**payload.model_dump())
    session.add(department)
    await commit_or_conflict(session)

    department = await find_any(session, DepartmentModel, department.id, options=_LOAD)
    await notifier.dispatch(LifecycleEvent.CREATED, department, current_user.id)
    return _envelope("Department created successfully.", department)


@router.get("/{department_id}", response_model=DepartmentResponse)
async def get_department(
    department_id: int,
    session: SessionDep,
    current_user: CurrentUserDep,
) -> DepartmentResponse:
    department = await find_active(session, DepartmentModel, department_id, options=_LOAD)
    policies.authorize(current_user, Action.VIEW, department)
    return DepartmentResponse.model_validate(department)


@router.put("/{department_id}", response_model=DepartmentEnvelope)
async def update_department(
    department_id: int,
    body: RequestBody,
    session: SessionDep,
    current_user: CurrentUserDep,
    notifier: NotifierDep,
) -> DepartmentEnvelope:
    department = await find_active(session, DepartmentModel, department_id, options=_LOAD)
    policies.authorize(current_user, Action.UPDATE, department)
    payload = await _validate(
        session, body, DepartmentUpdateRequest, ignore_id=department.id
    )

    previous = notifier.snapshot(department)
    for field, value in payload.model_dump().items():
        setattr(department, field, value)
    await commit_or_conflict(session)

    department = await find_any(session, DepartmentModel, department_id, options=_LOAD)
    await notifier.dispatch(
        LifecycleEvent.UPDATED, department, current_user.id, previous
    )
    return _envelope("Department updated successfully.", department)


@router.delete("/{department_id}", response_model=MessageResponse)
async def delete_department(
    department_id: int,
    session: SessionDep,
    current_user: CurrentUserDep,
    notifier: NotifierDep,
) -> MessageResponse:
    department = await find_active(session, DepartmentModel, department_id, options=_LOAD)
    policies.authorize(current_user, Action.DELETE, department)

    department.soft_delete()
    await session.commit()

    await notifier.dispatch(LifecycleEvent.DELETED, department, current_user.id)
    return MessageResponse(message="Department deleted successfully.")


@router.post("/{department_id}/restore", response_model=DepartmentEnvelope)
async def restore_department(
    department_id: int,
    session: SessionDep,
    current_user: CurrentUserDep,
    notifier: NotifierDep,
) -> DepartmentEnvelope:
    department = await find_trashed(session, DepartmentModel, department_id)
    policies.authorize(current_user, Action.RESTORE, department)

    department.restore()
    await session.commit()

    department = await find_any(session, DepartmentModel, department_id, options=_LOAD)
    await notifier.dispatch(LifecycleEvent.RESTORED, department, current_user.id)
    return _envelope("Department restored successfully.", department)


@router.delete("/{department_id}/force", response_model=MessageResponse)
async def force_delete_department(
    department_id: int,
    session: SessionDep,
    current_user: CurrentUserDep,
    notifier: NotifierDep,
) -> MessageResponse:
    department = await find_any(session, DepartmentModel, department_id, options=_LOAD)
    policies.authorize(current_user, Action.FORCE_DELETE, department)

    await purge(session, department)
    await notifier.dispatch(LifecycleEvent.FORCE_DELETED, department, current_user.id)
    return MessageResponse(message="Department permanently deleted.")


__all__ = ["router"]
