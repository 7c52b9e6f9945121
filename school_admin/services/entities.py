"""Lookup, uniqueness and soft-delete helpers shared by the CRUD controllers."""

from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping, Sequence

from sqlalchemy import delete, exists, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.interfaces import LoaderOption

from school_admin.errors import ConflictError, NotFoundError
from school_admin.models import Branch, Department, School

logger = logging.getLogger(__name__)


async def _find(
    session: AsyncSession,
    model: Any,
    entity_id: int,
    *criteria: Any,
    options: Iterable[LoaderOption] = (),
) -> Any:
    result = await session.execute(
        select(model)
        .where(model.id == entity_id, *criteria)
        .options(*options)
        .execution_options(populate_existing=True)
    )
    entity = result.scalar_one_or_none()
    if entity is None:
        raise NotFoundError()
    return entity


async def find_active(
    session: AsyncSession,
    model: Any,
    entity_id: int,
    options: Iterable[LoaderOption] = (),
) -> Any:
    """Return a row that is not soft deleted, else raise ``NotFoundError``."""

    return await _find(session, model, entity_id, model.deleted_at.is_(None), options=options)


async def find_trashed(
    session: AsyncSession,
    model: Any,
    entity_id: int,
    options: Iterable[LoaderOption] = (),
) -> Any:
    return await _find(session, model, entity_id, model.deleted_at.is_not(None), options=options)


async def find_any(
    session: AsyncSession,
    model: Any,
    entity_id: int,
    options: Iterable[LoaderOption] = (),
) -> Any:
    return await _find(session, model, entity_id, options=options)


async def active_exists(session: AsyncSession, model: Any, entity_id: int | None) -> bool:
    if entity_id is None:
        return False
    criteria = [model.id == entity_id]
    if hasattr(model, "deleted_at"):
        criteria.append(model.deleted_at.is_(None))
    return bool(await session.scalar(select(exists().where(*criteria))))


async def value_taken(
    session: AsyncSession,
    model: Any,
    column: str,
    value: Any,
    scope: Mapping[str, Any] | None = None,
    ignore_id: int | None = None,
) -> bool:
    """Whether ``value`` is already used in ``column`` within ``scope``.

    Soft-deleted rows count, matching the table's unique constraint.
    """

    if value is None:
        return False
    criteria = [getattr(model, column) == value]
    for name, scoped_value in (scope or {}).items():
        criteria.append(getattr(model, name) == scoped_value)
    if ignore_id is not None:
        criteria.append(model.id != ignore_id)
    return bool(await session.scalar(select(exists().where(*criteria))))


async def commit_or_conflict(
    session: AsyncSession,
    fields: Sequence[str] = ("code",),
) -> None:
    """Commit, translating a uniqueness violation into ``ConflictError``."""

    try:
        await session.commit()
    except IntegrityError as exc:
        await session.rollback()
        detail = str(exc.orig).lower()
        field = next((name for name in fields if name in detail), fields[0])
        logger.info("Unique constraint rejected write on field %s", field)
        raise ConflictError(field, f"The {field.replace('_', ' ')} has already been taken.") from exc


async def purge(session: AsyncSession, entity: Any) -> None:
    """Permanently delete ``entity`` together with its descendants."""

    if isinstance(entity, School):
        branch_ids = select(Branch.id).where(Branch.school_id == entity.id)
        await session.execute(delete(Department).where(Department.branch_id.in_(branch_ids)))
        await session.execute(delete(Branch).where(Branch.school_id == entity.id))
    elif isinstance(entity, Branch):
        await session.execute(delete(Department).where(Department.branch_id == entity.id))

    await session.delete(entity)
    await session.commit()


__all__ = [
    "active_exists",
    "commit_or_conflict",
    "find_active",
    "find_any",
    "find_trashed",
    "purge",
    "value_taken",
]
