"""Search, filter, sort and pagination for entity listings.

Building a listing happens in two steps. ``build_listing_query`` is a pure
function turning request parameters into a ``ListingQuery`` description
(search clause, equality predicates, date range, joins, order and page
bounds). ``compile_listing`` then maps that description onto a SQLAlchemy
statement for a concrete model, and ``paginate`` executes it.

Example:
    query = build_listing_query(BRANCH_LISTING, ListingParams(search="north"))
    page = await paginate(session, query, Branch, options=[selectinload(Branch.school)])
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta
from typing import Any, Iterable, Mapping, Sequence

from sqlalchemy import Select, and_, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.interfaces import LoaderOption

SORT_ASC = "asc"
SORT_DESC = "desc"


@dataclass(frozen=True)
class RelatedSearch:
    """Columns of a related entity matched through an EXISTS subquery."""

    relation: str
    columns: tuple[str, ...]
    nested: tuple["RelatedSearch", ...] = ()


@dataclass(frozen=True)
class RelatedSort:
    """A ``sort_by`` alias ordering by a column reached through joins."""

    relations: tuple[str, ...]
    column: str


@dataclass(frozen=True)
class ListingSpec:
    """Static description of how one entity type may be listed."""

    name: str
    search_columns: tuple[str, ...]
    related_search: tuple[RelatedSearch, ...] = ()
    filter_fields: tuple[str, ...] = ()
    sort_columns: tuple[str, ...] = ("created_at",)
    related_sorts: Mapping[str, RelatedSort] = field(default_factory=dict)
    default_sort: str = "created_at"


@dataclass(frozen=True)
class ListingParams:
    """Raw listing parameters as received from the request."""

    search: str | None = None
    filters: Mapping[str, Any] = field(default_factory=dict)
    date_from: date | None = None
    date_to: date | None = None
    sort_by: str | None = None
    sort_order: str | None = None
    page: int | None = None
    per_page: int | None = None
    trashed: bool = False


@dataclass(frozen=True)
class SearchClause:
    term: str
    columns: tuple[str, ...]
    related: tuple[RelatedSearch, ...]


@dataclass(frozen=True)
class Predicate:
    column: str
    value: Any


@dataclass(frozen=True)
class DateRange:
    """Half-open creation time window ``[start, end)``."""

    start: datetime | None
    end: datetime | None


@dataclass(frozen=True)
class OrderClause:
    column: str
    direction: str
    relations: tuple[str, ...] = ()


@dataclass(frozen=True)
class PageBounds:
    page: int
    per_page: int

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.per_page

    @property
    def limit(self) -> int:
        return self.per_page


@dataclass(frozen=True)
class ListingQuery:
    search: SearchClause | None
    predicates: tuple[Predicate, ...]
    date_range: DateRange | None
    joins: tuple[tuple[str, ...], ...]
    order: OrderClause
    page: PageBounds
    trashed: bool
    applied_filters: dict[str, Any]


def normalize_sort_order(value: str | None) -> str:
    """Return ``asc`` or ``desc``; anything unrecognised means ``desc``."""

    if value and value.strip().lower() == SORT_ASC:
        return SORT_ASC
    return SORT_DESC


def _page_bounds(
    page: int | None,
    per_page: int | None,
    default_per_page: int,
    max_per_page: int,
) -> PageBounds:
    size = per_page if per_page and per_page > 0 else default_per_page
    return PageBounds(
        page=page if page and page > 0 else 1,
        per_page=min(size, max_per_page),
    )


def build_listing_query(
    spec: ListingSpec,
    params: ListingParams,
    *,
    default_per_page: int = 15,
    max_per_page: int = 100,
) -> ListingQuery:
    """Describe the listing requested by ``params`` for the entity in ``spec``."""

    applied: dict[str, Any] = {}

    search = None
    term = params.search.strip() if params.search else ""
    if term:
        search = SearchClause(
            term=term,
            columns=spec.search_columns,
            related=spec.related_search,
        )
        applied["search"] = term

    predicates = []
    for name in spec.filter_fields:
        value = params.filters.get(name)
        if value is None or value == "":
            continue
        predicates.append(Predicate(column=name, value=value))
        applied[name] = value

    date_range = None
    if params.date_from is not None or params.date_to is not None:
        start = end = None
        if params.date_from is not None:
            start = datetime.combine(params.date_from, time.min)
            applied["date_from"] = params.date_from.isoformat()
        if params.date_to is not None:
            end = datetime.combine(params.date_to + timedelta(days=1), time.min)
            applied["date_to"] = params.date_to.isoformat()
        date_range = DateRange(start=start, end=end)

    direction = normalize_sort_order(params.sort_order)
    joins: tuple[tuple[str, ...], ...] = ()
    sort_by = params.sort_by
    if sort_by in spec.sort_columns:
        order = OrderClause(column=sort_by, direction=direction)
    elif sort_by in spec.related_sorts:
        related = spec.related_sorts[sort_by]
        order = OrderClause(
            column=related.column,
            direction=direction,
            relations=related.relations,
        )
        joins = (related.relations,)
    else:
        order = OrderClause(column=spec.default_sort, direction=SORT_DESC)
        sort_by = None

    if sort_by is not None:
        applied["sort_by"] = sort_by
        applied["sort_order"] = direction

    if params.trashed:
        applied["trashed"] = True

    return ListingQuery(
        search=search,
        predicates=tuple(predicates),
        date_range=date_range,
        joins=joins,
        order=order,
        page=_page_bounds(
            params.page, params.per_page, default_per_page, max_per_page
        ),
        trashed=params.trashed,
        applied_filters=applied,
    )


def _related_target(model: Any, relation: str) -> tuple[Any, Any]:
    attribute = getattr(model, relation)
    return attribute, attribute.property.mapper.class_


def _related_condition(model: Any, related: RelatedSearch, term: str) -> Any:
    attribute, target = _related_target(model, related.relation)
    conditions = [
        getattr(target, column).icontains(term, autoescape=True)
        for column in related.columns
    ]
    conditions.extend(
        _related_condition(target, nested, term) for nested in related.nested
    )
    criterion = or_(*conditions)
    if hasattr(target, "deleted_at"):
        criterion = and_(target.deleted_at.is_(None), criterion)
    return attribute.has(criterion)


def _filtered_statement(query: ListingQuery, model: Any) -> Select:
    stmt = select(model)

    if query.trashed:
        stmt = stmt.where(model.deleted_at.is_not(None))
    else:
        stmt = stmt.where(model.deleted_at.is_(None))

    for predicate in query.predicates:
        stmt = stmt.where(getattr(model, predicate.column) == predicate.value)

    if query.date_range is not None:
        if query.date_range.start is not None:
            stmt = stmt.where(model.created_at >= query.date_range.start)
        if query.date_range.end is not None:
            stmt = stmt.where(model.created_at < query.date_range.end)

    if query.search is not None:
        term = query.search.term
        conditions = [
            getattr(model, column).icontains(term, autoescape=True)
            for column in query.search.columns
        ]
        conditions.extend(
            _related_condition(model, related, term)
            for related in query.search.related
        )
        stmt = stmt.where(or_(*conditions))

    return stmt


def compile_listing(query: ListingQuery, model: Any) -> Select:
    """Return the ordered, paginated SELECT for ``query`` over ``model``.

    Sorting on a related column joins the related tables but still selects
    only ``model``'s columns.
    """

    stmt = _filtered_statement(query, model)

    order_target = model
    for chain in query.joins:
        current = model
        for relation in chain:
            attribute, current = _related_target(current, relation)
            stmt = stmt.join(attribute)
        if chain == query.order.relations:
            order_target = current

    column = getattr(order_target, query.order.column)
    if query.order.direction == SORT_ASC:
        stmt = stmt.order_by(column.asc(), model.id.asc())
    else:
        stmt = stmt.order_by(column.desc(), model.id.desc())

    return stmt.offset(query.page.offset).limit(query.page.limit)


def compile_count(query: ListingQuery, model: Any) -> Select:
    """Return a statement counting every row matched by ``query``."""

    filtered = _filtered_statement(query, model).subquery()
    return select(func.count()).select_from(filtered)


@dataclass
class Page:
    items: Sequence[Any]
    total: int
    page: int
    per_page: int
    filters: dict[str, Any]

    @property
    def last_page(self) -> int:
        return max(1, math.ceil(self.total / self.per_page))

    def meta(self) -> dict[str, Any]:
        first = (self.page - 1) * self.per_page + 1 if self.items else None
        last = first + len(self.items) - 1 if first is not None else None
        return {
            "current_page": self.page,
            "last_page": self.last_page,
            "total": self.total,
            "per_page": self.per_page,
            "from": first,
            "to": last,
        }


async def paginate(
    session: AsyncSession,
    query: ListingQuery,
    model: Any,
    options: Iterable[LoaderOption] = (),
) -> Page:
    """Execute ``query`` and return one page of ``model`` rows."""

    total = (await session.execute(compile_count(query, model))).scalar_one()
    stmt = compile_listing(query, model).options(*options)
    items = (await session.execute(stmt)).scalars().all()
    return Page(
        items=items,
        total=total,
        page=query.page.page,
        per_page=query.page.per_page,
        filters=query.applied_filters,
    )


SCHOOL_LISTING = ListingSpec(
    name="school",
    search_columns=("name", "code", "address", "email", "phone_number"),
    sort_columns=("name", "code", "email", "created_at"),
)

BRANCH_LISTING = ListingSpec(
    name="branch",
    search_columns=("name", "code", "address", "phone_number"),
    related_search=(RelatedSearch("school", ("name", "code")),),
    filter_fields=("school_id",),
    sort_columns=("name", "code", "created_at"),
    related_sorts={"school_name": RelatedSort(("school",), "name")},
)

DEPARTMENT_LISTING = ListingSpec(
    name="department",
    search_columns=("name", "code", "description"),
    related_search=(
        RelatedSearch(
            "branch",
            ("name", "code"),
            nested=(RelatedSearch("school", ("name", "code")),),
        ),
        RelatedSearch("head", ("name", "email")),
    ),
    filter_fields=("branch_id",),
    sort_columns=("name", "code", "created_at"),
    related_sorts={
        "branch_name": RelatedSort(("branch",), "name"),
        "school_name": RelatedSort(("branch", "school"), "name"),
    },
)


__all__ = [
    "BRANCH_LISTING",
    "DEPARTMENT_LISTING",
    "SCHOOL_LISTING",
    "DateRange",
    "ListingParams",
    "ListingQuery",
    "ListingSpec",
    "OrderClause",
    "Page",
    "PageBounds",
    "Predicate",
    "RelatedSearch",
    "RelatedSort",
    "SearchClause",
    "build_listing_query",
    "compile_count",
    "compile_listing",
    "normalize_sort_order",
    "paginate",
]
