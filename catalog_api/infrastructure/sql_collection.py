"""SQL Collection — Collection protocol implemented over a SQLAlchemy model.

Invariants:
    - Each find()/count() call opens its own short-lived AsyncSession, so the two
      reads of one paginated query can run concurrently
    - Filter, sort, select and populate names are checked against the model;
      unknown names raise ValidationFailure before any SQL is emitted
    - Rows are rendered to dicts; `select` keeps only the named columns (id
      always kept), `populate` nests the related rows
    - Ordering is stable: the sort key is tie-broken by primary key

Design Decisions:
    - Projection is applied when rendering rather than with load_only(): keeps
      foreign keys loaded for selectinload and never triggers an async lazy load
"""

from typing import Any, Generic, Sequence, TypeVar

from sqlalchemy import Select, and_, func, inspect, select as sa_select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.orm import selectinload

from catalog_api.core.errors import ValidationFailure
from catalog_api.core.query_spec import (
    AllOf, FieldContains, FieldEquals, FieldIn, FieldRange,
    FilterExpr, SortDirection, SortSpec,
)
from catalog_api.db.base import Base

M = TypeVar("M", bound=Base)


class SqlCollection(Generic[M]):
    """Paginated reads over one ORM model."""

    def __init__(
        self, session_factory: async_sessionmaker[AsyncSession], model: type[M],
    ):
        self._session_factory = session_factory
        self._model = model
        mapper = inspect(model)
        self._columns = {attr.key: attr for attr in mapper.column_attrs}

    @property
    def name(self) -> str:
        return self._model.__tablename__

    async def find(
        self,
        filter: FilterExpr | None,
        sort: SortSpec,
        skip: int,
        limit: int,
        populate: Sequence[str] = (),
        select: Sequence[str] = (),
    ) -> list[dict[str, Any]]:
        self._check_fields(select, "select")
        loaders = populate_options(self._model, populate)
        stmt = self._where(sa_select(self._model), filter)
        stmt = stmt.order_by(*self._order_by(sort)).offset(skip).limit(limit)
        stmt = stmt.options(*loaders)

        async with self._session_factory() as session:
            result = await session.execute(stmt)
            rows = result.scalars().all()
            return [serialize_entity(row, select, populate) for row in rows]

    async def count(self, filter: FilterExpr | None) -> int:
        stmt = self._where(
            sa_select(func.count()).select_from(self._model), filter,
        )
        async with self._session_factory() as session:
            result = await session.execute(stmt)
            return int(result.scalar_one())

    # ─── Compilation ─────────────────────────────────────────────

    def _where(self, stmt: Select, filter: FilterExpr | None) -> Select:
        if filter is None:
            return stmt
        return stmt.where(self._compile(filter))

    def _compile(self, expr: FilterExpr):
        if isinstance(expr, AllOf):
            return and_(*(self._compile(c) for c in expr.clauses))
        column = self._column(expr.field)
        if isinstance(expr, FieldEquals):
            return column.is_(None) if expr.value is None else column == expr.value
        if isinstance(expr, FieldIn):
            return column.in_(list(expr.values))
        if isinstance(expr, FieldContains):
            return column.icontains(expr.text, autoescape=True)
        if isinstance(expr, FieldRange):
            bounds = []
            if expr.gte is not None:
                bounds.append(column >= expr.gte)
            if expr.lte is not None:
                bounds.append(column <= expr.lte)
            return and_(*bounds)
        raise TypeError(f"Unsupported filter expression: {expr!r}")

    def _order_by(self, sort: SortSpec) -> list:
        column = self._column(sort.field)
        primary_key = inspect(self._model).primary_key[0]
        if sort.direction is SortDirection.DESC:
            return [column.desc(), primary_key.desc()]
        return [column.asc(), primary_key.asc()]

    def _column(self, name: str):
        if name not in self._columns:
            raise ValidationFailure(
                f"Unknown field '{name}' for {self.name}", field=name,
            )
        return getattr(self._model, name)

    def _check_fields(self, names: Sequence[str], directive: str) -> None:
        for name in names:
            if name not in self._columns:
                raise ValidationFailure(
                    f"Unknown field '{name}' in {directive} for {self.name}",
                    field=directive,
                )


def populate_options(model: type[Base], populate: Sequence[str]) -> list:
    """selectinload options for the named relationships of `model`.

    Unknown names raise ValidationFailure, so list and single-row reads reject
    the same populate directives.
    """
    relationships = set(inspect(model).relationships.keys())
    for name in populate:
        if name not in relationships:
            raise ValidationFailure(
                f"Cannot populate '{name}' on {model.__tablename__}", field="populate",
            )
    return [selectinload(getattr(model, name)) for name in populate]


def serialize_entity(
    entity: Base,
    select: Sequence[str] = (),
    populate: Sequence[str] = (),
) -> dict[str, Any]:
    """Render an ORM row to a dict honoring projection and relation expansion."""
    mapper = inspect(type(entity))
    keys = [attr.key for attr in mapper.column_attrs]
    if select:
        keys = [k for k in keys if k in select or k == "id"]
    data = {key: getattr(entity, key) for key in keys}
    for relation in populate:
        related = getattr(entity, relation)
        if related is None:
            data[relation] = None
        elif isinstance(related, (list, tuple)):
            data[relation] = [serialize_entity(r) for r in related]
        else:
            data[relation] = serialize_entity(related)
    return data
