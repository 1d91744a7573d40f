"""Boundary Protocols — contracts between core and shell.

Invariants:
    - Core NEVER imports from shell — dependency arrows point inward only
    - find() and count() over the same filter must be safe to run concurrently

Design Decisions:
    - Protocol over ABC: structural subtyping, no inheritance hierarchy
    - Async in Protocol: implementations do IO; the query engine in services/
      orchestrates the concurrent calls
"""

from typing import Protocol, Sequence, TypeVar

from catalog_api.core.query_spec import FilterExpr, SortSpec

T_co = TypeVar("T_co", covariant=True)


class Collection(Protocol[T_co]):
    """Queryable collection read by the paginated query engine."""

    async def find(
        self,
        filter: FilterExpr | None,
        sort: SortSpec,
        skip: int,
        limit: int,
        populate: Sequence[str] = (),
        select: Sequence[str] = (),
    ) -> Sequence[T_co]: ...

    async def count(self, filter: FilterExpr | None) -> int: ...
