"""Query Parameters — shared pagination/sort/projection parsing for list endpoints.

Invariants:
    - page defaults to 1, limit to Settings.default_page_limit
    - limit above Settings.max_page_limit is rejected with 400
    - sort defaults to newest-first ("-created_at")
"""

from dataclasses import dataclass

from fastapi import Query

from catalog_api.config import get_settings
from catalog_api.core.errors import ValidationFailure, raise_for_failure
from catalog_api.core.identifiers import parse_id, validate_id
from catalog_api.core.query_spec import (
    NEWEST_FIRST, FilterExpr, QueryOptions, SortSpec, split_csv,
)


@dataclass(frozen=True)
class ListParams:
    page: int
    limit: int
    sort: SortSpec
    populate: tuple[str, ...]
    select: tuple[str, ...]

    def to_options(self, filter: FilterExpr | None = None) -> QueryOptions:
        return QueryOptions(
            page=self.page,
            limit=self.limit,
            filter=filter,
            sort=self.sort,
            populate=self.populate,
            select=self.select,
        )


def list_params(
    page: int = Query(1, ge=1),
    limit: int | None = Query(None, ge=1),
    sort: str | None = Query(None, description='e.g. "-created_at" or "title"'),
    populate: str | None = Query(None, description="comma-separated relations"),
    fields: str | None = Query(None, description="comma-separated fields"),
) -> ListParams:
    settings = get_settings()
    if limit is None:
        limit = settings.default_page_limit
    if limit > settings.max_page_limit:
        raise ValidationFailure(
            f"limit must not exceed {settings.max_page_limit}", field="limit",
        )
    return ListParams(
        page=page,
        limit=limit,
        sort=SortSpec.parse(sort) if sort else NEWEST_FIRST,
        populate=split_csv(populate),
        select=split_csv(fields),
    )


def optional_id(raw: str | None):
    """Validate an id given as a filter value (not a path segment)."""
    if raw is None:
        return None
    failure = validate_id(raw)
    if failure:
        raise_for_failure(failure)
    return parse_id(raw)
