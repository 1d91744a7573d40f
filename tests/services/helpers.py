"""Service test helpers — signed-token headers and an in-memory Collection fake."""

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any

from catalog_api.core.auth_decisions import Principal
from catalog_api.core.query_spec import (
    AllOf, FieldContains, FieldEquals, FieldIn, FieldRange, SortDirection,
)
from catalog_api.infrastructure.credentials import AuthConfig, issue_token

TEST_AUTH = AuthConfig(secret="service-test-secret", expires_minutes=5)
BASE_TIME = datetime(2024, 1, 1, tzinfo=timezone.utc)


def token_for(principal_id, is_admin: bool = False) -> dict[str, str]:
    """Header dict carrying a signed token for the given principal."""
    token = issue_token(Principal(id=str(principal_id), is_admin=is_admin), TEST_AUTH)
    return {TEST_AUTH.header_name: token}


# ─── In-Memory Collection ────────────────────────────────────────

@dataclass
class FakeCollection:
    """In-memory Collection over dicts; records calls for assertions."""
    rows: list[dict[str, Any]] = field(default_factory=list)
    calls: list[str] = field(default_factory=list)
    fail_on: str | None = None

    name = "fake"

    async def find(self, filter, sort, skip, limit, populate=(), select=()):
        self.calls.append("find")
        if self.fail_on == "find":
            raise RuntimeError("find failed")
        matched = [r for r in self.rows if _matches(r, filter)]
        matched.sort(
            key=lambda r: r[sort.field], reverse=sort.direction is SortDirection.DESC,
        )
        page = matched[skip:skip + limit]
        if select:
            page = [{k: v for k, v in r.items() if k in select or k == "id"} for r in page]
        return page

    async def count(self, filter):
        self.calls.append("count")
        if self.fail_on == "count":
            raise RuntimeError("count failed")
        return sum(1 for r in self.rows if _matches(r, filter))


def _matches(row, expr) -> bool:
    if expr is None:
        return True
    if isinstance(expr, AllOf):
        return all(_matches(row, c) for c in expr.clauses)
    value = row.get(expr.field)
    if isinstance(expr, FieldEquals):
        return value == expr.value
    if isinstance(expr, FieldIn):
        return value in expr.values
    if isinstance(expr, FieldContains):
        return expr.text.lower() in str(value).lower()
    if isinstance(expr, FieldRange):
        return (expr.gte is None or value >= expr.gte) and (
            expr.lte is None or value <= expr.lte
        )
    raise TypeError(expr)


def make_rows(count: int) -> list[dict[str, Any]]:
    return [
        {"id": i, "title": f"Book {i}", "created_at": BASE_TIME + timedelta(minutes=i)}
        for i in range(count)
    ]
