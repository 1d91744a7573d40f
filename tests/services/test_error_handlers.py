"""Error Translator — verifies classification and envelope rendering.

Tests cover:
    - simulated malformed-id storage error (server-side and asyncpg client-side)
      -> 400 "Invalid ID Format"
    - unclassified storage error -> 500 generic message, no SQL text
    - simulated uniqueness violation -> 400 "Duplicate field value entered"
    - unclassified error -> 500 with its own message, or the generic message
    - explicit status_code attribute is respected
    - stack present outside production, null in production
    - unmatched route -> 404 "Not found - <path>"
    - duplicate user through the API -> 400
"""

from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.exc import DataError, IntegrityError, InterfaceError, StatementError

from catalog_api.api.error_handlers import (
    build_error_body, classify_exception, register_error_handlers,
)
from catalog_api.core.errors import NotFoundFailure, UploadError
from catalog_api.core.responses import failure_response


class _PgError(Exception):
    def __init__(self, message, pgcode):
        super().__init__(message)
        self.pgcode = pgcode


def test_malformed_uuid_statement_error():
    exc = StatementError(
        "(builtins.ValueError) badly formed hexadecimal UUID string",
        "SELECT * FROM books WHERE id = ?", {}, ValueError("badly formed hexadecimal UUID string"),
    )
    failure = classify_exception(exc)
    assert (failure.status_code, failure.message) == (400, "Invalid ID Format")


def test_malformed_uuid_postgres_data_error():
    exc = DataError(
        "SELECT", {}, _PgError('invalid input syntax for type uuid: "123"', "22P02"),
    )
    assert classify_exception(exc).message == "Invalid ID Format"


class _AsyncpgDataError(Exception):
    """Shape of asyncpg.exceptions.DataError raised by its client-side UUID encoder."""


def test_malformed_uuid_asyncpg_client_side():
    exc = InterfaceError(
        "SELECT books.id FROM books WHERE books.id = $1::UUID", ("abc",),
        _AsyncpgDataError(
            "invalid input for query argument $1: 'abc' (invalid UUID 'abc': "
            "length must be between 32..36 characters, got 3)"
        ),
    )
    failure = classify_exception(exc)
    assert (failure.status_code, failure.message) == (400, "Invalid ID Format")


def test_non_uuid_interface_error_is_not_an_id_error():
    exc = InterfaceError("SELECT 1", {}, Exception("connection is closed"))
    assert classify_exception(exc).status_code == 500


def test_sqlite_unique_violation():
    exc = IntegrityError(
        "INSERT INTO users", {}, Exception("UNIQUE constraint failed: users.email"),
    )
    failure = classify_exception(exc)
    assert (failure.status_code, failure.message) == (400, "Duplicate field value entered")


def test_postgres_unique_violation():
    exc = IntegrityError("INSERT", {}, _PgError("duplicate key value", "23505"))
    assert classify_exception(exc).message == "Duplicate field value entered"


def test_other_integrity_error_hides_sql():
    exc = IntegrityError(
        "UPDATE books SET title=? WHERE books.id = ?", (None, "42"),
        Exception("NOT NULL constraint failed: books.title"),
    )
    failure = classify_exception(exc)
    assert (failure.status_code, failure.message) == (500, "Something went wrong!")


def test_upload_error_keeps_message():
    failure = classify_exception(UploadError("File too large"))
    assert (failure.status_code, failure.message) == (400, "File too large")


def test_unclassified_error_is_500_with_own_message():
    failure = classify_exception(RuntimeError("disk on fire"))
    assert (failure.status_code, failure.message) == (500, "disk on fire")


def test_unclassified_error_without_message_uses_generic():
    assert classify_exception(RuntimeError()).message == "Something went wrong!"


def test_explicit_status_is_respected():
    class TeapotError(Exception):
        status_code = 418
    assert classify_exception(TeapotError("short and stout")).status_code == 418


def test_stack_only_outside_production():
    failure = failure_response(500, "boom")
    try:
        raise RuntimeError("boom")
    except RuntimeError as exc:
        dev = build_error_body(failure, exc, production=False)
        prod = build_error_body(failure, exc, production=True)
    assert "RuntimeError: boom" in dev["stack"]
    assert prod["stack"] is None
    assert prod == {"success": False, "statusCode": 500, "message": "boom", "stack": None}


def _app_with(production: bool) -> FastAPI:
    app = FastAPI()
    register_error_handlers(app, production=production)

    @app.get("/explode")
    async def explode():
        raise RuntimeError("kaboom")

    @app.get("/missing")
    async def missing():
        raise NotFoundFailure("Book not found")

    return app


async def _get(app: FastAPI, path: str):
    async with AsyncClient(
        transport=ASGITransport(app=app, raise_app_exceptions=False),
        base_url="http://test",
    ) as c:
        return await c.get(path)


async def test_unhandled_exception_renders_envelope():
    res = await _get(_app_with(production=False), "/explode")
    assert res.status_code == 500
    body = res.json()
    assert body["success"] is False
    assert body["message"] == "kaboom"
    assert "kaboom" in body["stack"]


async def test_production_hides_stack():
    res = await _get(_app_with(production=True), "/explode")
    assert res.json()["stack"] is None


async def test_domain_error_renders_envelope():
    res = await _get(_app_with(production=True), "/missing")
    assert res.status_code == 404
    assert res.json()["message"] == "Book not found"


async def test_unmatched_route_is_not_found_with_path():
    res = await _get(_app_with(production=True), "/no/such/route")
    assert res.status_code == 404
    assert res.json()["message"] == "Not found - /no/such/route"


async def test_request_validation_is_400(client):
    res = await client.get("/api/v1/books?page=0")
    assert res.status_code == 400
    assert res.json()["success"] is False
    assert "page" in res.json()["message"]


async def test_duplicate_user_through_api(client, admin_headers, seed_user):
    res = await client.post(
        "/api/v1/users",
        json={"username": "alice", "email": "other@example.com"},
        headers=admin_headers,
    )
    assert res.status_code == 400
    assert res.json()["message"] == "Duplicate field value entered"
