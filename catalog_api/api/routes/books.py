"""Book Routes — paginated catalog listing plus admin-only writes.

Invariants:
    - Reads are public; create/update/delete require an admin principal
    - Path ids pass the identifier guard before any DB access
    - Missing books answer 404 "Book not found"
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from catalog_api.api.envelope import to_json_response
from catalog_api.api.guards import require_valid_id, verify_admin
from catalog_api.api.query_params import ListParams, list_params, optional_id
from catalog_api.core.auth_decisions import Principal
from catalog_api.core.query_spec import (
    FieldContains, FieldEquals, FieldRange, combine_filters, split_csv,
)
from catalog_api.core.responses import not_found_response, success_response
from catalog_api.infrastructure.database import get_db, get_session_factory
from catalog_api.infrastructure.sql_collection import (
    SqlCollection, populate_options, serialize_entity,
)
from catalog_api.models.author import Author
from catalog_api.models.book import Book
from catalog_api.schemas.catalog import BookCreate, BookUpdate
from catalog_api.services.query_engine import paginate

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/books", tags=["books"])


@router.get("")
async def list_books(
    params: ListParams = Depends(list_params),
    title: str | None = Query(None),
    genre: str | None = Query(None),
    author: str | None = Query(None, description="author id"),
    published_from: int | None = Query(None),
    published_to: int | None = Query(None),
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
):
    """List books, newest first unless `sort` says otherwise."""
    author_id = optional_id(author)
    year_range = None
    if published_from is not None or published_to is not None:
        year_range = FieldRange("published_year", gte=published_from, lte=published_to)
    filter = combine_filters(
        FieldContains("title", title) if title else None,
        FieldEquals("genre", genre) if genre else None,
        FieldEquals("author_id", author_id) if author_id else None,
        year_range,
    )
    result = await paginate(
        SqlCollection(session_factory, Book), params.to_options(filter),
    )
    if result.success:
        result = success_response(result.data.to_dict())
    return to_json_response(result)


@router.get("/{id}")
async def get_book(
    book_id: UUID = Depends(require_valid_id),
    populate: str | None = Query(None),
    db: AsyncSession = Depends(get_db),
):
    relations = split_csv(populate)
    book = await db.get(Book, book_id, options=populate_options(Book, relations))
    if book is None:
        return to_json_response(not_found_response("book"))
    return to_json_response(
        success_response(serialize_entity(book, populate=relations)),
    )


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_book(
    body: BookCreate,
    principal: Principal = Depends(verify_admin),
    db: AsyncSession = Depends(get_db),
):
    if body.author_id and await db.get(Author, body.author_id) is None:
        return to_json_response(not_found_response("author"))
    book = Book(**body.model_dump())
    db.add(book)
    await db.commit()
    await db.refresh(book)
    logger.info(
        f"Book created: {book.id}", extra={"principal_id": principal.id},
    )
    return to_json_response(
        success_response(serialize_entity(book)), status.HTTP_201_CREATED,
    )


@router.patch("/{id}")
async def update_book(
    body: BookUpdate,
    book_id: UUID = Depends(require_valid_id),
    principal: Principal = Depends(verify_admin),
    db: AsyncSession = Depends(get_db),
):
    book = await db.get(Book, book_id)
    if book is None:
        return to_json_response(not_found_response("book"))
    changes = body.model_dump(exclude_unset=True)
    if changes.get("author_id") and await db.get(Author, changes["author_id"]) is None:
        return to_json_response(not_found_response("author"))
    for key, value in changes.items():
        setattr(book, key, value)
    await db.commit()
    await db.refresh(book)
    return to_json_response(success_response(serialize_entity(book)))


@router.delete("/{id}")
async def delete_book(
    book_id: UUID = Depends(require_valid_id),
    principal: Principal = Depends(verify_admin),
    db: AsyncSession = Depends(get_db),
):
    book = await db.get(Book, book_id)
    if book is None:
        return to_json_response(not_found_response("book"))
    await db.delete(book)
    await db.commit()
    logger.info(
        f"Book deleted: {book_id}", extra={"principal_id": principal.id},
    )
    return to_json_response(success_response({"id": book_id}))
