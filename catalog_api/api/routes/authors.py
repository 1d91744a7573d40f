"""Author Routes — paginated listing, lookup, and admin-only create/delete."""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from catalog_api.api.envelope import to_json_response
from catalog_api.api.guards import require_valid_id, verify_admin
from catalog_api.api.query_params import ListParams, list_params
from catalog_api.core.auth_decisions import Principal
from catalog_api.core.query_spec import FieldContains
from catalog_api.core.responses import not_found_response, success_response
from catalog_api.infrastructure.database import get_db, get_session_factory
from catalog_api.infrastructure.sql_collection import SqlCollection, serialize_entity
from catalog_api.models.author import Author
from catalog_api.schemas.catalog import AuthorCreate
from catalog_api.services.query_engine import paginate

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/authors", tags=["authors"])


@router.get("")
async def list_authors(
    params: ListParams = Depends(list_params),
    name: str | None = Query(None),
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
):
    filter = FieldContains("name", name) if name else None
    result = await paginate(
        SqlCollection(session_factory, Author), params.to_options(filter),
    )
    if result.success:
        result = success_response(result.data.to_dict())
    return to_json_response(result)


@router.get("/{id}")
async def get_author(
    author_id: UUID = Depends(require_valid_id),
    db: AsyncSession = Depends(get_db),
):
    author = await db.get(Author, author_id)
    if author is None:
        return to_json_response(not_found_response("author"))
    return to_json_response(success_response(serialize_entity(author)))


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_author(
    body: AuthorCreate,
    principal: Principal = Depends(verify_admin),
    db: AsyncSession = Depends(get_db),
):
    author = Author(**body.model_dump())
    db.add(author)
    await db.commit()
    await db.refresh(author)
    logger.info(
        f"Author created: {author.id}", extra={"principal_id": principal.id},
    )
    return to_json_response(
        success_response(serialize_entity(author)), status.HTTP_201_CREATED,
    )


@router.delete("/{id}")
async def delete_author(
    author_id: UUID = Depends(require_valid_id),
    principal: Principal = Depends(verify_admin),
    db: AsyncSession = Depends(get_db),
):
    author = await db.get(Author, author_id)
    if author is None:
        return to_json_response(not_found_response("author"))
    await db.delete(author)
    await db.commit()
    logger.info(
        f"Author deleted: {author_id}", extra={"principal_id": principal.id},
    )
    return to_json_response(success_response({"id": author_id}))
