"""User Routes — admin listing/creation, owner-or-admin access to a single account.

Invariants:
    - A user id in the path is the resource owner: the token's principal id must
      match it unless the principal is an admin
    - Duplicate username/email surfaces through the error translator as 400
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from catalog_api.api.envelope import to_json_response
from catalog_api.api.guards import require_valid_id, verify_admin, verify_owner_or_admin
from catalog_api.api.query_params import ListParams, list_params
from catalog_api.core.auth_decisions import Principal
from catalog_api.core.query_spec import FieldEquals
from catalog_api.core.responses import not_found_response, success_response
from catalog_api.infrastructure.database import get_db, get_session_factory
from catalog_api.infrastructure.sql_collection import SqlCollection, serialize_entity
from catalog_api.models.user import User
from catalog_api.schemas.catalog import UserCreate, UserUpdate
from catalog_api.services.query_engine import paginate

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/users", tags=["users"])


@router.get("")
async def list_users(
    params: ListParams = Depends(list_params),
    is_admin: bool | None = Query(None),
    principal: Principal = Depends(verify_admin),
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
):
    filter = FieldEquals("is_admin", is_admin) if is_admin is not None else None
    result = await paginate(
        SqlCollection(session_factory, User), params.to_options(filter),
    )
    if result.success:
        result = success_response(result.data.to_dict())
    return to_json_response(result)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_user(
    body: UserCreate,
    principal: Principal = Depends(verify_admin),
    db: AsyncSession = Depends(get_db),
):
    user = User(**body.model_dump())
    db.add(user)
    await db.commit()
    await db.refresh(user)
    logger.info(f"User created: {user.id}", extra={"principal_id": principal.id})
    return to_json_response(
        success_response(serialize_entity(user)), status.HTTP_201_CREATED,
    )


@router.get("/{id}")
async def get_user(
    user_id: UUID = Depends(require_valid_id),
    principal: Principal = Depends(verify_owner_or_admin),
    db: AsyncSession = Depends(get_db),
):
    user = await db.get(User, user_id)
    if user is None:
        return to_json_response(not_found_response("user"))
    return to_json_response(success_response(serialize_entity(user)))


@router.patch("/{id}")
async def update_user(
    body: UserUpdate,
    user_id: UUID = Depends(require_valid_id),
    principal: Principal = Depends(verify_owner_or_admin),
    db: AsyncSession = Depends(get_db),
):
    user = await db.get(User, user_id)
    if user is None:
        return to_json_response(not_found_response("user"))
    for key, value in body.model_dump(exclude_unset=True).items():
        setattr(user, key, value)
    await db.commit()
    await db.refresh(user)
    return to_json_response(success_response(serialize_entity(user)))


@router.delete("/{id}")
async def delete_user(
    user_id: UUID = Depends(require_valid_id),
    principal: Principal = Depends(verify_owner_or_admin),
    db: AsyncSession = Depends(get_db),
):
    user = await db.get(User, user_id)
    if user is None:
        return to_json_response(not_found_response("user"))
    await db.delete(user)
    await db.commit()
    logger.info(f"User deleted: {user_id}", extra={"principal_id": principal.id})
    return to_json_response(success_response({"id": user_id}))
