"""Guards — FastAPI dependencies for identifier validation, authentication and authorization.

Invariants:
    - require_valid_id runs before any dependency that touches the database
    - A guard either returns its value or raises a CatalogError; once it raises,
      no later dependency and no handler executes (the translator writes the response)
    - verify_token attaches the Principal to request.state.principal
    - verify_owner_or_admin: 403 unless principal.id == path id or principal.is_admin
    - verify_admin: 403 unless principal.is_admin

Design Decisions:
    - FastAPI dependency chain as the interceptor pipeline: composite guards
      declare the guards they build on, so ordering is explicit in signatures
    - AuthConfig read from app.state (set once at startup), never from the environment
    - Decisions come from core/auth_decisions; this module only adapts the request
"""

import logging
from uuid import UUID

from fastapi import Depends, Request

from catalog_api.core.auth_decisions import (
    AuthDecision, Authenticated, Principal,
    authenticate, authorize_admin, authorize_owner_or_admin,
    decision_to_failure, extract_bearer,
)
from catalog_api.core.errors import AuthenticationFailure, raise_for_failure
from catalog_api.core.identifiers import parse_id, validate_id
from catalog_api.infrastructure.credentials import AuthConfig, TokenVerifier

logger = logging.getLogger(__name__)


def require_valid_id(id: str) -> UUID:
    """Identifier guard for `{id}` path parameters."""
    failure = validate_id(id)
    if failure:
        raise_for_failure(failure)
    return parse_id(id)


def get_auth_config(request: Request) -> AuthConfig:
    config = getattr(request.app.state, "auth_config", None)
    if config is None:
        logger.error("Auth guard invoked without AuthConfig on app.state")
        raise AuthenticationFailure("Authentication is not configured")
    return config


def read_token(request: Request, config: AuthConfig) -> str | None:
    token = request.headers.get(config.header_name)
    if token is not None:
        return token
    return extract_bearer(request.headers.get("authorization"))


def _enforce(decision: AuthDecision, request: Request) -> Principal:
    if isinstance(decision, Authenticated):
        return decision.principal
    failure = decision_to_failure(decision)
    logger.warning(
        f"Guard rejected request: {failure.message}",
        extra={"path": request.url.path, "status_code": failure.status_code},
    )
    raise_for_failure(failure)


async def verify_token(
    request: Request, config: AuthConfig = Depends(get_auth_config),
) -> Principal:
    decision = authenticate(read_token(request, config), TokenVerifier(config))
    principal = _enforce(decision, request)
    request.state.principal = principal
    return principal


async def verify_owner_or_admin(
    request: Request,
    target_id: UUID = Depends(require_valid_id),
    principal: Principal = Depends(verify_token),
) -> Principal:
    decision = authorize_owner_or_admin(Authenticated(principal), target_id)
    return _enforce(decision, request)


async def verify_admin(
    request: Request, principal: Principal = Depends(verify_token),
) -> Principal:
    return _enforce(authorize_admin(Authenticated(principal)), request)
