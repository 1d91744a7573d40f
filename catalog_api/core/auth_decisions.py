"""Auth Decisions — pure state machine behind the authentication/authorization guards.

Invariants:
    - States: Start -> TokenChecked -> Authenticated | Unauthenticated,
      then Authenticated -> Authenticated | Forbidden for authorization variants
    - Authorization steps pass non-authenticated decisions through unchanged
    - Ownership is principal.id == target id (canonical form)
    - Unauthenticated maps to 401, Forbidden to 403

Design Decisions:
    - Structured result threaded explicitly through the chain: the API layer
      turns the final decision into a response, the logic stays testable
      without a request object
    - Credential verification injected as a callable: core never sees the
      signing secret or the JWT library
"""

from dataclasses import dataclass
from typing import Callable

from catalog_api.core.identifiers import canonical_id
from catalog_api.core.responses import Failure, failure_response


@dataclass(frozen=True)
class Principal:
    """Authenticated identity for the lifetime of one request."""
    id: str
    is_admin: bool = False


class CredentialError(Exception):
    """Raised by credential verifiers: bad signature, expired, missing claims."""


@dataclass(frozen=True)
class Authenticated:
    principal: Principal


@dataclass(frozen=True)
class Unauthenticated:
    reason: str


@dataclass(frozen=True)
class Forbidden:
    reason: str


AuthDecision = Authenticated | Unauthenticated | Forbidden

Verifier = Callable[[str], Principal]

NO_TOKEN = "No token provided"
MALFORMED_TOKEN = "Malformed token"
NOT_OWNER = "You are not allowed to access this resource"
NOT_ADMIN = "Admin access required"


def extract_bearer(authorization: str | None) -> str | None:
    """'Bearer <jwt>' -> '<jwt>'. Returns '' for a malformed header, None if absent."""
    if authorization is None:
        return None
    scheme, _, credential = authorization.strip().partition(" ")
    if scheme.lower() != "bearer" or not credential.strip():
        return ""
    return credential.strip()


def authenticate(token: str | None, verify: Verifier) -> AuthDecision:
    """Start -> TokenChecked -> Authenticated | Unauthenticated."""
    if token is None:
        return Unauthenticated(NO_TOKEN)
    token = token.strip()
    if not token:
        return Unauthenticated(MALFORMED_TOKEN)
    try:
        principal = verify(token)
    except CredentialError as e:
        return Unauthenticated(str(e) or "Invalid token")
    return Authenticated(principal)


def authorize_owner_or_admin(decision: AuthDecision, target_id: object) -> AuthDecision:
    """Authenticated -> Authenticated if owner or admin, else Forbidden."""
    if not isinstance(decision, Authenticated):
        return decision
    principal = decision.principal
    if principal.is_admin or canonical_id(principal.id) == canonical_id(target_id):
        return decision
    return Forbidden(NOT_OWNER)


def authorize_admin(decision: AuthDecision) -> AuthDecision:
    """Authenticated -> Authenticated if admin, else Forbidden."""
    if not isinstance(decision, Authenticated):
        return decision
    if decision.principal.is_admin:
        return decision
    return Forbidden(NOT_ADMIN)


def decision_to_failure(decision: AuthDecision) -> Failure | None:
    if isinstance(decision, Unauthenticated):
        return failure_response(401, decision.reason)
    if isinstance(decision, Forbidden):
        return failure_response(403, decision.reason)
    return None
