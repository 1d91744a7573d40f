"""Credentials — signed-token issuance and verification (HS256 JWT via PyJWT).

Invariants:
    - AuthConfig is built once at startup from Settings and injected; guards never
      read the environment
    - Missing secret is a fatal startup condition (ConfigurationError)
    - verify() returns a Principal or raises CredentialError, nothing else
    - Tokens carry at least {id, isAdmin, exp}

Design Decisions:
    - Claim names mirror the client contract (isAdmin, camelCase) while
      Principal uses snake_case attributes
    - Expired and tampered tokens get distinct reasons for logging; both are 401
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import jwt

from catalog_api.config import Settings
from catalog_api.core.auth_decisions import CredentialError, Principal
from catalog_api.core.errors import ConfigurationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuthConfig:
    """Process-wide, read-only signing configuration."""
    secret: str
    algorithm: str = "HS256"
    expires_minutes: int = 60
    header_name: str = "token"

    @classmethod
    def from_settings(cls, settings: Settings) -> "AuthConfig":
        if not settings.jwt_secret:
            raise ConfigurationError(
                "JWT_SECRET is not configured; refusing to start",
            )
        return cls(
            secret=settings.jwt_secret,
            algorithm=settings.jwt_algorithm,
            expires_minutes=settings.jwt_expires_minutes,
            header_name=settings.auth_header,
        )


class TokenVerifier:
    """Decodes and verifies tokens against the configured secret."""

    def __init__(self, config: AuthConfig):
        self._config = config

    def __call__(self, token: str) -> Principal:
        return self.verify(token)

    def verify(self, token: str) -> Principal:
        if not self._config.secret:
            raise CredentialError("Authentication is not configured")
        try:
            claims = jwt.decode(
                token,
                self._config.secret,
                algorithms=[self._config.algorithm],
                options={"require": ["exp"]},
            )
        except jwt.ExpiredSignatureError:
            raise CredentialError("Token expired")
        except jwt.InvalidTokenError as e:
            logger.info(f"Rejected token: {type(e).__name__}")
            raise CredentialError("Invalid token")

        principal_id = claims.get("id")
        if principal_id is None or str(principal_id) == "":
            raise CredentialError("Invalid token")
        return Principal(
            id=str(principal_id), is_admin=bool(claims.get("isAdmin", False)),
        )


def issue_token(
    principal: Principal, config: AuthConfig, now: datetime | None = None,
) -> str:
    """Sign a token for principal, expiring after config.expires_minutes."""
    issued_at = now or datetime.now(timezone.utc)
    payload = {
        "id": principal.id,
        "isAdmin": principal.is_admin,
        "iat": issued_at,
        "exp": issued_at + timedelta(minutes=config.expires_minutes),
    }
    return jwt.encode(payload, config.secret, algorithm=config.algorithm)
