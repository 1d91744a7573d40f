"""Error Hierarchy — typed, categorized exceptions for all catalog failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Every error renders to the standard Failure envelope via to_failure()
    - Domain errors (400-level) are recoverable; infrastructure errors (500-level) are critical

Design Decisions:
    - Single hierarchy with CatalogError base: the error translator catches all
      of them with one handler and emits their status unchanged
    - Guards and handlers raise these to short-circuit a request; raw storage
      errors are never wrapped here (only the translator inspects them)
"""

from enum import Enum
from typing import NoReturn

from catalog_api.core.responses import Failure, failure_response


class ErrorSeverity(str, Enum):
    """Error severity for observability."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories, one per failure class of the taxonomy."""
    VALIDATION = "validation"
    AUTHENTICATION = "authentication"
    AUTHORIZATION = "authorization"
    RESOURCE_NOT_FOUND = "resource_not_found"
    CONFLICT = "conflict"
    UPLOAD = "upload"
    CONFIGURATION = "configuration"
    INTERNAL = "internal"


class CatalogError(Exception):
    """Base exception for all catalog errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.http_status = http_status

    def to_failure(self) -> Failure:
        return failure_response(self.http_status, self.message)


# ─── Request Errors (400-level) ─────────────────────────────────

class ValidationFailure(CatalogError):
    """Malformed identifier or input."""
    def __init__(self, message: str, field: str | None = None):
        super().__init__(
            message, "VALIDATION_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, 400,
        )
        self.field = field


class AuthenticationFailure(CatalogError):
    """Missing, invalid, or expired credential."""
    def __init__(self, message: str = "Not authenticated"):
        super().__init__(
            message, "AUTHENTICATION_FAILED", ErrorCategory.AUTHENTICATION,
            ErrorSeverity.WARNING, 401,
        )


class AuthorizationFailure(CatalogError):
    """Authenticated principal lacks rights on the target."""
    def __init__(self, message: str = "Not allowed"):
        super().__init__(
            message, "FORBIDDEN", ErrorCategory.AUTHORIZATION,
            ErrorSeverity.WARNING, 403,
        )


class NotFoundFailure(CatalogError):
    """Resource or page absent."""
    def __init__(self, message: str):
        super().__init__(
            message, "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.INFO, 404,
        )


class ConflictFailure(CatalogError):
    """Uniqueness violation. Reported as 400 to match the storage translation."""
    def __init__(self, message: str = "Duplicate field value entered"):
        super().__init__(
            message, "DUPLICATE_VALUE", ErrorCategory.CONFLICT,
            ErrorSeverity.WARNING, 400,
        )


class UploadError(CatalogError):
    """File-upload subsystem failure; its message is shown to the client as-is."""
    def __init__(self, message: str):
        super().__init__(
            message, "UPLOAD_ERROR", ErrorCategory.UPLOAD,
            ErrorSeverity.WARNING, 400,
        )


# ─── Infrastructure Errors (500-level) ──────────────────────────

class InternalFailure(CatalogError):
    """Unclassified failure."""
    def __init__(self, message: str = "Something went wrong!"):
        super().__init__(
            message, "INTERNAL_ERROR", ErrorCategory.INTERNAL,
            ErrorSeverity.CRITICAL, 500,
        )


class ConfigurationError(CatalogError):
    """Fatal startup precondition not met (e.g. signing secret missing)."""
    def __init__(self, message: str):
        super().__init__(
            message, "CONFIGURATION_ERROR", ErrorCategory.CONFIGURATION,
            ErrorSeverity.CRITICAL, 500,
        )


_FAILURE_CLASSES: dict[int, type[CatalogError]] = {
    400: ValidationFailure,
    401: AuthenticationFailure,
    403: AuthorizationFailure,
    404: NotFoundFailure,
}


def raise_for_failure(failure: Failure) -> NoReturn:
    """Raise the taxonomy exception matching a Failure result's status."""
    error_class = _FAILURE_CLASSES.get(failure.status_code)
    if error_class is None:
        raise CatalogError(
            failure.message, "SERVICE_FAILURE", ErrorCategory.INTERNAL,
            ErrorSeverity.ERROR, failure.status_code,
        )
    raise error_class(failure.message)
