"""Response Factory — the single source of truth for response envelopes.

Invariants:
    - Every body is exactly one of {success: true, data} or
      {success: false, statusCode, message}
    - Results are frozen: built once per operation, returned up the chain unchanged
    - success_response(x).data is x (no transformation)

Design Decisions:
    - Tagged union (Success | Failure) over a dict with optional keys: the
      `success` property is the discriminant and the type checker sees both arms
    - Pure constructors: no FastAPI import here, the API layer serializes via to_body()
"""

from dataclasses import dataclass
from typing import Any, Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class Success(Generic[T]):
    """Successful outcome carrying the operation's data."""
    data: T

    @property
    def success(self) -> bool:
        return True

    def to_body(self) -> dict[str, Any]:
        return {"success": True, "data": self.data}


@dataclass(frozen=True)
class Failure:
    """Failed outcome carrying an HTTP status and a user-facing message."""
    status_code: int
    message: str

    @property
    def success(self) -> bool:
        return False

    def to_body(self) -> dict[str, Any]:
        return {
            "success": False,
            "statusCode": self.status_code,
            "message": self.message,
        }


ServiceResult = Success[T] | Failure


def success_response(data: T) -> Success[T]:
    return Success(data)


def failure_response(status_code: int = 400, message: str = "") -> Failure:
    return Failure(status_code=status_code, message=message)


def not_found_response(target_name: str) -> Failure:
    """404 failure for a named target: "book" / "BOOK" -> "Book not found"."""
    return failure_response(404, f"{target_name.capitalize()} not found")
