"""Identifier Guard — fast-fail format check for path-supplied resource ids.

Invariants:
    - Never touches the store: format only
    - Malformed ids yield Failure(400, "Invalid ID Format"); valid ids pass untouched
    - Accepted grammar is the storage engine's native UUID: canonical
      8-4-4-4-12 hex (any case) or the compact 32-hex form

Design Decisions:
    - Regex over uuid.UUID(): UUID() also accepts braces, "urn:uuid:" prefixes
      and surrounding whitespace, which the path grammar does not
"""

import re
from uuid import UUID

from catalog_api.core.responses import Failure, failure_response

INVALID_ID_MESSAGE = "Invalid ID Format"

_UUID_PATTERN = re.compile(
    r"^(?:[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}"
    r"|[0-9a-fA-F]{32})$"
)


def is_valid_id(raw_id: str) -> bool:
    return bool(_UUID_PATTERN.match(raw_id))


def validate_id(raw_id: str) -> Failure | None:
    """Return None when raw_id is well-formed, else the 400 failure."""
    if is_valid_id(raw_id):
        return None
    return failure_response(400, INVALID_ID_MESSAGE)


def parse_id(raw_id: str) -> UUID:
    """Parse an id already accepted by validate_id."""
    return UUID(raw_id)


def canonical_id(value: object) -> str:
    """Lowercase canonical form for ownership comparison; opaque ids pass through."""
    text = str(value)
    if is_valid_id(text):
        return str(UUID(text))
    return text
