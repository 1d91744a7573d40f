"""ORM Models — SQLAlchemy declarative models for catalog entities.

Invariants:
    - All models inherit from Base (db/base.py)
    - Every model has a UUID primary key and a timezone-aware created_at
      (the default sort key of paginated reads)

Design Decisions:
    - One file per entity for locality
    - All models imported here so SQLAlchemy resolves string-based relationship()
      references before any query runs
"""

from catalog_api.models.author import Author  # noqa: F401
from catalog_api.models.book import Book  # noqa: F401
from catalog_api.models.user import User  # noqa: F401
