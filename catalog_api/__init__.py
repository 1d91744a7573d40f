"""Catalog API Package — request-processing spine for the books/authors/users catalog.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)

Design Decisions:
    - Empty __init__.py: explicit imports only, no star exports
"""
