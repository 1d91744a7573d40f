"""Schemas — Pydantic request bodies for the catalog resources.

Design Decisions:
    - Field types only: per-resource business rules are out of scope for this service
"""
