"""API Layer — FastAPI routes, guards and error handlers.

Invariants:
    - Routes registered explicitly in main.py (no auto-discovery)
    - Every endpoint answers with the standard success/failure envelope

Design Decisions:
    - Thin routes delegate to services and core (impureim sandwich)
"""
