"""Health & Readiness Probes — liveness and readiness endpoints for container orchestration.

Invariants:
    - GET /api/v1/health always returns 200 if process is up (liveness)
    - GET /api/v1/health/ready returns 503 if database is unreachable (readiness)

Design Decisions:
    - Separate liveness/readiness: liveness restarts, readiness removes from load balancer
"""

import logging

from fastapi import APIRouter

from catalog_api.api.envelope import to_json_response
from catalog_api.core.responses import failure_response, success_response
import catalog_api.infrastructure.database as database

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/health", tags=["health"])


@router.get("")
async def health_check():
    """Basic liveness probe. Returns 200 if the process is up."""
    return to_json_response(success_response({
        "status": "healthy",
        "service": "catalog-api",
        "version": "1.0.0",
    }))


@router.get("/ready")
async def readiness_check():
    """Readiness probe — includes database connectivity."""
    manager = database.db_manager
    db_ok = await manager.health_check() if manager else False
    if not db_ok:
        return to_json_response(failure_response(503, "Database unavailable"))
    return to_json_response(success_response({
        "status": "ready", "checks": {"database": "healthy"},
    }))
