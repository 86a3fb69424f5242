"""Health & Readiness Probes — liveness and readiness endpoints for container orchestration.

Invariants:
    - GET /health/ always returns 200 if process is up (liveness)
    - GET /health/ready returns 503 if database is unreachable (readiness)

Design Decisions:
    - Separate liveness/readiness: liveness restarts, readiness removes from load balancer
    - db_manager read at call time: it is initialized by the lifespan after import
"""

import logging
from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from mentorlink.api.dependencies import get_presence_registry
from mentorlink.core.presence_registry import PresenceRegistry

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/health", tags=["health"])


@router.get("/", status_code=status.HTTP_200_OK)
async def health_check(
    registry: PresenceRegistry = Depends(get_presence_registry),
):
    """Basic liveness probe. Returns 200 if the process is up."""
    return {
        "status": "healthy",
        "service": "mentorlink-api",
        "version": "1.0.0",
        "online_users": len(registry),
    }


@router.get("/ready")
async def readiness_check():
    """Readiness probe — includes database connectivity."""
    from mentorlink.infrastructure.database import db_manager

    db_ok = await db_manager.health_check() if db_manager else False
    if not db_ok:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "status": "not_ready",
                "reason": "database_unavailable",
            },
        )
    return {"status": "ready", "checks": {"database": "healthy"}}
