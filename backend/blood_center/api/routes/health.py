"""Health & Readiness Probes — root greeting plus liveness/readiness endpoints.

Invariants:
    - GET / and GET /health/ always return 200 if the process is up
    - GET /health/ready returns 503 if the database is unreachable

Design Decisions:
    - Separate liveness/readiness: liveness restarts, readiness removes from
      the load balancer
"""

import logging

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)
router = APIRouter(tags=["health"])


@router.get("/")
async def root():
    return {"msg": "hello"}


@router.get("/health/", status_code=status.HTTP_200_OK)
async def health_check():
    """Basic liveness probe."""
    return {
        "status": "healthy",
        "service": "blood-center-api",
        "version": "1.0.0",
    }


@router.get("/health/ready")
async def readiness_check(request: Request):
    """Readiness probe — includes database connectivity."""
    manager = getattr(request.app.state, "db_manager", None)
    db_ok = await manager.health_check() if manager else False
    if not db_ok:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "status": "not_ready",
                "reason": "database_unavailable",
            },
        )
    return {"status": "ready", "checks": {"database": "healthy"}}
