"""Health & Readiness Probes - liveness and readiness endpoints.

Invariants:
    - GET /health always returns 200 if process is up (liveness)
    - GET /health/ready returns 503 if database is unreachable (readiness)
"""

import logging
from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from listapp import __version__
from listapp.api.context import AppContext, get_context

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/health", tags=["health"])


@router.get("", status_code=status.HTTP_200_OK)
async def health_check():
    """Basic liveness probe. Returns 200 if the process is up."""
    return {
        "status": "healthy",
        "service": "listapp",
        "version": __version__,
    }


@router.get("/ready")
async def readiness_check(context: AppContext = Depends(get_context)):
    """Readiness probe - includes database connectivity."""
    if not await context.db.health_check():
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "status": "not_ready",
                "reason": "database_unavailable",
            },
        )
    return {"status": "ready", "checks": {"database": "healthy"}}
