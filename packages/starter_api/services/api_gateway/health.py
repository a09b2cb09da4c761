"""
Health check endpoints for the API gateway.
Provides liveness, readiness and a detailed component report.
"""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from ... import __version__

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/health", tags=["health"])


@router.get("/detailed")
async def detailed_health_check(request: Request):
    """
    Detailed health check of the in-process components.
    Used by monitoring systems for comprehensive status.
    """
    state = request.app.state
    health_status = {
        "service": "api_gateway",
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "version": __version__,
        "components": {},
    }

    for name in ("auth_service", "auth_pipelines"):
        ready = getattr(state, name, None) is not None
        health_status["components"][name] = "operational" if ready else "not_initialized"
        if not ready:
            health_status["status"] = "unhealthy"

    auth_service = getattr(state, "auth_service", None)
    if auth_service is not None:
        health_status["auth"] = {
            "registered_users": auth_service.repository.count(),
            "token_algorithm": auth_service.tokens.algorithm,
            "bcrypt_rounds": auth_service.hasher.rounds,
        }

    status_code = 200 if health_status["status"] == "healthy" else 503
    return JSONResponse(content=health_status, status_code=status_code)


@router.get("/ready")
async def readiness_check(request: Request):
    """Kubernetes readiness check endpoint."""
    if getattr(request.app.state, "auth_service", None) is None:
        return JSONResponse(content={"status": "not_ready"}, status_code=503)
    return {"status": "ready"}


@router.get("/live")
async def liveness_check():
    """Kubernetes liveness check endpoint."""
    return {"status": "alive"}
