# =============================================================================
# app/routers/health.py - Health Check Endpoints
# =============================================================================
# Provides health check endpoints for monitoring and load balancers.
# =============================================================================

from datetime import datetime, timezone
from pathlib import Path

from fastapi import APIRouter
from pydantic import BaseModel

from app.config import settings
from app.dependencies import ToolContextDep
from lib.utils import ApplicationError

router = APIRouter()


# =============================================================================
# Response Models
# =============================================================================

class HealthResponse(BaseModel):
    """Basic health check response."""
    status: str
    timestamp: str
    environment: str
    version: str


class ChecksResponse(BaseModel):
    """Individual service checks."""
    database: str
    email: str


class ReadinessResponse(BaseModel):
    """Readiness check response."""
    status: str
    checks: ChecksResponse
    timestamp: str


class LivenessResponse(BaseModel):
    """Liveness check response."""
    status: str
    timestamp: str


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


# =============================================================================
# Endpoints
# =============================================================================

@router.get("/health", response_model=HealthResponse)
async def health_check():
    """
    Health check endpoint.

    Returns basic health status for load balancers and monitoring.
    """
    return HealthResponse(
        status="healthy",
        timestamp=_now(),
        environment=settings.ENVIRONMENT,
        version="1.0.0",
    )


@router.get("/health/ready", response_model=ReadinessResponse)
def readiness_check(context: ToolContextDep):
    """
    Readiness check endpoint.

    Returns whether the service is ready to accept requests.
    Checks database connectivity and that the Gmail files are in place.
    """
    checks = ChecksResponse(database="unknown", email="unknown")

    # Check database
    if context.executor is None:
        checks.database = "unhealthy: not configured"
    else:
        try:
            context.executor.ping()
            checks.database = "healthy"
        except ApplicationError as e:
            checks.database = f"unhealthy: {e.message[:50]}"

    # Check email (files only, no API call)
    if context.sender is None:
        checks.email = "unhealthy: not configured"
    else:
        missing = [
            name for name, path in (
                ("credentials", settings.GMAIL_CREDENTIALS_PATH),
                ("token", settings.GMAIL_TOKEN_PATH),
            )
            if not Path(path).exists()
        ]
        checks.email = f"unhealthy: missing {', '.join(missing)}" if missing else "healthy"

    # Overall status
    all_healthy = checks.database == "healthy" and checks.email == "healthy"

    return ReadinessResponse(
        status="ready" if all_healthy else "degraded",
        checks=checks,
        timestamp=_now(),
    )


@router.get("/health/live", response_model=LivenessResponse)
async def liveness_check():
    """
    Liveness check endpoint.

    Returns whether the service process is alive.
    Used by Kubernetes/Docker for restart decisions.
    """
    return LivenessResponse(
        status="alive",
        timestamp=_now(),
    )
