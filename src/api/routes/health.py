"""
Health check endpoints.

Health checks are essential for:
- Load balancers to know if the service is alive
- Monitoring systems to track availability
- Deployment systems to verify rollouts

We provide two endpoints:
- /health: Basic liveness check (is the process running?)
- /health/ready: Readiness check (can we serve traffic?)
"""

import logging
from typing import Any

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ... import __version__
from ..dependencies import SettingsDep, StorageClientDep, open_snowflake_connection

logger = logging.getLogger(__name__)

router = APIRouter()


class HealthResponse(BaseModel):
    """
    Health check response.

    Standardized format makes it easy for monitoring tools to parse.
    """
    status: str
    version: str
    details: dict[str, Any] = {}


class ReadinessCheck(BaseModel):
    """Individual readiness check result."""
    name: str
    status: str  # "ok" or "error"
    error: str | None = None


class ReadinessResponse(BaseModel):
    """Readiness check response with details."""
    status: str  # "ready" or "not_ready"
    version: str
    checks: list[ReadinessCheck]


@router.get(
    "",
    response_model=HealthResponse,
    status_code=status.HTTP_200_OK,
    summary="Basic health check",
    description="Returns 200 if the service is running. Does not check dependencies.",
)
async def health_check(settings: SettingsDep) -> HealthResponse:
    """
    Liveness check - is the process alive?

    This endpoint should be very fast and not check external dependencies.
    """
    return HealthResponse(
        status="ok",
        version=__version__,
        details={
            "mock_mode": {
                "snowflake": settings.snowflake_mock_mode,
                "r2": settings.r2_mock_mode,
                "email": settings.resend_mock_mode,
            },
            "instagram_feed": bool(settings.instagram_feed_url),
        }
    )


def _check(name: str, error: str | None = None) -> ReadinessCheck:
    return ReadinessCheck(name=name, status="error" if error else "ok", error=error)


@router.get(
    "/ready",
    response_model=ReadinessResponse,
    status_code=status.HTTP_200_OK,
    summary="Readiness check",
    description="Returns 200 if the service can handle traffic. Checks external dependencies.",
    responses={
        503: {
            "description": "Service not ready",
            "model": ReadinessResponse,
        }
    },
)
async def readiness_check(
    settings: SettingsDep,
    storage: StorageClientDep,
):
    """
    Readiness check - can we serve traffic?

    Checks configuration, the database, object storage and email.
    Returns 503 if any check fails, which tells load balancers not
    to route traffic here.
    """
    checks: list[ReadinessCheck] = []

    missing_fields = settings.validate_required_fields()
    checks.append(_check(
        "configuration",
        f"Missing required fields: {', '.join(missing_fields)}" if missing_fields else None,
    ))

    try:
        with open_snowflake_connection(settings) as conn:
            cursor = conn.cursor()
            try:
                cursor.execute("SELECT 1")
            finally:
                cursor.close()
        checks.append(_check("database"))
    except Exception as e:
        logger.error("Database health check failed", extra={"error": str(e)})
        checks.append(_check("database", str(e)))

    try:
        await storage.list_folder(settings.photos_prefix)
        checks.append(_check("storage"))
    except Exception as e:
        logger.error("Storage health check failed", extra={"error": str(e)})
        checks.append(_check("storage", str(e)))

    checks.append(_check(
        "email",
        None if settings.email_configured else "API key not configured",
    ))

    all_ok = all(c.status == "ok" for c in checks)

    response = ReadinessResponse(
        status="ready" if all_ok else "not_ready",
        version=__version__,
        checks=checks,
    )

    if not all_ok:
        logger.warning(
            "Readiness check failed",
            extra={
                "checks": [
                    {"name": c.name, "status": c.status, "error": c.error}
                    for c in checks
                ]
            }
        )
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content=response.model_dump(),
        )

    return response
