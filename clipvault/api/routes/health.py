"""
Health check endpoints.

We provide two endpoints:
- /api/health: Liveness check (is the process running?)
- /api/health/ready: Readiness check (is the configuration complete?)

Liveness never touches B2 or Supabase and always answers {"status": "ok"},
so a hosting platform doesn't restart us because a dependency is down.
"""

import logging

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ..dependencies import SettingsDep

logger = logging.getLogger(__name__)

router = APIRouter()


class HealthResponse(BaseModel):
    """Liveness response."""
    status: str


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
    "/health",
    response_model=HealthResponse,
    status_code=status.HTTP_200_OK,
    summary="Basic health check",
    description="Returns 200 if the service is running. Does not check dependencies.",
)
async def health_check() -> HealthResponse:
    return HealthResponse(status="ok")


@router.get(
    "/health/ready",
    response_model=ReadinessResponse,
    status_code=status.HTTP_200_OK,
    summary="Readiness check",
    description="Returns 200 if all required configuration is present, 503 otherwise.",
    responses={
        503: {
            "description": "Service not ready",
            "model": ReadinessResponse,
        }
    },
)
async def readiness_check(settings: SettingsDep):
    """
    Readiness check - is every backend configured?

    Reports storage and database separately so an operator can see which
    env vars are missing. Mocked backends count as ready.
    """
    missing = set(settings.validate_required_fields())

    groups = {
        "access_gate": ["ACCESS_PASSWORD"],
        "storage": ["B2_ENDPOINT", "B2_REGION", "B2_KEY_ID", "B2_APPLICATION_KEY", "B2_BUCKET_NAME"],
        "database": ["SUPABASE_URL", "SUPABASE_KEY"],
    }

    checks: list[ReadinessCheck] = []
    for name, fields in groups.items():
        group_missing = [f for f in fields if f in missing]
        if group_missing:
            checks.append(ReadinessCheck(
                name=name,
                status="error",
                error=f"Missing required fields: {', '.join(group_missing)}"
            ))
        else:
            checks.append(ReadinessCheck(name=name, status="ok"))

    all_ok = not missing
    response = ReadinessResponse(
        status="ready" if all_ok else "not_ready",
        version=settings.api_version,
        checks=checks,
    )

    if not all_ok:
        logger.warning(
            "Readiness check failed",
            extra={"missing_fields": sorted(missing)}
        )
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content=response.model_dump(),
        )

    return response
