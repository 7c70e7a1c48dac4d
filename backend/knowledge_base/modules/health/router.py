"""Health check endpoints for load balancers and orchestrators."""

from typing import Literal

from fastapi import APIRouter, Response, status
from pydantic import BaseModel

from knowledge_base.config import settings
from knowledge_base.core.database import check_db_connection

router = APIRouter(prefix="/health")


class HealthResponse(BaseModel):
    status: Literal["ok"] = "ok"
    version: str
    environment: str


class ReadinessResponse(BaseModel):
    """Readiness with the result of every dependency check."""

    status: Literal["ok", "degraded"]
    checks: dict[str, bool]


def _alive() -> HealthResponse:
    return HealthResponse(version=settings.app_version, environment=settings.environment)


@router.get("", response_model=HealthResponse, summary="Basic health check")
async def health() -> HealthResponse:
    """Returns OK while the process is serving requests."""
    return _alive()


@router.get("/live", response_model=HealthResponse, summary="Liveness probe")
async def liveness() -> HealthResponse:
    return _alive()


@router.get(
    "/ready",
    response_model=ReadinessResponse,
    summary="Readiness probe",
    responses={
        status.HTTP_503_SERVICE_UNAVAILABLE: {"description": "The database does not answer"},
    },
)
async def readiness(response: Response) -> ReadinessResponse:
    """Ready once the database answers; 503 otherwise so traffic is held back."""
    checks = {"database": await check_db_connection()}
    ready = all(checks.values())
    if not ready:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    return ReadinessResponse(status="ok" if ready else "degraded", checks=checks)
