"""
Health Check Router - Teed Waitlist
waitlist/routers/health.py

Liveness of the two backends the waitlist depends on. The Snowflake check
reads the BETA_CAPACITY row, so a healthy answer also means the seat counter
is reachable.
"""
from datetime import datetime, timezone
from typing import Callable, Dict, Optional

import redis
import structlog
from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from waitlist.config import settings
from waitlist.core.dependencies import get_capacity_repository
from waitlist.core.exceptions import RepositoryException
from waitlist.models.capacity import CapacityState
from waitlist.repositories.capacity_repository import CapacityRepository
from waitlist.services import cache as cache_service

logger = structlog.get_logger(__name__)

router = APIRouter(tags=["Health"])


class HealthResponse(BaseModel):
    status: str
    timestamp: datetime
    version: str
    dependencies: Dict[str, str]
    capacity: Optional[CapacityState] = None


class ServiceHealth(BaseModel):
    service: str
    status: str
    is_healthy: bool
    timestamp: datetime


def _short_error(e: Exception) -> str:
    msg = str(e)
    return msg[:100] + "..." if len(msg) > 100 else msg


def snowflake_configured() -> bool:
    return all([
        settings.SNOWFLAKE_ACCOUNT,
        settings.SNOWFLAKE_USER,
        settings.SNOWFLAKE_PASSWORD.get_secret_value(),
    ])


def check_snowflake(capacity_repo: CapacityRepository) -> str:
    if not snowflake_configured():
        return "unhealthy: Snowflake credentials not configured"
    try:
        state = capacity_repo.get_state()
    except RepositoryException as e:
        logger.warning("health_snowflake_failed", error=str(e))
        return f"unhealthy: {_short_error(e)}"
    return f"healthy ({state.approved_count}/{state.beta_cap} seats taken)"


def check_redis() -> str:
    cache = cache_service.get_cache()
    if cache is None:
        return "unhealthy: Redis not configured or unreachable"
    try:
        cache.client.ping()
    except redis.RedisError as e:
        cache_service.reset_cache()
        return f"unhealthy: {_short_error(e)}"
    return "healthy"


CHECKS: Dict[str, Callable[[CapacityRepository], str]] = {
    "snowflake": check_snowflake,
    "redis": lambda capacity_repo: check_redis(),
}


@router.get(
    "/health",
    response_model=HealthResponse,
    responses={
        200: {"description": "All dependencies healthy"},
        503: {"description": "One or more dependencies unhealthy"},
    },
    summary="Health check",
    description="Check health of all dependencies and report beta seat usage.",
)
def health_check(capacity_repo: CapacityRepository = Depends(get_capacity_repository)):
    dependencies = {name: check(capacity_repo) for name, check in CHECKS.items()}
    all_healthy = all(v.startswith("healthy") for v in dependencies.values())

    capacity = None
    if dependencies["snowflake"].startswith("healthy"):
        capacity = capacity_repo.get_state()

    response = HealthResponse(
        status="healthy" if all_healthy else "degraded",
        timestamp=datetime.now(timezone.utc),
        version=settings.APP_VERSION,
        dependencies=dependencies,
        capacity=capacity,
    )

    if all_healthy:
        return response
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content=response.model_dump(mode="json"),
    )


@router.get(
    "/health/{service}",
    response_model=ServiceHealth,
    responses={404: {"description": "Unknown service"}},
    summary="Check a single dependency",
)
def health_service(
    service: str,
    capacity_repo: CapacityRepository = Depends(get_capacity_repository),
) -> ServiceHealth:
    check = CHECKS.get(service)
    if check is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={"error_code": "UNKNOWN_SERVICE", "message": f"No health check named '{service}'"},
        )
    result = check(capacity_repo)
    return ServiceHealth(
        service=service,
        status=result,
        is_healthy=result.startswith("healthy"),
        timestamp=datetime.now(timezone.utc),
    )
