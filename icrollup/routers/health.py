"""Health check endpoints for production monitoring."""

from __future__ import annotations

import time

from fastapi import APIRouter, Request

from icrollup.schemas.health import HealthResponse, ServiceHealth
from icrollup.services.datastore_client import DataStoreClient

router = APIRouter(tags=["health"])


async def _check_service(name: str, check_fn) -> ServiceHealth:
    """Run a health check function and return a ServiceHealth result."""
    start = time.monotonic()
    try:
        ok = await check_fn()
        latency = round((time.monotonic() - start) * 1000, 2)
        if ok is False:
            return ServiceHealth(service=name, status="unhealthy", latency_ms=latency, details="unreachable")
        return ServiceHealth(service=name, status="healthy", latency_ms=latency)
    except Exception as exc:
        latency = round((time.monotonic() - start) * 1000, 2)
        return ServiceHealth(service=name, status="unhealthy", latency_ms=latency, details=str(exc)[:200])


async def _check_app() -> None:
    """Application self-check — always passes."""


def _data_source_name(request: Request) -> str:
    source = request.app.state.data_source
    return "rest" if isinstance(source, DataStoreClient) else "memory"


@router.get("/health", response_model=HealthResponse)
async def health_check(request: Request) -> HealthResponse:
    """Basic health check — is the application running?"""
    settings = request.app.state.settings
    services = [await _check_service("app", _check_app)]
    overall = "healthy" if all(s.status == "healthy" for s in services) else "degraded"

    return HealthResponse(
        status=overall,
        version=settings.app_version,
        environment=settings.environment,
        data_source=_data_source_name(request),
        services=services,
    )


@router.get("/health/ready", response_model=HealthResponse)
async def readiness_check(request: Request) -> HealthResponse:
    """Readiness check — is the data store reachable?"""
    settings = request.app.state.settings
    source = request.app.state.data_source
    services = [await _check_service("app", _check_app)]
    if isinstance(source, DataStoreClient):
        services.append(await _check_service("datastore", source.test_connection))

    overall = "healthy" if all(s.status == "healthy" for s in services) else "unhealthy"

    return HealthResponse(
        status=overall,
        version=settings.app_version,
        environment=settings.environment,
        data_source=_data_source_name(request),
        services=services,
    )


@router.get("/health/live")
async def liveness_check() -> dict[str, str]:
    """Liveness probe — is the process alive?"""
    return {"status": "alive"}
