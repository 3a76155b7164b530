"""Health endpoints."""

from datetime import UTC, datetime

import httpx
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from fishify import __version__
from fishify.config import Settings, get_settings
from fishify.dependencies import get_http_client
from fishify.models import DetailedHealthResponse, HealthResponse
from fishify.services.spotify_auth import is_authenticated

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health_check():
    """Basic health check endpoint.

    For dependency status, use `/health/ready`.
    """
    return HealthResponse(status="ok", version=__version__)


@router.get("/health/ready", response_model=DetailedHealthResponse)
async def readiness_check(
    client: httpx.AsyncClient = Depends(get_http_client),
    settings: Settings = Depends(get_settings),
):
    """Readiness probe - can the application serve traffic?

    **Returns:**
    - 200: HTTP client is up and a Spotify refresh token is available
    - 503: Not ready
    """
    checks = {
        "http_client": "ok" if not client.is_closed else "closed",
        "spotify_auth": "ok" if is_authenticated(settings) else "not_authenticated",
        "api_key": "ok" if settings.api_key else "not_configured",
    }
    all_healthy = all(value == "ok" for value in checks.values())

    return JSONResponse(
        status_code=200 if all_healthy else 503,
        content=DetailedHealthResponse(
            status="healthy" if all_healthy else "unhealthy",
            version=__version__,
            timestamp=datetime.now(UTC),
            checks=checks,
        ).model_dump(mode="json"),
    )
