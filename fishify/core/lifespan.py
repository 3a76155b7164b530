"""Application lifespan management."""

import time
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from typing import Any

import httpx
from fastapi import FastAPI

from fishify import __version__
from fishify.config import Settings, get_settings
from fishify.logging_config import get_logger, log_with_context
from fishify.middleware.logging_middleware import redact_sensitive_data
from fishify.state_managers import SpotifyAuthManager

logger = get_logger(__name__)


async def log_request(request: httpx.Request) -> None:
    """Event hook to log requests with redacted sensitive data."""
    log_with_context(
        logger,
        "debug",
        "HTTP Request",
        method=request.method,
        url=redact_sensitive_data(str(request.url)),
        event_type="http_request",
    )


async def log_response(response: httpx.Response) -> None:
    """Event hook to log responses with redacted sensitive data."""
    log_with_context(
        logger,
        "debug",
        "HTTP Response",
        status_code=response.status_code,
        url=redact_sensitive_data(str(response.request.url)),
        event_type="http_response",
    )


def create_http_client(settings: Settings) -> httpx.AsyncClient:
    """Create the shared HTTP client used for every Spotify request."""
    event_hooks: dict[str, list[Callable[..., Any]]] = {
        "request": [log_request],
        "response": [log_response],
    }
    return httpx.AsyncClient(
        timeout=httpx.Timeout(
            connect=5.0,  # Connection establishment timeout
            read=settings.http_timeout,
            write=5.0,
            pool=5.0,  # Pool checkout timeout
        ),
        limits=httpx.Limits(
            max_keepalive_connections=5,
            max_connections=10,
            keepalive_expiry=30.0,
        ),
        event_hooks=event_hooks,
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Own the shared HTTP client and token cache for the app's lifetime.

    Exceptions after yield are re-raised so cleanup still runs.
    """
    settings = get_settings()
    app.state.startup_time = time.time()

    log_with_context(
        logger,
        "info",
        "Starting fishify API",
        version=__version__,
        event_type="app_startup",
    )

    client = create_http_client(settings)
    app.state.http_client = client

    app.state.spotify_auth_manager = SpotifyAuthManager()
    await app.state.spotify_auth_manager.initialize()
    log_with_context(
        logger,
        "info",
        "HTTP client and Spotify auth manager ready",
        event_type="app_ready",
    )

    try:
        yield
    except Exception as e:
        log_with_context(
            logger,
            "error",
            "Application error during lifespan",
            error=str(e),
            error_type=type(e).__name__,
            event_type="app_error",
        )
        raise
    finally:
        log_with_context(
            logger,
            "info",
            "Shutting down fishify API",
            event_type="app_shutdown",
        )
        await app.state.spotify_auth_manager.cleanup()
        await client.aclose()
