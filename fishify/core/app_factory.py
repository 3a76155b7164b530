"""Application factory for creating and configuring the FastAPI app."""

from typing import Any

from fastapi import FastAPI
from fastapi.openapi.utils import get_openapi

from fishify import __version__
from fishify.config import get_settings
from fishify.core.lifespan import lifespan
from fishify.core.middleware import setup_middleware
from fishify.middleware.error_handlers import register_error_handlers
from fishify.routers import device_router, health_router, playback_router


def custom_openapi(app: FastAPI) -> dict[str, Any]:
    """Generate the OpenAPI schema with the Bearer security scheme."""
    if app.openapi_schema:
        return app.openapi_schema

    openapi_schema = get_openapi(
        title=app.title,
        version=app.version,
        description=app.description,
        routes=app.routes,
    )

    openapi_schema.setdefault("components", {})["securitySchemes"] = {
        "BearerAuth": {
            "type": "http",
            "scheme": "bearer",
            "bearerFormat": "API Key",
            "description": "Enter your API key",
        }
    }

    for path, path_item in openapi_schema.get("paths", {}).items():
        if not path.startswith("/api/"):
            continue
        for method, operation in path_item.items():
            if method in ["get", "post", "put", "delete", "patch"]:
                operation["security"] = [{"BearerAuth": []}]

    app.openapi_schema = openapi_schema
    return app.openapi_schema


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application instance
    """
    settings = get_settings()

    app = FastAPI(
        title="fishify API",
        description="""
        Spotify playback control for chat bots.

        ## Authentication
        Every `/api` endpoint requires `Authorization: Bearer API_KEY`.

        ## Responses
        Commands answer with `lines`, a `verbose` hint and `text`, the
        chat-ready rendering (listings quoted with `> `).

        ## Health
        - `/health` - Basic health check
        - `/health/ready` - Readiness probe (Spotify credentials present?)
        """,
        version=__version__,
        lifespan=lifespan,
    )

    setup_middleware(app, settings)
    register_error_handlers(app)

    app.include_router(health_router.router, tags=["health"])
    app.include_router(playback_router.router, prefix="/api", tags=["playback"])
    app.include_router(device_router.router, prefix="/api", tags=["devices"])

    app.openapi = lambda: custom_openapi(app)  # type: ignore[method-assign]

    return app
