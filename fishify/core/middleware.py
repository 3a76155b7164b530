"""Middleware configuration."""

from fastapi import FastAPI
from fastapi.middleware.trustedhost import TrustedHostMiddleware
from slowapi import Limiter
from slowapi.util import get_remote_address

from fishify.config import Settings
from fishify.logging_config import get_logger, log_with_context

logger = get_logger(__name__)

DEFAULT_RATE_LIMIT = "60/minute"

# Shared by the routers' @limiter.limit decorators and app.state
limiter = Limiter(key_func=get_remote_address, default_limits=[DEFAULT_RATE_LIMIT])


def setup_middleware(app: FastAPI, settings: Settings) -> Limiter:
    """Configure all middleware for the application.

    Args:
        app: FastAPI application instance
        settings: Application settings

    Returns:
        Limiter instance for rate limiting
    """
    # Trusted hosts - prevent host header injection
    trusted_hosts = settings.trusted_host_list
    log_with_context(
        logger,
        "info",
        "Configuring TrustedHost middleware",
        event_type="security_config",
        hosts=trusted_hosts,
    )
    app.add_middleware(TrustedHostMiddleware, allowed_hosts=trusted_hosts)

    app.state.limiter = limiter
    return limiter
