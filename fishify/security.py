"""API key authentication for the fishify HTTP API."""

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from fishify.config import Settings, get_settings
from fishify.logging_config import get_logger, log_with_context

logger = get_logger(__name__)

# HTTP Bearer token scheme
security = HTTPBearer(auto_error=False)


def _client_ip(request: Request) -> str:
    return request.client.host if request.client else "unknown"


async def verify_api_key(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    settings: Settings = Depends(get_settings),
) -> None:
    """Verify the chat bot's API key from the Authorization header.

    Args:
        request: The FastAPI request object
        credentials: HTTP Bearer credentials from header
        settings: Settings instance holding API_KEY

    Raises:
        HTTPException: 401 if the key is not configured, missing or wrong

    Example:
        Authorization: Bearer your-api-key-here
    """
    api_key = settings.api_key

    if not api_key:
        log_with_context(
            logger,
            "error",
            "API_KEY not configured",
            event_type="security_error",
            path=request.url.path,
        )
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication not configured - API_KEY environment variable is missing",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if not credentials:
        log_with_context(
            logger,
            "warning",
            "Missing API key",
            event_type="auth_failure",
            path=request.url.path,
            ip=_client_ip(request),
        )
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing API key",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if credentials.credentials != api_key:
        log_with_context(
            logger,
            "warning",
            "Invalid API key",
            event_type="auth_failure",
            path=request.url.path,
            ip=_client_ip(request),
        )
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid API key",
            headers={"WWW-Authenticate": "Bearer"},
        )

    log_with_context(logger, "debug", "API key verified", event_type="auth_success", path=request.url.path)
