"""FastAPI dependencies for dependency injection."""

import httpx
from fastapi import Depends, Request

from fishify.config import Settings, get_settings
from fishify.protocols import SpotifyClientProtocol
from fishify.services.commands import new_recovery
from fishify.services.device_service import DeviceRecovery
from fishify.services.spotify_client import SpotifyClient
from fishify.state_managers import SpotifyAuthManager


async def get_http_client(request: Request) -> httpx.AsyncClient:
    """
    Get the shared HTTP client from app state.

    Args:
        request: The FastAPI request object.

    Returns:
        The shared AsyncClient instance.

    Raises:
        RuntimeError: If HTTP client is not initialized.
    """
    client: httpx.AsyncClient | None = getattr(request.app.state, "http_client", None)

    if client is None:
        raise RuntimeError("HTTP client not initialized. This should never happen.")

    return client


async def get_spotify_auth_manager(request: Request) -> SpotifyAuthManager:
    """
    Get the Spotify authentication manager from app state.

    Raises:
        RuntimeError: If Spotify auth manager is not initialized.
    """
    manager: SpotifyAuthManager | None = getattr(request.app.state, "spotify_auth_manager", None)

    if manager is None:
        raise RuntimeError("Spotify auth manager not initialized.")

    return manager


async def get_spotify_client(
    http_client: httpx.AsyncClient = Depends(get_http_client),
    auth_manager: SpotifyAuthManager = Depends(get_spotify_auth_manager),
    settings: Settings = Depends(get_settings),
) -> SpotifyClientProtocol:
    """Spotify client bound to the shared HTTP client and token cache."""
    return SpotifyClient(http_client, auth_manager, settings)


async def get_device_recovery(
    client: SpotifyClientProtocol = Depends(get_spotify_client),
    settings: Settings = Depends(get_settings),
) -> DeviceRecovery:
    """Fresh one-shot device recovery for the current request."""
    return new_recovery(client, settings)
