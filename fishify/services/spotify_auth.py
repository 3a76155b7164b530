"""Spotify access-token handling via the refresh-token flow."""

from pathlib import Path

import httpx

from fishify.config import Settings, get_settings
from fishify.exceptions import SpotifyAuthException, SpotifyNotAuthenticatedException
from fishify.logging_config import get_logger, log_with_context
from fishify.state_managers import SpotifyAuthManager

logger = get_logger(__name__)

TOKEN_URL = "https://accounts.spotify.com/api/token"


def _load_refresh_token(token_file: Path) -> str | None:
    """Load refresh token from file."""
    if token_file.exists():
        try:
            return token_file.read_text(encoding="utf-8").strip() or None
        except OSError as e:
            log_with_context(
                logger,
                "warning",
                "Could not read refresh token file",
                token_file=str(token_file),
                error=str(e),
                event_type="spotify_token_file_unreadable",
            )
            return None
    return None


def _save_refresh_token(token_file: Path, refresh_token: str) -> None:
    """Save refresh token to file."""
    try:
        token_file.parent.mkdir(parents=True, exist_ok=True)
        token_file.write_text(refresh_token, encoding="utf-8")
        token_file.chmod(0o600)  # Secure file permissions
    except OSError as e:
        raise SpotifyAuthException(f"Failed to save refresh token: {str(e)}") from e


def is_authenticated(settings: Settings | None = None) -> bool:
    """Check if we have a refresh token available.

    Args:
        settings: Settings instance (defaults to singleton)
    """
    if settings is None:
        settings = get_settings()
    return _load_refresh_token(settings.spotify_token_file) is not None or bool(settings.spotify_refresh_token)


async def get_access_token(
    client: httpx.AsyncClient,
    auth_manager: SpotifyAuthManager,
    settings: Settings | None = None,
) -> str:
    """
    Get Spotify access token using refresh token flow.

    Automatically refreshes the token when expired. Concurrent callers
    share a single refresh.

    Args:
        client: Shared HTTP client.
        auth_manager: Spotify authentication state manager
        settings: Settings instance (defaults to singleton)

    Returns:
        Access token string.

    Raises:
        SpotifyNotAuthenticatedException: No refresh token is configured.
        SpotifyAuthException: Token refresh failed.
    """
    if settings is None:
        settings = get_settings()

    cached_token = await auth_manager.get_token()
    if cached_token:
        return cached_token

    async with auth_manager.refresh_lock:
        # Another request may have refreshed while we waited
        cached_token = await auth_manager.get_token()
        if cached_token:
            return cached_token

        refresh_token = _load_refresh_token(settings.spotify_token_file) or settings.spotify_refresh_token
        if not refresh_token:
            raise SpotifyNotAuthenticatedException(
                "No refresh token available. Set SPOTIFY_REFRESH_TOKEN or write it to "
                f"{settings.spotify_token_file}."
            )

        try:
            response = await client.post(
                TOKEN_URL,
                auth=(settings.spotify_client_id, settings.spotify_client_secret),
                data={"grant_type": "refresh_token", "refresh_token": refresh_token},
            )
            response.raise_for_status()
            data = response.json()

            access_token = data["access_token"]
            expires_in = data.get("expires_in", 3600)
        except httpx.HTTPStatusError as e:
            raise SpotifyAuthException(
                f"Spotify token refresh failed: {e.response.status_code}",
                details={"status_code": e.response.status_code},
            ) from e
        except httpx.HTTPError as e:
            raise SpotifyAuthException(f"Spotify token refresh failed: {str(e)}") from e
        except (KeyError, ValueError) as e:
            raise SpotifyAuthException(f"Invalid Spotify auth response: {str(e)}") from e

        await auth_manager.set_token(access_token, expires_in)
        log_with_context(
            logger,
            "info",
            "Spotify access token refreshed",
            expires_in=expires_in,
            event_type="spotify_token_refreshed",
        )

        # Spotify may rotate the refresh token
        if data.get("refresh_token"):
            _save_refresh_token(settings.spotify_token_file, data["refresh_token"])

        return access_token
