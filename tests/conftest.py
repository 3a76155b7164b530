"""Pytest configuration and shared fixtures."""

import asyncio
import os

# Required settings must exist before fishify modules build the app
os.environ.setdefault("SPOTIFY_CLIENT_ID", "test-spotify-client-id")
os.environ.setdefault("SPOTIFY_CLIENT_SECRET", "test-spotify-client-secret")
os.environ.setdefault("SPOTIFY_REFRESH_TOKEN", "test-refresh-token")
os.environ.setdefault("API_KEY", "test-api-key")

from unittest.mock import AsyncMock  # noqa: E402

import httpx  # noqa: E402
import pytest  # noqa: E402

from fishify.config import Settings  # noqa: E402
from fishify.models.content import (  # noqa: E402
    FullAlbum,
    FullArtist,
    FullEpisode,
    FullPlaylist,
    FullShow,
    FullTrack,
)
from fishify.services.spotify_client import SpotifyClient  # noqa: E402


@pytest.fixture
def mock_http_client():
    """Mock httpx.AsyncClient for external API calls."""
    mock_client = AsyncMock(spec=httpx.AsyncClient)
    mock_client.request = AsyncMock()
    mock_client.post = AsyncMock()
    mock_client.aclose = AsyncMock()
    return mock_client


@pytest.fixture
def mock_spotify_auth_manager():
    """Mock SpotifyAuthManager for testing."""
    manager = AsyncMock()
    manager.initialize = AsyncMock()
    manager.cleanup = AsyncMock()
    manager.get_token = AsyncMock(return_value=None)
    manager.set_token = AsyncMock()
    manager.invalidate = AsyncMock()
    manager.refresh_lock = asyncio.Lock()
    return manager


@pytest.fixture
def mock_settings(tmp_path):
    """Settings instance with test values and an isolated token file."""
    return Settings(
        spotify_client_id="test-spotify-client-id",
        spotify_client_secret="test-spotify-client-secret",
        spotify_refresh_token="test-refresh-token",
        spotify_token_file=tmp_path / "refresh_token",
        api_key="test-api-key",
        log_file=None,
    )


@pytest.fixture
def spotify():
    """Mock Spotify client; every API method is an AsyncMock."""
    client = AsyncMock(spec=SpotifyClient)
    client.get_current_playback.return_value = None
    client.list_devices.return_value = []
    return client


@pytest.fixture
def track() -> FullTrack:
    return FullTrack.model_validate(
        {
            "type": "track",
            "id": "4u7EnebtmKWzUH433cf5Qv",
            "name": "Bohemian Rhapsody",
            "uri": "spotify:track:4u7EnebtmKWzUH433cf5Qv",
            "artists": [{"id": "1dfeR4HaWDbWqFHLkxsg1d", "name": "Queen"}],
            "album": {"id": "1GbtB4zTqAsyfZEsm1RZfx", "name": "A Night at the Opera"},
            "duration_ms": 354320,
        }
    )


@pytest.fixture
def album() -> FullAlbum:
    return FullAlbum.model_validate(
        {
            "type": "album",
            "id": "1GbtB4zTqAsyfZEsm1RZfx",
            "name": "A Night at the Opera",
            "artists": [{"id": "1dfeR4HaWDbWqFHLkxsg1d", "name": "Queen"}],
            "tracks": {
                "items": [
                    {"id": "t1", "name": "Death on Two Legs", "duration_ms": 223000},
                    {"id": "t2", "name": "Lazing on a Sunday Afternoon", "duration_ms": 67000},
                    {"id": "t3", "name": "I'm in Love with My Car", "duration_ms": 185000},
                ],
                "total": 3,
            },
        }
    )


@pytest.fixture
def playlist() -> FullPlaylist:
    return FullPlaylist.model_validate(
        {
            "type": "playlist",
            "id": "37i9dQZF1DXcBWIGoYBM5M",
            "name": "Today's Top Hits",
            "owner": {"id": "spotify", "display_name": "Spotify"},
            "tracks": {
                "items": [
                    {"track": {"type": "track", "id": "p1", "name": "First", "duration_ms": 1000}},
                    {"track": None},
                    {"track": {"type": "track", "id": None, "name": "Local file", "duration_ms": 1000}},
                    {"track": {"type": "episode", "id": "e1", "name": "Episode", "duration_ms": 2000}},
                ],
            },
        }
    )


@pytest.fixture
def artist() -> FullArtist:
    return FullArtist.model_validate(
        {"type": "artist", "id": "1dfeR4HaWDbWqFHLkxsg1d", "name": "Queen", "genres": ["rock"]}
    )


@pytest.fixture
def show() -> FullShow:
    return FullShow.model_validate(
        {
            "type": "show",
            "id": "5CfCWKI5pZ28U0uOzXkDHe",
            "name": "Some Podcast",
            "publisher": "Someone",
            "episodes": {
                "items": [
                    {"id": "ep1", "name": "Pilot", "duration_ms": 1800000},
                    {"id": "ep2", "name": "Second", "duration_ms": 1900000},
                ]
            },
        }
    )


@pytest.fixture
def episode() -> FullEpisode:
    return FullEpisode.model_validate(
        {"type": "episode", "id": "ep1", "name": "Pilot", "duration_ms": 1800000}
    )


@pytest.fixture
def mock_spotify_playback_response():
    """Spotify /me/player response body."""
    return {
        "device": {"id": "device-1", "is_active": True, "name": "Kitchen", "type": "Speaker", "volume_percent": 50},
        "is_playing": True,
        "shuffle_state": False,
        "repeat_state": "context",
        "context": {"type": "album", "uri": "spotify:album:1GbtB4zTqAsyfZEsm1RZfx"},
        "item": {
            "type": "track",
            "id": "4u7EnebtmKWzUH433cf5Qv",
            "name": "Bohemian Rhapsody",
            "artists": [{"name": "Queen"}],
            "album": {"name": "A Night at the Opera"},
            "duration_ms": 354320,
        },
        "progress_ms": 125000,
    }


@pytest.fixture
def mock_spotify_devices_response():
    """Spotify /me/player/devices response body."""
    return {
        "devices": [
            {"id": "device-1", "is_active": True, "name": "Kitchen", "type": "Speaker", "volume_percent": 50},
            {"id": "device-2", "is_active": False, "name": "Laptop", "type": "Computer", "volume_percent": 100},
        ]
    }
