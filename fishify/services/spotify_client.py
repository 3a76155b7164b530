"""Spotify Web API client."""

from typing import Any, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from fishify.config import Settings, get_settings
from fishify.exceptions import SpotifyAPIException
from fishify.logging_config import get_logger, log_with_context
from fishify.models.content import (
    ContentIdentifier,
    ContentKind,
    ContentMetadata,
    FullAlbum,
    FullArtist,
    FullEpisode,
    FullPlaylist,
    FullShow,
    FullTrack,
    Page,
    PlaylistItem,
    SimplifiedAlbum,
    SimplifiedArtist,
    SimplifiedEpisode,
    SimplifiedPlaylist,
    SimplifiedShow,
    SimplifiedTrack,
)
from fishify.models.playback import Device, PlaybackSnapshot, QueueSnapshot, RepeatState
from fishify.services.spotify_auth import get_access_token
from fishify.state_managers import SpotifyAuthManager

logger = get_logger(__name__)

API_BASE_URL = "https://api.spotify.com/v1"

# Largest page Spotify serves per collection endpoint
ALBUM_PAGE_LIMIT = 50
PLAYLIST_PAGE_LIMIT = 100
SHOW_PAGE_LIMIT = 50

# Search response key and result model per kind
_SEARCH_RESULTS: dict[ContentKind, tuple[str, type[BaseModel]]] = {
    ContentKind.TRACK: ("tracks", SimplifiedTrack),
    ContentKind.ALBUM: ("albums", SimplifiedAlbum),
    ContentKind.PLAYLIST: ("playlists", SimplifiedPlaylist),
    ContentKind.ARTIST: ("artists", SimplifiedArtist),
    ContentKind.SHOW: ("shows", SimplifiedShow),
    ContentKind.EPISODE: ("episodes", SimplifiedEpisode),
}

ModelT = TypeVar("ModelT", bound=BaseModel)


def _error_message(response: httpx.Response) -> str:
    """Extract Spotify's error message from an error response."""
    try:
        message = response.json()["error"]["message"]
    except (ValueError, KeyError, TypeError):
        return f"{response.status_code} {response.reason_phrase}".strip()
    return f"{response.status_code} {message}"


class SpotifyClient:
    """Authenticated Spotify Web API client.

    Wraps a shared httpx.AsyncClient and SpotifyAuthManager. Implements
    SpotifyClientProtocol; every failure surfaces as SpotifyAPIException
    without retries.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        auth_manager: SpotifyAuthManager,
        settings: Settings | None = None,
    ) -> None:
        self._http = http_client
        self._auth_manager = auth_manager
        self._settings = settings or get_settings()

    async def _request(
        self,
        method: str,
        path: str,
        *,
        action: str,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
    ) -> httpx.Response:
        token = await get_access_token(self._http, self._auth_manager, self._settings)
        log_with_context(
            logger,
            "debug",
            "Spotify request",
            method=method,
            path=path,
            action=action,
            event_type="spotify_request",
        )
        try:
            response = await self._http.request(
                method,
                f"{API_BASE_URL}{path}",
                headers={"Authorization": f"Bearer {token}"},
                params=params,
                json=json,
                timeout=self._settings.http_timeout,
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            if status == 401:
                await self._auth_manager.invalidate()
            log_with_context(
                logger,
                "warning",
                "Spotify request failed",
                method=method,
                path=path,
                status_code=status,
                event_type="spotify_api_error",
            )
            raise SpotifyAPIException(
                f"{action} failed: {_error_message(e.response)}",
                upstream_status=status,
                details={"path": path},
            ) from e
        except httpx.HTTPError as e:
            log_with_context(
                logger,
                "warning",
                "Spotify transport error",
                method=method,
                path=path,
                error=str(e),
                event_type="spotify_transport_error",
            )
            raise SpotifyAPIException(f"{action} failed: {str(e)}", details={"path": path}) from e
        return response

    @staticmethod
    def _parse(model: type[ModelT], data: Any, action: str) -> ModelT:
        try:
            return model.model_validate(data)
        except ValidationError as e:
            raise SpotifyAPIException(f"{action} failed: unexpected response from Spotify: {e}") from e

    async def _get_model(self, model: type[ModelT], path: str, action: str, **params: Any) -> ModelT:
        response = await self._request("GET", path, action=action, params=params or None)
        return self._parse(model, response.json(), action)

    # Content

    async def search(self, query: str, kind: ContentKind, limit: int) -> list[ContentMetadata]:
        """Search one content kind.

        Args:
            query: Free-text search query.
            kind: Content kind to search.
            limit: Maximum number of results (1-50).

        Returns:
            Simplified metadata in Spotify's ranking order.
        """
        key, model = _SEARCH_RESULTS[kind]
        response = await self._request(
            "GET",
            "/search",
            action="Search",
            params={"q": query, "type": kind.value, "limit": limit},
        )
        items = (response.json().get(key) or {}).get("items") or []
        # Spotify returns null entries for playlists it cannot serve
        return [self._parse(model, item, "Search") for item in items if item is not None]

    async def get_track(self, track_id: str) -> FullTrack:
        return await self._get_model(FullTrack, f"/tracks/{track_id}", "Get track")

    async def get_album(self, album_id: str) -> FullAlbum:
        return await self._get_model(FullAlbum, f"/albums/{album_id}", "Get album")

    async def get_playlist(self, playlist_id: str) -> FullPlaylist:
        return await self._get_model(
            FullPlaylist,
            f"/playlists/{playlist_id}",
            "Get playlist",
            additional_types="track,episode",
        )

    async def get_artist(self, artist_id: str) -> FullArtist:
        return await self._get_model(FullArtist, f"/artists/{artist_id}", "Get artist")

    async def get_show(self, show_id: str) -> FullShow:
        # Shows and episodes are market-restricted
        return await self._get_model(FullShow, f"/shows/{show_id}", "Get show", market="from_token")

    async def get_episode(self, episode_id: str) -> FullEpisode:
        return await self._get_model(FullEpisode, f"/episodes/{episode_id}", "Get episode", market="from_token")

    # Collection pages

    async def get_album_tracks(self, album_id: str, offset: int) -> Page[SimplifiedTrack]:
        return await self._get_model(
            Page[SimplifiedTrack],
            f"/albums/{album_id}/tracks",
            "Get album tracks",
            offset=offset,
            limit=ALBUM_PAGE_LIMIT,
        )

    async def get_playlist_items(self, playlist_id: str, offset: int) -> Page[PlaylistItem]:
        return await self._get_model(
            Page[PlaylistItem],
            f"/playlists/{playlist_id}/tracks",
            "Get playlist items",
            offset=offset,
            limit=PLAYLIST_PAGE_LIMIT,
            additional_types="track,episode",
        )

    async def get_show_episodes(self, show_id: str, offset: int) -> Page[SimplifiedEpisode]:
        return await self._get_model(
            Page[SimplifiedEpisode],
            f"/shows/{show_id}/episodes",
            "Get show episodes",
            offset=offset,
            limit=SHOW_PAGE_LIMIT,
            market="from_token",
        )

    # Playback

    async def start_playback_with_items(self, items: list[ContentIdentifier]) -> None:
        await self._request(
            "PUT",
            "/me/player/play",
            action="Start playback",
            json={"uris": [item.uri for item in items]},
        )

    async def start_playback_with_context(self, context: ContentIdentifier) -> None:
        await self._request(
            "PUT",
            "/me/player/play",
            action="Start playback",
            json={"context_uri": context.uri},
        )

    async def resume_playback(self) -> None:
        await self._request("PUT", "/me/player/play", action="Resume playback")

    async def pause_playback(self) -> None:
        await self._request("PUT", "/me/player/pause", action="Pause playback")

    async def next_track(self) -> None:
        await self._request("POST", "/me/player/next", action="Skip track")

    async def enqueue(self, item: ContentIdentifier) -> None:
        await self._request("POST", "/me/player/queue", action="Queue item", params={"uri": item.uri})

    async def get_current_playback(self) -> PlaybackSnapshot | None:
        """Get current playback state.

        Returns:
            PlaybackSnapshot, or None when Spotify reports no playback (204).
        """
        response = await self._request(
            "GET",
            "/me/player",
            action="Get playback state",
            params={"additional_types": "track,episode"},
        )
        if response.status_code == 204 or not response.content:
            return None
        return self._parse(PlaybackSnapshot, response.json(), "Get playback state")

    async def get_current_queue(self) -> QueueSnapshot:
        return await self._get_model(QueueSnapshot, "/me/player/queue", "Get queue")

    # Devices and player settings

    async def list_devices(self) -> list[Device]:
        response = await self._request("GET", "/me/player/devices", action="List devices")
        return [self._parse(Device, device, "List devices") for device in response.json().get("devices", [])]

    async def transfer_playback(self, device_id: str) -> None:
        await self._request(
            "PUT",
            "/me/player",
            action="Transfer playback",
            json={"device_ids": [device_id]},
        )

    async def set_volume(self, volume_percent: int) -> None:
        await self._request(
            "PUT",
            "/me/player/volume",
            action="Set volume",
            params={"volume_percent": volume_percent},
        )

    async def set_shuffle(self, state: bool) -> None:
        await self._request(
            "PUT",
            "/me/player/shuffle",
            action="Set shuffle",
            params={"state": "true" if state else "false"},
        )

    async def set_repeat(self, state: RepeatState) -> None:
        await self._request("PUT", "/me/player/repeat", action="Set repeat", params={"state": state.value})
