"""Protocol definitions for dependency injection."""

from typing import Protocol

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
    SimplifiedEpisode,
    SimplifiedTrack,
)
from fishify.models.playback import Device, PlaybackSnapshot, QueueSnapshot, RepeatState


class SpotifyClientProtocol(Protocol):
    """Authenticated Spotify client the playback services call through.

    Every method may raise SpotifyAPIException; ``is_not_found`` tells a
    missing device or content apart from other failures.
    """

    async def search(self, query: str, kind: ContentKind, limit: int) -> list[ContentMetadata]:
        """Search one content kind, returning simplified metadata in ranked order."""
        ...

    async def get_track(self, track_id: str) -> FullTrack: ...

    async def get_album(self, album_id: str) -> FullAlbum: ...

    async def get_playlist(self, playlist_id: str) -> FullPlaylist: ...

    async def get_artist(self, artist_id: str) -> FullArtist: ...

    async def get_show(self, show_id: str) -> FullShow: ...

    async def get_episode(self, episode_id: str) -> FullEpisode: ...

    async def get_album_tracks(self, album_id: str, offset: int) -> Page[SimplifiedTrack]:
        """Page of an album's tracks starting at ``offset``."""
        ...

    async def get_playlist_items(self, playlist_id: str, offset: int) -> Page[PlaylistItem]: ...

    async def get_show_episodes(self, show_id: str, offset: int) -> Page[SimplifiedEpisode]: ...

    async def start_playback_with_items(self, items: list[ContentIdentifier]) -> None:
        """Replace the play queue with exactly these tracks/episodes."""
        ...

    async def start_playback_with_context(self, context: ContentIdentifier) -> None:
        """Play an album, playlist, artist or show in its own order."""
        ...

    async def resume_playback(self) -> None: ...

    async def pause_playback(self) -> None: ...

    async def next_track(self) -> None: ...

    async def enqueue(self, item: ContentIdentifier) -> None:
        """Append one track/episode to the end of the play queue."""
        ...

    async def list_devices(self) -> list[Device]: ...

    async def transfer_playback(self, device_id: str) -> None: ...

    async def get_current_playback(self) -> PlaybackSnapshot | None:
        """Current playback, or None when nothing is playing anywhere."""
        ...

    async def get_current_queue(self) -> QueueSnapshot: ...

    async def set_volume(self, volume_percent: int) -> None: ...

    async def set_shuffle(self, state: bool) -> None: ...

    async def set_repeat(self, state: RepeatState) -> None: ...
