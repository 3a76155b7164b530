"""Content identifiers and metadata models.

Metadata models parse Spotify Web API objects. Each content kind has a
simplified shape (search results, listings) and a full shape (direct
fetch), giving twelve cases in ``ContentMetadata``. Derived facts are
plain functions that match every case explicitly.
"""

from datetime import timedelta
from enum import Enum
from typing import Annotated, ClassVar, Generic, Literal, TypeVar, assert_never

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")


class ContentKind(str, Enum):
    """The six kinds of Spotify content, valued by their URI keyword."""

    TRACK = "track"
    ALBUM = "album"
    PLAYLIST = "playlist"
    ARTIST = "artist"
    SHOW = "show"
    EPISODE = "episode"

    @property
    def label(self) -> str:
        """Capitalized name for display."""
        return self.value.capitalize()


class ContentIdentifier(BaseModel):
    """A kind-tagged Spotify id."""

    model_config = ConfigDict(frozen=True)

    kind: ContentKind
    id: str

    @property
    def uri(self) -> str:
        return f"spotify:{self.kind.value}:{self.id}"

    @property
    def is_playable(self) -> bool:
        """Tracks and episodes play directly; the other kinds are contexts."""
        match self.kind:
            case ContentKind.TRACK | ContentKind.EPISODE:
                return True
            case ContentKind.ALBUM | ContentKind.PLAYLIST | ContentKind.ARTIST | ContentKind.SHOW:
                return False
            case _:
                assert_never(self.kind)

    def __str__(self) -> str:
        return self.uri


class SpotifyModel(BaseModel):
    """Base model for Spotify Web API objects."""

    model_config = ConfigDict(extra="ignore", frozen=True)


class Page(SpotifyModel, Generic[T]):
    """Paging object wrapping a list of items.

    ``next`` is set while more items follow; ``offset`` is the index of the
    first item in the whole collection.
    """

    items: list[T] = Field(default_factory=list)
    offset: int = 0
    total: int | None = None
    next: str | None = None

    @property
    def next_offset(self) -> int:
        return self.offset + len(self.items)


class Followers(SpotifyModel):
    total: int | None = None


class PlaylistOwner(SpotifyModel):
    id: str | None = None
    display_name: str | None = None


class PlaylistTracksRef(SpotifyModel):
    """Track count reference on simplified playlists."""

    total: int | None = None


# Artists


class SimplifiedArtist(SpotifyModel):
    kind: ClassVar[ContentKind] = ContentKind.ARTIST

    type: Literal["artist"] = "artist"
    id: str | None = None
    name: str
    uri: str | None = None


class FullArtist(SpotifyModel):
    kind: ClassVar[ContentKind] = ContentKind.ARTIST

    type: Literal["artist"] = "artist"
    id: str
    name: str
    uri: str | None = None
    genres: list[str] = Field(default_factory=list)
    popularity: int | None = None
    followers: Followers | None = None


# Albums


class SimplifiedAlbum(SpotifyModel):
    kind: ClassVar[ContentKind] = ContentKind.ALBUM

    type: Literal["album"] = "album"
    id: str | None = None
    name: str
    uri: str | None = None
    artists: list[SimplifiedArtist] = Field(default_factory=list)
    album_type: str | None = None
    release_date: str | None = None
    total_tracks: int | None = None


class SimplifiedTrack(SpotifyModel):
    kind: ClassVar[ContentKind] = ContentKind.TRACK

    type: Literal["track"] = "track"
    id: str | None = None  # None for local files
    name: str
    uri: str | None = None
    artists: list[SimplifiedArtist] = Field(default_factory=list)
    duration_ms: int
    track_number: int | None = None


class FullAlbum(SpotifyModel):
    kind: ClassVar[ContentKind] = ContentKind.ALBUM

    type: Literal["album"] = "album"
    id: str
    name: str
    uri: str | None = None
    artists: list[SimplifiedArtist] = Field(default_factory=list)
    album_type: str | None = None
    release_date: str | None = None
    label: str | None = None
    tracks: Page[SimplifiedTrack] = Field(default_factory=Page[SimplifiedTrack])


# Tracks


class FullTrack(SpotifyModel):
    kind: ClassVar[ContentKind] = ContentKind.TRACK

    type: Literal["track"] = "track"
    id: str | None = None  # None for local files
    name: str
    uri: str | None = None
    artists: list[SimplifiedArtist] = Field(default_factory=list)
    album: SimplifiedAlbum | None = None
    duration_ms: int
    track_number: int | None = None
    popularity: int | None = None


# Shows and episodes


class SimplifiedShow(SpotifyModel):
    kind: ClassVar[ContentKind] = ContentKind.SHOW

    type: Literal["show"] = "show"
    id: str
    name: str
    uri: str | None = None
    publisher: str | None = None
    total_episodes: int | None = None


class SimplifiedEpisode(SpotifyModel):
    kind: ClassVar[ContentKind] = ContentKind.EPISODE

    type: Literal["episode"] = "episode"
    id: str
    name: str
    uri: str | None = None
    duration_ms: int
    release_date: str | None = None


class FullShow(SpotifyModel):
    kind: ClassVar[ContentKind] = ContentKind.SHOW

    type: Literal["show"] = "show"
    id: str
    name: str
    uri: str | None = None
    publisher: str | None = None
    description: str | None = None
    total_episodes: int | None = None
    episodes: Page[SimplifiedEpisode] = Field(default_factory=Page[SimplifiedEpisode])


class FullEpisode(SpotifyModel):
    kind: ClassVar[ContentKind] = ContentKind.EPISODE

    type: Literal["episode"] = "episode"
    id: str
    name: str
    uri: str | None = None
    duration_ms: int
    release_date: str | None = None
    description: str | None = None
    show: SimplifiedShow | None = None


# What the player reports as current/queued item
PlayableItem = Annotated[FullTrack | FullEpisode, Field(discriminator="type")]


# Playlists


class SimplifiedPlaylist(SpotifyModel):
    kind: ClassVar[ContentKind] = ContentKind.PLAYLIST

    type: Literal["playlist"] = "playlist"
    id: str
    name: str
    uri: str | None = None
    description: str | None = None
    owner: PlaylistOwner | None = None
    tracks: PlaylistTracksRef | None = None


class PlaylistItem(SpotifyModel):
    """Playlist entry; ``track`` is None for entries Spotify no longer serves."""

    added_at: str | None = None
    track: PlayableItem | None = None


class FullPlaylist(SpotifyModel):
    kind: ClassVar[ContentKind] = ContentKind.PLAYLIST

    type: Literal["playlist"] = "playlist"
    id: str
    name: str
    uri: str | None = None
    description: str | None = None
    owner: PlaylistOwner | None = None
    tracks: Page[PlaylistItem] = Field(default_factory=Page[PlaylistItem])


ContentMetadata = (
    SimplifiedTrack
    | FullTrack
    | SimplifiedAlbum
    | FullAlbum
    | SimplifiedPlaylist
    | FullPlaylist
    | SimplifiedArtist
    | FullArtist
    | SimplifiedShow
    | FullShow
    | SimplifiedEpisode
    | FullEpisode
)

FullMetadata = FullTrack | FullAlbum | FullPlaylist | FullArtist | FullShow | FullEpisode


def display_name(metadata: ContentMetadata) -> str:
    return metadata.name


def credited_artists(metadata: ContentMetadata) -> list[SimplifiedArtist]:
    """Artists credited on the content.

    Tracks and albums list their artists, an artist credits itself, and
    playlists, shows and episodes credit nobody.
    """
    match metadata:
        case SimplifiedTrack() | FullTrack() | SimplifiedAlbum() | FullAlbum():
            return list(metadata.artists)
        case SimplifiedArtist():
            return [metadata]
        case FullArtist():
            return [SimplifiedArtist(id=metadata.id, name=metadata.name, uri=metadata.uri)]
        case (
            SimplifiedPlaylist()
            | FullPlaylist()
            | SimplifiedShow()
            | FullShow()
            | SimplifiedEpisode()
            | FullEpisode()
        ):
            return []
        case _:
            assert_never(metadata)


def primary_artist(metadata: ContentMetadata) -> SimplifiedArtist | None:
    artists = credited_artists(metadata)
    return artists[0] if artists else None


def duration(metadata: ContentMetadata) -> timedelta | None:
    """Playing time of tracks and episodes; None for every collection kind."""
    match metadata:
        case SimplifiedTrack() | FullTrack() | SimplifiedEpisode() | FullEpisode():
            return timedelta(milliseconds=metadata.duration_ms)
        case (
            SimplifiedAlbum()
            | FullAlbum()
            | SimplifiedPlaylist()
            | FullPlaylist()
            | SimplifiedArtist()
            | FullArtist()
            | SimplifiedShow()
            | FullShow()
        ):
            return None
        case _:
            assert_never(metadata)


def album_track_ids(page: Page[SimplifiedTrack]) -> list[ContentIdentifier]:
    return [ContentIdentifier(kind=ContentKind.TRACK, id=track.id) for track in page.items if track.id]


def playlist_entry_ids(page: Page[PlaylistItem]) -> list[ContentIdentifier]:
    return [
        ContentIdentifier(kind=entry.track.kind, id=entry.track.id)
        for entry in page.items
        if entry.track is not None and entry.track.id
    ]


def show_episode_ids(page: Page[SimplifiedEpisode]) -> list[ContentIdentifier]:
    return [ContentIdentifier(kind=ContentKind.EPISODE, id=episode.id) for episode in page.items]


def child_ids(metadata: ContentMetadata) -> list[ContentIdentifier] | None:
    """Ordered playable children of a full album, playlist or show.

    Returns None when the metadata has no notion of children, which callers
    must keep apart from an empty collection. Children without an id
    (local files, unavailable playlist entries) are left out.

    Only the page embedded in the metadata is read; collections longer
    than one page are completed by ``fishify.services.fetcher.fetch_children``.
    """
    match metadata:
        case FullAlbum():
            return album_track_ids(metadata.tracks)
        case FullPlaylist():
            return playlist_entry_ids(metadata.tracks)
        case FullShow():
            return show_episode_ids(metadata.episodes)
        case (
            SimplifiedTrack()
            | FullTrack()
            | SimplifiedAlbum()
            | SimplifiedPlaylist()
            | SimplifiedArtist()
            | FullArtist()
            | SimplifiedShow()
            | SimplifiedEpisode()
            | FullEpisode()
        ):
            return None
        case _:
            assert_never(metadata)


def identifier_of(metadata: ContentMetadata) -> ContentIdentifier | None:
    """Identifier of a metadata value, None when Spotify gave it no id."""
    if not metadata.id:
        return None
    return ContentIdentifier(kind=metadata.kind, id=metadata.id)
