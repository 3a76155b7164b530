"""Full metadata and collection children lookup."""

from collections.abc import Awaitable, Callable
from functools import partial
from typing import TypeVar, assert_never

from fishify.models.content import (
    ContentIdentifier,
    ContentKind,
    ContentMetadata,
    FullAlbum,
    FullArtist,
    FullEpisode,
    FullMetadata,
    FullPlaylist,
    FullShow,
    FullTrack,
    Page,
    SimplifiedAlbum,
    SimplifiedArtist,
    SimplifiedEpisode,
    SimplifiedPlaylist,
    SimplifiedShow,
    SimplifiedTrack,
    album_track_ids,
    playlist_entry_ids,
    show_episode_ids,
)
from fishify.protocols import SpotifyClientProtocol

T = TypeVar("T")


async def fetch_metadata(client: SpotifyClientProtocol, identifier: ContentIdentifier) -> FullMetadata:
    """Fetch the full metadata of the content an identifier names.

    Makes exactly one request; Spotify errors propagate unchanged.

    Args:
        client: Spotify client
        identifier: Content to look up

    Returns:
        Full metadata of the same kind as the identifier

    Raises:
        SpotifyAPIException: Spotify request failed
    """
    metadata: FullMetadata
    match identifier.kind:
        case ContentKind.TRACK:
            metadata = await client.get_track(identifier.id)
        case ContentKind.ALBUM:
            metadata = await client.get_album(identifier.id)
        case ContentKind.PLAYLIST:
            metadata = await client.get_playlist(identifier.id)
        case ContentKind.ARTIST:
            metadata = await client.get_artist(identifier.id)
        case ContentKind.SHOW:
            metadata = await client.get_show(identifier.id)
        case ContentKind.EPISODE:
            metadata = await client.get_episode(identifier.id)
        case _:
            assert_never(identifier.kind)

    if metadata.kind is not identifier.kind:
        raise RuntimeError(f"Fetched {metadata.kind.value} metadata for {identifier.uri}")
    return metadata


async def _follow_pages(
    first_page: Page[T],
    fetch_page: Callable[[int], Awaitable[Page[T]]],
    extract: Callable[[Page[T]], list[ContentIdentifier]],
) -> list[ContentIdentifier]:
    children = extract(first_page)
    page = first_page
    # An empty page ends the walk even if Spotify still reports a next link
    while page.next is not None and page.items:
        page = await fetch_page(page.next_offset)
        children.extend(extract(page))
    return children


async def fetch_children(client: SpotifyClientProtocol, metadata: ContentMetadata) -> list[ContentIdentifier] | None:
    """Every playable child of a full album, playlist or show, in order.

    Spotify embeds only the first page of a collection's children; the
    remaining pages are requested one at a time until none is left.

    Returns:
        Child identifiers, or None when the metadata has no children
        (see ``child_ids``)

    Raises:
        SpotifyAPIException: A page request failed
    """
    match metadata:
        case FullAlbum():
            return await _follow_pages(
                metadata.tracks, partial(client.get_album_tracks, metadata.id), album_track_ids
            )
        case FullPlaylist():
            return await _follow_pages(
                metadata.tracks, partial(client.get_playlist_items, metadata.id), playlist_entry_ids
            )
        case FullShow():
            return await _follow_pages(
                metadata.episodes, partial(client.get_show_episodes, metadata.id), show_episode_ids
            )
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
