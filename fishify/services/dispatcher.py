"""Playback and queue dispatch by content kind.

Tracks and episodes play directly or are appended to the queue one at a
time. Albums, playlists, artists and shows play as a context; enqueueing
one of them enqueues each of its children in order, which is not
possible for artists.
"""

from enum import Enum

from fishify.exceptions import (
    FishifyException,
    InvalidReferenceException,
    QueueExpansionPartialFailureException,
    QueueUnsupportedException,
    ReferenceException,
)
from fishify.logging_config import get_logger, log_with_context
from fishify.models.content import (
    ContentIdentifier,
    ContentKind,
    ContentMetadata,
    display_name,
    primary_artist,
)
from fishify.models.response import CommandResult
from fishify.protocols import SpotifyClientProtocol
from fishify.services.device_service import DeviceRecovery, with_recovery
from fishify.services.fetcher import fetch_children, fetch_metadata
from fishify.services.references import looks_like_uri, parse_reference, parse_uri
from fishify.services.responses import acknowledgement, listing
from fishify.services.search_service import resolve_first

logger = get_logger(__name__)


class PlayIntent(str, Enum):
    PLAY = "play"
    ENQUEUE = "enqueue"


async def play_now(client: SpotifyClientProtocol, identifier: ContentIdentifier) -> None:
    """Replace playback with a single item, or start a context."""
    if identifier.is_playable:
        await client.start_playback_with_items([identifier])
    else:
        await client.start_playback_with_context(identifier)


async def collect_children(
    client: SpotifyClientProtocol,
    identifier: ContentIdentifier,
    metadata: ContentMetadata,
) -> list[ContentIdentifier]:
    """Every child of a collection, fetched in full before anything is queued.

    Raises:
        QueueUnsupportedException: The kind has no children to enqueue
    """
    children = await fetch_children(client, metadata)
    if children is None:
        raise QueueUnsupportedException(identifier.kind.value, details={"uri": identifier.uri})
    return children


async def enqueue_children(
    client: SpotifyClientProtocol,
    identifier: ContentIdentifier,
    children: list[ContentIdentifier],
) -> int:
    """Enqueue children one at a time in order, stopping at the first failure.

    Raises:
        QueueExpansionPartialFailureException: An enqueue call failed; the
            items before it stay queued
    """
    for index, child in enumerate(children):
        try:
            await client.enqueue(child)
        except FishifyException as e:
            raise QueueExpansionPartialFailureException(e, enqueued=index, total=len(children)) from e

    log_with_context(
        logger,
        "info",
        "Enqueued collection",
        content_uri=identifier.uri,
        count=len(children),
        event_type="queue_expanded",
    )
    return len(children)


async def expand_context(
    client: SpotifyClientProtocol,
    identifier: ContentIdentifier,
    metadata: ContentMetadata | None = None,
) -> int:
    """Enqueue every child of an album, playlist or show in order.

    Args:
        identifier: The collection to expand
        metadata: Full metadata of the collection, fetched when omitted

    Returns:
        Number of items enqueued

    Raises:
        QueueUnsupportedException: The kind has no children to enqueue
        QueueExpansionPartialFailureException: An enqueue call failed; the
            items before it stay queued
    """
    if metadata is None:
        metadata = await fetch_metadata(client, identifier)

    children = await collect_children(client, identifier, metadata)
    return await enqueue_children(client, identifier, children)


async def enqueue(
    client: SpotifyClientProtocol,
    identifier: ContentIdentifier,
    metadata: ContentMetadata | None = None,
) -> int:
    """Append content to the play queue, expanding collections.

    Returns:
        Number of items enqueued
    """
    if identifier.is_playable:
        await client.enqueue(identifier)
        return 1
    return await expand_context(client, identifier, metadata)


async def resolve_query(
    client: SpotifyClientProtocol,
    text: str,
    kind: ContentKind | None = None,
    is_url: bool = False,
) -> ContentIdentifier:
    """Turn a url, uri or search query into an identifier.

    Raises:
        InvalidReferenceException: ``is_url`` was set but the text is no content url
        ReferenceException: Text looks like a uri but is malformed
        EmptySearchResultException: Search found nothing
    """
    if is_url:
        try:
            return parse_reference(text)
        except ReferenceException as e:
            raise InvalidReferenceException(details={"reference": text, "reason": e.message}) from e

    if looks_like_uri(text):
        return parse_uri(text)

    return await resolve_first(client, text, kind or ContentKind.TRACK)


async def play_by_query(
    client: SpotifyClientProtocol,
    text: str | None,
    kind: ContentKind | None = None,
    is_url: bool = False,
    intent: PlayIntent = PlayIntent.PLAY,
    recovery: DeviceRecovery | None = None,
) -> CommandResult:
    """Play or enqueue content named by free text, a uri or a url.

    Without text, resumes playback. Metadata is fetched once and used both
    for the output line and as the source of a collection's children.

    Args:
        client: Spotify client
        text: Search query, ``spotify:`` uri or url
        kind: Kind to search for (track when omitted)
        is_url: Treat text as an open.spotify.com url
        intent: Play now or enqueue
        recovery: No-active-device recovery wrapped around the mutation

    Returns:
        "Resumed playback" acknowledgement, or a single-line listing naming
        what is playing or was queued
    """
    if not text:
        if intent is PlayIntent.ENQUEUE:
            raise InvalidReferenceException("Nothing to queue")
        await with_recovery(recovery, client.resume_playback)
        return acknowledgement("Resumed playback")

    identifier = await resolve_query(client, text, kind, is_url)
    metadata = await fetch_metadata(client, identifier)

    if intent is PlayIntent.ENQUEUE and identifier.is_playable:
        await with_recovery(recovery, lambda: client.enqueue(identifier))
        prefix = "Queued"
    elif intent is PlayIntent.ENQUEUE:
        # Page requests stay outside recovery; only the enqueue calls are retried
        children = await collect_children(client, identifier, metadata)
        await with_recovery(recovery, lambda: enqueue_children(client, identifier, children))
        prefix = "Queued"
    else:
        await with_recovery(recovery, lambda: play_now(client, identifier))
        prefix = "Now playing"

    log_with_context(
        logger,
        "info",
        "Dispatched content",
        content_uri=identifier.uri,
        intent=intent.value,
        event_type="content_dispatched",
    )

    artist = primary_artist(metadata)
    if artist is not None:
        return listing([f"{prefix} {display_name(metadata)} by {artist.name}"])
    return listing([f"{prefix} {display_name(metadata)}"])
