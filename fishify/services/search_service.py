"""Search resolution and search result listings."""

from fishify.exceptions import EmptySearchResultException
from fishify.logging_config import get_logger, log_with_context
from fishify.models.content import (
    ContentIdentifier,
    ContentKind,
    display_name,
    identifier_of,
    primary_artist,
)
from fishify.protocols import SpotifyClientProtocol

logger = get_logger(__name__)

MAX_SEARCH_LIMIT = 50
DEFAULT_SEARCH_LIMIT = 10


async def resolve_first(client: SpotifyClientProtocol, query: str, kind: ContentKind) -> ContentIdentifier:
    """Resolve a free-text query to the top search hit of one kind.

    Raises:
        EmptySearchResultException: Search returned no usable result
    """
    results = await client.search(query, kind, 1)
    for result in results:
        identifier = identifier_of(result)
        if identifier is not None:
            log_with_context(
                logger,
                "debug",
                "Resolved search query",
                query=query,
                content_uri=identifier.uri,
                event_type="search_resolved",
            )
            return identifier

    raise EmptySearchResultException(query, details={"kind": kind.value})


async def list_results(
    client: SpotifyClientProtocol,
    query: str,
    kind: ContentKind = ContentKind.TRACK,
    limit: int = DEFAULT_SEARCH_LIMIT,
) -> list[str]:
    """Search and format each result as a display line.

    An empty result set gives an empty list.
    """
    if not 1 <= limit <= MAX_SEARCH_LIMIT:
        raise ValueError(f"limit must be between 1 and {MAX_SEARCH_LIMIT}, got {limit}")

    lines = []
    for result in await client.search(query, kind, limit):
        artist = primary_artist(result)
        if artist is not None:
            lines.append(f"{display_name(result)} — {artist.name}")
        else:
            lines.append(display_name(result))
    return lines
