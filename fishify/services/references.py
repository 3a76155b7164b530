"""Parsing of spotify: URIs and open.spotify.com URLs into content identifiers."""

import re

from fishify.exceptions import MalformedReferenceException, UnknownKindException
from fishify.models.content import ContentIdentifier, ContentKind

URI_SCHEME = "spotify"
URL_HOST = "open.spotify.com"

# Share links may carry a locale segment: open.spotify.com/intl-de/track/...
_LOCALE_SEGMENT = re.compile(r"^intl-[a-zA-Z-]+$")

_KINDS = {kind.value: kind for kind in ContentKind}


def looks_like_uri(text: str) -> bool:
    return text.startswith(f"{URI_SCHEME}:")


def parse_uri(text: str) -> ContentIdentifier:
    """Parse ``spotify:{kind}:{id}`` into a ContentIdentifier.

    The kind keyword is matched exactly (case-sensitive).

    Raises:
        MalformedReferenceException: Text does not have the three-part shape
        UnknownKindException: Kind keyword is not one of the six kinds
    """
    tokens = text.split(":")
    if len(tokens) != 3 or tokens[0] != URI_SCHEME or not tokens[2]:
        raise MalformedReferenceException(f"Malformed uri: {text}", details={"reference": text})

    kind = _KINDS.get(tokens[1])
    if kind is None:
        raise UnknownKindException(tokens[1], details={"reference": text})

    return ContentIdentifier(kind=kind, id=tokens[2])


def parse_url(text: str) -> str:
    """Convert an open.spotify.com URL to its canonical ``spotify:`` URI.

    Query string and fragment are dropped. The kind keyword is not checked
    here; ``parse_uri`` does that.

    Raises:
        MalformedReferenceException: Not an open.spotify.com content URL
    """
    path = text.split("?", 1)[0].split("#", 1)[0].rstrip("/")
    segments = path.split("/")

    if len(segments) >= 4 and _LOCALE_SEGMENT.match(segments[-3]):
        del segments[-3]

    if len(segments) < 3 or segments[-3] != URL_HOST or not segments[-1] or not segments[-2]:
        raise MalformedReferenceException("invalid url", details={"reference": text})

    return f"{URI_SCHEME}:{segments[-2]}:{segments[-1]}"


def parse_reference(text: str) -> ContentIdentifier:
    """Parse either a URL or a URI into a ContentIdentifier."""
    if looks_like_uri(text):
        return parse_uri(text)
    return parse_uri(parse_url(text))
