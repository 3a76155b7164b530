"""Playback status rendering."""

from datetime import timedelta

from fishify.exceptions import NoActivePlaybackException, ReferenceException
from fishify.models.content import display_name, duration, primary_artist
from fishify.models.playback import PlaybackContext, PlaybackSnapshot
from fishify.protocols import SpotifyClientProtocol
from fishify.services.fetcher import fetch_metadata
from fishify.services.references import parse_uri


def format_clock(value: timedelta) -> str:
    """Format a duration as ``h:mm:ss``, or ``m:ss`` under an hour.

    Examples:
        >>> format_clock(timedelta(seconds=65))
        '1:05'
        >>> format_clock(timedelta(seconds=3661))
        '1:01:01'
    """
    total_seconds = int(value.total_seconds())
    hours = total_seconds // 3600
    minutes = total_seconds // 60 % 60
    seconds = total_seconds % 60

    if hours > 0:
        return f"{hours}:{minutes:02d}:{seconds:02d}"
    return f"{minutes}:{seconds:02d}"


async def _context_line(client: SpotifyClientProtocol, context: PlaybackContext) -> str:
    label = context.type.capitalize()
    try:
        identifier = parse_uri(context.uri)
    except ReferenceException:
        # Liked songs and other collections have no content uri
        return f"{label}: {context.uri}"

    metadata = await fetch_metadata(client, identifier)
    return f"{label}: {display_name(metadata)}"


async def render_status(client: SpotifyClientProtocol, snapshot: PlaybackSnapshot | None) -> list[str]:
    """Render a playback snapshot as status lines.

    Lines, in order: Playing/Paused, context, item, elapsed/duration,
    volume, shuffle, repeat. Context, item, elapsed and volume lines are
    left out when the snapshot lacks them.

    Raises:
        NoActivePlaybackException: No snapshot
    """
    if snapshot is None:
        raise NoActivePlaybackException()

    lines = ["Playing" if snapshot.is_playing else "Paused"]

    if snapshot.context is not None:
        lines.append(await _context_line(client, snapshot.context))

    item = snapshot.item
    if item is not None:
        artist = primary_artist(item)
        lines.append(f"{item.name} — {artist.name}" if artist else item.name)

        item_duration = duration(item)
        if snapshot.progress is not None and item_duration is not None:
            lines.append(f"{format_clock(snapshot.progress)} / {format_clock(item_duration)}")

    if snapshot.device.volume_percent is not None:
        lines.append(f"Volume: {snapshot.device.volume_percent}%")

    lines.append(f"Shuffle: {'On' if snapshot.shuffle_state else 'Off'}")
    lines.append(f"Repeat: {snapshot.repeat_state.label}")
    return lines
