"""Top-level operations shared by the CLI and the HTTP API.

Each operation returns a CommandResult. Player mutations accept an
optional DeviceRecovery; build one per invocation with ``new_recovery``.
"""

from fishify.config import Settings, get_settings
from fishify.exceptions import NoActivePlaybackException
from fishify.models.content import ContentKind, primary_artist
from fishify.models.playback import RepeatState
from fishify.models.response import CommandResult
from fishify.protocols import SpotifyClientProtocol
from fishify.services.device_service import (
    DeviceRecovery,
    active_device,
    connect_device,
    with_recovery,
)
from fishify.services.dispatcher import PlayIntent, play_by_query
from fishify.services.responses import acknowledgement, listing
from fishify.services.search_service import DEFAULT_SEARCH_LIMIT, list_results
from fishify.services.status_service import render_status

MAX_SKIP_COUNT = 255


def new_recovery(client: SpotifyClientProtocol, settings: Settings | None = None) -> DeviceRecovery:
    if settings is None:
        settings = get_settings()
    return DeviceRecovery(client, enabled=settings.device_recovery)


def _on_off(state: bool) -> str:
    return "On" if state else "Off"


async def play(
    client: SpotifyClientProtocol,
    query: str | None = None,
    kind: ContentKind | None = None,
    is_url: bool = False,
    recovery: DeviceRecovery | None = None,
) -> CommandResult:
    return await play_by_query(client, query, kind, is_url, PlayIntent.PLAY, recovery)


async def queue(
    client: SpotifyClientProtocol,
    query: str | None = None,
    kind: ContentKind | None = None,
    is_url: bool = False,
    recovery: DeviceRecovery | None = None,
) -> CommandResult:
    return await play_by_query(client, query, kind, is_url, PlayIntent.ENQUEUE, recovery)


async def queue_list(client: SpotifyClientProtocol) -> CommandResult:
    """List the current item and the upcoming queue, numbered from 1."""
    snapshot = await client.get_current_queue()
    lines = []

    current = snapshot.currently_playing
    if current is not None:
        artist = primary_artist(current)
        lines.append(f"Currently playing {current.name} by {artist.name}" if artist else f"Currently playing {current.name}")

    for index, item in enumerate(snapshot.queue, start=1):
        artist = primary_artist(item)
        lines.append(f"{index:>3}. {item.name} — {artist.name}" if artist else f"{index:>3}. {item.name}")

    return listing(lines)


async def search(
    client: SpotifyClientProtocol,
    query: str,
    kind: ContentKind = ContentKind.TRACK,
    limit: int = DEFAULT_SEARCH_LIMIT,
) -> CommandResult:
    return listing(await list_results(client, query, kind, limit))


async def pause(client: SpotifyClientProtocol, recovery: DeviceRecovery | None = None) -> CommandResult:
    await with_recovery(recovery, client.pause_playback)
    return acknowledgement("Paused playback")


async def skip(
    client: SpotifyClientProtocol,
    count: int = 1,
    recovery: DeviceRecovery | None = None,
) -> CommandResult:
    """Skip ``count`` tracks, one next-track request each."""
    if not 1 <= count <= MAX_SKIP_COUNT:
        raise ValueError(f"count must be between 1 and {MAX_SKIP_COUNT}, got {count}")

    for _ in range(count):
        await with_recovery(recovery, client.next_track)
    return acknowledgement(f"Skipped {count} tracks")


async def status(client: SpotifyClientProtocol) -> CommandResult:
    snapshot = await client.get_current_playback()
    return listing(await render_status(client, snapshot))


async def device_list(client: SpotifyClientProtocol) -> CommandResult:
    devices = await client.list_devices()
    return listing(f"{device.type} {device.name} — {device.id or 'None'}" for device in devices)


async def device_connect(client: SpotifyClientProtocol, name: str | None = None) -> CommandResult:
    device = await connect_device(client, name)
    return acknowledgement(f"Connected to {device.name}")


async def device_status(client: SpotifyClientProtocol) -> CommandResult:
    device = await active_device(client)
    if device is None:
        raise NoActivePlaybackException("No active device")

    return listing(
        [
            f"Device: {device.name}",
            f"Id: {device.id or 'None'}",
            f"Active: {str(device.is_active).lower()}",
            f"Type: {device.type}",
        ]
    )


async def set_volume(
    client: SpotifyClientProtocol,
    level: int,
    recovery: DeviceRecovery | None = None,
) -> CommandResult:
    if not 0 <= level <= 100:
        raise ValueError(f"level must be between 0 and 100, got {level}")

    await with_recovery(recovery, lambda: client.set_volume(level))
    return acknowledgement(f"Set volume to {level}%")


async def set_shuffle(
    client: SpotifyClientProtocol,
    state: bool,
    recovery: DeviceRecovery | None = None,
) -> CommandResult:
    await with_recovery(recovery, lambda: client.set_shuffle(state))
    return acknowledgement(f"Set shuffle to {_on_off(state)}")


async def set_repeat(
    client: SpotifyClientProtocol,
    state: RepeatState,
    recovery: DeviceRecovery | None = None,
) -> CommandResult:
    await with_recovery(recovery, lambda: client.set_repeat(state))
    return acknowledgement(f"Set repeat to {state.label}")
