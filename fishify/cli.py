"""Command-line interface for fishify.

Result lines go to stdout; logs and errors go to stderr.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable

import click
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler

from fishify.config import Settings, get_settings
from fishify.core.lifespan import create_http_client
from fishify.exceptions import FishifyException
from fishify.models.content import ContentKind
from fishify.models.playback import RepeatState
from fishify.models.response import CommandResult
from fishify.services import commands
from fishify.services.device_service import DeviceRecovery
from fishify.services.search_service import DEFAULT_SEARCH_LIMIT, MAX_SEARCH_LIMIT
from fishify.services.spotify_client import SpotifyClient
from fishify.state_managers import SpotifyAuthManager

logger = logging.getLogger("fishify")

Operation = Callable[[SpotifyClient, DeviceRecovery], Awaitable[CommandResult]]

KIND_CHOICE = click.Choice([kind.value for kind in ContentKind])


def setup_logging(verbose: bool = False) -> None:
    """Configure logging with a Rich handler on stderr.

    Args:
        verbose: If True, set log level to DEBUG. Otherwise WARNING.
    """
    level = logging.DEBUG if verbose else logging.WARNING

    root_logger = logging.getLogger()
    root_logger.handlers.clear()

    handler = RichHandler(
        rich_tracebacks=True,
        show_path=False,
        console=Console(stderr=True),
    )
    handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))

    root_logger.setLevel(level)
    root_logger.addHandler(handler)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


def _kind(value: str | None) -> ContentKind | None:
    return ContentKind(value) if value is not None else None


def _load_settings() -> Settings:
    try:
        return get_settings()
    except ValidationError as e:
        fields = ", ".join(str(error["loc"][0]).upper() for error in e.errors() if error["loc"])
        raise click.ClickException(f"Invalid configuration: {fields or e}") from e


async def _execute(operation: Operation, settings: Settings) -> CommandResult:
    async with create_http_client(settings) as http_client:
        auth_manager = SpotifyAuthManager()
        client = SpotifyClient(http_client, auth_manager, settings)
        try:
            return await operation(client, commands.new_recovery(client, settings))
        finally:
            await auth_manager.cleanup()


def run_command(operation: Operation) -> None:
    """Run one operation against Spotify and print its lines."""
    settings = _load_settings()
    try:
        result = asyncio.run(_execute(operation, settings))
    except FishifyException as e:
        logger.debug("Command failed: %s", e.code.value, exc_info=e)
        raise click.ClickException(e.message) from e

    for line in result.lines:
        click.echo(line)


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
@click.version_option(package_name="fishify", message="%(prog)s %(version)s")
def main(verbose: bool) -> None:
    """Control Spotify playback from the command line."""
    setup_logging(verbose=verbose)


@main.command(name="play")
@click.argument("query", required=False)
@click.option("-u", "--url", "is_url", is_flag=True, help="Treat QUERY as an open.spotify.com url.")
@click.option("-t", "--type", "kind", type=KIND_CHOICE, help="Content kind to search for (default track).")
def play_cmd(query: str | None, is_url: bool, kind: str | None) -> None:
    """Play a search result, spotify: uri or url.

    Resumes playback when QUERY is omitted.

    \b
    Examples:
      fishify play "bohemian rhapsody"
      fishify play -t album "a night at the opera"
      fishify play spotify:playlist:37i9dQZF1DXcBWIGoYBM5M
      fishify play -u "https://open.spotify.com/track/4u7EnebtmKWzUH433cf5Qv?si=x"
    """
    run_command(lambda client, recovery: commands.play(client, query, _kind(kind), is_url, recovery))


@main.command(name="queue")
@click.argument("query", required=False)
@click.option("-u", "--url", "is_url", is_flag=True, help="Treat QUERY as an open.spotify.com url.")
@click.option("-t", "--type", "kind", type=KIND_CHOICE, help="Content kind to search for (default track).")
@click.option("-l", "--list", "show_list", is_flag=True, help="List the queue instead of adding to it.")
def queue_cmd(query: str | None, is_url: bool, kind: str | None, show_list: bool) -> None:
    """Add content to the play queue, or list it with --list.

    Albums, playlists and shows are queued item by item.
    """
    if show_list:
        if query is not None or is_url or kind is not None:
            raise click.UsageError("--list cannot be combined with QUERY, --url or --type.")
        run_command(lambda client, recovery: commands.queue_list(client))
    else:
        run_command(lambda client, recovery: commands.queue(client, query, _kind(kind), is_url, recovery))


@main.command(name="pause")
def pause_cmd() -> None:
    """Pause playback."""
    run_command(commands.pause)


@main.command(name="skip")
@click.argument("count", type=click.IntRange(1, commands.MAX_SKIP_COUNT), default=1, required=False)
def skip_cmd(count: int) -> None:
    """Skip COUNT tracks (default 1)."""
    run_command(lambda client, recovery: commands.skip(client, count, recovery))


@main.command(name="status")
def status_cmd() -> None:
    """Show what is playing."""
    run_command(lambda client, recovery: commands.status(client))


@main.command(name="search")
@click.argument("query")
@click.option("-t", "--type", "kind", type=KIND_CHOICE, default=ContentKind.TRACK.value, show_default=True)
@click.option(
    "-n",
    "--limit",
    type=click.IntRange(1, MAX_SEARCH_LIMIT),
    default=DEFAULT_SEARCH_LIMIT,
    show_default=True,
    help="Maximum number of results.",
)
def search_cmd(query: str, kind: str, limit: int) -> None:
    """List search results for QUERY."""
    run_command(lambda client, recovery: commands.search(client, query, ContentKind(kind), limit))


@main.group(name="device")
def device_group() -> None:
    """Spotify Connect devices."""


@device_group.command(name="connect")
@click.argument("name", required=False)
def device_connect_cmd(name: str | None) -> None:
    """Transfer playback to device NAME (default: first device)."""
    run_command(lambda client, recovery: commands.device_connect(client, name))


@device_group.command(name="list")
def device_list_cmd() -> None:
    """List available devices."""
    run_command(lambda client, recovery: commands.device_list(client))


@device_group.command(name="status")
def device_status_cmd() -> None:
    """Show the active device."""
    run_command(lambda client, recovery: commands.device_status(client))


@main.group(name="set")
def set_group() -> None:
    """Player settings."""


@set_group.command(name="volume")
@click.argument("level", type=click.IntRange(0, 100))
def set_volume_cmd(level: int) -> None:
    """Set volume to LEVEL percent."""
    run_command(lambda client, recovery: commands.set_volume(client, level, recovery))


@set_group.command(name="shuffle")
@click.argument("state", type=click.BOOL)
def set_shuffle_cmd(state: bool) -> None:
    """Turn shuffle on or off."""
    run_command(lambda client, recovery: commands.set_shuffle(client, state, recovery))


@set_group.command(name="repeat")
@click.argument("state", type=click.Choice([state.value for state in RepeatState]))
def set_repeat_cmd(state: str) -> None:
    """Set repeat mode: off, track or context."""
    run_command(lambda client, recovery: commands.set_repeat(client, RepeatState(state), recovery))


if __name__ == "__main__":
    main()
