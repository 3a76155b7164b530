"""Pydantic models for player, device and queue state."""

from datetime import timedelta
from enum import Enum

from pydantic import Field

from fishify.models.content import PlayableItem, SpotifyModel


class RepeatState(str, Enum):
    """Player repeat mode."""

    OFF = "off"
    TRACK = "track"
    CONTEXT = "context"

    @property
    def label(self) -> str:
        """Human-readable label for display."""
        return self.value.capitalize()


class Device(SpotifyModel):
    """A Spotify Connect device.

    Some device classes (e.g. restricted speakers) are reported without an id.
    """

    id: str | None = None
    name: str
    type: str
    is_active: bool = False
    volume_percent: int | None = None


class PlaybackContext(SpotifyModel):
    """Collection the current item is playing from."""

    type: str
    uri: str


class PlaybackSnapshot(SpotifyModel):
    """Current Spotify playback state."""

    device: Device
    is_playing: bool = False
    shuffle_state: bool = False
    repeat_state: RepeatState = RepeatState.OFF
    context: PlaybackContext | None = None
    item: PlayableItem | None = None
    progress_ms: int | None = None

    @property
    def progress(self) -> timedelta | None:
        """Elapsed time in the current item."""
        if self.progress_ms is None:
            return None
        return timedelta(milliseconds=self.progress_ms)


class QueueSnapshot(SpotifyModel):
    """Current item and the upcoming user queue."""

    currently_playing: PlayableItem | None = None
    queue: list[PlayableItem] = Field(default_factory=list)
