"""Pydantic models for content, playback state and command results."""

from fishify.models.base_models import DetailedHealthResponse, HealthResponse
from fishify.models.content import ContentIdentifier, ContentKind, ContentMetadata
from fishify.models.playback import Device, PlaybackSnapshot, QueueSnapshot, RepeatState
from fishify.models.response import CommandResponse, CommandResult

__all__ = [
    "CommandResponse",
    "CommandResult",
    "ContentIdentifier",
    "ContentKind",
    "ContentMetadata",
    "DetailedHealthResponse",
    "Device",
    "HealthResponse",
    "PlaybackSnapshot",
    "QueueSnapshot",
    "RepeatState",
]
