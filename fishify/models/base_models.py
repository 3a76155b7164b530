"""Pydantic models for request/response validation."""

from datetime import datetime

from pydantic import BaseModel, Field

from fishify.models.content import ContentKind
from fishify.models.playback import RepeatState


class HealthResponse(BaseModel):
    """Basic health check response."""

    status: str
    version: str


class DetailedHealthResponse(BaseModel):
    """Detailed health check response with dependency status."""

    status: str = Field(..., description="Overall health status: healthy or unhealthy")
    version: str = Field(..., description="Application version")
    timestamp: datetime = Field(..., description="Current server timestamp")
    checks: dict[str, str] = Field(..., description="Individual health check results")


class PlayRequest(BaseModel):
    """Play or queue request posted by a chat bot."""

    query: str | None = Field(default=None, description="Search query, spotify: uri, or url")
    type: ContentKind | None = Field(default=None, description="Content kind to search for (default track)")
    is_url: bool = Field(default=False, description="Treat query as an open.spotify.com url")


class DeviceConnectRequest(BaseModel):
    name: str | None = Field(default=None, description="Device name; first device when omitted")


class VolumeRequest(BaseModel):
    level: int = Field(..., ge=0, le=100, description="Volume percent")


class ShuffleRequest(BaseModel):
    state: bool


class RepeatRequest(BaseModel):
    state: RepeatState

