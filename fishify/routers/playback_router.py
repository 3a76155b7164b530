"""Playback, queue, search and player-setting routes for chat bots.

Every route answers with a CommandResponse; failures become structured
error responses through the registered exception handlers.
"""

from fastapi import APIRouter, Depends, Query, Request

from fishify.core.middleware import limiter
from fishify.dependencies import get_device_recovery, get_spotify_client
from fishify.models.base_models import PlayRequest, RepeatRequest, ShuffleRequest, VolumeRequest
from fishify.models.content import ContentKind
from fishify.models.response import CommandResponse
from fishify.protocols import SpotifyClientProtocol
from fishify.security import verify_api_key
from fishify.services import commands
from fishify.services.commands import MAX_SKIP_COUNT
from fishify.services.device_service import DeviceRecovery
from fishify.services.responses import to_response
from fishify.services.search_service import DEFAULT_SEARCH_LIMIT, MAX_SEARCH_LIMIT

router = APIRouter(dependencies=[Depends(verify_api_key)])

COMMAND_RATE_LIMIT = "30/minute"


@router.post(
    "/play",
    response_model=CommandResponse,
    summary="Play content or resume playback",
    responses={
        200: {
            "description": "Playback started",
            "content": {
                "application/json": {
                    "example": {
                        "lines": ["Now playing Bohemian Rhapsody by Queen"],
                        "verbose": True,
                        "text": "> Now playing Bohemian Rhapsody by Queen",
                    }
                }
            },
        },
        400: {"description": "Malformed or invalid reference"},
        404: {"description": "No search result, or no active device"},
    },
)
@limiter.limit(COMMAND_RATE_LIMIT)
async def play(
    request: Request,
    payload: PlayRequest,
    client: SpotifyClientProtocol = Depends(get_spotify_client),
    recovery: DeviceRecovery = Depends(get_device_recovery),
):
    """Play a search result, uri or url now; resume when no query is given."""
    result = await commands.play(client, payload.query, payload.type, payload.is_url, recovery)
    return to_response(result)


@router.post("/queue", response_model=CommandResponse, summary="Queue content")
@limiter.limit(COMMAND_RATE_LIMIT)
async def queue(
    request: Request,
    payload: PlayRequest,
    client: SpotifyClientProtocol = Depends(get_spotify_client),
    recovery: DeviceRecovery = Depends(get_device_recovery),
):
    """Append content to the play queue; collections are queued item by item."""
    result = await commands.queue(client, payload.query, payload.type, payload.is_url, recovery)
    return to_response(result)


@router.get("/queue", response_model=CommandResponse, summary="List the play queue")
@limiter.limit(COMMAND_RATE_LIMIT)
async def queue_list(request: Request, client: SpotifyClientProtocol = Depends(get_spotify_client)):
    return to_response(await commands.queue_list(client))


@router.post("/pause", response_model=CommandResponse, summary="Pause playback")
@limiter.limit(COMMAND_RATE_LIMIT)
async def pause(
    request: Request,
    client: SpotifyClientProtocol = Depends(get_spotify_client),
    recovery: DeviceRecovery = Depends(get_device_recovery),
):
    return to_response(await commands.pause(client, recovery))


@router.post("/skip", response_model=CommandResponse, summary="Skip tracks")
@limiter.limit(COMMAND_RATE_LIMIT)
async def skip(
    request: Request,
    count: int = Query(default=1, ge=1, le=MAX_SKIP_COUNT, description="Number of tracks to skip"),
    client: SpotifyClientProtocol = Depends(get_spotify_client),
    recovery: DeviceRecovery = Depends(get_device_recovery),
):
    return to_response(await commands.skip(client, count, recovery))


@router.get(
    "/status",
    response_model=CommandResponse,
    summary="Playback status",
    responses={
        200: {
            "description": "Current playback",
            "content": {
                "application/json": {
                    "example": {
                        "lines": [
                            "Playing",
                            "Album: A Night at the Opera",
                            "Bohemian Rhapsody — Queen",
                            "2:05 / 5:54",
                            "Volume: 50%",
                            "Shuffle: Off",
                            "Repeat: Off",
                        ],
                        "verbose": True,
                        "text": "> Playing\n> Album: A Night at the Opera\n> ...",
                    }
                }
            },
        },
        404: {"description": "No current playback"},
    },
)
@limiter.limit(COMMAND_RATE_LIMIT)
async def status(request: Request, client: SpotifyClientProtocol = Depends(get_spotify_client)):
    return to_response(await commands.status(client))


@router.get("/search", response_model=CommandResponse, summary="Search content")
@limiter.limit(COMMAND_RATE_LIMIT)
async def search(
    request: Request,
    q: str = Query(..., min_length=1, description="Search query"),
    type: ContentKind = Query(default=ContentKind.TRACK, description="Content kind to search"),
    limit: int = Query(default=DEFAULT_SEARCH_LIMIT, ge=1, le=MAX_SEARCH_LIMIT),
    client: SpotifyClientProtocol = Depends(get_spotify_client),
):
    """List search results; an empty result is an empty listing."""
    return to_response(await commands.search(client, q, type, limit))


@router.put("/player/volume", response_model=CommandResponse, summary="Set volume")
@limiter.limit(COMMAND_RATE_LIMIT)
async def set_volume(
    request: Request,
    payload: VolumeRequest,
    client: SpotifyClientProtocol = Depends(get_spotify_client),
    recovery: DeviceRecovery = Depends(get_device_recovery),
):
    return to_response(await commands.set_volume(client, payload.level, recovery))


@router.put("/player/shuffle", response_model=CommandResponse, summary="Set shuffle")
@limiter.limit(COMMAND_RATE_LIMIT)
async def set_shuffle(
    request: Request,
    payload: ShuffleRequest,
    client: SpotifyClientProtocol = Depends(get_spotify_client),
    recovery: DeviceRecovery = Depends(get_device_recovery),
):
    return to_response(await commands.set_shuffle(client, payload.state, recovery))


@router.put("/player/repeat", response_model=CommandResponse, summary="Set repeat mode")
@limiter.limit(COMMAND_RATE_LIMIT)
async def set_repeat(
    request: Request,
    payload: RepeatRequest,
    client: SpotifyClientProtocol = Depends(get_spotify_client),
    recovery: DeviceRecovery = Depends(get_device_recovery),
):
    return to_response(await commands.set_repeat(client, payload.state, recovery))
