"""Spotify Connect device routes."""

from fastapi import APIRouter, Depends, Request

from fishify.core.middleware import limiter
from fishify.dependencies import get_spotify_client
from fishify.models.base_models import DeviceConnectRequest
from fishify.models.response import CommandResponse
from fishify.protocols import SpotifyClientProtocol
from fishify.security import verify_api_key
from fishify.services import commands
from fishify.services.responses import to_response

router = APIRouter(dependencies=[Depends(verify_api_key)])


@router.get("/devices", response_model=CommandResponse, summary="List devices")
@limiter.limit("30/minute")
async def device_list(request: Request, client: SpotifyClientProtocol = Depends(get_spotify_client)):
    return to_response(await commands.device_list(client))


@router.post(
    "/devices/connect",
    response_model=CommandResponse,
    summary="Transfer playback to a device",
    responses={
        404: {"description": "Device not found, or no devices at all"},
        409: {"description": "Device has no id and cannot be targeted"},
    },
)
@limiter.limit("30/minute")
async def device_connect(
    request: Request,
    payload: DeviceConnectRequest,
    client: SpotifyClientProtocol = Depends(get_spotify_client),
):
    """Connect to the named device, or to the first listed device."""
    return to_response(await commands.device_connect(client, payload.name))


@router.get("/devices/active", response_model=CommandResponse, summary="Active device")
@limiter.limit("30/minute")
async def device_status(request: Request, client: SpotifyClientProtocol = Depends(get_spotify_client)):
    return to_response(await commands.device_status(client))
