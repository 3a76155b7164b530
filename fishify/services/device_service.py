"""Device lookup and no-active-device recovery."""

from collections.abc import Awaitable, Callable
from typing import TypeVar

from fishify.exceptions import (
    DeviceNotFoundException,
    DeviceUnavailableException,
    FishifyException,
    NoDevicesFoundException,
    QueueExpansionPartialFailureException,
    SpotifyAPIException,
)
from fishify.logging_config import get_logger, log_with_context
from fishify.models.playback import Device
from fishify.protocols import SpotifyClientProtocol

logger = get_logger(__name__)

T = TypeVar("T")


async def get_device(client: SpotifyClientProtocol, name: str | None = None) -> Device:
    """Find a device by exact name, or the first listed device without a name.

    Raises:
        DeviceNotFoundException: No device has that name
        NoDevicesFoundException: No devices at all (name omitted)
    """
    devices = await client.list_devices()

    if name is None:
        if not devices:
            raise NoDevicesFoundException()
        return devices[0]

    for device in devices:
        if device.name == name:
            return device
    raise DeviceNotFoundException(name, details={"available": [device.name for device in devices]})


async def active_device(client: SpotifyClientProtocol) -> Device | None:
    """Device of the current playback, None when nothing is playing."""
    snapshot = await client.get_current_playback()
    if snapshot is None:
        return None
    return snapshot.device


async def connect_device(client: SpotifyClientProtocol, name: str | None = None) -> Device:
    """Transfer playback to a device, returning the device connected to.

    Raises:
        DeviceUnavailableException: The device has no id to transfer to
    """
    device = await get_device(client, name)
    if device.id is None:
        raise DeviceUnavailableException(device.name)
    await client.transfer_playback(device.id)
    log_with_context(
        logger,
        "info",
        "Transferred playback",
        device_name=device.name,
        device_id=device.id,
        event_type="device_connected",
    )
    return device


class DeviceRecovery:
    """One-shot recovery for mutations that fail with no active device.

    Spotify answers 404 to player commands when no device is active. The
    first such failure connects the first available device and re-issues
    the mutation once. Later failures, and failures of the reconnect or
    the retry, surface as the original error. Use one instance per
    command invocation.
    """

    def __init__(self, client: SpotifyClientProtocol, enabled: bool = True):
        self._client = client
        self.enabled = enabled
        self.used = False

    def _should_recover(self, error: FishifyException) -> bool:
        if not self.enabled or self.used:
            return False
        if isinstance(error, SpotifyAPIException):
            return error.is_not_found
        if isinstance(error, QueueExpansionPartialFailureException):
            # Retrying after a partial enqueue would duplicate queue entries
            cause = error.error
            return error.enqueued == 0 and isinstance(cause, SpotifyAPIException) and cause.is_not_found
        return False

    async def _reconnect(self) -> bool:
        try:
            await connect_device(self._client)
        except FishifyException as e:
            log_with_context(
                logger,
                "warning",
                "Device recovery could not connect a device",
                error=str(e),
                event_type="device_recovery_failed",
            )
            return False
        return True

    async def run(self, mutation: Callable[[], Awaitable[T]]) -> T:
        """Run a mutation, recovering once from a missing active device."""
        try:
            return await mutation()
        except FishifyException as error:
            if not self._should_recover(error):
                raise
            original = error

        self.used = True
        log_with_context(
            logger,
            "info",
            "No active device, connecting first device and retrying",
            error=str(original),
            event_type="device_recovery",
        )
        if not await self._reconnect():
            raise original

        try:
            return await mutation()
        except FishifyException as retry_error:
            log_with_context(
                logger,
                "warning",
                "Retry after device recovery failed",
                error=str(retry_error),
                event_type="device_recovery_retry_failed",
            )
        raise original


async def with_recovery(recovery: DeviceRecovery | None, mutation: Callable[[], Awaitable[T]]) -> T:
    """Run a mutation through recovery when one is given."""
    if recovery is None:
        return await mutation()
    return await recovery.run(mutation)
