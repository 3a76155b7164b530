"""Unit tests for device lookup and no-active-device recovery."""

from unittest.mock import AsyncMock

import pytest

from fishify.exceptions import (
    DeviceNotFoundException,
    DeviceUnavailableException,
    NoDevicesFoundException,
    QueueExpansionPartialFailureException,
    SpotifyAPIException,
)
from fishify.models.playback import Device, PlaybackSnapshot
from fishify.services.device_service import (
    DeviceRecovery,
    active_device,
    connect_device,
    get_device,
    with_recovery,
)

KITCHEN = Device(id="device-1", name="Kitchen", type="Speaker", is_active=True)
LAPTOP = Device(id="device-2", name="Laptop", type="Computer")


def not_found() -> SpotifyAPIException:
    return SpotifyAPIException("Player command failed: 404 Device not found", upstream_status=404)


class TestGetDevice:
    """Tests for get_device and active_device."""

    @pytest.mark.asyncio
    async def test_by_name(self, spotify):
        spotify.list_devices.return_value = [KITCHEN, LAPTOP]

        assert await get_device(spotify, "Laptop") == LAPTOP

    @pytest.mark.asyncio
    async def test_name_must_match_exactly(self, spotify):
        spotify.list_devices.return_value = [KITCHEN, LAPTOP]

        with pytest.raises(DeviceNotFoundException) as exc_info:
            await get_device(spotify, "laptop")

        assert exc_info.value.name == "laptop"

    @pytest.mark.asyncio
    async def test_first_device_without_name(self, spotify):
        spotify.list_devices.return_value = [KITCHEN, LAPTOP]

        assert await get_device(spotify) == KITCHEN

    @pytest.mark.asyncio
    async def test_no_devices(self, spotify):
        with pytest.raises(NoDevicesFoundException):
            await get_device(spotify)

    @pytest.mark.asyncio
    async def test_active_device(self, spotify, mock_spotify_playback_response):
        spotify.get_current_playback.return_value = PlaybackSnapshot.model_validate(mock_spotify_playback_response)

        device = await active_device(spotify)

        assert device.name == "Kitchen"

    @pytest.mark.asyncio
    async def test_active_device_without_playback(self, spotify):
        assert await active_device(spotify) is None

    @pytest.mark.asyncio
    async def test_connect_device_without_id(self, spotify):
        spotify.list_devices.return_value = [Device(id=None, name="Restricted", type="Speaker")]

        with pytest.raises(DeviceUnavailableException):
            await connect_device(spotify)

        spotify.transfer_playback.assert_not_called()


class TestDeviceRecovery:
    """Tests for DeviceRecovery."""

    @pytest.mark.asyncio
    async def test_success_needs_no_recovery(self, spotify):
        recovery = DeviceRecovery(spotify)
        mutation = AsyncMock(return_value="ok")

        assert await recovery.run(mutation) == "ok"
        assert recovery.used is False
        spotify.list_devices.assert_not_called()

    @pytest.mark.asyncio
    async def test_not_found_connects_and_retries_once(self, spotify):
        spotify.list_devices.return_value = [LAPTOP, KITCHEN]
        recovery = DeviceRecovery(spotify)
        mutation = AsyncMock(side_effect=[not_found(), "ok"])

        assert await recovery.run(mutation) == "ok"

        spotify.transfer_playback.assert_awaited_once_with("device-2")
        assert mutation.await_count == 2
        assert recovery.used is True

    @pytest.mark.asyncio
    async def test_fires_at_most_once(self, spotify):
        spotify.list_devices.return_value = [KITCHEN]
        recovery = DeviceRecovery(spotify)
        first = not_found()
        mutation = AsyncMock(side_effect=[first, not_found(), not_found()])

        with pytest.raises(SpotifyAPIException) as exc_info:
            await recovery.run(mutation)
        assert exc_info.value is first

        # A second mutation in the same invocation is not recovered
        with pytest.raises(SpotifyAPIException):
            await recovery.run(mutation)

        assert mutation.await_count == 3
        spotify.transfer_playback.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_failed_connect_raises_original(self, spotify):
        original = not_found()
        mutation = AsyncMock(side_effect=original)

        with pytest.raises(SpotifyAPIException) as exc_info:
            await DeviceRecovery(spotify).run(mutation)

        # No devices listed, so the connect step failed
        assert exc_info.value is original
        mutation.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_other_errors_are_not_recovered(self, spotify):
        error = SpotifyAPIException("Rate limited", upstream_status=429)
        mutation = AsyncMock(side_effect=error)

        with pytest.raises(SpotifyAPIException) as exc_info:
            await DeviceRecovery(spotify).run(mutation)

        assert exc_info.value is error
        spotify.list_devices.assert_not_called()

    @pytest.mark.asyncio
    async def test_disabled(self, spotify):
        spotify.list_devices.return_value = [KITCHEN]
        mutation = AsyncMock(side_effect=not_found())

        with pytest.raises(SpotifyAPIException):
            await DeviceRecovery(spotify, enabled=False).run(mutation)

        spotify.transfer_playback.assert_not_called()

    @pytest.mark.asyncio
    async def test_partial_failure_before_any_enqueue_is_recovered(self, spotify):
        spotify.list_devices.return_value = [KITCHEN]
        cause = not_found()
        mutation = AsyncMock(side_effect=[QueueExpansionPartialFailureException(cause, enqueued=0, total=3), 3])

        assert await DeviceRecovery(spotify).run(mutation) == 3

    @pytest.mark.asyncio
    async def test_partial_failure_after_enqueue_is_not_recovered(self, spotify):
        spotify.list_devices.return_value = [KITCHEN]
        failure = QueueExpansionPartialFailureException(not_found(), enqueued=2, total=3)
        mutation = AsyncMock(side_effect=failure)

        with pytest.raises(QueueExpansionPartialFailureException):
            await DeviceRecovery(spotify).run(mutation)

        spotify.transfer_playback.assert_not_called()

    @pytest.mark.asyncio
    async def test_with_recovery_without_recovery(self):
        mutation = AsyncMock(side_effect=not_found())

        with pytest.raises(SpotifyAPIException):
            await with_recovery(None, mutation)
