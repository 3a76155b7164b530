"""Tests for custom exception classes."""

import pytest

from fishify.exceptions import (
    DeviceNotFoundException,
    DeviceUnavailableException,
    EmptySearchResultException,
    ErrorCode,
    FishifyException,
    InvalidReferenceException,
    MalformedReferenceException,
    NoActivePlaybackException,
    QueueExpansionPartialFailureException,
    QueueUnsupportedException,
    ReferenceException,
    SpotifyAPIException,
    SpotifyAuthException,
    SpotifyException,
    SpotifyNotAuthenticatedException,
    UnknownKindException,
)


class TestFishifyException:
    """Tests for FishifyException."""

    def test_basic(self):
        exc = FishifyException(message="Test error")

        assert exc.message == "Test error"
        assert exc.code == ErrorCode.FISHIFY_ERROR
        assert exc.status_code == 500
        assert exc.details == {}
        assert str(exc) == "Test error"

    def test_with_details(self):
        exc = FishifyException(
            message="Test error", code=ErrorCode.INTERNAL_ERROR, status_code=503, details={"key": "value"}
        )

        assert exc.code == ErrorCode.INTERNAL_ERROR
        assert exc.status_code == 503
        assert exc.details["key"] == "value"


class TestReferenceExceptions:
    """Reference parsing failures are client errors."""

    def test_malformed(self):
        exc = MalformedReferenceException("Malformed uri: spotify:track")

        assert isinstance(exc, ReferenceException)
        assert exc.code == ErrorCode.MALFORMED_REFERENCE
        assert exc.status_code == 400

    def test_unknown_kind(self):
        exc = UnknownKindException("podcast")

        assert isinstance(exc, ReferenceException)
        assert exc.kind == "podcast"
        assert exc.message == "Unknown content kind: podcast"
        assert exc.code == ErrorCode.UNKNOWN_KIND

    def test_invalid_reference_is_not_a_parse_error(self):
        exc = InvalidReferenceException(details={"reference": "https://example.com"})

        assert not isinstance(exc, ReferenceException)
        assert exc.message == "Invalid url"
        assert exc.status_code == 400


class TestLookupExceptions:
    """Missing things map to 404."""

    def test_empty_search_result(self):
        exc = EmptySearchResultException("zzzz")

        assert exc.query == "zzzz"
        assert exc.message == "No search result for 'zzzz'"
        assert exc.status_code == 404

    def test_device_not_found(self):
        exc = DeviceNotFoundException("Attic")

        assert exc.name == "Attic"
        assert exc.code == ErrorCode.DEVICE_NOT_FOUND
        assert exc.status_code == 404

    def test_device_unavailable(self):
        exc = DeviceUnavailableException("Restricted")

        assert exc.message == "Missing device id for Restricted"
        assert exc.status_code == 409

    def test_no_active_playback(self):
        assert NoActivePlaybackException().message == "No current playback"
        assert NoActivePlaybackException("No active device").message == "No active device"


class TestQueueExceptions:
    """Tests for queue expansion errors."""

    def test_unsupported(self):
        exc = QueueUnsupportedException("artist")

        assert exc.message == "Cannot queue content of kind artist"
        assert exc.status_code == 400

    def test_partial_failure(self):
        cause = SpotifyAPIException("Queue item failed: 404 Not found", upstream_status=404)

        exc = QueueExpansionPartialFailureException(cause, enqueued=2, total=5)

        assert exc.error is cause
        assert exc.details == {"enqueued": 2, "total": 5}
        assert exc.message.startswith("Failed to queue item 3 of 5")
        assert exc.status_code == 502


class TestSpotifyExceptions:
    """Tests for Spotify exceptions."""

    def test_hierarchy(self):
        for exc in (
            SpotifyAuthException(),
            SpotifyNotAuthenticatedException(),
            SpotifyAPIException("failed"),
        ):
            assert isinstance(exc, SpotifyException)
            assert isinstance(exc, FishifyException)

    def test_auth_defaults(self):
        assert SpotifyAuthException().status_code == 401
        assert SpotifyNotAuthenticatedException().code == ErrorCode.SPOTIFY_NOT_AUTHENTICATED

    @pytest.mark.parametrize(
        "upstream,expected",
        [(401, 401), (403, 403), (404, 404), (429, 429), (400, 502), (500, 502), (None, 502)],
    )
    def test_api_status_mapping(self, upstream, expected):
        exc = SpotifyAPIException("failed", upstream_status=upstream)

        assert exc.status_code == expected
        assert exc.upstream_status == upstream
        assert exc.is_not_found is (upstream == 404)
