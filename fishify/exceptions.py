"""Custom exceptions for fishify with proper HTTP status codes."""

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Error codes for structured error responses."""

    # Generic errors
    FISHIFY_ERROR = "FISHIFY_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"

    # Reference errors
    MALFORMED_REFERENCE = "MALFORMED_REFERENCE"
    UNKNOWN_KIND = "UNKNOWN_KIND"
    INVALID_REFERENCE = "INVALID_REFERENCE"

    # Search errors
    EMPTY_SEARCH_RESULT = "EMPTY_SEARCH_RESULT"

    # Device and playback errors
    DEVICE_NOT_FOUND = "DEVICE_NOT_FOUND"
    NO_DEVICES_FOUND = "NO_DEVICES_FOUND"
    DEVICE_UNAVAILABLE = "DEVICE_UNAVAILABLE"
    NO_ACTIVE_PLAYBACK = "NO_ACTIVE_PLAYBACK"

    # Queue errors
    QUEUE_UNSUPPORTED = "QUEUE_UNSUPPORTED"
    QUEUE_PARTIAL_FAILURE = "QUEUE_PARTIAL_FAILURE"

    # Spotify errors
    SPOTIFY_ERROR = "SPOTIFY_ERROR"
    SPOTIFY_AUTH_ERROR = "SPOTIFY_AUTH_ERROR"
    SPOTIFY_NOT_AUTHENTICATED = "SPOTIFY_NOT_AUTHENTICATED"
    SPOTIFY_API_ERROR = "SPOTIFY_API_ERROR"

    # Configuration errors
    CONFIG_ERROR = "CONFIG_ERROR"


class FishifyException(Exception):
    """Base exception for fishify errors with HTTP status code support.

    All custom exceptions should inherit from this class so that both
    front ends (CLI and HTTP) can report them consistently.
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.FISHIFY_ERROR,
        status_code: int = 500,
        details: dict[str, Any] | None = None,
    ):
        """Initialize fishify exception.

        Args:
            message: Human-readable error message
            code: Error code from ErrorCode enum
            status_code: HTTP status code (default 500)
            details: Additional error context/details
        """
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)


class ReferenceException(FishifyException):
    """A URI or URL could not be turned into a content identifier."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.MALFORMED_REFERENCE,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, code, status_code=400, details=details)


class MalformedReferenceException(ReferenceException):
    """Reference text does not have the spotify:{kind}:{id} or open.spotify.com shape."""

    def __init__(self, message: str = "Malformed reference", details: dict[str, Any] | None = None):
        super().__init__(message, code=ErrorCode.MALFORMED_REFERENCE, details=details)


class UnknownKindException(ReferenceException):
    """Reference names a kind outside the six supported ones."""

    def __init__(self, kind: str, details: dict[str, Any] | None = None):
        self.kind = kind
        super().__init__(f"Unknown content kind: {kind}", code=ErrorCode.UNKNOWN_KIND, details=details)


class InvalidReferenceException(FishifyException):
    """A query flagged as a url could not be normalized."""

    def __init__(self, message: str = "Invalid url", details: dict[str, Any] | None = None):
        super().__init__(message, code=ErrorCode.INVALID_REFERENCE, status_code=400, details=details)


class EmptySearchResultException(FishifyException):
    """Search used to resolve a play/queue query returned nothing."""

    def __init__(self, query: str, details: dict[str, Any] | None = None):
        self.query = query
        super().__init__(
            f"No search result for '{query}'",
            code=ErrorCode.EMPTY_SEARCH_RESULT,
            status_code=404,
            details=details,
        )


class DeviceNotFoundException(FishifyException):
    """No device with the requested name."""

    def __init__(self, name: str, details: dict[str, Any] | None = None):
        self.name = name
        super().__init__(
            f"Device not found: {name}",
            code=ErrorCode.DEVICE_NOT_FOUND,
            status_code=404,
            details=details,
        )


class NoDevicesFoundException(FishifyException):
    """The account has no devices available."""

    def __init__(self, message: str = "No devices found", details: dict[str, Any] | None = None):
        super().__init__(message, code=ErrorCode.NO_DEVICES_FOUND, status_code=404, details=details)


class DeviceUnavailableException(FishifyException):
    """The device exists but cannot be targeted (it has no id)."""

    def __init__(self, name: str, details: dict[str, Any] | None = None):
        self.name = name
        super().__init__(
            f"Missing device id for {name}",
            code=ErrorCode.DEVICE_UNAVAILABLE,
            status_code=409,
            details=details,
        )


class NoActivePlaybackException(FishifyException):
    """Nothing is playing on any device."""

    def __init__(self, message: str = "No current playback", details: dict[str, Any] | None = None):
        super().__init__(message, code=ErrorCode.NO_ACTIVE_PLAYBACK, status_code=404, details=details)


class QueueUnsupportedException(FishifyException):
    """The content kind has no playable children to enqueue."""

    def __init__(self, kind: str, details: dict[str, Any] | None = None):
        self.kind = kind
        super().__init__(
            f"Cannot queue content of kind {kind}",
            code=ErrorCode.QUEUE_UNSUPPORTED,
            status_code=400,
            details=details,
        )


class QueueExpansionPartialFailureException(FishifyException):
    """Enqueueing the children of a collection stopped at the first failure.

    Items enqueued before the failing one stay in the remote queue.

    Attributes:
        error: The exception raised by the failing enqueue call
        enqueued: Number of items enqueued before the failure
        total: Number of items the expansion tried to enqueue
    """

    def __init__(self, error: Exception, enqueued: int, total: int):
        self.error = error
        self.enqueued = enqueued
        self.total = total
        super().__init__(
            f"Failed to queue item {enqueued + 1} of {total}: {error}",
            code=ErrorCode.QUEUE_PARTIAL_FAILURE,
            status_code=502,
            details={"enqueued": enqueued, "total": total},
        )


class SpotifyException(FishifyException):
    """Spotify-related errors."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.SPOTIFY_ERROR,
        status_code: int = 500,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, code, status_code, details)


class SpotifyAuthException(SpotifyException):
    """Spotify authentication failed."""

    def __init__(self, message: str = "Spotify authentication failed", details: dict[str, Any] | None = None):
        super().__init__(
            message,
            code=ErrorCode.SPOTIFY_AUTH_ERROR,
            status_code=401,
            details=details,
        )


class SpotifyNotAuthenticatedException(SpotifyException):
    """No refresh token configured."""

    def __init__(self, message: str = "Not authenticated with Spotify", details: dict[str, Any] | None = None):
        super().__init__(
            message,
            code=ErrorCode.SPOTIFY_NOT_AUTHENTICATED,
            status_code=401,
            details=details,
        )


class SpotifyAPIException(SpotifyException):
    """Spotify Web API request failed.

    Passes transport, auth, rate-limit and not-found failures through
    unmodified. ``upstream_status`` holds Spotify's HTTP status when a
    response was received.
    """

    def __init__(
        self,
        message: str,
        upstream_status: int | None = None,
        details: dict[str, Any] | None = None,
    ):
        self.upstream_status = upstream_status
        super().__init__(
            message,
            code=ErrorCode.SPOTIFY_API_ERROR,
            status_code=_status_for_upstream(upstream_status),
            details=details,
        )

    @property
    def is_not_found(self) -> bool:
        """Spotify answered 404 (content or active device absent)."""
        return self.upstream_status == 404


class ConfigurationException(FishifyException):
    """Configuration errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message, code=ErrorCode.CONFIG_ERROR, status_code=500, details=details)


def _status_for_upstream(upstream_status: int | None) -> int:
    if upstream_status in (401, 403, 404, 429):
        return upstream_status
    return 502
