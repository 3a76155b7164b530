"""State managers for handling application-wide mutable state.

This module provides thread-safe state management using asyncio.Lock
for async operations. All state managers inherit from StateManager ABC.
"""

import asyncio
import time
from abc import ABC, abstractmethod

# Refresh a little before Spotify's stated expiry
TOKEN_EXPIRY_MARGIN_SECONDS = 60


class StateManager(ABC):
    """Base class for all state managers.

    State managers provide thread-safe access to mutable application state.
    All subclasses must implement lifecycle methods.
    """

    @abstractmethod
    async def initialize(self) -> None:
        """Initialize the state manager (called during startup)."""
        pass

    @abstractmethod
    async def cleanup(self) -> None:
        """Cleanup resources (called during shutdown)."""
        pass


class SpotifyAuthManager(StateManager):
    """Manages the Spotify access token with expiration tracking.

    Shared by every operation that talks to Spotify; concurrent requests
    see either the old or the new token, never a half-written pair.
    """

    def __init__(self):
        """Initialize the Spotify auth manager."""
        self._access_token: str | None = None
        self._token_expires_at: float = 0
        self._lock = asyncio.Lock()
        self.refresh_lock = asyncio.Lock()

    async def initialize(self) -> None:
        """Initialize the Spotify auth manager."""
        # No initialization needed for now
        pass

    async def cleanup(self) -> None:
        """Cleanup resources."""
        # Clear token on shutdown
        async with self._lock:
            self._access_token = None
            self._token_expires_at = 0

    async def get_token(self) -> str | None:
        """Get the current access token if available and not expired.

        Returns:
            Access token string or None if expired/not set
        """
        async with self._lock:
            if self._access_token and self._token_expires_at > time.time():
                return self._access_token
            return None

    async def set_token(self, token: str, expires_in: int) -> None:
        """Set a new access token with expiration.

        Args:
            token: The access token string
            expires_in: Expiration time in seconds
        """
        async with self._lock:
            self._access_token = token
            self._token_expires_at = time.time() + max(expires_in - TOKEN_EXPIRY_MARGIN_SECONDS, 0)

    async def invalidate(self) -> None:
        """Forget the cached token so the next request refreshes it."""
        async with self._lock:
            self._access_token = None
            self._token_expires_at = 0
