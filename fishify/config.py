import logging
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

BASE_DIR = Path(__file__).resolve().parent.parent  # repository root

DEFAULT_TOKEN_FILE = Path.home() / ".config" / "fishify" / "refresh_token"


class Settings(BaseSettings):
    """Application settings with validation.

    Spotify client credentials are required and will raise validation errors if missing.
    All secrets must be provided via environment variables or .env file.
    """

    # Spotify API - required
    spotify_client_id: str = Field(min_length=1, description="Spotify OAuth client ID")
    spotify_client_secret: str = Field(min_length=1, description="Spotify OAuth client secret")
    spotify_refresh_token: str = Field(default="", description="Spotify refresh token (populated after OAuth)")
    spotify_token_file: Path = Field(
        default=DEFAULT_TOKEN_FILE,
        description="File holding the latest refresh token; takes precedence over spotify_refresh_token",
    )

    # Playback behaviour
    device_recovery: bool = Field(
        default=True,
        description="Connect to the first device and retry once when Spotify reports no active device",
    )
    http_timeout: float = Field(default=10.0, gt=0, description="Read timeout for Spotify requests in seconds")

    # HTTP front end
    api_host: str = Field(default="127.0.0.1", min_length=1, description="API server host")
    api_port: int = Field(ge=1, le=65535, default=8000, description="API server port")
    api_key: str = Field(default="", description="Bearer token chat bots must present")
    trusted_hosts: str = Field(
        default="localhost,127.0.0.1,testserver",
        description="Comma-separated Host header patterns accepted by the API",
    )

    # Logging
    log_level: str = Field(default="INFO", description="Root log level")
    log_file: Path | None = Field(default=None, description="JSON log file (disabled when unset)")

    model_config = SettingsConfigDict(
        env_file=Path(BASE_DIR / ".env"),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        validate_default=True,  # Validate defaults too
    )

    @field_validator("spotify_client_id", "spotify_client_secret", mode="after")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        """Ensure credentials are not whitespace."""
        v = v.strip()
        if not v:
            raise ValueError("Spotify client credentials must not be empty")
        return v

    @field_validator("api_host", mode="after")
    @classmethod
    def validate_api_host(cls, v: str) -> str:
        """Ensure api_host is not empty or whitespace."""
        v = v.strip()
        if not v:
            raise ValueError("api_host cannot be empty")
        return v

    @field_validator("log_level", mode="after")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensure log_level names a standard logging level."""
        v = v.strip().upper()
        if not isinstance(logging.getLevelName(v), int):
            raise ValueError(f"log_level must be one of DEBUG, INFO, WARNING, ERROR, CRITICAL, got {v!r}")
        return v

    @property
    def trusted_host_list(self) -> list[str]:
        """Trusted host patterns as a list."""
        return [host.strip() for host in self.trusted_hosts.split(",") if host.strip()]


# Singleton settings instance (cached for performance)
_settings_instance: Settings | None = None


def get_settings() -> Settings:
    """Get singleton Settings instance for dependency injection.

    Creates the instance on first use to avoid re-reading the .env file
    on every request or command.

    Returns:
        Cached Settings instance
    """
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = Settings()
    return _settings_instance
