"""Configuration settings for the Sweap client."""

from enum import StrEnum
from functools import lru_cache
from pathlib import Path
from typing import Literal, Self

from pydantic import AliasChoices, BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Environment(StrEnum):
    """Sweap deployment the client talks to."""

    PRODUCTION = "production"
    STAGING = "staging"
    DEVELOPMENT = "development"


# Official endpoints for normal users
API_URL = "https://api.sweap.io/core/v1/"
TOKEN_URL = "https://auth.sweap.io/realms/users/protocol/openid-connect/token"

# Staging and dev areas, for special development purposes only
API_URL_STAGING = "https://api.sweap.st/core/v1/"
TOKEN_URL_STAGING = "https://auth.sweap.st/realms/users/protocol/openid-connect/token"

API_URL_DEV = "https://api.sweap.dev/core/v1/"
TOKEN_URL_DEV = "https://auth.sweap.dev/realms/users/protocol/openid-connect/token"

ENDPOINTS: dict[Environment, tuple[str, str]] = {
    Environment.PRODUCTION: (API_URL, TOKEN_URL),
    Environment.STAGING: (API_URL_STAGING, TOKEN_URL_STAGING),
    Environment.DEVELOPMENT: (API_URL_DEV, TOKEN_URL_DEV),
}


class ListenConfig(BaseModel):
    """Configuration for the guest change listener."""

    poll_interval_seconds: float = Field(
        default=15.0,
        gt=0.0,
        description="Seconds to sleep between two guest list polls",
    )
    buffer_size: int = Field(
        default=256,
        ge=1,
        description="Maximum number of undelivered guest updates",
    )


class GeneratorConfig(BaseModel):
    """Configuration for the bulk guest generation pipeline.

    Controls worker count, batching and the delays used to keep
    the load on the API bounded.
    """

    num_workers: int = Field(
        default=200,
        ge=1,
        le=1000,
        description="Number of concurrent workers creating guests",
    )
    batch_size: int = Field(
        default=50,
        ge=1,
        le=1000,
        description="Guests handed to a worker at once",
    )
    inter_row_delay_ms: int = Field(
        default=1,
        ge=0,
        description="Milliseconds to wait between two guest creations",
    )
    batch_delay_ms: int = Field(
        default=200,
        ge=0,
        description="Milliseconds a worker waits after finishing a batch",
    )


class LoggingConfig(BaseModel):
    """Configuration for logging behavior.

    Controls file logging, rotation, and output format.
    """

    log_file: str | None = Field(
        default=None,
        description="Optional path for file logging (enables rotation)",
    )
    rotation: str = Field(
        default="10 MB",
        description="When to rotate log file (e.g., '10 MB', '1 day')",
    )
    retention: str = Field(
        default="7 days",
        description="How long to keep rotated logs",
    )
    serialize: bool = Field(
        default=False,
        description="If True, output JSON format to file",
    )


class Settings(BaseSettings):
    """Client settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # --------------------------------------------------------------------------
    # Credentials
    # --------------------------------------------------------------------------
    client_id: str = Field(
        default="",
        validation_alias=AliasChoices("client_id", "clientid"),
        description="OAuth2 client id",
    )
    client_secret: str = Field(
        default="",
        description="OAuth2 client secret",
    )

    # --------------------------------------------------------------------------
    # Endpoints
    # --------------------------------------------------------------------------
    environment: Environment = Field(
        default=Environment.PRODUCTION,
        description="Sweap deployment to use",
    )
    api_url: str | None = Field(
        default=None,
        description="Override for the API base URL (testing only)",
    )
    token_url: str | None = Field(
        default=None,
        description="Override for the token endpoint (testing only)",
    )

    # --------------------------------------------------------------------------
    # Client Behavior
    # --------------------------------------------------------------------------
    debug: bool = Field(
        default=False,
        description="Log full request and response dumps",
    )
    verify_credentials: bool = Field(
        default=False,
        description="Check credentials when a client is opened",
    )
    request_timeout: float = Field(
        default=30.0,
        gt=0.0,
        description="HTTP timeout in seconds",
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )

    # --------------------------------------------------------------------------
    # Nested Configuration
    # --------------------------------------------------------------------------
    listen: ListenConfig = Field(
        default_factory=ListenConfig,
        description="Guest listener configuration",
    )
    generator: GeneratorConfig = Field(
        default_factory=GeneratorConfig,
        description="Bulk guest generation configuration",
    )
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig,
        description="Logging configuration (file output, rotation)",
    )

    @property
    def resolved_api_url(self) -> str:
        """API base URL, always ending with a slash."""
        url = self.api_url or ENDPOINTS[self.environment][0]
        return url if url.endswith("/") else url + "/"

    @property
    def resolved_token_url(self) -> str:
        """Token endpoint for the client credentials flow."""
        return self.token_url or ENDPOINTS[self.environment][1]

    @classmethod
    def from_env_file(cls, path: str | Path) -> Self:
        """Load settings from a specific env file.

        Raises:
            FileNotFoundError: If the file does not exist.
        """
        env_path = Path(path)
        if not env_path.is_file():
            raise FileNotFoundError(f"Error loading env file: {env_path}")
        return cls(_env_file=env_path)  # type: ignore[call-arg]


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
