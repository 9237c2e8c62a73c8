"""
Configuration for the character gateway.

Settings are read once from the process environment (and an optional ``.env``
file) into a frozen pydantic-settings model that is passed explicitly into
the upstream client and the application factory.
"""

from enum import Enum
from typing import List, Optional

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from character_gateway.config.logging import get_logger, setup_logging, StructuredLogger
from character_gateway.utils.helpers import validate_resource_path


DEFAULT_UPSTREAM_BASE_URL = "https://anapioficeandfire.com/api"
DEFAULT_UPSTREAM_RESOURCE = "characters/3000"


class ApiKeyLocation(str, Enum):
    """Where the upstream expects the credential."""
    QUERY = "query"
    HEADER = "header"


class LogFormat(str, Enum):
    """Console log formats."""
    TEXT = "text"
    JSON = "json"


class Settings(BaseSettings):
    """Gateway settings, immutable once loaded."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    # Server
    host: str = Field(default="0.0.0.0", description="Interface to bind")
    port: int = Field(default=4000, ge=1, le=65535, description="Port to listen on")

    # Credential
    api_key: Optional[SecretStr] = Field(
        default=None,
        description="Secret credential attached to upstream calls"
    )
    api_key_location: ApiKeyLocation = Field(
        default=ApiKeyLocation.QUERY,
        description="Send the credential as a query parameter or a header"
    )
    api_key_name: str = Field(
        default="api_key",
        min_length=1,
        description="Query parameter or header name for the credential"
    )

    # Upstream
    upstream_base_url: str = Field(
        default=DEFAULT_UPSTREAM_BASE_URL,
        description="Base URL of the upstream API"
    )
    upstream_resource: str = Field(
        default=DEFAULT_UPSTREAM_RESOURCE,
        description="Resource identifier fetched by /character"
    )
    upstream_timeout: float = Field(
        default=8.0,
        gt=0,
        le=60,
        description="Overall deadline for one upstream call, in seconds"
    )

    # Logging
    log_level: str = Field(default="INFO", description="Root log level")
    log_format: LogFormat = Field(default=LogFormat.TEXT, description="Console log format")
    access_log: bool = Field(default=True, description="Enable uvicorn access logging")

    # CORS
    cors_enabled: bool = True
    cors_allow_origins: List[str] = Field(default_factory=lambda: ["*"])

    @field_validator("api_key", mode="before")
    @classmethod
    def blank_api_key_is_none(cls, value):
        """Treat an empty ``API_KEY=`` as no credential."""
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("upstream_base_url")
    @classmethod
    def check_base_url(cls, value: str) -> str:
        """Require an http(s) URL and drop any trailing slash."""
        if not value.startswith(("http://", "https://")):
            raise ValueError("upstream_base_url must be an http(s) URL")
        return value.rstrip("/")

    @field_validator("upstream_resource")
    @classmethod
    def check_resource(cls, value: str) -> str:
        """Require a relative, URL-safe resource identifier."""
        return validate_resource_path(value)

    @field_validator("log_level")
    @classmethod
    def check_log_level(cls, value: str) -> str:
        """Normalize the level name to upper case."""
        level = value.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {value}")
        return level

    @property
    def has_api_key(self) -> bool:
        return self.api_key is not None

    def api_key_value(self) -> Optional[str]:
        """Return the raw credential, for attaching to outbound calls only."""
        if self.api_key is None:
            return None
        return self.api_key.get_secret_value()


def load_settings(**overrides) -> Settings:
    """Build settings from the environment, applying explicit overrides.

    Raises:
        pydantic.ValidationError: If any value is malformed.
    """
    return Settings(**overrides)


__all__ = [
    "ApiKeyLocation",
    "LogFormat",
    "Settings",
    "load_settings",
    "get_logger",
    "setup_logging",
    "StructuredLogger",
    "DEFAULT_UPSTREAM_BASE_URL",
    "DEFAULT_UPSTREAM_RESOURCE",
]
