"""Configuration schema models using Pydantic."""

from enum import Enum
from urllib.parse import urlsplit

from pydantic import BaseModel, Field, field_validator


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogFormat(str, Enum):
    """Log output formats."""

    JSON = "json"
    KEY_VALUE = "key-value"


class ConcourseConfig(BaseModel):
    """Where the Concourse API lives."""

    url: str = Field(..., min_length=1, description="Concourse base URL, e.g. https://ci.example.com")

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        """Require an absolute http(s) URL and drop trailing slashes."""
        stripped = v.strip().rstrip("/")
        parts = urlsplit(stripped)
        if parts.scheme not in ("http", "https") or not parts.hostname:
            raise ValueError(f"url must be an absolute http(s) URL, got: {v!r}")
        return stripped


class ServerConfig(BaseModel):
    """HTTP listener settings."""

    host: str = Field("0.0.0.0", min_length=1, description="Interface to bind")
    port: int = Field(3000, ge=1, le=65535, description="Port to listen on")


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: LogLevel = Field(LogLevel.INFO, description="Log level")
    format: LogFormat = Field(
        LogFormat.KEY_VALUE, description="Log output format (json or key-value)"
    )

    model_config = {"use_enum_values": True}


class AdvancedConfig(BaseModel):
    """Upstream request tuning."""

    http_request_timeout: int = Field(
        30, ge=5, le=300, description="Request timeout for Concourse API calls (seconds)"
    )
    user_agent: str = Field(
        "ccfeed/1.0",
        min_length=1,
        description="User-Agent string for HTTP requests",
    )
    max_parallel_fetches: int = Field(
        4, ge=1, le=64, description="Concurrent per-pipeline job fetches (1 = sequential)"
    )

    @field_validator("user_agent")
    @classmethod
    def strip_user_agent(cls, v: str) -> str:
        stripped = v.strip()
        if not stripped:
            raise ValueError("user_agent cannot be empty")
        return stripped


class AppConfig(BaseModel):
    """Root configuration object."""

    concourse: ConcourseConfig = Field(..., description="Concourse API location")
    server: ServerConfig = Field(default_factory=ServerConfig, description="HTTP listener")
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig, description="Logging configuration"
    )
    advanced: AdvancedConfig = Field(
        default_factory=AdvancedConfig, description="Advanced runtime settings"
    )
