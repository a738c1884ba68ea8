"""Environment variable loading and validation.

Secrets never live in the YAML file; they come from the environment (a
``.env`` file is loaded into it by the entry point).
"""

import os
from typing import Optional
from urllib.parse import urlsplit

from .exceptions import ConfigurationError

VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class EnvironmentConfig:
    """Environment variable configuration holder."""

    def __init__(
        self,
        concourse_username: str,
        concourse_password: str,
        concourse_url: Optional[str] = None,
        log_level: Optional[str] = None,
        port: Optional[int] = None,
    ):
        self.concourse_username = concourse_username
        self.concourse_password = concourse_password
        self.concourse_url = concourse_url
        self.log_level = log_level
        self.port = port

    def __repr__(self) -> str:
        return (
            f"EnvironmentConfig(concourse_username={self.concourse_username!r}, "
            f"concourse_password='***', concourse_url={self.concourse_url!r}, "
            f"log_level={self.log_level!r}, port={self.port!r})"
        )


def load_environment_config() -> EnvironmentConfig:
    """
    Load and validate environment variables.

    Required:
    - CONCOURSE_USERNAME: basic-auth user for the token request
    - CONCOURSE_PASSWORD: basic-auth password

    Optional:
    - CONCOURSE_URL: overrides ``concourse.url`` from the config file
    - LOG_LEVEL: overrides ``logging.level``
    - PORT: overrides ``server.port``

    Raises:
        ConfigurationError: If required variables are missing or values are invalid
    """
    errors = []

    username = os.getenv("CONCOURSE_USERNAME")
    password = os.getenv("CONCOURSE_PASSWORD")
    concourse_url = os.getenv("CONCOURSE_URL") or None
    log_level = os.getenv("LOG_LEVEL") or None
    port_str = os.getenv("PORT") or None

    if not username:
        errors.append("Missing required environment variable: CONCOURSE_USERNAME")
    if not password:
        errors.append("Missing required environment variable: CONCOURSE_PASSWORD")

    if concourse_url:
        parts = urlsplit(concourse_url.strip())
        if parts.scheme not in ("http", "https") or not parts.hostname:
            errors.append(f"Invalid CONCOURSE_URL: '{concourse_url}'. Must be an http(s) URL.")
        concourse_url = concourse_url.strip().rstrip("/")

    if log_level and log_level.upper() not in VALID_LOG_LEVELS:
        errors.append(
            f"Invalid LOG_LEVEL: '{log_level}'. Must be one of: {', '.join(VALID_LOG_LEVELS)}"
        )

    port = None
    if port_str:
        try:
            port = int(port_str)
            if not 1 <= port <= 65535:
                errors.append(f"Invalid PORT: {port}. Must be between 1 and 65535.")
        except ValueError:
            errors.append(f"Invalid PORT: '{port_str}'. Must be a valid integer.")

    if errors:
        raise ConfigurationError(
            "Environment variable validation failed",
            errors=errors,
            suggestions=[
                "Copy .env.example to .env and fill in your Concourse credentials",
                "Ensure all required environment variables are set",
            ],
        )

    return EnvironmentConfig(
        concourse_username=username,
        concourse_password=password,
        concourse_url=concourse_url,
        log_level=log_level.upper() if log_level else None,
        port=port,
    )
