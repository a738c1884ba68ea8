"""Shared HTTP plumbing for the Concourse API clients.

Provides the requests session, URL joining, and a single request helper that
turns transport failures, error statuses and bad JSON into the upstream
exception hierarchy while emitting structured log events.
"""

import logging
from typing import Any, Dict, Optional, Tuple

import requests

from ccfeed.logging import get_logger

from .exceptions import (
    ClientConfigurationError,
    UpstreamFetchError,
    UpstreamResponseError,
    UpstreamTimeoutError,
)

logger = get_logger(__name__, component="client")

DEFAULT_USER_AGENT = "ccfeed/1.0"


class BaseClient:
    """Base class for Concourse API clients.

    Attributes:
        api_url: Concourse base URL without trailing slash
        timeout: Per-request timeout in seconds
        user_agent: User-Agent header sent with every request
    """

    def __init__(
        self,
        api_url: str,
        timeout: int = 30,
        user_agent: str = DEFAULT_USER_AGENT,
        session: Optional[requests.Session] = None,
    ) -> None:
        """Initialize the client.

        Args:
            api_url: Concourse base URL, e.g. ``https://ci.example.com``
            timeout: Request timeout in seconds (5-300)
            user_agent: User-Agent header value
            session: Optional pre-built session (shared between clients)

        Raises:
            ClientConfigurationError: If any setting is out of range or empty
        """
        if not api_url or not api_url.strip():
            raise ClientConfigurationError("api_url cannot be empty")
        if not 5 <= timeout <= 300:
            raise ClientConfigurationError(
                f"Timeout must be between 5 and 300 seconds, got: {timeout}"
            )
        if not user_agent or not user_agent.strip():
            raise ClientConfigurationError("user_agent cannot be empty")

        self.api_url = api_url.strip().rstrip("/")
        self.timeout = timeout
        self.user_agent = user_agent.strip()

        self._session = session or requests.Session()
        self._session.headers.update({"User-Agent": self.user_agent})

    def _url(self, path: str) -> str:
        return f"{self.api_url}/{path.lstrip('/')}"

    def _make_request(
        self,
        url: str,
        method: str = "GET",
        headers: Optional[Dict[str, str]] = None,
        auth: Optional[Tuple[str, str]] = None,
    ) -> Any:
        """Perform a request and return the decoded JSON body.

        Args:
            url: Absolute URL
            method: HTTP method
            headers: Extra headers (e.g. ``Authorization``)
            auth: Optional basic-auth ``(username, password)``

        Returns:
            Decoded JSON (dict or list)

        Raises:
            UpstreamFetchError: On HTTP status >= 400 or transport failure
            UpstreamTimeoutError: On timeout
            UpstreamResponseError: On a body that is not valid JSON
        """
        logger.debug(
            f"HTTP {method} request to {url}",
            extra={
                "event": "client.fetch.request",
                "method": method,
                "url": url,
                "timeout": self.timeout,
            },
        )

        try:
            response = self._session.request(
                method=method,
                url=url,
                headers=headers,
                auth=auth,
                timeout=self.timeout,
            )
        except requests.exceptions.Timeout as e:
            logger.warning(
                f"Request to {url} timed out after {self.timeout} seconds",
                extra={
                    "event": "client.fetch.error",
                    "error_type": "Timeout",
                    "url": url,
                    "timeout": self.timeout,
                },
            )
            raise UpstreamTimeoutError(
                f"Request to {url} timed out after {self.timeout} seconds", url=url
            ) from e
        except requests.exceptions.RequestException as e:
            logger.error(
                f"Request to {url} failed: {e}",
                extra={
                    "event": "client.fetch.error",
                    "error_type": type(e).__name__,
                    "url": url,
                },
            )
            raise UpstreamFetchError(f"Request to {url} failed: {e}", status_code=0, url=url) from e

        if response.status_code >= 400:
            logger.log(
                logging.WARNING if response.status_code >= 500 else logging.ERROR,
                f"HTTP {response.status_code} error from {url}",
                extra={
                    "event": "client.fetch.error",
                    "status_code": response.status_code,
                    "url": url,
                },
            )
            raise UpstreamFetchError(
                f"HTTP {response.status_code}: {response.reason}",
                status_code=response.status_code,
                url=url,
            )

        try:
            data = response.json()
        except ValueError as e:
            logger.error(
                f"Failed to parse JSON response from {url}",
                extra={
                    "event": "client.fetch.error",
                    "error_type": "JSONDecodeError",
                    "url": url,
                },
            )
            raise UpstreamResponseError(
                f"Failed to parse JSON response from {url}: {e}",
                status_code=response.status_code,
                url=url,
            ) from e

        logger.debug(
            "HTTP request succeeded",
            extra={
                "event": "client.fetch.succeeded",
                "status_code": response.status_code,
                "url": url,
            },
        )
        return data

    def close(self) -> None:
        self._session.close()
