"""Exceptions raised when talking to the Concourse API."""

from typing import Optional


class UpstreamError(Exception):
    """Base class for every Concourse API failure.

    Any of these aborts the current feed build; the HTTP layer maps them to
    a gateway error response.
    """

    pass


class UpstreamFetchError(UpstreamError):
    """A pipeline or job listing request failed.

    ``status_code`` is the HTTP status, or 0 when no response was received
    (connection refused, DNS failure...).
    """

    def __init__(self, message: str, status_code: int = 0, url: Optional[str] = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.url = url


class UpstreamTimeoutError(UpstreamFetchError):
    """The request did not complete within the configured timeout."""

    def __init__(self, message: str, url: Optional[str] = None) -> None:
        super().__init__(message, status_code=0, url=url)


class UpstreamResponseError(UpstreamFetchError):
    """A response arrived but its body could not be parsed or had the wrong shape."""

    pass


class UpstreamAuthError(UpstreamError):
    """Token acquisition failed.

    Wraps the underlying fetch error (available as ``__cause__``) so callers
    can tell "bad credentials / auth endpoint down" apart from listing failures.
    """

    def __init__(self, message: str, status_code: int = 0, url: Optional[str] = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.url = url


class ClientConfigurationError(UpstreamError):
    """Client constructed with invalid settings (bad timeout, empty URL...)."""

    pass
