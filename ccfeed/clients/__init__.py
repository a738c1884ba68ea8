"""Concourse API clients.

    from ccfeed.clients import ConcourseAuthClient, ConcoursePipelineClient
    auth = ConcourseAuthClient("https://ci.example.com")
    token = auth.get_token("user", "secret")
    pipelines = ConcoursePipelineClient("https://ci.example.com").list_pipelines(token.header)
"""

from .base import BaseClient
from .concourse import ConcourseAuthClient, ConcoursePipelineClient
from .exceptions import (
    ClientConfigurationError,
    UpstreamAuthError,
    UpstreamError,
    UpstreamFetchError,
    UpstreamResponseError,
    UpstreamTimeoutError,
)

__all__ = [
    "BaseClient",
    "ConcourseAuthClient",
    "ConcoursePipelineClient",
    "UpstreamError",
    "UpstreamAuthError",
    "UpstreamFetchError",
    "UpstreamTimeoutError",
    "UpstreamResponseError",
    "ClientConfigurationError",
]
