"""Concourse API clients: token acquisition and pipeline/job listings.

API details:
    Token:     GET /api/v1/teams/main/auth/token   (HTTP basic auth)
               -> {"type": "Bearer", "value": "..."}
    Pipelines: GET /api/v1/pipelines                 (Authorization header)
    Jobs:      GET /api/v1/teams/main/pipelines/{pipeline}/jobs
    Job:       GET /api/v1/teams/main/pipelines/{pipeline}/jobs/{job}
"""

from typing import Any, List
from urllib.parse import quote

from pydantic import ValidationError

from ccfeed.domain.models import AuthToken, Pipeline, RawJob
from ccfeed.logging import get_logger

from .base import BaseClient
from .exceptions import UpstreamAuthError, UpstreamFetchError, UpstreamResponseError

logger = get_logger(__name__, component="client")

TEAM_NAME = "main"


class ConcourseAuthClient(BaseClient):
    """Exchanges basic-auth credentials for a bearer token."""

    TOKEN_PATH = f"/api/v1/teams/{TEAM_NAME}/auth/token"

    def get_token(self, username: str, password: str) -> AuthToken:
        """Request a team token.

        Args:
            username: Concourse basic-auth username
            password: Concourse basic-auth password

        Returns:
            AuthToken whose ``header`` goes into ``Authorization``

        Raises:
            UpstreamAuthError: If the request fails or the body is not a token
        """
        url = self._url(self.TOKEN_PATH)
        logger.info(
            "Requesting Concourse token",
            extra={"event": "client.auth.requested", "url": url, "username": username},
        )

        try:
            payload = self._make_request(url, auth=(username, password))
        except UpstreamFetchError as e:
            raise UpstreamAuthError(
                f"Token request failed: {e}", status_code=e.status_code, url=url
            ) from e

        try:
            token = AuthToken.model_validate(payload)
        except ValidationError as e:
            logger.error(
                "Token response did not contain a token",
                extra={"event": "client.auth.invalid_response", "url": url},
            )
            raise UpstreamAuthError(f"Invalid token response from {url}", url=url) from e

        logger.debug(
            "Concourse token acquired",
            extra={"event": "client.auth.succeeded", "token_type": token.type},
        )
        return token


class ConcoursePipelineClient(BaseClient):
    """Lists pipelines and the jobs inside them."""

    PIPELINES_PATH = "/api/v1/pipelines"
    JOBS_PATH = f"/api/v1/teams/{TEAM_NAME}/pipelines/{{pipeline}}/jobs"

    def list_pipelines(self, auth_header: str) -> List[Pipeline]:
        """Return every pipeline visible to the token, in API order."""
        url = self._url(self.PIPELINES_PATH)
        payload = self._make_request(url, headers={"Authorization": auth_header})
        pipelines = self._parse_list(payload, Pipeline, url)

        logger.info(
            "Listed pipelines",
            extra={"event": "client.pipelines.listed", "count": len(pipelines)},
        )
        return pipelines

    def list_jobs(self, pipeline_name: str, auth_header: str) -> List[RawJob]:
        """Return the jobs of one pipeline, in API order."""
        url = self._url(self.JOBS_PATH.format(pipeline=quote(pipeline_name, safe="")))
        payload = self._make_request(url, headers={"Authorization": auth_header})
        jobs = self._parse_list(payload, RawJob, url)

        logger.debug(
            "Listed jobs",
            extra={
                "event": "client.jobs.listed",
                "pipeline": pipeline_name,
                "count": len(jobs),
            },
        )
        return jobs

    def get_job(self, pipeline_name: str, job_name: str, auth_header: str) -> RawJob:
        """Return a single job."""
        url = self._url(
            self.JOBS_PATH.format(pipeline=quote(pipeline_name, safe=""))
            + f"/{quote(job_name, safe='')}"
        )
        payload = self._make_request(url, headers={"Authorization": auth_header})
        if not isinstance(payload, dict):
            raise UpstreamResponseError(
                f"Expected JSON object response, got {type(payload).__name__}", url=url
            )
        return self._validate(RawJob, payload, url)

    def _parse_list(self, payload: Any, model, url: str) -> list:
        if not isinstance(payload, list):
            raise UpstreamResponseError(
                f"Expected JSON array response, got {type(payload).__name__}", url=url
            )
        return [self._validate(model, item, url) for item in payload]

    @staticmethod
    def _validate(model, item: Any, url: str):
        try:
            return model.model_validate(item)
        except ValidationError as e:
            raise UpstreamResponseError(
                f"Unexpected {model.__name__} payload from {url}: {e.error_count()} error(s)",
                url=url,
            ) from e
