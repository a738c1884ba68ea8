"""Feed assembly: one full fetch-and-map cycle per call.

Every call re-authenticates, re-lists pipelines and re-fetches all jobs; no
state survives between calls. Upstream errors propagate unchanged.
"""

import time
from dataclasses import dataclass
from typing import Callable, List, Protocol, Tuple, TypeVar

from ccfeed.domain.models import AuthToken, JobStats, Pipeline, Project, RawJob, Resource
from ccfeed.logging import get_logger
from ccfeed.logging.context import log_context, new_run_id

from .aggregator import fetch_all_jobs
from .mapper import map_job_stats, map_project, map_resources
from .models import FeedRunStats, MappingResult

logger = get_logger(__name__, component="feed")

T = TypeVar("T")


class AuthClient(Protocol):
    def get_token(self, username: str, password: str) -> AuthToken:
        ...


class PipelineClient(Protocol):
    def list_pipelines(self, auth_header: str) -> List[Pipeline]:
        ...

    def list_jobs(self, pipeline_name: str, auth_header: str) -> List[RawJob]:
        ...

    def get_job(self, pipeline_name: str, job_name: str, auth_header: str) -> RawJob:
        ...


@dataclass(frozen=True)
class Credentials:
    """Concourse basic-auth credentials."""

    username: str
    password: str

    def __repr__(self) -> str:
        return f"Credentials(username={self.username!r}, password='***')"


class FeedAssembler:
    """Builds the CCTray project list and the job-stats list.

    Collaborators and credentials are injected; nothing is read from global
    configuration.
    """

    def __init__(
        self,
        auth_client: AuthClient,
        pipeline_client: PipelineClient,
        credentials: Credentials,
        max_parallel_fetches: int = 4,
    ):
        """
        Args:
            auth_client: Issues tokens from credentials
            pipeline_client: Lists pipelines and jobs
            credentials: Basic-auth credentials for the token request
            max_parallel_fetches: Concurrency of per-pipeline job fetches
        """
        if max_parallel_fetches < 1:
            raise ValueError("max_parallel_fetches must be >= 1")
        self.auth_client = auth_client
        self.pipeline_client = pipeline_client
        self.credentials = credentials
        self.max_parallel_fetches = max_parallel_fetches

    def build_feed(self, base_uri: str) -> List[Project]:
        """Projects for the CCTray feed, in pipeline then job order."""
        return self._run("cc.xml", base_uri, map_project)

    def build_stats(self, base_uri: str) -> List[JobStats]:
        """Job stats for the JSON feed, in pipeline then job order."""
        return self._run("job-stats", base_uri, map_job_stats)

    def build_resources(self, pipeline_name: str, job_name: str) -> List[Resource]:
        """Input resources of a job's last finished build.

        A job without a finished build, or a build without resources, yields
        an empty list.
        """
        with log_context(run_id=new_run_id(), feed="resources"):
            auth_header = self._authorize()
            job = self.pipeline_client.get_job(pipeline_name, job_name, auth_header)
            finished = job.finished_build
            raw_resources = (finished.resources if finished else None) or []
            resources = map_resources(raw_resources)
            logger.info(
                "Resources listed",
                extra={
                    "event": "feed.resources.listed",
                    "pipeline": pipeline_name,
                    "job": job_name,
                    "count": len(resources),
                },
            )
            return resources

    def fetch_jobs(self) -> Tuple[List[RawJob], FeedRunStats]:
        """Authenticate, list pipelines and fetch every job."""
        stats = FeedRunStats()
        auth_header = self._authorize()
        pipelines = self.pipeline_client.list_pipelines(auth_header)
        stats.pipeline_count = len(pipelines)

        jobs = fetch_all_jobs(
            self.pipeline_client,
            [pipeline.name for pipeline in pipelines],
            auth_header,
            max_parallel=self.max_parallel_fetches,
        )
        stats.fetched_count = len(jobs)
        return jobs, stats

    def _authorize(self) -> str:
        token = self.auth_client.get_token(self.credentials.username, self.credentials.password)
        return token.header

    def _run(
        self,
        feed: str,
        base_uri: str,
        mapper: Callable[[str, RawJob], MappingResult[T]],
    ) -> List[T]:
        started = time.monotonic()
        with log_context(run_id=new_run_id(), feed=feed):
            logger.info("Feed build started", extra={"event": "feed.run.started"})

            jobs, stats = self.fetch_jobs()

            entries: List[T] = []
            for raw_job in jobs:
                result = mapper(base_uri, raw_job)
                if result.is_present:
                    entries.append(result.value)
                else:
                    stats.skipped_count += 1
            stats.mapped_count = len(entries)
            stats.duration_seconds = time.monotonic() - started

            logger.info(
                "Feed build completed",
                extra={
                    "event": "feed.run.completed",
                    "pipeline_count": stats.pipeline_count,
                    "fetched": stats.fetched_count,
                    "mapped": stats.mapped_count,
                    "skipped": stats.skipped_count,
                    "duration_ms": int(stats.duration_seconds * 1000),
                },
            )
            return entries
