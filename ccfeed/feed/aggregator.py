"""Fan-out of per-pipeline job listings.

Job listings for different pipelines are independent, so they are fetched on
a thread pool. The flattened result is always in pipeline order, then in the
API's job order within each pipeline, no matter which fetch finishes first.
"""

import contextvars
import time
from concurrent.futures import Future, ThreadPoolExecutor
from typing import List, Protocol, Sequence

from ccfeed.domain.models import RawJob
from ccfeed.logging import get_logger

logger = get_logger(__name__, component="aggregator")


class JobsClient(Protocol):
    """Anything that can list the jobs of a pipeline."""

    def list_jobs(self, pipeline_name: str, auth_header: str) -> List[RawJob]:
        ...


def fetch_all_jobs(
    client: JobsClient,
    pipeline_names: Sequence[str],
    auth_header: str,
    max_parallel: int = 4,
) -> List[RawJob]:
    """Fetch and concatenate the jobs of every pipeline.

    Args:
        client: Pipeline client used for the per-pipeline listing
        pipeline_names: Pipelines to fetch, in output order
        auth_header: ``Authorization`` header value
        max_parallel: Maximum concurrent requests; 1 fetches sequentially

    Returns:
        All jobs, grouped by pipeline in ``pipeline_names`` order

    Raises:
        ValueError: If max_parallel < 1
        UpstreamError: The first failure in pipeline order; no partial
            result is returned and fetches not yet started are cancelled
    """
    if max_parallel < 1:
        raise ValueError("max_parallel must be >= 1")
    if not pipeline_names:
        return []

    started = time.monotonic()
    workers = min(max_parallel, len(pipeline_names))
    logger.debug(
        f"Fetching jobs for {len(pipeline_names)} pipelines",
        extra={
            "event": "aggregator.fetch.started",
            "pipeline_count": len(pipeline_names),
            "workers": workers,
        },
    )

    pool = ThreadPoolExecutor(max_workers=workers, thread_name_prefix="ccfeed-fetch")
    try:
        # Futures stay indexed by submission order; results are read back in
        # that order so completion order never leaks into the output.
        futures: List[Future] = [
            pool.submit(
                contextvars.copy_context().run, client.list_jobs, name, auth_header
            )
            for name in pipeline_names
        ]

        jobs: List[RawJob] = []
        for name, future in zip(pipeline_names, futures):
            try:
                jobs.extend(future.result())
            except Exception as e:
                logger.error(
                    f"Fetching jobs for pipeline {name} failed: {e}",
                    extra={
                        "event": "aggregator.fetch.failed",
                        "pipeline": name,
                        "error_type": type(e).__name__,
                    },
                )
                raise
    finally:
        pool.shutdown(wait=True, cancel_futures=True)

    logger.info(
        f"Fetched {len(jobs)} jobs from {len(pipeline_names)} pipelines",
        extra={
            "event": "aggregator.fetch.completed",
            "pipeline_count": len(pipeline_names),
            "job_count": len(jobs),
            "duration_ms": int((time.monotonic() - started) * 1000),
        },
    )
    return jobs
