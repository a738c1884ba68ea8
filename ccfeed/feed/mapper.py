"""Mapping of raw Concourse jobs to CCTray projects and job stats.

Rules:
- A job without a finished build has no "last build" and is skipped, even
  when a build is currently running.
- ``activity`` is Building while a next build exists, Sleeping otherwise.
- ``failed`` and ``errored`` builds are failures; every other status,
  including unknown ones, counts as success.
- Web links always point at the ``main`` team.

Malformed builds (missing status, time or id) are not rejected: the missing
values flow through to the output as-is.
"""

from typing import Any, Iterable, List, Mapping, Optional, Union
from urllib.parse import quote, urlsplit

from ccfeed.domain.models import (
    Activity,
    BuildStatus,
    JobStats,
    Project,
    RawJob,
    RawResource,
    Resource,
)
from ccfeed.logging import get_logger
from ccfeed.utils.timestamps import epoch_to_iso

from .models import SKIP_NO_HISTORY, MappingResult

logger = get_logger(__name__, component="mapper")

TEAM_NAME = "main"
FAILURE_STATUSES = frozenset({"failed", "errored"})

_DEFAULT_PORTS = {"http": 80, "https": 443}


def normalize_status(raw_status: Optional[str]) -> BuildStatus:
    """Collapse a Concourse build status to Success or Failure.

    Example:
        >>> normalize_status("errored")
        <BuildStatus.FAILURE: 'Failure'>
        >>> normalize_status("succeeded")
        <BuildStatus.SUCCESS: 'Success'>
    """
    if raw_status in FAILURE_STATUSES:
        return BuildStatus.FAILURE
    return BuildStatus.SUCCESS


def uri_origin(base_uri: str) -> str:
    """Scheme and host (plus non-default port) of ``base_uri``.

    Example:
        >>> uri_origin("https://ci.example.com/api/v1/")
        'https://ci.example.com'
    """
    parts = urlsplit(base_uri)
    scheme = parts.scheme.lower()
    host = parts.hostname or ""
    if ":" in host:
        host = f"[{host}]"
    port = parts.port
    if port is not None and port != _DEFAULT_PORTS.get(scheme):
        host = f"{host}:{port}"
    return f"{scheme}://{host}"


def build_web_url(base_uri: str, pipeline_name: Any, job_name: Any, build_id: Any) -> str:
    """Link to a build in the Concourse web UI."""
    return (
        f"{uri_origin(base_uri)}/teams/{TEAM_NAME}"
        f"/pipelines/{_segment(pipeline_name)}"
        f"/jobs/{_segment(job_name)}"
        f"/builds/{_segment(build_id)}"
    )


def _segment(value: Any) -> str:
    return quote(str(value), safe="")


def _project_fields(base_uri: str, raw_job: RawJob) -> dict:
    finished = raw_job.finished_build
    return {
        "name": f"{raw_job.pipeline_name}#{raw_job.name}",
        "activity": Activity.BUILDING if raw_job.next_build is not None else Activity.SLEEPING,
        "last_build_status": normalize_status(finished.status),
        "last_build_label": finished.pipeline_name,
        "last_build_time": epoch_to_iso(finished.end_time),
        "web_url": build_web_url(base_uri, raw_job.pipeline_name, raw_job.name, finished.id),
    }


def _skip(raw_job: RawJob) -> MappingResult:
    logger.debug(
        "Skipping job without build history",
        extra={
            "event": "mapper.job.skipped",
            "pipeline": raw_job.pipeline_name,
            "job": raw_job.name,
            "reason": SKIP_NO_HISTORY,
        },
    )
    return MappingResult.skipped(raw_job, SKIP_NO_HISTORY)


def map_project(base_uri: str, raw_job: RawJob) -> MappingResult[Project]:
    """Map a job to its CCTray ``Project`` entry.

    Args:
        base_uri: Concourse URL; only its origin is used, for ``webUrl``
        raw_job: Job as returned by the pipeline jobs endpoint

    Returns:
        MappingResult holding the Project, or skipped when the job has
        never finished a build
    """
    if not raw_job.has_history:
        return _skip(raw_job)
    return MappingResult.of(raw_job, Project(**_project_fields(base_uri, raw_job)))


def map_job_stats(base_uri: str, raw_job: RawJob) -> MappingResult[JobStats]:
    """Map a job to its ``JobStats`` entry (a Project plus a stable id)."""
    if not raw_job.has_history:
        return _skip(raw_job)
    return MappingResult.of(
        raw_job,
        JobStats(
            id=f"{raw_job.pipeline_name}-{raw_job.name}-id",
            **_project_fields(base_uri, raw_job),
        ),
    )


def map_resources(
    raw_resources: Iterable[Union[RawResource, Mapping[str, Any]]],
) -> List[Resource]:
    """Map build input resources one-to-one, preserving order.

    ``version`` is copied verbatim; its shape depends on the resource type
    (``{"ref": "abc123"}`` for git, ``{"number": "0.1.0"}`` for semver...).
    """
    resources = []
    for raw in raw_resources:
        if not isinstance(raw, RawResource):
            raw = RawResource.model_validate(raw)
        resources.append(
            Resource(name=raw.resource_name, type=raw.resource_type, version=raw.version)
        )
    return resources
