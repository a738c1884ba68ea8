"""Domain models for upstream Concourse records and the normalized feed.

Upstream records (RawJob, RawBuild, RawResource, Pipeline, AuthToken) mirror
the Concourse API payloads. Every field Concourse may omit or send as ``null``
is a real ``Optional``; unknown keys are ignored so API additions don't break
parsing.

Normalized records (Project, JobStats, Resource) are what the feeds publish.
They serialize with camelCase keys (``lastBuildStatus``, ``webUrl``) through
``model_dump(by_alias=True)``.
"""

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class Activity(str, Enum):
    """Whether a job has a build in flight."""

    BUILDING = "Building"
    SLEEPING = "Sleeping"


class BuildStatus(str, Enum):
    """Outcome of the last finished build, as CCTray understands it."""

    SUCCESS = "Success"
    FAILURE = "Failure"


class _UpstreamModel(BaseModel):
    model_config = ConfigDict(extra="ignore")


class RawResource(_UpstreamModel):
    """An input resource version attached to a build."""

    resource_name: Optional[str] = None
    resource_type: Optional[str] = None
    version: Optional[Dict[str, Any]] = None


class RawBuild(_UpstreamModel):
    """A Concourse build summary (``next_build`` / ``finished_build``)."""

    id: Optional[int] = None
    name: Optional[str] = Field(None, description="Build label, e.g. '42'")
    status: Optional[str] = Field(None, description="succeeded, failed, errored, aborted...")
    job_name: Optional[str] = None
    pipeline_name: Optional[str] = None
    team_name: Optional[str] = None
    start_time: Optional[int] = Field(None, description="Epoch seconds")
    end_time: Optional[int] = Field(None, description="Epoch seconds")
    resources: Optional[List[RawResource]] = None


class RawJob(_UpstreamModel):
    """A job as returned by ``GET .../pipelines/{pipeline}/jobs``."""

    id: Optional[int] = None
    name: Optional[str] = None
    pipeline_name: Optional[str] = None
    team_name: Optional[str] = None
    next_build: Optional[RawBuild] = None
    finished_build: Optional[RawBuild] = None

    @property
    def has_history(self) -> bool:
        """True once the job has completed at least one build."""
        return self.finished_build is not None

    model_config = ConfigDict(
        extra="ignore",
        json_schema_extra={
            "example": {
                "id": 1,
                "name": "job1",
                "pipeline_name": "pipeline1",
                "team_name": "main",
                "next_build": None,
                "finished_build": {
                    "id": 2,
                    "name": "7",
                    "status": "succeeded",
                    "job_name": "job1",
                    "pipeline_name": "pipeline1",
                    "end_time": 1502470729,
                },
            }
        },
    )


class Pipeline(_UpstreamModel):
    """Entry of ``GET /api/v1/pipelines``."""

    name: str
    id: Optional[int] = None
    paused: Optional[bool] = None
    public: Optional[bool] = None
    team_name: Optional[str] = None


class AuthToken(_UpstreamModel):
    """Token issued by ``GET /api/v1/teams/main/auth/token``."""

    type: str = Field(..., min_length=1)
    value: str = Field(..., min_length=1)

    @property
    def header(self) -> str:
        """Value for the ``Authorization`` header, e.g. ``Bearer abc``."""
        return f"{self.type} {self.value}"


class _FeedModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    def to_feed_dict(self) -> Dict[str, Any]:
        """JSON-ready dict with camelCase keys."""
        return self.model_dump(by_alias=True, mode="json")


class Project(_FeedModel):
    """One ``<Project>`` entry of the CCTray feed."""

    name: str
    activity: Activity
    last_build_status: BuildStatus
    last_build_label: Optional[str] = None
    last_build_time: Optional[str] = None
    web_url: str


class JobStats(Project):
    """Project plus the stable ``{pipeline}-{job}-id`` identifier."""

    id: str


class Resource(_FeedModel):
    """A normalized input resource; ``version`` is passed through untouched."""

    name: Optional[str] = None
    type: Optional[str] = None
    version: Optional[Dict[str, Any]] = None
