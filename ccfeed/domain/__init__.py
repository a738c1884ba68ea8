"""Domain models for the Concourse CCTray feed."""

from .models import (
    Activity,
    AuthToken,
    BuildStatus,
    JobStats,
    Pipeline,
    Project,
    RawBuild,
    RawJob,
    RawResource,
    Resource,
)

__all__ = [
    "Activity",
    "BuildStatus",
    "RawJob",
    "RawBuild",
    "RawResource",
    "Pipeline",
    "AuthToken",
    "Project",
    "JobStats",
    "Resource",
]
