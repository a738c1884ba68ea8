"""Result types for the feed mapping layer."""

from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

from ccfeed.domain.models import RawJob

T = TypeVar("T")

SKIP_NO_HISTORY = "no_finished_build"


@dataclass(frozen=True)
class MappingResult(Generic[T]):
    """Outcome of mapping one RawJob.

    A job either maps to a feed entry (``value`` set) or is skipped with a
    ``skip_reason``. Skipping is not an error: a job that has never finished
    a build simply has nothing to report yet.

    Attributes:
        raw_job: The upstream record that was mapped
        value: The Project/JobStats entry, or None when skipped
        skip_reason: Why no entry was produced (e.g. ``no_finished_build``)
    """

    raw_job: RawJob
    value: Optional[T] = None
    skip_reason: Optional[str] = None

    @property
    def is_present(self) -> bool:
        return self.value is not None

    @classmethod
    def of(cls, raw_job: RawJob, value: T) -> "MappingResult[T]":
        return cls(raw_job=raw_job, value=value)

    @classmethod
    def skipped(cls, raw_job: RawJob, reason: str) -> "MappingResult[T]":
        return cls(raw_job=raw_job, skip_reason=reason)


@dataclass
class FeedRunStats:
    """Counters for one fetch-and-map cycle.

    Attributes:
        pipeline_count: Pipelines listed upstream
        fetched_count: Jobs returned across all pipelines
        mapped_count: Jobs that produced a feed entry
        skipped_count: Jobs dropped for lack of build history
        duration_seconds: Wall time of the cycle
    """

    pipeline_count: int = 0
    fetched_count: int = 0
    mapped_count: int = 0
    skipped_count: int = 0
    duration_seconds: float = 0.0
