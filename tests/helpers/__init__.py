"""Test helper utilities for ccfeed tests."""

from .builders import (
    FINISHED_AT,
    build_empty_job,
    build_finished_build_for,
    build_job_for,
    build_jobs_for,
    build_pipelines_for,
    build_resource_for,
    raw_job_for,
    raw_jobs_for,
)

__all__ = [
    "FINISHED_AT",
    "build_empty_job",
    "build_finished_build_for",
    "build_job_for",
    "build_jobs_for",
    "build_pipelines_for",
    "build_resource_for",
    "raw_job_for",
    "raw_jobs_for",
]
