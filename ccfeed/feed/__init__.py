"""Mapping and assembly of the CCTray and job-stats feeds.

- mapper: RawJob -> Project / JobStats, build status normalization, resources
- aggregator: concurrent per-pipeline job fetch with ordered reassembly
- assembler: FeedAssembler, the per-request fetch-and-map cycle
"""

from .aggregator import fetch_all_jobs
from .assembler import Credentials, FeedAssembler
from .mapper import map_job_stats, map_project, map_resources, normalize_status
from .models import FeedRunStats, MappingResult

__all__ = [
    "FeedAssembler",
    "Credentials",
    "fetch_all_jobs",
    "map_project",
    "map_job_stats",
    "map_resources",
    "normalize_status",
    "MappingResult",
    "FeedRunStats",
]
