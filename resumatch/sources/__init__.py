from .base import JobSource
from .file import JsonFileSource, jobs_from_json
from .mock import SAMPLE_JOBS, SampleSource
from .remotive import RemotiveSource

from resumatch.log import get_logger

log = get_logger(__name__)

__all__ = [
    "JobSource", "JsonFileSource", "SampleSource", "RemotiveSource",
    "SAMPLE_JOBS", "jobs_from_json", "get_job_source",
]


def get_job_source(env_getter) -> JobSource:
    jobs_file = env_getter("JOBS_FILE")
    if jobs_file:
        log.info("Registered source: JSON file (%s)", jobs_file)
        return JsonFileSource(jobs_file)

    search = env_getter("REMOTIVE_SEARCH")
    if search:
        log.info("Registered source: Remotive (search=%r)", search)
        return RemotiveSource(search=search)

    log.info("No job feed configured — using SampleSource")
    return SampleSource()
