"""Built-in sample jobs, used when no job feed is configured or readable."""
from __future__ import annotations

from resumatch.log import get_logger
from resumatch.models import JobRecord
from resumatch.sources.base import JobSource

log = get_logger(__name__)

SAMPLE_JOBS: tuple[JobRecord, ...] = (
    JobRecord(
        id="job1",
        title="Senior React Developer",
        company="Tech Innovations Inc.",
        location="Remote",
        description="Looking for an experienced React developer to lead our frontend team.",
        requirements=("5+ years React", "JavaScript expertise", "Team leadership"),
        skills=("React", "JavaScript", "Redux", "CSS"),
        employment_type="Full-time",
    ),
    JobRecord(
        id="job2",
        title="Full Stack Engineer",
        company="Web Solutions LLC",
        location="New York, NY",
        description="Full stack role working with modern JavaScript frameworks.",
        requirements=("3+ years experience", "Node.js and React", "AWS knowledge"),
        skills=("JavaScript", "Node.js", "React", "AWS"),
        employment_type="Full-time",
    ),
)


class SampleSource(JobSource):
    def get_jobs(self) -> list[JobRecord]:
        log.info("SampleSource returning %d built-in jobs", len(SAMPLE_JOBS))
        return list(SAMPLE_JOBS)
