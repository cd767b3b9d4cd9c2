"""Jobs read from a local JSON file (a list of job objects)."""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from resumatch.log import get_logger
from resumatch.models import JobRecord
from resumatch.sources.base import JobSource
from resumatch.sources.mock import SAMPLE_JOBS

log = get_logger(__name__)


def jobs_from_json(data: Any) -> list[JobRecord]:
    """Build job records, skipping entries without a usable id and duplicate ids."""
    if isinstance(data, dict):
        data = data.get("jobs") or data.get("data") or []
    if not isinstance(data, list):
        raise ValueError("Job data must be a JSON array of job objects")

    jobs: list[JobRecord] = []
    seen: set[str] = set()
    for item in data:
        if not isinstance(item, dict):
            continue
        try:
            job = JobRecord.from_dict(item)
        except ValueError as exc:
            log.warning("Skipping job record: %s", exc)
            continue
        if job.id in seen:
            log.debug("Skipping duplicate job id %r", job.id)
            continue
        seen.add(job.id)
        jobs.append(job)
    return jobs


class JsonFileSource(JobSource):
    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)

    def get_jobs(self) -> list[JobRecord]:
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                jobs = jobs_from_json(json.load(f))
        except (OSError, ValueError) as exc:
            log.error("Failed to read jobs from %s: %s — using sample jobs", self.path, exc)
            return list(SAMPLE_JOBS)
        log.info("Loaded %d jobs from %s", len(jobs), self.path.name)
        return jobs
