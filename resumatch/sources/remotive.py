"""Remotive — free API for remote tech jobs (no API key required).

Docs: https://remotive.com/api/remote-jobs
"""
from __future__ import annotations

import html
import re

import requests

from resumatch.log import get_logger
from resumatch.models import JobRecord
from resumatch.retry import retry
from resumatch.sources.base import JobSource

log = get_logger(__name__)

API_URL = "https://remotive.com/api/remote-jobs"

_TAG_RE = re.compile(r"<[^>]+>")
_SPACE_RE = re.compile(r"\s+")


def _plain(description: str) -> str:
    return _SPACE_RE.sub(" ", html.unescape(_TAG_RE.sub(" ", description or ""))).strip()


def _employment_type(job_type: str) -> str:
    return (job_type or "").replace("_", "-").capitalize()


def job_from_hit(hit: dict) -> JobRecord | None:
    raw_id = hit.get("id")
    if raw_id in (None, ""):
        return None
    return JobRecord(
        id=f"remotive-{raw_id}",
        title=hit.get("title", "") or "",
        company=hit.get("company_name", "") or "",
        location=hit.get("candidate_required_location", "") or "Remote",
        description=_plain(hit.get("description", "")),
        skills=tuple(t for t in hit.get("tags", []) or [] if isinstance(t, str) and t.strip()),
        employment_type=_employment_type(hit.get("job_type", "")),
        salary=hit.get("salary") or None,
        link=hit.get("url") or None,
        posted_date=hit.get("publication_date") or None,
    )


class RemotiveSource(JobSource):
    def __init__(self, search: str = "", category: str = "", limit: int = 20) -> None:
        self.search = search
        self.category = category
        self.limit = limit

    @retry(max_attempts=2, base_delay=1.5)
    def _fetch(self) -> list[JobRecord]:
        params: dict = {"limit": self.limit}
        if self.search:
            params["search"] = self.search
        if self.category:
            params["category"] = self.category

        r = requests.get(API_URL, params=params, timeout=15)
        r.raise_for_status()
        data = r.json()

        jobs: list[JobRecord] = []
        seen_ids: set[str] = set()
        for hit in data.get("jobs", []):
            job = job_from_hit(hit)
            if job is None or job.id in seen_ids:
                continue
            seen_ids.add(job.id)
            jobs.append(job)
        return jobs

    def get_jobs(self) -> list[JobRecord]:
        try:
            jobs = self._fetch()
        except (requests.RequestException, OSError, ValueError) as exc:
            log.warning("Remotive search=%r error: %s", self.search, exc)
            return []
        log.debug("Remotive search=%r returned %d jobs", self.search, len(jobs))
        return jobs[: self.limit]
