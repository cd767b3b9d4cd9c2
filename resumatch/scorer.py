"""Score jobs against an extraction: remote model first, local keyword overlap as fallback."""
from __future__ import annotations

import math
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeout
from dataclasses import replace
from typing import Any, Iterable

from resumatch.config import Settings
from resumatch.errors import RemoteScorerMalformedOutput, RemoteScorerUnavailable
from resumatch.log import get_logger
from resumatch.models import RECOMMENDATIONS, ExtractionResult, JobRecord, MatchResult
from resumatch.remote_scorer import RemoteScorer, build_prompt, parse_response
from resumatch.resume_parser import format_for_matching

log = get_logger(__name__)

BASELINE_SCORE = 30
MAX_FALLBACK_SCORE = 95
DEFAULT_REMOTE_SCORE = 50

# (minimum score, bucket, recommendation, phrase), first match wins.
FALLBACK_BUCKETS: list[tuple[int, str, str, str]] = [
    (75, "strong", "strong", "Strong match for your profile"),
    (60, "good", "moderate", "Good match with several of your key skills"),
    (45, "potential", "moderate", "Potential match worth exploring"),
    (0, "growth opportunity", "weak", "Growth opportunity to build new skills"),
]

# Job fields the remote response may fill in; the id is never taken from it.
_REMOTE_JOB_FIELDS: dict[str, str] = {
    "title": "title",
    "company": "company",
    "location": "location",
    "description": "description",
    "employmentType": "employment_type",
    "salary": "salary",
    "link": "link",
}


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def clamp_score(value: float) -> int:
    return max(0, min(100, _round_half_up(value)))


def coerce_score(value: Any, default: int = DEFAULT_REMOTE_SCORE) -> int:
    """Turn ``85``, ``"85%"``, ``"150"`` or ``-10`` into an int in [0, 100]."""
    if isinstance(value, bool):
        return default
    # Arbitrary-size ints from JSON would overflow float().
    if isinstance(value, int):
        return max(0, min(100, value))
    if isinstance(value, float):
        if not math.isfinite(value):
            return default
        return clamp_score(value)
    if isinstance(value, str):
        cleaned = value.strip().rstrip("%").strip()
        try:
            number = float(cleaned)
        except ValueError:
            return default
        if not math.isfinite(number):
            return default
        return clamp_score(number)
    return default


def fallback_bucket(score: int) -> tuple[str, str, str]:
    """Return (bucket, recommendation, phrase) for a fallback score."""
    for minimum, bucket, recommendation, phrase in FALLBACK_BUCKETS:
        if score >= minimum:
            return bucket, recommendation, phrase
    _, bucket, recommendation, phrase = FALLBACK_BUCKETS[-1]
    return bucket, recommendation, phrase


def fallback_scores(keywords: Iterable[str], jobs: list[JobRecord], limit: int = 6) -> list[MatchResult]:
    """Deterministic keyword-overlap scoring for the first *limit* jobs."""
    keywords = [kw.lower() for kw in keywords if kw]
    keyword_set = set(keywords)
    results: list[MatchResult] = []
    for job in jobs[:limit]:
        job_text = job.searchable_text()
        matching = [kw for kw in keywords if kw in job_text]
        if keywords:
            score = min(_round_half_up(30 + (len(matching) / len(keywords)) * 60), MAX_FALLBACK_SCORE)
        else:
            score = BASELINE_SCORE
        _, recommendation, phrase = fallback_bucket(score)

        reasons = [f"Mentions {kw}, which appears in your profile" for kw in matching[:3]]
        if not reasons:
            reasons = ["Few direct keyword overlaps; review the role requirements"]
        missing = [s for s in job.skills if s.lower() not in keyword_set]

        results.append(
            MatchResult(
                job_id=job.id,
                match_score=score,
                reasons=tuple(reasons),
                notes=phrase,
                recommendation=recommendation,
                matching_skills=tuple(matching),
                missing_skills=tuple(missing),
                source="fallback",
                job=job,
            )
        )
    return results


def _str_tuple(value: Any) -> tuple[str, ...]:
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, list):
        return ()
    return tuple(str(v).strip() for v in value if isinstance(v, (str, int, float)) and str(v).strip())


def _merge_job(job: JobRecord, entry: dict[str, Any]) -> JobRecord:
    updates: dict[str, str] = {}
    for key, attr in _REMOTE_JOB_FIELDS.items():
        value = entry.get(key)
        if isinstance(value, str) and value.strip():
            updates[attr] = value.strip()
    return replace(job, **updates) if updates else job


def merge_remote_results(entries: list[dict[str, Any]], jobs: list[JobRecord]) -> list[MatchResult]:
    """Join remote entries onto *jobs* by exact id; unknown ids are dropped."""
    by_id = {job.id: job for job in jobs}
    results: list[MatchResult] = []
    seen: set[str] = set()
    for entry in entries:
        job_id = entry.get("jobId") or entry.get("id")
        if not isinstance(job_id, str) or job_id not in by_id:
            log.debug("Dropping remote entry with unknown job id %r", job_id)
            continue
        if job_id in seen:
            continue
        seen.add(job_id)

        score = coerce_score(entry.get("matchScore", entry.get("matchPercentage")))
        recommendation = str(entry.get("recommendation") or "").strip().lower()
        if recommendation not in RECOMMENDATIONS:
            recommendation = "moderate"
        notes = entry.get("notes")
        results.append(
            MatchResult(
                job_id=job_id,
                match_score=score,
                reasons=_str_tuple(entry.get("reasons", entry.get("whyMatch"))),
                notes=notes.strip() if isinstance(notes, str) and notes.strip() else None,
                recommendation=recommendation,
                matching_skills=_str_tuple(entry.get("matchingSkills")),
                missing_skills=_str_tuple(entry.get("missingSkills")),
                source="remote",
                job=_merge_job(by_id[job_id], entry),
            )
        )
    return results


class MatchScorer:
    """Scores one analysis request; never raises, degrades to local fallback."""

    def __init__(self, remote: RemoteScorer | None = None, settings: Settings | None = None) -> None:
        self.remote = remote
        self.settings = settings or Settings()

    def score(
        self,
        extraction: ExtractionResult,
        jobs: list[JobRecord],
        manual_skills: str | Iterable[str] | None = None,
    ) -> list[MatchResult]:
        if not jobs:
            return []

        if self.remote is not None:
            try:
                results = self._score_remote(extraction, jobs, manual_skills)
                log.info("Remote scorer returned %d usable result(s)", len(results))
                return results
            except (RemoteScorerUnavailable, RemoteScorerMalformedOutput) as exc:
                log.warning("Remote scoring failed (%s), falling back to keyword overlap", exc)
            except Exception as exc:
                log.exception("Unexpected error handling remote scores (%s), falling back to keyword overlap", exc)

        results = fallback_scores(extraction.keywords, jobs, limit=self.settings.fallback_job_limit)
        log.info("Fallback scorer produced %d result(s) from %d keyword(s)", len(results), len(extraction.keywords))
        return results

    def _score_remote(
        self,
        extraction: ExtractionResult,
        jobs: list[JobRecord],
        manual_skills: str | Iterable[str] | None,
    ) -> list[MatchResult]:
        prompt_jobs = jobs[: self.settings.prompt_max_jobs]
        prompt = build_prompt(
            format_for_matching(extraction, manual_skills),
            prompt_jobs,
            max_chars=self.settings.prompt_max_chars,
            max_jobs=self.settings.prompt_max_jobs,
        )
        raw = self._call_remote(prompt)
        results = merge_remote_results(parse_response(raw), prompt_jobs)
        if not results:
            raise RemoteScorerMalformedOutput("No remote entry matched a known job id")
        return results

    def _call_remote(self, prompt: str) -> str:
        timeout = self.settings.remote_timeout
        pool = ThreadPoolExecutor(max_workers=1)
        future = pool.submit(self.remote.score, prompt)
        try:
            return future.result(timeout=timeout)
        except FutureTimeout as exc:
            future.cancel()
            raise RemoteScorerUnavailable(f"Remote scorer timed out after {timeout:.0f}s") from exc
        except RemoteScorerUnavailable:
            raise
        except Exception as exc:
            raise RemoteScorerUnavailable(f"Remote scorer error: {exc}") from exc
        finally:
            pool.shutdown(wait=False, cancel_futures=True)
