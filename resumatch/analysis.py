"""
One analysis request: resume and/or manual skills → ranked job matches.

Runs: validate input → extract → merge manual skills → fetch jobs → score → rank.
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Iterable

from resumatch.config import Settings, get_env, load_settings
from resumatch.errors import NoInput, NoJobs
from resumatch.extractor import ExtractorCapabilities, TextExtractor
from resumatch.keywords import merge_manual_skills, parse_manual_skills
from resumatch.log import get_logger
from resumatch.models import UNKNOWN, Document, ExtractionResult, JobRecord, MatchResult
from resumatch.remote_scorer import GroqScorer
from resumatch.resume_parser import parse_resume
from resumatch.results import rank
from resumatch.scorer import MatchScorer
from resumatch.sources import JobSource, get_job_source

log = get_logger(__name__)


@dataclass(frozen=True)
class Analysis:
    extraction: ExtractionResult
    results: tuple[MatchResult, ...]
    jobs_considered: int

    @property
    def used_fallback(self) -> bool:
        return any(r.source == "fallback" for r in self.results)


def fetch_jobs(source: JobSource) -> list[JobRecord]:
    """Jobs from *source*; a failing source counts as no jobs."""
    name = source.__class__.__name__
    try:
        jobs = source.get_jobs()
    except Exception as exc:
        log.error("[%s] FAILED: %s", name, exc)
        return []
    log.info("[%s] returned %d jobs", name, len(jobs))
    return list(jobs or [])


def analyze(
    document: Document | None = None,
    manual_skills: str | Iterable[str] | None = None,
    *,
    job_source: JobSource | None = None,
    scorer: MatchScorer | None = None,
    extractor: TextExtractor | None = None,
    settings: Settings | None = None,
) -> Analysis:
    """Score the job list against a resume and/or manual skills.

    Raises :class:`NoInput` when neither is given, :class:`NoJobs` when the
    job source has nothing, and lets :class:`FormatParseError` through so the
    caller can offer manual skill entry.
    """
    settings = settings or load_settings()
    manual = parse_manual_skills(manual_skills)
    has_document = document is not None and bool(document.data)
    if not has_document and not manual:
        raise NoInput("No resume or skills provided")

    if has_document:
        extractor = extractor or TextExtractor(ExtractorCapabilities.from_settings(settings))
        extraction = parse_resume(document, extractor=extractor)
    else:
        extraction = ExtractionResult(raw_text="", format=UNKNOWN)
    extraction = replace(extraction, keywords=merge_manual_skills(extraction.keywords, manual))

    jobs = fetch_jobs(job_source or get_job_source(get_env))
    if not jobs:
        raise NoJobs("No job data available")

    scorer = scorer or MatchScorer(GroqScorer.from_settings(settings), settings)
    results = rank(scorer.score(extraction, jobs, manual_skills=manual))
    log.info(
        "Analysis complete — keywords=%d, jobs=%d, results=%d",
        len(extraction.keywords), len(jobs), len(results),
    )
    return Analysis(extraction=extraction, results=tuple(results), jobs_considered=len(jobs))
