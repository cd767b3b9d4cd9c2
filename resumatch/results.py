"""Ranking, filtering and summary helpers for match results."""
from __future__ import annotations

from datetime import datetime
from typing import Any

from resumatch.models import MatchResult

STRONG_MATCH_THRESHOLD = 70
TOP_MATCH_LIMIT = 5

SORT_MODES: tuple[str, ...] = ("match", "date", "company")


def rank(results: list[MatchResult]) -> list[MatchResult]:
    """Descending match score; equal scores keep input order."""
    return sorted(results, key=lambda r: -r.match_score)


def top_matches(
    results: list[MatchResult],
    threshold: int = STRONG_MATCH_THRESHOLD,
    limit: int = TOP_MATCH_LIMIT,
) -> list[MatchResult]:
    return rank([r for r in results if r.match_score >= threshold])[:limit]


def _matches_search(result: MatchResult, term: str) -> bool:
    job = result.job
    haystack: list[str] = list(result.reasons)
    if job is not None:
        haystack.extend([job.title, job.company, job.description])
        haystack.extend(job.skills)
    return any(term in (s or "").lower() for s in haystack)


def filter_results(
    results: list[MatchResult],
    *,
    min_score: int = 0,
    search: str = "",
    employment_type: str = "",
    location: str = "",
) -> list[MatchResult]:
    term = search.strip().lower()
    wanted_type = employment_type.strip().lower()
    wanted_loc = location.strip().lower()

    out: list[MatchResult] = []
    for r in results:
        if min_score > 0 and r.match_score < min_score:
            continue
        if term and not _matches_search(r, term):
            continue
        if wanted_type and wanted_type != "all":
            if r.job is None or r.job.employment_type.lower() != wanted_type:
                continue
        if wanted_loc and (r.job is None or wanted_loc not in r.job.location.lower()):
            continue
        out.append(r)
    return out


def _posted(result: MatchResult) -> datetime | None:
    raw = result.job.posted_date if result.job else None
    if not raw:
        return None
    try:
        parsed = datetime.fromisoformat(raw.replace("Z", "+00:00"))
    except ValueError:
        return None
    # Compare naive and aware dates on the same footing.
    return parsed.replace(tzinfo=None)


def sort_results(results: list[MatchResult], by: str = "match") -> list[MatchResult]:
    """Sort by ``match`` (score), ``date`` (newest first) or ``company`` (A-Z).

    Results missing the sort field go last, in score order.
    """
    if by == "date":
        dated = [r for r in results if _posted(r) is not None]
        undated = [r for r in results if _posted(r) is None]
        return sorted(dated, key=_posted, reverse=True) + rank(undated)
    if by == "company":
        named = [r for r in results if r.job is not None and r.job.company]
        unnamed = [r for r in results if r.job is None or not r.job.company]
        return sorted(named, key=lambda r: r.job.company.lower()) + rank(unnamed)
    return rank(results)


def summarize(results: list[MatchResult]) -> dict[str, Any]:
    if not results:
        return {"count": 0, "top_score": 0, "average_score": 0, "strong_matches": 0}
    scores = [r.match_score for r in results]
    return {
        "count": len(results),
        "top_score": max(scores),
        "average_score": int(round(sum(scores) / len(scores))),
        "strong_matches": sum(1 for s in scores if s >= STRONG_MATCH_THRESHOLD),
    }
