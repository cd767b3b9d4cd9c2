"""Generate a Markdown report of an analysis."""
from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path

from resumatch.analysis import Analysis
from resumatch.config import REPORTS_DIR
from resumatch.log import get_logger
from resumatch.models import MatchResult
from resumatch.results import STRONG_MATCH_THRESHOLD, summarize, top_matches

log = get_logger(__name__)


def _short(text: str, limit: int) -> str:
    return text[:limit] + ("…" if len(text) > limit else "")


def _heading(r: MatchResult) -> str:
    if r.job is None:
        return f"Job {r.job_id}"
    title = r.job.title or f"Job {r.job_id}"
    return f"{title} @ {r.job.company}" if r.job.company else title


def build_match_report(analysis: Analysis, results: list[MatchResult] | None = None) -> str:
    """Render *results* (default: every result of *analysis*) as Markdown."""
    results = list(analysis.results) if results is None else results
    date = datetime.now(timezone.utc).strftime("%Y-%m-%d")
    stats = summarize(results)
    extraction = analysis.extraction

    lines: list[str] = [f"# Job Match Report — {date}", ""]
    lines.append(
        f"**{stats['count']}** matches | top **{stats['top_score']}%** | "
        f"average **{stats['average_score']}%** | **{stats['strong_matches']}** strong "
        f"({STRONG_MATCH_THRESHOLD}%+)"
    )
    if analysis.used_fallback:
        lines.append("")
        lines.append("_Scores were computed locally from keyword overlap._")
    lines.append("")

    if extraction.keywords:
        lines.append(f"**Keywords:** {', '.join(extraction.keywords)}")
        lines.append("")
    for warning in extraction.warnings:
        lines.append(f"> {warning}")
    if extraction.warnings:
        lines.append("")

    strong = top_matches(results)
    if strong:
        lines.append("## Top Matches")
        lines.append("")
        for r in strong:
            lines.append(f"### {_heading(r)}")
            lines.append(f"- **Score:** {r.match_score}% — {r.recommendation}")
            if r.job is not None and r.job.location:
                lines.append(f"- **Location:** {r.job.location}")
            if r.reasons:
                lines.append(f"- **Why:** {'; '.join(r.reasons[:3])}")
            if r.missing_skills:
                lines.append(f"- **Missing:** {', '.join(r.missing_skills[:5])}")
            if r.notes:
                lines.append(f"- _Note: {r.notes}_")
            if r.job is not None and r.job.link:
                lines.append(f"- **Apply:** [Link]({r.job.link})")
            lines.append("")

    if results:
        lines.append("---")
        lines.append("")
        lines.append("## Quick Reference")
        lines.append("")
        lines.append("| # | Role | Company | Location | Score | Fit |")
        lines.append("|--:|------|---------|----------|------:|-----|")
        for i, r in enumerate(results, 1):
            job = r.job
            title = _short(job.title if job and job.title else r.job_id, 40)
            company = _short(job.company if job else "", 22)
            loc = (job.location if job else "").split(",")[0][:18]
            lines.append(f"| {i} | {title} | {company} | {loc} | {r.match_score}% | {r.recommendation} |")
        lines.append("")

    log.info("Built match report: %d results, %d strong", len(results), len(strong))
    return "\n".join(lines)


def write_report(content: str, directory: Path | None = None) -> Path:
    directory = directory or REPORTS_DIR
    directory.mkdir(parents=True, exist_ok=True)
    stamp = datetime.now(timezone.utc).strftime("%Y-%m-%d_%H%M%S")
    path = directory / f"matches_{stamp}.md"
    path.write_text(content, encoding="utf-8")
    log.info("Report written → %s", path)
    return path
