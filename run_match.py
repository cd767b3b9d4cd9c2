#!/usr/bin/env python3
"""Match a resume (and/or manual skills) against a job list.

Examples:
  python run_match.py resume.docx
  python run_match.py resume.pdf --skills "python, aws" --jobs jobs.json --min-score 60
  python run_match.py --skills "react, typescript" --json
"""
from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from resumatch.analysis import analyze
from resumatch.config import load_settings
from resumatch.errors import FormatParseError, NoInput, NoJobs
from resumatch.log import configure as configure_logging
from resumatch.log import get_logger
from resumatch.models import Document
from resumatch.report import build_match_report, write_report
from resumatch.results import SORT_MODES, filter_results, sort_results
from resumatch.sources import JsonFileSource

log = get_logger(__name__)


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Rank jobs against a resume")
    parser.add_argument("resume", nargs="?", help="Resume file (TXT, CSV, DOCX, PDF, DOC)")
    parser.add_argument("--skills", default="", help="Comma-separated skills to add")
    parser.add_argument("--jobs", help="JSON file with job listings (overrides JOBS_FILE)")
    parser.add_argument("--min-score", type=int, default=0, help="Hide matches below this score")
    parser.add_argument("--search", default="", help="Free-text filter over title, company, skills, reasons")
    parser.add_argument("--type", dest="employment_type", default="", help="Employment type, e.g. Full-time")
    parser.add_argument("--sort", choices=SORT_MODES, default="match")
    parser.add_argument("--json", action="store_true", help="Print results as JSON")
    parser.add_argument("--report", action="store_true", help="Write a Markdown report to reports/")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    args = parser.parse_args(argv)
    if args.verbose:
        configure_logging("DEBUG")

    document = None
    if args.resume:
        path = Path(args.resume)
        try:
            document = Document(data=path.read_bytes(), filename=path.name)
        except OSError as exc:
            log.error("Cannot read %s: %s", path, exc)
            return 1

    job_source = JsonFileSource(args.jobs) if args.jobs else None
    try:
        analysis = analyze(document, args.skills, job_source=job_source, settings=load_settings())
    except NoInput:
        log.error("Provide a resume file and/or --skills")
        return 2
    except FormatParseError as exc:
        log.error("%s", exc)
        log.error("Retry with --skills to enter your skills manually.")
        return 2
    except NoJobs:
        log.error("No job data available — check JOBS_FILE / REMOTIVE_SEARCH")
        return 3

    results = filter_results(
        list(analysis.results),
        min_score=args.min_score,
        search=args.search,
        employment_type=args.employment_type,
    )
    results = sort_results(results, by=args.sort)

    if args.json:
        payload = {
            "success": True,
            "extraction": analysis.extraction.to_dict(),
            "recommendations": [r.to_dict() for r in results],
        }
        print(json.dumps(payload, indent=2, ensure_ascii=False))
    else:
        content = build_match_report(analysis, results)
        print(content)
        if args.report:
            write_report(content)
    return 0


if __name__ == "__main__":
    sys.exit(main())
