"""Extract an :class:`ExtractionResult` from an uploaded resume.

Text extraction, optional section parsing and keyword derivation are chained
here; each step is swappable so tests (or a future ML parser) can replace one
without touching the others.
"""
from __future__ import annotations

from dataclasses import replace
from typing import Iterable

from resumatch.extractor import TextExtractor
from resumatch.keywords import KeywordExtractor, parse_manual_skills
from resumatch.log import get_logger
from resumatch.models import Document, ExtractionResult
from resumatch.sections import SectionParser, years_of_experience

log = get_logger(__name__)


def parse_resume(
    document: Document,
    *,
    extractor: TextExtractor | None = None,
    section_parser: SectionParser | None = None,
    keyword_extractor: KeywordExtractor | None = None,
    with_sections: bool = True,
) -> ExtractionResult:
    """Extract text, sections and keywords from *document*.

    Raises :class:`~resumatch.errors.FormatParseError` when a CSV or DOCX
    upload cannot be parsed; every other failure degrades to placeholder text.
    """
    extractor = extractor or TextExtractor()
    keyword_extractor = keyword_extractor or KeywordExtractor()

    log.info("Extracting text from %s", document.filename or "<upload>")
    extracted = extractor.read(document)

    sections = None
    if with_sections and not extracted.low_confidence:
        sections = (section_parser or SectionParser(keyword_extractor.dictionaries)).parse(extracted.text)

    result = ExtractionResult(
        raw_text=extracted.text,
        sections=sections,
        format=extracted.format,
        filename=document.filename,
        low_confidence=extracted.low_confidence,
        warnings=extracted.warnings,
    )
    keywords = keyword_extractor.extract(result)
    result = replace(result, keywords=keywords)
    log.info("Extraction complete — text=%d chars, keywords=%d", result.text_length, len(keywords))
    return result


def format_for_matching(extraction: ExtractionResult, manual_skills: str | Iterable[str] | None = None) -> str:
    """Candidate text handed to the remote scorer."""
    text = extraction.raw_text
    if extraction.keywords:
        text += f"\n\nExtracted Skills: {', '.join(extraction.keywords)}"
    years = (
        extraction.sections.years_of_experience
        if extraction.sections is not None
        else years_of_experience(extraction.raw_text)
    )
    if years > 0:
        text += f"\n\nYears of Experience: {years}"
    manual = parse_manual_skills(manual_skills)
    if manual:
        text += f"\nSkills: {', '.join(manual)}"
    return text.strip()
