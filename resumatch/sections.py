"""Heuristic, label-anchored section parsing of resume text."""
from __future__ import annotations

import re

from resumatch.dictionaries import SECTION_NAMES, Dictionaries, default_dictionaries
from resumatch.log import get_logger
from resumatch.models import Contact, EducationEntry, ExperienceEntry, Sections

log = get_logger(__name__)

EMAIL_RE = re.compile(r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}")
PHONE_RE = re.compile(r"(\+\d{1,3}[-.\s]?)?\(?\d{3}\)?[-.\s]?\d{3}[-.\s]?\d{4}")
LINKEDIN_RE = re.compile(r"linkedin\.com/in/([A-Za-z0-9_-]+)", re.IGNORECASE)
YEARS_RE = re.compile(r"(\d{1,2})\+?\s*years?\s*(?:of\s*)?experience", re.IGNORECASE)
YEAR_RANGE_RE = re.compile(
    r"\b(?:19|20)\d{2}\s*[-–—]\s*(?:(?:19|20)\d{2}|present|current)\b",
    re.IGNORECASE,
)

_SKILL_SPLIT_RE = re.compile(r"[,\n\r•●▪◦‣·*]+")
_PARAGRAPH_SPLIT_RE = re.compile(r"\n\s*\n")
_CONTACT_WORDS_RE = re.compile(r"email|phone|address", re.IGNORECASE)
_LINE_BULLETS = " \t-•●▪◦*"


def _alternation(literals: tuple[str, ...]) -> str:
    # Longest first so "work experience" wins over "experience".
    ordered = sorted(literals, key=len, reverse=True)
    return "|".join(re.escape(lit) for lit in ordered)


class SectionParser:
    """Locate contact, skills, experience, education and summary sections.

    Headings are recognised at the start of a line when followed by a colon
    (or similar separator) or the end of the line. A section's span runs to
    the next heading of a different section, or the end of the text.
    """

    def __init__(self, dictionaries: Dictionaries | None = None) -> None:
        self.dictionaries = dictionaries or default_dictionaries()
        self._label_res: dict[str, re.Pattern[str]] = {}
        for section in SECTION_NAMES:
            labels = self.dictionaries.labels_for(section)
            if labels:
                self._label_res[section] = re.compile(
                    rf"^[{re.escape(_LINE_BULLETS)}]*(?:{_alternation(labels)})[ \t]*(?:[:|\-–]|$)",
                    re.IGNORECASE | re.MULTILINE,
                )
        self._skill_res = [
            (skill, re.compile(rf"(?<!\w){re.escape(skill)}(?!\w)", re.IGNORECASE))
            for skill in self.dictionaries.common_skills
        ]
        degrees = self.dictionaries.degrees
        self._degree_re = (
            re.compile(rf"(?<!\w)(?:{_alternation(degrees)})(?!\w)", re.IGNORECASE) if degrees else None
        )

    def parse(self, text: str) -> Sections:
        text = text or ""
        spans = self._spans(text)
        sections = Sections(
            contact=self.parse_contact(text),
            skills=self._skills(spans.get("skills"), text),
            experience=self._experience(spans.get("experience", "")),
            education=self._education(spans.get("education", "")),
            summary=self._summary(spans.get("summary", ""), text),
            years_of_experience=years_of_experience(text),
        )
        log.debug(
            "Sections found: %s — skills=%d, experience=%d, education=%d",
            ", ".join(sorted(spans)) or "none",
            len(sections.skills), len(sections.experience), len(sections.education),
        )
        return sections

    # ── Span capture ─────────────────────────────────────────────────────

    def _spans(self, text: str) -> dict[str, str]:
        headings: list[tuple[int, int, str]] = []
        for section, pattern in self._label_res.items():
            for m in pattern.finditer(text):
                headings.append((m.start(), m.end(), section))
        headings.sort()

        spans: dict[str, str] = {}
        for start, end, section in headings:
            if section in spans:
                continue
            stop = len(text)
            for other_start, _, other in headings:
                if other_start >= end and other != section:
                    stop = other_start
                    break
            spans[section] = text[end:stop].strip()
        return spans

    # ── Contact ──────────────────────────────────────────────────────────

    def parse_contact(self, text: str) -> Contact:
        email = EMAIL_RE.search(text)
        phone = PHONE_RE.search(text)
        linkedin = LINKEDIN_RE.search(text)

        lines = [line.strip() for line in text.splitlines() if line.strip()]
        name = ""
        for line in lines[:5]:
            if EMAIL_RE.search(line) or PHONE_RE.search(line):
                continue
            if 3 <= len(line) < 50:
                name = line
                break

        return Contact(
            name=name,
            email=email.group(0) if email else "",
            phone=phone.group(0).strip() if phone else "",
            linkedin=linkedin.group(1) if linkedin else "",
        )

    # ── Skills ───────────────────────────────────────────────────────────

    def _skills(self, span: str | None, text: str) -> tuple[str, ...]:
        if span:
            items = (s.strip().strip(_LINE_BULLETS) for s in _SKILL_SPLIT_RE.split(span))
            found = [s for s in items if 1 < len(s) < 50]
            if found:
                return tuple(dict.fromkeys(found))
        return tuple(skill for skill, pattern in self._skill_res if pattern.search(text))

    # ── Experience / education ───────────────────────────────────────────

    @staticmethod
    def _chunks(span: str) -> list[list[str]]:
        out: list[list[str]] = []
        for chunk in YEAR_RANGE_RE.split(span):
            if len(chunk.strip()) <= 10:
                continue
            lines = [line.strip().strip(_LINE_BULLETS) for line in chunk.splitlines()]
            lines = [line for line in lines if line]
            if lines:
                out.append(lines)
        return out

    def _experience(self, span: str) -> tuple[ExperienceEntry, ...]:
        entries: list[ExperienceEntry] = []
        for lines in self._chunks(span):
            title, _, company = lines[0].partition(" at ")
            entry = ExperienceEntry(
                title=title.strip(),
                company=company.strip(),
                description="\n".join(lines[1:]).strip(),
            )
            if entry.title or entry.description:
                entries.append(entry)
        return tuple(entries)

    def _education(self, span: str) -> tuple[EducationEntry, ...]:
        entries: list[EducationEntry] = []
        for lines in self._chunks(span):
            degree = ""
            if self._degree_re is not None:
                m = self._degree_re.search(lines[0]) or self._degree_re.search(" ".join(lines))
                degree = m.group(0) if m else ""
            entry = EducationEntry(
                institution=lines[0],
                degree=degree,
                details="\n".join(lines[1:]).strip(),
            )
            entries.append(entry)
        return tuple(entries)

    # ── Summary ──────────────────────────────────────────────────────────

    @staticmethod
    def _summary(span: str, text: str) -> str:
        if span:
            return span
        for paragraph in _PARAGRAPH_SPLIT_RE.split(text):
            paragraph = paragraph.strip()
            if len(paragraph) > 50 and not _CONTACT_WORDS_RE.search(paragraph):
                return paragraph
        return ""


def years_of_experience(text: str) -> int:
    """Largest "N+ years (of) experience" figure mentioned, else 0."""
    years = 0
    for m in YEARS_RE.finditer(text or ""):
        years = max(years, int(m.group(1)))
    return years


def parse_sections(text: str) -> Sections:
    return SectionParser().parse(text)
