"""Data models for documents, extraction results, jobs and matches."""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import PurePath
from typing import Any

PLAIN_TEXT = "plain-text"
TABULAR = "tabular"
RICH_TEXT = "rich-text-container"
BINARY = "binary"
UNKNOWN = "unknown"

FORMATS: tuple[str, ...] = (PLAIN_TEXT, TABULAR, RICH_TEXT, BINARY, UNKNOWN)

_EXTENSION_FORMATS: dict[str, str] = {
    ".txt": PLAIN_TEXT,
    ".text": PLAIN_TEXT,
    ".md": PLAIN_TEXT,
    ".csv": TABULAR,
    ".tsv": TABULAR,
    ".docx": RICH_TEXT,
    ".pdf": BINARY,
    ".doc": BINARY,
    ".rtf": BINARY,
}

_MIME_FORMATS: dict[str, str] = {
    "text/plain": PLAIN_TEXT,
    "text/markdown": PLAIN_TEXT,
    "text/csv": TABULAR,
    "text/tab-separated-values": TABULAR,
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document": RICH_TEXT,
    "application/pdf": BINARY,
    "application/msword": BINARY,
    "application/rtf": BINARY,
}

RECOMMENDATIONS: tuple[str, ...] = ("strong", "moderate", "weak")


@dataclass(frozen=True)
class Document:
    """Raw upload: bytes plus whatever the transport told us about its type."""

    data: bytes
    filename: str = ""
    declared_type: str = ""

    @property
    def extension(self) -> str:
        return PurePath(self.filename).suffix.lower() if self.filename else ""

    @property
    def format(self) -> str:
        declared = self.declared_type.split(";")[0].strip().lower()
        if declared in FORMATS:
            return declared
        if declared in _MIME_FORMATS:
            return _MIME_FORMATS[declared]
        return _EXTENSION_FORMATS.get(self.extension, UNKNOWN)


@dataclass(frozen=True)
class Contact:
    name: str = ""
    email: str = ""
    phone: str = ""
    linkedin: str = ""

    @property
    def has_contact(self) -> bool:
        return bool(self.email or self.phone)


@dataclass(frozen=True)
class ExperienceEntry:
    title: str
    company: str = ""
    description: str = ""


@dataclass(frozen=True)
class EducationEntry:
    institution: str
    degree: str = ""
    details: str = ""


@dataclass(frozen=True)
class Sections:
    contact: Contact = field(default_factory=Contact)
    skills: tuple[str, ...] = ()
    experience: tuple[ExperienceEntry, ...] = ()
    education: tuple[EducationEntry, ...] = ()
    summary: str = ""
    years_of_experience: int = 0

    @property
    def has_structure(self) -> bool:
        return bool(self.skills or self.experience or self.education)

    def to_dict(self) -> dict[str, Any]:
        return {
            "contact": {
                "name": self.contact.name,
                "email": self.contact.email,
                "phone": self.contact.phone,
                "linkedin": self.contact.linkedin,
            },
            "skills": list(self.skills),
            "experience": [
                {"title": e.title, "company": e.company, "description": e.description}
                for e in self.experience
            ],
            "education": [
                {"degree": e.degree, "institution": e.institution, "details": e.details}
                for e in self.education
            ],
            "summary": self.summary,
        }


@dataclass(frozen=True)
class ExtractionResult:
    raw_text: str
    keywords: tuple[str, ...] = ()
    sections: Sections | None = None
    format: str = UNKNOWN
    filename: str = ""
    low_confidence: bool = False
    warnings: tuple[str, ...] = ()

    @property
    def text_length(self) -> int:
        return len(self.raw_text)

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "rawText": self.raw_text,
            "textLength": self.text_length,
            "keywords": list(self.keywords),
            "format": self.format,
            "lowConfidence": self.low_confidence,
            "warnings": list(self.warnings),
        }
        if self.sections is not None:
            out["sections"] = self.sections.to_dict()
            contact = self.sections.contact
            out["basicInfo"] = {
                "name": contact.name,
                "email": contact.email,
                "phone": contact.phone,
                "yearsOfExperience": self.sections.years_of_experience,
                "hasContact": contact.has_contact,
            }
        return out


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _str_list(value: Any) -> tuple[str, ...]:
    if isinstance(value, str):
        value = value.split(",")
    if not isinstance(value, (list, tuple)):
        return ()
    return tuple(s for s in (_text(v) for v in value) if s)


@dataclass(frozen=True)
class JobRecord:
    id: str
    title: str = ""
    company: str = ""
    location: str = ""
    description: str = ""
    skills: tuple[str, ...] = ()
    employment_type: str = ""
    salary: str | None = None
    link: str | None = None
    posted_date: str | None = None
    requirements: tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "JobRecord":
        """Build from a camelCase or snake_case mapping; ``id`` is kept byte-exact."""
        job_id = data.get("id")
        if not isinstance(job_id, str) or not job_id:
            raise ValueError(f"Job record needs a non-empty string id, got {job_id!r}")
        return cls(
            id=job_id,
            title=_text(data.get("title")),
            company=_text(data.get("company")),
            location=_text(data.get("location")),
            description=_text(data.get("description")),
            skills=_str_list(data.get("skills")),
            employment_type=_text(data.get("employmentType") or data.get("employment_type")),
            salary=_text(data.get("salary")) or None,
            link=_text(data.get("link") or data.get("url")) or None,
            posted_date=_text(data.get("postedDate") or data.get("posted_date")) or None,
            requirements=_str_list(data.get("requirements")),
        )

    def searchable_text(self) -> str:
        return " ".join([self.title, self.description, " ".join(self.skills)]).lower()

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "id": self.id,
            "title": self.title,
            "company": self.company,
            "location": self.location,
            "description": self.description,
            "skills": list(self.skills),
            "employmentType": self.employment_type,
        }
        if self.requirements:
            out["requirements"] = list(self.requirements)
        if self.salary:
            out["salary"] = self.salary
        if self.link:
            out["link"] = self.link
        if self.posted_date:
            out["postedDate"] = self.posted_date
        return out


@dataclass(frozen=True)
class MatchResult:
    job_id: str
    match_score: int
    reasons: tuple[str, ...] = ()
    notes: str | None = None
    recommendation: str = "moderate"
    matching_skills: tuple[str, ...] = ()
    missing_skills: tuple[str, ...] = ()
    source: str = "fallback"
    job: JobRecord | None = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = self.job.to_dict() if self.job else {}
        out.update(
            {
                "jobId": self.job_id,
                "matchScore": self.match_score,
                "reasons": list(self.reasons),
                "notes": self.notes,
                "recommendation": self.recommendation,
                "matchingSkills": list(self.matching_skills),
                "missingSkills": list(self.missing_skills),
                "source": self.source,
            }
        )
        return out
