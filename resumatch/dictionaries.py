"""Fixed vocabularies for keyword and section extraction, loaded from YAML."""
from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml

from resumatch.config import DICTIONARIES_PATH
from resumatch.log import get_logger

log = get_logger(__name__)

SECTION_NAMES: tuple[str, ...] = ("contact", "skills", "experience", "education", "summary")


@dataclass(frozen=True)
class Dictionaries:
    skill_categories: tuple[tuple[str, tuple[str, ...]], ...] = ()
    job_titles: tuple[str, ...] = ()
    industries: tuple[str, ...] = ()
    education_levels: tuple[str, ...] = ()
    common_skills: tuple[str, ...] = ()
    stop_words: frozenset[str] = frozenset()
    section_labels: tuple[tuple[str, tuple[str, ...]], ...] = ()
    degrees: tuple[str, ...] = ()

    @property
    def keyword_literals(self) -> tuple[str, ...]:
        """Every dictionary-mode literal in scan order: categories, titles, industries, education."""
        out: list[str] = []
        for _, skills in self.skill_categories:
            out.extend(skills)
        out.extend(self.job_titles)
        out.extend(self.industries)
        out.extend(self.education_levels)
        return tuple(out)

    def labels_for(self, section: str) -> tuple[str, ...]:
        for name, labels in self.section_labels:
            if name == section:
                return labels
        return ()

    @classmethod
    def from_mapping(cls, data: dict[str, Any]) -> "Dictionaries":
        def words(key: str) -> tuple[str, ...]:
            return tuple(str(w).strip() for w in data.get(key) or [] if str(w).strip())

        def grouped(key: str) -> tuple[tuple[str, tuple[str, ...]], ...]:
            groups = data.get(key) or {}
            return tuple(
                (str(name), tuple(str(w).strip().lower() for w in values or [] if str(w).strip()))
                for name, values in groups.items()
            )

        return cls(
            skill_categories=grouped("skill_categories"),
            job_titles=tuple(w.lower() for w in words("job_titles")),
            industries=tuple(w.lower() for w in words("industries")),
            education_levels=tuple(w.lower() for w in words("education_levels")),
            common_skills=words("common_skills"),
            stop_words=frozenset(w.lower() for w in words("stop_words")),
            section_labels=grouped("section_labels"),
            degrees=words("degrees"),
        )


def load_dictionaries(path: Path | None = None) -> Dictionaries:
    path = path or DICTIONARIES_PATH
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    dictionaries = Dictionaries.from_mapping(data)
    log.debug(
        "Loaded dictionaries from %s — %d keyword literals, %d stop words",
        path.name, len(dictionaries.keyword_literals), len(dictionaries.stop_words),
    )
    return dictionaries


@lru_cache(maxsize=1)
def default_dictionaries() -> Dictionaries:
    """Packaged dictionaries, read once per process."""
    return load_dictionaries()
