"""Derive normalized keyword/skill tokens from resume text or sections."""
from __future__ import annotations

import re
from collections import Counter
from typing import Iterable, Union

from resumatch.dictionaries import Dictionaries, default_dictionaries
from resumatch.log import get_logger
from resumatch.models import ExtractionResult, Sections

log = get_logger(__name__)

DICTIONARY = "dictionary"
FREQUENCY = "frequency"

FREQUENCY_LIMIT = 20
_MIN_TOKEN_LEN = 3
_TOKEN_SPLIT_RE = re.compile(r"\W+")

KeywordSource = Union[str, ExtractionResult]


def normalize_keyword(value: str) -> str:
    return (value or "").strip().lower()


def _ordered_set(values: Iterable[str]) -> tuple[str, ...]:
    """Normalize, drop anything shorter than 2 chars, de-duplicate in order."""
    out: dict[str, None] = {}
    for value in values:
        kw = normalize_keyword(value)
        if len(kw) >= 2:
            out.setdefault(kw, None)
    return tuple(out)


class KeywordExtractor:
    """Dictionary lookups for raw text, frequency ranking for structured sections."""

    def __init__(self, dictionaries: Dictionaries | None = None, limit: int = FREQUENCY_LIMIT) -> None:
        self.dictionaries = dictionaries or default_dictionaries()
        self.limit = limit

    def extract(self, source: KeywordSource, mode: str | None = None) -> tuple[str, ...]:
        if isinstance(source, ExtractionResult):
            sections = source.sections
            if mode is None:
                mode = FREQUENCY if sections is not None and sections.has_structure else DICTIONARY
            if mode == FREQUENCY:
                corpus = section_corpus(sections) if sections is not None and sections.has_structure else source.raw_text
                return self.frequency_keywords(corpus)
            return self.dictionary_keywords(source.raw_text)

        text = source if isinstance(source, str) else ""
        if mode == FREQUENCY:
            return self.frequency_keywords(text)
        return self.dictionary_keywords(text)

    def dictionary_keywords(self, text: str) -> tuple[str, ...]:
        """Every dictionary literal occurring in *text*, in dictionary order."""
        low = (text or "").lower()
        if not low:
            return ()
        return _ordered_set(lit for lit in self.dictionaries.keyword_literals if lit in low)

    def frequency_keywords(self, corpus: str) -> tuple[str, ...]:
        """Top tokens by count; ties keep first-occurrence order."""
        tokens = [
            tok
            for tok in _TOKEN_SPLIT_RE.split((corpus or "").lower())
            if len(tok) >= _MIN_TOKEN_LEN and tok not in self.dictionaries.stop_words
        ]
        counts = Counter(tokens)
        return tuple(tok for tok, _ in counts.most_common(self.limit))


def section_corpus(sections: Sections) -> str:
    parts: list[str] = list(sections.skills)
    for exp in sections.experience:
        parts.extend([exp.title, exp.company, exp.description])
    for edu in sections.education:
        parts.extend([edu.degree, edu.institution])
    return " ".join(p for p in parts if p)


def parse_manual_skills(manual: str | Iterable[str] | None) -> tuple[str, ...]:
    """Comma-separated free text (or a list) into normalized skill tokens."""
    if not manual:
        return ()
    items = manual.split(",") if isinstance(manual, str) else list(manual)
    return _ordered_set(items)


def merge_manual_skills(keywords: Iterable[str], manual: str | Iterable[str] | None) -> tuple[str, ...]:
    """Union extracted keywords with manual skills, which are never re-tokenized."""
    merged = _ordered_set(list(keywords) + list(parse_manual_skills(manual)))
    log.debug("Merged manual skills — %d keywords total", len(merged))
    return merged


def extract_keywords(source: KeywordSource, mode: str | None = None) -> tuple[str, ...]:
    return KeywordExtractor().extract(source, mode=mode)
