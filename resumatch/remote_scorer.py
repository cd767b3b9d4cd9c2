"""Remote (LLM) job-match scoring: prompt building, client, tolerant parsing."""
from __future__ import annotations

import json
import re
from abc import ABC, abstractmethod
from typing import Any

import openai
from openai import OpenAI

from resumatch.config import DEFAULT_MODEL, GROQ_BASE_URL, Settings
from resumatch.errors import RemoteScorerMalformedOutput, RemoteScorerUnavailable
from resumatch.log import get_logger
from resumatch.models import JobRecord

log = get_logger(__name__)

_FENCE_RE = re.compile(r"```(?:json)?[ \t]*\n?", re.IGNORECASE)

_MATCH_PROMPT = """\
You are an expert career advisor analyzing job matches for a candidate.
The candidate's resume and skills are:
{candidate}

Here are available job listings in JSON format:
{jobs}

For EVERY job listed, return a JSON array of objects with these exact keys:
  "jobId"          : the job's "id" string copied exactly as provided
  "matchScore"     : match percentage 0-100 (number only, no % sign)
  "reasons"        : array of up to 3 short strings explaining the fit
  "matchingSkills" : candidate skills the job asks for
  "missingSkills"  : skills the job asks for that the candidate lacks
  "notes"          : string or null
  "recommendation" : "strong", "moderate", or "weak"

Return ONLY the JSON array, no prose and no markdown.
Every "jobId" MUST exactly match one of the ids above.
"""


class RemoteScorer(ABC):
    """Request/response channel to a hosted scoring model."""

    @abstractmethod
    def score(self, prompt: str) -> str:
        """Return the raw response text; raise :class:`RemoteScorerUnavailable` on failure."""


class GroqScorer(RemoteScorer):
    """OpenAI-compatible chat completion against Groq. Never retries."""

    def __init__(self, api_key: str, model: str = DEFAULT_MODEL, timeout: float = 30.0) -> None:
        self.model = model
        self._client = OpenAI(
            api_key=api_key,
            base_url=GROQ_BASE_URL,
            timeout=timeout,
            max_retries=0,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "GroqScorer | None":
        if not settings.groq_api_key:
            log.debug("No GROQ_API_KEY — remote scoring disabled")
            return None
        return cls(settings.groq_api_key, settings.model, timeout=settings.remote_timeout)

    def score(self, prompt: str) -> str:
        log.info("Scoring jobs with LLM (%s), prompt=%d chars", self.model, len(prompt))
        try:
            resp = self._client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
                max_tokens=2000,
                temperature=0.3,
            )
        except openai.APITimeoutError as exc:
            raise RemoteScorerUnavailable("Remote scorer timed out") from exc
        except openai.OpenAIError as exc:
            raise RemoteScorerUnavailable(f"Remote scorer request failed: {exc}") from exc

        if not resp.choices:
            raise RemoteScorerUnavailable("Remote scorer returned no choices")
        choice = resp.choices[0]
        if choice.finish_reason == "content_filter":
            raise RemoteScorerUnavailable("Remote scorer blocked the content")
        content = (choice.message.content or "").strip()
        if not content:
            raise RemoteScorerUnavailable("Remote scorer returned empty content")
        return content


def build_prompt(
    candidate_text: str,
    jobs: list[JobRecord],
    *,
    max_chars: int = 8000,
    max_jobs: int = 10,
) -> str:
    trimmed_jobs = json.dumps([job.to_dict() for job in jobs[:max_jobs]], indent=2, ensure_ascii=False)
    return _MATCH_PROMPT.format(candidate=candidate_text[:max_chars], jobs=trimmed_jobs)


def parse_response(raw: str) -> list[dict[str, Any]]:
    """Pull the JSON array out of *raw*, tolerating prose and code fences.

    Non-object elements are discarded. Raises
    :class:`RemoteScorerMalformedOutput` when no array can be parsed.
    """
    content = _FENCE_RE.sub("", (raw or "").strip()).strip()
    start = content.find("[")
    end = content.rfind("]")
    if start == -1 or end <= start:
        raise RemoteScorerMalformedOutput("No JSON array in remote response")
    try:
        data = json.loads(content[start:end + 1])
    except (ValueError, RecursionError) as exc:
        raise RemoteScorerMalformedOutput(f"Remote response is not valid JSON: {exc}") from exc
    if not isinstance(data, list):
        raise RemoteScorerMalformedOutput("Remote response is not a JSON array")

    entries = [item for item in data if isinstance(item, dict)]
    if len(entries) < len(data):
        log.debug("Dropped %d non-object entries from remote response", len(data) - len(entries))
    return entries
