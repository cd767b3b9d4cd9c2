"""Load env configuration and runtime settings."""
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from resumatch.log import get_logger

log = get_logger(__name__)

load_dotenv()

PROJECT_ROOT: Path = Path(__file__).resolve().parent.parent
DATA_DIR: Path = Path(__file__).resolve().parent / "data"
DICTIONARIES_PATH: Path = DATA_DIR / "dictionaries.yaml"
REPORTS_DIR: Path = PROJECT_ROOT / "reports"

GROQ_BASE_URL = "https://api.groq.com/openai/v1"
DEFAULT_MODEL = "llama-3.3-70b-versatile"


def get_env(key: str, default: str = "") -> str:
    return os.environ.get(key, default).strip()


def _env_int(key: str, default: int) -> int:
    raw = get_env(key)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        log.warning("Ignoring non-integer %s=%r, using %d", key, raw, default)
        return default


def _env_float(key: str, default: float) -> float:
    raw = get_env(key)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        log.warning("Ignoring non-numeric %s=%r, using %.1f", key, raw, default)
        return default


def _env_flag(key: str, default: bool = True) -> bool:
    raw = get_env(key)
    if not raw:
        return default
    return raw.lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    groq_api_key: str = ""
    model: str = DEFAULT_MODEL
    remote_timeout: float = 30.0
    prompt_max_chars: int = 8000
    prompt_max_jobs: int = 10
    fallback_job_limit: int = 6
    streaming_reader: bool = True
    structured_parsers: bool = True
    jobs_file: str = ""
    remotive_search: str = ""


def load_settings() -> Settings:
    """Build :class:`Settings` from the process environment (and ``.env``)."""
    return Settings(
        groq_api_key=get_env("GROQ_API_KEY"),
        model=get_env("GROQ_LLM_MODEL", DEFAULT_MODEL) or DEFAULT_MODEL,
        remote_timeout=_env_float("REMOTE_TIMEOUT_SECONDS", 30.0),
        prompt_max_chars=_env_int("PROMPT_MAX_CHARS", 8000),
        prompt_max_jobs=_env_int("PROMPT_MAX_JOBS", 10),
        fallback_job_limit=_env_int("FALLBACK_JOB_LIMIT", 6),
        streaming_reader=_env_flag("RESUMATCH_STREAMING_READER"),
        structured_parsers=_env_flag("RESUMATCH_STRUCTURED_PARSERS"),
        jobs_file=get_env("JOBS_FILE"),
        remotive_search=get_env("REMOTIVE_SEARCH"),
    )
