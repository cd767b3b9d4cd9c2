"""Logging setup shared by every resumatch module."""
from __future__ import annotations

import logging
import os
import sys
from datetime import datetime
from pathlib import Path

_DEFAULT_LOG_DIR = Path(__file__).resolve().parent.parent / "logs"
_FORMAT = "%(asctime)s  %(levelname)-8s  %(name)s  %(message)s"
_DATE_FMT = "%Y-%m-%d %H:%M:%S"

# HTTP clients and the PDF reader log every request / malformed object at INFO.
_NOISY_LOGGERS = ("httpx", "httpcore", "openai", "urllib3", "pypdf")

_console: logging.Handler | None = None
_configured = False


def get_logger(name: str) -> logging.Logger:
    """Return a named logger, configuring output from the environment on first use."""
    if not _configured:
        configure()
    return logging.getLogger(name)


def configure(level: str | None = None, *, to_file: bool | None = None) -> None:
    """Install the console (and daily file) handler.

    ``level`` defaults to ``LOG_LEVEL`` and ``to_file`` to ``LOG_TO_FILE``.
    Calling again only changes the level, so the CLI can turn on ``--verbose``
    after modules have already grabbed their loggers.
    """
    global _configured, _console
    level_name = (level or os.environ.get("LOG_LEVEL", "INFO")).upper()
    numeric = getattr(logging, level_name, logging.INFO)

    root = logging.getLogger()
    root.setLevel(numeric)
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(numeric, logging.WARNING))

    if _configured:
        if _console is not None:
            _console.setLevel(numeric)
        return
    _configured = True

    # Someone else (a test runner, an embedding app) owns the handlers.
    if root.handlers:
        return

    formatter = logging.Formatter(_FORMAT, datefmt=_DATE_FMT)
    _console = logging.StreamHandler(sys.stdout)
    _console.setLevel(numeric)
    _console.setFormatter(formatter)
    root.addHandler(_console)

    if to_file is None:
        to_file = os.environ.get("LOG_TO_FILE", "true").strip().lower() in ("1", "true", "yes", "on")
    if to_file:
        _add_file_handler(root, formatter)


def _add_file_handler(root: logging.Logger, formatter: logging.Formatter) -> None:
    custom = os.environ.get("LOG_DIR", "").strip()
    log_dir = Path(custom) if custom else _DEFAULT_LOG_DIR
    try:
        log_dir.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(log_dir / f"resumatch_{datetime.now():%Y-%m-%d}.log", encoding="utf-8")
    except OSError:
        # Read-only checkout; console output is enough.
        return
    fh.setLevel(logging.DEBUG)
    fh.setFormatter(formatter)
    root.addHandler(fh)
