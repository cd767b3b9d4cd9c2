"""Error kinds raised by the extraction and matching pipeline."""
from __future__ import annotations


class ResumatchError(Exception):
    """Base class for every pipeline error."""


class UnsupportedFormat(ResumatchError):
    """No dedicated extractor exists for the document format.

    Recovered inside the extractor by heuristic text recovery; never reaches callers.
    """


class FormatParseError(ResumatchError):
    """A structured format (tabular, rich-text container) could not be parsed."""

    def __init__(self, fmt: str, message: str) -> None:
        self.format = fmt
        super().__init__(f"Could not parse {fmt} document: {message}")


class RemoteScorerUnavailable(ResumatchError):
    """Timeout, transport failure, empty content, or a content-safety block."""


class RemoteScorerMalformedOutput(ResumatchError):
    """The remote response held no usable match entries."""


class NoInput(ResumatchError):
    """Neither a resume document nor manual skills were supplied."""


class NoJobs(ResumatchError):
    """The job source returned nothing to score against."""
