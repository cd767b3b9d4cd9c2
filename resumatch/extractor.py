"""Turn uploaded resume documents into plain text.

Plain text is decoded as-is, CSV/TSV is flattened row by row, DOCX is read
either with python-docx or with stdlib zipfile + xml, and PDF pages are read
with pypdf. Anything else goes through a printable-run heuristic whose output
is flagged as low confidence.
"""
from __future__ import annotations

import csv
import io
import re
import zipfile
from dataclasses import dataclass, field
from xml.etree import ElementTree

import docx
from pypdf import PdfReader

from resumatch.config import Settings
from resumatch.errors import FormatParseError, UnsupportedFormat
from resumatch.log import get_logger
from resumatch.models import BINARY, PLAIN_TEXT, RICH_TEXT, TABULAR, Document

log = get_logger(__name__)

PLACEHOLDER_TEXT = (
    "Could not recover readable text from this file. "
    "Please upload a TXT or DOCX version, or enter your skills manually."
)

_PRINTABLE_RUN_RE = re.compile(r"[A-Za-z0-9@.,;:+#&()'/\-\s]{10,}")
_WHITESPACE_RE = re.compile(r"\s+")
_MIN_USEFUL_CHARS = 50
_WORD_NS = {"w": "http://schemas.openxmlformats.org/wordprocessingml/2006/main"}


@dataclass(frozen=True)
class ExtractorCapabilities:
    """What the running environment can read.

    ``streaming_reader``: page-level PDF reading through pypdf.
    ``structured_parsers``: DOCX through python-docx instead of raw zip/xml.
    """

    streaming_reader: bool = True
    structured_parsers: bool = True

    @classmethod
    def from_settings(cls, settings: Settings) -> "ExtractorCapabilities":
        return cls(
            streaming_reader=settings.streaming_reader,
            structured_parsers=settings.structured_parsers,
        )


@dataclass(frozen=True)
class ExtractedText:
    text: str
    format: str
    low_confidence: bool = False
    warnings: tuple[str, ...] = field(default_factory=tuple)


class TextExtractor:
    def __init__(self, capabilities: ExtractorCapabilities | None = None) -> None:
        self.capabilities = capabilities or ExtractorCapabilities()

    def extract(self, document: Document) -> str:
        return self.read(document).text

    def read(self, document: Document) -> ExtractedText:
        """Extract text; raises :class:`FormatParseError` only for CSV/DOCX."""
        fmt = document.format
        try:
            reader = self._reader_for(fmt)
        except UnsupportedFormat as exc:
            log.info("%s — using heuristic recovery", exc)
            return self._recover(document.data, fmt)

        result = reader(document.data)
        if len(result.text.strip()) < _MIN_USEFUL_CHARS and not result.low_confidence:
            result = ExtractedText(
                text=result.text,
                format=result.format,
                low_confidence=result.low_confidence,
                warnings=result.warnings + ("Limited text extracted; consider entering skills manually.",),
            )
        log.info(
            "Extracted %d chars from %s (%s%s)",
            len(result.text), document.filename or "<upload>", fmt,
            ", low confidence" if result.low_confidence else "",
        )
        return result

    def _reader_for(self, fmt: str):
        if fmt == PLAIN_TEXT:
            return self._read_plain
        if fmt == TABULAR:
            return self._read_tabular
        if fmt == RICH_TEXT:
            return self._read_docx
        if fmt == BINARY and self.capabilities.streaming_reader:
            return self._read_pdf
        raise UnsupportedFormat(f"No extractor for format {fmt!r}")

    # ── Plain text ───────────────────────────────────────────────────────

    def _read_plain(self, data: bytes) -> ExtractedText:
        return ExtractedText(text=data.decode("utf-8", errors="replace"), format=PLAIN_TEXT)

    # ── CSV / TSV ────────────────────────────────────────────────────────

    def _read_tabular(self, data: bytes) -> ExtractedText:
        text = data.decode("utf-8-sig", errors="replace")
        first_line = text.split("\n", 1)[0]
        delimiter = "\t" if "\t" in first_line and "," not in first_line else ","

        reader = csv.reader(io.StringIO(text), delimiter=delimiter, strict=True)
        lines: list[str] = []
        errors: list[str] = []
        while True:
            try:
                row = next(reader)
            except StopIteration:
                break
            except csv.Error as exc:
                errors.append(f"Row {reader.line_num}: {exc}")
                continue
            cells = [cell.strip() for cell in row if cell and cell.strip()]
            if cells:
                lines.append(" ".join(cells))

        if errors:
            log.warning("CSV parsing hit %d row error(s)", len(errors))
            if not lines:
                raise FormatParseError(
                    "tabular",
                    f"{errors[0]}. Please try a TXT or DOCX file, or enter your skills manually.",
                )
        return ExtractedText(text="\n".join(lines), format=TABULAR, warnings=tuple(errors))

    # ── DOCX ─────────────────────────────────────────────────────────────

    def _read_docx(self, data: bytes) -> ExtractedText:
        try:
            if self.capabilities.structured_parsers:
                text = _docx_with_library(data)
            else:
                text = _docx_with_stdlib(data)
        except Exception as exc:
            log.warning("DOCX extraction failed: %s", exc)
            raise FormatParseError(
                "rich-text-container",
                "the file is corrupt or not a Word document. "
                "Please try a different format such as TXT, or enter your skills manually.",
            ) from exc
        return ExtractedText(text=text, format=RICH_TEXT)

    # ── PDF / legacy ─────────────────────────────────────────────────────

    def _read_pdf(self, data: bytes) -> ExtractedText:
        try:
            reader = PdfReader(io.BytesIO(data))
            pages = [(page.extract_text() or "").strip() for page in reader.pages]
            text = "\n".join(p for p in pages if p)
        except Exception as exc:
            log.warning("PDF reader failed (%s), using heuristic recovery", exc)
            return self._recover(data, BINARY)
        if not text.strip():
            log.info("PDF had no extractable text layer — using heuristic recovery")
            return self._recover(data, BINARY)
        return ExtractedText(text=text, format=BINARY)

    def _recover(self, data: bytes, fmt: str) -> ExtractedText:
        return ExtractedText(
            text=recover_printable_text(data),
            format=fmt,
            low_confidence=True,
            warnings=("Text was recovered heuristically and may be incomplete.",),
        )


def recover_printable_text(data: bytes) -> str:
    """Join contiguous printable runs of at least 10 characters with spaces."""
    decoded = data.decode("latin-1")
    runs: list[str] = []
    for match in _PRINTABLE_RUN_RE.finditer(decoded):
        run = _WHITESPACE_RE.sub(" ", match.group(0)).strip()
        if len(run) >= 3 and any(c.isalpha() for c in run):
            runs.append(run)
    return " ".join(runs) if runs else PLACEHOLDER_TEXT


def _docx_with_library(data: bytes) -> str:
    document = docx.Document(io.BytesIO(data))
    parts = [p.text for p in document.paragraphs if p.text and p.text.strip()]
    for table in document.tables:
        for row in table.rows:
            cells = [cell.text.strip() for cell in row.cells if cell.text and cell.text.strip()]
            if cells:
                parts.append(" ".join(dict.fromkeys(cells)))
    return "\n".join(parts)


def _docx_with_stdlib(data: bytes) -> str:
    """Same output as :func:`_docx_with_library`, read straight from ``word/document.xml``."""
    with zipfile.ZipFile(io.BytesIO(data)) as archive:
        root = ElementTree.fromstring(archive.read("word/document.xml"))
    body = root.find("w:body", _WORD_NS)
    if body is None:
        return ""

    def run_text(element: ElementTree.Element) -> str:
        return "".join(node.text or "" for node in element.iterfind(".//w:t", _WORD_NS))

    parts = [text for text in map(run_text, body.iterfind("w:p", _WORD_NS)) if text.strip()]
    for row in body.iterfind("w:tbl/w:tr", _WORD_NS):
        cells = [
            "\n".join(map(run_text, cell.iterfind("w:p", _WORD_NS))).strip()
            for cell in row.iterfind("w:tc", _WORD_NS)
        ]
        cells = [cell for cell in cells if cell]
        if cells:
            parts.append(" ".join(dict.fromkeys(cells)))
    return "\n".join(parts)
