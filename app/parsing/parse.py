from __future__ import annotations

import logging
from pathlib import Path

from app.core.errors import ParseFailureError, UnsupportedFormatError

from .models import SUPPORTED_SOURCE_TYPES, ParsedDoc

logger = logging.getLogger(__name__)


def _parse_txt(file_path: Path) -> tuple[str, list[str]]:
    return file_path.read_text(encoding="utf-8", errors="replace"), []


def _parse_pdf(file_path: Path) -> tuple[str, list[str]]:
    from pypdf import PdfReader

    warnings: list[str] = []
    reader = PdfReader(str(file_path))
    text_parts: list[str] = []
    for page in reader.pages:
        page_text = (page.extract_text() or "").strip()
        if page_text:
            text_parts.append(page_text)
    if not text_parts:
        warnings.append("No extractable text found in PDF.")
    return "\n".join(text_parts), warnings


def _parse_word(file_path: Path) -> tuple[str, list[str]]:
    from docx import Document

    warnings: list[str] = []
    document = Document(str(file_path))
    paragraphs = [p.text.strip() for p in document.paragraphs if p.text and p.text.strip()]
    if not paragraphs:
        warnings.append("No extractable text found in Word document.")
    return "\n".join(paragraphs), warnings


_PARSERS = {
    "txt": _parse_txt,
    "pdf": _parse_pdf,
    "docx": _parse_word,
    # Legacy .doc goes through the same reader; only OOXML-compatible files succeed.
    "doc": _parse_word,
}


def source_type_for(filename: str) -> str:
    extension = Path(filename).suffix.lower().lstrip(".")
    if extension not in SUPPORTED_SOURCE_TYPES:
        raise UnsupportedFormatError(
            f"Unsupported file type '.{extension}'. Supported types: "
            + ", ".join(f".{item}" for item in SUPPORTED_SOURCE_TYPES)
        )
    return extension


def parse_document(file_path: str | Path) -> ParsedDoc:
    path = Path(file_path)
    if not path.exists():
        raise FileNotFoundError(f"Input document not found: '{path}'")

    source_type = source_type_for(path.name)
    try:
        text, warnings = _PARSERS[source_type](path)
    except Exception as exc:
        logger.warning("resume_parse_failed type=%s file=%s: %s", source_type, path.name, exc)
        raise ParseFailureError("Error parsing resume file") from exc

    return ParsedDoc(
        source_type=source_type,
        text=text,
        parsing_warnings=warnings,
    )
