"""
Source Document Reader.

Loads an uploaded text document so a lesson can be grounded in it.
Only plain text and markdown are read here; .docx/.pptx extraction is
left to a dedicated converter that hands over plain text.
"""

from __future__ import annotations

from pathlib import Path

from loguru import logger

from src.core.models import SourceDocument

SUPPORTED_EXTENSIONS = {".txt", ".md", ".markdown"}


class DocumentReadError(Exception):
    """Raised when a source document cannot be used for grounding."""
    pass


def read_source_document(path: Path | str, max_chars: int | None = None) -> SourceDocument:
    """
    Read a text document into a SourceDocument.

    Args:
        path: File to read
        max_chars: Truncate the text to this many characters (None keeps everything)

    Returns:
        SourceDocument named after the file

    Raises:
        DocumentReadError: File missing, unsupported type, or no text
    """
    path = Path(path)

    if not path.is_file():
        raise DocumentReadError(f"Source document not found: {path}")

    suffix = path.suffix.lower()
    if suffix not in SUPPORTED_EXTENSIONS:
        supported = ", ".join(sorted(SUPPORTED_EXTENSIONS))
        raise DocumentReadError(f"Unsupported document type '{suffix or path.name}' (supported: {supported})")

    text = path.read_text(encoding="utf-8", errors="replace").strip()
    if not text:
        raise DocumentReadError(f"Source document is empty: {path.name}")

    if max_chars is not None and len(text) > max_chars:
        logger.warning(f"{path.name}: truncating {len(text)} characters to {max_chars}")
        text = text[:max_chars]

    logger.debug(f"Loaded source document {path.name} ({len(text)} characters)")
    return SourceDocument(name=path.name, text=text)
