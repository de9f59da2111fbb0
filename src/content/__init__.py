"""
Content: reading uploaded source documents.

Core modules:
- reader: Plain-text/markdown document loading for lesson grounding
"""

from .reader import DocumentReadError, read_source_document

__all__ = [
    "DocumentReadError",
    "read_source_document",
]
