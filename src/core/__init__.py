"""
Core Module - Shared domain models.

Components:
- models: Lesson document and request models (Lesson, LessonRequest, ...)
- errors: LessonGenerationError taxonomy
- logging_setup: loguru sink configuration

All other modules (generation, export, playground, cli) import the
lesson types from here rather than redefining them.
"""

from src.core.models import (
    ComicPanel,
    FlashcardEntry,
    GroundingMode,
    Lesson,
    LessonLanguage,
    LessonRequest,
    MindMapNode,
    Quote,
    SourceDocument,
)

__all__ = [
    "ComicPanel",
    "FlashcardEntry",
    "GroundingMode",
    "Lesson",
    "LessonLanguage",
    "LessonRequest",
    "MindMapNode",
    "Quote",
    "SourceDocument",
]
