"""
Lesson export.

- markdown: Markdown rendering of a Lesson
- JSON export uses Lesson.to_dict()
"""

from .markdown import lesson_to_markdown, write_lesson_json, write_lesson_markdown

__all__ = ["lesson_to_markdown", "write_lesson_json", "write_lesson_markdown"]
