"""
Markdown and JSON export of generated lessons.
"""

from __future__ import annotations

import json
from pathlib import Path

from src.core.models import Lesson, MindMapNode


def _mind_map_lines(node: MindMapNode, level: int = 0) -> list[str]:
    lines = [f"{'  ' * level}- {node.title}"]
    for child in node.children:
        lines.extend(_mind_map_lines(child, level + 1))
    return lines


def lesson_to_markdown(lesson: Lesson) -> str:
    """Render a lesson as a standalone Markdown document."""
    parts: list[str] = [f"# {lesson.topic or 'Lesson'}", ""]

    if lesson.source_file_name:
        parts += [f"_Source document: {lesson.source_file_name}_", ""]

    parts += [f"> \"{lesson.quote.text}\"", f"> -- {lesson.quote.author}", ""]

    parts += ["## Explanation", ""]
    for paragraph in lesson.paragraphs:
        parts += [paragraph, ""]

    parts += ["## Comic", ""]
    for index, panel in enumerate(lesson.comic_panels, 1):
        parts += [f"![Panel {index}]({panel.image_url})", "", f"*{panel.narrative}*", ""]

    parts += ["## Flashcards", "", "| Term | Definition |", "| --- | --- |"]
    for card in lesson.flashcards:
        definition = card.definition.replace("|", "\\|").replace("\n", " ")
        parts.append(f"| {card.term} | {definition} |")
    parts.append("")

    parts += ["## Mind Map", ""]
    parts += _mind_map_lines(lesson.mind_map)
    parts.append("")

    parts += ["## Recommended Reading", ""]
    parts += [f"- {citation}" for citation in lesson.recommended_reading]

    return "\n".join(parts).rstrip() + "\n"


def write_lesson_markdown(lesson: Lesson, path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(lesson_to_markdown(lesson), encoding="utf-8")
    return path


def write_lesson_json(lesson: Lesson, path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(lesson.to_dict(), indent=2, ensure_ascii=False), encoding="utf-8")
    return path
