"""Lesson generation pipeline.

Pipeline:
1. Prompt builder assembles the instruction (topic, language, optional document)
2. Gemini returns the lesson as schema-constrained JSON
3. The response is validated against the structured response contract
4. Imagen illustrates every comic panel in parallel
5. The Lesson is assembled and returned

Usage:
    from src.generation import generate_lesson_sync

    lesson = generate_lesson_sync("Photosynthesis")
    print(lesson.quote.text)
    for panel in lesson.comic_panels:
        print(panel.narrative)
"""
from src.core.errors import (
    ConfigurationError,
    ImageGenerationError,
    InvalidStructureError,
    LessonGenerationError,
    MalformedResponseError,
    TransportError,
)
from src.generation.lesson_generator import (
    GenerationStage,
    LessonGenerator,
    generate_lesson,
    generate_lesson_sync,
)
from src.generation.prompts import IMAGE_PROMPT_PREFIX, build_lesson_prompt, get_system_prompt
from src.generation.schemas import LESSON_RESPONSE_SCHEMA, LessonResponse, parse_lesson_response

__all__ = [
    "LessonGenerator",
    "GenerationStage",
    "generate_lesson",
    "generate_lesson_sync",
    "build_lesson_prompt",
    "get_system_prompt",
    "IMAGE_PROMPT_PREFIX",
    "LESSON_RESPONSE_SCHEMA",
    "LessonResponse",
    "parse_lesson_response",
    "LessonGenerationError",
    "ConfigurationError",
    "TransportError",
    "MalformedResponseError",
    "InvalidStructureError",
    "ImageGenerationError",
]
