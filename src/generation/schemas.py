"""
Structured Response Contract for Lesson Generation.

Two halves:
- LESSON_RESPONSE_SCHEMA: the controlled-generation schema passed to Gemini
  as response_schema, so the model is constrained to emit conforming JSON.
- LessonResponse (pydantic): strict validation of the returned JSON before
  any typed Lesson is built. Nothing downstream trusts the raw dict.
"""

from __future__ import annotations

import json
import re
from typing import Annotated, Any

from loguru import logger
from pydantic import BaseModel, Field, StringConstraints, ValidationError, field_validator

from src.core.errors import InvalidStructureError, MalformedResponseError
from .prompts import IMAGE_PROMPT_PREFIX

REQUIRED_FIELDS = [
    "quote",
    "explanation",
    "recommended_reading",
    "comic_script",
    "flashcards",
    "mind_map",
]

MIND_MAP_DEPTH = 3


# =============================================================================
# Controlled Generation Schema (Gemini OpenAPI subset)
# =============================================================================


def _mind_map_schema(levels: int) -> dict[str, Any]:
    """Mind map node schema nested ``levels`` deep (Gemini schemas cannot recurse)."""
    node: dict[str, Any] = {
        "type": "OBJECT",
        "properties": {
            "title": {"type": "STRING", "description": "Short label for this idea"},
        },
        "required": ["title"],
    }
    if levels > 0:
        node["properties"]["children"] = {
            "type": "ARRAY",
            "items": _mind_map_schema(levels - 1),
        }
        node["required"] = ["title", "children"]
    return node


LESSON_RESPONSE_SCHEMA: dict[str, Any] = {
    "type": "OBJECT",
    "properties": {
        "quote": {
            "type": "OBJECT",
            "properties": {
                "text": {"type": "STRING"},
                "author": {"type": "STRING"},
            },
            "required": ["text", "author"],
        },
        "explanation": {
            "type": "STRING",
            "description": "Multi-paragraph explanation with markdown links and bold",
        },
        "recommended_reading": {
            "type": "ARRAY",
            "items": {"type": "STRING", "description": "APA-style citation"},
        },
        "comic_script": {
            "type": "ARRAY",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "narrative": {"type": "STRING", "description": "Caption under 15 words"},
                    "image_prompt": {
                        "type": "STRING",
                        "description": f"Must start with '{IMAGE_PROMPT_PREFIX}'",
                    },
                },
                "required": ["narrative", "image_prompt"],
            },
        },
        "flashcards": {
            "type": "ARRAY",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "term": {"type": "STRING"},
                    "definition": {"type": "STRING"},
                },
                "required": ["term", "definition"],
            },
        },
        "mind_map": _mind_map_schema(MIND_MAP_DEPTH),
    },
    "required": REQUIRED_FIELDS,
}


# =============================================================================
# Validation Models
# =============================================================================

NonBlank = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


class QuoteSchema(BaseModel):
    text: NonBlank
    author: NonBlank


class ComicPanelScript(BaseModel):
    """One comic panel as scripted by the model (before illustration)."""

    narrative: NonBlank
    image_prompt: NonBlank

    @field_validator("image_prompt")
    @classmethod
    def ensure_canonical_prefix(cls, value: str) -> str:
        if value.lower().startswith(IMAGE_PROMPT_PREFIX):
            return IMAGE_PROMPT_PREFIX + value[len(IMAGE_PROMPT_PREFIX):]
        logger.warning(f"Image prompt missing canonical prefix, prepending it: {value[:60]}")
        return f"{IMAGE_PROMPT_PREFIX} {value}"


class FlashcardSchema(BaseModel):
    term: NonBlank
    definition: NonBlank


class MindMapSchema(BaseModel):
    title: NonBlank
    children: list[MindMapSchema] = Field(default_factory=list)

    @field_validator("children", mode="before")
    @classmethod
    def none_as_leaf(cls, value: Any) -> Any:
        return [] if value is None else value


class LessonResponse(BaseModel):
    """The validated shape of the lesson text response."""

    quote: QuoteSchema
    explanation: NonBlank
    recommended_reading: list[NonBlank] = Field(min_length=1)
    comic_script: list[ComicPanelScript] = Field(min_length=1)
    flashcards: list[FlashcardSchema] = Field(min_length=1)
    mind_map: MindMapSchema


# =============================================================================
# Parsing
# =============================================================================

_FENCE_OPEN = re.compile(r"^```(?:json)?\s*", re.IGNORECASE)
_FENCE_CLOSE = re.compile(r"\s*```$")


def _strip_code_fences(text: str) -> str:
    text = text.strip()
    if text.startswith("```"):
        text = _FENCE_OPEN.sub("", text)
        text = _FENCE_CLOSE.sub("", text)
    return text.strip()


def _error_fields(error: ValidationError) -> list[str]:
    """Dotted paths of the fields that failed validation, in order, deduplicated."""
    fields: list[str] = []
    for item in error.errors():
        path = ".".join(str(part) for part in item["loc"]) or "response"
        if path not in fields:
            fields.append(path)
    return fields


def parse_lesson_response(raw_text: str | None) -> LessonResponse:
    """
    Parse and validate the raw text returned by the lesson text call.

    Args:
        raw_text: Model output expected to be a JSON object

    Returns:
        Validated LessonResponse

    Raises:
        MalformedResponseError: The text is not JSON
        InvalidStructureError: JSON parsed but required fields are missing or empty
    """
    text = _strip_code_fences(raw_text or "")

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise MalformedResponseError(str(e)) from e

    if not isinstance(data, dict):
        raise InvalidStructureError(["response (expected a JSON object)"])

    missing = [name for name in REQUIRED_FIELDS if data.get(name) in (None, "", [], {})]
    if missing:
        raise InvalidStructureError(missing)

    try:
        return LessonResponse.model_validate(data)
    except ValidationError as e:
        raise InvalidStructureError(_error_fields(e)) from e
