"""
Lesson generation errors.

Every failure inside the pipeline reaches the caller as exactly one of
these classes. ``str(error)`` is the message shown to the user.
"""

from __future__ import annotations

FAILURE_PREFIX = "Failed to generate the lesson: "


class LessonGenerationError(Exception):
    """Base class for all lesson generation failures."""

    reason: str = "lesson_generation"

    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(f"{FAILURE_PREFIX}{detail}")

    @property
    def message(self) -> str:
        return str(self)


class ConfigurationError(LessonGenerationError):
    """The API credential is missing. Raised before any call is made."""

    reason = "configuration"

    def __init__(self, detail: str = "API key is missing. Please set the GEMINI_API_KEY environment variable."):
        super().__init__(detail)


class TransportError(LessonGenerationError):
    """The text generation request failed (network, auth, quota, refusal)."""

    reason = "transport"

    def __init__(self, detail: str):
        super().__init__(f"Generation request failed: {detail}")


class MalformedResponseError(LessonGenerationError):
    """The model returned text that is not valid JSON."""

    reason = "malformed_response"

    def __init__(self, detail: str):
        super().__init__(f"The text model returned a malformed (non-JSON) response: {detail}")


class InvalidStructureError(LessonGenerationError):
    """The JSON parsed but required fields are missing or empty."""

    reason = "invalid_structure"

    def __init__(self, missing_fields: list[str]):
        self.missing_fields = missing_fields
        fields = ", ".join(missing_fields) if missing_fields else "unknown"
        super().__init__(f"Invalid response structure from the text model (missing or empty: {fields}).")


class ImageGenerationError(LessonGenerationError):
    """A comic panel image could not be generated."""

    reason = "image_generation"

    def __init__(self, detail: str, panel_index: int | None = None):
        self.panel_index = panel_index
        where = f" for panel {panel_index + 1}" if panel_index is not None else ""
        super().__init__(f"Image generation failed{where}: {detail}")
