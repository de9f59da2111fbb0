"""
Gemini API client for lesson text and comic panel images.

Wraps the two outbound calls of the lesson pipeline:
- one structured (JSON) text generation call per lesson
- one Imagen call per comic panel

Every failure leaves this module as a LessonGenerationError subclass,
with the SDK/transport exception chained as the cause.
"""

from __future__ import annotations

import base64
from typing import Any

import httpx
from google import genai
from google.genai import errors as genai_errors
from google.genai import types
from loguru import logger

from src.core.errors import ConfigurationError, ImageGenerationError, TransportError

IMAGE_MIME_TYPE = "image/png"
IMAGE_ASPECT_RATIO = "1:1"
IMAGES_PER_PANEL = 1


def _describe(error: Exception) -> str:
    return str(error) or type(error).__name__


class GeminiClient:
    """Async client for the Gemini text model and the Imagen image model."""

    def __init__(
        self,
        api_key: str,
        text_model: str = "gemini-2.5-flash",
        image_model: str = "imagen-4.0-generate-001",
        timeout_seconds: float | None = None,
    ):
        """
        Initialize the Gemini client.

        Args:
            api_key: Gemini API key
            text_model: Model for the structured lesson text
            image_model: Model for panel illustrations
            timeout_seconds: HTTP timeout (None keeps the SDK default)
        """
        if not api_key:
            raise ConfigurationError()
        self.api_key = api_key
        self.text_model = text_model
        self.image_model = image_model
        self.timeout_seconds = timeout_seconds
        self._client: genai.Client | None = None

    @property
    def client(self) -> genai.Client:
        """Lazy-load the SDK client."""
        if self._client is None:
            http_options = None
            if self.timeout_seconds:
                http_options = types.HttpOptions(timeout=int(self.timeout_seconds * 1000))
            self._client = genai.Client(api_key=self.api_key, http_options=http_options)
        return self._client

    async def close(self) -> None:
        """Close the SDK's async HTTP session (no-op if it was never opened)."""
        if self._client is not None:
            await self._client.aio.aclose()
            self._client = None

    async def generate_lesson_json(
        self,
        prompt: str,
        system_instruction: str,
        response_schema: dict[str, Any],
    ) -> str:
        """
        Request the lesson as JSON constrained by ``response_schema``.

        Returns:
            Raw response text (expected to parse as JSON)

        Raises:
            TransportError: Network, auth, quota failure or an empty/blocked response
        """
        try:
            response = await self.client.aio.models.generate_content(
                model=self.text_model,
                contents=prompt,
                config=types.GenerateContentConfig(
                    system_instruction=system_instruction,
                    response_mime_type="application/json",
                    response_schema=response_schema,
                ),
            )
        except genai_errors.APIError as e:
            raise TransportError(_describe(e)) from e
        except httpx.HTTPError as e:
            raise TransportError(f"network error: {_describe(e)}") from e
        except Exception as e:
            raise TransportError(_describe(e)) from e

        text = response.text
        if not text or not text.strip():
            raise TransportError("the text model returned no content (the request may have been blocked)")

        logger.debug(f"Lesson text received: {len(text)} characters")
        return text

    async def generate_panel_image(self, prompt: str, panel_index: int | None = None) -> str:
        """
        Request exactly one square PNG for a comic panel.

        Returns:
            ``data:image/png;base64,...`` URI

        Raises:
            ImageGenerationError: Transport failure, or not exactly one image returned
        """
        try:
            response = await self.client.aio.models.generate_images(
                model=self.image_model,
                prompt=prompt,
                config=types.GenerateImagesConfig(
                    number_of_images=IMAGES_PER_PANEL,
                    output_mime_type=IMAGE_MIME_TYPE,
                    aspect_ratio=IMAGE_ASPECT_RATIO,
                ),
            )
        except genai_errors.APIError as e:
            raise ImageGenerationError(_describe(e), panel_index) from e
        except httpx.HTTPError as e:
            raise ImageGenerationError(f"network error: {_describe(e)}", panel_index) from e
        except Exception as e:
            raise ImageGenerationError(_describe(e), panel_index) from e

        images = response.generated_images or []
        if len(images) != IMAGES_PER_PANEL:
            raise ImageGenerationError(
                f"expected {IMAGES_PER_PANEL} image, got {len(images)} for prompt: {prompt}",
                panel_index,
            )

        image = images[0].image
        image_bytes = image.image_bytes if image is not None else None
        if not image_bytes:
            raise ImageGenerationError(f"empty image returned for prompt: {prompt}", panel_index)

        encoded = base64.b64encode(image_bytes).decode("ascii")
        return f"data:{IMAGE_MIME_TYPE};base64,{encoded}"
