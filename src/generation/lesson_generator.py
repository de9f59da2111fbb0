"""
Lesson Generator.

Orchestrates a single lesson request:
1. Check the API credential (fail fast, nothing is sent)
2. One structured text call (quote, explanation, reading, comic script, flashcards, mind map)
3. Parse and validate the JSON response
4. Concurrent image calls, one per comic panel, re-paired by index
5. Assemble the Lesson

The pipeline is all-or-nothing: any failure raises a LessonGenerationError
subclass and no Lesson is returned. There are no retries; the caller can
simply resubmit.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Callable
from enum import Enum

from loguru import logger

from config import Settings, get_settings
from src.core.errors import (
    ConfigurationError,
    ImageGenerationError,
    LessonGenerationError,
    MalformedResponseError,
    TransportError,
)
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
from src.generation.prompts import build_lesson_prompt, get_system_prompt
from src.generation.schemas import (
    LESSON_RESPONSE_SCHEMA,
    ComicPanelScript,
    LessonResponse,
    MindMapSchema,
    parse_lesson_response,
)
from src.integrations.gemini_client import GeminiClient

ClientFactory = Callable[..., GeminiClient]


class GenerationStage(str, Enum):
    """Pipeline states. FAILED is reachable from every other state."""

    IDLE = "idle"
    REQUESTING_TEXT = "requesting_text"
    PARSING_TEXT = "parsing_text"
    REQUESTING_IMAGES = "requesting_images"
    ASSEMBLING = "assembling"
    DONE = "done"
    FAILED = "failed"


def _wrap_unexpected(stage: GenerationStage, error: Exception) -> LessonGenerationError:
    """Classify an exception that escaped the client wrappers by the stage it happened in."""
    detail = str(error) or type(error).__name__
    if stage == GenerationStage.REQUESTING_TEXT:
        return TransportError(detail)
    if stage == GenerationStage.PARSING_TEXT:
        return MalformedResponseError(detail)
    if stage == GenerationStage.REQUESTING_IMAGES:
        return ImageGenerationError(detail)
    return LessonGenerationError(f"An unknown error occurred during lesson generation: {detail}")


def _to_mind_map(node: MindMapSchema) -> MindMapNode:
    return MindMapNode(title=node.title, children=[_to_mind_map(child) for child in node.children])


class LessonGenerator:
    """
    Lesson generation orchestrator.

    The generator holds no per-request state, so one instance can serve
    several concurrent requests.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        client_factory: ClientFactory | None = None,
    ):
        """
        Initialize the generator.

        Args:
            settings: Application settings (uses cached settings if not provided)
            client_factory: Builds the model client from the credential; swapped in tests
        """
        self.settings = settings or get_settings()
        self.client_factory = client_factory or GeminiClient

    def _create_client(self) -> GeminiClient:
        if not self.settings.has_ai_configured():
            raise ConfigurationError()
        return self.client_factory(
            api_key=self.settings.gemini_api_key,
            text_model=self.settings.text_model,
            image_model=self.settings.image_model,
            timeout_seconds=self.settings.request_timeout_seconds,
        )

    async def generate(self, request: LessonRequest) -> Lesson:
        """
        Run the full pipeline for one request.

        Args:
            request: Validated lesson request (topic already non-blank)

        Returns:
            The assembled Lesson

        Raises:
            LessonGenerationError: One of ConfigurationError, TransportError,
                MalformedResponseError, InvalidStructureError, ImageGenerationError
        """
        stage = GenerationStage.IDLE
        started = time.perf_counter()
        logger.info(f"Generating lesson for: {request.topic} ({request.language.value})")

        client: GeminiClient | None = None
        try:
            client = self._create_client()

            stage = GenerationStage.REQUESTING_TEXT
            prompt = build_lesson_prompt(
                topic=request.topic,
                language=request.language,
                source_document=request.source_document,
                grounding=request.grounding,
                language_names=self.settings.language_names(),
                max_document_chars=self.settings.max_document_chars,
            )
            raw_text = await client.generate_lesson_json(
                prompt=prompt,
                system_instruction=get_system_prompt(),
                response_schema=LESSON_RESPONSE_SCHEMA,
            )

            stage = GenerationStage.PARSING_TEXT
            response = parse_lesson_response(raw_text)
            logger.info(
                f"Lesson text validated: {len(response.comic_script)} panels, "
                f"{len(response.flashcards)} flashcards"
            )

            stage = GenerationStage.REQUESTING_IMAGES
            image_urls = await self._render_panels(client, response.comic_script)

            stage = GenerationStage.ASSEMBLING
            lesson = self._assemble(request, response, image_urls)

        except LessonGenerationError as e:
            logger.error(f"Lesson generation {GenerationStage.FAILED.value} during {stage.value}: {e}")
            raise
        except Exception as e:
            logger.exception(f"Unexpected error during {stage.value}")
            raise _wrap_unexpected(stage, e) from e
        finally:
            if client is not None:
                await client.close()

        stage = GenerationStage.DONE
        logger.info(f"Lesson {lesson.id} {stage.value} in {time.perf_counter() - started:.1f}s")
        return lesson

    async def _render_panels(self, client: GeminiClient, panels: list[ComicPanelScript]) -> list[str]:
        """
        Illustrate every panel concurrently; all must succeed.

        Results come back in script order regardless of completion order.
        On the first failure the remaining calls are cancelled.
        """
        logger.info(f"Requesting {len(panels)} panel images in parallel")
        tasks = [
            asyncio.create_task(client.generate_panel_image(panel.image_prompt, index))
            for index, panel in enumerate(panels)
        ]
        try:
            return list(await asyncio.gather(*tasks))
        except Exception:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

    def _assemble(
        self,
        request: LessonRequest,
        response: LessonResponse,
        image_urls: list[str],
    ) -> Lesson:
        panels = [
            ComicPanel(narrative=script.narrative, image_url=url)
            for script, url in zip(response.comic_script, image_urls, strict=True)
        ]
        return Lesson(
            topic=request.topic,
            language=request.language,
            quote=Quote(text=response.quote.text, author=response.quote.author),
            explanation=response.explanation,
            recommended_reading=list(response.recommended_reading),
            comic_panels=panels,
            flashcards=[FlashcardEntry(term=c.term, definition=c.definition) for c in response.flashcards],
            mind_map=_to_mind_map(response.mind_map),
            source_file_name=request.source_document.name if request.source_document else None,
        )


# =============================================================================
# Convenience Functions
# =============================================================================


async def generate_lesson(
    topic: str,
    language: LessonLanguage = LessonLanguage.PRIMARY,
    source_document: SourceDocument | None = None,
    grounding: GroundingMode = GroundingMode.PRIMARY_SOURCE,
    settings: Settings | None = None,
) -> Lesson:
    """Generate a lesson for ``topic``. Raises ValueError for a blank topic."""
    request = LessonRequest(
        topic=topic,
        language=language,
        source_document=source_document,
        grounding=grounding,
    )
    return await LessonGenerator(settings).generate(request)


def generate_lesson_sync(
    topic: str,
    language: LessonLanguage = LessonLanguage.PRIMARY,
    source_document: SourceDocument | None = None,
    grounding: GroundingMode = GroundingMode.PRIMARY_SOURCE,
    settings: Settings | None = None,
) -> Lesson:
    """Blocking wrapper around generate_lesson for scripts and the CLI."""
    return asyncio.run(generate_lesson(topic, language, source_document, grounding, settings))
