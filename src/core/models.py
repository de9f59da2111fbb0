"""
Lesson Document Models.

These dataclasses represent the artifacts flowing out of the lesson
generation pipeline. A Lesson is built once by the generator and then
handed to collaborators (CLI rendering, exporters, the playground).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any
from uuid import uuid4


# =============================================================================
# Request Enums
# =============================================================================


class LessonLanguage(str, Enum):
    """Target language selector for generated content."""
    PRIMARY = "primary"
    SECONDARY = "secondary"


class GroundingMode(str, Enum):
    """
    How an uploaded document is used by the model.

    PRIMARY_SOURCE: the document is the main source and is attributed explicitly.
    SUPPLEMENTARY: broader knowledge is synthesized, the document is quoted in blockquotes.
    """
    PRIMARY_SOURCE = "primary_source"
    SUPPLEMENTARY = "supplementary"


# =============================================================================
# Request Models
# =============================================================================


@dataclass
class SourceDocument:
    """Text extracted from an uploaded file."""
    name: str
    text: str


@dataclass
class LessonRequest:
    """
    Input to the lesson generator.

    The topic must be non-blank; this is checked here so the generator
    never sees an empty topic.
    """
    topic: str
    language: LessonLanguage = LessonLanguage.PRIMARY
    source_document: SourceDocument | None = None
    grounding: GroundingMode = GroundingMode.PRIMARY_SOURCE

    def __post_init__(self) -> None:
        if not self.topic or not self.topic.strip():
            raise ValueError("Please enter a concept for our animals to explain.")
        self.topic = self.topic.strip()
        self.language = LessonLanguage(self.language)
        self.grounding = GroundingMode(self.grounding)


# =============================================================================
# Lesson Document
# =============================================================================


@dataclass
class Quote:
    text: str
    author: str

    def to_dict(self) -> dict[str, Any]:
        return {"text": self.text, "author": self.author}


@dataclass
class FlashcardEntry:
    term: str
    definition: str  # may contain **bold** markers

    def to_dict(self) -> dict[str, Any]:
        return {"term": self.term, "definition": self.definition}


@dataclass
class MindMapNode:
    """Recursive mind map node (root plus up to three levels of children)."""
    title: str
    children: list[MindMapNode] = field(default_factory=list)

    def depth(self) -> int:
        """Number of levels below this node."""
        if not self.children:
            return 0
        return 1 + max(child.depth() for child in self.children)

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "children": [child.to_dict() for child in self.children],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> MindMapNode:
        return cls(
            title=data.get("title", ""),
            children=[cls.from_dict(child) for child in data.get("children") or []],
        )


@dataclass
class ComicPanel:
    """One comic script entry paired with its generated image."""
    narrative: str
    image_url: str  # data URI or remote URL

    def to_dict(self) -> dict[str, Any]:
        return {"narrative": self.narrative, "image_url": self.image_url}


@dataclass
class Lesson:
    """
    The complete lesson artifact returned by the generator.

    Created exactly once per successful generation. Ratings and edits
    are applied afterwards by collaborators, never by the generator.
    """
    quote: Quote
    explanation: str
    recommended_reading: list[str]
    comic_panels: list[ComicPanel]
    flashcards: list[FlashcardEntry]
    mind_map: MindMapNode
    topic: str = ""
    language: LessonLanguage = LessonLanguage.PRIMARY
    source_file_name: str | None = None
    likes: int = 0
    dislikes: int = 0
    id: str = field(default_factory=lambda: str(uuid4()))
    created_at: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())

    @property
    def paragraphs(self) -> list[str]:
        """Explanation split on the paragraph-break token."""
        return [p.strip() for p in self.explanation.split("\n\n") if p.strip()]

    def to_dict(self) -> dict[str, Any]:
        """Convert lesson to a JSON-serializable dict."""
        return {
            "id": self.id,
            "topic": self.topic,
            "language": self.language.value,
            "quote": self.quote.to_dict(),
            "explanation": self.explanation,
            "recommended_reading": list(self.recommended_reading),
            "comic_panels": [panel.to_dict() for panel in self.comic_panels],
            "flashcards": [card.to_dict() for card in self.flashcards],
            "mind_map": self.mind_map.to_dict(),
            "source_file_name": self.source_file_name,
            "likes": self.likes,
            "dislikes": self.dislikes,
            "created_at": self.created_at,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Lesson:
        """Rebuild a lesson from its dict form."""
        quote = data.get("quote") or {}
        return cls(
            id=data.get("id") or str(uuid4()),
            topic=data.get("topic", ""),
            language=LessonLanguage(data.get("language", LessonLanguage.PRIMARY.value)),
            quote=Quote(text=quote.get("text", ""), author=quote.get("author", "")),
            explanation=data.get("explanation", ""),
            recommended_reading=list(data.get("recommended_reading") or []),
            comic_panels=[
                ComicPanel(narrative=p.get("narrative", ""), image_url=p.get("image_url", ""))
                for p in data.get("comic_panels") or []
            ],
            flashcards=[
                FlashcardEntry(term=c.get("term", ""), definition=c.get("definition", ""))
                for c in data.get("flashcards") or []
            ],
            mind_map=MindMapNode.from_dict(data.get("mind_map") or {"title": ""}),
            source_file_name=data.get("source_file_name"),
            likes=max(0, int(data.get("likes", 0))),
            dislikes=max(0, int(data.get("dislikes", 0))),
            created_at=data.get("created_at") or datetime.now(timezone.utc).isoformat(),
        )
