"""
In-memory playground for shared lessons.

Learners can share a generated lesson, rate it (like/dislike) and leave
comments. Nothing is persisted; the store keeps at most ``max_lessons``
lessons and evicts the oldest first.
"""

from __future__ import annotations

from collections import OrderedDict
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from loguru import logger

from config import Settings, get_settings
from src.core.models import Lesson

DEFAULT_MAX_LESSONS = 50
ANONYMOUS_AUTHOR = "Anonymous User"


class Rating(str, Enum):
    LIKE = "like"
    DISLIKE = "dislike"


@dataclass
class Comment:
    """A comment left on a shared lesson."""

    text: str
    author: str = ANONYMOUS_AUTHOR
    timestamp: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())

    def to_dict(self) -> dict:
        return {"author": self.author, "text": self.text, "timestamp": self.timestamp}


class LessonPlayground:
    """
    Shared lessons with ratings and comments.

    Lessons are stored by reference: ratings update the shared Lesson's
    likes/dislikes counters in place.
    """

    def __init__(self, max_lessons: int = DEFAULT_MAX_LESSONS):
        if max_lessons < 1:
            raise ValueError("max_lessons must be at least 1")
        self.max_lessons = max_lessons
        self._lessons: OrderedDict[str, Lesson] = OrderedDict()
        self._comments: dict[str, list[Comment]] = {}

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> LessonPlayground:
        """Create a playground sized by PLAYGROUND_MAX_LESSONS."""
        settings = settings or get_settings()
        return cls(max_lessons=settings.playground_max_lessons)

    def __len__(self) -> int:
        return len(self._lessons)

    def __contains__(self, lesson_id: str) -> bool:
        return lesson_id in self._lessons

    def share(self, lesson: Lesson) -> None:
        """Add a lesson (re-sharing moves it to the newest position)."""
        if lesson.id in self._lessons:
            self._lessons.move_to_end(lesson.id)
            return

        self._lessons[lesson.id] = lesson
        self._comments.setdefault(lesson.id, [])

        while len(self._lessons) > self.max_lessons:
            evicted_id, evicted = self._lessons.popitem(last=False)
            self._comments.pop(evicted_id, None)
            logger.debug(f"Playground full, evicted lesson {evicted_id} ({evicted.topic})")

    def get(self, lesson_id: str) -> Lesson:
        try:
            return self._lessons[lesson_id]
        except KeyError:
            raise KeyError(f"Unknown lesson: {lesson_id}") from None

    def list_lessons(self) -> list[Lesson]:
        """Shared lessons, newest first."""
        return list(reversed(self._lessons.values()))

    def rate(self, lesson_id: str, rating: Rating | str, previous: Rating | str | None = None) -> Rating | None:
        """
        Apply a viewer's rating and return their new rating.

        Choosing the same rating again removes it; switching moves the
        count from one side to the other. Counters never go below zero.

        Args:
            lesson_id: Lesson to rate
            rating: The button the viewer pressed
            previous: The viewer's current rating, if any

        Returns:
            The viewer's rating after this action (None when removed)
        """
        lesson = self.get(lesson_id)
        rating = Rating(rating)
        previous = Rating(previous) if previous is not None else None

        if previous is not None:
            self._adjust(lesson, previous, -1)

        if previous == rating:
            return None

        self._adjust(lesson, rating, +1)
        return rating

    @staticmethod
    def _adjust(lesson: Lesson, rating: Rating, delta: int) -> None:
        if rating == Rating.LIKE:
            lesson.likes = max(0, lesson.likes + delta)
        else:
            lesson.dislikes = max(0, lesson.dislikes + delta)

    def add_comment(self, lesson_id: str, text: str, author: str = ANONYMOUS_AUTHOR) -> Comment:
        """Add a comment; blank text is rejected."""
        self.get(lesson_id)
        if not text or not text.strip():
            raise ValueError("Comment text must not be empty")

        comment = Comment(text=text.strip(), author=author or ANONYMOUS_AUTHOR)
        self._comments[lesson_id].insert(0, comment)
        return comment

    def comments(self, lesson_id: str) -> list[Comment]:
        """Comments on a lesson, newest first."""
        self.get(lesson_id)
        return list(self._comments[lesson_id])
