"""
Playground: sharing, rating and discussing generated lessons in memory.
"""

from .store import Comment, LessonPlayground, Rating

__all__ = ["Comment", "LessonPlayground", "Rating"]
