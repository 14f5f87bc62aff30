"""Repository layer for data access."""

from .base import BaseRepository
from .snippet import SnippetRepository
from .tag import TagRepository

__all__ = [
    "BaseRepository",
    "SnippetRepository",
    "TagRepository",
]
