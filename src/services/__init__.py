"""Service layer with business logic."""

from .snippet import SnippetService
from .tag import TagService

__all__ = [
    "SnippetService",
    "TagService",
]
