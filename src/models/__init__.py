"""SQLAlchemy models for Snippet Manager."""

from .base import Base, TimestampMixin, utc_now
from .language import LANGUAGE_LABELS, LANGUAGE_OPTIONS, Language, UnsupportedLanguageError
from .snippet import Snippet
from .snippet_tag import snippet_tags
from .tag import Tag

__all__ = [
    "Base",
    "TimestampMixin",
    "utc_now",
    "Language",
    "LANGUAGE_LABELS",
    "LANGUAGE_OPTIONS",
    "UnsupportedLanguageError",
    "Snippet",
    "Tag",
    "snippet_tags",
]
