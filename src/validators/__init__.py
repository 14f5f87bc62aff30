"""Pure validation and normalization helpers (no database access)."""

from .errors import FieldError, SnippetValidationError, TagValidationResult, ValidationErrorCode
from .snippet import (
    MAX_CONTENT_LENGTH,
    MAX_TITLE_LENGTH,
    normalize_line_endings,
    validate_content,
    validate_language,
    validate_snippet_data,
    validate_snippet_update,
    validate_tags,
    validate_title,
)
from .tag import (
    MAX_TAG_LENGTH,
    MAX_TAGS_PER_SNIPPET,
    MIN_TAGS_PER_SNIPPET,
    is_duplicate_tag,
    normalize_tag_name,
    trim_tag,
    unique_tag_names,
    validate_tag_count,
    validate_tag_format,
    validate_tag_formats,
    validate_tag_list,
)

__all__ = [
    "FieldError",
    "SnippetValidationError",
    "TagValidationResult",
    "ValidationErrorCode",
    "MAX_TITLE_LENGTH",
    "MAX_CONTENT_LENGTH",
    "MAX_TAG_LENGTH",
    "MIN_TAGS_PER_SNIPPET",
    "MAX_TAGS_PER_SNIPPET",
    "validate_title",
    "validate_content",
    "validate_language",
    "validate_tags",
    "validate_snippet_data",
    "validate_snippet_update",
    "normalize_line_endings",
    "validate_tag_format",
    "validate_tag_formats",
    "validate_tag_list",
    "normalize_tag_name",
    "trim_tag",
    "validate_tag_count",
    "is_duplicate_tag",
    "unique_tag_names",
]
