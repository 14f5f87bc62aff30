"""API layer - FastAPI endpoints."""

from .highlight import router as highlight_router
from .languages import router as languages_router
from .snippets import router as snippets_router
from .tags import router as tags_router

__all__ = [
    "snippets_router",
    "tags_router",
    "languages_router",
    "highlight_router",
]
