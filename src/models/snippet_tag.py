"""Snippet-Tag junction table."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, Table

from .base import Base, utc_now

# Many-to-many junction table for snippets and tags
# ON DELETE CASCADE: удаление сниппета удаляет его связи с тегами
snippet_tags = Table(
    "snippet_tags",
    Base.metadata,
    Column(
        "snippet_id",
        Integer,
        ForeignKey("snippets.id", ondelete="CASCADE"),
        primary_key=True,
        index=True,
    ),
    Column(
        "tag_id",
        Integer,
        ForeignKey("tags.id", ondelete="CASCADE"),
        primary_key=True,
        index=True,
    ),
    Column("created_at", DateTime, default=utc_now, nullable=False),
)
