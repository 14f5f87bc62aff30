"""Tag model."""

from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, utc_now


class Tag(Base):
    """
    Tag model for categorizing snippets.

    Имя хранится нормализованным (trim + lowercase) и уникально,
    поэтому "JavaScript", "javascript" и " javascript " - один и тот же тег.
    """

    __tablename__ = "tags"
    __table_args__ = (
        CheckConstraint("length(name) > 0 AND length(name) <= 30", name="ck_tags_name_length"),
        {"sqlite_autoincrement": True},
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(30), unique=True, index=True, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utc_now, nullable=False)

    # Relationships
    snippets: Mapped[list["Snippet"]] = relationship(
        "Snippet", secondary="snippet_tags", back_populates="tag_list", passive_deletes=True
    )

    def __repr__(self) -> str:
        return f"<Tag(id={self.id}, name='{self.name}')>"
