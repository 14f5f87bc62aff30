"""Snippet model."""

from sqlalchemy import CheckConstraint, String, Text
from sqlalchemy import Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, TimestampMixin
from .language import Language


class Snippet(Base, TimestampMixin):
    """Code snippet with a language and a set of tags."""

    __tablename__ = "snippets"
    __table_args__ = (
        CheckConstraint(
            "length(title) > 0 AND length(title) <= 100", name="ck_snippets_title_length"
        ),
        CheckConstraint("length(content) > 0", name="ck_snippets_content_length"),
        # id никогда не переиспользуется после удаления
        {"sqlite_autoincrement": True},
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    title: Mapped[str] = mapped_column(String(100), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)

    # В БД хранится value ("c-sharp"), а не имя элемента ("C_SHARP")
    language: Mapped[Language] = mapped_column(
        SQLEnum(
            Language,
            native_enum=False,
            length=20,
            values_callable=lambda enum_cls: [member.value for member in enum_cls],
        ),
        index=True,
        nullable=False,
    )

    # Tags relationship (many-to-many), всегда по алфавиту
    tag_list: Mapped[list["Tag"]] = relationship(
        "Tag",
        secondary="snippet_tags",
        back_populates="snippets",
        order_by="Tag.name",
        passive_deletes=True,
    )

    @property
    def tags(self) -> str:
        """
        Теги одной строкой через запятую ("python,snippets").

        Только для чтения: источник истины - таблица snippet_tags.
        Поле оставлено для клиентов, которые ждут старый формат.
        """
        return ",".join(tag.name for tag in self.tag_list)

    def __repr__(self) -> str:
        return f"<Snippet(id={self.id}, title='{self.title}', language={self.language.value})>"
