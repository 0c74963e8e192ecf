"""Bookmark model for storing user bookmarks."""
from sqlalchemy import Index, String, Text
from sqlalchemy.dialects.postgresql import ARRAY
from sqlalchemy.orm import Mapped, mapped_column

from models.base import Base, CreatedAtMixin


class Bookmark(Base, CreatedAtMixin):
    """Bookmark model - stores URLs with a title and tags, scoped to an owner."""

    __tablename__ = "bookmarks"
    __table_args__ = (
        # GIN index for tag containment queries (@> operator)
        Index("ix_bookmarks_tags_gin", "tags", postgresql_using="gin"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    url: Mapped[str] = mapped_column(Text, nullable=False)
    tags: Mapped[list[str]] = mapped_column(
        ARRAY(Text),
        default=list,
        server_default="{}",
        nullable=False,
    )
    created_by: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
