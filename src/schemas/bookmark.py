"""Pydantic schemas for bookmark procedures."""
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from schemas.validators import MAX_TITLE_LENGTH, id_to_str, normalize_tags


class BookmarkRecord(BaseModel):
    """External shape of a bookmark, validated from ORM rows."""

    model_config = ConfigDict(
        from_attributes=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    id: str
    title: str
    url: str
    tags: list[str]
    created_by: str
    created_at: datetime

    @field_validator("id", mode="before")
    @classmethod
    def convert_id(cls, v: Any) -> Any:
        """Expose the integer primary key as a string."""
        return id_to_str(v)


class BookmarkListInput(BaseModel):
    """Input for allBookmarks. Both filters are optional and combine with AND."""

    model_config = ConfigDict(strict=True)

    tag: str | None = None
    query: str | None = None


class BookmarkByIdInput(BaseModel):
    """Input for bookmarkById and deleteBookmark."""

    model_config = ConfigDict(strict=True)

    id: str


class BookmarkCreate(BaseModel):
    """Input for createBookmark. The owner is never taken from input."""

    model_config = ConfigDict(strict=True)

    title: str = Field(max_length=MAX_TITLE_LENGTH)
    url: str
    tags: list[str]

    @field_validator("tags")
    @classmethod
    def check_tags(cls, v: list[str]) -> list[str]:
        """Tags are a set: trimmed, non-empty, unique."""
        return normalize_tags(v)


class BookmarkUpdate(BaseModel):
    """Input for updateBookmark. Replaces title, url and tags."""

    model_config = ConfigDict(strict=True)

    id: str
    title: str = Field(max_length=MAX_TITLE_LENGTH)
    url: str
    tags: list[str]

    @field_validator("tags")
    @classmethod
    def check_tags(cls, v: list[str]) -> list[str]:
        """Tags are a set: trimmed, non-empty, unique."""
        return normalize_tags(v)
