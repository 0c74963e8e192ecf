"""
Shared validation functions for Pydantic schemas.

Used by both task and bookmark schemas.
"""
from typing import Any

# Matches the VARCHAR(255) title columns
MAX_TITLE_LENGTH = 255


def normalize_tags(tags: list[str]) -> list[str]:
    """
    Normalize a list of tags into set semantics.

    Tags are trimmed, empty strings are dropped, and duplicates are removed
    (preserving first occurrence order). Case is kept as given.
    """
    normalized = []
    seen: set[str] = set()
    for tag in tags:
        trimmed = tag.strip()
        if not trimmed or trimmed in seen:
            continue
        seen.add(trimmed)
        normalized.append(trimmed)
    return normalized


def reject_null(value: Any) -> Any:
    """Optional fields may be omitted but not sent as null."""
    if value is None:
        raise ValueError("Field may be omitted but not null")
    return value


def id_to_str(value: Any) -> Any:
    """Integer primary keys are exposed as decimal strings."""
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    return value


def parse_id(value: str) -> int | None:
    """
    Parse an external id into a primary key.

    Returns None when the string cannot name a row (not a positive decimal
    integer, or out of the SERIAL range).
    """
    if not value.isascii() or not value.isdigit():
        return None
    parsed = int(value)
    if parsed < 1 or parsed > 2**31 - 1:
        return None
    return parsed
