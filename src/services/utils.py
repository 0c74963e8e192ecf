"""Shared helpers for the storage services."""
from collections.abc import Iterable
from typing import TypeVar

from pydantic import BaseModel, ValidationError

from services.exceptions import RecordDecodeError

RecordT = TypeVar("RecordT", bound=BaseModel)


def escape_ilike(value: str) -> str:
    r"""
    Escape special ILIKE characters for safe use in LIKE/ILIKE patterns.

    PostgreSQL LIKE/ILIKE treats these characters specially:
    - % matches any sequence of characters
    - _ matches any single character
    - \\ is the escape character

    This function escapes them so they match literally.
    """
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def decode_row(record_type: type[RecordT], entity: str, row: object) -> RecordT:
    """
    Validate one ORM row into its external record.

    Raises:
        RecordDecodeError: If a field is missing or has the wrong type.
    """
    try:
        return record_type.model_validate(row)
    except ValidationError as e:
        raise RecordDecodeError(entity, str(e)) from e


def decode_rows(record_type: type[RecordT], entity: str, rows: Iterable[object]) -> list[RecordT]:
    """Validate a sequence of ORM rows."""
    return [decode_row(record_type, entity, row) for row in rows]
