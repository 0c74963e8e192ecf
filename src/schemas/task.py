"""Pydantic schemas for task procedures."""
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from schemas.validators import MAX_TITLE_LENGTH, id_to_str, reject_null


class TaskRecord(BaseModel):
    """
    External shape of a task.

    Validated from ORM rows (from_attributes). Every field is required, so a
    row missing a column fails loudly instead of leaking a partial record.
    """

    model_config = ConfigDict(
        from_attributes=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    id: str
    title: str
    description: str | None
    completed: bool
    created_by: str
    created_at: datetime

    @field_validator("id", mode="before")
    @classmethod
    def convert_id(cls, v: Any) -> Any:
        """Expose the integer primary key as a string."""
        return id_to_str(v)


class TaskByIdInput(BaseModel):
    """Input for taskById and deleteTask."""

    model_config = ConfigDict(strict=True)

    id: str


class TaskCreate(BaseModel):
    """Input for createTask. The owner is never taken from input."""

    model_config = ConfigDict(strict=True)

    title: str = Field(max_length=MAX_TITLE_LENGTH)
    description: str


class TaskPatch(BaseModel):
    """
    Explicit set of task field changes.

    Only the fields in model_fields_set are written; an absent field means
    "leave unchanged".
    """

    title: str | None = None
    description: str | None = None
    completed: bool | None = None

    def changes(self) -> dict[str, Any]:
        """Return column -> value for the fields that were supplied."""
        return {field: getattr(self, field) for field in sorted(self.model_fields_set)}

    def is_empty(self) -> bool:
        """True when no field is changed."""
        return not self.model_fields_set


class TaskUpdate(BaseModel):
    """Input for updateTask: id plus any subset of the mutable fields."""

    model_config = ConfigDict(strict=True)

    id: str
    title: str | None = Field(default=None, max_length=MAX_TITLE_LENGTH)
    description: str | None = None
    completed: bool | None = None

    @field_validator("title", "description", "completed", mode="before")
    @classmethod
    def check_not_null(cls, v: Any) -> Any:
        """Omitting a field leaves it unchanged; sending null is rejected."""
        return reject_null(v)

    def to_patch(self) -> TaskPatch:
        """Build the patch from the fields the caller actually sent."""
        supplied = self.model_fields_set - {"id"}
        return TaskPatch(**{field: getattr(self, field) for field in supplied})
