"""Task model."""
from sqlalchemy import String, Text, false
from sqlalchemy.orm import Mapped, mapped_column

from models.base import Base, CreatedAtMixin


class Task(Base, CreatedAtMixin):
    """
    Task model - a titled to-do item with a completion flag.

    Tasks are visible to every authenticated caller; created_by records who
    created the task but does not restrict reads or writes.
    """

    __tablename__ = "tasks"

    id: Mapped[int] = mapped_column(primary_key=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    completed: Mapped[bool] = mapped_column(
        default=False,
        server_default=false(),
        nullable=False,
    )
    created_by: Mapped[str] = mapped_column(String(255), nullable=False)
