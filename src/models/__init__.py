"""SQLAlchemy models."""
from models.base import Base, CreatedAtMixin
from models.bookmark import Bookmark
from models.task import Task

__all__ = ["Base", "Bookmark", "CreatedAtMixin", "Task"]
