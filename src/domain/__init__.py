"""Domain layer: per-entity operations that authenticate before touching storage."""
from dataclasses import dataclass

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from core.auth import AuthService, get_auth_service
from db.session import get_async_session
from domain.bookmarks import BookmarkDomain
from domain.tasks import TaskDomain


@dataclass
class Domain:
    """All domain operations available to a request."""

    tasks: TaskDomain
    bookmarks: BookmarkDomain

    @classmethod
    def build(cls, auth: AuthService, db: AsyncSession) -> "Domain":
        """Wire every entity domain to the same auth service and session."""
        return cls(
            tasks=TaskDomain(auth, db),
            bookmarks=BookmarkDomain(auth, db),
        )


async def get_domain(
    auth: AuthService = Depends(get_auth_service),
    db: AsyncSession = Depends(get_async_session),
) -> Domain:
    """Dependency returning the domain for the current request."""
    return Domain.build(auth, db)


__all__ = ["BookmarkDomain", "Domain", "TaskDomain", "get_domain"]
