"""Bookmark domain operations, scoped to the authenticated principal."""
from sqlalchemy.ext.asyncio import AsyncSession

from core.auth import AuthService
from schemas.bookmark import BookmarkCreate, BookmarkRecord, BookmarkUpdate
from services import bookmark_service


class BookmarkDomain:
    """Bookmark operations for one request. The principal is the owner filter for every call."""

    def __init__(self, auth: AuthService, db: AsyncSession) -> None:
        self._auth = auth
        self._db = db

    async def get_all_bookmarks(
        self,
        token: str,
        tag: str | None = None,
        query: str | None = None,
    ) -> list[BookmarkRecord]:
        principal = await self._auth.authenticate(token)
        return await bookmark_service.get_bookmarks(
            self._db, principal.username, tag=tag, query=query,
        )

    async def get_bookmark_by_id(self, token: str, bookmark_id: str) -> BookmarkRecord | None:
        principal = await self._auth.authenticate(token)
        return await bookmark_service.get_bookmark(self._db, principal.username, bookmark_id)

    async def create_bookmark(self, token: str, data: BookmarkCreate) -> BookmarkRecord:
        principal = await self._auth.authenticate(token)
        return await bookmark_service.create_bookmark(self._db, principal.username, data)

    async def update_bookmark(self, token: str, data: BookmarkUpdate) -> None:
        principal = await self._auth.authenticate(token)
        await bookmark_service.update_bookmark(self._db, principal.username, data)

    async def delete_bookmark(self, token: str, bookmark_id: str) -> None:
        principal = await self._auth.authenticate(token)
        await bookmark_service.delete_bookmark(self._db, principal.username, bookmark_id)
