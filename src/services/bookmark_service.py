"""
Storage operations for bookmarks.

Every statement carries the owner in its WHERE clause, so a bookmark that
belongs to another user behaves exactly like one that does not exist.
"""
import logging

from sqlalchemy import delete, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from models.bookmark import Bookmark
from schemas.bookmark import BookmarkCreate, BookmarkRecord, BookmarkUpdate
from schemas.validators import parse_id
from services.exceptions import NotFoundError
from services.utils import decode_row, decode_rows, escape_ilike

logger = logging.getLogger(__name__)

ENTITY = "bookmark"


async def get_bookmarks(
    db: AsyncSession,
    owner: str,
    tag: str | None = None,
    query: str | None = None,
) -> list[BookmarkRecord]:
    """
    Get the owner's bookmarks, newest first.

    Args:
        db: Database session.
        owner: Username the bookmarks belong to.
        tag: Only bookmarks whose tag set contains this tag.
        query: Case-insensitive substring matched against title or URL.
    """
    stmt = select(Bookmark).where(Bookmark.created_by == owner)

    if tag:
        # @> containment uses the GIN index on tags
        stmt = stmt.where(Bookmark.tags.contains([tag]))

    if query:
        pattern = f"%{escape_ilike(query)}%"
        stmt = stmt.where(
            or_(
                Bookmark.title.ilike(pattern),
                Bookmark.url.ilike(pattern),
            ),
        )

    result = await db.execute(
        stmt.order_by(Bookmark.created_at.desc(), Bookmark.id.desc()),
    )
    return decode_rows(BookmarkRecord, ENTITY, result.scalars().all())


async def get_bookmark(
    db: AsyncSession,
    owner: str,
    bookmark_id: str,
) -> BookmarkRecord | None:
    """Get a bookmark by ID, scoped to owner. Returns None if not found or wrong owner."""
    pk = parse_id(bookmark_id)
    if pk is None:
        return None
    result = await db.execute(
        select(Bookmark).where(
            Bookmark.id == pk,
            Bookmark.created_by == owner,
        ),
    )
    bookmark = result.scalar_one_or_none()
    if bookmark is None:
        return None
    return decode_row(BookmarkRecord, ENTITY, bookmark)


async def create_bookmark(
    db: AsyncSession,
    owner: str,
    data: BookmarkCreate,
) -> BookmarkRecord:
    """
    Create a new bookmark owned by owner.

    Note: Does not commit. Caller (session generator) handles commit at request end.
    """
    bookmark = Bookmark(
        title=data.title,
        url=data.url,
        tags=list(data.tags),
        created_by=owner,
    )
    db.add(bookmark)
    await db.flush()
    await db.refresh(bookmark)
    logger.info("Created bookmark %s for %s", bookmark.id, owner)
    return decode_row(BookmarkRecord, ENTITY, bookmark)


async def update_bookmark(
    db: AsyncSession,
    owner: str,
    data: BookmarkUpdate,
) -> None:
    """
    Replace a bookmark's title, URL and tags.

    Raises:
        NotFoundError: If no bookmark with this id belongs to owner.
    """
    pk = parse_id(data.id)
    if pk is None:
        raise NotFoundError(ENTITY, data.id)

    result = await db.execute(
        update(Bookmark)
        .where(Bookmark.id == pk, Bookmark.created_by == owner)
        .values(title=data.title, url=data.url, tags=list(data.tags)),
    )
    if result.rowcount == 0:
        raise NotFoundError(ENTITY, data.id)


async def delete_bookmark(
    db: AsyncSession,
    owner: str,
    bookmark_id: str,
) -> None:
    """
    Delete a bookmark permanently.

    Raises:
        NotFoundError: If no bookmark with this id belongs to owner.
    """
    pk = parse_id(bookmark_id)
    if pk is None:
        raise NotFoundError(ENTITY, bookmark_id)

    result = await db.execute(
        delete(Bookmark).where(Bookmark.id == pk, Bookmark.created_by == owner),
    )
    if result.rowcount == 0:
        raise NotFoundError(ENTITY, bookmark_id)
    logger.info("Deleted bookmark %s for %s", bookmark_id, owner)
