"""Tests for bookmark storage operations, including owner scoping in SQL."""
import pytest
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from models.bookmark import Bookmark
from schemas.bookmark import BookmarkCreate, BookmarkRecord, BookmarkUpdate
from services import bookmark_service
from services.exceptions import NotFoundError

ALICE = "alice"
BOB = "bob"


async def _create(
    db: AsyncSession,
    owner: str = ALICE,
    title: str = "Example",
    url: str = "https://example.com",
    tags: list[str] | None = None,
) -> BookmarkRecord:
    return await bookmark_service.create_bookmark(
        db, owner, BookmarkCreate(title=title, url=url, tags=tags or []),
    )


async def test__create_bookmark__round_trip(db_session: AsyncSession) -> None:
    created = await _create(db_session, tags=["python", "docs"])

    fetched = await bookmark_service.get_bookmark(db_session, ALICE, created.id)

    assert fetched is not None
    assert fetched.model_dump(exclude={"id", "created_at"}) == {
        "title": "Example",
        "url": "https://example.com",
        "tags": ["python", "docs"],
        "created_by": ALICE,
    }


async def test__get_bookmarks__scoped_to_owner(db_session: AsyncSession) -> None:
    mine = await _create(db_session, owner=ALICE)
    await _create(db_session, owner=BOB)

    bookmarks = await bookmark_service.get_bookmarks(db_session, ALICE)

    assert [b.id for b in bookmarks] == [mine.id]


async def test__get_bookmarks__newest_first(db_session: AsyncSession) -> None:
    older = await _create(db_session, title="older")
    newer = await _create(db_session, title="newer")

    bookmarks = await bookmark_service.get_bookmarks(db_session, ALICE)

    assert [b.id for b in bookmarks] == [newer.id, older.id]


async def test__get_bookmark__other_owner_is_absent(db_session: AsyncSession) -> None:
    created = await _create(db_session, owner=ALICE)

    assert await bookmark_service.get_bookmark(db_session, BOB, created.id) is None


async def test__get_bookmarks__tag_filter(db_session: AsyncSession) -> None:
    with_x = await _create(db_session, title="a", tags=["x", "y"])
    await _create(db_session, title="b", tags=["y"])
    await _create(db_session, title="c", tags=["xx"])

    bookmarks = await bookmark_service.get_bookmarks(db_session, ALICE, tag="x")

    assert [b.id for b in bookmarks] == [with_x.id]
    assert all("x" in b.tags for b in bookmarks)


async def test__get_bookmarks__query_matches_title_or_url_case_insensitive(
    db_session: AsyncSession,
) -> None:
    by_title = await _create(db_session, title="All About FOO", url="https://a.example")
    by_url = await _create(db_session, title="Other", url="https://Foo.example/page")
    await _create(db_session, title="Unrelated", url="https://bar.example")

    bookmarks = await bookmark_service.get_bookmarks(db_session, ALICE, query="foo")

    assert {b.id for b in bookmarks} == {by_title.id, by_url.id}


async def test__get_bookmarks__query_wildcards_match_literally(db_session: AsyncSession) -> None:
    literal = await _create(db_session, title="100% coverage")
    await _create(db_session, title="100 percent coverage")

    bookmarks = await bookmark_service.get_bookmarks(db_session, ALICE, query="100%")

    assert [b.id for b in bookmarks] == [literal.id]


async def test__get_bookmarks__tag_and_query_combine(db_session: AsyncSession) -> None:
    both = await _create(db_session, title="foo guide", tags=["x"])
    await _create(db_session, title="foo other", tags=["y"])
    await _create(db_session, title="bar", tags=["x"])

    bookmarks = await bookmark_service.get_bookmarks(db_session, ALICE, tag="x", query="FOO")

    assert [b.id for b in bookmarks] == [both.id]


async def test__update_bookmark__replaces_fields(db_session: AsyncSession) -> None:
    created = await _create(db_session, tags=["old"])

    await bookmark_service.update_bookmark(
        db_session,
        ALICE,
        BookmarkUpdate(id=created.id, title="New", url="https://new.example", tags=["new"]),
    )

    fetched = await bookmark_service.get_bookmark(db_session, ALICE, created.id)
    assert fetched is not None
    assert (fetched.title, fetched.url, fetched.tags) == ("New", "https://new.example", ["new"])
    assert fetched.created_by == ALICE


async def test__update_bookmark__other_owner_raises_and_leaves_row(db_session: AsyncSession) -> None:
    created = await _create(db_session, owner=ALICE, title="Mine")

    with pytest.raises(NotFoundError):
        await bookmark_service.update_bookmark(
            db_session,
            BOB,
            BookmarkUpdate(id=created.id, title="Stolen", url="https://x.example", tags=[]),
        )

    fetched = await bookmark_service.get_bookmark(db_session, ALICE, created.id)
    assert fetched is not None
    assert fetched.title == "Mine"


async def test__delete_bookmark__other_owner_raises_and_leaves_row(db_session: AsyncSession) -> None:
    created = await _create(db_session, owner=ALICE)

    with pytest.raises(NotFoundError):
        await bookmark_service.delete_bookmark(db_session, BOB, created.id)

    result = await db_session.execute(select(Bookmark).where(Bookmark.id == int(created.id)))
    assert result.scalar_one_or_none() is not None


async def test__delete_bookmark__owner_removes_row(db_session: AsyncSession) -> None:
    created = await _create(db_session, owner=ALICE)

    await bookmark_service.delete_bookmark(db_session, ALICE, created.id)

    assert await bookmark_service.get_bookmark(db_session, ALICE, created.id) is None


@pytest.mark.parametrize("bookmark_id", ["999999", "abc"])
async def test__delete_bookmark__nonexistent_raises(
    db_session: AsyncSession, bookmark_id: str,
) -> None:
    with pytest.raises(NotFoundError):
        await bookmark_service.delete_bookmark(db_session, ALICE, bookmark_id)
