"""
Server-side reading progress
"""
import pytest
from sqlalchemy import select, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from kweezy.models import UserNovelProgress
from kweezy.services.progress_service import ProgressService
from conftest import auth_headers, make_user, make_novel, chapter_of


def progress_url(novel_id):
    return f"/api/progress/novel/{novel_id}"


async def test_absent_progress_is_null(client, db):
    novel = await make_novel(db)
    user = await make_user(db)

    response = await client.get(progress_url(novel.id), headers=auth_headers(user))

    assert response.status_code == 200
    assert response.json()["data"] is None


async def test_progress_requires_auth(client, db):
    novel = await make_novel(db)

    assert (await client.get(progress_url(novel.id))).status_code == 401
    response = await client.put(progress_url(novel.id), json={"lastReadChapterId": 1, "lastReadScrollY": 0})
    assert response.status_code == 401


async def test_double_upsert_keeps_one_row_and_second_wins(client, db):
    novel = await make_novel(db, chapters=3)
    chapter_one = await chapter_of(db, novel, 1)
    chapter_three = await chapter_of(db, novel, 3)
    user = await make_user(db)
    headers = auth_headers(user)

    first = await client.put(
        progress_url(novel.id),
        json={"lastReadChapterId": chapter_one.id, "lastReadScrollY": 120.5},
        headers=headers
    )
    assert first.status_code == 200
    assert first.json()["message"] == "Progress updated successfully"
    assert first.json()["data"]["chapterNumber"] == 1

    second = await client.put(
        progress_url(novel.id),
        json={"lastReadChapterId": chapter_three.id, "lastReadScrollY": 0},
        headers=headers
    )
    assert second.status_code == 200
    assert second.json()["data"]["id"] == first.json()["data"]["id"]

    count = await db.execute(select(func.count(UserNovelProgress.id)))
    assert count.scalar() == 1

    stored = (await client.get(progress_url(novel.id), headers=headers)).json()["data"]
    assert stored["lastReadChapterId"] == chapter_three.id
    assert stored["lastReadScrollY"] == 0
    assert stored["chapterNumber"] == 3
    assert stored["userId"] == user.id
    assert stored["novelId"] == novel.id


async def test_progress_is_per_user(client, db):
    novel = await make_novel(db, chapters=2)
    chapter = await chapter_of(db, novel, 2)
    alice = await make_user(db, "alice")
    bob = await make_user(db, "bob")

    await client.put(
        progress_url(novel.id),
        json={"lastReadChapterId": chapter.id, "lastReadScrollY": 40},
        headers=auth_headers(alice)
    )

    assert (await client.get(progress_url(novel.id), headers=auth_headers(bob))).json()["data"] is None


async def test_chapter_from_another_novel_is_rejected(client, db):
    novel = await make_novel(db, title="First")
    other = await make_novel(db, title="Second")
    foreign_chapter = await chapter_of(db, other)
    headers = auth_headers(await make_user(db))

    response = await client.put(
        progress_url(novel.id),
        json={"lastReadChapterId": foreign_chapter.id, "lastReadScrollY": 10},
        headers=headers
    )

    assert response.status_code == 400
    assert response.json()["message"] == "Invalid chapter ID for this novel."


async def test_unknown_chapter_is_rejected(client, db):
    novel = await make_novel(db)
    headers = auth_headers(await make_user(db))

    response = await client.put(
        progress_url(novel.id),
        json={"lastReadChapterId": 9999, "lastReadScrollY": 10},
        headers=headers
    )

    assert response.status_code == 400


async def test_negative_scroll_is_rejected(client, db):
    novel = await make_novel(db)
    chapter = await chapter_of(db, novel)
    headers = auth_headers(await make_user(db))

    response = await client.put(
        progress_url(novel.id),
        json={"lastReadChapterId": chapter.id, "lastReadScrollY": -1},
        headers=headers
    )

    assert response.status_code == 400


async def test_novel_detail_carries_viewer_progress(client, db):
    novel = await make_novel(db, chapters=2)
    chapter = await chapter_of(db, novel, 2)
    user = await make_user(db)
    headers = auth_headers(user)

    anonymous = (await client.get(f"/api/content/novels/{novel.id}")).json()["data"]
    assert anonymous["userProgress"] is None
    assert [c["chapterNumber"] for c in anonymous["chapters"]] == [1, 2]

    await client.put(
        progress_url(novel.id),
        json={"lastReadChapterId": chapter.id, "lastReadScrollY": 300},
        headers=headers
    )

    detail = (await client.get(f"/api/content/novels/{novel.id}", headers=headers)).json()["data"]
    assert detail["userProgress"]["chapterNumber"] == 2
    assert detail["userProgress"]["lastReadScrollY"] == 300


class ForeignKeyFailSession(AsyncSession):
    """Every commit fails the way a vanished user's row would"""

    async def commit(self):
        raise IntegrityError("INSERT INTO user_novel_progress", {}, Exception("FOREIGN KEY constraint failed"))


async def test_unrelated_integrity_error_is_not_retried(engine, db):
    novel = await make_novel(db)
    chapter = await chapter_of(db, novel)
    user = await make_user(db)
    user_id, novel_id, chapter_id = user.id, novel.id, chapter.id

    async with ForeignKeyFailSession(engine, expire_on_commit=False) as session:
        with pytest.raises(IntegrityError):
            await ProgressService.upsert(session, user_id, novel_id, chapter_id, 120.0)

    count = await db.execute(select(func.count(UserNovelProgress.id)))
    assert count.scalar() == 0
