"""
Admin content management
"""
import pytest
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from kweezy.core.exceptions import ConflictError
from kweezy.models import (
    Novel, Chapter, ChapterContentSegment, Comment, CommentLike, Reaction, UserNovelProgress
)
from kweezy.schemas.admin import SegmentInput
from kweezy.services.content_service import ContentService
from conftest import auth_headers, make_user, make_novel, chapter_of, segment_of, make_comment


async def count(db, column, *conditions):
    result = await db.execute(select(func.count(column)).where(*conditions))
    return result.scalar()


async def add_interactions(db, segment, user):
    comment = await make_comment(db, segment, user, "a comment", likes=1, likers=[user])
    await make_comment(db, segment, user, "a reply")
    db.add(Reaction(user_id=user.id, segment_id=segment.id, reaction_type="heart"))
    await db.commit()
    return comment


async def test_admin_role_required(client, db):
    reader = await make_user(db, "reader")

    response = await client.get("/api/admin/novels/list", headers=auth_headers(reader))
    assert response.status_code == 403
    assert response.json()["message"] == "Forbidden: Requires admin role."

    assert (await client.get("/api/admin/novels/list")).status_code == 401


async def test_create_novel_and_chapters(client, db):
    headers = auth_headers(await make_user(db, "admin", role="admin"))

    response = await client.post(
        "/api/admin/novels",
        json={"title": " City of Endless Night ", "authorName": "Marcus Cole"},
        headers=headers
    )
    assert response.status_code == 201
    novel = response.json()["data"]
    assert novel["title"] == "City of Endless Night"

    duplicate = await client.post("/api/admin/novels", json={"title": "City of Endless Night"}, headers=headers)
    assert duplicate.status_code == 409
    assert duplicate.json()["message"] == "A novel with this title already exists."

    chapter_url = f"/api/admin/novels/{novel['id']}/chapters"
    response = await client.post(chapter_url, json={"title": "Neon Rain", "chapterNumber": 1}, headers=headers)
    assert response.status_code == 201
    assert response.json()["data"]["chapterNumber"] == 1

    duplicate = await client.post(chapter_url, json={"chapterNumber": 1}, headers=headers)
    assert duplicate.status_code == 409
    assert duplicate.json()["message"] == "Chapter number 1 already exists for this novel."

    missing = await client.post("/api/admin/novels/999/chapters", json={"chapterNumber": 1}, headers=headers)
    assert missing.status_code == 404

    invalid = await client.post(chapter_url, json={"chapterNumber": 0}, headers=headers)
    assert invalid.status_code == 400


async def test_novel_listings(client, db):
    headers = auth_headers(await make_user(db, "admin", role="admin"))
    await make_novel(db, title="Zeta", chapters=2)
    await make_novel(db, title="Alpha", chapters=1)

    options = (await client.get("/api/admin/novels/list", headers=headers)).json()["data"]
    assert [o["title"] for o in options] == ["Alpha", "Zeta"]

    managed = (await client.get("/api/admin/novels/manage", headers=headers)).json()["data"]
    assert [n["title"] for n in managed] == ["Alpha", "Zeta"]
    assert [c["chapterNumber"] for c in managed[1]["chapters"]] == [1, 2]


async def test_replace_content_yields_exactly_the_new_segments(client, db):
    admin = await make_user(db, "admin", role="admin")
    novel = await make_novel(db, segments=20)
    chapter = await chapter_of(db, novel)
    await add_interactions(db, await segment_of(db, chapter, 5), admin)

    payload = {"segments": [
        {"segmentIndex": 0, "textContent": "New opening."},
        {"segmentIndex": 1, "segmentType": "dialogue", "textContent": "\"Hello.\""},
        {"segmentIndex": 2, "textContent": "New ending."},
    ]}
    response = await client.post(
        f"/api/admin/novels/{novel.id}/chapters/1/content", json=payload, headers=auth_headers(admin)
    )

    assert response.status_code == 200
    assert response.json()["data"] == {"chapterId": chapter.id, "segmentCount": 3}
    assert await count(db, ChapterContentSegment.id, ChapterContentSegment.chapter_id == chapter.id) == 3
    assert await count(db, Comment.id) == 0
    assert await count(db, CommentLike.id) == 0
    assert await count(db, Reaction.id) == 0

    segments = (await client.get(f"/api/content/chapters/{chapter.id}/segments")).json()["data"]
    assert [s["textContent"] for s in segments] == ["New opening.", "\"Hello.\"", "New ending."]
    assert segments[1]["segmentType"] == "dialogue"


async def test_replace_content_validation(client, db):
    headers = auth_headers(await make_user(db, "admin", role="admin"))
    novel = await make_novel(db, segments=4)
    url = f"/api/admin/novels/{novel.id}/chapters/1/content"

    empty = await client.post(url, json={"segments": []}, headers=headers)
    assert empty.status_code == 400
    assert empty.json()["message"] == "Segments array is required and cannot be empty."

    duplicate = await client.post(url, json={"segments": [
        {"segmentIndex": 0, "textContent": "a"},
        {"segmentIndex": 0, "textContent": "b"},
    ]}, headers=headers)
    assert duplicate.status_code == 400

    missing = await client.post(
        f"/api/admin/novels/{novel.id}/chapters/9/content",
        json={"segments": [{"segmentIndex": 0, "textContent": "a"}]},
        headers=headers
    )
    assert missing.status_code == 404

    # rejected requests leave the stored content untouched
    chapter = await chapter_of(db, novel)
    assert await count(db, ChapterContentSegment.id, ChapterContentSegment.chapter_id == chapter.id) == 4


class FlushThenFailSession(AsyncSession):
    """Writes reach the database but the commit never succeeds"""

    async def commit(self):
        await self.flush()
        raise RuntimeError("connection lost during commit")


async def snapshot(db, chapter_id):
    result = await db.execute(
        select(ChapterContentSegment.segment_index, ChapterContentSegment.text_content)
        .where(ChapterContentSegment.chapter_id == chapter_id)
        .order_by(ChapterContentSegment.segment_index)
    )
    return result.all()


async def test_replace_content_failed_commit_keeps_original_segments(engine, db):
    admin = await make_user(db, "admin", role="admin")
    novel = await make_novel(db, segments=20)
    chapter = await chapter_of(db, novel)
    novel_id, chapter_id = novel.id, chapter.id
    await add_interactions(db, await segment_of(db, chapter, 5), admin)
    before = await snapshot(db, chapter_id)

    async with FlushThenFailSession(engine, expire_on_commit=False) as session:
        with pytest.raises(RuntimeError):
            await ContentService.replace_chapter_content(
                session, novel_id, 1, [SegmentInput(segmentIndex=0, textContent="Replacement.")]
            )

    assert len(before) == 20
    assert await snapshot(db, chapter_id) == before
    assert await count(db, Comment.id) == 2
    assert await count(db, CommentLike.id) == 1
    assert await count(db, Reaction.id) == 1


async def test_replace_content_duplicate_index_keeps_original_segments(session_factory, db):
    admin = await make_user(db, "admin", role="admin")
    novel = await make_novel(db, segments=20)
    chapter = await chapter_of(db, novel)
    novel_id, chapter_id = novel.id, chapter.id
    await add_interactions(db, await segment_of(db, chapter, 5), admin)
    before = await snapshot(db, chapter_id)

    # built directly, so the request-level uniqueness check never runs
    duplicates = [
        SegmentInput(segmentIndex=0, textContent="First."),
        SegmentInput(segmentIndex=0, textContent="Second."),
    ]
    async with session_factory() as session:
        with pytest.raises(ConflictError) as exc_info:
            await ContentService.replace_chapter_content(session, novel_id, 1, duplicates)

    assert exc_info.value.message == f"Duplicate segment index found for chapter {chapter_id}."
    assert await snapshot(db, chapter_id) == before
    assert await count(db, Comment.id) == 2
    assert await count(db, Reaction.id) == 1


async def test_delete_novel_cascades(client, db):
    admin = await make_user(db, "admin", role="admin")
    novel = await make_novel(db, chapters=2, segments=3)
    keep = await make_novel(db, title="Keep me", segments=2)
    chapter = await chapter_of(db, novel, 2)
    await add_interactions(db, await segment_of(db, chapter, 1), admin)
    db.add(UserNovelProgress(user_id=admin.id, novel_id=novel.id, last_read_chapter_id=chapter.id, last_read_scroll_y=5))
    await db.commit()

    response = await client.delete(f"/api/admin/novels/{novel.id}", headers=auth_headers(admin))

    assert response.status_code == 200
    assert await count(db, Novel.id) == 1
    assert await count(db, Chapter.id) == 1
    assert await count(db, ChapterContentSegment.id) == 2
    assert await count(db, Comment.id) == 0
    assert await count(db, Reaction.id) == 0
    assert await count(db, UserNovelProgress.id) == 0
    assert (await client.get(f"/api/content/novels/{keep.id}")).status_code == 200
    assert (await client.get(f"/api/content/novels/{novel.id}")).status_code == 404

    again = await client.delete(f"/api/admin/novels/{novel.id}", headers=auth_headers(admin))
    assert again.status_code == 404


async def test_delete_chapter_cascades(client, db):
    admin = await make_user(db, "admin", role="admin")
    novel = await make_novel(db, chapters=2, segments=3)
    doomed = await chapter_of(db, novel, 1)
    await add_interactions(db, await segment_of(db, doomed, 0), admin)
    db.add(UserNovelProgress(user_id=admin.id, novel_id=novel.id, last_read_chapter_id=doomed.id, last_read_scroll_y=5))
    await db.commit()

    response = await client.delete(f"/api/admin/chapters/{doomed.id}", headers=auth_headers(admin))

    assert response.status_code == 200
    assert await count(db, Chapter.id) == 1
    assert await count(db, ChapterContentSegment.id) == 3
    assert await count(db, Comment.id) == 0
    assert await count(db, UserNovelProgress.id) == 0

    missing = await client.delete(f"/api/admin/chapters/{doomed.id}", headers=auth_headers(admin))
    assert missing.status_code == 404
