"""
Public catalogue endpoints
"""
from conftest import make_novel, chapter_of


async def test_health(client):
    assert (await client.get("/health")).json() == {"status": "healthy"}


async def test_novels_newest_first(client, db):
    await make_novel(db, title="The Whispering Woods")
    await make_novel(db, title="City of Endless Night")

    response = await client.get("/api/content/novels")

    assert response.status_code == 200
    novels = response.json()["data"]
    assert [n["title"] for n in novels] == ["City of Endless Night", "The Whispering Woods"]
    assert novels[1]["authorName"] == "Eliza Thorne"


async def test_segments_in_index_order(client, db):
    novel = await make_novel(db, segments=4)
    chapter = await chapter_of(db, novel)

    response = await client.get(f"/api/content/chapters/{chapter.id}/segments")

    segments = response.json()["data"]
    assert [s["segmentIndex"] for s in segments] == [0, 1, 2, 3]
    assert segments[0]["segmentType"] == "paragraph"


async def test_missing_content(client):
    novel = await client.get("/api/content/novels/404")
    assert novel.status_code == 404
    assert novel.json()["message"] == "Novel not found."

    chapter = await client.get("/api/content/chapters/404/segments")
    assert chapter.status_code == 404
    assert chapter.json()["message"] == "Chapter not found."

    bad_id = await client.get("/api/content/novels/0")
    assert bad_id.status_code == 400
