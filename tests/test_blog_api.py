"""
Blog posts: public reads and admin authoring
"""
from sqlalchemy import select, func

from kweezy.models import BlogPost
from conftest import auth_headers, make_user, make_post


async def test_published_posts_newest_first(client, db):
    admin = await make_user(db, "admin", role="admin")
    await make_post(db, admin, "Older", published_days_ago=3)
    await make_post(db, admin, "Newest", published_days_ago=0)
    await make_post(db, admin, "Middle", published_days_ago=1)
    await make_post(db, admin, "Draft", published_days_ago=None)

    response = await client.get("/api/blog/")

    assert response.status_code == 200
    data = response.json()["data"]
    assert [p["title"] for p in data["posts"]] == ["Newest", "Middle", "Older"]
    assert data["posts"][0]["author"] == {"username": "admin"}
    assert data["totalPages"] == 1
    assert data["currentPage"] == 1


async def test_blog_pagination_and_limits(client, db):
    admin = await make_user(db, "admin", role="admin")
    for day in range(7):
        await make_post(db, admin, f"Post {day}", published_days_ago=day)

    first = (await client.get("/api/blog/")).json()["data"]
    assert len(first["posts"]) == 5
    assert first["totalPages"] == 2

    second = (await client.get("/api/blog/", params={"page": 2})).json()["data"]
    assert [p["title"] for p in second["posts"]] == ["Post 5", "Post 6"]

    assert (await client.get("/api/blog/", params={"limit": 21})).status_code == 400


async def test_single_post_hides_drafts(client, db):
    admin = await make_user(db, "admin", role="admin")
    published = await make_post(db, admin, "Live")
    draft = await make_post(db, admin, "Hidden", published_days_ago=None)

    assert (await client.get(f"/api/blog/{published.id}")).json()["data"]["title"] == "Live"

    response = await client.get(f"/api/blog/{draft.id}")
    assert response.status_code == 404
    assert response.json()["message"] == "Blog post not found or not published."


async def test_admin_create_update_delete(client, db):
    admin = await make_user(db, "admin", role="admin")
    headers = auth_headers(admin)

    created = await client.post(
        "/api/blog/",
        json={"title": "Feature Update: Themes & Fonts", "content": "Dark, light and OLED.", "publishNow": True},
        headers=headers
    )
    assert created.status_code == 201
    post = created.json()["data"]
    assert post["publishedAt"] is not None
    assert post["authorId"] == admin.id

    duplicate = await client.post("/api/blog/", json={"title": post["title"], "content": "again"}, headers=headers)
    assert duplicate.status_code == 409

    empty = await client.put(f"/api/blog/{post['id']}", json={}, headers=headers)
    assert empty.status_code == 400
    assert empty.json()["message"] == "No update data provided (title, content, or publishedAt)."

    unpublished = await client.put(f"/api/blog/{post['id']}", json={"publishedAt": None}, headers=headers)
    assert unpublished.status_code == 200
    assert unpublished.json()["data"]["publishedAt"] is None
    assert (await client.get(f"/api/blog/{post['id']}")).status_code == 404

    renamed = await client.put(f"/api/blog/{post['id']}", json={"title": "Renamed"}, headers=headers)
    assert renamed.json()["data"]["title"] == "Renamed"
    assert renamed.json()["data"]["content"] == "Dark, light and OLED."

    deleted = await client.delete(f"/api/blog/{post['id']}", headers=headers)
    assert deleted.status_code == 204
    assert deleted.content == b""
    assert (await db.execute(select(func.count(BlogPost.id)))).scalar() == 0

    missing = await client.delete(f"/api/blog/{post['id']}", headers=headers)
    assert missing.status_code == 404


async def test_draft_by_default(client, db):
    headers = auth_headers(await make_user(db, "admin", role="admin"))

    created = await client.post("/api/blog/", json={"title": "Draft", "content": "Not yet."}, headers=headers)

    assert created.json()["data"]["publishedAt"] is None
    assert (await client.get("/api/blog/")).json()["data"]["posts"] == []


async def test_authoring_requires_admin(client, db):
    reader = await make_user(db, "reader")

    response = await client.post("/api/blog/", json={"title": "Mine", "content": "x"}, headers=auth_headers(reader))

    assert response.status_code == 403
