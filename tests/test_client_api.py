"""
Reader API client against a mocked transport
"""
import json

import httpx
import pytest

from kweezy.client.api import ReaderApiClient, ReaderApiError


def envelope(data, code=200, message="success"):
    return {"code": code, "message": message, "data": data}


def make_client(handler, token=None):
    return ReaderApiClient(base_url="http://test/api", token=token, transport=httpx.MockTransport(handler))


async def test_login_keeps_token_for_later_calls():
    seen = []

    def handler(request: httpx.Request):
        seen.append(request)
        if request.url.path == "/api/auth/login":
            assert json.loads(request.content) == {"email": "testuser@example.com", "password": "password123"}
            return httpx.Response(200, json=envelope({"token": "abc.def.ghi", "user": {"id": 1}}))
        return httpx.Response(200, json=envelope(None))

    async with make_client(handler) as api:
        assert not api.is_authenticated
        await api.login("testuser@example.com", "password123")
        assert api.is_authenticated
        assert await api.fetch_progress(3) is None

    assert "authorization" not in seen[0].headers
    assert seen[1].headers["authorization"] == "Bearer abc.def.ghi"
    assert seen[1].url.path == "/api/progress/novel/3"


async def test_comments_request_shape():
    def handler(request: httpx.Request):
        assert request.url.path == "/api/interactions/segments/42/comments"
        assert request.url.params["page"] == "2"
        assert request.url.params["limit"] == "10"
        return httpx.Response(200, json=envelope({"comments": [], "totalPages": 2, "currentPage": 2}))

    async with make_client(handler) as api:
        page = await api.fetch_comments(42, page=2)

    assert page["currentPage"] == 2


async def test_progress_update_body():
    def handler(request: httpx.Request):
        assert request.method == "PUT"
        assert json.loads(request.content) == {"lastReadChapterId": 12, "lastReadScrollY": 88.5}
        return httpx.Response(200, json=envelope({"id": 1, "chapterNumber": 2}, message="Progress updated successfully"))

    async with make_client(handler, token="t") as api:
        progress = await api.update_progress(5, 12, 88.5)

    assert progress["chapterNumber"] == 2


async def test_missing_progress_returns_none():
    def handler(request: httpx.Request):
        return httpx.Response(404, json={"code": 404, "message": "Not found", "data": None})

    async with make_client(handler, token="t") as api:
        assert await api.fetch_progress(5) is None


async def test_errors_raise_with_server_message():
    def handler(request: httpx.Request):
        return httpx.Response(404, json={"code": 404, "message": "Segment not found.", "data": None})

    async with make_client(handler) as api:
        with pytest.raises(ReaderApiError) as exc_info:
            await api.fetch_reactions(9)

    assert exc_info.value.status_code == 404
    assert exc_info.value.message == "Segment not found."


async def test_non_json_error_body():
    def handler(request: httpx.Request):
        return httpx.Response(502, text="Bad gateway")

    async with make_client(handler) as api:
        with pytest.raises(ReaderApiError) as exc_info:
            await api.fetch_novels()

    assert exc_info.value.status_code == 502


async def test_toggle_endpoints():
    calls = []

    def handler(request: httpx.Request):
        calls.append((request.method, request.url.path, request.content))
        return httpx.Response(201, json=envelope({"action": "added", "active": True}, code=201))

    async with make_client(handler, token="t") as api:
        reaction = await api.toggle_reaction(3, "fire")
        await api.toggle_comment_like(8)

    assert reaction["active"] is True
    assert calls[0][1] == "/api/interactions/segments/3/reactions"
    assert json.loads(calls[0][2]) == {"reactionType": "fire"}
    assert calls[1][:2] == ("POST", "/api/interactions/comments/8/like")
