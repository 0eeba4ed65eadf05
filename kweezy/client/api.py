"""
HTTP client for the reader API
"""
import logging
from typing import Any, Dict, List, Optional
import httpx

from kweezy.core.config import settings

logger = logging.getLogger(__name__)


class ReaderApiError(Exception):
    """Non-2xx response from the reader API"""

    def __init__(self, status_code: int, message: str):
        super().__init__(f"{status_code}: {message}")
        self.status_code = status_code
        self.message = message


class ReaderApiClient:
    """
    Thin async wrapper over the REST endpoints used by the reader

    Responses are unwrapped from the {code, message, data} envelope and the
    data part is returned.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        token: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: float = 10.0
    ):
        self.token = token
        self._client = httpx.AsyncClient(
            base_url=(base_url or settings.API_BASE_URL).rstrip("/"),
            transport=transport,
            timeout=timeout
        )

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)

    async def close(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "ReaderApiClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    async def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        response = await self._client.request(method, path, headers=self._headers(), **kwargs)
        if response.status_code in (401, 403):
            logger.warning("Auth error (%s) on %s %s", response.status_code, method, path)
        return response

    @staticmethod
    def _data(response: httpx.Response) -> Any:
        if response.is_success:
            if response.status_code == 204 or not response.content:
                return None
            return response.json().get("data")

        message = response.reason_phrase
        try:
            body = response.json()
            message = body.get("message") or message
        except ValueError:
            pass
        raise ReaderApiError(response.status_code, message)

    # ---------- auth ----------

    async def login(self, email: str, password: str) -> Dict[str, Any]:
        """Log in and keep the returned token for later calls"""
        response = await self._request("POST", "/auth/login", json={"email": email, "password": password})
        data = self._data(response)
        self.token = data["token"]
        return data

    async def register(self, username: str, email: str, password: str) -> Dict[str, Any]:
        response = await self._request(
            "POST", "/auth/register",
            json={"username": username, "email": email, "password": password}
        )
        return self._data(response)

    async def update_profile(self, username: Optional[str] = None, username_color: Optional[str] = None) -> Dict[str, Any]:
        payload = {}
        if username is not None:
            payload["username"] = username
        if username_color is not None:
            payload["usernameColor"] = username_color
        response = await self._request("PUT", "/auth/profile", json=payload)
        return self._data(response)

    # ---------- content ----------

    async def fetch_novels(self) -> List[Dict[str, Any]]:
        return self._data(await self._request("GET", "/content/novels"))

    async def fetch_novel_details(self, novel_id: int) -> Dict[str, Any]:
        return self._data(await self._request("GET", f"/content/novels/{novel_id}"))

    async def fetch_chapter_segments(self, chapter_id: int) -> List[Dict[str, Any]]:
        return self._data(await self._request("GET", f"/content/chapters/{chapter_id}/segments"))

    # ---------- interactions ----------

    async def fetch_comments(self, segment_id: int, page: int = 1, limit: int = 10) -> Dict[str, Any]:
        response = await self._request(
            "GET", f"/interactions/segments/{segment_id}/comments",
            params={"page": page, "limit": limit}
        )
        return self._data(response)

    async def post_comment(self, segment_id: int, comment_text: str, parent_comment_id: Optional[int] = None) -> Dict[str, Any]:
        response = await self._request(
            "POST", f"/interactions/segments/{segment_id}/comments",
            json={"commentText": comment_text, "parentCommentId": parent_comment_id}
        )
        return self._data(response)

    async def toggle_comment_like(self, comment_id: int) -> Dict[str, Any]:
        return self._data(await self._request("POST", f"/interactions/comments/{comment_id}/like"))

    async def fetch_reactions(self, segment_id: int) -> Dict[str, int]:
        return self._data(await self._request("GET", f"/interactions/segments/{segment_id}/reactions"))

    async def toggle_reaction(self, segment_id: int, reaction_type: str) -> Dict[str, Any]:
        response = await self._request(
            "POST", f"/interactions/segments/{segment_id}/reactions",
            json={"reactionType": reaction_type}
        )
        return self._data(response)

    # ---------- blog ----------

    async def fetch_blog_posts(self, page: int = 1, limit: int = 5) -> Dict[str, Any]:
        return self._data(await self._request("GET", "/blog/", params={"page": page, "limit": limit}))

    async def fetch_blog_post(self, post_id: int) -> Dict[str, Any]:
        return self._data(await self._request("GET", f"/blog/{post_id}"))

    # ---------- progress ----------

    async def fetch_progress(self, novel_id: int) -> Optional[Dict[str, Any]]:
        """Server progress for a novel, None when there is none"""
        response = await self._request("GET", f"/progress/novel/{novel_id}")
        if response.status_code == 404:
            return None
        return self._data(response)

    async def update_progress(self, novel_id: int, chapter_id: int, scroll_y: float) -> Dict[str, Any]:
        response = await self._request(
            "PUT", f"/progress/novel/{novel_id}",
            json={"lastReadChapterId": chapter_id, "lastReadScrollY": scroll_y}
        )
        return self._data(response)
