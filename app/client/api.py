import base64
import logging
import mimetypes
from pathlib import Path
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import requests

from app.modules.posts.reactions.schemas.reaction import ReactionKind

logger = logging.getLogger(__name__)

# URL segment for each counter
REACTION_PATHS = {
    ReactionKind.LIKE: "like",
    ReactionKind.DISLIKE: "dislike",
}


class ApiError(Exception):
    """A request that did not succeed; status_code is None for network failures"""

    def __init__(self, status_code: Optional[int], message: str):
        self.status_code = status_code
        self.message = message
        super().__init__(f"HTTP {status_code}: {message}" if status_code else message)


class BlogApiClient:
    """Thin client for the blog HTTP API. Never retries."""

    def __init__(self, base_url: str = "http://localhost:3000", session: Any = None, timeout: float = 30):
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout

    def _request(self, method: str, path: str, json: Any = None) -> Any:
        url = f"{self.base_url}{path}"
        try:
            resp = self.session.request(method, url, json=json, timeout=self.timeout)
        except requests.RequestException as e:
            logger.warning(f"{method} {url} failed: {e}")
            raise ApiError(None, str(e)) from e

        if resp.status_code == 204:
            return None
        if not 200 <= resp.status_code < 300:
            try:
                message = resp.json().get("detail", resp.text)
            except ValueError:
                message = resp.text
            raise ApiError(resp.status_code, str(message))
        try:
            return resp.json()
        except ValueError as e:
            raise ApiError(resp.status_code, "Invalid JSON in response") from e

    @staticmethod
    def _post_path(post_id: str, *tail: str) -> str:
        parts = [quote(str(post_id), safe=""), *tail]
        return "/api/posts/" + "/".join(parts)

    # Posts

    def list_posts(self) -> List[Dict[str, Any]]:
        return self._request("GET", "/api/posts")

    def get_post(self, post_id: str) -> Dict[str, Any]:
        return self._request("GET", self._post_path(post_id))

    def create_post(self, title: str, content: str, author: Optional[str] = None,
                    image_url: Optional[str] = None) -> Dict[str, Any]:
        body = {"title": title, "content": content, "author": author, "imageUrl": image_url}
        return self._request("POST", "/api/posts", json={k: v for k, v in body.items() if v is not None})

    def update_post(self, post_id: str, **fields: str) -> Dict[str, Any]:
        return self._request("PUT", self._post_path(post_id), json=fields)

    def delete_post(self, post_id: str) -> None:
        self._request("DELETE", self._post_path(post_id))

    # Counters

    def set_reaction(self, post_id: str, kind: ReactionKind, active: bool) -> int:
        """Add (active) or remove one like/dislike and return the server's count"""
        kind = ReactionKind(kind)
        data = self._request("POST" if active else "DELETE", self._post_path(post_id, REACTION_PATHS[kind]))
        count = data.get(kind.value) if isinstance(data, dict) else None
        if not isinstance(count, int):
            raise ApiError(None, f"Response has no {kind.value} count")
        return count

    def like(self, post_id: str) -> int:
        return self.set_reaction(post_id, ReactionKind.LIKE, True)

    def unlike(self, post_id: str) -> int:
        return self.set_reaction(post_id, ReactionKind.LIKE, False)

    def dislike(self, post_id: str) -> int:
        return self.set_reaction(post_id, ReactionKind.DISLIKE, True)

    def undislike(self, post_id: str) -> int:
        return self.set_reaction(post_id, ReactionKind.DISLIKE, False)

    # Comments and uploads

    def add_comment(self, post_id: str, content: str, author: Optional[str] = None) -> Dict[str, Any]:
        body = {"content": content}
        if author is not None:
            body["author"] = author
        return self._request("POST", self._post_path(post_id, "comments"), json=body)

    def upload_data_url(self, data_url: str) -> str:
        return self._request("POST", "/api/uploads", json={"dataUrl": data_url})["url"]

    def upload_file(self, path: Path) -> str:
        """Send a local image as a data URL and return the stored URL"""
        path = Path(path)
        mime = mimetypes.guess_type(path.name)[0] or "application/octet-stream"
        encoded = base64.b64encode(path.read_bytes()).decode("ascii")
        return self.upload_data_url(f"data:{mime};base64,{encoded}")
