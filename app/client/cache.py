import logging
from typing import Any, Dict, List, Optional, Tuple

from app.client.api import BlogApiClient
from app.modules.posts.reactions.schemas.reaction import ReactionKind

logger = logging.getLogger(__name__)


class PostCache:
    """
    The last-fetched snapshot of posts for one client session.

    Counts held here are what the client displays. They are only a
    projection of the server: refresh() replaces them wholesale. Counts for
    posts the last fetch did not return are kept aside and never show up
    in posts().
    """

    def __init__(self, api: BlogApiClient):
        self.api = api
        self._posts: Dict[str, Dict[str, Any]] = {}
        self._unlisted_counts: Dict[Tuple[str, ReactionKind], int] = {}

    def refresh(self) -> List[Dict[str, Any]]:
        posts = self.api.list_posts()
        self._posts = {str(p["id"]): dict(p) for p in posts if isinstance(p, dict) and "id" in p}
        self._unlisted_counts = {}
        logger.debug(f"Cached {len(self._posts)} posts")
        return self.posts()

    def posts(self) -> List[Dict[str, Any]]:
        """Cached posts, newest first"""
        return sorted(self._posts.values(), key=lambda p: p.get("createdAt") or 0, reverse=True)

    def get(self, post_id: str) -> Optional[Dict[str, Any]]:
        return self._posts.get(str(post_id))

    def count(self, post_id: str, kind: ReactionKind) -> int:
        kind = ReactionKind(kind)
        post = self.get(post_id)
        if post is None:
            return self._unlisted_counts.get((str(post_id), kind), 0)
        value = post.get(kind.value)
        return value if isinstance(value, int) and value > 0 else 0

    def set_count(self, post_id: str, kind: ReactionKind, value: int) -> None:
        kind = ReactionKind(kind)
        value = max(0, int(value))
        post = self.get(post_id)
        if post is None:
            self._unlisted_counts[(str(post_id), kind)] = value
        else:
            post[kind.value] = value
