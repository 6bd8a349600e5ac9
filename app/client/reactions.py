"""
Optimistic like/dislike toggling.

Each (post, counter) pair moves between two states. While idle, the local
flag says whether this client has reacted and the cache holds the displayed
count. A toggle flips the flag and moves the displayed count by one right
away (pending), then sends the request. On success the server's count
replaces the guess; on any failure both the flag and the count go back to
exactly what they were and the user is told.
"""
import logging
from dataclasses import dataclass
from typing import Callable, Optional, Set, Tuple

from app.client.api import ApiError, BlogApiClient
from app.client.cache import PostCache
from app.client.flags import FlagStore
from app.modules.posts.reactions.schemas.reaction import ReactionKind

logger = logging.getLogger(__name__)

FAILURE_MESSAGES = {
    ReactionKind.LIKE: "Could not save your like. Please try again.",
    ReactionKind.DISLIKE: "Could not save your dislike. Please try again.",
}


class ReactionPendingError(Exception):
    """A toggle was requested while the previous one for the same pair is in flight"""


@dataclass(frozen=True)
class CounterState:
    active: bool
    count: int
    pending: bool = False


@dataclass(frozen=True)
class ToggleResult:
    post_id: str
    kind: ReactionKind
    ok: bool
    active: bool
    count: int
    error: Optional[str] = None


def _log_notice(message: str) -> None:
    logger.warning(message)


class ReactionController:
    def __init__(
        self,
        api: BlogApiClient,
        cache: PostCache,
        flags: FlagStore,
        notify: Callable[[str], None] = _log_notice,
    ):
        self.api = api
        self.cache = cache
        self.flags = flags
        self.notify = notify
        self._pending: Set[Tuple[str, ReactionKind]] = set()

    def state(self, post_id: str, kind: ReactionKind) -> CounterState:
        kind = ReactionKind(kind)
        return CounterState(
            active=self.flags.is_set(kind, post_id),
            count=self.cache.count(post_id, kind),
            pending=(str(post_id), kind) in self._pending,
        )

    def _apply(self, post_id: str, kind: ReactionKind, active: bool, count: int) -> None:
        self.flags.set_flag(kind, post_id, active)
        self.cache.set_count(post_id, kind, count)

    def toggle(self, post_id: str, kind: ReactionKind) -> ToggleResult:
        kind = ReactionKind(kind)
        key = (str(post_id), kind)
        if key in self._pending:
            raise ReactionPendingError(f"{kind.value} update for post {post_id} is already in flight")

        was_active = self.flags.is_set(kind, post_id)
        count = self.cache.count(post_id, kind)
        now_active = not was_active
        self._pending.add(key)
        try:
            self._apply(post_id, kind, now_active, max(0, count + (1 if now_active else -1)))
            try:
                server_count = self.api.set_reaction(post_id, kind, now_active)
            except ApiError as e:
                self._apply(post_id, kind, was_active, count)
                self.notify(FAILURE_MESSAGES[kind])
                logger.info(f"Rolled back {kind.value} toggle on post {post_id}: {e}")
                return ToggleResult(str(post_id), kind, ok=False, active=was_active, count=count, error=str(e))
            except Exception:
                self._apply(post_id, kind, was_active, count)
                raise
            self.cache.set_count(post_id, kind, server_count)
            return ToggleResult(str(post_id), kind, ok=True, active=now_active, count=max(0, server_count))
        finally:
            self._pending.discard(key)

    def toggle_like(self, post_id: str) -> ToggleResult:
        return self.toggle(post_id, ReactionKind.LIKE)

    def toggle_dislike(self, post_id: str) -> ToggleResult:
        return self.toggle(post_id, ReactionKind.DISLIKE)
