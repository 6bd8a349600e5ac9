import logging
from pathlib import Path
from typing import Callable, List, Optional, TypeVar, Union

from starlette.concurrency import run_in_threadpool

from app.core.config import Settings
from app.db.json_file import JsonDocument, pick_latest_file
from app.db.serializer import WriteSerializer
from app.modules.posts.models.post import Post, normalize_posts

logger = logging.getLogger("app")

T = TypeVar("T")


class PostStore:
    """
    Owns the posts document and the queue that serializes writes to it.

    Every mutation is one queued unit of work: load the whole collection,
    apply the change in memory, persist atomically. If the change raises,
    nothing is written. One instance per process.
    """

    def __init__(self, path: Union[str, Path], serialize_reads: bool = False):
        self.document = JsonDocument(path)
        self.serializer = WriteSerializer()
        self.serialize_reads = serialize_reads

    @classmethod
    def from_settings(cls, settings: Settings) -> "PostStore":
        if settings.POSTS_FILE:
            path = Path(settings.POSTS_FILE)
        else:
            path = pick_latest_file(settings.POSTS_FILE_CANDIDATES)
        logger.info(f"Using posts file: {path}")
        return cls(path, serialize_reads=settings.SERIALIZE_READS)

    @property
    def path(self) -> Path:
        return self.document.path

    def initialize(self) -> bool:
        """Create the posts file on first boot. Returns True if it was created."""
        return self.document.ensure_exists()

    def load_sync(self) -> List[Post]:
        return normalize_posts(self.document.load())

    def persist_sync(self, posts: List[Post]) -> None:
        self.document.persist([p.to_json() for p in posts])

    async def read(self) -> List[Post]:
        """
        Load the current collection.

        Unless serialize_reads is set this does not wait for queued writes,
        so it may observe the state before a write that was enqueued earlier.
        """
        if self.serialize_reads:
            return await self.serializer.enqueue(lambda: run_in_threadpool(self.load_sync))
        return await run_in_threadpool(self.load_sync)

    async def mutate(self, change: Callable[[List[Post]], T]) -> T:
        """Run `change` against the loaded collection inside the write queue and persist the result"""
        async def unit_of_work() -> T:
            posts = await run_in_threadpool(self.load_sync)
            result = change(posts)
            await run_in_threadpool(self.persist_sync, posts)
            return result

        return await self.serializer.enqueue(unit_of_work)


def find_post(posts: List[Post], post_id: str) -> Optional[Post]:
    for post in posts:
        if post.id == post_id:
            return post
    return None


def find_index(posts: List[Post], post_id: str) -> int:
    for idx, post in enumerate(posts):
        if post.id == post_id:
            return idx
    return -1
