from typing import List
import logging

from app.core.errors import NotFoundError
from app.db.store import PostStore, find_post
from app.modules.posts.models.post import Post
from app.modules.posts.reactions.schemas.reaction import ReactionKind

logger = logging.getLogger("app")


async def set_reaction(store: PostStore, post_id: str, kind: ReactionKind, direction: int) -> int:
    """
    Move a post's like or dislike counter by one and return the new count.

    The count never drops below zero.
    """
    if direction not in (1, -1):
        raise ValueError(f"direction must be +1 or -1, got {direction}")
    field = ReactionKind(kind).value

    def apply(posts: List[Post]) -> int:
        post = find_post(posts, post_id)
        if post is None:
            raise NotFoundError("Post not found")
        count = max(0, getattr(post, field) + direction)
        setattr(post, field, count)
        post.touch()
        return count

    count = await store.mutate(apply)
    logger.info(f"Post {post_id} {field} {'+1' if direction > 0 else '-1'} -> {count}")
    return count
