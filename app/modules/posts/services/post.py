from typing import List
import logging

from app.core.errors import NotFoundError, ValidationError
from app.db.store import PostStore, find_index, find_post
from app.modules.posts.models.post import ANONYMOUS, Post, new_id, now_ms
from app.modules.posts.schemas.post import PostCreate, PostUpdate

logger = logging.getLogger("app")


def _require(posts: List[Post], post_id: str) -> Post:
    post = find_post(posts, post_id)
    if post is None:
        raise NotFoundError("Post not found")
    return post


async def get_posts(store: PostStore) -> List[Post]:
    """Get all posts, newest first"""
    posts = await store.read()
    return sorted(posts, key=lambda p: p.created_at, reverse=True)


async def get_post(store: PostStore, post_id: str) -> Post:
    """Get post by ID"""
    return _require(await store.read(), post_id)


async def create_post(store: PostStore, post_in: PostCreate) -> Post:
    """Create new post"""
    title = (post_in.title or "").strip()
    if not title:
        raise ValidationError("Title is required")

    def apply(posts: List[Post]) -> Post:
        created = now_ms()
        post = Post(
            id=new_id(),
            title=title,
            content=post_in.content or "",
            author=(post_in.author or "").strip() or ANONYMOUS,
            image_url=post_in.image_url,
            likes=0,
            dislikes=0,
            created_at=created,
            updated_at=created,
            comments=[],
        )
        # newest first in the file itself
        posts.insert(0, post)
        return post

    post = await store.mutate(apply)
    logger.info(f"Created post {post.id}")
    return post


async def update_post(store: PostStore, post_id: str, post_in: PostUpdate) -> Post:
    """Update the fields present in post_in"""
    update_data = post_in.model_dump(exclude_unset=True, exclude_none=True)

    def apply(posts: List[Post]) -> Post:
        post = _require(posts, post_id)
        for field, value in update_data.items():
            if field == "author":
                value = value.strip() or ANONYMOUS
            setattr(post, field, value)
        post.touch()
        return post

    post = await store.mutate(apply)
    logger.info(f"Updated post {post_id} fields={sorted(update_data)}")
    return post


async def delete_post(store: PostStore, post_id: str) -> None:
    """Delete post permanently, along with its comments"""
    def apply(posts: List[Post]) -> None:
        idx = find_index(posts, post_id)
        if idx == -1:
            raise NotFoundError("Post not found")
        del posts[idx]

    await store.mutate(apply)
    logger.info(f"Deleted post {post_id}")
