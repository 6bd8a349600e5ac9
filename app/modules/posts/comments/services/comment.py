from typing import List
import logging

from app.core.errors import NotFoundError, ValidationError
from app.db.store import PostStore, find_post
from app.modules.posts.models.post import ANONYMOUS, Comment, Post, new_id, now_ms
from app.modules.posts.comments.schemas.comment import CommentCreate

logger = logging.getLogger("app")


async def create_comment(store: PostStore, post_id: str, comment_in: CommentCreate) -> Comment:
    """Append a comment to a post"""
    content = (comment_in.content or "").strip()
    author = (comment_in.author or "").strip() or ANONYMOUS

    def apply(posts: List[Post]) -> Comment:
        post = find_post(posts, post_id)
        if post is None:
            raise NotFoundError("Post not found")
        if not content:
            raise ValidationError("Comment content is required")
        comment = Comment(id=new_id(), author=author, content=content, created_at=now_ms())
        post.comments.append(comment)
        post.touch()
        return comment

    comment = await store.mutate(apply)
    logger.info(f"Added comment {comment.id} to post {post_id}")
    return comment
