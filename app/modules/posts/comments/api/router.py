from typing import Any

from fastapi import APIRouter, Depends, Path, status

from app.db.store import PostStore
from app.deps import get_store
from app.modules.posts.models.post import Comment
from app.modules.posts.comments.schemas.comment import CommentCreate
from app.modules.posts.comments.services.comment import create_comment

router = APIRouter()

@router.post("", response_model=Comment, status_code=status.HTTP_201_CREATED)
async def create_post_comment(
    comment_in: CommentCreate,
    post_id: str = Path(..., description="The ID of the post to comment on"),
    store: PostStore = Depends(get_store),
) -> Any:
    """Append a comment to a post"""
    return await create_comment(store, post_id, comment_in)
