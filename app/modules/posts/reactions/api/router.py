from typing import Any

from fastapi import APIRouter, Depends, Path

from app.db.store import PostStore
from app.deps import get_store
from app.modules.posts.reactions.schemas.reaction import DislikeCount, LikeCount, ReactionKind
from app.modules.posts.reactions.services.reaction import set_reaction

router = APIRouter()

@router.post("/like", response_model=LikeCount)
async def like_post(
    post_id: str = Path(..., description="The ID of the post to like"),
    store: PostStore = Depends(get_store),
) -> Any:
    """Add one like"""
    likes = await set_reaction(store, post_id, ReactionKind.LIKE, +1)
    return {"id": post_id, "likes": likes}

@router.delete("/like", response_model=LikeCount)
async def unlike_post(
    post_id: str = Path(..., description="The ID of the post to remove a like from"),
    store: PostStore = Depends(get_store),
) -> Any:
    """Remove one like, never going below zero"""
    likes = await set_reaction(store, post_id, ReactionKind.LIKE, -1)
    return {"id": post_id, "likes": likes}

@router.post("/dislike", response_model=DislikeCount)
async def dislike_post(
    post_id: str = Path(..., description="The ID of the post to dislike"),
    store: PostStore = Depends(get_store),
) -> Any:
    """Add one dislike"""
    dislikes = await set_reaction(store, post_id, ReactionKind.DISLIKE, +1)
    return {"id": post_id, "dislikes": dislikes}

@router.delete("/dislike", response_model=DislikeCount)
async def undislike_post(
    post_id: str = Path(..., description="The ID of the post to remove a dislike from"),
    store: PostStore = Depends(get_store),
) -> Any:
    """Remove one dislike, never going below zero"""
    dislikes = await set_reaction(store, post_id, ReactionKind.DISLIKE, -1)
    return {"id": post_id, "dislikes": dislikes}
