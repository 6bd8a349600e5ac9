from typing import Any, List
import logging

from fastapi import APIRouter, Depends, Response, status

# Get the logger
logger = logging.getLogger(__name__)

from app.core.config import Settings
from app.core.errors import NotFoundError
from app.db.store import PostStore
from app.deps import get_settings, get_store
from app.modules.posts.models.post import Post
from app.modules.posts.schemas.post import PostCreate, PostUpdate, PostsFile
from app.modules.posts.services.post import (
    get_post, get_posts, create_post, update_post, delete_post
)

router = APIRouter(prefix="")
debug_router = APIRouter(prefix="")

@router.get("/", response_model=List[Post])
@router.get("", response_model=List[Post])
async def read_posts(store: PostStore = Depends(get_store)) -> Any:
    """
    Retrieve all posts, newest first.
    """
    return await get_posts(store)

@router.post("/", response_model=Post, status_code=status.HTTP_201_CREATED)
@router.post("", response_model=Post, status_code=status.HTTP_201_CREATED)
async def create_new_post(
    post_in: PostCreate,
    store: PostStore = Depends(get_store),
) -> Any:
    """
    Create new post. The title is required; author defaults to Anonymous.
    """
    return await create_post(store, post_in)

@router.get("/{post_id}", response_model=Post)
async def read_post_by_id(post_id: str, store: PostStore = Depends(get_store)) -> Any:
    """
    Get post by ID.
    """
    return await get_post(store, post_id)

@router.put("/{post_id}", response_model=Post)
async def update_post_by_id(
    post_id: str,
    post_in: PostUpdate,
    store: PostStore = Depends(get_store),
) -> Any:
    """
    Update a post. Fields left out of the body are unchanged.
    """
    return await update_post(store, post_id, post_in)

@router.delete("/{post_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
async def delete_post_by_id(post_id: str, store: PostStore = Depends(get_store)) -> Response:
    """
    Delete a post and its comments permanently.
    """
    await delete_post(store, post_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

@debug_router.get("/posts-file", response_model=PostsFile)
async def read_posts_file(
    store: PostStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
) -> Any:
    """
    Diagnostic endpoint showing which file backs the store.
    This endpoint is only available in debug mode.
    """
    if not settings.DEBUG:
        raise NotFoundError()
    return {"file": str(store.path)}
