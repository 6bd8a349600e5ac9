from enum import Enum

from pydantic import BaseModel


class ReactionKind(str, Enum):
    """Counters a client can bump; the value is the Post field and response key"""
    LIKE = "likes"
    DISLIKE = "dislikes"


class LikeCount(BaseModel):
    id: str
    likes: int


class DislikeCount(BaseModel):
    id: str
    dislikes: int
