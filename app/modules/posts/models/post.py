import hashlib
import json
import logging
import math
import time
import uuid
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

logger = logging.getLogger("app")

ANONYMOUS = "Anonymous"


def now_ms() -> int:
    """Current wall-clock time in milliseconds"""
    return int(time.time() * 1000)


def new_id() -> str:
    return str(uuid.uuid4())


def _as_text(v: Any) -> str:
    return "" if v is None else str(v)


def _as_author(v: Any) -> str:
    text = _as_text(v).strip()
    return text or ANONYMOUS


def _as_number(v: Any) -> Optional[float]:
    """A finite float, or None for anything else (including 1e400 and NaN)"""
    if v is None or isinstance(v, bool):
        return None
    try:
        number = float(v)
    except (TypeError, ValueError, OverflowError):
        return None
    return number if math.isfinite(number) else None


def _as_timestamp(v: Any) -> Optional[int]:
    number = _as_number(v)
    return None if number is None else int(number)


class Record(BaseModel):
    """Base for persisted records: camelCase on disk and on the wire"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_json(self) -> dict:
        return self.model_dump(by_alias=True)


class Comment(Record):
    id: Optional[str] = None
    author: str = ANONYMOUS
    content: str = ""
    created_at: int = Field(default_factory=now_ms)

    @field_validator("author", mode="before")
    @classmethod
    def _default_author(cls, v: Any) -> str:
        return _as_author(v)

    @field_validator("content", mode="before")
    @classmethod
    def _coerce_content(cls, v: Any) -> str:
        return _as_text(v)


class Post(Record):
    id: str
    title: str = ""
    content: str = ""
    author: str = ANONYMOUS
    likes: int = 0
    dislikes: int = 0
    created_at: int = Field(default_factory=now_ms)
    updated_at: int = Field(default_factory=now_ms)
    image_url: Optional[str] = None
    comments: List[Comment] = Field(default_factory=list)

    @field_validator("author", mode="before")
    @classmethod
    def _default_author(cls, v: Any) -> str:
        return _as_author(v)

    @field_validator("id", "title", "content", mode="before")
    @classmethod
    def _coerce_text(cls, v: Any) -> str:
        return _as_text(v)

    @field_validator("likes", "dislikes", mode="before")
    @classmethod
    def _clamp_counter(cls, v: Any) -> int:
        number = _as_number(v)
        return 0 if number is None else max(0, int(number))

    @field_validator("image_url", mode="before")
    @classmethod
    def _blank_image_is_none(cls, v: Any) -> Optional[str]:
        if not isinstance(v, str) or not v.strip():
            return None
        return v

    @field_validator("comments", mode="before")
    @classmethod
    def _only_object_comments(cls, v: Any) -> list:
        if not isinstance(v, list):
            return []
        return [c for c in v if isinstance(c, (dict, Comment))]

    def touch(self) -> None:
        """Bump updatedAt, never below createdAt"""
        self.updated_at = max(now_ms(), self.created_at)


def _legacy_id(raw: dict, position: int) -> str:
    key = json.dumps([position, raw], sort_keys=True, default=str)
    digest = hashlib.sha1(key.encode("utf-8")).hexdigest()
    return f"legacy-{digest[:12]}"


def normalize_post(raw: dict, loaded_at: int, position: int = 0) -> Post:
    """
    Turn one raw record from disk into a Post, filling every missing field.

    A record without an id gets one derived from its content and its
    position in the document, so identical id-less records stay distinct.
    """
    data = dict(raw)
    if not _as_text(data.get("id")).strip():
        data["id"] = _legacy_id(raw, position)

    created_at = _as_timestamp(data.get("createdAt"))
    if created_at is None:
        created_at = loaded_at
    updated_at = _as_timestamp(data.get("updatedAt"))
    data["createdAt"] = created_at
    data["updatedAt"] = updated_at if updated_at is not None else created_at

    comments = data.get("comments")
    if isinstance(comments, list):
        normalized = []
        for c in comments:
            if not isinstance(c, dict):
                continue
            c = dict(c)
            ts = _as_timestamp(c.get("createdAt"))
            c["createdAt"] = ts if ts is not None else created_at
            if c.get("id") is not None:
                c["id"] = _as_text(c["id"])
            normalized.append(c)
        data["comments"] = normalized

    return Post.model_validate(data)


def normalize_posts(raw: Any) -> List[Post]:
    """
    Normalize a whole document read from disk.

    Accepts a bare array or a legacy {"posts": [...]} object. Entries that
    are not objects are skipped, and a repeated id keeps its first record.
    """
    if isinstance(raw, list):
        items = raw
    elif isinstance(raw, dict) and isinstance(raw.get("posts"), list):
        items = raw["posts"]
    else:
        if raw not in (None, [], {}):
            logger.warning("Posts document is not an array, treating as empty")
        items = []

    loaded_at = now_ms()
    posts = []
    seen = set()
    for position, item in enumerate(items):
        if not isinstance(item, dict):
            continue
        try:
            post = normalize_post(item, loaded_at, position)
        except (PydanticValidationError, TypeError, ValueError, OverflowError) as e:
            logger.warning(f"Skipping unreadable post record at index {position}: {e}")
            continue
        if post.id in seen:
            logger.warning(f"Dropping duplicate post id {post.id}")
            continue
        seen.add(post.id)
        posts.append(post)
    return posts
