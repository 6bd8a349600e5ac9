from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class PostBase(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PostCreate(PostBase):
    # title is checked by the service so a missing or blank one is a 400 with a clear message
    title: Optional[str] = None
    content: Optional[str] = None
    author: Optional[str] = None
    image_url: Optional[str] = None


class PostUpdate(PostBase):
    """Partial update: only fields present in the body are applied"""
    title: Optional[str] = None
    content: Optional[str] = None
    author: Optional[str] = None


class PostsFile(PostBase):
    """Debug view of the backing file"""
    file: str
