from typing import Optional

from pydantic import BaseModel


class CommentCreate(BaseModel):
    # blank content is rejected by the service after the post lookup
    content: Optional[str] = None
    author: Optional[str] = None
