from fastapi import Request

from app.core.config import Settings
from app.core.storage import UploadStorage
from app.db.store import PostStore


def get_store(request: Request) -> PostStore:
    """
    Dependency for getting the process-wide post store
    """
    return request.app.state.post_store


def get_upload_storage(request: Request) -> UploadStorage:
    return request.app.state.upload_storage


def get_settings(request: Request) -> Settings:
    return request.app.state.settings
