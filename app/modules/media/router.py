from typing import Optional

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from app.core.config import Settings
from app.core.storage import UploadStorage
from app.deps import get_settings, get_upload_storage
from .service import MediaService

router = APIRouter()


class UploadIn(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    data_url: Optional[str] = None


class UploadOut(BaseModel):
    url: str


def get_media_service(
    storage: UploadStorage = Depends(get_upload_storage),
    settings: Settings = Depends(get_settings),
) -> MediaService:
    return MediaService(storage, settings.MAX_UPLOAD_SIZE)

@router.post("", response_model=UploadOut, status_code=status.HTTP_201_CREATED)
async def upload_image(payload: UploadIn, media_service: MediaService = Depends(get_media_service)):
    """Store a base64 image data URL and return the URL it is served from"""
    url = await media_service.upload_data_url(payload.data_url)
    return {"url": url}
