import base64
import binascii
import logging
import re
from typing import NamedTuple

from app.core.errors import UploadFormatError
from app.core.storage import UploadStorage

logger = logging.getLogger(__name__)

DATA_URL_RE = re.compile(r"^data:(image/[a-zA-Z0-9.+-]+);base64,(.+)$", re.DOTALL)

EXTENSIONS = {
    "image/png": ".png",
    "image/jpeg": ".jpg",
    "image/jpg": ".jpg",
    "image/gif": ".gif",
    "image/webp": ".webp",
    "image/svg+xml": ".svg",
}


def _format_size(size: int) -> str:
    if size >= 1024 * 1024:
        return f"{size // (1024 * 1024)}MB"
    if size >= 1024:
        return f"{size // 1024}KB"
    return f"{size} bytes"


class DecodedImage(NamedTuple):
    mime: str
    extension: str
    data: bytes


def decode_data_url(data_url: str, max_size: int) -> DecodedImage:
    """Validate a base64 image data URL and return its bytes"""
    match = DATA_URL_RE.match(data_url or "")
    if not match:
        raise UploadFormatError("Invalid data URL")
    mime = match.group(1).lower()
    try:
        data = base64.b64decode(match.group(2), validate=False)
    except (binascii.Error, ValueError):
        raise UploadFormatError("Invalid data URL")
    if len(data) > max_size:
        raise UploadFormatError(f"Image too large (max {_format_size(max_size)})")
    extension = EXTENSIONS.get(mime)
    if not extension:
        raise UploadFormatError("Unsupported image type")
    return DecodedImage(mime=mime, extension=extension, data=data)


class MediaService:
    def __init__(self, storage: UploadStorage, max_upload_size: int):
        self.storage = storage
        self.max_upload_size = max_upload_size

    async def upload_data_url(self, data_url: str) -> str:
        """Decode the data URL, store the image and return its URL"""
        image = decode_data_url(data_url, self.max_upload_size)
        url = await self.storage.save(image.data, image.extension, image.mime)
        logger.info(f"Stored {image.mime} upload ({len(image.data)} bytes) at {url}")
        return url
