import logging
import traceback
import uuid
from pathlib import Path

import boto3
from starlette.concurrency import run_in_threadpool

from .config import Settings
from .errors import StorageError

logger = logging.getLogger(__name__)


class UploadStorage:
    """Stores uploaded images in Cloudflare R2 when configured, otherwise on local disk"""

    def __init__(self, settings: Settings):
        """Initialize the R2 client when all R2 settings are present"""
        self.client = None
        self.bucket = settings.R2_BUCKET_NAME
        self.public_url = settings.R2_PUBLIC_URL.rstrip("/")
        self.upload_dir = Path(settings.UPLOAD_DIRECTORY)
        self.url_prefix = settings.UPLOAD_URL_PREFIX.rstrip("/")

        if settings.r2_configured:
            try:
                logger.info("Creating S3 client for R2 storage...")
                self.client = boto3.client(
                    's3',
                    endpoint_url=settings.R2_ENDPOINT,
                    aws_access_key_id=settings.R2_ACCESS_KEY_ID,
                    aws_secret_access_key=settings.R2_SECRET_ACCESS_KEY
                )
                logger.info(f"R2 client initialized for bucket '{self.bucket}'")
            except Exception as e:
                logger.error(f"Failed to create S3 client: {str(e)}")
                logger.error(traceback.format_exc())
                logger.warning("R2 storage will not be available due to initialization failure")
        else:
            logger.info(f"R2 storage not configured, uploads are saved under {self.upload_dir}")

    def ensure_directory(self) -> None:
        self.upload_dir.mkdir(parents=True, exist_ok=True)

    def _save_local(self, name: str, data: bytes) -> str:
        self.ensure_directory()
        local_path = self.upload_dir / name
        try:
            local_path.write_bytes(data)
        except OSError as e:
            logger.error(f"[UPLOAD] Failed to save file locally: {str(e)}")
            raise StorageError("Failed to save upload") from e
        logger.info(f"[UPLOAD] Saved file locally at {local_path}")
        return f"{self.url_prefix}/{name}"

    def _save_r2(self, name: str, data: bytes, content_type: str) -> str:
        key = f"post_media/{name}"
        try:
            self.client.put_object(
                Bucket=self.bucket,
                Key=key,
                Body=data,
                ContentType=content_type
            )
        except Exception as e:
            logger.error(f"[UPLOAD] Failed to upload to R2: {str(e)}")
            logger.error(traceback.format_exc())
            raise StorageError("Failed to upload media") from e
        logger.info(f"[UPLOAD] Uploaded {len(data)} bytes to R2 key '{key}'")
        return f"{self.public_url}/{key}"

    async def save(self, data: bytes, extension: str, content_type: str) -> str:
        """Store the bytes under a fresh random name and return the URL to reference them"""
        name = f"{uuid.uuid4().hex}{extension}"
        if self.client:
            return await run_in_threadpool(self._save_r2, name, data, content_type)
        return await run_in_threadpool(self._save_local, name, data)
