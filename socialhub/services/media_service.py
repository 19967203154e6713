"""
Media upload relay.

Validates uploaded payloads and forwards them to Cloudinary, which hosts the
files; only the returned URL and the resolved media type are persisted.
"""
import io
import logging
from typing import Iterable, Optional

import cloudinary
from cloudinary import uploader
from fastapi import Request
from fastapi.concurrency import run_in_threadpool
from pydantic import BaseModel

from socialhub.config import Settings
from socialhub.utils.exceptions import InvalidMediaError, UploadFailedError

logger = logging.getLogger(__name__)

class UploadedMedia(BaseModel):
    url: str
    media_type: str  # image, video

class MediaUploadRelay:
    def __init__(
        self,
        allowed_types: Iterable[str],
        max_size: int,
        folder: str = "socialhub",
        cloud_name: Optional[str] = None,
        api_key: Optional[str] = None,
        api_secret: Optional[str] = None,
    ):
        self.allowed_types = set(allowed_types)
        self.max_size = max_size
        self.folder = folder

        if cloud_name:
            cloudinary.config(
                cloud_name=cloud_name,
                api_key=api_key,
                api_secret=api_secret,
                secure=True
            )

    @classmethod
    def from_settings(cls, settings: Settings) -> "MediaUploadRelay":
        return cls(
            allowed_types=settings.ALLOWED_MEDIA_TYPES,
            max_size=settings.MAX_UPLOAD_SIZE,
            folder=settings.CLOUDINARY_FOLDER,
            cloud_name=settings.CLOUDINARY_CLOUD_NAME,
            api_key=settings.CLOUDINARY_API_KEY,
            api_secret=settings.CLOUDINARY_API_SECRET,
        )

    @staticmethod
    def resolve_media_type(mime_type: str) -> str:
        return "video" if mime_type.startswith("video/") else "image"

    def validate(self, mime_type: Optional[str], size: int) -> None:
        if mime_type not in self.allowed_types:
            raise InvalidMediaError("Invalid file type. Only images and videos are allowed.")
        if size == 0:
            raise InvalidMediaError("Uploaded file is empty")
        if size > self.max_size:
            raise InvalidMediaError(
                f"File too large (max {self.max_size // (1024 * 1024)}MB)"
            )

    async def upload(self, data: bytes, mime_type: Optional[str]) -> UploadedMedia:
        """Validate and upload a payload, returning where it is hosted"""
        self.validate(mime_type, len(data))
        resource_type = self.resolve_media_type(mime_type)

        try:
            result = await run_in_threadpool(
                uploader.upload,
                io.BytesIO(data),
                resource_type=resource_type,
                folder=self.folder,
            )
        except Exception as e:
            logger.error(f"Cloudinary upload error: {e}")
            raise UploadFailedError(f"Media upload failed: {e}")

        url = result.get("secure_url") if result else None
        if not url:
            logger.error(f"Cloudinary returned no URL: {result}")
            raise UploadFailedError("Media upload failed")

        logger.info(f"Uploaded {resource_type} to {url}")
        return UploadedMedia(url=url, media_type=resource_type)

def get_media_relay(request: Request) -> MediaUploadRelay:
    return request.app.state.media_relay
