import logging
import uuid
from typing import Optional

import boto3
from botocore.config import Config
from fastapi import HTTPException, Request, UploadFile

from .config import (
    R2_ACCESS_KEY_ID,
    R2_ACCOUNT_ID,
    R2_BUCKET_NAME,
    R2_PUBLIC_URL,
    R2_SECRET_ACCESS_KEY,
)

logger = logging.getLogger(__name__)

# Place photos: JPEG/PNG only, up to 5 per submission
ALLOWED_IMAGE_TYPES = {
    "image/png": "png",
    "image/jpeg": "jpg",
    "image/jpg": "jpg",
}
MAX_IMAGES_PER_PLACE = 5
MAX_IMAGE_BYTES = 10 * 1024 * 1024
PLACE_IMAGE_FOLDER = "spot2go_places"


class StorageNotConfiguredError(RuntimeError):
    pass


class ImageStorage:
    """Uploads place images to R2 and returns their public URLs"""

    def __init__(self, client, bucket: str, public_url: str):
        self.client = client
        self.bucket = bucket
        self.public_url = public_url.rstrip("/")

    @classmethod
    def from_config(cls) -> "ImageStorage":
        if not R2_ACCOUNT_ID or not R2_ACCESS_KEY_ID or not R2_SECRET_ACCESS_KEY:
            raise StorageNotConfiguredError(
                "R2 credentials are not defined (R2_ACCOUNT_ID, R2_ACCESS_KEY_ID, R2_SECRET_ACCESS_KEY)"
            )
        client = boto3.client(
            "s3",
            endpoint_url=f"https://{R2_ACCOUNT_ID}.r2.cloudflarestorage.com",
            aws_access_key_id=R2_ACCESS_KEY_ID,
            aws_secret_access_key=R2_SECRET_ACCESS_KEY,
            config=Config(signature_version="s3v4"),
        )
        public_url = R2_PUBLIC_URL or f"https://{R2_BUCKET_NAME}.{R2_ACCOUNT_ID}.r2.dev"
        logger.info(f"✅ Image storage configured for bucket {R2_BUCKET_NAME}")
        return cls(client, R2_BUCKET_NAME, public_url)

    def upload_bytes(self, content: bytes, content_type: str, extension: str) -> str:
        key = f"{PLACE_IMAGE_FOLDER}/{uuid.uuid4()}.{extension}"
        self.client.put_object(
            Bucket=self.bucket,
            Key=key,
            Body=content,
            ContentType=content_type,
        )
        logger.info(f"✅ Uploaded image to R2: {key}")
        return f"{self.public_url}/{key}"


async def upload_place_images(storage: ImageStorage, files: Optional[list[UploadFile]]) -> list[str]:
    """Validate and upload place images, returning their URLs in submission order"""
    files = [f for f in (files or []) if f is not None and f.filename]
    if len(files) > MAX_IMAGES_PER_PLACE:
        raise HTTPException(
            status_code=400, detail=f"A place can have at most {MAX_IMAGES_PER_PLACE} images."
        )

    # Validate every file before the first upload
    accepted = []
    for file in files:
        extension = ALLOWED_IMAGE_TYPES.get(file.content_type or "")
        if not extension:
            raise HTTPException(
                status_code=400, detail="Invalid file type. Only JPEG and PNG images are allowed."
            )
        content = await file.read()
        if len(content) > MAX_IMAGE_BYTES:
            raise HTTPException(status_code=400, detail="Image exceeds the 10 MB size limit.")
        accepted.append((file, content, extension))

    urls = []
    for file, content, extension in accepted:
        try:
            urls.append(storage.upload_bytes(content, file.content_type, extension))
        except Exception as e:
            logger.error(f"❌ Image upload failed for {file.filename}: {e}")
            raise HTTPException(status_code=502, detail="Image upload failed.") from e
    return urls


def get_storage(request: Request) -> ImageStorage:
    """Dependency injection for the image storage client built at startup"""
    return request.app.state.storage
