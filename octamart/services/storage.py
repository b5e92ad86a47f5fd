"""
Product Image Storage

Uploads go to a public Supabase Storage bucket. The bucket itself is
created by scripts/setup_storage.py with the same type and size limits
that are enforced here.
"""
import secrets
import time
from typing import Any, Optional

import httpx

from octamart import config
from octamart.errors import (
    ERROR_UPLOAD_DOWNLOAD_FAILED,
    ERROR_UPLOAD_INVALID_TYPE,
    ERROR_UPLOAD_INVALID_URL,
    ERROR_UPLOAD_NO_FILE,
    ERROR_UPLOAD_NO_URL,
    ERROR_UPLOAD_TOO_LARGE,
    ValidationError,
)
from octamart.logging import get_logger, sanitize_string_for_logging, sanitize_url_for_logging

logger = get_logger(__name__)

_EXTENSIONS = {
    "image/jpeg": "jpg",
    "image/jpg": "jpg",
    "image/png": "png",
    "image/webp": "webp",
    "image/gif": "gif",
}

DOWNLOAD_TIMEOUT = 15.0


def validate_image(content: Optional[bytes], content_type: Optional[str]) -> None:
    if not content:
        raise ValidationError(ERROR_UPLOAD_NO_FILE)
    if (content_type or "").lower() not in config.ALLOWED_IMAGE_TYPES:
        raise ValidationError(ERROR_UPLOAD_INVALID_TYPE)
    if len(content) > config.MAX_UPLOAD_SIZE:
        raise ValidationError(ERROR_UPLOAD_TOO_LARGE)


def unique_file_name(content_type: str) -> str:
    """<epoch ms>-<random>.<ext>, the extension taken from the validated content type."""
    ext = _EXTENSIONS.get(content_type.lower(), "bin")
    return f"{int(time.time() * 1000)}-{secrets.token_hex(4)}.{ext}"


def _clean_folder(folder: Optional[str]) -> str:
    parts = [p for p in (folder or "").strip("/").split("/") if p and p not in (".", "..")]
    return "/".join(parts) or config.STORAGE_DEFAULT_FOLDER


def _parse_image_url(image_url: Optional[str]) -> httpx.URL:
    if not (image_url or "").strip():
        raise ValidationError(ERROR_UPLOAD_NO_URL)
    try:
        url = httpx.URL(image_url.strip())
    except httpx.InvalidURL as e:
        raise ValidationError(ERROR_UPLOAD_INVALID_URL) from e
    if url.scheme not in ("http", "https") or not url.host:
        raise ValidationError(ERROR_UPLOAD_INVALID_URL)
    return url


class ImageStorage:
    def __init__(
        self,
        client,
        bucket: str = config.STORAGE_BUCKET,
        http_transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.client = client
        self.bucket = bucket
        self.http_transport = http_transport

    def _bucket(self):
        return self.client.storage.from_(self.bucket)

    async def upload(
        self,
        content: bytes,
        content_type: str,
        filename: Optional[str] = None,
        folder: Optional[str] = None,
    ) -> dict[str, Any]:
        validate_image(content, content_type)
        file_name = unique_file_name(content_type)
        path = f"{_clean_folder(folder)}/{file_name}"

        await self._bucket().upload(
            path,
            content,
            {"content-type": content_type, "cache-control": "3600", "upsert": "false"},
        )
        url = await self._bucket().get_public_url(path)
        logger.info(
            f"Uploaded image {sanitize_string_for_logging(path)} "
            f"from {sanitize_string_for_logging(filename or '-')} ({len(content)} bytes)"
        )
        return {"url": url, "path": path, "fileName": file_name}

    async def upload_from_url(self, image_url: str, folder: Optional[str] = None) -> dict[str, Any]:
        """
        Download a remote image and store it like a direct upload.

        The remote content type must be an allowed image type and the body
        is read in chunks, stopping once it passes the upload size limit.
        """
        url = _parse_image_url(image_url)
        content, content_type = await self._download(url)
        uploaded = await self.upload(content, content_type, filename=url.path, folder=folder)
        return {**uploaded, "originalUrl": str(url)}

    async def _download(self, url: httpx.URL) -> tuple[bytes, str]:
        logger.info(f"Downloading image from {sanitize_url_for_logging(str(url))}")
        try:
            async with httpx.AsyncClient(
                timeout=DOWNLOAD_TIMEOUT,
                follow_redirects=True,
                transport=self.http_transport,
            ) as http:
                async with http.stream("GET", url) as response:
                    if response.is_error:
                        raise ValidationError(f"{ERROR_UPLOAD_DOWNLOAD_FAILED}: {response.reason_phrase}")

                    content_type = response.headers.get("content-type", "").split(";")[0].strip().lower()
                    if content_type not in config.ALLOWED_IMAGE_TYPES:
                        raise ValidationError(ERROR_UPLOAD_INVALID_TYPE)

                    declared = response.headers.get("content-length")
                    if declared and declared.isdigit() and int(declared) > config.MAX_UPLOAD_SIZE:
                        raise ValidationError(ERROR_UPLOAD_TOO_LARGE)

                    content = bytearray()
                    async for chunk in response.aiter_bytes():
                        content.extend(chunk)
                        if len(content) > config.MAX_UPLOAD_SIZE:
                            raise ValidationError(ERROR_UPLOAD_TOO_LARGE)
        except httpx.HTTPError as e:
            logger.warning(f"Image download failed for {sanitize_url_for_logging(str(url))}: {e}")
            raise ValidationError(ERROR_UPLOAD_DOWNLOAD_FAILED) from e
        return bytes(content), content_type

    async def delete(self, path: str) -> None:
        if not path:
            raise ValidationError("No file path provided")
        await self._bucket().remove([path])
        logger.info(f"Deleted image {sanitize_string_for_logging(path)}")

    async def ensure_bucket(self) -> bool:
        """Create the public bucket if missing. Returns True when it was created."""
        buckets = await self.client.storage.list_buckets()
        if any(b.name == self.bucket for b in buckets):
            return False
        await self.client.storage.create_bucket(
            self.bucket,
            options={
                "public": True,
                "allowed_mime_types": list(config.ALLOWED_IMAGE_TYPES),
                "file_size_limit": config.MAX_UPLOAD_SIZE,
            },
        )
        return True
