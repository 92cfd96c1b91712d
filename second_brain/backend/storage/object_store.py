"""
Object Storage.

Uploads note images to Cloudinary and returns their public URL. The
Cloudinary SDK is synchronous, so uploads run in a worker thread and are
bounded by the configured timeout.

Usage:
    store = CloudinaryObjectStore.from_config()
    url = await store.upload(file_bytes, filename="diagram.png")
"""

import asyncio
import io
from typing import Any, Protocol

import cloudinary.exceptions
import cloudinary.uploader

from second_brain.backend.core.exceptions import UpstreamUnavailableError
from second_brain.backend.core.logging import get_logger

logger = get_logger(__name__)


class ObjectStore(Protocol):
    """Accepts one binary file and returns a publicly fetchable URL."""

    async def upload(self, data: bytes, filename: str | None = None) -> str: ...


class CloudinaryObjectStore:
    """ObjectStore backed by Cloudinary."""

    def __init__(
        self,
        cloud_name: str,
        api_key: str,
        api_secret: str,
        folder: str = "second-brain-notes",
        timeout_seconds: float = 30.0,
    ) -> None:
        self.folder = folder
        self.timeout_seconds = timeout_seconds
        self._config: dict[str, Any] = {
            "cloud_name": cloud_name,
            "api_key": api_key,
            "api_secret": api_secret,
            "secure": True,
        }

    @classmethod
    def from_config(cls) -> "CloudinaryObjectStore":
        """Build a store from storage.yaml and the Cloudinary secrets."""
        from second_brain.backend.core.config import get_app_config, get_settings

        settings = get_settings()
        storage_config = get_app_config().storage
        return cls(
            cloud_name=settings.cloudinary_cloud_name,
            api_key=settings.cloudinary_api_key,
            api_secret=settings.cloudinary_api_secret,
            folder=storage_config.folder,
            timeout_seconds=storage_config.timeout_seconds,
        )

    async def upload(self, data: bytes, filename: str | None = None) -> str:
        """
        Upload a file and return its secure URL.

        Raises:
            UpstreamUnavailableError: If the upload fails or times out
        """
        try:
            async with asyncio.timeout(self.timeout_seconds):
                result = await asyncio.to_thread(self._upload_sync, data, filename)
        except (cloudinary.exceptions.Error, OSError, TimeoutError) as e:
            logger.error(
                "Object upload failed",
                extra={"upload_filename": filename, "error": str(e), "error_type": type(e).__name__},
            )
            raise UpstreamUnavailableError(f"Upload failed: {e}") from e

        url = result.get("secure_url")
        if not url:
            raise UpstreamUnavailableError("Upload returned no URL")

        logger.info("Object uploaded", extra={"upload_filename": filename, "url": url})
        return url

    def _upload_sync(self, data: bytes, filename: str | None) -> dict[str, Any]:
        options: dict[str, Any] = {"folder": self.folder, "resource_type": "auto", **self._config}
        if filename:
            options["filename_override"] = filename
        return cloudinary.uploader.upload(io.BytesIO(data), **options)
