from __future__ import annotations

import logging

import httpx
from starlette.concurrency import run_in_threadpool

from src.app.config import APP_NAME, APP_VERSION
from src.app.domain.errors import (
    EmptyImageError,
    ImageDownloadError,
    StorageError,
)
from src.app.domain.models import StorageResult
from src.app.infra.storage.base import ImageStorageProvider

logger = logging.getLogger(__name__)

DEFAULT_CONTENT_TYPE = "image/png"
USER_AGENT = f"{APP_NAME}-Backend/{APP_VERSION} (python-httpx)"


class ImageStoreAdapter:
    """
    Copies a transient image URL into durable storage.

    `store` never raises: on any failure the caller gets the original
    source URL back with success=False, so a storage outage only costs
    image permanence.
    """

    def __init__(
        self,
        http: httpx.AsyncClient,
        storage: ImageStorageProvider,
        timeout: float = 30.0,
        verify_uploads: bool = False,
    ):
        self._http = http
        self._storage = storage
        self.timeout = timeout
        self.verify_uploads = verify_uploads

    def object_key(self, recipe_id: str) -> str:
        return self._storage.generate_object_key(recipe_id)

    async def _download(self, source_url: str) -> tuple[bytes, str]:
        try:
            response = await self._http.get(
                source_url,
                headers={"User-Agent": USER_AGENT},
                timeout=self.timeout,
                follow_redirects=True,
            )
        except httpx.RequestError as e:
            raise ImageDownloadError(source_url, str(e)) from e

        if response.is_error:
            raise ImageDownloadError(
                source_url,
                f"{response.status_code} {response.reason_phrase} - {response.text[:200]}",
            )

        data = response.content
        if not data:
            raise EmptyImageError(source_url)

        content_type = response.headers.get("content-type") or DEFAULT_CONTENT_TYPE
        content_type = content_type.split(";")[0].strip() or DEFAULT_CONTENT_TYPE
        return data, content_type

    async def _verify(self, public_url: str) -> bool:
        """HEAD the stored object; only ever logs."""
        try:
            response = await self._http.head(public_url, timeout=self.timeout)
        except httpx.RequestError as e:
            logger.warning("Post-upload verification error for %s: %s", public_url, e)
            return False

        length = response.headers.get("content-length", "0")
        if response.is_error or not length.isdigit() or int(length) == 0:
            logger.warning(
                "Post-upload verification failed: url=%s, status=%d, content-length=%s",
                public_url,
                response.status_code,
                length,
            )
            return False

        logger.info("Post-upload verification succeeded: %s", public_url)
        return True

    async def store(self, recipe_id: str, source_url: str) -> StorageResult:
        object_key = self.object_key(recipe_id)
        logger.info("Storing image for recipe %s as %s", recipe_id, object_key)

        try:
            data, content_type = await self._download(source_url)
            logger.info(
                "Downloaded source image: size=%d bytes, content_type=%s",
                len(data),
                content_type,
            )

            await run_in_threadpool(self._storage.upload, object_key, data, content_type)
            public_url = await run_in_threadpool(self._storage.public_url, object_key)
        except StorageError as e:
            logger.warning("Image storage failed for recipe %s, keeping source URL: %s", recipe_id, e)
            return StorageResult(url=source_url, success=False, error=str(e))
        except Exception as e:
            logger.exception("Unexpected image storage error for recipe %s", recipe_id)
            return StorageResult(url=source_url, success=False, error=str(e))

        if self.verify_uploads:
            await self._verify(public_url)

        logger.info("Image stored durably: %s", public_url)
        return StorageResult(url=public_url, success=True)
