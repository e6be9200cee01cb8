# src/app/infra/storage/supabase_provider.py
"""
Supabase Storage provider implementation.
Uploads go through the supabase-py storage API, which is synchronous.
"""
from __future__ import annotations

import logging

from supabase import Client

from src.app.domain.errors import ImageUploadError, StorageError
from src.app.infra.storage.base import ImageStorageProvider

logger = logging.getLogger(__name__)

DEFAULT_BUCKET = "recipe-images"
CACHE_CONTROL_SECONDS = 3600


class SupabaseImageStorage(ImageStorageProvider):
    """
    Supabase Storage bucket holding the generated recipe images.

    The client handle is created once per process (see deps.get_supabase)
    and passed in, so tests can substitute it.
    """

    def __init__(self, client: Client, bucket_name: str = DEFAULT_BUCKET):
        self._client = client
        self.bucket_name = bucket_name

        logger.info("SupabaseImageStorage initialized: bucket=%s", self.bucket_name)

    def _bucket(self):
        return self._client.storage.from_(self.bucket_name)

    def upload(self, object_key: str, data: bytes, content_type: str) -> None:
        """Upload bytes to the bucket, overwriting any existing object."""
        try:
            self._bucket().upload(
                path=object_key,
                file=data,
                file_options={
                    "content-type": content_type,
                    "cache-control": str(CACHE_CONTROL_SECONDS),
                    "upsert": "true",
                },
            )
        except Exception as e:
            logger.error("Supabase upload failed: key=%s, error=%s", object_key, e)
            raise ImageUploadError(object_key, str(e)) from e

        logger.info(
            "Uploaded to Supabase: bucket=%s, key=%s, size=%d bytes",
            self.bucket_name,
            object_key,
            len(data),
        )

    def public_url(self, object_key: str) -> str:
        """Public URL of an object in the bucket."""
        try:
            url = self._bucket().get_public_url(object_key)
        except Exception as e:
            raise StorageError(f"Failed to resolve public URL for {object_key}: {e}") from e
        # older supabase-py releases returned a dict here
        if isinstance(url, dict):
            url = url.get("publicUrl") or url.get("publicURL") or ""
        return str(url)
