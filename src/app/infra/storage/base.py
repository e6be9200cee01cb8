# src/app/infra/storage/base.py
"""
Abstract base class for image storage providers.
This interface allows swapping storage backends (Supabase Storage, S3, a fake for tests).
"""
from __future__ import annotations

import re
from abc import ABC, abstractmethod

_UNSAFE_KEY_CHARS = re.compile(r"[^a-zA-Z0-9._-]")


class ImageStorageProvider(ABC):
    """
    Abstract interface for the object storage the recipe images live in.

    Implementations:
    - SupabaseImageStorage: Supabase Storage bucket
    """

    @abstractmethod
    def upload(self, object_key: str, data: bytes, content_type: str) -> None:
        """
        Store bytes under a key, replacing any existing object at that key.

        Args:
            object_key: The key/path where the object will be stored
            data: Raw object bytes
            content_type: MIME type of the content (e.g., "image/png")

        Raises:
            ImageUploadError: If the backend rejects the upload
        """
        pass

    @abstractmethod
    def public_url(self, object_key: str) -> str:
        """
        Return the durable public URL for a key.

        Args:
            object_key: The key/path of the object

        Returns:
            The public URL (valid whether or not the object exists yet)
        """
        pass

    def generate_object_key(self, recipe_id: str, extension: str = "png") -> str:
        """
        Generate the storage key for a recipe image.

        Format: recipe-{recipe_id}.{extension}

        The key depends only on the recipe id, so storing twice for the
        same recipe overwrites the same object.
        """
        safe_id = _UNSAFE_KEY_CHARS.sub("_", recipe_id.strip())[:120]
        return f"recipe-{safe_id}.{extension}"
