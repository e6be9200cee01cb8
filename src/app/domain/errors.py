from __future__ import annotations

from typing import Optional


class RecipeServiceError(Exception):
    status_code = 500

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class MissingInputError(RecipeServiceError):
    status_code = 400


class UpstreamUnavailableError(RecipeServiceError):
    status_code = 503


class UpstreamRejectedError(RecipeServiceError):
    def __init__(self, status_code: int, message: str, provider_message: str = ""):
        super().__init__(message, status_code=status_code)
        self.provider_message = provider_message


class ProcessingError(RecipeServiceError):
    status_code = 500


class ImageGenerationError(RecipeServiceError):
    status_code = 500


class StorageError(RecipeServiceError):
    status_code = 500


class ImageDownloadError(StorageError):
    def __init__(self, source_url: str, reason: str = "Download failed"):
        super().__init__(f"Failed to download image from {source_url}: {reason}")
        self.source_url = source_url
        self.reason = reason


class EmptyImageError(StorageError):
    def __init__(self, source_url: str):
        super().__init__(f"Downloaded image is empty (0 bytes): {source_url}")
        self.source_url = source_url


class ImageUploadError(StorageError):
    def __init__(self, object_key: str, reason: str = "Upload failed"):
        super().__init__(f"Failed to upload {object_key}: {reason}")
        self.object_key = object_key
        self.reason = reason


class ConfigurationError(RecipeServiceError):
    status_code = 503

    def __init__(self, errors: list[str]):
        super().__init__(f"Configuration errors: {', '.join(errors)}")
        self.errors = errors


class SmsDeliveryError(RecipeServiceError):
    def __init__(self, message: str, code: Optional[int] = None):
        super().__init__(message)
        self.code = code
