# src/app/infra/llm/openai_client.py
"""
Thin async client for the OpenAI chat-completion and image-generation endpoints.
Talks plain HTTP through a shared httpx.AsyncClient so it can be substituted in tests.
"""
from __future__ import annotations

import logging
from typing import Any, Optional

import httpx

from src.app.domain.errors import (
    ProcessingError,
    UpstreamRejectedError,
    UpstreamUnavailableError,
)

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.openai.com/v1"
DEFAULT_CHAT_MODEL = "gpt-4o-mini"
DEFAULT_IMAGE_MODEL = "dall-e-3"

MISSING_KEY_MESSAGE = "Recipe service is not configured (missing OpenAI API key)"
NETWORK_ERROR_MESSAGE = (
    "Unable to reach the recipe service. Check your internet connection and try again."
)


def _provider_message(response: httpx.Response) -> str:
    """Best-effort extraction of the provider's error text."""
    try:
        body = response.json()
    except ValueError:
        return response.text.strip()

    error = body.get("error") if isinstance(body, dict) else None
    if isinstance(error, dict):
        return str(error.get("message") or error)
    if error:
        return str(error)
    return response.text.strip()


def rejection_message(status_code: int, provider_message: str) -> str:
    """User-facing text for a non-2xx provider response."""
    if status_code == 401:
        return "Service temporarily unavailable. Please try again."
    if status_code == 429:
        return "Service overloaded. Please try again in a few minutes."
    if status_code == 400:
        return f"Processing error: {provider_message}"
    return f"Service error ({status_code}): {provider_message}"


class OpenAIClient:
    def __init__(
        self,
        http: httpx.AsyncClient,
        api_key: Optional[str],
        organization: Optional[str] = None,
        base_url: str = DEFAULT_BASE_URL,
        chat_model: str = DEFAULT_CHAT_MODEL,
        image_model: str = DEFAULT_IMAGE_MODEL,
        completion_timeout: float = 60.0,
        image_timeout: float = 90.0,
    ) -> None:
        self._http = http
        self.api_key = api_key
        self.organization = organization
        self.base_url = base_url.rstrip("/")
        self.chat_model = chat_model
        self.image_model = image_model
        self.completion_timeout = completion_timeout
        self.image_timeout = image_timeout

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    def _headers(self) -> dict[str, str]:
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.api_key}",
        }
        if self.organization:
            headers["OpenAI-Organization"] = self.organization
        return headers

    async def _post(self, path: str, payload: dict[str, Any], timeout: float) -> dict[str, Any]:
        if not self.api_key:
            raise UpstreamUnavailableError(MISSING_KEY_MESSAGE)

        url = f"{self.base_url}{path}"
        try:
            response = await self._http.post(
                url,
                json=payload,
                headers=self._headers(),
                timeout=timeout,
            )
        except httpx.RequestError as e:
            logger.error("Network error calling %s: %s", url, e)
            raise UpstreamUnavailableError(NETWORK_ERROR_MESSAGE) from e

        if response.is_error:
            provider_message = _provider_message(response)
            message = rejection_message(response.status_code, provider_message)
            logger.error(
                "Provider rejected %s: status=%d, message=%s",
                path,
                response.status_code,
                provider_message,
            )
            raise UpstreamRejectedError(response.status_code, message, provider_message)

        try:
            data = response.json()
        except ValueError as e:
            logger.error("Unparseable provider response from %s: %s", path, response.text[:500])
            raise ProcessingError("Data processing error. Please try again.") from e

        if not isinstance(data, dict):
            raise ProcessingError("Data processing error. Please try again.")
        return data

    async def chat_completion(
        self,
        messages: list[dict[str, Any]],
        max_tokens: int,
        temperature: float,
    ) -> str:
        """Run one chat completion and return the first choice's text content."""
        data = await self._post(
            "/chat/completions",
            {
                "model": self.chat_model,
                "messages": messages,
                "max_tokens": max_tokens,
                "temperature": temperature,
            },
            timeout=self.completion_timeout,
        )

        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError):
            content = None

        if not isinstance(content, str) or not content.strip():
            raise ProcessingError("No recipe generated. Please try again.")
        return content

    async def generate_image(
        self,
        prompt: str,
        size: str = "1024x1024",
        quality: str = "standard",
        style: str = "vivid",
    ) -> str:
        """Request exactly one image and return its (transient) URL."""
        data = await self._post(
            "/images/generations",
            {
                "model": self.image_model,
                "prompt": prompt,
                "n": 1,
                "size": size,
                "quality": quality,
                "style": style,
            },
            timeout=self.image_timeout,
        )

        try:
            url = data["data"][0]["url"]
        except (KeyError, IndexError, TypeError):
            url = None

        if not isinstance(url, str) or not url:
            raise ProcessingError("No image returned by the image generation service")
        return url
