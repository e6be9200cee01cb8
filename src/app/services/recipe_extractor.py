from __future__ import annotations

import logging

from src.app.domain.errors import MissingInputError
from src.app.domain.models import GenerationRequest
from src.app.infra.llm.openai_client import OpenAIClient
from src.app.services.prompts import (
    DEFAULT_LANGUAGE,
    build_recipe_prompt,
    recipe_temperature,
)

logger = logging.getLogger(__name__)

DEFAULT_MAX_TOKENS = 1000
MISSING_IMAGE_MESSAGE = "An image is required"


class RecipeExtractor:
    """
    Sends the user's photo to the vision model and returns its raw text.

    The text is expected to embed one JSON object (see recipe_parser);
    nothing is validated here beyond the presence of the image.
    """

    def __init__(
        self,
        client: OpenAIClient,
        language: str = DEFAULT_LANGUAGE,
        max_tokens: int = DEFAULT_MAX_TOKENS,
    ):
        self._client = client
        self.language = language
        self.max_tokens = max_tokens

    def build_messages(self, request: GenerationRequest) -> list[dict]:
        prompt = build_recipe_prompt(
            meal_type=request.meal_type,
            dietary_preferences=request.dietary_preferences,
            regenerate=request.regenerate,
            language=self.language,
        )
        return [
            {
                "role": "user",
                "content": [
                    {"type": "text", "text": prompt},
                    {"type": "image_url", "image_url": {"url": request.image}},
                ],
            }
        ]

    async def extract(self, request: GenerationRequest) -> str:
        """
        Raises:
            MissingInputError: No image in the request (no network call made)
            UpstreamUnavailableError: Missing API key or network failure
            UpstreamRejectedError: Non-2xx answer from the provider
            ProcessingError: Provider answer without usable content
        """
        if not request.image or not request.image.strip():
            raise MissingInputError(MISSING_IMAGE_MESSAGE)

        temperature = recipe_temperature(request.regenerate)
        logger.info(
            "Requesting recipe: meal_type=%s, dietary=%s, regenerate=%s, temperature=%.1f",
            request.meal_type,
            bool(request.dietary_preferences),
            request.regenerate,
            temperature,
        )

        content = await self._client.chat_completion(
            self.build_messages(request),
            max_tokens=self.max_tokens,
            temperature=temperature,
        )

        logger.info("Recipe text received: chars=%d", len(content))
        return content
