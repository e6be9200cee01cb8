from __future__ import annotations

import logging
from typing import Optional, Sequence

from src.app.domain.errors import RecipeServiceError
from src.app.domain.models import GenerationResult
from src.app.infra.llm.openai_client import OpenAIClient
from src.app.services.prompts import build_image_prompt

logger = logging.getLogger(__name__)

IMAGE_SIZE = "1024x1024"
IMAGE_QUALITY = "standard"
IMAGE_STYLE = "vivid"


class ImageGenerator:
    """Produces one illustrative photo per recipe. Failures never raise."""

    def __init__(self, client: OpenAIClient):
        self._client = client

    @property
    def available(self) -> bool:
        return self._client.configured

    async def generate(
        self,
        title: str,
        description: Optional[str] = None,
        ingredients: Optional[Sequence[str]] = None,
    ) -> GenerationResult:
        prompt = build_image_prompt(title, description, ingredients)
        logger.info("Generating image for: %s", title)

        try:
            image_url = await self._client.generate_image(
                prompt,
                size=IMAGE_SIZE,
                quality=IMAGE_QUALITY,
                style=IMAGE_STYLE,
            )
        except RecipeServiceError as e:
            logger.warning("Image generation failed for %s: %s", title, e.message)
            return GenerationResult(image_url="", success=False, error=e.message)
        except Exception as e:
            logger.exception("Unexpected image generation error for %s", title)
            return GenerationResult(image_url="", success=False, error=str(e))

        logger.info("Image generated for: %s", title)
        return GenerationResult(image_url=image_url, success=True)
