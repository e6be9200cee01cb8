# src/app/services/recipe_pipeline.py
"""
Photo-to-recipe pipeline.

extract (vision model) -> parse/validate -> generate image -> store image -> assemble.
Only the first three stages can fail the request; image generation and
storage degrade to `imageSource = failed / generated` instead.
"""
from __future__ import annotations

import logging
import secrets
import string
import time
from typing import Optional, Sequence

from src.app.domain.errors import (
    ImageGenerationError,
    MissingInputError,
    UpstreamUnavailableError,
)
from src.app.domain.models import (
    FinalRecipe,
    GenerationRequest,
    ImageSource,
    PipelineResult,
    StoredImageResult,
)
from src.app.services.image_generator import ImageGenerator
from src.app.services.image_store import ImageStoreAdapter
from src.app.services.recipe_extractor import MISSING_IMAGE_MESSAGE, RecipeExtractor
from src.app.services.recipe_parser import parse_recipe_response

logger = logging.getLogger(__name__)

_ID_ALPHABET = string.ascii_lowercase + string.digits
_ID_SUFFIX_LENGTH = 9


def new_recipe_id() -> str:
    """
    recipe_<epoch ms>_<random base36 suffix>.

    Best-effort unique: a collision can only overwrite an image object.
    """
    suffix = "".join(secrets.choice(_ID_ALPHABET) for _ in range(_ID_SUFFIX_LENGTH))
    return f"recipe_{int(time.time() * 1000)}_{suffix}"


class RecipePipeline:
    """
    Orchestrates one request end to end.

    `store` is None when durable image storage is not available; the
    pipeline then returns the generator's transient URL.
    """

    def __init__(
        self,
        extractor: RecipeExtractor,
        generator: ImageGenerator,
        store: Optional[ImageStoreAdapter] = None,
    ):
        self._extractor = extractor
        self._generator = generator
        self._store = store

    @property
    def storage_available(self) -> bool:
        return self._store is not None

    async def _illustrate(
        self,
        recipe_id: str,
        title: str,
        description: Optional[str],
        ingredients: Optional[Sequence[str]],
    ) -> tuple[str, ImageSource]:
        generated = await self._generator.generate(title, description, ingredients)
        if not generated.success:
            return "", ImageSource.FAILED

        if self._store is None:
            return generated.image_url, ImageSource.GENERATED

        stored = await self._store.store(recipe_id, generated.image_url)
        if stored.success:
            return stored.url, ImageSource.STORED

        logger.warning("Falling back to transient image URL for %s: %s", recipe_id, stored.error)
        return generated.image_url, ImageSource.GENERATED

    async def generate(self, request: GenerationRequest) -> PipelineResult:
        if not request.image or not request.image.strip():
            raise MissingInputError(MISSING_IMAGE_MESSAGE)

        started = time.perf_counter()

        content = await self._extractor.extract(request)
        parsed = parse_recipe_response(content, request.meal_type)
        recipe = parsed.recipe

        logger.info(
            "Recipe ready: title=%s, identified=%s, calories=%d",
            recipe.title,
            parsed.identified_ingredients,
            recipe.calories,
        )

        recipe_id = new_recipe_id()
        image_url, image_source = await self._illustrate(
            recipe_id,
            recipe.title,
            recipe.description,
            parsed.identified_ingredients,
        )

        elapsed_ms = int((time.perf_counter() - started) * 1000)
        logger.info(
            "Pipeline complete: id=%s, image_source=%s, regenerate=%s, elapsed=%dms",
            recipe_id,
            image_source.value,
            request.regenerate,
            elapsed_ms,
        )

        return PipelineResult(
            recipe=FinalRecipe(
                id=recipe_id,
                recipe=recipe,
                image_url=image_url,
                image_source=image_source,
            ),
            identified_ingredients=parsed.identified_ingredients,
            image_generation_success=image_source == ImageSource.STORED,
            generation_time_ms=elapsed_ms,
        )

    async def generate_image(
        self,
        recipe_id: Optional[str],
        title: Optional[str],
        description: Optional[str] = None,
        ingredients: Optional[Sequence[str]] = None,
    ) -> StoredImageResult:
        """
        Image-only operation for an existing recipe.

        Storage uses the same key for the same recipe id, so repeated
        calls overwrite one object.

        Raises:
            MissingInputError: title or recipe id missing
            UpstreamUnavailableError: no image generation credentials
            ImageGenerationError: the image generator failed
        """
        if not title or not title.strip() or not recipe_id or not recipe_id.strip():
            raise MissingInputError("Recipe title and ID are required")
        if not self._generator.available:
            raise UpstreamUnavailableError("Image generation service unavailable")

        generated = await self._generator.generate(title, description, ingredients)
        if not generated.success:
            raise ImageGenerationError(generated.error or "Image generation failed")

        if self._store is None:
            return StoredImageResult(image_url=generated.image_url, stored=False)

        stored = await self._store.store(recipe_id, generated.image_url)
        return StoredImageResult(image_url=stored.url, stored=stored.success)
