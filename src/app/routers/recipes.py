from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from src.app.deps import get_recipe_pipeline
from src.app.domain.errors import RecipeServiceError
from src.app.schemas.recipes import (
    FailureResponse,
    GenerateImageRequest,
    GenerateImageResponse,
    GenerateRecipesRequest,
    GenerateRecipesResponse,
)
from src.app.services.recipe_pipeline import RecipePipeline

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["recipes"])


@router.post("/generate-recipes", response_model=GenerateRecipesResponse)
async def generate_recipes(
    payload: GenerateRecipesRequest,
    pipeline: RecipePipeline = Depends(get_recipe_pipeline),
) -> GenerateRecipesResponse:
    """
    Photo in, recipe out.

    RecipeServiceError subclasses propagate to the app-level handler,
    which answers `{"error": ...}` with the error's status code.
    """
    result = await pipeline.generate(payload.to_domain())
    return GenerateRecipesResponse.from_result(result)


@router.post(
    "/generate-image",
    response_model=GenerateImageResponse,
    responses={400: {"model": FailureResponse}, 500: {"model": FailureResponse}, 503: {"model": FailureResponse}},
)
async def generate_image(
    payload: GenerateImageRequest,
    pipeline: RecipePipeline = Depends(get_recipe_pipeline),
):
    try:
        result = await pipeline.generate_image(
            recipe_id=payload.recipeId,
            title=payload.recipeTitle,
            description=payload.description,
            ingredients=payload.ingredients,
        )
    except RecipeServiceError as e:
        logger.warning("Image generation request failed: %s", e.message)
        return JSONResponse(
            status_code=e.status_code,
            content=FailureResponse(error=e.message).model_dump(),
        )

    return GenerateImageResponse(
        success=result.success,
        imageUrl=result.image_url,
        storedInSupabase=result.stored,
    )
