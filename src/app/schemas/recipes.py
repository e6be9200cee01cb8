from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, Field

from src.app.domain.models import GenerationRequest, PipelineResult, Preferences


class PreferencesPayload(BaseModel):
    mealType: Optional[str] = None
    dietaryPreferences: Optional[str] = None


class GenerateRecipesRequest(BaseModel):
    # Optional here so a missing image is answered with 400, not a schema error
    image: Optional[str] = Field(None, description="data: URI or URL of the ingredients photo")
    preferences: Optional[PreferencesPayload] = None
    regenerate: bool = False

    def to_domain(self) -> GenerationRequest:
        preferences = None
        if self.preferences is not None:
            preferences = Preferences(
                meal_type=self.preferences.mealType,
                dietary_preferences=self.preferences.dietaryPreferences,
            )
        return GenerationRequest(
            image=self.image,
            preferences=preferences,
            regenerate=self.regenerate,
        )


class RecipeOut(BaseModel):
    id: str
    title: str
    description: str
    prepTime: str
    cookTime: str
    difficulty: Literal["Easy", "Medium", "Hard"]
    servings: int
    calories: int
    ingredients: list[str] = Field(default_factory=list)
    instructions: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    imageUrl: str
    imageSource: Literal["stored", "generated", "failed"]


class GenerateRecipesResponse(BaseModel):
    recipe: RecipeOut
    identifiedIngredients: list[str]
    imageGenerationSuccess: bool
    generationTime: int = Field(..., description="Milliseconds spent from extraction to assembly")

    @classmethod
    def from_result(cls, result: PipelineResult) -> "GenerateRecipesResponse":
        final = result.recipe
        recipe = final.recipe
        return cls(
            recipe=RecipeOut(
                id=final.id,
                title=recipe.title,
                description=recipe.description,
                prepTime=recipe.prep_time,
                cookTime=recipe.cook_time,
                difficulty=recipe.difficulty.value,
                servings=recipe.servings,
                calories=recipe.calories,
                ingredients=recipe.ingredients,
                instructions=recipe.instructions,
                tags=recipe.tags,
                imageUrl=final.image_url,
                imageSource=final.image_source.value,
            ),
            identifiedIngredients=result.identified_ingredients,
            imageGenerationSuccess=result.image_generation_success,
            generationTime=result.generation_time_ms,
        )


class GenerateImageRequest(BaseModel):
    recipeTitle: Optional[str] = None
    description: Optional[str] = None
    ingredients: Optional[list[str]] = None
    recipeId: Optional[str] = None


class GenerateImageResponse(BaseModel):
    success: bool
    imageUrl: str
    storedInSupabase: bool


class FailureResponse(BaseModel):
    success: bool = False
    error: str
