# src/app/domain/models.py
"""
Domain models for the photo-to-recipe pipeline.
These are pure data structures with no infrastructure dependencies.
Nothing here outlives a single request.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class Difficulty(str, Enum):
    """Difficulty levels a recipe can be tagged with."""
    EASY = "Easy"
    MEDIUM = "Medium"
    HARD = "Hard"


class ImageSource(str, Enum):
    """Provenance of the image attached to a final recipe."""
    STORED = "stored"
    GENERATED = "generated"
    FAILED = "failed"


@dataclass
class Preferences:
    meal_type: Optional[str] = None
    dietary_preferences: Optional[str] = None


@dataclass
class GenerationRequest:
    """A single photo-to-recipe request, built per call."""
    image: Optional[str]
    preferences: Optional[Preferences] = None
    regenerate: bool = False

    @property
    def meal_type(self) -> Optional[str]:
        return self.preferences.meal_type if self.preferences else None

    @property
    def dietary_preferences(self) -> Optional[str]:
        return self.preferences.dietary_preferences if self.preferences else None


@dataclass
class Recipe:
    """A validated recipe as drafted by the completion model."""
    title: str
    description: str
    prep_time: str
    cook_time: str
    difficulty: Difficulty
    servings: int
    calories: int
    ingredients: list[str] = field(default_factory=list)
    instructions: list[str] = field(default_factory=list)
    tags: list[str] = field(default_factory=list)


@dataclass
class ParsedRecipeResponse:
    identified_ingredients: list[str]
    recipe: Recipe


@dataclass
class FinalRecipe:
    """Recipe plus identity and image provenance, returned to the client."""
    id: str
    recipe: Recipe
    image_url: str
    image_source: ImageSource


@dataclass
class GenerationResult:
    """Outcome of the image generation call."""
    image_url: str
    success: bool
    error: Optional[str] = None


@dataclass
class StorageResult:
    """
    Outcome of persisting an image.
    On failure `url` is the original (transient) source URL.
    """
    url: str
    success: bool
    error: Optional[str] = None


@dataclass
class PipelineResult:
    recipe: FinalRecipe
    identified_ingredients: list[str]
    # true only once the image is in durable storage
    image_generation_success: bool
    generation_time_ms: int


@dataclass
class StoredImageResult:
    """Outcome of the standalone image operation."""
    image_url: str
    stored: bool
    success: bool = True
