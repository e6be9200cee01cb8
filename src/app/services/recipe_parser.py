from __future__ import annotations

import json
import logging
import math
import re
import unicodedata
from typing import Any, Optional

from src.app.domain.errors import ProcessingError
from src.app.domain.models import Difficulty, ParsedRecipeResponse, Recipe

logger = logging.getLogger(__name__)

# Upper bound on '{' positions tried before giving up on a response.
MAX_JSON_CANDIDATES = 32

DEFAULT_CALORIES = 400
DEFAULT_SERVINGS = 2
_LEADING_INT = re.compile(r"\d+")

# Keys are accent-stripped, lowercase.
_MEAL_TYPE_CALORIES = {
    "breakfast": 350,
    "petit-dejeuner": 350,
    "lunch": 500,
    "dejeuner": 500,
    "dinner": 625,
    "diner": 625,
    "snack": 250,
    "collation": 250,
}

_DIFFICULTY_ALIASES = {
    "easy": Difficulty.EASY,
    "facile": Difficulty.EASY,
    "medium": Difficulty.MEDIUM,
    "moyen": Difficulty.MEDIUM,
    "moyenne": Difficulty.MEDIUM,
    "hard": Difficulty.HARD,
    "difficile": Difficulty.HARD,
}

PARSE_ERROR_MESSAGE = "Error processing recipe data. Please try again."
INCOMPLETE_MESSAGE = "Incomplete recipe data. Please try again."


def _fold(text: str) -> str:
    """Lowercase, accent-free form used for lookups."""
    folded = unicodedata.normalize("NFKD", text).encode("ascii", "ignore").decode("ascii")
    return folded.strip().lower()


def _find_closing_brace(text: str, start: int) -> Optional[int]:
    """Index of the brace closing the one at `start`, or None if it never closes."""
    depth = 0
    in_string = False
    escaped = False

    for index in range(start, len(text)):
        char = text[index]
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
            continue

        if char == '"':
            in_string = True
        elif char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return index
    return None


def extract_json_object(text: str) -> dict[str, Any]:
    """
    Return the first balanced `{...}` substring of `text` that decodes to a JSON object.

    Surrounding prose and markdown fences are ignored. Truncated or broken
    JSON raises ProcessingError.
    """
    if not isinstance(text, str) or not text.strip():
        raise ProcessingError(PARSE_ERROR_MESSAGE)

    start = text.find("{")
    attempts = 0
    while start != -1 and attempts < MAX_JSON_CANDIDATES:
        attempts += 1
        end = _find_closing_brace(text, start)
        if end is not None:
            try:
                value = json.loads(text[start:end + 1])
            except json.JSONDecodeError:
                value = None
            if isinstance(value, dict):
                return value
        start = text.find("{", start + 1)

    raise ProcessingError(PARSE_ERROR_MESSAGE)


def default_calories(meal_type: Optional[str]) -> int:
    if not meal_type:
        return DEFAULT_CALORIES
    return _MEAL_TYPE_CALORIES.get(_fold(meal_type), DEFAULT_CALORIES)


def _clean_str(value: Any) -> Optional[str]:
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return None


def _clean_str_list(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    out: list[str] = []
    for item in value:
        text = _clean_str(item)
        if text:
            out.append(text)
    return out


def _positive_int(value: Any) -> Optional[int]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if not math.isfinite(value):
        return None
    number = int(round(value))
    return number if number > 0 else None


def _parse_servings(value: Any) -> int:
    if isinstance(value, str):
        match = _LEADING_INT.search(value)
        value = int(match.group(0)) if match else None
    return _positive_int(value) or DEFAULT_SERVINGS


def _parse_difficulty(value: Any) -> Difficulty:
    if isinstance(value, str):
        return _DIFFICULTY_ALIASES.get(_fold(value), Difficulty.MEDIUM)
    return Difficulty.MEDIUM


def _dedupe(items: list[str]) -> list[str]:
    seen: set[str] = set()
    out: list[str] = []
    for item in items:
        key = item.lower()
        if key not in seen:
            seen.add(key)
            out.append(item)
    return out


def _build_recipe(raw: dict[str, Any], meal_type: Optional[str]) -> Recipe:
    title = _clean_str(raw.get("title"))
    ingredients = _clean_str_list(raw.get("ingredients"))
    instructions = _clean_str_list(raw.get("instructions"))
    if not title or not ingredients or not instructions:
        raise ProcessingError(INCOMPLETE_MESSAGE)

    calories = _positive_int(raw.get("calories"))
    if calories is None:
        calories = default_calories(meal_type)
        logger.info("Calories missing from model output, defaulted to %d (meal_type=%s)", calories, meal_type)

    return Recipe(
        title=title,
        description=_clean_str(raw.get("description")) or "",
        prep_time=_clean_str(raw.get("prepTime")) or "",
        cook_time=_clean_str(raw.get("cookTime")) or "",
        difficulty=_parse_difficulty(raw.get("difficulty")),
        servings=_parse_servings(raw.get("servings")),
        calories=calories,
        ingredients=ingredients,
        instructions=instructions,
        tags=_dedupe(_clean_str_list(raw.get("tags"))),
    )


def parse_recipe_response(content: str, meal_type: Optional[str] = None) -> ParsedRecipeResponse:
    """
    Parse and validate the completion model's text.

    Raises:
        ProcessingError: No JSON object found, required keys missing,
            or the recipe lacks a title, ingredients or instructions
    """
    try:
        payload = extract_json_object(content)
    except ProcessingError:
        logger.error("Could not parse model output: %r", (content or "")[:500])
        raise

    if "identifiedIngredients" not in payload or not isinstance(payload.get("recipe"), dict):
        logger.error("Invalid response structure: keys=%s", sorted(payload.keys()))
        raise ProcessingError(INCOMPLETE_MESSAGE)

    raw_identified = payload["identifiedIngredients"]
    if not isinstance(raw_identified, list):
        logger.error("identifiedIngredients is not a list: %r", raw_identified)
        raise ProcessingError(INCOMPLETE_MESSAGE)

    return ParsedRecipeResponse(
        identified_ingredients=_clean_str_list(raw_identified),
        recipe=_build_recipe(payload["recipe"], meal_type),
    )
