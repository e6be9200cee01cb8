from __future__ import annotations

from typing import Optional, Sequence

DEFAULT_LANGUAGE = "French"

BASE_TEMPERATURE = 0.7
REGENERATE_TEMPERATURE = 0.9

CALORIE_TARGETS = (
    ("Breakfast", 300, 400),
    ("Lunch", 450, 550),
    ("Dinner", 550, 700),
    ("Snack", 200, 300),
)

IMAGE_STYLE_SUFFIX = (
    "beautifully plated on a clean white plate, natural lighting, appetizing presentation, "
    "high resolution, professional kitchen setting"
)
MAX_IMAGE_PROMPT_INGREDIENTS = 3


def recipe_temperature(regenerate: bool) -> float:
    return REGENERATE_TEMPERATURE if regenerate else BASE_TEMPERATURE


def build_recipe_prompt(
    meal_type: Optional[str] = None,
    dietary_preferences: Optional[str] = None,
    regenerate: bool = False,
    language: str = DEFAULT_LANGUAGE,
) -> str:
    """Instruction sent alongside the user's photo."""
    meal_type = (meal_type or "").strip()
    dietary_preferences = (dietary_preferences or "").strip()

    requirements = [
        "Identify ONLY the ingredients that are clearly visible",
        "Create ONE "
        + ("NEW and ORIGINAL" if regenerate else "exceptional")
        + " recipe using these ingredients",
        "VARY the culinary approach and cooking techniques"
        if regenerate
        else "Optimize for flavor and simplicity",
        "Only add basic pantry ingredients (salt, pepper, oil) if necessary",
        f"Write ALL text in {language}",
        "Be CONCISE and DIRECT",
    ]
    if meal_type:
        requirements.append(f"Adapt the recipe for {meal_type}")
    if dietary_preferences:
        requirements.append(f"STRICTLY RESPECT: {dietary_preferences}")
    if regenerate:
        requirements.extend(
            [
                "IMPORTANT: Create a COMPLETELY DIFFERENT recipe",
                "Explore alternative techniques (grilled vs sautéed vs baked)",
                "Vary the cuisine style (Mediterranean, Asian, French, etc.)",
            ]
        )

    tag_hint = f', "{meal_type}"' if meal_type else ""
    calorie_lines = "\n".join(
        f"- {name}: {low}-{high}" for name, low, high in CALORIE_TARGETS
    )

    sections = [
        "Analyze this image and create ONE "
        + ("DIFFERENT and CREATIVE" if regenerate else "perfect")
        + " recipe using ONLY the visible ingredients.",
        "STRICT REQUIREMENTS:\n" + "\n".join(f"- {line}" for line in requirements),
        f"RESPOND WITH ONLY THIS JSON, ALL TEXT IN {language.upper()}:",
        "{\n"
        '  "identifiedIngredients": ["ingredient1", "ingredient2"],\n'
        '  "recipe": {\n'
        '    "title": "Specific, appetizing recipe name",\n'
        '    "description": "Short, engaging description (2-3 sentences)",\n'
        '    "prepTime": "X min",\n'
        '    "cookTime": "X min",\n'
        '    "difficulty": "Easy|Medium|Hard",\n'
        '    "servings": number,\n'
        '    "calories": number,\n'
        '    "ingredients": ["precise quantities with the identified ingredients"],\n'
        '    "instructions": ["detailed step 1", "detailed step 2", "detailed step 3"],\n'
        f'    "tags": ["cuisine", "method"{tag_hint}]\n'
        "  }\n"
        "}",
        "CALORIE TARGETS PER SERVING:\n" + calorie_lines,
        "Create "
        + ("an innovative, surprising" if regenerate else "a unique, delicious and doable")
        + " recipe!",
    ]
    return "\n\n".join(sections)


def build_image_prompt(
    title: str,
    description: Optional[str] = None,
    ingredients: Optional[Sequence[str]] = None,
) -> str:
    """Photography prompt for the image generation model."""
    parts = [f"Professional food photography of {title.strip()}"]

    if description and description.strip():
        parts.append(description.strip())

    main_ingredients = [
        item.strip() for item in (ingredients or []) if isinstance(item, str) and item.strip()
    ][:MAX_IMAGE_PROMPT_INGREDIENTS]
    if main_ingredients:
        parts.append("featuring " + ", ".join(main_ingredients))

    parts.append(IMAGE_STYLE_SUFFIX)
    return ", ".join(parts)
