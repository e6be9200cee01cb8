from __future__ import annotations

from src.app.services.prompts import (
    IMAGE_STYLE_SUFFIX,
    build_image_prompt,
    build_recipe_prompt,
    recipe_temperature,
)


class TestRecipePrompt:
    def test_base_requirements(self) -> None:
        prompt = build_recipe_prompt()

        assert "ONLY the ingredients that are clearly visible" in prompt
        assert "ONE" in prompt
        assert '"identifiedIngredients"' in prompt
        assert '"recipe"' in prompt
        assert "Write ALL text in French" in prompt

    def test_calorie_targets(self) -> None:
        prompt = build_recipe_prompt()

        assert "- Breakfast: 300-400" in prompt
        assert "- Lunch: 450-550" in prompt
        assert "- Dinner: 550-700" in prompt
        assert "- Snack: 200-300" in prompt

    def test_meal_type_and_diet(self) -> None:
        prompt = build_recipe_prompt(meal_type="dîner", dietary_preferences="végétarien, sans gluten")

        assert "Adapt the recipe for dîner" in prompt
        assert "STRICTLY RESPECT: végétarien, sans gluten" in prompt
        assert '"tags": ["cuisine", "method", "dîner"]' in prompt

    def test_without_preferences_no_tag_hint(self) -> None:
        prompt = build_recipe_prompt()

        assert '"tags": ["cuisine", "method"]' in prompt
        assert "STRICTLY RESPECT" not in prompt

    def test_regenerate_demands_variation(self) -> None:
        prompt = build_recipe_prompt(regenerate=True)

        assert "COMPLETELY DIFFERENT" in prompt
        assert "grilled vs sautéed vs baked" in prompt
        assert "Mediterranean, Asian, French" in prompt

    def test_language_is_configurable(self) -> None:
        assert "Write ALL text in English" in build_recipe_prompt(language="English")

    def test_temperature(self) -> None:
        assert recipe_temperature(False) == 0.7
        assert recipe_temperature(True) == 0.9


class TestImagePrompt:
    def test_full_prompt(self) -> None:
        prompt = build_image_prompt("Ratatouille", "Légumes du soleil", ["courgette", "aubergine", "poivron", "tomate"])

        assert prompt == (
            "Professional food photography of Ratatouille, Légumes du soleil, "
            "featuring courgette, aubergine, poivron, " + IMAGE_STYLE_SUFFIX
        )

    def test_title_only(self) -> None:
        assert build_image_prompt("Ratatouille") == f"Professional food photography of Ratatouille, {IMAGE_STYLE_SUFFIX}"

    def test_blank_values_skipped(self) -> None:
        prompt = build_image_prompt("Soupe", "  ", ["", "  ", "poireau"])
        assert prompt == f"Professional food photography of Soupe, featuring poireau, {IMAGE_STYLE_SUFFIX}"

    def test_style_suffix(self) -> None:
        assert "clean white plate" in IMAGE_STYLE_SUFFIX
        assert "natural lighting" in IMAGE_STYLE_SUFFIX
        assert "high resolution" in IMAGE_STYLE_SUFFIX
