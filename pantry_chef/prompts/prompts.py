"""Prompts for the Gemini text, vision and image models.

Factory functions build the prompt text with configurable parameters.
The recipe and identification prompts ask for JSON matching the wire
schemas in pantry_chef.models.models (RecipeBatch, IdentifiedIngredients).
"""

from typing import Sequence

from pantry_chef.models.models import Recipe

IDENTIFY_INGREDIENTS_PROMPT = """Identify all the food ingredients visible in this image.

Rules:
1. List only edible ingredients (vegetables, fruits, meats, dairy, grains, spices, condiments...)
2. Ignore packaging, utensils, appliances and any text that is not food
3. Use simple, common cooking names in singular form (e.g. "tomato", not "Roma Tomatoes x3")
4. List each ingredient once

Return ONLY valid JSON in this exact format:
{"ingredients": ["ingredient1", "ingredient2"]}

If you cannot identify any ingredient, return {"ingredients": []}"""


def get_recipe_prompt(ingredients: Sequence[str], max_recipes: int) -> str:
    """Build the recipe generation prompt.

    Args:
        ingredients: Ingredient names chosen by the user.
        max_recipes: Number of distinct recipes to ask for.

    Returns:
        str: Prompt text for the recipe model.
    """
    ingredient_list = ", ".join(ingredients)
    return f"""You are a creative home chef. Suggest {max_recipes} distinct recipes that can be made \
primarily with these ingredients: {ingredient_list}.

You may assume common pantry staples (salt, pepper, oil, water, basic spices) are available.
Prefer recipes where the listed ingredients are the stars of the dish.

For each recipe provide:
- recipeName: a short appetising title
- description: one or two enticing sentences about the dish
- ingredients: the full ingredient list with quantities
- instructions: clear step-by-step preparation instructions, one step per entry

Return ONLY a JSON array of {max_recipes} recipe objects."""


def get_image_prompt(recipe: Recipe) -> str:
    """Build the food photography prompt for one recipe."""
    prompt = f"A delicious, professional food photograph of {recipe.name}"
    if recipe.description:
        prompt += f". {recipe.description}"
    return (
        f"{prompt}. Plated beautifully on a rustic table, natural window light, "
        "shallow depth of field, vibrant appetising colors, no text or watermarks."
    )
