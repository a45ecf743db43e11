"""Gemini-backed implementation of the GenerationService contract.

Three single-attempt operations, each wrapping one google-genai call:

- identify_ingredients(): vision model, image part + prompt, JSON answer
- generate_recipes(): text model, structured JSON output (response_schema)
- generate_image(): Imagen model, one photo returned as a data: URI

The SDK client is synchronous, so calls run through asyncio.to_thread.
There are no retries here: failures surface as ServiceError and the user
decides whether to try again.
"""

import asyncio
import base64
import binascii
import json
import re
from typing import Any, List, Optional, Sequence

from google import genai
from google.genai import types
from pydantic import ValidationError

from pantry_chef.errors import ServiceError
from pantry_chef.models.models import IdentifiedIngredients, Recipe, RecipeBatch
from pantry_chef.prompts.prompts import IDENTIFY_INGREDIENTS_PROMPT, get_image_prompt, get_recipe_prompt
from pantry_chef.services.image_codec import to_data_uri
from pantry_chef.utils.config import Config, config
from pantry_chef.utils.logger import logger

RECIPE_SCHEMA = types.Schema(
    type=types.Type.ARRAY,
    items=types.Schema(
        type=types.Type.OBJECT,
        properties={
            "recipeName": types.Schema(type=types.Type.STRING, description="The name of the recipe."),
            "description": types.Schema(
                type=types.Type.STRING, description="A short, enticing description of the dish."
            ),
            "ingredients": types.Schema(
                type=types.Type.ARRAY,
                items=types.Schema(type=types.Type.STRING),
                description="All ingredients needed, with quantities.",
            ),
            "instructions": types.Schema(
                type=types.Type.ARRAY,
                items=types.Schema(type=types.Type.STRING),
                description="Step-by-step preparation instructions.",
            ),
        },
        required=["recipeName", "description", "ingredients", "instructions"],
    ),
)

IDENTIFY_SCHEMA = types.Schema(
    type=types.Type.OBJECT,
    properties={
        "ingredients": types.Schema(type=types.Type.ARRAY, items=types.Schema(type=types.Type.STRING)),
    },
    required=["ingredients"],
)


def parse_json_response(response_text: Optional[str]) -> Any:
    """Parse JSON from a model response, tolerating text around it.

    Tries a direct json.loads() first, then extracts the outermost JSON
    object or array with a regex.

    Args:
        response_text: Raw response text (may include non-JSON text).

    Returns:
        The decoded JSON value, or None if no valid JSON was found.
    """
    if not response_text or not response_text.strip():
        return None

    try:
        return json.loads(response_text)
    except json.JSONDecodeError as e:
        logger.debug(f"Direct JSON parse: {e}")

    json_match = re.search(r"(\{.*\}|\[.*\])", response_text, re.DOTALL)
    if json_match:
        try:
            return json.loads(json_match.group())
        except json.JSONDecodeError as e:
            logger.debug(f"Regex JSON extraction: {e}")

    return None


def parse_recipes(response_text: Optional[str]) -> List[Recipe]:
    """Validate the recipe model's answer into Recipe objects.

    Accepts either a bare JSON array or an object with a "recipes" key.

    Raises:
        ServiceError: If the answer is not valid recipe JSON or holds no recipes.
    """
    parsed = parse_json_response(response_text)
    if isinstance(parsed, list):
        parsed = {"recipes": parsed}
    if not isinstance(parsed, dict):
        logger.warning("Failed to parse JSON from recipe response")
        raise ServiceError("The AI returned an unreadable response. Please try again.", operation="generate_recipes")

    try:
        batch = RecipeBatch.model_validate(parsed)
    except ValidationError as e:
        logger.warning(f"Recipe response failed validation: {e.error_count()} error(s)")
        raise ServiceError(
            "The AI returned recipes in an unexpected format. Please try again.", operation="generate_recipes"
        ) from e

    if not batch.recipes:
        raise ServiceError(
            "No recipes could be generated from these ingredients. Try adding a few more.",
            operation="generate_recipes",
        )
    return batch.recipes


def parse_identified_ingredients(response_text: Optional[str]) -> List[str]:
    """Validate the vision model's answer into a list of ingredient names.

    Raises:
        ServiceError: If the answer is not valid JSON of the expected shape.
    """
    parsed = parse_json_response(response_text)
    if isinstance(parsed, list):
        parsed = {"ingredients": parsed}
    if not isinstance(parsed, dict):
        logger.warning("Failed to parse JSON from ingredient identification response")
        raise ServiceError("Could not read the ingredients from the image.", operation="identify_ingredients")

    try:
        return IdentifiedIngredients.model_validate(parsed).ingredients
    except ValidationError as e:
        raise ServiceError(
            "Could not read the ingredients from the image.", operation="identify_ingredients"
        ) from e


class GeminiGenerationService:
    """GenerationService talking to the Gemini API.

    Args:
        client: Preconfigured genai.Client. Built from settings when omitted,
            in which case the settings are validated first.
        settings: Configuration to read model names and limits from.

    Raises:
        ValueError: If no client is given and the settings are invalid.
    """

    def __init__(self, client: Optional[genai.Client] = None, settings: Config = config) -> None:
        self.settings = settings
        if client is None:
            settings.validate()
            client = genai.Client(api_key=settings.GEMINI_API_KEY)
        self.client = client

    async def identify_ingredients(self, encoded_image: str, mime_type: str) -> List[str]:
        try:
            image_bytes = base64.b64decode(encoded_image, validate=True)
        except (binascii.Error, ValueError) as e:
            raise ServiceError("The image payload is not valid base64.", operation="identify_ingredients") from e

        try:
            response = await asyncio.to_thread(
                self.client.models.generate_content,
                model=self.settings.IMAGE_DETECTION_MODEL,
                contents=[
                    IDENTIFY_INGREDIENTS_PROMPT,
                    types.Part.from_bytes(data=image_bytes, mime_type=mime_type),
                ],
                config=types.GenerateContentConfig(
                    response_mime_type="application/json",
                    response_schema=IDENTIFY_SCHEMA,
                    temperature=0.0,
                ),
            )
        except Exception as e:
            logger.error(f"Gemini vision API call failed: {e}")
            raise ServiceError(
                f"Failed to identify ingredients from the image: {e}", operation="identify_ingredients"
            ) from e

        ingredients = parse_identified_ingredients(response.text)
        logger.info(f"Identified {len(ingredients)} ingredient(s) from image: {ingredients}")
        return ingredients

    async def generate_recipes(self, ingredients: Sequence[str]) -> List[Recipe]:
        try:
            response = await asyncio.to_thread(
                self.client.models.generate_content,
                model=self.settings.GEMINI_MODEL,
                contents=get_recipe_prompt(ingredients, self.settings.MAX_RECIPES),
                config=types.GenerateContentConfig(
                    response_mime_type="application/json",
                    response_schema=RECIPE_SCHEMA,
                    temperature=self.settings.TEMPERATURE,
                    max_output_tokens=self.settings.MAX_OUTPUT_TOKENS,
                ),
            )
        except Exception as e:
            logger.error(f"Gemini recipe generation call failed: {e}")
            raise ServiceError(f"Failed to generate recipes: {e}", operation="generate_recipes") from e

        recipes = parse_recipes(response.text)
        logger.info(f"Generated {len(recipes)} recipe(s) for {len(ingredients)} ingredient(s)")
        return recipes

    async def generate_image(self, recipe: Recipe) -> str:
        mime_type = self.settings.IMAGE_OUTPUT_MIME_TYPE
        try:
            response = await asyncio.to_thread(
                self.client.models.generate_images,
                model=self.settings.IMAGE_GENERATION_MODEL,
                prompt=get_image_prompt(recipe),
                config=types.GenerateImagesConfig(
                    number_of_images=1,
                    output_mime_type=mime_type,
                    aspect_ratio=self.settings.IMAGE_ASPECT_RATIO,
                ),
            )
        except Exception as e:
            raise ServiceError(f"Image generation failed for '{recipe.name}': {e}", operation="generate_image") from e

        generated = response.generated_images or []
        image = generated[0].image if generated else None
        if image is None or not image.image_bytes:
            raise ServiceError(f"No image was generated for '{recipe.name}'", operation="generate_image")

        encoded = base64.b64encode(image.image_bytes).decode("ascii")
        return to_data_uri(encoded, image.mime_type or mime_type)
