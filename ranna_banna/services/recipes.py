"""Recipe fetch pipeline: query → structured recipes → images → filtered list.

Core Functions:
- parse_recipe_response(): Strict JSON parsing + schema validation of the model output
- fetch_raw_recipes(): One structured-generation call for a query (async)
- enrich_recipe(): Generate one image and assign an identifier (async, never raises)
- enrich_recipes(): Enrich all recipes concurrently, results in input order (async)
- filter_enriched_recipes(): Drop failed items, detect total image failure
- fetch_recipes(): The full pipeline (async)

Ordering: the text step is fully parsed before any image request is issued.
Within enrichment, completion order is irrelevant; each outcome stays at the
position of its source recipe.
"""

import asyncio
import base64
import json
import uuid
from typing import Optional

from pydantic import TypeAdapter, ValidationError

from ranna_banna.models.models import RawRecipe, Recipe
from ranna_banna.prompts.prompts import RECIPE_SYSTEM_INSTRUCTIONS, get_image_prompt, get_recipe_prompt
from ranna_banna.prompts.schemas import get_recipe_schema
from ranna_banna.services.gemini import GeminiBackend, create_backend
from ranna_banna.utils.config import config
from ranna_banna.utils.errors import (
    ImageGenerationFailedError,
    InvalidRecipeResponseError,
    RecipeServiceUnavailableError,
)
from ranna_banna.utils.logger import logger

_RAW_RECIPE_LIST = TypeAdapter(list[RawRecipe])


def new_recipe_id() -> str:
    """Return a fresh opaque recipe identifier."""
    return str(uuid.uuid4())


def to_data_url(image_bytes: bytes, mime_type: str) -> str:
    """Encode raw image bytes as a data URL usable directly as an image source."""
    encoded = base64.b64encode(image_bytes).decode("ascii")
    return f"data:{mime_type};base64,{encoded}"


def parse_recipe_response(response_text: str) -> list[RawRecipe]:
    """Parse structured-generation output into validated RawRecipe records.

    No lenient extraction and no partial recovery: the response must be a JSON
    array whose every item carries every required field with the right type.

    Args:
        response_text: Raw JSON text returned by the model.

    Returns:
        List of RawRecipe in the order returned by the model (may be empty).

    Raises:
        InvalidRecipeResponseError: Malformed JSON, a non-list value, or any
            item failing schema validation.
    """
    try:
        parsed = json.loads(response_text.strip())
    except (json.JSONDecodeError, AttributeError) as e:
        logger.error(f"Recipe response is not valid JSON: {e}")
        raise InvalidRecipeResponseError() from e

    if not isinstance(parsed, list):
        logger.error(f"Parsed recipe data is not an array: {type(parsed).__name__}")
        raise InvalidRecipeResponseError()

    try:
        return _RAW_RECIPE_LIST.validate_python(parsed)
    except ValidationError as e:
        logger.error(f"Recipe data failed schema validation ({e.error_count()} errors): {e}")
        raise InvalidRecipeResponseError() from e


async def fetch_raw_recipes(query: str, backend: GeminiBackend) -> list[RawRecipe]:
    """Fetch recipe text for a query with one structured-generation call.

    Args:
        query: Trimmed, non-empty query.
        backend: Generative backend.

    Returns:
        Validated RawRecipe list (empty when nothing matches).

    Raises:
        RecipeServiceUnavailableError: The call failed or timed out.
        InvalidRecipeResponseError: The response could not be parsed/validated.
    """
    logger.info(f"Fetching recipe details for query: {query}")

    try:
        response_text = await backend.generate_structured_text(
            config.TEXT_MODEL,
            get_recipe_prompt(query),
            RECIPE_SYSTEM_INSTRUCTIONS,
            get_recipe_schema(),
        )
    except asyncio.TimeoutError as e:
        logger.error(f"Recipe details request timed out after {config.TEXT_TIMEOUT_SECONDS}s")
        raise RecipeServiceUnavailableError() from e
    except Exception as e:
        logger.error(f"Error fetching recipe details from AI: {e}")
        raise RecipeServiceUnavailableError() from e

    raw_recipes = parse_recipe_response(response_text)
    logger.info(f"Found {len(raw_recipes)} recipe details from AI. Now generating images...")
    return raw_recipes


async def enrich_recipe(raw_recipe: RawRecipe, backend: GeminiBackend) -> Recipe:
    """Generate the image for one recipe and assign its identifier.

    Failures are captured here so that sibling enrichments are unaffected:
    the recipe still gets an identifier, with an empty image marker.
    Cancellation is not captured.

    Args:
        raw_recipe: Recipe text to enrich.
        backend: Generative backend.

    Returns:
        Recipe with a fresh id and either a data URL or "" as image.
    """
    recipe_id = new_recipe_id()
    try:
        image_bytes = await backend.generate_image(
            config.IMAGE_MODEL,
            get_image_prompt(raw_recipe.name_en),
            count=1,
            output_format=config.IMAGE_OUTPUT_FORMAT,
            aspect_ratio=config.IMAGE_ASPECT_RATIO,
        )
        image = to_data_url(image_bytes, config.IMAGE_OUTPUT_FORMAT)
    except Exception as e:
        logger.warning(f'Failed to generate image for "{raw_recipe.name_en}": {e!r}')
        image = ""

    return Recipe(**raw_recipe.model_dump(), id=recipe_id, image_base64=image)


async def enrich_recipes(raw_recipes: list[RawRecipe], backend: GeminiBackend) -> list[Recipe]:
    """Enrich all recipes concurrently.

    All image requests are issued without waiting on each other; returns once
    every outcome is known. The result has the input's length and order.
    """
    if not raw_recipes:
        return []

    tasks = [enrich_recipe(raw_recipe, backend) for raw_recipe in raw_recipes]
    enriched = await asyncio.gather(*tasks)

    failed = sum(1 for recipe in enriched if not recipe.has_image)
    logger.info(f"Finished generating recipe assets: {len(enriched) - failed} ok, {failed} failed")
    return list(enriched)


def filter_enriched_recipes(recipes: list[Recipe]) -> list[Recipe]:
    """Drop recipes whose enrichment failed, keeping order.

    Raises:
        ImageGenerationFailedError: Input was non-empty and nothing survived.
            Distinguishes "found recipes but could not finish them" from a
            genuinely empty result.
    """
    final_recipes = [recipe for recipe in recipes if recipe.has_image]

    if recipes and not final_recipes:
        logger.error(f"Image generation failed for all {len(recipes)} recipes")
        raise ImageGenerationFailedError()

    return final_recipes


async def fetch_recipes(query: str, backend: Optional[GeminiBackend] = None) -> list[Recipe]:
    """Run the full pipeline for a query.

    Args:
        query: Trimmed, non-empty query (see SearchQuery).
        backend: Generative backend. Built from config if None.

    Returns:
        Final recipes, each with a non-empty id and image. Empty only when the
        model found no recipes at all.

    Raises:
        RecipeServiceUnavailableError: Text generation failed.
        InvalidRecipeResponseError: Text generation returned unusable data.
        ImageGenerationFailedError: Every image generation failed.
    """
    backend = backend or create_backend()

    raw_recipes = await fetch_raw_recipes(query, backend)
    if not raw_recipes:
        logger.info(f"No recipes found for query: {query}")
        return []

    enriched = await enrich_recipes(raw_recipes, backend)
    return filter_enriched_recipes(enriched)
