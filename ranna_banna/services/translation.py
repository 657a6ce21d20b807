"""On-demand translation of a recipe's ingredient and instruction lists.

Stateless and independent of the fetch pipeline: no caching, the source
Recipe is never mutated, and every call translates from scratch. The result
is a TranslatedRecipe overlay the caller displays next to the original.
"""

import asyncio
import json
from typing import Optional

from pydantic import ValidationError

from ranna_banna.models.models import Recipe, TranslatedRecipe
from ranna_banna.prompts.prompts import TRANSLATION_SYSTEM_INSTRUCTIONS, get_language_name, get_translation_prompt
from ranna_banna.prompts.schemas import get_translation_schema
from ranna_banna.services.gemini import GeminiBackend, create_backend
from ranna_banna.utils.config import config
from ranna_banna.utils.errors import InvalidTranslationError, RecipeServiceUnavailableError
from ranna_banna.utils.logger import logger


def parse_translation_response(response_text: str) -> TranslatedRecipe:
    """Parse translation output into a validated TranslatedRecipe.

    Raises:
        InvalidTranslationError: Malformed JSON, not an object, or missing /
            mistyped `ingredients` or `instructions`.
    """
    try:
        parsed = json.loads(response_text.strip())
    except (json.JSONDecodeError, AttributeError) as e:
        logger.error(f"Translation response is not valid JSON: {e}")
        raise InvalidTranslationError() from e

    if not isinstance(parsed, dict):
        logger.error(f"Parsed translation is not an object: {type(parsed).__name__}")
        raise InvalidTranslationError()

    try:
        return TranslatedRecipe.model_validate(parsed)
    except ValidationError as e:
        logger.error(f"Translation failed schema validation: {e}")
        raise InvalidTranslationError() from e


async def translate_recipe(
    recipe: Recipe,
    target_language: str,
    backend: Optional[GeminiBackend] = None,
) -> TranslatedRecipe:
    """Translate a recipe's English ingredients and steps into target_language.

    Args:
        recipe: Already fetched recipe (not modified).
        target_language: Language code ("hi") or name ("Hindi").
        backend: Generative backend. Built from config if None.

    Returns:
        TranslatedRecipe overlay.

    Raises:
        ValueError: If target_language is blank.
        RecipeServiceUnavailableError: The call failed or timed out.
        InvalidTranslationError: The response could not be parsed/validated.
    """
    if not target_language or not target_language.strip():
        raise ValueError("target_language must not be empty")

    backend = backend or create_backend()
    language_name = get_language_name(target_language)
    logger.info(f'Translating "{recipe.name_en}" into {language_name}')

    try:
        response_text = await backend.generate_structured_text(
            config.TEXT_MODEL,
            get_translation_prompt(recipe.ingredients_en, recipe.steps_en, target_language),
            TRANSLATION_SYSTEM_INSTRUCTIONS,
            get_translation_schema(),
        )
    except asyncio.TimeoutError as e:
        logger.error(f"Translation request timed out after {config.TEXT_TIMEOUT_SECONDS}s")
        raise RecipeServiceUnavailableError("Failed to translate the recipe. Please try again.") from e
    except Exception as e:
        logger.error(f"Error translating recipe: {e}")
        raise RecipeServiceUnavailableError("Failed to translate the recipe. Please try again.") from e

    translated = parse_translation_response(response_text)
    if len(translated.ingredients) != len(recipe.ingredients_en) or len(translated.instructions) != len(
        recipe.steps_en
    ):
        logger.warning(
            f"Translation line count differs from source: ingredients {len(recipe.ingredients_en)}"
            f"→{len(translated.ingredients)}, steps {len(recipe.steps_en)}→{len(translated.instructions)}"
        )
    return translated
