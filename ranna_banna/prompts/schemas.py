"""Structured-output contracts requested from Gemini.

These schemas are sent with each request as the response-shape constraint.
The model is not guaranteed to honor them, so every response is validated
again against the matching Pydantic model (RawRecipe / TranslatedRecipe).
"""

from google.genai import types


def _string_list(description: str) -> types.Schema:
    return types.Schema(
        type=types.Type.ARRAY,
        items=types.Schema(type=types.Type.STRING),
        description=description,
    )


RECIPE_REQUIRED_FIELDS = [
    "name_en",
    "name_bn",
    "category",
    "ingredients_en",
    "ingredients_bn",
    "steps_en",
    "steps_bn",
    "youtube_link",
    "youtube_link_is_suggested",
]

TRANSLATION_REQUIRED_FIELDS = ["ingredients", "instructions"]


def get_recipe_schema() -> types.Schema:
    """Schema for the recipe search response: an array of bilingual recipes."""
    return types.Schema(
        type=types.Type.ARRAY,
        items=types.Schema(
            type=types.Type.OBJECT,
            properties={
                "name_en": types.Schema(
                    type=types.Type.STRING,
                    description="The full, exact name of the recipe in English.",
                ),
                "name_bn": types.Schema(
                    type=types.Type.STRING,
                    description="The full, exact name of the recipe in Bengali.",
                ),
                "category": types.Schema(
                    type=types.Type.STRING,
                    description="The cuisine category (e.g., Bangladeshi, Indian, Chinese).",
                ),
                "ingredients_en": _string_list("A list of all ingredients required, in English."),
                "ingredients_bn": _string_list("A list of all ingredients required, in Bengali."),
                "steps_en": _string_list("Step-by-step cooking instructions, in English."),
                "steps_bn": _string_list("Step-by-step cooking instructions, in Bengali."),
                "youtube_link": types.Schema(
                    type=types.Type.STRING,
                    description=(
                        "A full, direct YouTube URL for a video tutorial that EXACTLY matches the recipe name "
                        "and content. If no exact match exists, it can be a close suggestion for the same dish. "
                        "Must be an empty string if no relevant video is found."
                    ),
                ),
                "youtube_link_is_suggested": types.Schema(
                    type=types.Type.BOOLEAN,
                    description=(
                        "Set to true if the YouTube link is a close suggestion, not an exact match. "
                        "Set to false if it is an exact match or if no link is provided."
                    ),
                ),
            },
            required=RECIPE_REQUIRED_FIELDS,
        ),
    )


def get_translation_schema() -> types.Schema:
    """Schema for a translation response: the two translated lists."""
    return types.Schema(
        type=types.Type.OBJECT,
        properties={
            "ingredients": _string_list("Translated ingredients, one per source line, in source order."),
            "instructions": _string_list("Translated instructions, one per source step, in source order."),
        },
        required=TRANSLATION_REQUIRED_FIELDS,
    )
