"""Prompts and system instructions for the recipe pipeline.

Provides the system directive and per-call prompt builders sent to Gemini:
- Recipe search: user instruction + system instruction (matching, category
  expansion, tutorial-link accuracy, bilingual content)
- Image generation: photorealistic single-dish prompt built from the English name
- Translation: ingredient/instruction lists rendered as plain text blocks
"""

RECIPE_SYSTEM_INSTRUCTIONS = """You are an expert recipe API. Your top priority is providing accurate, relevant recipes with consistent assets (image, video).

Rules:
- **Recipe Matching & Category Expansion**: Your goal is to return the most relevant recipes.
    - **For specific queries** (e.g., "Chicken Biryani", "lentil soup"): Return the most accurate and direct matches for that dish.
    - **For broad category queries** (e.g., "Lunch", "Breakfast", "Bangladeshi", "Dessert"): You MUST interpret this as a request for a *collection* of recipes. Return a diverse and comprehensive list of at least 10-12 popular and representative recipes from that category. For example, for "Lunch", return a mix of items like different curries, rice dishes, biryanis, etc. For "Dessert", provide a variety of sweets. Do not just return 2-3 items. The goal is to give the user a rich list to browse.
    - If no relevant recipes are found at all, return an empty array. An empty array is only valid when truly nothing matches.
- **YouTube Tutorial Link Accuracy (CRITICAL)**: You must adhere to these rules with extreme precision.
    - **Rule 1: Exact Match is Paramount.** Search for a high-quality YouTube tutorial whose title and content **exactly match** the recipe's 'name_en' and 'name_bn'. The video must clearly demonstrate how to cook the specific dish described in the recipe steps. If an exact match is found, provide its full URL in 'youtube_link' and set 'youtube_link_is_suggested' to false.
    - **Rule 2: Suggested Match as a Last Resort.** Only if an exact match is impossible to find, you may provide a link to a video for the **exact same dish** but from a different creator or with minor stylistic differences. This is a **suggestion**. You MUST set 'youtube_link_is_suggested' to true in this case.
    - **Rule 3: No Irrelevant Links.** If you cannot find a video for the exact dish, you **MUST** return an empty string ("") for 'youtube_link' and set 'youtube_link_is_suggested' to false. DO NOT provide a link to a *similar* but different dish (e.g., providing a 'Mutton Korma' video for a 'Chicken Korma' recipe is forbidden).
- **Image Consistency**: The 'name_en' field is used to generate a photorealistic image. It must be a precise, accurate name for the dish to ensure the generated image is correct.
- **Bilingual Content**: All text fields (names, ingredients, steps) must be accurately populated for both English and Bengali. Ingredient and step lists must be in the same order in both languages.
- Do NOT provide an image URL. Images are generated in a separate step based on the recipe name."""

TRANSLATION_SYSTEM_INSTRUCTIONS = """You are a professional culinary translator.
Translate recipe ingredients and cooking instructions faithfully:
- Keep exactly one output item per input line, in the same order.
- Keep quantities, units and numbers accurate; convert only the language, not the measurements.
- Use the common local name of an ingredient where one exists.
- Return only the translated lists."""

IMAGE_PROMPT_TEMPLATE = (
    'A stunning, professional, high-quality, photorealistic food photograph of "{name}". '
    "A single dish is presented beautifully on a simple, elegant plate or bowl with a clean, "
    "out-of-focus background. The lighting is bright and natural, highlighting the textures and "
    "colors of the food. Square composition. It looks incredibly delicious and appetizing."
)

# Display names for translation targets given as language codes
LANGUAGE_NAMES = {
    "en": "English",
    "bn": "Bengali",
    "hi": "Hindi",
    "ur": "Urdu",
    "ar": "Arabic",
    "es": "Spanish",
    "fr": "French",
    "de": "German",
    "zh": "Chinese",
    "ja": "Japanese",
}


def get_recipe_prompt(query: str) -> str:
    """Build the user instruction for a recipe search.

    Args:
        query: Trimmed, non-empty search query.

    Returns:
        str: Instruction embedding the query.
    """
    return (
        f'The user is searching for recipes related to: "{query}". '
        "This could be a specific dish or a broad category. "
        "Follow your system instructions to provide a comprehensive and accurate list of recipes."
    )


def get_image_prompt(name_en: str) -> str:
    """Build the image-generation prompt for one dish from its English name."""
    return IMAGE_PROMPT_TEMPLATE.format(name=name_en)


def get_language_name(language: str) -> str:
    """Resolve a language code ("bn") to a name ("Bengali"); unknown values pass through."""
    return LANGUAGE_NAMES.get(language.strip().lower(), language.strip())


def get_translation_prompt(ingredients: list[str], instructions: list[str], target_language: str) -> str:
    """Build the translation request for one recipe.

    Lists are newline-joined so that each line maps to exactly one output item.

    Args:
        ingredients: Ingredient lines in source order.
        instructions: Instruction steps in source order.
        target_language: Language code or name to translate into.

    Returns:
        str: Translation prompt.
    """
    language_name = get_language_name(target_language)
    ingredient_block = "\n".join(ingredients)
    instruction_block = "\n".join(instructions)
    return (
        f"Translate the following recipe ingredients and instructions into {language_name}.\n\n"
        f"Ingredients:\n{ingredient_block}\n\n"
        f"Instructions:\n{instruction_block}"
    )
