"""Data models for the recipe discovery pipeline.

Defines Pydantic models for the structured-generation contract (RawRecipe,
TranslatedRecipe), the enriched Recipe handed to callers and persisted in
favorites, and the validated SearchQuery. Strict mode is used on everything the
model returns: the remote capability's adherence to the schema is not
guaranteed, so a missing or wrongly typed field must fail validation rather
than be coerced.
"""

from typing import List, Literal, Annotated

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ranna_banna.utils.config import config

Language = Literal["en", "bn"]

# Browse categories offered next to the search box; each label is sent as-is as a query
CATEGORIES: tuple[str, ...] = (
    "Breakfast",
    "Lunch",
    "Dinner",
    "Snacks",
    "Dessert",
    "Bangladeshi",
    "Indian",
    "Chinese",
)


class SearchQuery(BaseModel):
    """A user query: typed text, voice transcript or category label.

    Only trimmed; empty and whitespace-only queries are rejected here, before
    they can reach the pipeline.
    """

    model_config = ConfigDict(str_strip_whitespace=True)

    query: Annotated[str, Field(min_length=1, description="Dish name, ingredient, meal time or cuisine")]

    @field_validator("query")
    @classmethod
    def validate_length(cls, query: str) -> str:
        """Reject queries longer than MAX_QUERY_LENGTH."""
        if len(query) > config.MAX_QUERY_LENGTH:
            raise ValueError(f"Query must be at most {config.MAX_QUERY_LENGTH} characters")
        return query


class RawRecipe(BaseModel):
    """One recipe as returned by structured generation, before enrichment.

    Bilingual (English/Bengali) name, ingredients and steps. List order is
    significant and preserved: steps are numbered sequentially on display.
    """

    model_config = ConfigDict(strict=True, str_strip_whitespace=True)

    name_en: Annotated[str, Field(min_length=1, description="Full, exact recipe name in English")]
    name_bn: Annotated[str, Field(min_length=1, description="Full, exact recipe name in Bengali")]
    category: Annotated[str, Field(description="Cuisine category (e.g. Bangladeshi, Indian, Chinese)")]
    ingredients_en: Annotated[List[str], Field(description="Ingredients, in English")]
    ingredients_bn: Annotated[List[str], Field(description="Ingredients, in Bengali")]
    steps_en: Annotated[List[str], Field(description="Step-by-step instructions, in English")]
    steps_bn: Annotated[List[str], Field(description="Step-by-step instructions, in Bengali")]
    youtube_link: Annotated[str, Field(description="Tutorial URL, or empty string when none matches")]
    youtube_link_is_suggested: Annotated[
        bool, Field(description="True when the link is a same-dish suggestion rather than an exact match")
    ]

    def display_name(self, language: Language = "en") -> str:
        return self.name_bn if language == "bn" else self.name_en

    def ingredients_for(self, language: Language = "en") -> List[str]:
        return list(self.ingredients_bn if language == "bn" else self.ingredients_en)

    def steps_for(self, language: Language = "en") -> List[str]:
        return list(self.steps_bn if language == "bn" else self.steps_en)

    @property
    def has_tutorial(self) -> bool:
        return bool(self.youtube_link)


class Recipe(RawRecipe):
    """Enriched recipe owned by the caller.

    `id` is opaque and assigned once at enrichment time; it is only ever
    compared, never parsed. `image_base64` is a data URL, or an empty string
    when image generation failed (such recipes are filtered out before
    reaching callers).
    """

    id: Annotated[str, Field(min_length=1, description="Client-generated unique identifier")]
    image_base64: Annotated[str, Field("", description="data:image/...;base64,... or empty on failure")]

    @property
    def has_image(self) -> bool:
        return bool(self.image_base64)


class TranslatedRecipe(BaseModel):
    """Translated ingredient and instruction lists.

    A standalone overlay returned next to the original Recipe, never merged
    back into it.
    """

    model_config = ConfigDict(strict=True, str_strip_whitespace=True)

    ingredients: Annotated[List[str], Field(description="Ingredients in the target language")]
    instructions: Annotated[List[str], Field(description="Instructions in the target language")]
