"""Unit tests for the recipe fetch pipeline with a mocked backend."""

import asyncio
import base64
import json

import pytest

from ranna_banna.models.models import RawRecipe
from ranna_banna.services.recipes import (
    enrich_recipe,
    enrich_recipes,
    fetch_raw_recipes,
    fetch_recipes,
    filter_enriched_recipes,
    parse_recipe_response,
    to_data_url,
)
from ranna_banna.utils.errors import (
    ImageGenerationFailedError,
    InvalidRecipeResponseError,
    RecipeServiceUnavailableError,
)
from ranna_banna.utils.config import config

LUNCH_DISHES = [
    "Chicken Biryani",
    "Beef Tehari",
    "Mutton Rezala",
    "Shorshe Ilish",
    "Bhuna Khichuri",
    "Dal Makhani",
    "Chicken Korma",
    "Aloo Bhorta",
    "Begun Bhaja",
    "Morog Polao",
    "Chingri Malai Curry",
]


class TestParseRecipeResponse:
    """Test strict parsing of structured-generation output."""

    def test_valid_array(self, recipes_json):
        """A valid array parses into RawRecipe records in order."""
        recipes = parse_recipe_response(recipes_json(["Dal", "Rice"]))

        assert [recipe.name_en for recipe in recipes] == ["Dal", "Rice"]
        assert all(isinstance(recipe, RawRecipe) for recipe in recipes)

    def test_empty_array(self):
        """An empty array is a valid 'nothing found' answer."""
        assert parse_recipe_response("  []\n") == []

    @pytest.mark.parametrize("text", ["", "not json", "[{]", '[{"name_en": "Dal"'])
    def test_malformed_json(self, text):
        """Malformed JSON is an invalid-format error."""
        with pytest.raises(InvalidRecipeResponseError):
            parse_recipe_response(text)

    @pytest.mark.parametrize("text", ['{"recipes": []}', '"Dal"', "42", "null"])
    def test_non_list_json(self, text):
        """Valid JSON that is not an array is rejected."""
        with pytest.raises(InvalidRecipeResponseError):
            parse_recipe_response(text)

    def test_missing_field_in_any_item(self, recipe_payload):
        """One bad item fails the whole response: no partial recovery."""
        bad = recipe_payload("Broken")
        del bad["steps_bn"]
        text = json.dumps([recipe_payload("Dal"), bad])

        with pytest.raises(InvalidRecipeResponseError) as exc:
            parse_recipe_response(text)
        assert str(exc.value) == "The AI returned an invalid recipe format. Please try again."


class TestFetchRawRecipes:
    """Test the text-generation step."""

    @pytest.mark.asyncio
    async def test_sends_query_with_schema(self, backend, recipes_json):
        """One call with the configured model, query prompt and recipe schema."""
        backend.generate_structured_text.return_value = recipes_json(["Chicken Biryani"])

        recipes = await fetch_raw_recipes("Chicken Biryani", backend)

        assert len(recipes) == 1
        args = backend.generate_structured_text.call_args.args
        assert args[0] == config.TEXT_MODEL
        assert "Chicken Biryani" in args[1]

    @pytest.mark.asyncio
    async def test_call_failure_is_service_unavailable(self, backend):
        """Any transport error maps to the service-unavailable message."""
        backend.generate_structured_text.side_effect = ConnectionError("network down")

        with pytest.raises(RecipeServiceUnavailableError) as exc:
            await fetch_raw_recipes("Dal", backend)
        assert isinstance(exc.value.__cause__, ConnectionError)

    @pytest.mark.asyncio
    async def test_timeout_is_service_unavailable(self, backend):
        """A timed-out call maps to the service-unavailable message."""
        backend.generate_structured_text.side_effect = asyncio.TimeoutError()

        with pytest.raises(RecipeServiceUnavailableError):
            await fetch_raw_recipes("Dal", backend)


class TestEnrichment:
    """Test per-recipe image generation and id assignment."""

    @pytest.mark.asyncio
    async def test_enrich_recipe_success(self, backend, recipe_payload):
        """Image bytes become a data URL; an id is assigned."""
        raw = RawRecipe.model_validate(recipe_payload("Beef Tehari"))

        recipe = await enrich_recipe(raw, backend)

        assert recipe.id
        assert recipe.image_base64 == to_data_url(b"\xff\xd8jpeg-bytes", config.IMAGE_OUTPUT_FORMAT)
        assert recipe.name_en == "Beef Tehari"
        prompt = backend.generate_image.call_args.args[1]
        assert '"Beef Tehari"' in prompt

    @pytest.mark.asyncio
    async def test_enrich_recipe_failure_keeps_id(self, backend, recipe_payload):
        """A failed image leaves an empty marker but still an id; nothing is raised."""
        backend.generate_image.side_effect = RuntimeError("blocked")
        raw = RawRecipe.model_validate(recipe_payload())

        recipe = await enrich_recipe(raw, backend)

        assert recipe.id
        assert recipe.image_base64 == ""

    @pytest.mark.asyncio
    async def test_enrich_recipes_preserves_order_and_unique_ids(self, backend, recipes_json):
        """Results keep input order even when images finish out of order."""

        async def out_of_order(model_id, prompt, **kwargs):
            # later dishes finish first
            delay = 0.01 if "Chicken Biryani" in prompt else 0
            await asyncio.sleep(delay)
            return b"img"

        backend.generate_image.side_effect = out_of_order
        raws = parse_recipe_response(recipes_json(LUNCH_DISHES[:4]))

        recipes = await enrich_recipes(raws, backend)

        assert [recipe.name_en for recipe in recipes] == LUNCH_DISHES[:4]
        assert len({recipe.id for recipe in recipes}) == 4

    @pytest.mark.asyncio
    async def test_enrich_recipes_empty(self, backend):
        """No recipes means no image calls."""
        assert await enrich_recipes([], backend) == []
        backend.generate_image.assert_not_called()

    @pytest.mark.asyncio
    async def test_enrich_recipes_propagates_cancellation(self, backend, recipes_json):
        """Cancellation is not swallowed by per-item error capture."""
        started = asyncio.Event()

        async def hang(*args, **kwargs):
            started.set()
            await asyncio.sleep(10)

        backend.generate_image.side_effect = hang
        raws = parse_recipe_response(recipes_json(["Dal"]))
        task = asyncio.ensure_future(enrich_recipes(raws, backend))
        await started.wait()
        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task


class TestFilterEnrichedRecipes:
    """Test the final filter."""

    def test_stable_filter_on_mixed_failures(self, recipe_factory):
        """Failed items are dropped, survivors keep relative order."""
        recipes = [
            recipe_factory("A", "1"),
            recipe_factory("B", "2").model_copy(update={"image_base64": ""}),
            recipe_factory("C", "3"),
            recipe_factory("D", "4").model_copy(update={"image_base64": ""}),
        ]

        assert [recipe.id for recipe in filter_enriched_recipes(recipes)] == ["1", "3"]

    def test_all_failed_raises(self, recipe_factory):
        """Recipes found but none finished is an error, not an empty result."""
        recipes = [recipe_factory("A", "1").model_copy(update={"image_base64": ""})]

        with pytest.raises(ImageGenerationFailedError):
            filter_enriched_recipes(recipes)

    def test_empty_input_is_empty_output(self):
        """Empty in, empty out."""
        assert filter_enriched_recipes([]) == []


class TestFetchRecipes:
    """Test the full pipeline."""

    @pytest.mark.asyncio
    async def test_specific_dish(self, backend, recipes_json):
        """A specific query returns one complete recipe."""
        backend.generate_structured_text.return_value = recipes_json(["Chicken Biryani"])

        recipes = await fetch_recipes("Chicken Biryani", backend)

        assert len(recipes) == 1
        recipe = recipes[0]
        assert recipe.id
        assert recipe.image_base64.startswith(f"data:{config.IMAGE_OUTPUT_FORMAT};base64,")
        header, encoded = recipe.image_base64.split(",", 1)
        assert base64.b64decode(encoded) == b"\xff\xd8jpeg-bytes"

    @pytest.mark.asyncio
    async def test_category_query(self, backend, recipes_json):
        """A broad category returns every recipe in model order, one image call each."""
        backend.generate_structured_text.return_value = recipes_json(LUNCH_DISHES)

        recipes = await fetch_recipes("Lunch", backend)

        assert [recipe.name_en for recipe in recipes] == LUNCH_DISHES
        assert backend.generate_image.await_count == len(LUNCH_DISHES)

    @pytest.mark.asyncio
    async def test_no_recipes_found(self, backend):
        """An empty list from the model is returned as-is, without image calls."""
        assert await fetch_recipes("xyzzy", backend) == []
        backend.generate_image.assert_not_called()

    @pytest.mark.asyncio
    async def test_all_images_fail(self, backend, recipes_json):
        """Every image failing raises the image-generation error."""
        backend.generate_structured_text.return_value = recipes_json(["Dal", "Rice"])
        backend.generate_image.side_effect = RuntimeError("quota")

        with pytest.raises(ImageGenerationFailedError):
            await fetch_recipes("Dal", backend)

    @pytest.mark.asyncio
    async def test_some_images_fail(self, backend, recipes_json):
        """Partial failures are dropped silently."""
        backend.generate_structured_text.return_value = recipes_json(["Dal", "Rice", "Fish"])

        async def fail_rice(model_id, prompt, **kwargs):
            if '"Rice"' in prompt:
                raise RuntimeError("filtered")
            return b"img"

        backend.generate_image.side_effect = fail_rice

        recipes = await fetch_recipes("Dal", backend)

        assert [recipe.name_en for recipe in recipes] == ["Dal", "Fish"]

    @pytest.mark.asyncio
    async def test_invalid_response_stops_before_images(self, backend):
        """A schema violation raises and no image is requested."""
        backend.generate_structured_text.return_value = '[{"name_en": "Dal"}]'

        with pytest.raises(InvalidRecipeResponseError):
            await fetch_recipes("Dal", backend)
        backend.generate_image.assert_not_called()

    @pytest.mark.asyncio
    async def test_text_failure_stops_before_images(self, backend):
        """A failed text call raises and no image is requested."""
        backend.generate_structured_text.side_effect = asyncio.TimeoutError()

        with pytest.raises(RecipeServiceUnavailableError):
            await fetch_recipes("Dal", backend)
        backend.generate_image.assert_not_called()

    @pytest.mark.asyncio
    async def test_images_start_after_text_completes(self, backend, recipes_json):
        """No image request is issued before the text step has finished."""
        events = []

        async def text(*args, **kwargs):
            events.append("text-start")
            await asyncio.sleep(0)
            events.append("text-end")
            return recipes_json(["Dal", "Rice"])

        async def image(*args, **kwargs):
            events.append("image")
            return b"img"

        backend.generate_structured_text.side_effect = text
        backend.generate_image.side_effect = image

        await fetch_recipes("Dal", backend)

        assert events[:2] == ["text-start", "text-end"]
        assert events[2:] == ["image", "image"]
