"""Fixtures for unit tests: recipe payloads and a mocked generative backend."""

import json
from unittest.mock import AsyncMock, MagicMock

import pytest

from ranna_banna.models.models import Recipe


def raw_recipe_payload(name_en: str = "Chicken Biryani", **overrides) -> dict:
    """One recipe as the model would return it."""
    payload = {
        "name_en": name_en,
        "name_bn": f"{name_en} (বাংলা)",
        "category": "Bangladeshi",
        "ingredients_en": ["500g basmati rice", "1kg chicken", "2 onions"],
        "ingredients_bn": ["৫০০ গ্রাম বাসমতি চাল", "১ কেজি মুরগি", "২টি পেঁয়াজ"],
        "steps_en": ["Marinate the chicken.", "Par-boil the rice.", "Layer and cook on dum."],
        "steps_bn": ["মুরগি ম্যারিনেট করুন।", "চাল আধা সিদ্ধ করুন।", "স্তরে স্তরে সাজিয়ে দমে রান্না করুন।"],
        "youtube_link": "https://www.youtube.com/watch?v=abc123",
        "youtube_link_is_suggested": False,
    }
    payload.update(overrides)
    return payload


def make_recipe(name_en: str = "Chicken Biryani", recipe_id: str = "recipe-1", **overrides) -> Recipe:
    """An enriched recipe with an image, ready for favorites and rendering."""
    return Recipe(
        **raw_recipe_payload(name_en, **overrides),
        id=recipe_id,
        image_base64="data:image/jpeg;base64,AAAA",
    )


@pytest.fixture
def recipe_payload():
    return raw_recipe_payload


@pytest.fixture
def recipes_json():
    """Build the model's JSON answer for a list of dish names."""

    def build(names) -> str:
        return json.dumps([raw_recipe_payload(name) for name in names])

    return build


@pytest.fixture
def recipe_factory():
    return make_recipe


@pytest.fixture
def backend():
    """Backend double: text returns an empty list, images return fixed bytes."""
    mock = MagicMock()
    mock.generate_structured_text = AsyncMock(return_value=json.dumps([]))
    mock.generate_image = AsyncMock(return_value=b"\xff\xd8jpeg-bytes")
    return mock
