"""Pytest configuration and fixtures for integration tests.

These tests call the live Gemini API. They are skipped unless a real
GEMINI_API_KEY is available (environment or .env in the project root);
the placeholder key set by the top-level conftest does not count.
"""

import os

import pytest

from ranna_banna.services.gemini import GeminiBackend, create_backend


@pytest.fixture(scope="session", autouse=True)
def check_api_keys():
    """Skip the whole integration session without a real API key."""
    gemini_key = os.getenv("GEMINI_API_KEY", "")

    if not gemini_key or gemini_key == "test-placeholder-key":
        pytest.skip(
            "Integration tests skipped. Missing API key: GEMINI_API_KEY. Please set it in your .env file.",
            allow_module_level=True,
        )


@pytest.fixture
def live_backend() -> GeminiBackend:
    """Backend built from the real configuration."""
    return create_backend()
