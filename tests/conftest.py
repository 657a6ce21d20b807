"""Shared pytest configuration.

The config module validates GEMINI_API_KEY at import time, so a placeholder
key is set before any test module imports the package. Integration tests
detect the placeholder and skip.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

PLACEHOLDER_API_KEY = "test-placeholder-key"


def pytest_configure(config):
    """Load .env, then provide a placeholder API key and quiet logging before collection."""
    load_dotenv(Path(__file__).parent.parent / ".env")
    os.environ.setdefault("GEMINI_API_KEY", PLACEHOLDER_API_KEY)
    os.environ.setdefault("LOG_LEVEL", "WARNING")
