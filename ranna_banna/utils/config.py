"""Configuration management for the Ranna Banna recipe finder.

Loads environment variables from system environment and .env file.
Priority order: system environment > .env file > hardcoded defaults
"""

import os

from dotenv import load_dotenv

from ranna_banna.utils.errors import ConfigurationError


# Load .env file (if exists, silently continues if missing)
load_dotenv()

SUPPORTED_LANGUAGES = ("en", "bn")
SUPPORTED_ASPECT_RATIOS = ("1:1", "3:4", "4:3", "9:16", "16:9")
SUPPORTED_IMAGE_FORMATS = ("image/jpeg", "image/png")


class Config:
    """Application configuration loaded from environment variables."""

    def __init__(self) -> None:
        """Initialize configuration from environment variables."""
        self.GEMINI_API_KEY: str = os.getenv("GEMINI_API_KEY", "")
        # Text Model: structured JSON generation for recipe lists and translations
        self.TEXT_MODEL: str = os.getenv("TEXT_MODEL", "gemini-2.5-flash")
        # Image Model: one photorealistic dish image per recipe
        self.IMAGE_MODEL: str = os.getenv("IMAGE_MODEL", "imagen-3.0-generate-002")
        # Per-call timeouts (seconds). A hung call fails that call only.
        self.TEXT_TIMEOUT_SECONDS: float = float(os.getenv("TEXT_TIMEOUT_SECONDS", "60"))
        self.IMAGE_TIMEOUT_SECONDS: float = float(os.getenv("IMAGE_TIMEOUT_SECONDS", "45"))
        # Image shape: square by default so recipe cards line up
        self.IMAGE_ASPECT_RATIO: str = os.getenv("IMAGE_ASPECT_RATIO", "1:1")
        self.IMAGE_OUTPUT_FORMAT: str = os.getenv("IMAGE_OUTPUT_FORMAT", "image/jpeg")
        # UI language used when the caller gives no hint: "en" or "bn"
        self.DEFAULT_LANGUAGE: str = os.getenv("DEFAULT_LANGUAGE", "en").lower()
        # Local key-value store holding the favorites list
        self.FAVORITES_FILE: str = os.getenv("FAVORITES_FILE", "tmp/ranna_banna_store.json")
        self.FAVORITES_KEY: str = os.getenv("FAVORITES_KEY", "ranna-banna-favorites")
        # Longest accepted query (typed text, voice transcript or category label)
        self.MAX_QUERY_LENGTH: int = int(os.getenv("MAX_QUERY_LENGTH", "200"))

    def validate(self) -> None:
        """Validate required configuration.

        Raises:
            ConfigurationError: If the API key is missing or invalid values are provided.
        """
        if not self.GEMINI_API_KEY:
            raise ConfigurationError("GEMINI_API_KEY environment variable is required")
        if self.TEXT_TIMEOUT_SECONDS <= 0:
            raise ConfigurationError(
                f"TEXT_TIMEOUT_SECONDS must be positive, got: {self.TEXT_TIMEOUT_SECONDS}"
            )
        if self.IMAGE_TIMEOUT_SECONDS <= 0:
            raise ConfigurationError(
                f"IMAGE_TIMEOUT_SECONDS must be positive, got: {self.IMAGE_TIMEOUT_SECONDS}"
            )
        if self.IMAGE_ASPECT_RATIO not in SUPPORTED_ASPECT_RATIOS:
            raise ConfigurationError(
                f"IMAGE_ASPECT_RATIO must be one of {SUPPORTED_ASPECT_RATIOS}, got: {self.IMAGE_ASPECT_RATIO}"
            )
        if self.IMAGE_OUTPUT_FORMAT not in SUPPORTED_IMAGE_FORMATS:
            raise ConfigurationError(
                f"IMAGE_OUTPUT_FORMAT must be one of {SUPPORTED_IMAGE_FORMATS}, got: {self.IMAGE_OUTPUT_FORMAT}"
            )
        if self.DEFAULT_LANGUAGE not in SUPPORTED_LANGUAGES:
            raise ConfigurationError(
                f"DEFAULT_LANGUAGE must be 'en' or 'bn', got: {self.DEFAULT_LANGUAGE}"
            )
        if not self.FAVORITES_KEY:
            raise ConfigurationError("FAVORITES_KEY must not be empty")
        if self.MAX_QUERY_LENGTH < 1:
            raise ConfigurationError(
                f"MAX_QUERY_LENGTH must be at least 1, got: {self.MAX_QUERY_LENGTH}"
            )


# Create module-level config instance and validate immediately
config = Config()
config.validate()
