"""Gemini backend: the two generative operations the pipeline depends on.

The pipeline treats the provider as an opaque remote capability exposed
through two calls:
- generate_structured_text(): schema-constrained JSON text generation
- generate_image(): image bytes for a prompt

Each call is bounded by a timeout and is cancellable (asyncio task
cancellation propagates into the SDK's async transport). No retries: a failed
call fails, and the caller decides what that means.
"""

import asyncio
from typing import Optional

from google import genai
from google.genai import types

from ranna_banna.utils.config import config
from ranna_banna.utils.errors import ConfigurationError
from ranna_banna.utils.logger import logger


class GeminiBackend:
    """Async wrapper over google-genai for structured text and image generation."""

    def __init__(
        self,
        api_key: str,
        text_timeout: float = 60.0,
        image_timeout: float = 45.0,
        client: Optional[genai.Client] = None,
    ) -> None:
        """Initialize GeminiBackend.

        Args:
            api_key: Gemini API key.
            text_timeout: Seconds to wait for one text-generation call.
            image_timeout: Seconds to wait for one image-generation call.
            client: Pre-built client (tests). Created from api_key if None.

        Raises:
            ConfigurationError: If api_key is None or empty string.
        """
        if not api_key:
            raise ConfigurationError("GEMINI_API_KEY is required")

        self.text_timeout = text_timeout
        self.image_timeout = image_timeout
        self._client = client or genai.Client(api_key=api_key)

    async def generate_structured_text(
        self,
        model_id: str,
        prompt: str,
        system_instruction: str,
        response_schema: types.Schema,
    ) -> str:
        """Run one schema-constrained generation and return the raw JSON text.

        Returns:
            Response text (empty string if the model returned no text, e.g. a
            blocked response). The caller parses and validates it.

        Raises:
            asyncio.TimeoutError: If the call exceeds text_timeout.
            Exception: Any SDK/network error, unchanged.
        """
        logger.debug(f"Structured generation: model={model_id}, prompt={len(prompt)} chars")
        response = await asyncio.wait_for(
            self._client.aio.models.generate_content(
                model=model_id,
                contents=prompt,
                config=types.GenerateContentConfig(
                    system_instruction=system_instruction,
                    response_mime_type="application/json",
                    response_schema=response_schema,
                ),
            ),
            timeout=self.text_timeout,
        )
        return response.text or ""

    async def generate_image(
        self,
        model_id: str,
        prompt: str,
        *,
        count: int = 1,
        output_format: str = "image/jpeg",
        aspect_ratio: str = "1:1",
    ) -> bytes:
        """Generate images for a prompt and return the bytes of the first one.

        Raises:
            asyncio.TimeoutError: If the call exceeds image_timeout.
            ValueError: If the response carries no image bytes (e.g. filtered).
            Exception: Any SDK/network error, unchanged.
        """
        response = await asyncio.wait_for(
            self._client.aio.models.generate_images(
                model=model_id,
                prompt=prompt,
                config=types.GenerateImagesConfig(
                    number_of_images=count,
                    output_mime_type=output_format,
                    aspect_ratio=aspect_ratio,
                ),
            ),
            timeout=self.image_timeout,
        )

        generated = response.generated_images or []
        if not generated or generated[0].image is None or not generated[0].image.image_bytes:
            raise ValueError("Image generation returned no image data")
        return generated[0].image.image_bytes


def create_backend() -> GeminiBackend:
    """Build a GeminiBackend from the validated module-level config."""
    return GeminiBackend(
        api_key=config.GEMINI_API_KEY,
        text_timeout=config.TEXT_TIMEOUT_SECONDS,
        image_timeout=config.IMAGE_TIMEOUT_SECONDS,
    )
