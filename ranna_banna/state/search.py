"""Search session: presentation-side state for the current recipe search.

Each search gets a monotonically increasing sequence number. Starting a new
search cancels the previous in-flight fetch, and a fetch only applies its
outcome (recipes or error message) if its sequence number is still the
latest. A slow or superseded query can therefore never overwrite a newer
result.
"""

import asyncio
from typing import Awaitable, Callable, Optional

from ranna_banna.models.models import Recipe, SearchQuery
from ranna_banna.services.gemini import GeminiBackend
from ranna_banna.services.recipes import fetch_recipes
from ranna_banna.utils.errors import RecipeServiceError
from ranna_banna.utils.logger import logger

RecipeFetcher = Callable[[str, Optional[GeminiBackend]], Awaitable[list[Recipe]]]


class SearchSession:
    """Holds the latest query, its recipes or error, and the loading flag."""

    def __init__(self, backend: Optional[GeminiBackend] = None, fetcher: RecipeFetcher = fetch_recipes) -> None:
        self._backend = backend
        self._fetcher = fetcher
        self._sequence = 0
        self._inflight: Optional[asyncio.Task] = None

        self.query: Optional[str] = None
        self.recipes: list[Recipe] = []
        self.error: Optional[str] = None
        self.is_loading = False

    @property
    def sequence(self) -> int:
        return self._sequence

    def is_current(self, sequence: int) -> bool:
        return sequence == self._sequence

    def cancel(self) -> None:
        """Cancel the in-flight fetch, if any, and drop its future result."""
        self._sequence += 1
        if self._inflight is not None and not self._inflight.done():
            self._inflight.cancel()
        self._inflight = None
        self.is_loading = False

    async def search(self, query: str) -> Optional[list[Recipe]]:
        """Run a search and apply its outcome if it is still the latest.

        Args:
            query: Raw user query; trimmed and validated here.

        Returns:
            The recipes applied to the session, or None if this search was
            superseded before it finished.

        Raises:
            pydantic.ValidationError: Empty or too long query (nothing is fetched).
            RecipeServiceError: The latest search failed; `error` holds the message.
            asyncio.CancelledError: The caller cancelled this search.
        """
        query = SearchQuery(query=query).query

        previous = self._inflight
        self._sequence += 1
        sequence = self._sequence
        if previous is not None and not previous.done():
            logger.info(f"Superseding in-flight search #{sequence - 1}", extra={"fetch_id": sequence})
            previous.cancel()

        self.query = query
        self.error = None
        self.is_loading = True

        task = asyncio.ensure_future(self._fetcher(query, self._backend))
        self._inflight = task
        logger.debug(f"Search started: {query}", extra={"fetch_id": sequence, "query": query})

        try:
            recipes = await task
        except asyncio.CancelledError:
            if not self.is_current(sequence):
                logger.info("Search superseded, discarding", extra={"fetch_id": sequence})
                return None
            self.is_loading = False
            raise
        except RecipeServiceError as e:
            if not self.is_current(sequence):
                logger.info(f"Stale search failed, discarding: {e}", extra={"fetch_id": sequence})
                return None
            self.recipes = []
            self.error = str(e)
            self.is_loading = False
            raise

        if not self.is_current(sequence):
            logger.info("Stale search finished, discarding results", extra={"fetch_id": sequence})
            return None

        self.recipes = recipes
        self.is_loading = False
        self._inflight = None
        logger.info(f"Search finished with {len(recipes)} recipes", extra={"fetch_id": sequence})
        return recipes

    async def retry(self) -> Optional[list[Recipe]]:
        """Re-issue the last query.

        Raises:
            ValueError: If no search has been made yet.
        """
        if self.query is None:
            raise ValueError("Nothing to retry: no search has been made")
        return await self.search(self.query)

    def reset(self) -> None:
        """Return to the home state: no query, no results, no error."""
        self.cancel()
        self.query = None
        self.recipes = []
        self.error = None
