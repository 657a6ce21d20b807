"""Favorites: the user's persisted bookmark set, keyed by recipe identifier.

Favorites is an explicit state container owned by the presentation layer. It
never touches storage directly: a persistence port (anything with
load() -> Optional[str] and save(str)) is injected, so the container and the
storage can be tested independently.

Persistence format: the whole list serialized as one JSON array under a single
key. A stored value that cannot be parsed is discarded with a warning.
"""

import json
import os
from pathlib import Path
from typing import Optional, Protocol

from pydantic import TypeAdapter

from ranna_banna.models.models import Recipe
from ranna_banna.utils.config import config
from ranna_banna.utils.errors import safe_execute_sync
from ranna_banna.utils.logger import logger

_RECIPE_LIST = TypeAdapter(list[Recipe])


class FavoritesStorage(Protocol):
    """Persistence port for the favorites list."""

    def load(self) -> Optional[str]:
        ...

    def save(self, value: str) -> None:
        ...


class MemoryStorage:
    """In-process storage: nothing survives the process."""

    def __init__(self, value: Optional[str] = None) -> None:
        self.value = value

    def load(self) -> Optional[str]:
        return self.value

    def save(self, value: str) -> None:
        self.value = value


class JsonFileStorage:
    """Local key-value store backed by one JSON file.

    The file holds a JSON object mapping keys to string values; this storage
    reads and writes a single key. Other keys in the file are preserved.
    """

    def __init__(self, path: str, key: str) -> None:
        self.path = Path(path)
        self.key = key

    def _read_all(self) -> dict:
        if not self.path.exists():
            return {}
        with open(self.path, "r", encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f"{self.path} does not contain a JSON object")
        return data

    def load(self) -> Optional[str]:
        value = self._read_all().get(self.key)
        return value if isinstance(value, str) else None

    def save(self, value: str) -> None:
        data = safe_execute_sync(
            logger,
            self._read_all,
            f"Read key-value store {self.path}",
            log_level="warning",
            default_return={},
        )
        data[self.key] = value

        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False)
        os.replace(tmp_path, self.path)


def create_storage() -> JsonFileStorage:
    """Build the default file storage from config."""
    return JsonFileStorage(config.FAVORITES_FILE, config.FAVORITES_KEY)


class Favorites:
    """Bookmark set keyed by recipe id, persisted whole on every change.

    Membership is id equality. Toggling a member removes it; toggling a
    non-member appends a snapshot of it.
    """

    def __init__(self, storage: FavoritesStorage) -> None:
        self._storage = storage
        self._items: list[Recipe] = self._load()

    def _load(self) -> list[Recipe]:
        raw = safe_execute_sync(
            logger,
            self._storage.load,
            "Failed to load favorites from storage",
            log_level="error",
            default_return=None,
        )
        if not raw:
            return []

        items = safe_execute_sync(
            logger,
            lambda: _RECIPE_LIST.validate_json(raw),
            "Discarding unparsable stored favorites",
            log_level="warning",
            default_return=[],
        )
        logger.debug(f"Loaded {len(items)} favorites")
        return items

    def _save(self) -> None:
        safe_execute_sync(
            logger,
            lambda: self._storage.save(self.serialize()),
            "Failed to save favorites to storage",
            log_level="error",
        )

    def serialize(self) -> str:
        return _RECIPE_LIST.dump_json(self._items).decode("utf-8")

    @property
    def items(self) -> list[Recipe]:
        return list(self._items)

    @property
    def ids(self) -> set[str]:
        return {recipe.id for recipe in self._items}

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, recipe_id: str) -> bool:
        return self.is_favorite(recipe_id)

    def is_favorite(self, recipe_id: str) -> bool:
        return any(recipe.id == recipe_id for recipe in self._items)

    def get(self, recipe_id: str) -> Optional[Recipe]:
        return next((recipe for recipe in self._items if recipe.id == recipe_id), None)

    def toggle(self, recipe: Recipe) -> bool:
        """Add the recipe if absent, remove it if present.

        Returns:
            True if the recipe is a favorite after the call.
        """
        if self.is_favorite(recipe.id):
            self._items = [fav for fav in self._items if fav.id != recipe.id]
            added = False
            logger.info(f'Removed "{recipe.name_en}" from favorites')
        else:
            self._items = [*self._items, recipe.model_copy(deep=True)]
            added = True
            logger.info(f'Added "{recipe.name_en}" to favorites')

        self._save()
        return added

    def remove(self, recipe_id: str) -> bool:
        """Remove by id. Removing an absent id is a no-op (nothing is written).

        Returns:
            True if an entry was removed.
        """
        if not self.is_favorite(recipe_id):
            return False
        self._items = [fav for fav in self._items if fav.id != recipe_id]
        self._save()
        return True
