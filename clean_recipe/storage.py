"""
Storage for settings, extracted recipes and cooking progress.

The pipeline never touches ambient global state: a ``KeyValueStore`` is
injected and ``RecipeStorage`` keeps the record layout on top of it. Values
are JSON-compatible structures stored under the keys from ``const``.
"""
from __future__ import annotations

import json
import logging
import os
import tempfile
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from .config import AppSettings, MODEL_PROVIDERS
from .const import (
    MAX_STORED_RECIPES,
    MODE_OVERVIEW,
    STORAGE_KEY_API_KEYS,
    STORAGE_KEY_CURRENT_SESSION,
    STORAGE_KEY_PROGRESS,
    STORAGE_KEY_RECIPES,
    STORAGE_KEY_SETTINGS,
)
from .exceptions import SettingsError
from .models.recipe import CurrentSession, Recipe, RecipeProgress
from .parsers.normalizer import normalize_recipe

_LOGGER = logging.getLogger(__name__)


class KeyValueStore(ABC):
    """Minimal key-value store holding JSON-compatible values."""

    @abstractmethod
    def get(self, key: str) -> Any | None:
        """Return the value stored under key, or None."""

    @abstractmethod
    def set(self, key: str, value: Any) -> None:
        """Store a value under key."""

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove key; missing keys are ignored."""


class MemoryStore(KeyValueStore):
    """In-memory store, mainly for tests and one-shot runs."""

    def __init__(self, data: dict[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = dict(data or {})

    def get(self, key: str) -> Any | None:
        return self._data.get(key)

    def set(self, key: str, value: Any) -> None:
        # Stored values never alias caller objects
        self._data[key] = json.loads(json.dumps(value))

    def delete(self, key: str) -> None:
        self._data.pop(key, None)


class JsonFileStore(KeyValueStore):
    """Store persisted as a single JSON object in a file."""

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self.path = Path(path).expanduser()

    def _read(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as err:
            _LOGGER.warning("Ignoring unreadable store %s: %s", self.path, err)
            return {}
        if not isinstance(data, dict):
            _LOGGER.warning("Ignoring store %s: expected a JSON object", self.path)
            return {}
        return data

    def _write(self, data: dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.path.name}.")
        try:
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
            os.replace(tmp_path, self.path)
        except BaseException:
            os.unlink(tmp_path)
            raise

    def get(self, key: str) -> Any | None:
        return self._read().get(key)

    def set(self, key: str, value: Any) -> None:
        data = self._read()
        data[key] = value
        self._write(data)

    def delete(self, key: str) -> None:
        data = self._read()
        if key in data:
            del data[key]
            self._write(data)


class RecipeStorage:
    """Settings, recipe history, progress and session records on a store."""

    def __init__(self, store: KeyValueStore) -> None:
        self.store = store

    # Settings

    def get_settings(self) -> AppSettings | None:
        """Return the stored settings, migrating the legacy record once."""
        stored = self.store.get(STORAGE_KEY_SETTINGS)
        if stored is not None:
            try:
                return AppSettings.from_dict(stored)
            except SettingsError as err:
                _LOGGER.warning("Ignoring stored settings: %s", err)

        legacy = self.store.get(STORAGE_KEY_API_KEYS)
        if not isinstance(legacy, dict):
            return None

        _LOGGER.info("Migrating legacy API key settings")
        provider = legacy.get("llmProvider")
        llm_key = legacy.get("llmKey")
        data: dict[str, Any] = {
            "firecrawl": legacy.get("firecrawl"),
            "providerKeys": {provider: llm_key} if provider and llm_key else {},
        }
        if legacy.get("llmModel") in MODEL_PROVIDERS:
            data["selectedModel"] = legacy["llmModel"]

        try:
            settings = AppSettings.from_dict(data)
        except SettingsError as err:
            _LOGGER.warning("Cannot migrate legacy settings: %s", err)
            return None
        self.save_settings(settings)
        return settings

    def save_settings(self, settings: AppSettings) -> None:
        self.store.set(STORAGE_KEY_SETTINGS, settings.to_dict())

    def set_selected_model(self, model_id: str) -> None:
        """Change the selected model of the stored settings, if any."""
        settings = self.get_settings()
        if settings is None:
            return
        # Validates the model id
        settings = AppSettings.from_dict({**settings.to_dict(), "selectedModel": model_id})
        self.save_settings(settings)

    # Recipes

    def get_recipes(self) -> list[Recipe]:
        """Return the recipe history, most recent first."""
        stored = self.store.get(STORAGE_KEY_RECIPES)
        if stored is None:
            return []
        if not isinstance(stored, list):
            _LOGGER.warning("Ignoring stored recipes: expected a list")
            return []
        return [normalize_recipe(entry) for entry in stored]

    def _write_recipes(self, recipes: list[Recipe]) -> None:
        self.store.set(STORAGE_KEY_RECIPES, [recipe.to_dict() for recipe in recipes])

    def get_recipe(self, recipe_id: str) -> Recipe | None:
        for recipe in self.get_recipes():
            if recipe.id == recipe_id:
                return recipe
        return None

    def save_recipe(self, recipe: Recipe) -> None:
        """Store a recipe, replacing one with the same source URL in place."""
        recipes = self.get_recipes()
        for index, existing in enumerate(recipes):
            if existing.source_url == recipe.source_url:
                recipes[index] = recipe
                break
        else:
            recipes.insert(0, recipe)

        if len(recipes) > MAX_STORED_RECIPES:
            _LOGGER.debug("Evicting %d old recipes", len(recipes) - MAX_STORED_RECIPES)
        self._write_recipes(recipes[:MAX_STORED_RECIPES])

    def delete_recipe(self, recipe_id: str) -> bool:
        """Delete a recipe by id; returns False when nothing matched."""
        recipes = self.get_recipes()
        remaining = [recipe for recipe in recipes if recipe.id != recipe_id]
        if len(remaining) == len(recipes):
            return False
        self._write_recipes(remaining)
        return True

    # Progress

    def _read_progress_map(self) -> dict[str, Any]:
        stored = self.store.get(STORAGE_KEY_PROGRESS)
        return stored if isinstance(stored, dict) else {}

    def get_recipe_progress(self, recipe_id: str) -> RecipeProgress | None:
        raw = self._read_progress_map().get(recipe_id)
        if raw is None:
            return None
        try:
            return RecipeProgress.model_validate(raw)
        except ValidationError as err:
            _LOGGER.warning("Ignoring invalid progress for recipe %s: %s", recipe_id, err)
            return None

    def save_recipe_progress(
        self,
        recipe_id: str,
        progress: RecipeProgress,
        base_servings: int | None = None,
    ) -> None:
        """Store progress for a recipe.

        Trivial progress (nothing differs from a freshly opened recipe with
        base_servings) removes the entry instead.
        """
        progress_map = self._read_progress_map()

        if base_servings is not None and progress.is_trivial(base_servings):
            if recipe_id in progress_map:
                del progress_map[recipe_id]
                self.store.set(STORAGE_KEY_PROGRESS, progress_map)
            return

        stamped = progress.model_copy(update={"updated_at": datetime.now(timezone.utc)})
        progress_map[recipe_id] = stamped.to_dict()
        self.store.set(STORAGE_KEY_PROGRESS, progress_map)

    def clear_recipe_progress(self, recipe_id: str) -> None:
        progress_map = self._read_progress_map()
        if recipe_id in progress_map:
            del progress_map[recipe_id]
            self.store.set(STORAGE_KEY_PROGRESS, progress_map)

    # Current session

    def get_current_session(self) -> CurrentSession | None:
        stored = self.store.get(STORAGE_KEY_CURRENT_SESSION)
        if stored is None:
            return None
        try:
            return CurrentSession.model_validate(stored)
        except ValidationError as err:
            _LOGGER.warning("Ignoring invalid current session: %s", err)
            return None

    def save_current_session(self, recipe_id: str, mode: str = MODE_OVERVIEW) -> CurrentSession:
        session = CurrentSession(recipe_id=recipe_id, mode=mode)
        self.store.set(STORAGE_KEY_CURRENT_SESSION, session.to_dict())
        return session

    def clear_current_session(self) -> None:
        self.store.delete(STORAGE_KEY_CURRENT_SESSION)
