"""
Recipe Extraction Service.

This module orchestrates the extraction of recipe data from URLs:
1. Validates the URL and resolves the credentials from the settings
2. Scrapes the page content through Firecrawl
3. Extracts and enriches the recipe with the selected language model
4. Normalizes the result into the canonical Recipe record
"""
from __future__ import annotations

import logging

import requests

from ..config import AppSettings, resolve_credentials
from ..exceptions import RecipeExtractorError, SettingsError
from ..extractors.recipe_extractor import extract
from ..extractors.scraper import scrape, validate_url
from ..models.recipe import Recipe
from ..parsers.normalizer import normalize_recipe
from ..storage import RecipeStorage

_LOGGER = logging.getLogger(__name__)


def extract_recipe(
    url: str,
    settings: AppSettings,
    session: requests.Session | None = None,
) -> Recipe:
    """Extract a recipe from a URL.

    Either a complete Recipe is returned or an error is raised; no partial
    recipe is ever produced.

    Args:
        url: Recipe website URL
        settings: Keys and selected model
        session: Optional requests session used for every HTTP call

    Returns:
        The canonical Recipe with its source URL set

    Raises:
        RecipeExtractorError: Any scraping, settings or extraction failure,
            with a message meant for the user
    """
    url = validate_url(url)
    firecrawl_key, provider, model, api_key = resolve_credentials(settings)
    _LOGGER.debug(
        "Starting recipe extraction from %s using model %s", url, model)

    try:
        content = scrape(url, firecrawl_key, session=session)
        payload = extract(content, provider, model, api_key, session=session)
    except RecipeExtractorError as err:
        _LOGGER.error("Error extracting recipe from %s: %s", url, err, exc_info=True)
        raise

    payload["sourceUrl"] = url
    recipe = normalize_recipe(payload)

    _LOGGER.info(
        "Successfully extracted recipe '%s' with %d ingredients from %s",
        recipe.title,
        len(recipe.ingredients),
        url
    )
    return recipe


def extract_and_save(
    url: str,
    storage: RecipeStorage,
    settings: AppSettings | None = None,
    session: requests.Session | None = None,
) -> Recipe:
    """Extract a recipe and add it to the stored history.

    Args:
        url: Recipe website URL
        storage: Storage holding settings and history
        settings: Settings to use instead of the stored ones
        session: Optional requests session

    Raises:
        SettingsError: If no settings are given or stored
        RecipeExtractorError: Any extraction failure
    """
    settings = settings or storage.get_settings()
    if settings is None:
        raise SettingsError("Please configure your API keys first.")

    recipe = extract_recipe(url, settings, session=session)
    storage.save_recipe(recipe)
    storage.save_current_session(recipe.id)
    return recipe
