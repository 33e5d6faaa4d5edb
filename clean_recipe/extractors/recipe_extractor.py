"""
Recipe extraction engine.

This module handles the core extraction logic: it sends scraped page content
to the configured language model with a schema-bound prompt, validates the
answer, and runs a second best-effort call that proposes alternative
measurements for every ingredient.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

import requests

from ..exceptions import ExtractionParseError, RecipeExtractorError
from ..models.schema import (
    ALTERNATIVES_SCHEMA,
    RECIPE_SCHEMA,
    validate_alternatives_payload,
    validate_recipe_payload,
)
from ..providers import LLMProvider, get_provider
from .prompts import SYSTEM_PROMPT, build_alternatives_prompt, build_extraction_prompt

_LOGGER = logging.getLogger(__name__)


@dataclass
class EnrichmentResult:
    """Outcome of the alternative-measurement pass.

    Only a successful result carries alternatives; a failed one carries the
    reason for the log.
    """

    success: bool
    alternatives: list[list[dict[str, Any]]] = field(default_factory=list)
    error: str | None = None


def merge_alternatives(
    ingredients: list[dict[str, Any]],
    alternatives: list[list[dict[str, Any]]],
) -> list[dict[str, Any]]:
    """Attach enrichment alternatives to the ingredients index by index.

    Alternatives the primary extraction already produced come first. The
    normalizer later removes duplicates and the ingredient's own unit.

    Args:
        ingredients: Ingredient dicts from the primary extraction
        alternatives: One list of alternatives per ingredient

    Returns:
        New ingredient dicts, or the original list unchanged when the
        counts differ
    """
    if len(alternatives) != len(ingredients):
        _LOGGER.warning(
            "Rejecting enrichment: %d alternative lists for %d ingredients",
            len(alternatives), len(ingredients))
        return ingredients

    merged = []
    for ingredient, extra in zip(ingredients, alternatives):
        combined = list(ingredient.get("alternatives") or []) + list(extra)
        updated = dict(ingredient)
        if combined:
            updated["alternatives"] = combined
        merged.append(updated)
    return merged


class RecipeExtractor:
    """Extracts structured recipe data from page content with one provider."""

    def __init__(self, provider: LLMProvider) -> None:
        """Initialize the recipe extractor.

        Args:
            provider: The language model client serving both calls
        """
        self.provider = provider
        _LOGGER.debug("Initialized RecipeExtractor with %s (%s)",
                      provider.display_name, provider.model)

    def extract_recipe(self, content: str) -> dict[str, Any]:
        """Run the primary extraction call.

        Args:
            content: Scraped page content (markdown)

        Returns:
            The validated recipe payload (camelCase dict)

        Raises:
            LLMAuthError: If the provider rejects the API key
            LLMProviderError: If the provider call fails
            ExtractionParseError: If the answer is not a recognizable recipe
        """
        if not content or not content.strip():
            raise ExtractionParseError("empty content")

        _LOGGER.info("Extracting recipe from %d characters of text with %s",
                     len(content), self.provider.model)
        data = self.provider.generate_structured(
            SYSTEM_PROMPT,
            build_extraction_prompt(content),
            RECIPE_SCHEMA,
            "recipe",
        )
        payload = validate_recipe_payload(data)
        _LOGGER.info("Extracted recipe '%s' with %d ingredients and %d steps",
                     payload["title"], len(payload["ingredients"]), len(payload["steps"]))
        return payload

    def request_alternatives(self, ingredients: list[dict[str, Any]]) -> EnrichmentResult:
        """Ask the model for alternative measurements of every ingredient.

        Never raises: any failure is logged and returned as an unsuccessful
        result.
        """
        try:
            data = self.provider.generate_structured(
                SYSTEM_PROMPT,
                build_alternatives_prompt(ingredients),
                ALTERNATIVES_SCHEMA,
                "ingredient_alternatives",
            )
            alternatives = validate_alternatives_payload(data, len(ingredients))
        except (RecipeExtractorError, requests.exceptions.RequestException) as err:
            _LOGGER.warning("Alternative measurements unavailable: %s", err)
            return EnrichmentResult(success=False, error=str(err))

        _LOGGER.debug("Received alternatives for %d ingredients", len(alternatives))
        return EnrichmentResult(success=True, alternatives=alternatives)

    def extract(self, content: str) -> dict[str, Any]:
        """Extract a recipe and enrich its ingredients when possible.

        The enrichment pass runs only after the primary extraction produced a
        non-empty ingredient list, and only a successful result with one list
        per ingredient changes the output.
        """
        payload = self.extract_recipe(content)

        ingredients = payload.get("ingredients") or []
        if not ingredients:
            _LOGGER.debug("No ingredients, skipping alternative measurements")
            return payload

        enrichment = self.request_alternatives(ingredients)
        if enrichment.success:
            payload["ingredients"] = merge_alternatives(ingredients, enrichment.alternatives)
        return payload


def extract(
    content: str,
    provider: str,
    model: str,
    api_key: str,
    session: requests.Session | None = None,
) -> dict[str, Any]:
    """Extract a validated recipe payload from page content.

    Args:
        content: Scraped page content
        provider: Provider tag ('openai', 'google' or 'anthropic')
        model: Model id of that provider
        api_key: API key of that provider
        session: Optional requests session

    Returns:
        The validated, possibly enriched, recipe payload

    Raises:
        UnsupportedProvider: If the provider tag is unknown
        LLMAuthError: If the provider rejects the API key
        LLMProviderError: If the provider call fails
        ExtractionParseError: If the answer is not a recognizable recipe
    """
    client = get_provider(provider, model, api_key, session=session)
    return RecipeExtractor(client).extract(content)
