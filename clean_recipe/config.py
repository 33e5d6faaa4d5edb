"""
Configuration for the Clean Recipe extractor.

Settings hold the Firecrawl key, one key per language model provider and the
selected model. The provider of a model comes from the static model table in
``const``; a model is available when its provider has a key.
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Any

import voluptuous as vol
from dotenv import load_dotenv

from .const import (
    DEFAULT_MODEL,
    ENV_ANTHROPIC_API_KEY,
    ENV_FIRECRAWL_API_KEY,
    ENV_GEMINI_API_KEY,
    ENV_GOOGLE_API_KEY,
    ENV_MODEL,
    ENV_OPENAI_API_KEY,
    LLM_MODELS,
    PROVIDER_ANTHROPIC,
    PROVIDER_GOOGLE,
    PROVIDER_NAMES,
    PROVIDER_OPENAI,
    PROVIDERS,
)
from .exceptions import SettingsError

_LOGGER = logging.getLogger(__name__)

MODEL_PROVIDERS = {model_id: provider for model_id, _, provider in LLM_MODELS}

CONF_FIRECRAWL = "firecrawl"
CONF_PROVIDER_KEYS = "providerKeys"
CONF_SELECTED_MODEL = "selectedModel"


def _optional_key(value: Any) -> str | None:
    """Strip a key; empty keys count as absent."""
    if value is None:
        return None
    text = vol.Coerce(str)(value).strip()
    return text or None


def _known_model(value: Any) -> str:
    model_id = vol.Coerce(str)(value).strip()
    if model_id not in MODEL_PROVIDERS:
        raise vol.Invalid(f"unknown model '{model_id}'")
    return model_id


SETTINGS_SCHEMA = vol.Schema(
    {
        vol.Optional(CONF_FIRECRAWL, default=None): _optional_key,
        vol.Optional(CONF_PROVIDER_KEYS, default=dict): vol.Schema(
            {vol.Optional(vol.In(PROVIDERS)): _optional_key}
        ),
        vol.Optional(CONF_SELECTED_MODEL, default=DEFAULT_MODEL): _known_model,
    },
    extra=vol.REMOVE_EXTRA,
)


@dataclass
class AppSettings:
    """User settings of the extractor.

    Attributes:
        firecrawl: Firecrawl API key
        provider_keys: API key per provider tag, absent when not configured
        selected_model: Model id used for extraction
    """

    firecrawl: str | None = None
    provider_keys: dict[str, str] = field(default_factory=dict)
    selected_model: str = DEFAULT_MODEL

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AppSettings:
        """Validate and build settings from their stored camelCase form.

        Raises:
            SettingsError: If the data does not match the settings schema
        """
        try:
            validated = SETTINGS_SCHEMA(data or {})
        except vol.Invalid as err:
            raise SettingsError(f"Invalid settings: {err}") from err

        return cls(
            firecrawl=validated[CONF_FIRECRAWL],
            provider_keys={
                provider: key
                for provider, key in validated[CONF_PROVIDER_KEYS].items()
                if key
            },
            selected_model=validated[CONF_SELECTED_MODEL],
        )

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            CONF_PROVIDER_KEYS: dict(self.provider_keys),
            CONF_SELECTED_MODEL: self.selected_model,
        }
        if self.firecrawl:
            data[CONF_FIRECRAWL] = self.firecrawl
        return data

    def provider_key(self, provider: str) -> str | None:
        key = self.provider_keys.get(provider)
        return key if key and key.strip() else None


def get_provider_for_model(model_id: str) -> str:
    """Look up the provider tag of a model.

    Raises:
        SettingsError: If the model is not in the model table
    """
    try:
        return MODEL_PROVIDERS[model_id]
    except KeyError:
        raise SettingsError(f"Unknown model: {model_id}") from None


def is_model_available(settings: AppSettings, model_id: str) -> bool:
    """Return True when the model is known and its provider has a key."""
    provider = MODEL_PROVIDERS.get(model_id)
    return provider is not None and settings.provider_key(provider) is not None


def get_available_models(settings: AppSettings) -> list[tuple[str, str, str]]:
    """Return the (id, name, provider) entries usable with the configured keys."""
    return [entry for entry in LLM_MODELS if is_model_available(settings, entry[0])]


def load_settings_from_env(model: str | None = None) -> AppSettings:
    """Build settings from environment variables (and a .env file if present).

    Args:
        model: Model id overriding RECIPE_MODEL

    Raises:
        SettingsError: If the selected model is unknown
    """
    load_dotenv()

    provider_keys = {
        PROVIDER_OPENAI: os.getenv(ENV_OPENAI_API_KEY),
        PROVIDER_GOOGLE: os.getenv(ENV_GOOGLE_API_KEY) or os.getenv(ENV_GEMINI_API_KEY),
        PROVIDER_ANTHROPIC: os.getenv(ENV_ANTHROPIC_API_KEY),
    }
    settings = AppSettings.from_dict({
        CONF_FIRECRAWL: os.getenv(ENV_FIRECRAWL_API_KEY),
        CONF_PROVIDER_KEYS: {tag: key for tag, key in provider_keys.items() if key},
        CONF_SELECTED_MODEL: model or os.getenv(ENV_MODEL) or DEFAULT_MODEL,
    })
    _LOGGER.debug("Loaded settings from environment: model %s, providers %s",
                  settings.selected_model, sorted(settings.provider_keys))
    return settings


def resolve_credentials(settings: AppSettings) -> tuple[str, str, str, str]:
    """Resolve everything the pipeline needs to run one extraction.

    Returns:
        Tuple of (firecrawl key, provider tag, model id, provider key)

    Raises:
        SettingsError: If a key is missing or the model is unknown
    """
    if not settings.firecrawl:
        raise SettingsError("Please configure your Firecrawl API key.")

    model_id = settings.selected_model
    provider = get_provider_for_model(model_id)
    provider_key = settings.provider_key(provider)
    if provider_key is None:
        raise SettingsError(
            f"Please configure your {PROVIDER_NAMES[provider]} API key to use {model_id}.")

    return settings.firecrawl, provider, model_id, provider_key
