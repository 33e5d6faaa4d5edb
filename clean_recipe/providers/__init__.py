"""Language model providers."""
from __future__ import annotations

import logging

import requests

from ..const import PROVIDER_ANTHROPIC, PROVIDER_GOOGLE, PROVIDER_OPENAI
from ..exceptions import UnsupportedProvider
from .anthropic import AnthropicProvider
from .base import LLMProvider
from .google import GoogleProvider
from .openai import OpenAIProvider

_LOGGER = logging.getLogger(__name__)

PROVIDER_CLASSES: dict[str, type[LLMProvider]] = {
    PROVIDER_OPENAI: OpenAIProvider,
    PROVIDER_GOOGLE: GoogleProvider,
    PROVIDER_ANTHROPIC: AnthropicProvider,
}


def get_provider(
    provider: str,
    model: str,
    api_key: str,
    session: requests.Session | None = None,
) -> LLMProvider:
    """Factory function to instantiate the client for a provider tag.

    Raises:
        UnsupportedProvider: If the tag is unknown
    """
    try:
        provider_class = PROVIDER_CLASSES[provider]
    except KeyError:
        raise UnsupportedProvider(provider) from None

    _LOGGER.debug("Using %s as the LLM provider", provider)
    return provider_class(api_key=api_key, model=model, session=session)


__all__ = [
    "AnthropicProvider",
    "GoogleProvider",
    "LLMProvider",
    "OpenAIProvider",
    "PROVIDER_CLASSES",
    "get_provider",
]
