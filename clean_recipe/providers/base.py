"""
Base LLM provider.

This module defines the interface every language model provider implements.
Providers differ in endpoint, authentication and wire format, but all of them
turn a system prompt, a user prompt and a JSON schema into a parsed JSON value.
"""
from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod
from typing import Any

import requests

from ..const import DEFAULT_LLM_TIMEOUT, PROVIDER_NAMES
from ..exceptions import LLMAuthError, LLMProviderError, SettingsError
from ..parsers.response_parser import extract_json_value

_LOGGER = logging.getLogger(__name__)


class LLMProvider(ABC):
    """Abstract base class for language model providers."""

    provider_id: str = ""

    def __init__(
        self,
        api_key: str,
        model: str,
        session: requests.Session | None = None,
        timeout: float = DEFAULT_LLM_TIMEOUT,
    ) -> None:
        """Initialize the provider.

        Args:
            api_key: API key for the provider
            model: Model id to call
            session: Optional requests session
            timeout: Timeout of each HTTP request in seconds

        Raises:
            SettingsError: If the API key is empty
        """
        if not api_key or not api_key.strip():
            raise SettingsError(f"{self.display_name} API key cannot be empty")

        self.api_key = api_key.strip()
        self.model = model
        self.timeout = timeout
        self._http = session or requests
        _LOGGER.debug("Initialized %s provider with model %s", self.provider_id, model)

    @property
    def display_name(self) -> str:
        """Human readable provider name used in error messages."""
        return PROVIDER_NAMES.get(self.provider_id, self.provider_id)

    def generate_structured(
        self,
        system_prompt: str,
        user_prompt: str,
        schema: dict[str, Any],
        schema_name: str,
    ) -> Any:
        """Generate a JSON value constrained by a schema.

        Args:
            system_prompt: Instructions for the model
            user_prompt: The task and its input content
            schema: JSON Schema the answer must follow
            schema_name: Short name of the schema (some providers require one)

        Returns:
            The parsed JSON value

        Raises:
            LLMAuthError: If the provider rejects the API key
            LLMProviderError: For other HTTP failures or an empty answer
            ExtractionParseError: If the answer contains no JSON
        """
        start_time = time.time()
        text = self._generate(system_prompt, user_prompt, schema, schema_name)
        _LOGGER.debug("%s (%s) answered with %d characters in %.2fs",
                      self.display_name, self.model, len(text), time.time() - start_time)
        return extract_json_value(text)

    @abstractmethod
    def _generate(
        self,
        system_prompt: str,
        user_prompt: str,
        schema: dict[str, Any],
        schema_name: str,
    ) -> str:
        """Call the provider and return the raw answer text."""

    def _is_auth_error(self, response: requests.Response) -> bool:
        return response.status_code == 401

    def _post(self, url: str, headers: dict[str, str], payload: dict[str, Any]) -> dict[str, Any]:
        """POST a JSON payload and return the decoded JSON answer."""
        try:
            response = self._http.post(
                url,
                json=payload,
                headers={"Content-Type": "application/json", **headers},
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as err:
            _LOGGER.error("Request to %s failed: %s", self.display_name, err)
            raise LLMProviderError(
                self.display_name, f"{self.display_name} API error: {err}") from err

        if self._is_auth_error(response):
            raise LLMAuthError(self.display_name)
        if not response.ok:
            _LOGGER.error("%s returned HTTP %d", self.display_name, response.status_code)
            raise LLMProviderError(
                self.display_name, f"{self.display_name} API error: {response.text}")

        try:
            data = response.json()
        except ValueError as err:
            raise LLMProviderError(
                self.display_name,
                f"{self.display_name} API error: invalid JSON response") from err

        if not isinstance(data, dict):
            _LOGGER.error("%s returned a %s instead of a JSON object",
                          self.display_name, type(data).__name__)
            raise self._empty_response()
        return data

    def _empty_response(self) -> LLMProviderError:
        return LLMProviderError(self.display_name, f"No response from {self.display_name}")


def as_dict(value: Any) -> dict[str, Any]:
    """Return value if it is a JSON object, else an empty dict."""
    return value if isinstance(value, dict) else {}


def first_item(value: Any) -> Any:
    """Return the first element of a JSON array, or None."""
    return value[0] if isinstance(value, list) and value else None


def join_text(blocks: Any) -> str:
    """Concatenate the string 'text' fields of a list of content blocks.

    Blocks that are not objects, or whose text is missing or not a string,
    are skipped.
    """
    if not isinstance(blocks, list):
        return ""
    return "".join(
        block["text"] for block in blocks
        if isinstance(block, dict) and isinstance(block.get("text"), str)
    )
