"""Anthropic provider (messages wire format)."""
from __future__ import annotations

import json
from typing import Any

from ..const import (
    ANTHROPIC_MESSAGES_URL,
    ANTHROPIC_VERSION,
    DEFAULT_MAX_TOKENS,
    DEFAULT_TEMPERATURE,
    PROVIDER_ANTHROPIC,
)
from .base import LLMProvider, join_text


class AnthropicProvider(LLMProvider):
    """Calls the messages endpoint; the schema travels inside the prompt."""

    provider_id = PROVIDER_ANTHROPIC

    def _generate(
        self,
        system_prompt: str,
        user_prompt: str,
        schema: dict[str, Any],
        schema_name: str,
    ) -> str:
        system = (
            f"{system_prompt}\n\nThe JSON must match this JSON Schema ({schema_name}):\n"
            f"{json.dumps(schema)}"
        )
        data = self._post(
            ANTHROPIC_MESSAGES_URL,
            headers={
                "x-api-key": self.api_key,
                "anthropic-version": ANTHROPIC_VERSION,
            },
            payload={
                "model": self.model,
                "max_tokens": DEFAULT_MAX_TOKENS,
                "temperature": DEFAULT_TEMPERATURE,
                "system": system,
                "messages": [{"role": "user", "content": user_prompt}],
            },
        )

        blocks = data.get("content")
        if not isinstance(blocks, list):
            raise self._empty_response()
        text = join_text([
            block for block in blocks
            if isinstance(block, dict) and block.get("type", "text") == "text"
        ])
        if not text.strip():
            raise self._empty_response()
        return text
