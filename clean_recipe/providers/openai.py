"""OpenAI provider (chat completions wire format)."""
from __future__ import annotations

from typing import Any

from ..const import DEFAULT_TEMPERATURE, OPENAI_CHAT_URL, PROVIDER_OPENAI
from .base import LLMProvider, as_dict, first_item


class OpenAIProvider(LLMProvider):
    """Calls the chat completions endpoint with a bound JSON schema."""

    provider_id = PROVIDER_OPENAI

    def _generate(
        self,
        system_prompt: str,
        user_prompt: str,
        schema: dict[str, Any],
        schema_name: str,
    ) -> str:
        data = self._post(
            OPENAI_CHAT_URL,
            headers={"Authorization": f"Bearer {self.api_key}"},
            payload={
                "model": self.model,
                "messages": [
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
                "temperature": DEFAULT_TEMPERATURE,
                "response_format": {
                    "type": "json_schema",
                    "json_schema": {"name": schema_name, "schema": schema, "strict": False},
                },
            },
        )

        message = as_dict(as_dict(first_item(data.get("choices"))).get("message"))
        text = message.get("content")
        if not isinstance(text, str) or not text.strip():
            raise self._empty_response()
        return text
