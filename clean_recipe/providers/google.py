"""Google AI provider (generateContent wire format)."""
from __future__ import annotations

from typing import Any

import requests

from ..const import DEFAULT_TEMPERATURE, GOOGLE_GENERATE_URL, PROVIDER_GOOGLE
from ..models.schema import to_gemini_schema
from .base import LLMProvider, as_dict, first_item, join_text

# Gemini answers an invalid key with HTTP 400 and one of these reasons
_INVALID_KEY_MARKERS = ("API_KEY_INVALID", "API key not valid")


class GoogleProvider(LLMProvider):
    """Calls Gemini with a response schema and JSON mime type."""

    provider_id = PROVIDER_GOOGLE

    def _is_auth_error(self, response: requests.Response) -> bool:
        if response.status_code in (401, 403):
            return True
        return response.status_code == 400 and any(
            marker in response.text for marker in _INVALID_KEY_MARKERS)

    def _generate(
        self,
        system_prompt: str,
        user_prompt: str,
        schema: dict[str, Any],
        schema_name: str,
    ) -> str:
        model = self.model.split('/', 1)[1] if self.model.startswith("models/") else self.model

        data = self._post(
            GOOGLE_GENERATE_URL.format(model=model),
            headers={"x-goog-api-key": self.api_key},
            payload={
                "systemInstruction": {"parts": [{"text": system_prompt}]},
                "contents": [{"role": "user", "parts": [{"text": user_prompt}]}],
                "generationConfig": {
                    "temperature": DEFAULT_TEMPERATURE,
                    "responseMimeType": "application/json",
                    "responseSchema": to_gemini_schema(schema),
                },
            },
        )

        candidate = as_dict(first_item(data.get("candidates")))
        text = join_text(as_dict(candidate.get("content")).get("parts"))
        if not text.strip():
            raise self._empty_response()
        return text
