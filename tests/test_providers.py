"""Tests for the language model provider clients."""

import json

import pytest
import requests

from clean_recipe.const import ANTHROPIC_MESSAGES_URL, ANTHROPIC_VERSION, OPENAI_CHAT_URL
from clean_recipe.exceptions import (
    ExtractionParseError,
    LLMAuthError,
    LLMProviderError,
    SettingsError,
    UnsupportedProvider,
)
from clean_recipe.models.schema import RECIPE_SCHEMA
from clean_recipe.providers import (
    AnthropicProvider,
    GoogleProvider,
    OpenAIProvider,
    get_provider,
)

from conftest import gemini_answer, make_response

ANSWER = {"title": "Tomato Soup", "ingredients": [], "steps": []}


def _openai_answer(text):
    return {"choices": [{"message": {"role": "assistant", "content": text}}]}


def _anthropic_answer(text):
    return {"content": [{"type": "text", "text": text}], "role": "assistant"}


class TestGetProvider:
    """Tests for provider lookup."""

    @pytest.mark.parametrize("tag, provider_class", [
        ("openai", OpenAIProvider),
        ("google", GoogleProvider),
        ("anthropic", AnthropicProvider),
    ])
    def test_known_providers(self, tag, provider_class):
        provider = get_provider(tag, "some-model", "key")
        assert isinstance(provider, provider_class)
        assert provider.model == "some-model"

    def test_unknown_provider(self):
        with pytest.raises(UnsupportedProvider) as exc_info:
            get_provider("mistral", "m", "key")
        assert str(exc_info.value) == "Unknown LLM provider: mistral"

    def test_empty_key(self):
        with pytest.raises(SettingsError):
            get_provider("openai", "gpt-4o", "  ")


class TestOpenAIProvider:
    """Tests for the chat completions wire format."""

    def test_request_and_answer(self, mock_session):
        mock_session.post.return_value = make_response(200, _openai_answer(json.dumps(ANSWER)))
        provider = OpenAIProvider("sk-test", "gpt-4o", session=mock_session)

        result = provider.generate_structured("system", "user", RECIPE_SCHEMA, "recipe")

        assert result == ANSWER
        args, kwargs = mock_session.post.call_args
        assert args[0] == OPENAI_CHAT_URL
        assert kwargs["headers"]["Authorization"] == "Bearer sk-test"
        payload = kwargs["json"]
        assert payload["model"] == "gpt-4o"
        assert payload["messages"][0] == {"role": "system", "content": "system"}
        assert payload["messages"][1] == {"role": "user", "content": "user"}
        assert payload["response_format"]["type"] == "json_schema"
        assert payload["response_format"]["json_schema"]["schema"] is RECIPE_SCHEMA

    def test_auth_error(self, mock_session):
        mock_session.post.return_value = make_response(401, text="invalid_api_key")
        provider = OpenAIProvider("sk-bad", "gpt-4o", session=mock_session)

        with pytest.raises(LLMAuthError) as exc_info:
            provider.generate_structured("s", "u", RECIPE_SCHEMA, "recipe")
        assert str(exc_info.value) == "Invalid OpenAI API key. Please check your key and try again."
        assert exc_info.value.provider == "OpenAI"

    def test_http_error(self, mock_session):
        mock_session.post.return_value = make_response(429, text="rate limited")
        provider = OpenAIProvider("sk-test", "gpt-4o", session=mock_session)

        with pytest.raises(LLMProviderError) as exc_info:
            provider.generate_structured("s", "u", RECIPE_SCHEMA, "recipe")
        assert str(exc_info.value) == "OpenAI API error: rate limited"

    def test_empty_answer(self, mock_session):
        mock_session.post.return_value = make_response(200, {"choices": []})
        provider = OpenAIProvider("sk-test", "gpt-4o", session=mock_session)

        with pytest.raises(LLMProviderError) as exc_info:
            provider.generate_structured("s", "u", RECIPE_SCHEMA, "recipe")
        assert str(exc_info.value) == "No response from OpenAI"

    @pytest.mark.parametrize("body", [
        {"choices": [None]},
        {"choices": ["text"]},
        {"choices": {"message": {}}},
        {"choices": [{"message": None}]},
        {"choices": [{"message": {"content": None}}]},
        {"choices": [{"message": {"content": ["parts"]}}]},
        [{"choices": []}],
    ])
    def test_malformed_answer(self, mock_session, body):
        mock_session.post.return_value = make_response(200, body)
        provider = OpenAIProvider("sk-test", "gpt-4o", session=mock_session)

        with pytest.raises(LLMProviderError) as exc_info:
            provider.generate_structured("s", "u", RECIPE_SCHEMA, "recipe")
        assert str(exc_info.value) == "No response from OpenAI"

    def test_network_error(self, mock_session):
        mock_session.post.side_effect = requests.exceptions.Timeout("timed out")
        provider = OpenAIProvider("sk-test", "gpt-4o", session=mock_session)

        with pytest.raises(LLMProviderError):
            provider.generate_structured("s", "u", RECIPE_SCHEMA, "recipe")


class TestGoogleProvider:
    """Tests for the generateContent wire format."""

    def test_request_and_answer(self, mock_session):
        mock_session.post.return_value = make_response(200, gemini_answer(ANSWER))
        provider = GoogleProvider("g-test", "gemini-2.0-flash", session=mock_session)

        result = provider.generate_structured("system", "user", RECIPE_SCHEMA, "recipe")

        assert result == ANSWER
        args, kwargs = mock_session.post.call_args
        assert args[0].endswith("/models/gemini-2.0-flash:generateContent")
        assert kwargs["headers"]["x-goog-api-key"] == "g-test"
        payload = kwargs["json"]
        assert payload["systemInstruction"]["parts"][0]["text"] == "system"
        assert payload["contents"][0]["parts"][0]["text"] == "user"
        config = payload["generationConfig"]
        assert config["responseMimeType"] == "application/json"
        assert config["responseSchema"]["type"] == "OBJECT"

    def test_model_prefix_stripped(self, mock_session):
        mock_session.post.return_value = make_response(200, gemini_answer(ANSWER))
        provider = GoogleProvider("g-test", "models/gemini-2.5-pro", session=mock_session)

        provider.generate_structured("s", "u", RECIPE_SCHEMA, "recipe")

        assert mock_session.post.call_args[0][0].endswith("/models/gemini-2.5-pro:generateContent")

    @pytest.mark.parametrize("status, body", [
        (400, '{"error": {"status": "INVALID_ARGUMENT", "details": [{"reason": "API_KEY_INVALID"}]}}'),
        (401, "unauthenticated"),
        (403, "permission denied"),
    ])
    def test_auth_errors(self, mock_session, status, body):
        mock_session.post.return_value = make_response(status, text=body)
        provider = GoogleProvider("g-bad", "gemini-2.0-flash", session=mock_session)

        with pytest.raises(LLMAuthError) as exc_info:
            provider.generate_structured("s", "u", RECIPE_SCHEMA, "recipe")
        assert "Invalid Google AI API key" in str(exc_info.value)

    def test_bad_request_is_not_auth(self, mock_session):
        mock_session.post.return_value = make_response(400, text="Request contains an invalid argument.")
        provider = GoogleProvider("g-test", "gemini-2.0-flash", session=mock_session)

        with pytest.raises(LLMProviderError) as exc_info:
            provider.generate_structured("s", "u", RECIPE_SCHEMA, "recipe")
        assert not isinstance(exc_info.value, LLMAuthError)

    def test_no_candidates(self, mock_session):
        mock_session.post.return_value = make_response(200, {"candidates": []})
        provider = GoogleProvider("g-test", "gemini-2.0-flash", session=mock_session)

        with pytest.raises(LLMProviderError) as exc_info:
            provider.generate_structured("s", "u", RECIPE_SCHEMA, "recipe")
        assert str(exc_info.value) == "No response from Google AI"

    @pytest.mark.parametrize("body", [
        {"candidates": [None]},
        {"candidates": "none"},
        {"candidates": [{"content": None}]},
        {"candidates": [{"content": {"parts": None}}]},
        {"candidates": [{"content": {"parts": [None, {"text": None}, {"text": 42}]}}]},
        {"candidates": [{"content": {"parts": [{"text": "   "}]}}]},
        "not an object",
    ])
    def test_malformed_answer(self, mock_session, body):
        mock_session.post.return_value = make_response(200, body)
        provider = GoogleProvider("g-test", "gemini-2.0-flash", session=mock_session)

        with pytest.raises(LLMProviderError) as exc_info:
            provider.generate_structured("s", "u", RECIPE_SCHEMA, "recipe")
        assert str(exc_info.value) == "No response from Google AI"

    def test_skips_malformed_parts(self, mock_session):
        text = json.dumps(ANSWER)
        body = {"candidates": [{"content": {"parts": [None, {"text": None}, {"text": text}]}}]}
        mock_session.post.return_value = make_response(200, body)
        provider = GoogleProvider("g-test", "gemini-2.0-flash", session=mock_session)

        assert provider.generate_structured("s", "u", RECIPE_SCHEMA, "recipe") == ANSWER


class TestAnthropicProvider:
    """Tests for the messages wire format."""

    def test_request_and_fenced_answer(self, mock_session):
        text = f"```json\n{json.dumps(ANSWER)}\n```"
        mock_session.post.return_value = make_response(200, _anthropic_answer(text))
        provider = AnthropicProvider("ak-test", "claude-sonnet-4-20250514", session=mock_session)

        result = provider.generate_structured("system", "user", RECIPE_SCHEMA, "recipe")

        assert result == ANSWER
        args, kwargs = mock_session.post.call_args
        assert args[0] == ANTHROPIC_MESSAGES_URL
        assert kwargs["headers"]["x-api-key"] == "ak-test"
        assert kwargs["headers"]["anthropic-version"] == ANTHROPIC_VERSION
        payload = kwargs["json"]
        assert payload["system"].startswith("system")
        assert '"baseServings"' in payload["system"]
        assert payload["messages"] == [{"role": "user", "content": "user"}]
        assert payload["max_tokens"] == 4096

    def test_auth_error(self, mock_session):
        mock_session.post.return_value = make_response(401, text="authentication_error")
        provider = AnthropicProvider("ak-bad", "claude-4-haiku", session=mock_session)

        with pytest.raises(LLMAuthError) as exc_info:
            provider.generate_structured("s", "u", RECIPE_SCHEMA, "recipe")
        assert str(exc_info.value) == "Invalid Anthropic API key. Please check your key and try again."

    @pytest.mark.parametrize("body", [
        {"content": None},
        {"content": {"type": "text", "text": "{}"}},
        {"content": [None, "text"]},
        {"content": [{"type": "text", "text": None}]},
        {"content": [{"type": "tool_use", "input": {}}]},
    ])
    def test_malformed_answer(self, mock_session, body):
        mock_session.post.return_value = make_response(200, body)
        provider = AnthropicProvider("ak-test", "claude-4-haiku", session=mock_session)

        with pytest.raises(LLMProviderError) as exc_info:
            provider.generate_structured("s", "u", RECIPE_SCHEMA, "recipe")
        assert str(exc_info.value) == "No response from Anthropic"

    def test_prose_without_json(self, mock_session):
        mock_session.post.return_value = make_response(200, _anthropic_answer("Sorry, no recipe here."))
        provider = AnthropicProvider("ak-test", "claude-4-haiku", session=mock_session)

        with pytest.raises(ExtractionParseError):
            provider.generate_structured("s", "u", RECIPE_SCHEMA, "recipe")
