"""Errors raised by the extraction pipeline.

The message of every error is meant to be shown to the user as-is.
"""
from __future__ import annotations


class RecipeExtractorError(Exception):
    """Base class for all extraction errors."""


class SettingsError(RecipeExtractorError):
    """Settings are missing or invalid for the requested operation."""


class InvalidUrlError(RecipeExtractorError):
    """The URL cannot be scraped."""


class ScrapeError(RecipeExtractorError):
    """Base class for scraping service failures."""


class ScrapeAuthError(ScrapeError):
    """The scraping service rejected the API key."""

    def __init__(self) -> None:
        super().__init__(
            "Invalid Firecrawl API key. Please check your key and try again.")


class ScrapeQuotaExceeded(ScrapeError):
    """The scraping plan limit was reached."""

    def __init__(self) -> None:
        super().__init__(
            "Firecrawl API quota exceeded. Please check your plan limits.")


class ScrapeFailure(ScrapeError):
    """The page could not be scraped (blocked site, non-2xx status, network)."""

    def __init__(self, detail: str) -> None:
        super().__init__(f"Failed to scrape page: {detail}")
        self.detail = detail


class ScrapeEmptyContent(ScrapeError):
    """The scrape succeeded but returned no usable text."""

    def __init__(self) -> None:
        super().__init__(
            "Failed to extract content from the page. "
            "The site may be blocking scraping.")


class LLMError(RecipeExtractorError):
    """Base class for language model provider failures."""

    def __init__(self, provider: str, message: str) -> None:
        super().__init__(message)
        self.provider = provider


class LLMAuthError(LLMError):
    """The provider rejected the API key."""

    def __init__(self, provider: str) -> None:
        super().__init__(
            provider,
            f"Invalid {provider} API key. Please check your key and try again.")


class LLMProviderError(LLMError):
    """The provider answered with a non-auth error or an unusable response."""


class ExtractionParseError(RecipeExtractorError):
    """The model output is not a recognizable recipe."""

    def __init__(self, reason: str | None = None) -> None:
        super().__init__(
            "Failed to parse recipe from AI response. "
            "The content might not contain a valid recipe.")
        self.reason = reason


class UnsupportedProvider(RecipeExtractorError):
    """No client exists for the requested provider."""

    def __init__(self, provider: str) -> None:
        super().__init__(f"Unknown LLM provider: {provider}")
        self.provider = provider
