"""Tests for the Firecrawl scraper client."""

from unittest.mock import patch

import pytest
import requests

from clean_recipe.const import FIRECRAWL_SCRAPE_URL, TRUNCATION_MARKER
from clean_recipe.exceptions import (
    InvalidUrlError,
    ScrapeAuthError,
    ScrapeEmptyContent,
    ScrapeError,
    ScrapeFailure,
    ScrapeQuotaExceeded,
    SettingsError,
)
from clean_recipe.extractors.scraper import scrape, truncate_content, validate_url

from conftest import firecrawl_answer, make_response

URL = "https://example.com/recipes/soup"


class TestValidateUrl:
    """Tests for URL validation."""

    def test_valid_urls(self):
        assert validate_url(URL) == URL
        assert validate_url(f"  {URL}  ") == URL
        assert validate_url("http://8.8.8.8/recipe") == "http://8.8.8.8/recipe"

    @pytest.mark.parametrize("url", [
        "",
        "   ",
        "ftp://example.com/recipe",
        "example.com/recipe",
        "https://",
    ])
    def test_invalid_urls(self, url):
        with pytest.raises(InvalidUrlError):
            validate_url(url)

    @pytest.mark.parametrize("url", [
        "http://127.0.0.1/admin",
        "http://192.168.1.1/",
        "http://10.0.0.5/recipe",
        "http://169.254.169.254/latest/meta-data",
        "http://[::1]/",
    ])
    def test_internal_addresses(self, url):
        with pytest.raises(InvalidUrlError):
            validate_url(url)


class TestTruncateContent:
    """Tests for the content budget."""

    def test_short_content_untouched(self):
        assert truncate_content("abc", 10) == "abc"

    def test_long_content_truncated(self):
        result = truncate_content("x" * 20, 10)
        assert result == "x" * 10 + TRUNCATION_MARKER
        assert result.endswith("[Content truncated...]")


class TestScrape:
    """Tests for the scrape call and its error taxonomy."""

    def test_success(self, mock_session):
        mock_session.post.return_value = make_response(200, firecrawl_answer("# Tomato Soup\n\n4 tomatoes"))

        assert scrape(URL, "fc-test", session=mock_session) == "# Tomato Soup\n\n4 tomatoes"

        args, kwargs = mock_session.post.call_args
        assert args[0] == FIRECRAWL_SCRAPE_URL
        assert kwargs["json"] == {"url": URL, "formats": ["markdown"]}
        assert kwargs["headers"]["Authorization"] == "Bearer fc-test"
        assert kwargs["timeout"] == 30

    def test_uses_requests_without_session(self):
        with patch("clean_recipe.extractors.scraper.requests.post") as mock_post:
            mock_post.return_value = make_response(200, firecrawl_answer("content"))
            assert scrape(URL, "fc-test") == "content"
            mock_post.assert_called_once()

    def test_truncates_long_pages(self, mock_session):
        mock_session.post.return_value = make_response(200, firecrawl_answer("y" * 50))
        result = scrape(URL, "fc-test", max_length=20, session=mock_session)
        assert result == "y" * 20 + TRUNCATION_MARKER

    def test_auth_error(self, mock_session):
        mock_session.post.return_value = make_response(401, text="Unauthorized")

        with pytest.raises(ScrapeAuthError) as exc_info:
            scrape(URL, "bad-key", session=mock_session)

        message = str(exc_info.value)
        assert "Invalid" in message
        assert "Firecrawl" in message

    def test_quota_exceeded(self, mock_session):
        mock_session.post.return_value = make_response(402, text="Payment required")

        with pytest.raises(ScrapeQuotaExceeded) as exc_info:
            scrape(URL, "fc-test", session=mock_session)
        assert "quota exceeded" in str(exc_info.value)

    def test_http_failure_carries_body(self, mock_session):
        mock_session.post.return_value = make_response(500, text="upstream timeout")

        with pytest.raises(ScrapeFailure) as exc_info:
            scrape(URL, "fc-test", session=mock_session)
        assert str(exc_info.value) == "Failed to scrape page: upstream timeout"

    def test_unsuccessful_envelope(self, mock_session):
        mock_session.post.return_value = make_response(
            200, {"success": False, "error": "Site blocked"})

        with pytest.raises(ScrapeFailure) as exc_info:
            scrape(URL, "fc-test", session=mock_session)
        assert "Site blocked" in str(exc_info.value)

    def test_invalid_json(self, mock_session):
        mock_session.post.return_value = make_response(200, text="<html>")

        with pytest.raises(ScrapeFailure):
            scrape(URL, "fc-test", session=mock_session)

    @pytest.mark.parametrize("body", [
        {"success": True, "data": {"markdown": ""}},
        {"success": True, "data": {"markdown": "   \n"}},
        {"success": True, "data": {}},
        {"success": True},
    ])
    def test_empty_content(self, mock_session, body):
        mock_session.post.return_value = make_response(200, body)

        with pytest.raises(ScrapeEmptyContent) as exc_info:
            scrape(URL, "fc-test", session=mock_session)
        assert "blocking scraping" in str(exc_info.value)

    def test_network_error(self, mock_session):
        mock_session.post.side_effect = requests.exceptions.ConnectionError("connection refused")

        with pytest.raises(ScrapeFailure) as exc_info:
            scrape(URL, "fc-test", session=mock_session)
        assert isinstance(exc_info.value.__cause__, requests.exceptions.ConnectionError)

    def test_all_failures_are_scrape_errors(self):
        for error in (ScrapeAuthError(), ScrapeQuotaExceeded(), ScrapeFailure("x"), ScrapeEmptyContent()):
            assert isinstance(error, ScrapeError)

    def test_missing_key(self, mock_session):
        with pytest.raises(SettingsError):
            scrape(URL, "  ", session=mock_session)
        mock_session.post.assert_not_called()
