"""
Content scraper client.

This module fetches page content as markdown through the Firecrawl scraping
service and trims it to a size the language models can take.
"""
from __future__ import annotations

import ipaddress
import logging
from urllib.parse import urlparse

import requests

from ..const import (
    DEFAULT_MAX_TEXT_LENGTH,
    DEFAULT_SCRAPE_TIMEOUT,
    FIRECRAWL_SCRAPE_URL,
    TRUNCATION_MARKER,
)
from ..exceptions import (
    InvalidUrlError,
    ScrapeAuthError,
    ScrapeEmptyContent,
    ScrapeFailure,
    ScrapeQuotaExceeded,
    SettingsError,
)

_LOGGER = logging.getLogger(__name__)


def validate_url(url: str) -> str:
    """Validate a recipe URL before handing it to the scraping service.

    Args:
        url: The URL entered by the user

    Returns:
        The stripped URL

    Raises:
        InvalidUrlError: If the URL is not http(s) or points at an internal address
    """
    if not url or not url.strip():
        raise InvalidUrlError("URL cannot be empty")

    url = url.strip()
    parsed = urlparse(url)
    if parsed.scheme not in ('http', 'https') or not parsed.netloc:
        raise InvalidUrlError("URL must start with http:// or https://")

    try:
        ip = ipaddress.ip_address(parsed.hostname or "")
    except ValueError:
        return url  # Hostname is not an IP

    if ip.is_private or ip.is_loopback or ip.is_link_local:
        raise InvalidUrlError("Cannot access internal IP addresses")
    return url


def truncate_content(text: str, max_length: int = DEFAULT_MAX_TEXT_LENGTH) -> str:
    """Limit text length to avoid model context limits.

    Args:
        text: Scraped page content
        max_length: Maximum number of characters kept

    Returns:
        The text, cut to max_length with a truncation marker when it was longer
    """
    if len(text) <= max_length:
        return text

    _LOGGER.warning("Truncating content from %d to %d characters",
                    len(text), max_length)
    return text[:max_length] + TRUNCATION_MARKER


def scrape(
    url: str,
    api_key: str,
    max_length: int = DEFAULT_MAX_TEXT_LENGTH,
    session: requests.Session | None = None,
) -> str:
    """Fetch a page as markdown through Firecrawl.

    Args:
        url: The URL of the recipe page
        api_key: Firecrawl API key
        max_length: Character budget of the returned text
        session: Optional requests session

    Returns:
        Page markdown, truncated to max_length

    Raises:
        ScrapeAuthError: If the API key is rejected (HTTP 401)
        ScrapeQuotaExceeded: If the plan limit is reached (HTTP 402)
        ScrapeFailure: For any other non-2xx status or network failure
        ScrapeEmptyContent: If the response carries no text
    """
    if not api_key or not api_key.strip():
        raise SettingsError("Firecrawl API key cannot be empty")

    _LOGGER.info("Scraping %s", url)
    http = session or requests

    try:
        response = http.post(
            FIRECRAWL_SCRAPE_URL,
            json={"url": url, "formats": ["markdown"]},
            headers={
                "Content-Type": "application/json",
                "Authorization": f"Bearer {api_key}",
            },
            timeout=DEFAULT_SCRAPE_TIMEOUT,
        )
    except requests.exceptions.RequestException as err:
        _LOGGER.error("Failed to reach scraping service for %s: %s", url, err)
        raise ScrapeFailure(str(err)) from err

    if response.status_code == 401:
        raise ScrapeAuthError()
    if response.status_code == 402:
        raise ScrapeQuotaExceeded()
    if not response.ok:
        _LOGGER.error("Scraping %s failed with HTTP %d", url, response.status_code)
        raise ScrapeFailure(response.text or f"HTTP {response.status_code}")

    try:
        data = response.json()
    except ValueError as err:
        raise ScrapeFailure("Scraping service returned an invalid response") from err

    if not isinstance(data, dict) or not data.get("success"):
        detail = data.get("error") if isinstance(data, dict) else None
        raise ScrapeFailure(detail or "The site may be blocking scraping.")

    payload = data.get("data")
    markdown = payload.get("markdown") if isinstance(payload, dict) else None
    if not isinstance(markdown, str) or not markdown.strip():
        _LOGGER.warning("Scraping %s returned no content", url)
        raise ScrapeEmptyContent()

    _LOGGER.info("Scraped %d characters from %s", len(markdown), url)
    return truncate_content(markdown, max_length)
