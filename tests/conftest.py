"""
Pytest configuration and fixtures for Clean Recipe tests.
"""

import json
from unittest.mock import MagicMock

import pytest

from clean_recipe.config import AppSettings
from clean_recipe.storage import MemoryStore, RecipeStorage


def make_response(status_code=200, json_data=None, text=None):
    """Build a mock requests.Response."""
    response = MagicMock()
    response.status_code = status_code
    response.ok = status_code < 400
    if json_data is not None:
        response.json.return_value = json_data
        response.text = text if text is not None else json.dumps(json_data)
    else:
        response.json.side_effect = ValueError("No JSON object could be decoded")
        response.text = text or ""
    return response


@pytest.fixture
def mock_session():
    """Mock requests session; set post.return_value or post.side_effect per test."""
    return MagicMock()


@pytest.fixture
def tomato_soup_payload():
    """A minimal recipe as a model would return it."""
    return {
        "title": "Tomato Soup",
        "ingredients": [{"name": "tomato", "quantity": 4, "unit": "pcs"}],
        "steps": [{"title": "Simmer", "instruction": "Simmer 20 minutes"}],
        "warnings": [],
    }


@pytest.fixture
def pancake_payload():
    """A three-ingredient recipe with servings."""
    return {
        "title": "Pancakes",
        "description": "Fluffy pancakes",
        "baseServings": 4,
        "ingredients": [
            {"name": "flour", "quantity": 2, "unit": "cup"},
            {"name": "milk", "quantity": 300, "unit": "ml"},
            {"name": "salt", "quantity": 0, "unit": "", "notes": "a pinch"},
        ],
        "steps": [
            {"title": "Mix", "instruction": "Whisk everything together."},
            {"title": "Fry", "instruction": "Fry in a hot pan.", "duration": "10 minutes"},
        ],
        "warnings": ["Contains gluten"],
    }


@pytest.fixture
def settings():
    """Settings with a Firecrawl key and a Google key."""
    return AppSettings(
        firecrawl="fc-test",
        provider_keys={"google": "google-test"},
        selected_model="gemini-2.0-flash",
    )


@pytest.fixture
def storage():
    """Recipe storage on an in-memory store."""
    return RecipeStorage(MemoryStore())


def gemini_answer(payload):
    """Wrap a JSON payload in a Gemini generateContent response body."""
    return {
        "candidates": [
            {"content": {"parts": [{"text": json.dumps(payload)}], "role": "model"}}
        ]
    }


def firecrawl_answer(markdown):
    """Wrap markdown in a Firecrawl scrape response body."""
    return {"success": True, "data": {"markdown": markdown}}
