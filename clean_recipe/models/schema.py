"""
Recipe Schema Validator.

Defines the exact structure the extraction call must produce, both as JSON
Schema documents handed to the providers and as Pydantic payload models used
to re-validate what actually came back.
"""
from __future__ import annotations

import copy
import logging
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ..exceptions import ExtractionParseError
from ..parsers.normalizer import parse_quantity

_LOGGER = logging.getLogger(__name__)


ALTERNATIVE_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "quantity": {"type": "number"},
        "unit": {"type": "string"},
        "exact": {"type": "boolean"},
        "note": {"type": "string"},
    },
    "required": ["quantity", "unit", "exact"],
}

RECIPE_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "title": {"type": "string"},
        "description": {"type": "string"},
        "baseServings": {"type": "integer"},
        "ingredients": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "name": {"type": "string"},
                    "quantity": {"type": "number"},
                    "unit": {"type": "string"},
                    "notes": {"type": "string"},
                    "alternatives": {"type": "array", "items": ALTERNATIVE_SCHEMA},
                },
                "required": ["name", "quantity", "unit"],
            },
        },
        "steps": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "title": {"type": "string"},
                    "instruction": {"type": "string"},
                    "details": {"type": "string"},
                    "duration": {"type": "string"},
                },
                "required": ["title", "instruction"],
            },
        },
        "warnings": {"type": "array", "items": {"type": "string"}},
    },
    "required": ["title", "description", "baseServings", "ingredients", "steps", "warnings"],
}

ALTERNATIVES_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "alternatives": {
            "type": "array",
            "items": {"type": "array", "items": ALTERNATIVE_SCHEMA},
        },
    },
    "required": ["alternatives"],
}


def to_gemini_schema(schema: dict[str, Any]) -> dict[str, Any]:
    """Convert a JSON Schema document into Gemini's OpenAPI-style schema.

    Gemini expects upper-case type names and keeps object keys in
    ``propertyOrdering``.
    """
    converted = copy.deepcopy(schema)

    def _convert(node: dict[str, Any]) -> None:
        if "type" in node:
            node["type"] = node["type"].upper()
        properties = node.get("properties")
        if properties:
            node["propertyOrdering"] = list(properties)
            for child in properties.values():
                _convert(child)
        if "items" in node:
            _convert(node["items"])

    _convert(converted)
    return converted


class AlternativePayload(BaseModel):
    """An alternative measurement as returned by the model."""

    model_config = ConfigDict(extra="ignore")

    quantity: float | None = None
    unit: str | None = None
    exact: bool = False
    note: str | None = None

    @field_validator("quantity", mode="before")
    @classmethod
    def _coerce_quantity(cls, value: Any) -> float | None:
        return parse_quantity(value)

    @field_validator("exact", mode="before")
    @classmethod
    def _coerce_exact(cls, value: Any) -> bool:
        if isinstance(value, str):
            return value.strip().lower() in ("true", "yes", "1")
        return bool(value)


class IngredientPayload(BaseModel):
    """An ingredient as returned by the model.

    The name may be missing; the normalizer keeps the entry when it still has
    a quantity or unit.
    """

    model_config = ConfigDict(extra="ignore")

    name: str | None = None
    quantity: float | None = None
    unit: str | None = None
    notes: str | None = None
    alternatives: list[AlternativePayload] | None = None

    @field_validator("quantity", mode="before")
    @classmethod
    def _coerce_quantity(cls, value: Any) -> float | None:
        return parse_quantity(value)

    @field_validator("name", "unit", "notes", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> Any:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value


class StepPayload(BaseModel):
    """A step as returned by the model, including the legacy 'summary' field."""

    model_config = ConfigDict(extra="ignore")

    title: str | None = None
    instruction: str | None = None
    summary: str | None = None
    details: str | None = None
    duration: str | None = None

    @field_validator("*", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> Any:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value


class RecipePayload(BaseModel):
    """The full extraction result."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    title: str = Field(min_length=1)
    description: str | None = None
    base_servings: int | None = Field(default=None, alias="baseServings")
    ingredients: list[IngredientPayload]
    steps: list[StepPayload | str]
    warnings: list[str] = Field(default_factory=list)

    @field_validator("title", mode="before")
    @classmethod
    def _strip_title(cls, value: Any) -> Any:
        return value.strip() if isinstance(value, str) else value

    @field_validator("base_servings", mode="before")
    @classmethod
    def _coerce_servings(cls, value: Any) -> int | None:
        quantity = parse_quantity(value)
        if quantity is None or quantity < 1:
            return None
        return int(round(quantity))

    @field_validator("warnings", mode="before")
    @classmethod
    def _coerce_warnings(cls, value: Any) -> list[str]:
        if value is None:
            return []
        if isinstance(value, str):
            return [value]
        if isinstance(value, list):
            return [str(item) for item in value if item is not None]
        return value


class AlternativesPayload(BaseModel):
    """The enrichment result: one list of alternatives per ingredient."""

    model_config = ConfigDict(extra="ignore")

    alternatives: list[list[AlternativePayload]]


def validate_recipe_payload(data: Any) -> dict[str, Any]:
    """Validate a parsed extraction result against the recipe schema.

    Args:
        data: Parsed JSON value returned by the model

    Returns:
        The validated payload as a camelCase dict

    Raises:
        ExtractionParseError: If required fields are missing or mistyped
    """
    if not isinstance(data, dict):
        raise ExtractionParseError(f"expected a JSON object, got {type(data).__name__}")

    try:
        payload = RecipePayload.model_validate(data)
    except ValidationError as err:
        _LOGGER.warning("Extraction result failed schema validation: %s", err)
        raise ExtractionParseError(str(err)) from err

    return payload.model_dump(by_alias=True, exclude_none=True)


def validate_alternatives_payload(data: Any, expected_count: int) -> list[list[dict[str, Any]]]:
    """Validate an enrichment result aligned with the ingredient list.

    A bare array is accepted in place of ``{"alternatives": [...]}``.

    Args:
        data: Parsed JSON value returned by the model
        expected_count: Number of ingredients the lists must align with

    Returns:
        One list of alternative dicts per ingredient, in ingredient order

    Raises:
        ExtractionParseError: If the shape is wrong or the count differs
    """
    if isinstance(data, list):
        data = {"alternatives": data}

    try:
        payload = AlternativesPayload.model_validate(data)
    except ValidationError as err:
        raise ExtractionParseError(str(err)) from err

    if len(payload.alternatives) != expected_count:
        raise ExtractionParseError(
            f"expected {expected_count} alternative lists, got {len(payload.alternatives)}")

    return [
        [alternative.model_dump(exclude_none=True) for alternative in alternatives]
        for alternatives in payload.alternatives
    ]
