"""
Recipe data models for the Clean Recipe extractor.

This module defines the canonical Pydantic records every downstream consumer
relies on. Field names are snake_case in Python and camelCase on the wire and
in storage (``baseServings``, ``sourceUrl``, ...).
"""
from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from ..const import DEFAULT_SERVINGS, MODE_OVERVIEW


def _new_id() -> str:
    return str(uuid.uuid4())


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CamelModel(BaseModel):
    """Base model serializing to camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_dict(self) -> dict:
        """Dump to a JSON-compatible dict with camelCase keys, omitting unset optionals."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class AlternativeMeasurement(CamelModel):
    """An alternative way to measure an ingredient.

    Attributes:
        quantity: Amount for the recipe's base servings (not scaled)
        unit: Unit of the alternative (e.g., 'ml', 'g', 'EL')
        exact: True for fixed-ratio conversions, False for density estimates
        note: Optional qualifier (e.g., 'spooned and leveled')
    """

    quantity: float = Field(gt=0, description="Base-servings amount in the alternative unit")
    unit: str = Field(min_length=1, description="The alternative unit, e.g. 'ml'")
    exact: bool = Field(
        default=False,
        description="True for deterministic unit conversion, False for an estimate"
    )
    note: str | None = Field(default=None, description="Optional qualifier")


class Ingredient(CamelModel):
    """A structured representation of a single ingredient.

    Attributes:
        name: The name of the ingredient, in the source language
        quantity: Amount for the base servings; 0 means unspecified ("to taste")
        unit: Unit as written in the source recipe (e.g., 'cups', 'g', 'EL')
        notes: Optional qualifier (e.g., 'diced', 'to taste')
        alternatives: Alternative measurements, absent when there are none
    """

    name: str = Field(description="The name of the ingredient, e.g. 'all-purpose flour'")
    quantity: float = Field(default=0, ge=0, description="The numeric quantity, e.g. 2.5")
    unit: str = Field(default="", description="The unit of measurement, e.g. 'cups', 'g', 'EL'")
    notes: str | None = Field(default=None, description="Optional notes like 'diced'")
    alternatives: list[AlternativeMeasurement] | None = Field(
        default=None,
        description="Alternative measurements with units different from 'unit'"
    )


class RecipeStep(CamelModel):
    """A single preparation step.

    ``instruction`` is complete on its own; ``details`` only adds background.
    """

    title: str = ""
    instruction: str = ""
    details: str = ""
    duration: str = ""


class Recipe(CamelModel):
    """The top-level canonical recipe record."""

    id: str = Field(default_factory=_new_id)
    title: str
    description: str = ""
    source_url: str = ""
    base_servings: int = Field(default=DEFAULT_SERVINGS, ge=1)
    ingredients: list[Ingredient] = Field(default_factory=list)
    steps: list[RecipeStep] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
    extracted_at: datetime = Field(default_factory=_utcnow)


class RecipeProgress(CamelModel):
    """Per-recipe cooking progress, keyed by recipe id in storage."""

    servings: int = Field(ge=1)
    checked_ingredients: list[int] = Field(default_factory=list)
    completed_steps: list[int] = Field(default_factory=list)
    cooking_step_index: int = Field(default=0, ge=0)
    last_mode: Literal["overview", "cooking"] = MODE_OVERVIEW
    updated_at: datetime | None = None

    @field_validator("checked_ingredients", "completed_steps")
    @classmethod
    def _as_index_set(cls, value: list[int]) -> list[int]:
        return sorted({index for index in value if index >= 0})

    def is_trivial(self, base_servings: int) -> bool:
        """Return True when nothing differs from a freshly opened recipe."""
        return (
            self.servings == base_servings
            and not self.checked_ingredients
            and not self.completed_steps
            and self.cooking_step_index == 0
            and self.last_mode == MODE_OVERVIEW
        )


class CurrentSession(CamelModel):
    """Pointer to the recipe the user was last looking at."""

    recipe_id: str
    mode: Literal["overview", "cooking"] = MODE_OVERVIEW
    updated_at: datetime = Field(default_factory=_utcnow)
