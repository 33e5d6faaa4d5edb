"""
Recipe Normalizer.

This module reshapes arbitrary or partial extraction output (legacy field
names, missing fields, malformed alternatives, values of the wrong type) into
the canonical Recipe record. Every function here is total: malformed input is
coerced or dropped, never raised on.
"""
from __future__ import annotations

import logging
import math
import re
import uuid
from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any

from ..const import DEFAULT_SERVINGS, MAX_ALTERNATIVES
from ..models.recipe import (
    AlternativeMeasurement,
    Ingredient,
    Recipe,
    RecipeStep,
)

_LOGGER = logging.getLogger(__name__)

UNTITLED_RECIPE = "Untitled Recipe"

# Older extractions stored the step text under these keys
LEGACY_STEP_TEXT_KEYS = ("summary", "text")

UNICODE_FRACTIONS = {
    '½': 0.5,
    '⅓': 1 / 3,
    '⅔': 2 / 3,
    '¼': 0.25,
    '¾': 0.75,
    '⅛': 0.125,
    '⅜': 0.375,
    '⅝': 0.625,
    '⅞': 0.875,
}

_NUMBER_RE = re.compile(r'^\d+(?:[.,]\d+)?$')
_FRACTION_RE = re.compile(r'^(\d+)\s*/\s*(\d+)$')
_RANGE_RE = re.compile(r'^(.+?)\s*(?:-|–|to|bis)\s*(.+)$')


def _parse_fraction(text: str) -> float | None:
    match = _FRACTION_RE.match(text)
    if not match:
        return None
    denominator = int(match.group(2))
    if denominator == 0:
        return None
    return int(match.group(1)) / denominator


def _parse_simple_quantity(text: str) -> float | None:
    """Parse '2', '2.5', '2,5', '1/2', '1 1/2', '½', '2½'."""
    for char, value in UNICODE_FRACTIONS.items():
        if char in text:
            whole = text.replace(char, '').strip()
            if not whole:
                return value
            if whole.isdigit():
                return int(whole) + value
            return None

    if _NUMBER_RE.match(text):
        return float(text.replace(',', '.'))

    fraction = _parse_fraction(text)
    if fraction is not None:
        return fraction

    parts = text.split()
    if len(parts) == 2 and parts[0].isdigit():
        fraction = _parse_fraction(parts[1])
        if fraction is not None:
            return int(parts[0]) + fraction

    return None


def parse_quantity(value: Any) -> float | None:
    """Coerce a quantity given as number or text into a float.

    Ranges like '2-3' resolve to their lower bound.

    Args:
        value: Raw quantity (number, numeric string, fraction, unicode fraction)

    Returns:
        The finite float value, or None when the value is not a quantity
    """
    if isinstance(value, bool) or value is None:
        return None

    try:
        if isinstance(value, (int, float)):
            number = float(value)
        elif isinstance(value, str):
            number = _parse_text_quantity(value.strip())
        else:
            return None
    except (OverflowError, ValueError):
        # Integers too large for a float, or past the int digit limit
        _LOGGER.debug("Ignoring out of range %s quantity", type(value).__name__)
        return None

    if number is None or not math.isfinite(number):
        return None
    return number


def _parse_text_quantity(text: str) -> float | None:
    if not text:
        return None

    quantity = _parse_simple_quantity(text)
    if quantity is not None:
        return quantity

    match = _RANGE_RE.match(text)
    if match:
        return _parse_simple_quantity(match.group(1).strip())

    _LOGGER.debug("Could not parse quantity '%s'", text)
    return None


def _as_text(value: Any) -> str:
    if value is None or isinstance(value, (dict, list)):
        return ""
    return str(value).strip()


def _as_list(value: Any) -> list[Any]:
    return list(value) if isinstance(value, (list, tuple)) else []


def _as_mapping(value: Any) -> Mapping[str, Any]:
    if isinstance(value, Mapping):
        return value
    if hasattr(value, "model_dump"):
        return value.model_dump(by_alias=True)
    return {}


def _first_present(data: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if data.get(key) is not None:
            return data[key]
    return None


def normalize_servings(value: Any) -> int:
    """Coerce servings to a positive integer, defaulting when unusable."""
    if isinstance(value, str):
        match = re.search(r'\d+', value)
        value = match.group() if match else None

    number = parse_quantity(value)
    if number is None:
        return DEFAULT_SERVINGS

    servings = int(round(number))
    return servings if servings >= 1 else DEFAULT_SERVINGS


def normalize_alternatives(raw: Any, unit: str = "") -> list[AlternativeMeasurement] | None:
    """Filter and clean an ingredient's alternative measurements.

    Entries with a non-positive or non-finite quantity, an empty unit, the
    ingredient's own unit, or a unit already seen are dropped.

    Args:
        raw: Raw alternatives list (anything is accepted)
        unit: The ingredient's own unit

    Returns:
        Up to MAX_ALTERNATIVES entries, or None when nothing remains
    """
    seen = {unit.strip().lower()} if unit and unit.strip() else set()
    alternatives: list[AlternativeMeasurement] = []

    for entry in _as_list(raw):
        entry = _as_mapping(entry)
        quantity = entry.get("quantity", entry.get("value"))
        if isinstance(quantity, bool) or not isinstance(quantity, (int, float)):
            continue
        quantity = parse_quantity(quantity)
        if quantity is None or quantity <= 0:
            continue

        alt_unit = entry.get("unit")
        if not isinstance(alt_unit, str) or not alt_unit.strip():
            continue
        alt_unit = alt_unit.strip()
        if alt_unit.lower() in seen:
            continue
        seen.add(alt_unit.lower())

        note = entry.get("note")
        note = (note.strip() or None) if isinstance(note, str) else None

        alternatives.append(AlternativeMeasurement(
            quantity=quantity,
            unit=alt_unit,
            exact=bool(entry.get("exact")),
            note=note,
        ))
        if len(alternatives) >= MAX_ALTERNATIVES:
            break

    return alternatives or None


def normalize_ingredient(raw: Any) -> Ingredient | None:
    """Coerce one raw ingredient; plain strings become the ingredient name."""
    if isinstance(raw, str):
        name = raw.strip()
        return Ingredient(name=name) if name else None

    data = _as_mapping(raw)
    if not data:
        return None

    name = _as_text(data.get("name"))
    quantity = parse_quantity(data.get("quantity"))
    if quantity is None or quantity < 0:
        quantity = 0.0
    unit = _as_text(data.get("unit"))
    notes = _as_text(data.get("notes")) or None

    if not name and not unit and not quantity:
        return None

    return Ingredient(
        name=name,
        quantity=quantity,
        unit=unit,
        notes=notes,
        alternatives=normalize_alternatives(data.get("alternatives"), unit),
    )


def normalize_step(raw: Any) -> RecipeStep | None:
    """Coerce one raw step into the canonical title/instruction shape."""
    if isinstance(raw, str):
        instruction = raw.strip()
        return RecipeStep(instruction=instruction) if instruction else None

    data = _as_mapping(raw)
    legacy_text = _as_text(_first_present(data, *LEGACY_STEP_TEXT_KEYS))
    title = _as_text(data.get("title")) or legacy_text
    instruction = _as_text(data.get("instruction")) or legacy_text

    if not title and not instruction:
        return None

    details = data.get("details")
    duration = data.get("duration")
    return RecipeStep(
        title=title,
        instruction=instruction,
        details=details.strip() if isinstance(details, str) else "",
        duration=duration.strip() if isinstance(duration, str) else "",
    )


def _normalize_timestamp(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value
    if isinstance(value, str) and value.strip():
        try:
            return datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError:
            _LOGGER.debug("Ignoring invalid timestamp '%s'", value)
    return datetime.now(timezone.utc)


def normalize_recipe(raw: Any) -> Recipe:
    """Reshape any extraction or stored value into a canonical Recipe.

    Accepts camelCase or snake_case keys, legacy step fields, and Recipe
    instances. Unknown shapes produce an empty 'Untitled Recipe'.

    Args:
        raw: Anything

    Returns:
        A fully typed Recipe
    """
    data = _as_mapping(raw)
    if not data and raw is not None:
        _LOGGER.warning("Normalizing unrecognized recipe value of type %s",
                        type(raw).__name__)

    ingredients = [
        ingredient for ingredient in map(normalize_ingredient, _as_list(data.get("ingredients")))
        if ingredient is not None
    ]
    steps = [
        step for step in map(normalize_step, _as_list(data.get("steps")))
        if step is not None
    ]
    warnings = [text for text in map(_as_text, _as_list(data.get("warnings"))) if text]

    recipe = Recipe(
        id=_as_text(data.get("id")) or str(uuid.uuid4()),
        title=_as_text(data.get("title")) or UNTITLED_RECIPE,
        description=_as_text(data.get("description")),
        source_url=_as_text(_first_present(data, "sourceUrl", "source_url")),
        base_servings=normalize_servings(_first_present(data, "baseServings", "base_servings")),
        ingredients=ingredients,
        steps=steps,
        warnings=warnings,
        extracted_at=_normalize_timestamp(_first_present(data, "extractedAt", "extracted_at")),
    )
    _LOGGER.debug("Normalized recipe '%s': %d ingredients, %d steps",
                  recipe.title, len(ingredients), len(steps))
    return recipe