"""
Ingredient Formatter.

This module handles scaling and display formatting of recipe ingredients:
quantities scaled to the selected servings, one readable line per ingredient
and the alternative measurements shown next to it.
"""
from __future__ import annotations

import logging
import math

from ..const import MAX_ALTERNATIVES, MAX_SERVINGS, MIN_SERVINGS
from ..models.recipe import AlternativeMeasurement, Ingredient
from ..unit_converter import (
    format_alt_value,
    format_quantity,
    get_alternative_measurements,
    normalize_unit,
)

_LOGGER = logging.getLogger(__name__)


def clamp_servings(servings: int | float) -> int:
    """Clamp a servings value to the supported range (1..99)."""
    if isinstance(servings, bool) or not isinstance(servings, (int, float)):
        return MIN_SERVINGS
    if not math.isfinite(servings):
        return MAX_SERVINGS if servings > 0 else MIN_SERVINGS
    return max(MIN_SERVINGS, min(MAX_SERVINGS, int(round(servings))))


def scale_factor(base_servings: int | None, current_servings: int | float) -> float:
    """Return the factor turning base-servings quantities into displayed ones.

    Args:
        base_servings: Servings the stored quantities are written for
        current_servings: Servings selected for display (clamped to 1..99)

    Returns:
        current / base, or 1.0 when the base is not usable
    """
    if base_servings is None or base_servings <= 0:
        _LOGGER.warning(
            "Cannot scale recipe: base servings not available or invalid")
        return 1.0
    return clamp_servings(current_servings) / base_servings


def scale_ingredients(
    ingredients: list[Ingredient],
    base_servings: int | None,
    target_servings: int | float
) -> list[Ingredient]:
    """Scale ingredient quantities based on servings.

    Args:
        ingredients: Canonical ingredients for the base servings
        base_servings: Original number of servings in the recipe
        target_servings: Target number of servings to scale to

    Returns:
        New ingredients with scaled quantities and alternatives
    """
    factor = scale_factor(base_servings, target_servings)
    if factor == 1.0:
        return [ingredient.model_copy(deep=True) for ingredient in ingredients]

    _LOGGER.info("Scaling ingredients from %s to %s servings (factor: %.2f)",
                 base_servings, clamp_servings(target_servings), factor)

    scaled_ingredients = []
    for ingredient in ingredients:
        alternatives = None
        if ingredient.alternatives:
            alternatives = [
                alt.model_copy(update={"quantity": alt.quantity * factor})
                for alt in ingredient.alternatives
            ]
        scaled = ingredient.model_copy(update={
            "quantity": ingredient.quantity * factor,
            "alternatives": alternatives,
        })
        _LOGGER.debug("Scaled %s: %.2f -> %.2f",
                      ingredient.name, ingredient.quantity, scaled.quantity)
        scaled_ingredients.append(scaled)

    return scaled_ingredients


def format_ingredient_line(ingredient: Ingredient, scale: float = 1.0) -> str:
    """Format an ingredient as 'qty unit name (notes)'.

    The quantity and unit are left out when the quantity is zero ("to taste").

    Examples:
        >>> format_ingredient_line(Ingredient(name='flour', quantity=2, unit='cup'), 1.5)
        '3 cup flour'
    """
    parts = []

    formatted_qty = format_quantity(ingredient.quantity, scale)
    if formatted_qty:
        parts.append(formatted_qty)
        if ingredient.unit:
            parts.append(ingredient.unit)

    parts.append(ingredient.name)
    line = ' '.join(parts)

    if ingredient.notes:
        line = f"{line} ({ingredient.notes})"
    return line


def ingredient_alternatives(
    ingredient: Ingredient,
    scale: float = 1.0,
    hint: str | None = None,
) -> list[str]:
    """Build the alternative measurements shown next to an ingredient.

    Deterministic conversions come first, then the stored alternatives from
    the enrichment pass. Units are unique (case-insensitive) and never the
    ingredient's own unit. Estimates are prefixed with '~'.

    Args:
        ingredient: The canonical ingredient
        scale: Scale factor for display
        hint: Optional text for regional unit detection (other recipe units)

    Returns:
        Up to four display strings such as '15 ml' or '~120 g'
    """
    if ingredient.quantity <= 0:
        return []

    own_unit = ingredient.unit.strip().lower()
    own_canonical = normalize_unit(ingredient.unit)

    candidates: list[AlternativeMeasurement] = list(
        get_alternative_measurements(ingredient.quantity, ingredient.unit, hint))
    candidates.extend(ingredient.alternatives or [])

    seen = {own_unit}
    rendered = []
    for alt in candidates:
        key = alt.unit.strip().lower()
        if not key or key in seen:
            continue
        if own_canonical is not None and normalize_unit(alt.unit) == own_canonical:
            continue
        seen.add(key)

        text = f"{format_alt_value(alt.quantity * scale, alt.unit)} {alt.unit}"
        rendered.append(text if alt.exact else f"~{text}")
        if len(rendered) >= MAX_ALTERNATIVES:
            break

    return rendered
