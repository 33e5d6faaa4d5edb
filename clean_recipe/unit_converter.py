"""
Unit conversion utilities for recipe ingredients.

Conversions here are deterministic only: volume to volume and weight to
weight with fixed ratios. Volume to weight needs the density of the
ingredient and is left to the enrichment pass of the extractor, which marks
its answers as estimates.
"""
from __future__ import annotations

import logging
import math
import re
import unicodedata

from .const import FRACTION_TOLERANCE, MAX_CONVERSIONS
from .models.recipe import AlternativeMeasurement

_LOGGER = logging.getLogger(__name__)

# Volume conversions to milliliters (ml)
VOLUME_TO_ML = {
    "tsp": 5,
    "tbsp": 15,
    "cup": 240,
    "dl": 100,
    "ml": 1,
    "l": 1000,
}

# Weight conversions to grams (g)
WEIGHT_TO_G = {
    "g": 1,
    "kg": 1000,
    "oz": 28.349523125,
    "lb": 453.59237,
}

# Unit synonyms (lowercase, without diacritics) to canonical unit tags
UNIT_SYNONYMS = {
    # Teaspoons
    "tsp": "tsp",
    "teaspoon": "tsp",
    "teaspoons": "tsp",
    "tl": "tsp",          # German Teelöffel
    "teeloffel": "tsp",
    "tsk": "tsp",         # Danish/Swedish teskefuld/tesked
    "cdta": "tsp",        # Spanish cucharadita
    "cucharadita": "tsp",
    "cucharaditas": "tsp",
    "c. a cafe": "tsp",   # French cuillère à café
    "cuillere a cafe": "tsp",
    "cac": "tsp",
    # Tablespoons
    "tbsp": "tbsp",
    "tbs": "tbsp",
    "tablespoon": "tbsp",
    "tablespoons": "tbsp",
    "el": "tbsp",         # German Esslöffel
    "essloffel": "tbsp",
    "spsk": "tbsp",       # Danish spiseskefuld
    "msk": "tbsp",        # Swedish matsked
    "cda": "tbsp",        # Spanish cucharada
    "cucharada": "tbsp",
    "cucharadas": "tbsp",
    "c. a soupe": "tbsp",  # French cuillère à soupe
    "cuillere a soupe": "tbsp",
    "cas": "tbsp",
    # Cups
    "cup": "cup",
    "cups": "cup",
    "taza": "cup",
    "tazas": "cup",
    # Metric volume
    "ml": "ml",
    "milliliter": "ml",
    "milliliters": "ml",
    "millilitre": "ml",
    "millilitres": "ml",
    "dl": "dl",
    "deciliter": "dl",
    "deciliters": "dl",
    "decilitre": "dl",
    "l": "l",
    "lt": "l",
    "liter": "l",
    "liters": "l",
    "litre": "l",
    "litres": "l",
    "litro": "l",
    "litros": "l",
    # Weight
    "g": "g",
    "gr": "g",
    "gram": "g",
    "grams": "g",
    "gramm": "g",
    "gramme": "g",
    "grammes": "g",
    "gramo": "g",
    "gramos": "g",
    "kg": "kg",
    "kilo": "kg",
    "kilos": "kg",
    "kilogram": "kg",
    "kilograms": "kg",
    "kilogramm": "kg",
    "kilogramme": "kg",
    "oz": "oz",
    "ounce": "oz",
    "ounces": "oz",
    "lb": "lb",
    "lbs": "lb",
    "pound": "lb",
    "pounds": "lb",
}

# Regional names for spoon and cup measures
REGIONAL_UNITS = {
    "de": {"tsp": "TL", "tbsp": "EL"},
    "da": {"tsp": "tsk", "tbsp": "spsk"},
    "sv": {"tsp": "tsk", "tbsp": "msk"},
    "es": {"tsp": "cdta", "tbsp": "cda", "cup": "taza"},
    "fr": {"tsp": "c. à café", "tbsp": "c. à soupe"},
}

# Lexical markers of a region (normalized like unit synonyms)
REGION_MARKERS = {
    "tl": ("de",),
    "el": ("de",),
    "teeloffel": ("de",),
    "essloffel": ("de",),
    "tsk": ("da", "sv"),
    "spsk": ("da",),
    "msk": ("sv",),
    "cdta": ("es",),
    "cda": ("es",),
    "cucharadita": ("es",),
    "cucharaditas": ("es",),
    "cucharada": ("es",),
    "cucharadas": ("es",),
    "taza": ("es",),
    "tazas": ("es",),
    "c. a cafe": ("fr",),
    "c. a soupe": ("fr",),
    "cuillere a cafe": ("fr",),
    "cuillere a soupe": ("fr",),
    "cac": ("fr",),
    "cas": ("fr",),
}

# Target units per canonical unit: (target, minimum source quantity)
CONVERSION_TARGETS = {
    "tsp": [("ml", 0), ("tbsp", 0)],
    "tbsp": [("ml", 0), ("tsp", 0)],
    "cup": [("ml", 0), ("dl", 0), ("tbsp", 0)],
    "dl": [("ml", 0), ("cup", 0), ("tbsp", 0)],
    "ml": [("tbsp", 0), ("tsp", 0), ("l", 1000)],
    "l": [("ml", 0), ("dl", 0)],
    "g": [("oz", 0), ("kg", 1000), ("lb", 453.592)],
    "kg": [("g", 0), ("oz", 0), ("lb", 0)],
    "oz": [("g", 0), ("lb", 16)],
    "lb": [("g", 0), ("oz", 0)],
}

# Common cooking fractions (0.333 and 0.666 match thirds within tolerance)
COMMON_FRACTIONS = [
    (0.125, "1/8"),
    (0.25, "1/4"),
    (0.333, "1/3"),
    (0.375, "3/8"),
    (0.5, "1/2"),
    (0.625, "5/8"),
    (0.666, "2/3"),
    (0.75, "3/4"),
    (0.875, "7/8"),
]

_SEGMENT_SPLIT_RE = re.compile(r'[,;|/\n()]+')


def _fold(text: str) -> str:
    """Lowercase and strip diacritics ('Esslöffel' -> 'essloffel')."""
    decomposed = unicodedata.normalize("NFKD", text.strip().lower())
    return "".join(char for char in decomposed if not unicodedata.combining(char))


def _fold_unit(text: str) -> str:
    folded = re.sub(r'\s+', ' ', _fold(text))
    return folded.rstrip('.').strip()


def normalize_unit(raw: str | None) -> str | None:
    """
    Normalize a unit string to a canonical unit tag.

    Args:
        raw: Unit as written in the recipe (e.g., 'Tbsp.', 'EL', 'gramos')

    Returns:
        One of 'tsp', 'tbsp', 'cup', 'dl', 'ml', 'l', 'g', 'kg', 'oz', 'lb',
        or None if the unit is not recognized

    Examples:
        >>> normalize_unit('Esslöffel')
        'tbsp'
        >>> normalize_unit('pcs') is None
        True
    """
    if not raw or not isinstance(raw, str):
        return None
    return UNIT_SYNONYMS.get(_fold_unit(raw))


def unit_kind(unit: str | None) -> str | None:
    """Return 'volume', 'weight' or None for a canonical or raw unit."""
    canonical = unit if unit in VOLUME_TO_ML or unit in WEIGHT_TO_G else normalize_unit(unit)
    if canonical in VOLUME_TO_ML:
        return "volume"
    if canonical in WEIGHT_TO_G:
        return "weight"
    return None


def _regions_in(text: str | None) -> list[str]:
    if not text:
        return []

    found: list[str] = []
    for segment in _SEGMENT_SPLIT_RE.split(_fold(text)):
        segment = _fold_unit(segment)
        if not segment:
            continue
        candidates = [segment] + [word.rstrip('.') for word in segment.split()]
        for candidate in candidates:
            for region in REGION_MARKERS.get(candidate, ()):
                if region not in found:
                    found.append(region)
    return found


def detect_region(unit: str | None, hint: str | None = None) -> str | None:
    """
    Detect which regional unit vocabulary a recipe prefers.

    The unit string is checked first. When it is ambiguous (Danish and Swedish
    both write 'tsk') or carries no marker, the hint text decides, e.g. the
    other unit strings of the same recipe.

    Args:
        unit: Unit string of the ingredient
        hint: Optional text with more units of the same recipe

    Returns:
        Region code from REGIONAL_UNITS, or None for the default vocabulary
    """
    from_unit = _regions_in(unit)
    if len(from_unit) == 1:
        return from_unit[0]

    from_hint = _regions_in(hint)
    if from_unit:
        for region in from_unit:
            if region in from_hint:
                return region
        return from_unit[0]
    return from_hint[0] if from_hint else None


def _display_unit(canonical: str, region: str | None) -> str:
    if region is None:
        return canonical
    return REGIONAL_UNITS[region].get(canonical, canonical)


def _convert_value(quantity: float, source: str, target: str) -> float:
    if source in VOLUME_TO_ML:
        return quantity * VOLUME_TO_ML[source] / VOLUME_TO_ML[target]
    return quantity * WEIGHT_TO_G[source] / WEIGHT_TO_G[target]


def get_alternative_measurements(
    quantity: float,
    unit: str | None,
    hint: str | None = None,
) -> list[AlternativeMeasurement]:
    """
    Produce deterministic alternative measurements for a quantity.

    Args:
        quantity: The numeric quantity in the source unit
        unit: The unit string as written in the recipe
        hint: Optional text used for regional unit detection

    Returns:
        Up to three exact alternatives, never in the source unit and never
        crossing between volume and weight

    Examples:
        >>> [(m.quantity, m.unit) for m in get_alternative_measurements(1, 'tbsp')]
        [(15.0, 'ml'), (3.0, 'tsp')]
    """
    if isinstance(quantity, bool) or not isinstance(quantity, (int, float)):
        return []
    try:
        quantity = float(quantity)
    except OverflowError:
        return []
    if not math.isfinite(quantity) or quantity <= 0:
        return []

    source = normalize_unit(unit)
    if source is None:
        return []

    region = detect_region(unit, hint)
    out: list[AlternativeMeasurement] = []
    seen = {_display_unit(source, region).lower(), (unit or "").strip().lower()}

    for target, minimum in CONVERSION_TARGETS[source]:
        if quantity < minimum:
            continue
        display = _display_unit(target, region)
        key = display.lower()
        if key in seen:
            continue
        seen.add(key)
        out.append(AlternativeMeasurement(
            quantity=_convert_value(quantity, source, target),
            unit=display,
            exact=True,
        ))

    _LOGGER.debug("Converted %s %s to %d alternatives (region: %s)",
                  quantity, unit, len(out), region)
    return out[:MAX_CONVERSIONS]


# Alias matching the pipeline vocabulary
convert = get_alternative_measurements


def format_quantity(quantity: float | int | None, scale: float = 1) -> str:
    """
    Format a quantity as a friendly string for display.

    Args:
        quantity: The numeric quantity for the base servings
        scale: Scale factor (current servings / base servings)

    Returns:
        Whole number, common fraction or decimal string. Empty string for a
        zero (or missing) quantity, which means "to taste".

    Examples:
        >>> format_quantity(1.5)
        '1 1/2'
        >>> format_quantity(2, 6 / 4)
        '3'
        >>> format_quantity(0.04)
        '0.04'
    """
    if quantity is None:
        return ""

    scaled = quantity * scale
    if scaled == 0:
        return ""

    # Whole numbers without decimals
    if scaled == int(scaled):
        return str(int(scaled))

    whole_part = math.floor(scaled)
    decimal_part = scaled - whole_part

    closest_fraction = ""
    closest_diff = 1.0
    for value, display in COMMON_FRACTIONS:
        diff = abs(decimal_part - value)
        if diff < closest_diff and diff < FRACTION_TOLERANCE:
            closest_diff = diff
            closest_fraction = display

    if closest_fraction:
        if whole_part == 0:
            return closest_fraction
        return f"{whole_part} {closest_fraction}"

    # Otherwise up to 2 decimal places, removing trailing zeros
    return f"{scaled:.2f}".rstrip('0').rstrip('.')


def _round_to(value: float, step: float) -> float:
    # Half up, like a kitchen scale
    return math.floor(value / step + 0.5) * step


def format_alt_value(value: float, unit: str) -> str:
    """
    Format the value of an alternative measurement.

    Metric mass and volume units are rounded to a sensible step and shown as
    decimals; cooking units (spoons, cups, ounces) use fractions.

    Examples:
        >>> format_alt_value(37.4, 'g')
        '37.5'
        >>> format_alt_value(1.2345, 'kg')
        '1.23'
        >>> format_alt_value(0.5, 'cup')
        '1/2'
    """
    canonical = normalize_unit(unit)

    if canonical in ("ml", "g"):
        rounded = _round_to(value, 1 if value >= 50 else 0.5)
        if rounded == int(rounded):
            return f"{rounded:.0f}"
        return f"{rounded:.1f}"

    if canonical in ("l", "kg"):
        rounded = _round_to(value, 0.01)
        return f"{rounded:.2f}".rstrip('0').rstrip('.')

    return format_quantity(value, 1)
