"""Services package."""
from .ingredient_formatter import (
    clamp_servings,
    format_ingredient_line,
    ingredient_alternatives,
    scale_factor,
    scale_ingredients,
)
from .recipe_service import extract_and_save, extract_recipe

__all__ = [
    "clamp_servings",
    "extract_and_save",
    "extract_recipe",
    "format_ingredient_line",
    "ingredient_alternatives",
    "scale_factor",
    "scale_ingredients",
]
