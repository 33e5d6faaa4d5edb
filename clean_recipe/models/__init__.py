"""Models package."""
from .recipe import (
    AlternativeMeasurement,
    CurrentSession,
    Ingredient,
    Recipe,
    RecipeProgress,
    RecipeStep,
)

__all__ = [
    "AlternativeMeasurement",
    "CurrentSession",
    "Ingredient",
    "Recipe",
    "RecipeProgress",
    "RecipeStep",
]
