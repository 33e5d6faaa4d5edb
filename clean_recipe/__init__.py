"""Clean Recipe: extract structured recipes from web pages with a language model."""
from .config import AppSettings, load_settings_from_env
from .exceptions import RecipeExtractorError
from .models.recipe import AlternativeMeasurement, Ingredient, Recipe, RecipeStep
from .parsers.normalizer import normalize_recipe
from .services.ingredient_formatter import format_ingredient_line, scale_factor
from .services.recipe_service import extract_and_save, extract_recipe
from .storage import JsonFileStore, MemoryStore, RecipeStorage
from .unit_converter import format_alt_value, format_quantity, get_alternative_measurements

__version__ = "1.0.0"

__all__ = [
    "AlternativeMeasurement",
    "AppSettings",
    "Ingredient",
    "JsonFileStore",
    "MemoryStore",
    "Recipe",
    "RecipeExtractorError",
    "RecipeStep",
    "RecipeStorage",
    "extract_and_save",
    "extract_recipe",
    "format_alt_value",
    "format_ingredient_line",
    "format_quantity",
    "get_alternative_measurements",
    "load_settings_from_env",
    "normalize_recipe",
    "scale_factor",
]
