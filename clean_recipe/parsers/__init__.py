"""Parsers package."""
from .normalizer import normalize_recipe, parse_quantity
from .response_parser import extract_json_value

__all__ = ["extract_json_value", "normalize_recipe", "parse_quantity"]
