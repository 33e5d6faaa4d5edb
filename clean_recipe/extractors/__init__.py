"""Recipe extraction: page scraping and language model extraction."""
from .recipe_extractor import EnrichmentResult, RecipeExtractor, extract, merge_alternatives
from .scraper import scrape, truncate_content, validate_url

__all__ = [
    "EnrichmentResult",
    "RecipeExtractor",
    "extract",
    "merge_alternatives",
    "scrape",
    "truncate_content",
    "validate_url",
]
