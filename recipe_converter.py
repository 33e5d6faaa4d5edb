#!/usr/bin/env python3
"""
Recipe Converter - Extract recipes from websites

Scrapes a recipe page through Firecrawl, extracts a structured recipe with
the selected language model and keeps a short history of extracted recipes.
API keys come from the environment or a .env file.
"""
import argparse
import json
import logging
import sys
from pathlib import Path

from clean_recipe.config import get_available_models, load_settings_from_env
from clean_recipe.const import DEFAULT_MODEL, LLM_MODELS, PROVIDER_NAMES
from clean_recipe.exceptions import RecipeExtractorError
from clean_recipe.models.recipe import Recipe
from clean_recipe.services.ingredient_formatter import (
    clamp_servings,
    format_ingredient_line,
    ingredient_alternatives,
    scale_factor,
)
from clean_recipe.services.recipe_service import extract_recipe
from clean_recipe.storage import JsonFileStore, RecipeStorage

logger = logging.getLogger(__name__)

DEFAULT_STORE = Path.home() / ".clean_recipe" / "store.json"


def print_recipe(recipe: Recipe, servings: int | None = None) -> None:
    """Print a recipe scaled to the requested servings."""
    current = clamp_servings(servings) if servings else recipe.base_servings
    scale = scale_factor(recipe.base_servings, current)
    hint = " ".join(ingredient.unit for ingredient in recipe.ingredients if ingredient.unit)

    print(f"\n📝 {recipe.title}")
    if recipe.description:
        print(f"   {recipe.description}")
    if recipe.source_url:
        print(f"🔗 {recipe.source_url}")
    print(f"🍽️  Servings: {current}" + (f" (recipe: {recipe.base_servings})" if current != recipe.base_servings else ""))

    print(f"\n🥘 Ingredients ({len(recipe.ingredients)}):")
    for ingredient in recipe.ingredients:
        line = format_ingredient_line(ingredient, scale)
        alternatives = ingredient_alternatives(ingredient, scale, hint)
        if alternatives:
            line += f"  [{', '.join(alternatives)}]"
        print(f"   - {line}")

    print(f"\n👩‍🍳 Steps ({len(recipe.steps)}):")
    for index, step in enumerate(recipe.steps, start=1):
        title = f"{step.title}: " if step.title else ""
        duration = f" ({step.duration})" if step.duration else ""
        print(f"   {index}. {title}{step.instruction}{duration}")

    if recipe.warnings:
        print("\n⚠️  Warnings:")
        for warning in recipe.warnings:
            print(f"   - {warning}")


def cmd_extract(args: argparse.Namespace, storage: RecipeStorage) -> int:
    settings = load_settings_from_env(model=args.model)
    recipe = extract_recipe(args.url, settings)

    if not args.no_save:
        storage.save_recipe(recipe)
        storage.save_current_session(recipe.id)
        logger.info("Saved recipe %s to %s", recipe.id, args.store)

    if args.json:
        print(json.dumps(recipe.to_dict(), indent=2, ensure_ascii=False))
    else:
        print("\n✅ Recipe successfully extracted!")
        print_recipe(recipe, args.servings)
    return 0


def cmd_history(args: argparse.Namespace, storage: RecipeStorage) -> int:
    recipes = storage.get_recipes()
    if not recipes:
        print("No recipes saved yet.")
        return 0

    for recipe in recipes:
        print(f"{recipe.id}  {recipe.extracted_at:%Y-%m-%d}  {recipe.title}  ({recipe.source_url})")
    return 0


def cmd_show(args: argparse.Namespace, storage: RecipeStorage) -> int:
    recipe = storage.get_recipe(args.id)
    if recipe is None:
        logger.error("No recipe with id %s", args.id)
        return 1

    storage.save_current_session(recipe.id)
    print_recipe(recipe, args.servings)
    return 0


def cmd_delete(args: argparse.Namespace, storage: RecipeStorage) -> int:
    if not storage.delete_recipe(args.id):
        logger.error("No recipe with id %s", args.id)
        return 1

    storage.clear_recipe_progress(args.id)
    session = storage.get_current_session()
    if session is not None and session.recipe_id == args.id:
        storage.clear_current_session()
    print(f"Deleted recipe {args.id}")
    return 0


def cmd_models(args: argparse.Namespace, storage: RecipeStorage) -> int:
    settings = load_settings_from_env()
    available = {model_id for model_id, _, _ in get_available_models(settings)}

    print("Available models:")
    print("-" * 60)
    for model_id, name, provider in LLM_MODELS:
        marker = "✓" if model_id in available else " "
        default = " (default)" if model_id == DEFAULT_MODEL else ""
        print(f" {marker} {model_id:<28} {name} - {PROVIDER_NAMES[provider]}{default}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Extract recipes from websites into structured recipes"
    )
    parser.add_argument(
        "--store",
        type=Path,
        default=DEFAULT_STORE,
        help=f"JSON file holding the recipe history (default: {DEFAULT_STORE})"
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    extract_parser = subparsers.add_parser("extract", help="Extract a recipe from a URL")
    extract_parser.add_argument("url", help="URL of the recipe website")
    extract_parser.add_argument(
        "--model",
        help=f"Model to use for extraction (default: RECIPE_MODEL or {DEFAULT_MODEL})"
    )
    extract_parser.add_argument("--servings", type=int, help="Show quantities for this many servings")
    extract_parser.add_argument("--json", action="store_true", help="Print the recipe as JSON")
    extract_parser.add_argument("--no-save", action="store_true", help="Do not add the recipe to the history")
    extract_parser.set_defaults(handler=cmd_extract)

    history_parser = subparsers.add_parser("history", help="List saved recipes")
    history_parser.set_defaults(handler=cmd_history)

    show_parser = subparsers.add_parser("show", help="Show a saved recipe")
    show_parser.add_argument("id", help="Recipe id")
    show_parser.add_argument("--servings", type=int, help="Show quantities for this many servings")
    show_parser.set_defaults(handler=cmd_show)

    delete_parser = subparsers.add_parser("delete", help="Delete a saved recipe")
    delete_parser.add_argument("id", help="Recipe id")
    delete_parser.set_defaults(handler=cmd_delete)

    models_parser = subparsers.add_parser("models", help="List models and their availability")
    models_parser.set_defaults(handler=cmd_models)

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the recipe converter."""
    args = build_parser().parse_args(argv)

    # Configure logging
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    storage = RecipeStorage(JsonFileStore(args.store))
    try:
        return args.handler(args, storage)
    except RecipeExtractorError as e:
        logger.error("%s", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
