"""Tests for the recipe normalizer."""

import pytest

from clean_recipe.models.recipe import Recipe
from clean_recipe.parsers.normalizer import (
    UNTITLED_RECIPE,
    normalize_alternatives,
    normalize_ingredient,
    normalize_recipe,
    normalize_servings,
    normalize_step,
    parse_quantity,
)


class TestParseQuantity:
    """Tests for quantity coercion."""

    def test_numbers(self):
        assert parse_quantity(2) == 2.0
        assert parse_quantity(0.5) == 0.5

    def test_numeric_text(self):
        assert parse_quantity("2") == 2.0
        assert parse_quantity("2,5") == 2.5
        assert parse_quantity("1/2") == 0.5
        assert parse_quantity("1 1/2") == 1.5

    def test_unicode_fractions(self):
        assert parse_quantity("½") == 0.5
        assert parse_quantity("2½") == 2.5

    def test_ranges_use_lower_bound(self):
        assert parse_quantity("2-3") == 2.0
        assert parse_quantity("2 to 3") == 2.0

    @pytest.mark.parametrize("value", [None, True, "", "to taste", "1/0", float("inf"), [], {}])
    def test_not_a_quantity(self, value):
        assert parse_quantity(value) is None

    @pytest.mark.parametrize("value", [
        10 ** 400,
        -(10 ** 400),
        "1" + "0" * 400,
        "1" + "0" * 400 + "/3",
        "1" + "0" * 400 + " 1/2",
    ])
    def test_out_of_range(self, value):
        assert parse_quantity(value) is None


class TestNormalizeServings:
    """Tests for servings coercion."""

    def test_valid(self):
        assert normalize_servings(6) == 6
        assert normalize_servings("6 servings") == 6
        assert normalize_servings(2.6) == 3

    @pytest.mark.parametrize("value", [None, 0, -2, "abc", {}, 10 ** 400, "serves " + "9" * 400])
    def test_defaults(self, value):
        assert normalize_servings(value) == 4


class TestNormalizeAlternatives:
    """Tests for alternative measurement filtering."""

    def test_filters_invalid_entries(self):
        raw = [
            {"quantity": 240, "unit": " g ", "exact": False, "note": "  spooned and leveled "},
            {"quantity": 0, "unit": "ml"},
            {"quantity": float("nan"), "unit": "oz"},
            {"quantity": 5, "unit": ""},
            {"quantity": "3", "unit": "tbsp"},
            {"quantity": 1, "unit": "Cup"},
            {"quantity": 250, "unit": "G"},
            {"unit": "kg"},
            "not an entry",
        ]

        result = normalize_alternatives(raw, "cup")

        assert len(result) == 1
        assert result[0].quantity == 240
        assert result[0].unit == "g"
        assert result[0].exact is False
        assert result[0].note == "spooned and leveled"

    def test_blank_note_dropped(self):
        result = normalize_alternatives([{"quantity": 15, "unit": "ml", "exact": True, "note": "  "}])
        assert result[0].note is None
        assert result[0].exact is True

    def test_empty_becomes_none(self):
        assert normalize_alternatives([{"quantity": -1, "unit": "g"}]) is None
        assert normalize_alternatives([]) is None
        assert normalize_alternatives(None) is None
        assert normalize_alternatives("g") is None

    def test_huge_quantity_dropped(self):
        result = normalize_alternatives([
            {"quantity": 10 ** 400, "unit": "oz"},
            {"quantity": 2, "unit": "g"},
        ])
        assert [(alt.quantity, alt.unit) for alt in result] == [(2.0, "g")]

    def test_capped(self):
        raw = [{"quantity": i + 1, "unit": unit} for i, unit in enumerate(["g", "oz", "ml", "tbsp", "tsp", "dl"])]
        result = normalize_alternatives(raw)
        assert [alt.unit for alt in result] == ["g", "oz", "ml", "tbsp"]


class TestNormalizeIngredient:
    """Tests for ingredient coercion."""

    def test_full_ingredient(self):
        ingredient = normalize_ingredient(
            {"name": " sugar ", "quantity": "1 1/2", "unit": "cups", "notes": "packed"})
        assert ingredient.name == "sugar"
        assert ingredient.quantity == 1.5
        assert ingredient.unit == "cups"
        assert ingredient.notes == "packed"
        assert ingredient.alternatives is None

    def test_string_becomes_name(self):
        ingredient = normalize_ingredient("2 eggs")
        assert ingredient.name == "2 eggs"
        assert ingredient.quantity == 0

    def test_unusable_quantity_is_zero(self):
        assert normalize_ingredient({"name": "salt", "quantity": "to taste"}).quantity == 0
        assert normalize_ingredient({"name": "salt", "quantity": -3}).quantity == 0

    def test_empty_entries_dropped(self):
        assert normalize_ingredient({}) is None
        assert normalize_ingredient({"name": "", "unit": ""}) is None
        assert normalize_ingredient("  ") is None
        assert normalize_ingredient(42) is None


class TestNormalizeStep:
    """Tests for step coercion."""

    def test_canonical_step(self):
        step = normalize_step({
            "title": " Mix ", "instruction": " Whisk it. ", "details": " Slowly ", "duration": "5 min",
        })
        assert step.title == "Mix"
        assert step.instruction == "Whisk it."
        assert step.details == "Slowly"
        assert step.duration == "5 min"

    def test_legacy_summary(self):
        step = normalize_step({"summary": "Boil water"})
        assert step.title == "Boil water"
        assert step.instruction == "Boil water"
        assert step.details == ""
        assert step.duration == ""

    def test_string_step(self):
        step = normalize_step("Stir well")
        assert step.instruction == "Stir well"
        assert step.title == ""

    def test_non_string_optional_fields(self):
        step = normalize_step({"title": "Bake", "instruction": "Bake it.", "details": None, "duration": 20})
        assert step.details == ""
        assert step.duration == ""

    def test_empty_step_dropped(self):
        assert normalize_step({}) is None
        assert normalize_step({"details": "only details"}) is None


class TestNormalizeRecipe:
    """Tests for whole-recipe normalization."""

    def test_extraction_payload(self, tomato_soup_payload):
        recipe = normalize_recipe(tomato_soup_payload)

        assert isinstance(recipe, Recipe)
        assert recipe.title == "Tomato Soup"
        assert len(recipe.ingredients) == 1
        assert len(recipe.steps) == 1
        assert recipe.base_servings == 4
        assert recipe.id

    def test_null_input(self):
        recipe = normalize_recipe(None)
        assert recipe.title == UNTITLED_RECIPE
        assert recipe.ingredients == []
        assert recipe.steps == []
        assert recipe.warnings == []

    @pytest.mark.parametrize("raw", [[], "recipe", 42])
    def test_unrecognized_shapes(self, raw):
        assert normalize_recipe(raw).title == UNTITLED_RECIPE

    def test_snake_and_camel_keys(self):
        camel = normalize_recipe({"title": "A", "sourceUrl": "https://a.example", "baseServings": 2})
        snake = normalize_recipe({"title": "A", "source_url": "https://a.example", "base_servings": 2})
        assert camel.source_url == snake.source_url == "https://a.example"
        assert camel.base_servings == snake.base_servings == 2

    def test_keeps_id_and_timestamp(self):
        recipe = normalize_recipe({"id": "abc", "title": "A", "extractedAt": "2024-05-01T10:00:00Z"})
        assert recipe.id == "abc"
        assert recipe.extracted_at.year == 2024

    def test_mixed_garbage(self):
        recipe = normalize_recipe({
            "title": None,
            "ingredients": [None, "flour", {"name": "milk", "quantity": "abc"}, 7],
            "steps": "not a list",
            "warnings": ["Hot!", None, ""],
        })
        assert recipe.title == UNTITLED_RECIPE
        assert [i.name for i in recipe.ingredients] == ["flour", "milk"]
        assert recipe.steps == []
        assert recipe.warnings == ["Hot!"]

    def test_out_of_range_numbers(self):
        recipe = normalize_recipe({
            "title": "x",
            "baseServings": 10 ** 400,
            "ingredients": [{"name": "flour", "quantity": 10 ** 400, "unit": "g",
                             "alternatives": [{"quantity": 10 ** 400, "unit": "oz"}]}],
        })

        flour = recipe.ingredients[0]
        assert recipe.base_servings == 4
        assert flour.quantity == 0
        assert flour.alternatives is None

    @pytest.mark.parametrize("raw", [
        None,
        {},
        {"title": "Soup"},
        {"ingredients": [{"name": "x", "quantity": "2", "alternatives": [{"quantity": 5, "unit": "ml"}]}]},
        {"steps": [{"summary": "Boil"}, "Stir", {}], "baseServings": "0"},
        {"title": "A", "ingredients": [{"name": "flour", "quantity": 2, "unit": "cup",
                                        "alternatives": [{"quantity": 240, "unit": "g"}, {"quantity": 1, "unit": "cup"}]}]},
    ])
    def test_idempotent(self, raw):
        once = normalize_recipe(raw)
        twice = normalize_recipe(once)

        assert [i.model_dump() for i in twice.ingredients] == [i.model_dump() for i in once.ingredients]
        assert [s.model_dump() for s in twice.steps] == [s.model_dump() for s in once.steps]
        assert twice.title == once.title
        assert twice.base_servings == once.base_servings
        assert twice.id == once.id
