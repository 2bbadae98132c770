"""Tests for the JSON file catalogue source."""

import json
from pathlib import Path

import pytest

from kitchen_planner.adapters.json_catalogue_source import JsonCatalogueSource
from kitchen_planner.domain.recipes import FoodGroup, PopulationGroup
from kitchen_planner.services.catalogue import CatalogueError
from tests.conftest import DATA_DIR


def _write(path: Path, content: object) -> None:
    path.write_text(json.dumps(content), encoding="utf-8")


def test_bundled_data_loads() -> None:
    source = JsonCatalogueSource(DATA_DIR)

    catalogue = source.load_catalogue()
    metadata = source.load_metadata()

    assert len(catalogue) == 7
    soup = catalogue.get("soup-carrot-ginger")
    assert soup is not None
    assert soup.food_group is FoodGroup.SOUP
    assert soup.source_category == "soup"
    trout = catalogue.get("Baked trout fillet")
    assert trout is not None
    assert trout.source_category == "fish"
    assert trout.portion.base_portion_g == 350
    salad = catalogue.find_by_name("Vegetable salad bowl")
    assert salad is not None
    assert salad.source_category == "dinner"
    compote = catalogue.get("dessert-apple-compote")
    assert compote is not None
    assert compote.portion.portion_for(PopulationGroup.CHILDREN) == 80
    assert metadata["Rye bread"].pack_size_g == 500
    assert metadata["cream"].allergens == ("milk",)


def test_missing_optional_files_are_skipped(tmp_path: Path) -> None:
    _write(tmp_path / "order_meta.json", {})
    _write(
        tmp_path / "dinner.json",
        {"dinner": [{"name": "Porridge", "kcal": 250, "foodGroup": "starch"}]},
    )

    catalogue = JsonCatalogueSource(tmp_path).load_catalogue()

    assert [dish.dish_id for dish in catalogue] == ["Porridge"]
    assert [dish.portion.base_portion_g for dish in catalogue] == [300]


def test_missing_metadata_file_is_an_error(tmp_path: Path) -> None:
    with pytest.raises(CatalogueError, match="order_meta.json"):
        JsonCatalogueSource(tmp_path).load_catalogue()


def test_invalid_json_is_an_error(tmp_path: Path) -> None:
    _write(tmp_path / "order_meta.json", {})
    (tmp_path / "soups.json").write_text("{not json", encoding="utf-8")

    with pytest.raises(CatalogueError, match="Invalid JSON"):
        JsonCatalogueSource(tmp_path).load_catalogue()


def test_duplicate_ids_across_files_are_an_error(tmp_path: Path) -> None:
    _write(tmp_path / "order_meta.json", {})
    legacy = {"name": "Porridge", "kcal": 250}
    _write(tmp_path / "dinner.json", {"dinner": [legacy]})
    _write(tmp_path / "fish.json", {"fish": [legacy]})

    with pytest.raises(CatalogueError, match="Duplicate recipeId found: Porridge"):
        JsonCatalogueSource(tmp_path).load_catalogue()


def test_legacy_ingredients_must_be_a_list(tmp_path: Path) -> None:
    _write(tmp_path / "order_meta.json", {})
    _write(
        tmp_path / "fish.json",
        {"fish": [{"name": "Trout", "kcal": 300, "ingredients": "trout"}]},
    )

    with pytest.raises(CatalogueError, match="Trout: ingredients is not an array"):
        JsonCatalogueSource(tmp_path).load_catalogue()


def test_non_object_recipe_entry_is_an_error(tmp_path: Path) -> None:
    _write(tmp_path / "order_meta.json", {})
    _write(tmp_path / "fish.json", {"fish": ["not-a-recipe"]})

    with pytest.raises(CatalogueError, match="'not-a-recipe'"):
        JsonCatalogueSource(tmp_path).load_catalogue()


def test_unknown_ingredient_category_is_an_error(tmp_path: Path) -> None:
    _write(tmp_path / "order_meta.json", {})
    _write(
        tmp_path / "dinner.json",
        {
            "dinner": [
                {
                    "name": "Porridge",
                    "ingredients": [
                        {"name": "Oats", "grams": 60, "category": "cereal"}
                    ],
                }
            ]
        },
    )

    with pytest.raises(CatalogueError, match="unknown category: cereal"):
        JsonCatalogueSource(tmp_path).load_catalogue()
