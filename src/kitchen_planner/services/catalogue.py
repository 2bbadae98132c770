"""Catalogue ingestion, validation and lookup."""

import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from kitchen_planner.domain.orders import IngredientMeta
from kitchen_planner.domain.recipes import (
    ALLERGENS,
    CATEGORY_KEYS,
    Dish,
    FoodGroup,
    IngredientLine,
    PerHundredGrams,
    PerPortion,
    PopulationGroup,
    PortionSpec,
)

_logger = logging.getLogger(__name__)

_ALLERGEN_LABELS = {
    "Gluten": "gluten",
    "Milch": "milk",
    "Eier": "egg",
    "Soja": "soy",
    "Nüsse": "nuts",
    "Erdnüsse": "peanuts",
    "Fisch": "fish",
    "Krebstiere": "crustaceans",
    "Sellerie": "celery",
    "Senf": "mustard",
    "Sesam": "sesame",
    "Lupine": "lupin",
    "Schwefeldioxid": "sulphites",
    "Schwefeldioxid/Sulphite": "sulphites",
    "Weichtiere": "molluscs",
}

_GROUP_KEYS = {
    "adults": PopulationGroup.ADULTS,
    "erwachsene": PopulationGroup.ADULTS,
    "seniors": PopulationGroup.SENIORS,
    "senioren": PopulationGroup.SENIORS,
    "children": PopulationGroup.CHILDREN,
    "kinder": PopulationGroup.CHILDREN,
}

_FOOD_GROUP_ALIASES = {"suppe": FoodGroup.SOUP.value}

SENIOR_PORTION_FACTOR = 0.87
CHILD_PORTION_FACTOR = 0.67
DEFAULT_BASE_PORTION_G = 300


class CatalogueError(ValueError):
    """Raised when the catalogue is structurally invalid."""


class _Schema(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class Per100gSchema(_Schema):
    """Nutrition stated as density per 100 g."""

    kind: Literal["PER_100G"]
    kcal_per_100g: float = Field(alias="kcalPer100g", ge=0)
    protein_per_100g: float = Field(default=0.0, alias="proteinPer100g", ge=0)
    fat_per_100g: float = Field(default=0.0, alias="fatPer100g", ge=0)
    carbs_per_100g: float = Field(default=0.0, alias="carbsPer100g", ge=0)


class PerPortionSchema(_Schema):
    """Nutrition stated for one base portion."""

    kind: Literal["PER_PORTION"]
    kcal_per_portion: float = Field(alias="kcalPerPortion", ge=0)
    protein_per_portion: float = Field(default=0.0, alias="proteinPerPortion", ge=0)
    fat_per_portion: float = Field(default=0.0, alias="fatPerPortion", ge=0)
    base_portion_g: float = Field(default=0.0, alias="basePortionG", ge=0)


class PortionSchema(_Schema):
    """Portion configuration of a recipe."""

    base_portion_g: float = Field(alias="basePortionG", gt=0)
    portion_g_by_group: dict[str, float] | None = Field(
        default=None, alias="portionGByGroup"
    )

    @field_validator("portion_g_by_group")
    @classmethod
    def _known_groups(cls, value: dict[str, float] | None) -> dict[str, float] | None:
        if value is None:
            return None
        unknown = [key for key in value if key.lower() not in _GROUP_KEYS]
        if unknown:
            raise ValueError(f"unknown population groups: {', '.join(unknown)}")
        return value


class IngredientSchema(_Schema):
    """Ingredient line as stored in the recipe files."""

    ingredient_id: str | None = Field(default=None, alias="ingredientId")
    name: str = Field(min_length=1)
    qty_per_base_portion_g: float = Field(
        default=0.0, alias="qtyPerBasePortionG", ge=0
    )
    yield_factor: float = Field(default=1.0, alias="yield", gt=0, le=1)
    pack_size_g: float | None = Field(default=None, alias="packSizeG", gt=0)
    category_key: str = Field(default="dry_goods", alias="categoryKey")

    @field_validator("category_key")
    @classmethod
    def _known_category(cls, value: str) -> str:
        if value not in CATEGORY_KEYS:
            raise ValueError(f"unknown category: {value}")
        return value


class RecipeSchema(_Schema):
    """Canonical recipe record."""

    recipe_id: str = Field(alias="recipeId", min_length=1)
    name: str = Field(min_length=1)
    allergens: list[str] = Field(default_factory=list)
    food_group: FoodGroup = Field(default=FoodGroup.PROTEIN, alias="foodGroup")
    is_whole_grain: bool = Field(default=False, alias="isVollkorn")
    nutrition: Annotated[
        Per100gSchema | PerPortionSchema, Field(discriminator="kind")
    ]
    portion: PortionSchema
    ingredients: list[IngredientSchema]
    source_category: str = Field(default="", alias="sourceCategory")

    @field_validator("food_group", mode="before")
    @classmethod
    def _food_group_alias(cls, value: object) -> object:
        if isinstance(value, str):
            return _FOOD_GROUP_ALIASES.get(value, value)
        return value


class IngredientMetaSchema(_Schema):
    """Purchasing metadata entry."""

    supplier: str = "Unknown"
    shelf_life_days: int = Field(default=7, alias="shelfLifeDays", ge=0)
    pack_size_kg: float | None = Field(default=None, alias="packSizeKg", gt=0)
    waste_pct: float = Field(default=0.0, alias="wastePct", ge=0, lt=100)
    allergens: list[str] = Field(default_factory=list)


@dataclass
class Catalogue:
    """Validated dishes indexed by identifier."""

    dishes: dict[str, Dish]

    def get(self, dish_id: str) -> Dish | None:
        """Return a dish by id, if present."""
        return self.dishes.get(dish_id)

    def resolve(self, ref: str | None) -> Dish | None:
        """Resolve a plan slot reference; empty or unknown refs give None."""
        if not ref:
            return None
        return self.dishes.get(ref)

    def find_by_name(self, name: str) -> Dish | None:
        """Return the first dish with the given display name."""
        for dish in self.dishes.values():
            if dish.name == name:
                return dish
        return None

    def __iter__(self) -> Iterator[Dish]:
        return iter(self.dishes.values())

    def __len__(self) -> int:
        return len(self.dishes)


def build_catalogue(dishes: Iterable[Dish]) -> Catalogue:
    """Index dishes by id, rejecting duplicate identifiers."""
    indexed: dict[str, Dish] = {}
    for dish in dishes:
        if dish.dish_id in indexed:
            raise CatalogueError(f"Duplicate recipeId found: {dish.dish_id}")
        indexed[dish.dish_id] = dish
    return Catalogue(dishes=indexed)


def load_catalogue(raw_recipes: list[dict[str, object]]) -> Catalogue:
    """Validate canonical recipe records and build the catalogue."""
    catalogue = build_catalogue(parse_recipe(raw) for raw in raw_recipes)
    _logger.info("Loaded catalogue with %s dishes", len(catalogue))
    return catalogue


def parse_recipe(raw: object) -> Dish:
    """Validate one canonical recipe record and convert it to a Dish."""
    if not isinstance(raw, dict):
        raise CatalogueError(f"Invalid recipe: expected an object, got {raw!r}")
    if not raw.get("recipeId") or not raw.get("name"):
        raise CatalogueError(f"Invalid recipe: missing recipeId/name. Found: {raw!r}")
    try:
        record = RecipeSchema.model_validate(raw)
    except ValidationError as exc:
        raise CatalogueError(f"Invalid recipe {raw['recipeId']}: {exc}") from exc
    return _to_dish(record)


def normalize_allergens(labels: Iterable[str]) -> frozenset[str]:
    """Map allergen labels onto the closed vocabulary, dropping unknown ones."""
    normalized: set[str] = set()
    for label in labels:
        value = _ALLERGEN_LABELS.get(label, label.strip().lower())
        if value in ALLERGENS:
            normalized.add(value)
        elif value:
            _logger.warning("Ignoring unknown allergen label: %s", label)
    return frozenset(normalized)


def default_group_portions(base_portion_g: float) -> dict[str, float]:
    """Derive standard group portions from a base portion mass."""
    return {
        PopulationGroup.ADULTS.value: base_portion_g,
        PopulationGroup.SENIORS.value: round(base_portion_g * SENIOR_PORTION_FACTOR),
        PopulationGroup.CHILDREN.value: round(base_portion_g * CHILD_PORTION_FACTOR),
    }


def normalize_recipe(
    raw: dict[str, object],
    source_category: str,
    portion_estimates: dict[str, float],
    metadata: dict[str, dict[str, object]],
) -> dict[str, object]:
    """Return a canonical recipe record for either supported input shape."""
    if not isinstance(raw, dict):
        raise CatalogueError(
            f"Invalid recipe in {source_category}: expected an object, got {raw!r}"
        )
    if raw.get("recipeId") and raw.get("nutrition") and raw.get("portion"):
        return _complete_canonical(raw, source_category)
    return normalize_legacy_recipe(raw, source_category, portion_estimates, metadata)


def normalize_legacy_recipe(
    raw: dict[str, object],
    source_category: str,
    portion_estimates: dict[str, float],
    metadata: dict[str, dict[str, object]],
) -> dict[str, object]:
    """Convert a legacy flat record (kcal/protein/fat, grams) to canonical form."""
    food_group = str(raw.get("foodGroup") or FoodGroup.PROTEIN.value)
    base_g = portion_estimates.get(food_group) or DEFAULT_BASE_PORTION_G
    ingredients = []
    for ingredient in _legacy_ingredients(raw):
        name = ingredient.get("name")
        meta = metadata.get(str(name), {})
        pack_size_kg = meta.get("packSizeKg")
        ingredients.append(
            {
                "ingredientId": name,
                "name": name,
                "qtyPerBasePortionG": ingredient.get("grams") or 0,
                "yield": 1 - float(meta.get("wastePct") or 0) / 100,
                "packSizeG": float(pack_size_kg) * 1000 if pack_size_kg else None,
                "categoryKey": ingredient.get("category") or "dry_goods",
            }
        )
    return {
        "recipeId": raw.get("name"),
        "name": raw.get("name"),
        "allergens": raw.get("allergens") or [],
        "foodGroup": food_group,
        "isVollkorn": bool(raw.get("isVollkorn")),
        "nutrition": {
            "kind": "PER_PORTION",
            "kcalPerPortion": raw.get("kcal") or 0,
            "proteinPerPortion": raw.get("protein") or 0,
            "fatPerPortion": raw.get("fat") or 0,
            "basePortionG": base_g,
        },
        "portion": {
            "basePortionG": base_g,
            "portionGByGroup": default_group_portions(base_g),
        },
        "ingredients": ingredients,
        "sourceCategory": source_category,
    }


def parse_ingredient_metadata(
    raw: dict[str, dict[str, object]],
) -> dict[str, IngredientMeta]:
    """Validate the ingredient metadata table keyed by ingredient id."""
    parsed: dict[str, IngredientMeta] = {}
    for ingredient_id, entry in raw.items():
        try:
            record = IngredientMetaSchema.model_validate(entry)
        except ValidationError as exc:
            raise CatalogueError(
                f"Invalid ingredient metadata for {ingredient_id}: {exc}"
            ) from exc
        parsed[ingredient_id] = IngredientMeta(
            supplier=record.supplier,
            shelf_life_days=record.shelf_life_days,
            pack_size_g=record.pack_size_kg * 1000 if record.pack_size_kg else None,
            allergens=tuple(sorted(normalize_allergens(record.allergens))),
        )
    return parsed


def _complete_canonical(
    raw: dict[str, object], source_category: str
) -> dict[str, object]:
    completed = dict(raw)
    portion = dict(raw["portion"]) if isinstance(raw["portion"], dict) else {}
    base_g = portion.get("basePortionG")
    if not portion.get("portionGByGroup") and isinstance(base_g, int | float):
        portion["portionGByGroup"] = default_group_portions(base_g)
    completed["portion"] = portion
    completed["sourceCategory"] = raw.get("sourceCategory") or source_category
    return completed


def _legacy_ingredients(raw: dict[str, object]) -> list[dict[str, object]]:
    name = raw.get("name")
    value = raw.get("ingredients")
    if value is None:
        return []
    if not isinstance(value, list):
        raise CatalogueError(f"Invalid recipe {name}: ingredients is not an array")
    for item in value:
        if not isinstance(item, dict):
            raise CatalogueError(
                f"Invalid recipe {name}: ingredient {item!r} is not an object"
            )
    return value


def _to_dish(record: RecipeSchema) -> Dish:
    base_g = record.portion.base_portion_g
    nutrition_record = record.nutrition
    if isinstance(nutrition_record, Per100gSchema):
        nutrition: PerHundredGrams | PerPortion = PerHundredGrams(
            kcal_per_100g=nutrition_record.kcal_per_100g,
            protein_per_100g=nutrition_record.protein_per_100g,
            fat_per_100g=nutrition_record.fat_per_100g,
            carbs_per_100g=nutrition_record.carbs_per_100g,
        )
    else:
        nutrition = PerPortion(
            kcal_per_portion=nutrition_record.kcal_per_portion,
            base_portion_g=nutrition_record.base_portion_g or base_g,
            protein_per_portion=nutrition_record.protein_per_portion,
            fat_per_portion=nutrition_record.fat_per_portion,
        )
    by_group = {
        _GROUP_KEYS[key.lower()]: grams
        for key, grams in (record.portion.portion_g_by_group or {}).items()
    }
    ingredients = tuple(
        IngredientLine(
            ingredient_id=ingredient.ingredient_id or ingredient.name,
            name=ingredient.name,
            qty_per_base_portion_g=ingredient.qty_per_base_portion_g,
            category_key=ingredient.category_key,
            yield_factor=ingredient.yield_factor,
            pack_size_g=ingredient.pack_size_g,
        )
        for ingredient in record.ingredients
    )
    return Dish(
        dish_id=record.recipe_id,
        name=record.name,
        food_group=record.food_group,
        nutrition=nutrition,
        portion=PortionSpec(base_portion_g=base_g, portion_g_by_group=by_group),
        source_category=record.source_category,
        allergens=normalize_allergens(record.allergens),
        is_whole_grain=record.is_whole_grain,
        ingredients=ingredients,
    )
