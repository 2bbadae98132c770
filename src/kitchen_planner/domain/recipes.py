"""Domain models for dishes and their nutrition."""

from dataclasses import dataclass, field
from enum import Enum


class PopulationGroup(str, Enum):
    """Diner groups with distinct standard portion sizes."""

    ADULTS = "adults"
    SENIORS = "seniors"
    CHILDREN = "children"


class FoodGroup(str, Enum):
    """Food-group classification of a dish."""

    PROTEIN = "protein"
    DAIRY = "dairy"
    VEGETABLE = "vegetable"
    FRUIT = "fruit"
    STARCH = "starch"
    FAT_OIL = "fat_oil"
    DESSERT = "dessert"
    SOUP = "soup"


ALLERGENS = frozenset(
    {
        "gluten",
        "milk",
        "egg",
        "soy",
        "nuts",
        "peanuts",
        "fish",
        "crustaceans",
        "celery",
        "mustard",
        "sesame",
        "lupin",
        "sulphites",
        "molluscs",
    }
)

CATEGORY_KEYS = frozenset(
    {"butchery", "bakery", "dairy", "produce", "dry_goods", "frozen", "seafood"}
)


@dataclass(frozen=True)
class PerHundredGrams:
    """Energy density per 100 g."""

    kcal_per_100g: float
    protein_per_100g: float = 0.0
    fat_per_100g: float = 0.0
    carbs_per_100g: float = 0.0


@dataclass(frozen=True)
class PerPortion:
    """Absolute energy for one base portion."""

    kcal_per_portion: float
    base_portion_g: float
    protein_per_portion: float = 0.0
    fat_per_portion: float = 0.0


Nutrition = PerHundredGrams | PerPortion


@dataclass(frozen=True)
class PortionSpec:
    """Base portion mass plus optional per-group overrides in grams."""

    base_portion_g: float
    portion_g_by_group: dict[PopulationGroup, float] = field(default_factory=dict)

    def portion_for(self, group: PopulationGroup) -> float | None:
        """Return the explicit portion mass for a group, if declared."""
        return self.portion_g_by_group.get(group)


@dataclass(frozen=True)
class IngredientLine:
    """Edible quantity of one ingredient needed per base portion."""

    ingredient_id: str
    name: str
    qty_per_base_portion_g: float
    category_key: str = "dry_goods"
    yield_factor: float = 1.0
    pack_size_g: float | None = None


@dataclass(frozen=True)
class Dish:
    """Immutable catalogue entry."""

    dish_id: str
    name: str
    food_group: FoodGroup
    nutrition: Nutrition
    portion: PortionSpec
    source_category: str
    allergens: frozenset[str] = frozenset()
    is_whole_grain: bool = False
    ingredients: tuple[IngredientLine, ...] = ()
