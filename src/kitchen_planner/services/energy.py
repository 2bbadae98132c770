"""Portion-scaled energy calculations."""

from dataclasses import dataclass, field

from kitchen_planner.domain.planning import PersonsByGroup
from kitchen_planner.domain.recipes import Dish, Nutrition, PerHundredGrams


@dataclass(frozen=True)
class EnergyTotals:
    """Energy delivered by a dish to a diner mix."""

    kcal: float
    protein_g: float
    warnings: list[str] = field(default_factory=list)


def kcal_for_portion(
    nutrition: Nutrition, portion_g: float, fallback_base_g: float | None = None
) -> float:
    """Return the kcal delivered by exactly ``portion_g`` grams of a dish.

    Per-portion values are scaled by ``portion_g / base``; the base falls back
    to ``fallback_base_g`` when the nutrition declares none. A zero base raises
    ``ZeroDivisionError``.
    """
    if isinstance(nutrition, PerHundredGrams):
        return nutrition.kcal_per_100g * (portion_g / 100)
    base = _base_portion(nutrition.base_portion_g, fallback_base_g)
    return nutrition.kcal_per_portion * (portion_g / base)


def protein_for_portion(
    nutrition: Nutrition, portion_g: float, fallback_base_g: float | None = None
) -> float:
    """Return the protein grams delivered by ``portion_g`` grams of a dish."""
    if isinstance(nutrition, PerHundredGrams):
        return nutrition.protein_per_100g * (portion_g / 100)
    base = _base_portion(nutrition.base_portion_g, fallback_base_g)
    return nutrition.protein_per_portion * (portion_g / base)


def recipe_total_energy(dish: Dish, persons: PersonsByGroup) -> EnergyTotals:
    """Sum kcal and protein over every group with diners.

    Groups without an explicit portion override use the dish base mass; each
    such fallback is reported once in ``warnings``.
    """
    base_g = dish.portion.base_portion_g
    kcal = 0.0
    protein_g = 0.0
    warnings: list[str] = []
    for group, count in persons.items():
        if count == 0:
            continue
        portion_g = dish.portion.portion_for(group)
        if portion_g is None:
            warnings.append(default_portion_warning(dish, group.value))
            portion_g = base_g
        kcal += count * kcal_for_portion(dish.nutrition, portion_g, base_g)
        protein_g += count * protein_for_portion(dish.nutrition, portion_g, base_g)
    return EnergyTotals(kcal=kcal, protein_g=protein_g, warnings=warnings)


def recipe_total_kcal(dish: Dish, persons: PersonsByGroup) -> tuple[float, list[str]]:
    """Return total kcal for a diner mix and the scaling warnings."""
    totals = recipe_total_energy(dish, persons)
    return totals.kcal, totals.warnings


def default_portion_warning(dish: Dish, group: str) -> str:
    """Warning text for a group that falls back to the base portion."""
    return f'"{dish.name}" uses the default portion size for group "{group}".'


def _base_portion(declared_g: float, fallback_g: float | None) -> float:
    if declared_g:
        return declared_g
    return fallback_g or 0.0
