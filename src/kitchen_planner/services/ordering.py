"""Weekly ingredient aggregation."""

import math
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, timedelta

from kitchen_planner.domain.orders import AggregationResult, OrderLine
from kitchen_planner.domain.planning import (
    DAYS_PER_WEEK,
    MealType,
    PersonsByGroup,
    WeekPlan,
)
from kitchen_planner.domain.recipes import Dish, IngredientLine
from kitchen_planner.services.catalogue import Catalogue
from kitchen_planner.services.energy import default_portion_warning

LUNCH_HIT_1_FIRST_DAY = 0
LUNCH_HIT_1_DAYS = 3
LUNCH_HIT_2_FIRST_DAY = 3
LUNCH_HIT_2_DAYS = 4


@dataclass(frozen=True)
class HitEstimates:
    """Estimated diners per day choosing a weekly hit instead of the day menu."""

    lunch_hit_diners_per_day: int = 20
    dinner_hit_diners_per_day: int = 15


@dataclass(frozen=True)
class PlannedServing:
    """One dish served to a diner mix, starting on a given weekday.

    ``share`` scales the whole serving; dinner hits split their diners evenly.
    """

    dish_ref: str | None
    persons: PersonsByGroup
    day_index: int
    share: float = 1.0


@dataclass
class _Contribution:
    ingredient: IngredientLine
    dish_id: str
    day_index: int
    net_g: float
    gross_g: float


def planned_servings(
    plan: WeekPlan, estimates: HitEstimates | None = None
) -> list[PlannedServing]:
    """Expand a week plan into the servings it implies, day slots first."""
    hits = estimates or HitEstimates()
    servings: list[PlannedServing] = []
    for day_index, day in enumerate(plan.days):
        if day.persons.total == 0:
            continue
        for meal_type in MealType:
            servings.extend(
                PlannedServing(dish_ref=ref, persons=day.persons, day_index=day_index)
                for ref in day.refs_for(meal_type)
                if ref
            )

    if plan.lunch_hit_1:
        servings.append(
            PlannedServing(
                dish_ref=plan.lunch_hit_1,
                persons=PersonsByGroup.adults_only(
                    hits.lunch_hit_diners_per_day * LUNCH_HIT_1_DAYS
                ),
                day_index=LUNCH_HIT_1_FIRST_DAY,
            )
        )
    if plan.lunch_hit_2:
        servings.append(
            PlannedServing(
                dish_ref=plan.lunch_hit_2,
                persons=PersonsByGroup.adults_only(
                    hits.lunch_hit_diners_per_day * LUNCH_HIT_2_DAYS
                ),
                day_index=LUNCH_HIT_2_FIRST_DAY,
            )
        )
    dinner_hits = [ref for ref in plan.dinner_hits if ref]
    if dinner_hits:
        dinner_persons = PersonsByGroup.adults_only(
            hits.dinner_hit_diners_per_day * DAYS_PER_WEEK
        )
        servings.extend(
            PlannedServing(
                dish_ref=ref,
                persons=dinner_persons,
                day_index=0,
                share=1 / len(dinner_hits),
            )
            for ref in dinner_hits
        )
    return servings


def aggregate_weekly_order(
    plan: WeekPlan, catalogue: Catalogue, estimates: HitEstimates | None = None
) -> AggregationResult:
    """Aggregate a full week plan into per-ingredient net and gross demand."""
    return aggregate_servings(
        planned_servings(plan, estimates), catalogue, plan.week_start
    )


def aggregate_servings(
    servings: Iterable[PlannedServing], catalogue: Catalogue, week_start: date
) -> AggregationResult:
    """Accumulate ingredient demand for servings visited in any order.

    Unresolved dish references are skipped. Totals are summed with
    ``math.fsum`` so they do not depend on the visiting order.
    """
    contributions: dict[str, list[_Contribution]] = {}
    warnings: list[str] = []
    for serving in servings:
        dish = catalogue.resolve(serving.dish_ref)
        if dish is None:
            continue
        multiplier, dish_warnings = portion_multiplier(dish, serving.persons)
        _extend_unique(warnings, dish_warnings)
        if multiplier is None:
            continue
        for ingredient in dish.ingredients:
            net_g = ingredient.qty_per_base_portion_g * multiplier * serving.share
            contributions.setdefault(ingredient.ingredient_id, []).append(
                _Contribution(
                    ingredient=ingredient,
                    dish_id=dish.dish_id,
                    day_index=serving.day_index,
                    net_g=net_g,
                    gross_g=to_gross(net_g, ingredient.yield_factor),
                )
            )

    lines = {
        ingredient_id: _to_order_line(ingredient_id, entries, week_start)
        for ingredient_id, entries in contributions.items()
    }
    return AggregationResult(lines=lines, warnings=warnings)


def portion_multiplier(
    dish: Dish, persons: PersonsByGroup
) -> tuple[float | None, list[str]]:
    """Return how many base portions a diner mix eats, plus warnings.

    ``None`` means the dish cannot be scaled because its base mass is zero.
    """
    base_g = dish.portion.base_portion_g
    if base_g <= 0:
        return None, [f'"{dish.name}" has a base portion of 0 g and was skipped.']
    warnings: list[str] = []
    portions_g = 0.0
    for group, count in persons.items():
        if count == 0:
            continue
        portion_g = dish.portion.portion_for(group)
        if portion_g is None:
            warnings.append(default_portion_warning(dish, group.value))
            portion_g = base_g
        portions_g += count * portion_g
    return portions_g / base_g, warnings


def to_gross(net_g: float, yield_factor: float) -> float:
    """Convert edible mass to purchase mass; invalid yields count as 1."""
    if not 0 < yield_factor <= 1:
        yield_factor = 1.0
    return net_g / yield_factor


def _to_order_line(
    ingredient_id: str, contributions: list[_Contribution], week_start: date
) -> OrderLine:
    first = min(contributions, key=lambda c: (c.day_index, c.dish_id))
    pack_sizes = sorted(
        {c.ingredient.pack_size_g for c in contributions if c.ingredient.pack_size_g}
    )
    return OrderLine(
        ingredient_id=ingredient_id,
        name=first.ingredient.name,
        category_key=first.ingredient.category_key,
        net_required_g=math.fsum(c.net_g for c in contributions),
        gross_required_g=math.fsum(c.gross_g for c in contributions),
        first_use_date=week_start + timedelta(days=first.day_index),
        first_use_weekday=first.day_index,
        pack_size_g=pack_sizes[-1] if pack_sizes else None,
    )


def _extend_unique(target: list[str], values: Iterable[str]) -> None:
    for value in values:
        if value not in target:
            target.append(value)
