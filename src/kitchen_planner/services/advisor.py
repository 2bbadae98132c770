"""Dish-in-context advice and day composition review."""

from collections import Counter
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from kitchen_planner.domain.advice import DayReview, DishAdvice, DishRating
from kitchen_planner.domain.recipes import Dish, FoodGroup

VEG_FRUIT_ADVICE_LIMIT = 4
VEG_FRUIT_DAILY_TARGET = 5
STARCH_DAILY_TARGET = 3
PROTEIN_DAILY_TARGET = 1
DAIRY_DAILY_TARGET = 3

_RATING_ORDER = {
    DishRating.GOOD: 0,
    DishRating.NEUTRAL: 1,
    DishRating.AVERAGE: 2,
    DishRating.BAD: 3,
}


@dataclass(frozen=True)
class _DayContext:
    counts: Counter[FoodGroup]
    has_whole_grain: bool

    @property
    def veg_fruit(self) -> int:
        return self.counts[FoodGroup.VEGETABLE] + self.counts[FoodGroup.FRUIT]


@dataclass(frozen=True)
class _Rule:
    matches: Callable[[Dish, _DayContext], bool]
    rating: DishRating
    reason: str


_RULES = (
    _Rule(
        matches=lambda dish, day: (
            dish.food_group is FoodGroup.STARCH and day.counts[FoodGroup.STARCH] >= 2
        ),
        rating=DishRating.BAD,
        reason="Already two starch sides planned.",
    ),
    _Rule(
        matches=lambda dish, day: (
            dish.food_group is FoodGroup.PROTEIN and day.counts[FoodGroup.PROTEIN] >= 2
        ),
        rating=DishRating.AVERAGE,
        reason="A second protein source is already present.",
    ),
    _Rule(
        matches=lambda dish, day: dish.is_whole_grain and not day.has_whole_grain,
        rating=DishRating.GOOD,
        reason="Good whole-grain choice.",
    ),
    _Rule(
        matches=lambda dish, day: (
            dish.food_group in (FoodGroup.VEGETABLE, FoodGroup.FRUIT)
            and day.veg_fruit < VEG_FRUIT_ADVICE_LIMIT
        ),
        rating=DishRating.GOOD,
        reason="Helps reach the vegetable/fruit goal.",
    ),
)


def evaluate_dish_in_context(dish: Dish, day_dishes: Sequence[Dish]) -> DishAdvice:
    """Rate a candidate against the dishes already chosen for the day.

    Rules are checked in priority order and the first match wins.
    """
    day = _context(day_dishes)
    for rule in _RULES:
        if rule.matches(dish, day):
            return DishAdvice(rating=rule.rating, reasons=[rule.reason])
    return DishAdvice(rating=DishRating.NEUTRAL, reasons=[])


def rank_candidates(
    candidates: Sequence[Dish], day_dishes: Sequence[Dish]
) -> list[tuple[Dish, DishAdvice]]:
    """Return candidates with advice, best rated first, stable within a rating."""
    rated = [(dish, evaluate_dish_in_context(dish, day_dishes)) for dish in candidates]
    return sorted(rated, key=lambda pair: _RATING_ORDER[pair[1].rating])


def review_day(dishes: Sequence[Dish]) -> DayReview:
    """Check a day's dishes against the daily food-group targets."""
    if not dishes:
        return DayReview(warnings=["No dishes planned."])

    day = _context(dishes)
    suggestions: list[str] = []
    if day.veg_fruit < VEG_FRUIT_DAILY_TARGET:
        suggestions.append(
            f"Vegetable/fruit target ({VEG_FRUIT_DAILY_TARGET}) not reached. "
            f"Currently: {day.veg_fruit}."
        )
    if day.counts[FoodGroup.STARCH] < STARCH_DAILY_TARGET:
        suggestions.append(
            f"Too few starch sides (target: {STARCH_DAILY_TARGET}). "
            f"Currently: {day.counts[FoodGroup.STARCH]}."
        )
    if day.counts[FoodGroup.PROTEIN] < PROTEIN_DAILY_TARGET:
        suggestions.append("A protein source (meat/fish/etc.) is missing.")
    if day.counts[FoodGroup.DAIRY] < DAIRY_DAILY_TARGET:
        suggestions.append(
            f"Too few dairy products (target: {DAIRY_DAILY_TARGET}). "
            f"Currently: {day.counts[FoodGroup.DAIRY]}."
        )
    if not day.has_whole_grain:
        suggestions.append("One whole-grain portion per day is recommended.")
    if not suggestions:
        suggestions.append("The day looks balanced.")
    return DayReview(suggestions=suggestions)


def _context(dishes: Sequence[Dish]) -> _DayContext:
    return _DayContext(
        counts=Counter(dish.food_group for dish in dishes),
        has_whole_grain=any(dish.is_whole_grain for dish in dishes),
    )
