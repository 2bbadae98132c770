"""Dish advice models."""

from dataclasses import dataclass, field
from enum import Enum


class DishRating(str, Enum):
    """Label shown next to a candidate dish."""

    GOOD = "good"
    AVERAGE = "average"
    BAD = "bad"
    NEUTRAL = "neutral"


@dataclass(frozen=True)
class DishAdvice:
    """Rating for a candidate dish plus the reasons behind it."""

    rating: DishRating
    reasons: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class DayReview:
    """Food-group review of a whole day."""

    warnings: list[str] = field(default_factory=list)
    suggestions: list[str] = field(default_factory=list)
