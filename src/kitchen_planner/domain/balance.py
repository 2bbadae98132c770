"""Meal balance (Ampel) models."""

from dataclasses import dataclass, field
from enum import Enum


class AmpelColor(str, Enum):
    """Traffic-light classification of a meal."""

    GREEN = "green"
    YELLOW = "yellow"
    RED = "red"
    NEUTRAL = "neutral"


@dataclass(frozen=True)
class AmpelConfig:
    """Per-person target and deviation thresholds for one meal type."""

    meal_target_kcal_per_person: float
    green_threshold: float = 0.10
    yellow_threshold: float = 0.25


@dataclass(frozen=True)
class ReportNote:
    """Human-readable note attached to a report."""

    kind: str
    text: str


@dataclass(frozen=True)
class MealBalanceReport:
    """Result of evaluating one meal against its calorie target."""

    kcal_per_person: float
    target_kcal_per_person: float
    ratio: float
    deviation: float
    deviation_pct: float
    color: AmpelColor
    notes: list[ReportNote] = field(default_factory=list)
    protein_g_per_person: float = 0.0
