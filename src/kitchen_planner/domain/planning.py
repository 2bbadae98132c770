"""Domain models for weekly menu plans."""

from dataclasses import dataclass
from datetime import date
from enum import Enum

from kitchen_planner.domain.recipes import PopulationGroup

DAYS_PER_WEEK = 7
DAY_NAMES = (
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
)
DINNER_HIT_COUNT = 4


class MealType(str, Enum):
    """Meal occasions that carry a calorie target."""

    LUNCH = "lunch"
    DINNER = "dinner"


@dataclass(frozen=True)
class PersonsByGroup:
    """Diner counts for one meal occasion, always covering every group."""

    adults: int = 0
    seniors: int = 0
    children: int = 0

    def __post_init__(self) -> None:
        for group, count in self.items():
            if count < 0:
                raise ValueError(f"Diner count for {group.value} must be >= 0")

    @classmethod
    def adults_only(cls, count: int) -> "PersonsByGroup":
        """Return a mix where every diner is an adult."""
        return cls(adults=count)

    def count_for(self, group: PopulationGroup) -> int:
        """Return the diner count for a group."""
        return getattr(self, group.value)

    def items(self) -> list[tuple[PopulationGroup, int]]:
        """Return (group, count) pairs in a stable order."""
        return [(group, self.count_for(group)) for group in PopulationGroup]

    @property
    def total(self) -> int:
        """Total diners across all groups."""
        return self.adults + self.seniors + self.children


@dataclass(frozen=True)
class LunchSlots:
    """Dish references for the four lunch slots."""

    soup: str | None = None
    dessert: str | None = None
    main: str | None = None
    vegetarian: str | None = None

    def refs(self) -> list[str | None]:
        """Return slot references in display order."""
        return [self.soup, self.dessert, self.main, self.vegetarian]


@dataclass(frozen=True)
class DinnerSlots:
    """Dish references for the two dinner slots."""

    main: str | None = None
    vegetarian: str | None = None

    def refs(self) -> list[str | None]:
        """Return slot references in display order."""
        return [self.main, self.vegetarian]


@dataclass(frozen=True)
class DayPlan:
    """One day of the menu plan."""

    persons: PersonsByGroup
    lunch: LunchSlots = LunchSlots()
    dinner: DinnerSlots = DinnerSlots()

    def refs_for(self, meal_type: MealType) -> list[str | None]:
        """Return the slot references of one meal."""
        if meal_type is MealType.LUNCH:
            return self.lunch.refs()
        return self.dinner.refs()


@dataclass(frozen=True)
class WeekPlan:
    """Seven days of slots plus the recurring weekly hits."""

    week_start: date
    days: tuple[DayPlan, ...]
    lunch_hit_1: str | None = None
    lunch_hit_2: str | None = None
    dinner_hits: tuple[str | None, ...] = (None,) * DINNER_HIT_COUNT

    def __post_init__(self) -> None:
        if len(self.days) != DAYS_PER_WEEK:
            raise ValueError(
                f"A week plan needs {DAYS_PER_WEEK} days, got {len(self.days)}"
            )
