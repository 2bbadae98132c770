"""Week plan payloads, migration and persistence."""

import copy
import logging
from dataclasses import dataclass
from datetime import date
from typing import Protocol

from pydantic import BaseModel, ConfigDict, Field, field_validator

from kitchen_planner.domain.planning import (
    DAY_NAMES,
    DINNER_HIT_COUNT,
    DayPlan,
    DinnerSlots,
    LunchSlots,
    PersonsByGroup,
    WeekPlan,
)
from kitchen_planner.services.catalogue import Catalogue

VERSION_KEY = "__version"
CURRENT_VERSION = "menuData.v2"
DEFAULT_SERVINGS = 120

_logger = logging.getLogger(__name__)


class _Payload(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class _SlotsPayload(_Payload):
    @field_validator("*", mode="before")
    @classmethod
    def _blank_to_none(cls, value: object) -> object:
        if isinstance(value, str) and not value.strip():
            return None
        return value


class PersonsPayload(_Payload):
    """Diner counts per population group."""

    adults: int = Field(default=0, ge=0)
    seniors: int = Field(default=0, ge=0)
    children: int = Field(default=0, ge=0)


class LunchPayload(_SlotsPayload):
    """Lunch slot references."""

    soup: str | None = None
    dessert: str | None = None
    main: str | None = None
    vegetarian: str | None = None


class DinnerPayload(_SlotsPayload):
    """Dinner slot references."""

    main: str | None = None
    vegetarian: str | None = None


class DayPayload(_Payload):
    """One stored day; ``servings`` counts adults when ``persons`` is absent."""

    servings: int | None = Field(default=None, ge=0)
    persons: PersonsPayload | None = None
    lunch: LunchPayload = Field(default_factory=LunchPayload)
    dinner: DinnerPayload = Field(default_factory=DinnerPayload)


class WeekPlanPayload(_Payload):
    """Stored or submitted week plan."""

    version: str | None = Field(default=None, alias=VERSION_KEY)
    days: dict[str, DayPayload] = Field(default_factory=dict)
    lunch_hit_1: str | None = Field(default=None, alias="lunchHit1")
    lunch_hit_2: str | None = Field(default=None, alias="lunchHit2")
    dinner_hits: list[str | None] = Field(default_factory=list, alias="dinnerHits")

    @field_validator("days")
    @classmethod
    def _known_days(cls, value: dict[str, DayPayload]) -> dict[str, DayPayload]:
        unknown = [day for day in value if day not in DAY_NAMES]
        if unknown:
            raise ValueError(f"unknown days: {', '.join(unknown)}")
        return value


class WeekPlanRepository(Protocol):
    """Persistence interface for week plans."""

    def get_payload(self, plan_id: str) -> dict[str, object] | None:
        """Return the stored payload for a plan id, if present."""

    def save_payload(self, plan_id: str, payload: dict[str, object]) -> None:
        """Create or replace the payload for a plan id."""


def plan_id_for(year: int, week: int) -> str:
    """Return the storage key of an ISO week."""
    return f"{year}-{week}"


def week_start_for(year: int, week: int) -> date:
    """Return the Monday of an ISO week."""
    return date.fromisocalendar(year, week, 1)


def empty_week_plan(week_start: date, servings: int = DEFAULT_SERVINGS) -> WeekPlan:
    """Return a plan with no dishes and the default diner count every day."""
    day = DayPlan(persons=PersonsByGroup.adults_only(servings))
    return WeekPlan(week_start=week_start, days=(day,) * len(DAY_NAMES))


def week_plan_from_payload(
    payload: WeekPlanPayload, week_start: date, servings: int = DEFAULT_SERVINGS
) -> WeekPlan:
    """Merge a payload onto the defaults and build the domain plan."""
    days = []
    for name in DAY_NAMES:
        day = payload.days.get(name) or DayPayload()
        if day.persons is not None:
            persons = PersonsByGroup(
                adults=day.persons.adults,
                seniors=day.persons.seniors,
                children=day.persons.children,
            )
        else:
            persons = PersonsByGroup.adults_only(
                servings if day.servings is None else day.servings
            )
        days.append(
            DayPlan(
                persons=persons,
                lunch=LunchSlots(**day.lunch.model_dump()),
                dinner=DinnerSlots(**day.dinner.model_dump()),
            )
        )
    hits = [ref or None for ref in payload.dinner_hits[:DINNER_HIT_COUNT]]
    hits.extend([None] * (DINNER_HIT_COUNT - len(hits)))
    return WeekPlan(
        week_start=week_start,
        days=tuple(days),
        lunch_hit_1=payload.lunch_hit_1 or None,
        lunch_hit_2=payload.lunch_hit_2 or None,
        dinner_hits=tuple(hits),
    )


def week_plan_to_payload(plan: WeekPlan) -> dict[str, object]:
    """Serialize a plan into the stored payload shape."""
    days = {}
    for name, day in zip(DAY_NAMES, plan.days, strict=True):
        days[name] = {
            "persons": {
                "adults": day.persons.adults,
                "seniors": day.persons.seniors,
                "children": day.persons.children,
            },
            "lunch": {
                "soup": day.lunch.soup,
                "dessert": day.lunch.dessert,
                "main": day.lunch.main,
                "vegetarian": day.lunch.vegetarian,
            },
            "dinner": {"main": day.dinner.main, "vegetarian": day.dinner.vegetarian},
        }
    return {
        VERSION_KEY: CURRENT_VERSION,
        "days": days,
        "lunchHit1": plan.lunch_hit_1,
        "lunchHit2": plan.lunch_hit_2,
        "dinnerHits": list(plan.dinner_hits),
    }


def needs_migration(payload: dict[str, object]) -> bool:
    """Return True when a payload predates id-based slot references."""
    return payload.get(VERSION_KEY) != CURRENT_VERSION


def migrate_names_to_ids(
    payload: dict[str, object], catalogue: Catalogue
) -> dict[str, object]:
    """Replace dish names stored in slots with the matching dish ids."""
    migrated = copy.deepcopy(payload)

    def to_id(value: object) -> object:
        if not isinstance(value, str) or not value or catalogue.get(value):
            return value
        dish = catalogue.find_by_name(value)
        return dish.dish_id if dish else value

    days = migrated.get("days")
    if isinstance(days, dict):
        for day in days.values():
            if not isinstance(day, dict):
                continue
            for meal in ("lunch", "dinner"):
                slots = day.get(meal)
                if isinstance(slots, dict):
                    for key, value in slots.items():
                        slots[key] = to_id(value)
    for key in ("lunchHit1", "lunchHit2"):
        if key in migrated:
            migrated[key] = to_id(migrated[key])
    hits = migrated.get("dinnerHits")
    if isinstance(hits, list):
        migrated["dinnerHits"] = [to_id(value) for value in hits]
    migrated[VERSION_KEY] = CURRENT_VERSION
    return migrated


@dataclass
class WeekPlanService:
    """Loads and stores week plans by ISO year and week."""

    repository: WeekPlanRepository
    catalogue: Catalogue
    default_servings: int = DEFAULT_SERVINGS

    def get_plan(self, year: int, week: int) -> WeekPlan:
        """Return the stored plan, or an empty plan when none exists."""
        plan_id = plan_id_for(year, week)
        week_start = week_start_for(year, week)
        raw = self.repository.get_payload(plan_id)
        if raw is None:
            return empty_week_plan(week_start, self.default_servings)
        if needs_migration(raw):
            _logger.info("Migrating week plan %s to id-based references", plan_id)
            raw = migrate_names_to_ids(raw, self.catalogue)
            self.repository.save_payload(plan_id, raw)
        payload = WeekPlanPayload.model_validate(raw)
        return week_plan_from_payload(payload, week_start, self.default_servings)

    def save_plan(self, year: int, week: int, payload: WeekPlanPayload) -> WeekPlan:
        """Store a submitted plan and return it merged onto the defaults."""
        plan = week_plan_from_payload(
            payload, week_start_for(year, week), self.default_servings
        )
        self.repository.save_payload(
            plan_id_for(year, week), week_plan_to_payload(plan)
        )
        return plan
