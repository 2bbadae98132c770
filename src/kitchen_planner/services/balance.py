"""Meal balance (Ampel) evaluation."""

from collections.abc import Sequence
from dataclasses import dataclass

from kitchen_planner.config import Settings
from kitchen_planner.domain.balance import (
    AmpelColor,
    AmpelConfig,
    MealBalanceReport,
    ReportNote,
)
from kitchen_planner.domain.planning import DayPlan, MealType, PersonsByGroup
from kitchen_planner.domain.recipes import Dish
from kitchen_planner.services.catalogue import Catalogue
from kitchen_planner.services.energy import recipe_total_energy

_SUMMARY_NOTES = {
    AmpelColor.GREEN: ReportNote(kind="suggestion", text="Calorie target met."),
    AmpelColor.YELLOW: ReportNote(
        kind="warning", text="Calorie target slightly missed."
    ),
    AmpelColor.RED: ReportNote(
        kind="warning", text="Calorie target significantly missed."
    ),
}


def classify_deviation(deviation: float, config: AmpelConfig) -> AmpelColor:
    """Map an absolute deviation onto the traffic-light colors."""
    if deviation <= config.green_threshold:
        return AmpelColor.GREEN
    if deviation <= config.yellow_threshold:
        return AmpelColor.YELLOW
    return AmpelColor.RED


def evaluate_meal(
    dishes: Sequence[Dish], persons: PersonsByGroup, config: AmpelConfig
) -> MealBalanceReport:
    """Classify one meal's per-person kcal against its target."""
    target = config.meal_target_kcal_per_person
    total_persons = persons.total
    if not dishes or total_persons == 0:
        return neutral_report(target)

    kcal_total = 0.0
    protein_total = 0.0
    warnings: list[str] = []
    for dish in dishes:
        energy = recipe_total_energy(dish, persons)
        kcal_total += energy.kcal
        protein_total += energy.protein_g
        warnings.extend(w for w in energy.warnings if w not in warnings)

    kcal_per_person = kcal_total / total_persons
    ratio = kcal_per_person / target if target > 0 else 1.0
    deviation = abs(1 - ratio)
    color = classify_deviation(deviation, config)
    notes = [_SUMMARY_NOTES[color]]
    notes.extend(ReportNote(kind="warning", text=warning) for warning in warnings)
    return MealBalanceReport(
        kcal_per_person=kcal_per_person,
        target_kcal_per_person=target,
        ratio=ratio,
        deviation=deviation,
        deviation_pct=(ratio - 1) * 100,
        color=color,
        notes=notes,
        protein_g_per_person=protein_total / total_persons,
    )


def neutral_report(target: float) -> MealBalanceReport:
    """Report for a meal with nothing planned yet."""
    return MealBalanceReport(
        kcal_per_person=0.0,
        target_kcal_per_person=target,
        ratio=1.0,
        deviation=0.0,
        deviation_pct=0.0,
        color=AmpelColor.NEUTRAL,
        notes=[],
    )


@dataclass
class MealBalanceService:
    """Evaluates planned meals with the configured targets."""

    settings: Settings
    catalogue: Catalogue

    def evaluate(
        self, meal_type: MealType, dishes: Sequence[Dish], persons: PersonsByGroup
    ) -> MealBalanceReport:
        """Evaluate dishes served at one meal occasion."""
        return evaluate_meal(dishes, persons, self.settings.ampel_config(meal_type))

    def evaluate_refs(
        self,
        meal_type: MealType,
        dish_refs: Sequence[str | None],
        persons: PersonsByGroup,
    ) -> MealBalanceReport:
        """Evaluate dish references, skipping ones that do not resolve."""
        dishes = [
            dish
            for dish in (self.catalogue.resolve(ref) for ref in dish_refs)
            if dish is not None
        ]
        return self.evaluate(meal_type, dishes, persons)

    def evaluate_day_meal(self, day: DayPlan, meal_type: MealType) -> MealBalanceReport:
        """Evaluate the lunch or dinner slots of a planned day."""
        return self.evaluate_refs(meal_type, day.refs_for(meal_type), day.persons)
