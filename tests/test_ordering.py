"""Tests for weekly ingredient aggregation."""

import random
from datetime import timedelta

import pytest

from kitchen_planner.domain.planning import PersonsByGroup
from kitchen_planner.services.catalogue import Catalogue, build_catalogue
from kitchen_planner.services.ordering import (
    HitEstimates,
    aggregate_servings,
    aggregate_weekly_order,
    planned_servings,
    portion_multiplier,
    to_gross,
)
from tests.factories import (
    WEEK_START,
    dinner_day,
    lunch_day,
    make_dish,
    make_ingredient,
    make_week,
)


def test_single_day_scales_ingredients(catalogue: Catalogue) -> None:
    plan = make_week({0: lunch_day(PersonsByGroup(adults=10), main="beef-stew")})

    result = aggregate_weekly_order(plan, catalogue)

    beef = result.lines["beef"]
    assert beef.net_required_g == pytest.approx(1600)
    assert beef.gross_required_g == pytest.approx(2000)
    assert beef.first_use_date == WEEK_START
    assert beef.first_use_weekday == 0
    assert result.lines["carrot"].net_required_g == pytest.approx(400)
    assert result.warnings == []


def test_group_portions_drive_the_multiplier(catalogue: Catalogue) -> None:
    persons = PersonsByGroup(adults=10, seniors=5)
    plan = make_week({0: lunch_day(persons, main="beef-stew")})

    result = aggregate_weekly_order(plan, catalogue)

    # (10 * 400 + 5 * 350) / 400 base portions
    assert result.lines["beef"].net_required_g == pytest.approx(160 * 14.375)


def test_first_use_is_earliest_day(catalogue: Catalogue) -> None:
    persons = PersonsByGroup(adults=10)
    plan = make_week(
        {
            4: dinner_day(persons, main="beef-stew"),
            2: lunch_day(persons, main="beef-stew", soup="carrot-soup"),
        }
    )

    result = aggregate_weekly_order(plan, catalogue)

    beef = result.lines["beef"]
    assert beef.first_use_weekday == 2
    assert beef.first_use_date == WEEK_START + timedelta(days=2)
    assert beef.net_required_g == pytest.approx(3200)


def test_days_without_diners_are_skipped(catalogue: Catalogue) -> None:
    plan = make_week(
        {0: lunch_day(PersonsByGroup(), main="beef-stew")},
        persons=PersonsByGroup(),
    )

    assert aggregate_weekly_order(plan, catalogue).lines == {}


def test_unresolved_references_are_skipped(catalogue: Catalogue) -> None:
    plan = make_week({0: lunch_day(PersonsByGroup(adults=10), main="deleted-dish")})

    result = aggregate_weekly_order(plan, catalogue)

    assert result.lines == {}
    assert result.warnings == []


def test_dish_without_ingredients_contributes_nothing() -> None:
    catalogue = build_catalogue([make_dish("tea")])
    plan = make_week({0: lunch_day(PersonsByGroup(adults=10), main="tea")})

    assert aggregate_weekly_order(plan, catalogue).lines == {}


def test_lunch_hits_cover_their_day_ranges(catalogue: Catalogue) -> None:
    plan = make_week(lunch_hit_1="carrot-soup", lunch_hit_2="beef-stew")

    result = aggregate_weekly_order(plan, catalogue, HitEstimates())

    # hit 1: 20 diners over Monday to Wednesday
    assert result.lines["carrot"].net_required_g == pytest.approx(
        150 * 60 + 40 * 80
    )
    assert result.lines["carrot"].first_use_weekday == 0
    # hit 2: 20 diners over Thursday to Sunday
    assert result.lines["beef"].net_required_g == pytest.approx(160 * 80)
    assert result.lines["beef"].first_use_weekday == 3


def test_dinner_hits_split_diners_evenly(catalogue: Catalogue) -> None:
    plan = make_week(dinner_hits=("beef-stew", "spelt-risotto", None, ""))

    result = aggregate_weekly_order(plan, catalogue, HitEstimates())

    # 15 diners a day for 7 days, half for each configured hit
    assert result.lines["beef"].net_required_g == pytest.approx(160 * 52.5)
    assert result.lines["spelt"].net_required_g == pytest.approx(90 * 52.5)
    assert result.lines["spelt"].first_use_weekday == 0


def test_hit_estimates_are_configurable(catalogue: Catalogue) -> None:
    plan = make_week(lunch_hit_1="beef-stew")

    result = aggregate_weekly_order(
        plan, catalogue, HitEstimates(lunch_hit_diners_per_day=10)
    )

    assert result.lines["beef"].net_required_g == pytest.approx(160 * 30)


def test_totals_do_not_depend_on_visiting_order(catalogue: Catalogue) -> None:
    plan = make_week(
        {
            0: lunch_day(
                PersonsByGroup(adults=33, seniors=17, children=3),
                main="beef-stew",
                soup="carrot-soup",
            ),
            1: dinner_day(PersonsByGroup(adults=7, seniors=41), main="green-salad"),
            3: lunch_day(
                PersonsByGroup(adults=101, children=9),
                main="spelt-risotto",
                vegetarian="green-salad",
            ),
            5: dinner_day(PersonsByGroup(seniors=13), main="carrot-soup"),
        },
        lunch_hit_1="carrot-soup",
        dinner_hits=("beef-stew", "green-salad", "carrot-soup", None),
    )
    servings = planned_servings(plan)
    baseline = aggregate_servings(servings, catalogue, WEEK_START)

    rng = random.Random(1234)
    for _ in range(20):
        shuffled = list(servings)
        rng.shuffle(shuffled)
        result = aggregate_servings(shuffled, catalogue, WEEK_START)
        assert result.lines == baseline.lines
        assert sorted(result.warnings) == sorted(baseline.warnings)


def test_default_portion_warning_is_reported_once(catalogue: Catalogue) -> None:
    persons = PersonsByGroup(adults=5, seniors=5)
    plan = make_week(
        {
            0: lunch_day(persons, soup="carrot-soup"),
            1: lunch_day(persons, soup="carrot-soup"),
        }
    )

    result = aggregate_weekly_order(plan, catalogue)

    assert result.warnings == [
        '"Carrot soup" uses the default portion size for group "seniors".'
    ]
    assert result.lines["carrot"].net_required_g == pytest.approx(150 * 20)


def test_zero_base_portion_is_skipped_with_warning() -> None:
    dish = make_dish(
        "broken",
        name="Broken",
        base_portion_g=0,
        ingredients=(make_ingredient("salt", 2),),
    )

    multiplier, warnings = portion_multiplier(dish, PersonsByGroup(adults=1))
    plan = make_week({0: lunch_day(PersonsByGroup(adults=1), main="broken")})
    result = aggregate_weekly_order(plan, build_catalogue([dish]))

    assert multiplier is None
    assert warnings == ['"Broken" has a base portion of 0 g and was skipped.']
    assert result.lines == {}
    assert result.warnings == warnings


def test_gross_uses_yield_factor() -> None:
    assert to_gross(100, 0.5) == 200
    assert to_gross(100, 1.0) == 100
    assert to_gross(100, 0) == 100
    assert to_gross(100, 1.5) == 100
