from __future__ import annotations

import math

import pytest

from carbonroute.emissions.domain_types import InvalidArgumentError, TransportMode
from carbonroute.emissions.engine import EmissionEngine, round_half_away
from carbonroute.emissions.factor_table import CarbonCreditPolicy, EmissionFactorTable


def _engine(**factors: float) -> EmissionEngine:
    return EmissionEngine(EmissionFactorTable.from_mapping(factors=factors or None), CarbonCreditPolicy())


@pytest.mark.parametrize("distance", [1, 12.5, 430, 1000, 3933])
def test_bicycle_never_emits(distance):
    assert _engine().emission(distance, "bicycle") == 0


@pytest.mark.parametrize("distance", [1, 7.3, 430, 1000, 2387.4])
def test_car_emission_is_rounded_product(distance):
    assert _engine().emission(distance, TransportMode.CAR) == round_half_away(distance * 0.12, 2)


def test_mode_identifier_is_trimmed_and_case_insensitive():
    engine = _engine()
    assert engine.emission(100, "  BUS ") == engine.emission(100, TransportMode.BUS) == 8.9


def test_round_half_away_from_zero():
    assert round_half_away(0.125, 2) == 0.13
    assert round_half_away(-0.125, 2) == -0.13
    assert round_half_away(2.5, 0) == 3
    assert round_half_away(-2.5, 0) == -3
    assert round_half_away(0.00005, 4) == 0.0001


def test_all_modes_sorted_ascending_with_percent_vs_car():
    entries = _engine().all_modes(500)
    assert [entry.mode for entry in entries] == [
        TransportMode.BICYCLE,
        TransportMode.BUS,
        TransportMode.CAR,
        TransportMode.TRUCK,
    ]
    by_mode = {entry.mode: entry for entry in entries}
    assert by_mode[TransportMode.CAR].percent_vs_car == 100
    assert by_mode[TransportMode.BUS].emission_kg == 44.5
    assert by_mode[TransportMode.BUS].percent_vs_car == pytest.approx(74.17)
    assert by_mode[TransportMode.TRUCK].percent_vs_car == 800
    assert by_mode[TransportMode.BICYCLE].percent_vs_car == 0


def test_all_modes_ties_keep_enumeration_order():
    entries = _engine(car=0.0, bus=0.0, truck=0.5).all_modes(10)
    assert [entry.mode for entry in entries] == [
        TransportMode.BICYCLE,
        TransportMode.CAR,
        TransportMode.BUS,
        TransportMode.TRUCK,
    ]
    # Zero car emission defines every percentage as 0.
    assert all(entry.percent_vs_car == 0 for entry in entries)


def test_self_comparison_saves_nothing():
    engine = _engine()
    car = engine.emission(321.5, "car")
    result = engine.savings(car, car)
    assert result.saved_kg == 0
    assert result.percent_saved == 0


def test_savings_can_be_negative_and_zero_baseline_is_zero_percent():
    engine = _engine()
    worse = engine.savings(960.0, 120.0)
    assert worse.saved_kg == -840.0
    assert worse.percent_saved == -700.0
    degenerate = engine.savings(5.0, 0.0)
    assert degenerate.saved_kg == -5.0
    assert degenerate.percent_saved == 0


def test_carbon_credits_and_price():
    engine = _engine()
    assert engine.carbon_credits(1000) == 1.0
    assert engine.carbon_credits(-500) == -0.5
    price = engine.estimate_price(1.0)
    assert (price.min, price.max, price.average) == (50, 150, 100)
    assert not price.is_surplus_emission


def test_negative_credits_price_passes_through():
    price = _engine().estimate_price(-0.5)
    assert (price.min, price.max, price.average) == (-25, -75, -50)
    assert price.is_surplus_emission


def test_bus_scenario_against_car():
    engine = _engine()
    bus = engine.emission(1000, "bus")
    car = engine.emission(1000, "car")
    assert bus == 89.0
    assert car == 120.0
    savings = engine.savings(bus, car)
    assert savings.saved_kg == 31.0
    assert savings.percent_saved == 25.83
    credits = engine.carbon_credits(savings.saved_kg)
    assert credits == 0.031
    price = engine.estimate_price(credits)
    assert price.min == 1.55
    assert price.max == 4.65
    assert price.average == 3.1


def test_emission_is_deterministic():
    engine = _engine()
    results = {engine.emission(777.7, "truck") for _ in range(5)}
    assert results == {746.59}
    assert engine.estimate(777.7, "truck").emission_kg == 746.59


@pytest.mark.parametrize("distance", [0, -10, math.inf, math.nan, "100", None, True])
def test_invalid_distance_rejected(distance):
    with pytest.raises(InvalidArgumentError):
        _engine().emission(distance, "car")


def test_unknown_mode_rejected():
    with pytest.raises(InvalidArgumentError):
        _engine().emission(10, "plane")


def test_custom_credit_policy_is_used():
    engine = EmissionEngine(
        EmissionFactorTable(),
        CarbonCreditPolicy(kg_per_credit=500, price_min=10, price_max=30),
    )
    assert engine.carbon_credits(250) == 0.5
    price = engine.estimate_price(2)
    assert (price.min, price.max, price.average) == (20, 60, 40)


def test_percent_vs_car_ignores_non_car_baseline():
    engine = EmissionEngine(EmissionFactorTable(), CarbonCreditPolicy(), baseline_mode="bus")
    by_mode = {entry.mode: entry for entry in engine.all_modes(1000)}
    assert by_mode[TransportMode.CAR].percent_vs_car == 100
    assert by_mode[TransportMode.TRUCK].percent_vs_car == 800
    assert by_mode[TransportMode.BUS].percent_vs_car == pytest.approx(74.17)
