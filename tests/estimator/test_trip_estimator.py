from __future__ import annotations

import pytest

from carbonroute.emissions.domain_types import InvalidArgumentError, TransportMode
from carbonroute.emissions.engine import EmissionEngine
from carbonroute.estimator.trip_estimator import DistanceNotFoundError, TripEstimator
from carbonroute.routes.route_catalog import RouteCatalog


def _make_estimator() -> TripEstimator:
    catalog = RouteCatalog.from_records(
        [
            ("São Paulo, SP", "Rio de Janeiro, RJ", 430),
            ("Recife, PE", "Olinda, PE", 7),
        ]
    )
    return TripEstimator(catalog, EmissionEngine())


def test_resolve_distance_found_and_missing():
    estimator = _make_estimator()
    found = estimator.resolve_distance(" rio de janeiro, rj ", "SÃO PAULO, SP")
    assert found.found
    assert found.distance_km == 430
    assert found.origin == "rio de janeiro, rj"

    missing = estimator.resolve_distance("Atlantis", "Narnia")
    assert not missing.found
    assert missing.distance_km is None


def test_estimate_from_catalog():
    result = _make_estimator().estimate("São Paulo, SP", "Rio de Janeiro, RJ", "bus")
    assert result.distance_source == "catalog"
    assert result.distance_km == 430
    assert result.mode is TransportMode.BUS
    assert result.emission_kg == 38.27
    assert result.baseline_emission_kg == 51.6
    assert result.savings.saved_kg == 13.33
    assert result.savings.percent_saved == pytest.approx(25.83)
    assert result.credits == 0.0133
    assert result.price.average == pytest.approx(1.33)
    assert [entry.mode.value for entry in result.comparison] == ["bicycle", "bus", "car", "truck"]
    assert result.currency == "BRL"
    assert not result.is_surplus_emission


def test_estimate_with_manual_distance_matches_scenario():
    result = _make_estimator().estimate("Atlantis", "Narnia", "bus", distance_km=1000)
    assert result.distance_source == "manual"
    assert result.emission_kg == 89.0
    assert result.baseline_emission_kg == 120.0
    assert result.savings.saved_kg == 31.0
    assert result.savings.percent_saved == 25.83
    assert result.credits == 0.031
    assert (result.price.min, result.price.max, result.price.average) == (1.55, 4.65, 3.1)


def test_estimate_truck_is_surplus_emission():
    result = _make_estimator().estimate("Recife, PE", "Olinda, PE", TransportMode.TRUCK)
    assert result.emission_kg == 6.72
    assert result.savings.saved_kg == pytest.approx(-5.88)
    assert result.credits == pytest.approx(-0.0059)
    assert result.is_surplus_emission
    assert result.price.is_surplus_emission
    payload = result.to_dict()
    assert payload["mode"] == "truck"
    assert payload["is_surplus_emission"] is True
    assert len(payload["comparison"]) == 4


def test_car_trip_has_no_savings():
    result = _make_estimator().estimate("Recife, PE", "Olinda, PE", "car")
    assert result.is_baseline
    assert result.savings.saved_kg == 0
    assert result.credits == 0
    assert result.price.average == 0


def test_missing_distance_raises_distance_not_found():
    with pytest.raises(DistanceNotFoundError) as excinfo:
        _make_estimator().estimate("Atlantis", "Narnia", "car")
    assert excinfo.value.origin == "Atlantis"
    assert isinstance(excinfo.value, InvalidArgumentError)


@pytest.mark.parametrize(
    "origin, destination, mode, distance",
    [
        ("", "Olinda, PE", "car", None),
        ("Recife, PE", "   ", "car", 10),
        ("Recife, PE", "Olinda, PE", "spaceship", None),
        ("Recife, PE", "Olinda, PE", "car", 0),
        ("Recife, PE", "Olinda, PE", "car", -3.5),
    ],
)
def test_invalid_inputs_rejected(origin, destination, mode, distance):
    with pytest.raises(InvalidArgumentError):
        _make_estimator().estimate(origin, destination, mode, distance_km=distance)
