"""Single-request orchestration: validate input, resolve distance, run the engine.

The estimator is what a presentation layer talks to. Given two city names, a
transport mode and optionally a manually entered distance, it returns a
:class:`TripEstimate` with everything needed to render a result page:

1. the emission of the selected mode,
2. the baseline (car) emission and the savings against it,
3. the ranked comparison of every mode,
4. the carbon credits represented by the savings and their price band.

Distances come from the :class:`RouteCatalog` unless the caller passes one.
A catalog miss without a manual distance raises :class:`DistanceNotFoundError`
so the caller can ask the user to type the distance in.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from carbonroute.emissions.domain_types import (
    ComparisonEntry,
    InvalidArgumentError,
    PriceEstimate,
    SavingsResult,
    TransportMode,
)
from carbonroute.emissions.engine import EmissionEngine, validate_distance
from carbonroute.routes.route_catalog import RouteCatalog

logger = logging.getLogger(__name__)

SOURCE_CATALOG = "catalog"
SOURCE_MANUAL = "manual"


class DistanceNotFoundError(InvalidArgumentError):
    """No catalog distance for the pair and no manual distance was supplied."""

    def __init__(self, origin: str, destination: str):
        super().__init__(
            f"No known distance between {origin!r} and {destination!r}; enter it manually"
        )
        self.origin = origin
        self.destination = destination


@dataclass(frozen=True)
class DistanceLookup:
    origin: str
    destination: str
    distance_km: Optional[float]

    @property
    def found(self) -> bool:
        return self.distance_km is not None


@dataclass(frozen=True)
class TripEstimate:
    origin: str
    destination: str
    distance_km: float
    distance_source: str
    mode: TransportMode
    emission_kg: float
    baseline_mode: TransportMode
    baseline_emission_kg: float
    savings: SavingsResult
    comparison: Tuple[ComparisonEntry, ...]
    credits: float
    price: PriceEstimate
    currency: str

    @property
    def is_baseline(self) -> bool:
        return self.mode == self.baseline_mode

    @property
    def is_surplus_emission(self) -> bool:
        """The selected mode emits more than the baseline, so credits are a debt."""
        return self.credits < 0

    def to_dict(self) -> Dict[str, object]:
        return {
            "origin": self.origin,
            "destination": self.destination,
            "distance_km": self.distance_km,
            "distance_source": self.distance_source,
            "mode": self.mode.value,
            "emission_kg": self.emission_kg,
            "baseline_mode": self.baseline_mode.value,
            "baseline_emission_kg": self.baseline_emission_kg,
            "savings": self.savings.to_dict(),
            "comparison": [entry.to_dict() for entry in self.comparison],
            "credits": self.credits,
            "price": self.price.to_dict(),
            "currency": self.currency,
            "is_surplus_emission": self.is_surplus_emission,
        }


def _require_city(value: object, label: str) -> str:
    text = str(value or "").strip()
    if not text:
        raise InvalidArgumentError(f"{label} city is required")
    return text


class TripEstimator:
    def __init__(self, catalog: RouteCatalog, engine: EmissionEngine):
        self.catalog = catalog
        self.engine = engine

    def resolve_distance(self, origin: str, destination: str) -> DistanceLookup:
        origin_name = _require_city(origin, "Origin")
        destination_name = _require_city(destination, "Destination")
        distance = self.catalog.find_distance(origin_name, destination_name)
        return DistanceLookup(origin=origin_name, destination=destination_name, distance_km=distance)

    def estimate(
        self,
        origin: str,
        destination: str,
        mode: TransportMode | str,
        distance_km: Optional[float] = None,
    ) -> TripEstimate:
        selected = TransportMode.parse(mode)
        if distance_km is not None:
            origin_name = _require_city(origin, "Origin")
            destination_name = _require_city(destination, "Destination")
            distance = validate_distance(distance_km)
            source = SOURCE_MANUAL
        else:
            lookup = self.resolve_distance(origin, destination)
            if not lookup.found:
                raise DistanceNotFoundError(lookup.origin, lookup.destination)
            origin_name, destination_name = lookup.origin, lookup.destination
            distance = lookup.distance_km
            source = SOURCE_CATALOG

        engine = self.engine
        baseline = engine.baseline_mode
        emission_kg = engine.emission(distance, selected)
        baseline_kg = engine.emission(distance, baseline)
        savings = engine.savings(emission_kg, baseline_kg)
        credits = engine.carbon_credits(savings.saved_kg)
        price = engine.estimate_price(credits)
        comparison = tuple(engine.all_modes(distance))

        logger.info(
            "Estimated %s -> %s (%.1f km, %s) by %s: %.2f kg CO2",
            origin_name,
            destination_name,
            distance,
            source,
            selected.value,
            emission_kg,
        )
        return TripEstimate(
            origin=origin_name,
            destination=destination_name,
            distance_km=distance,
            distance_source=source,
            mode=selected,
            emission_kg=emission_kg,
            baseline_mode=baseline,
            baseline_emission_kg=baseline_kg,
            savings=savings,
            comparison=comparison,
            credits=credits,
            price=price,
            currency=engine.credit_policy.currency,
        )


__all__ = [
    "DistanceLookup",
    "DistanceNotFoundError",
    "TripEstimate",
    "TripEstimator",
]
