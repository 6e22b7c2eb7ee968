"""Pure emission, comparison, savings and carbon-credit calculations.

Every figure the engine returns is rounded with the same rule: scale by
``10**decimals``, round half away from zero, scale back. Emissions, savings and
prices use 2 decimals; credit quantities use 4.

Example
-------
.. code-block:: python

    engine = EmissionEngine(EmissionFactorTable(), CarbonCreditPolicy())
    bus = engine.emission(1000, "bus")             # 89.0
    car = engine.emission(1000, "car")             # 120.0
    saved = engine.savings(bus, car)               # SavingsResult(31.0, 25.83)
    credits = engine.carbon_credits(saved.saved_kg)  # 0.031
    engine.estimate_price(credits)                 # PriceEstimate(1.55, 4.65, 3.1)
"""

from __future__ import annotations

import logging
import math
from numbers import Real
from typing import List, Optional

from .domain_types import (
    ComparisonEntry,
    EmissionResult,
    InvalidArgumentError,
    PriceEstimate,
    SavingsResult,
    TransportMode,
)
from .factor_table import CarbonCreditPolicy, EmissionFactorTable

logger = logging.getLogger(__name__)

EMISSION_DECIMALS = 2
PERCENT_DECIMALS = 2
CREDIT_DECIMALS = 4
PRICE_DECIMALS = 2


def round_half_away(value: float, decimals: int) -> float:
    """Round ``value`` to ``decimals`` places, ties going away from zero."""
    scale = 10 ** decimals
    magnitude = math.floor(abs(value) * scale + 0.5)
    if value < 0:
        magnitude = -magnitude
    return magnitude / scale


def _ratio_percent(numerator: float, denominator: float) -> float:
    # A zero baseline defines the percentage as 0 instead of inf/nan.
    if denominator == 0:
        return 0.0
    return round_half_away(100.0 * numerator / denominator, PERCENT_DECIMALS)


def validate_distance(distance_km: object) -> float:
    """Return ``distance_km`` as a float or raise :class:`InvalidArgumentError`."""
    if isinstance(distance_km, bool) or not isinstance(distance_km, Real):
        raise InvalidArgumentError(f"Distance must be a number, got {distance_km!r}")
    value = float(distance_km)
    if not math.isfinite(value):
        raise InvalidArgumentError(f"Distance must be finite, got {distance_km!r}")
    if value <= 0:
        raise InvalidArgumentError(f"Distance must be greater than zero, got {distance_km!r}")
    return value


def _validate_amount(value: object, label: str) -> float:
    if isinstance(value, bool) or not isinstance(value, Real):
        raise InvalidArgumentError(f"{label} must be a number, got {value!r}")
    amount = float(value)
    if not math.isfinite(amount):
        raise InvalidArgumentError(f"{label} must be finite, got {value!r}")
    return amount


class EmissionEngine:
    """Stateless calculator over an injected factor table and credit policy."""

    def __init__(
        self,
        factors: Optional[EmissionFactorTable] = None,
        credit_policy: Optional[CarbonCreditPolicy] = None,
        *,
        baseline_mode: TransportMode | str = TransportMode.CAR,
    ):
        self.factors = factors or EmissionFactorTable()
        self.credit_policy = credit_policy or CarbonCreditPolicy()
        self.baseline_mode = TransportMode.parse(baseline_mode)

    # ---------------------------------------------------------- emissions --
    def emission(self, distance_km: float, mode: TransportMode | str) -> float:
        """kg CO2 for travelling ``distance_km`` with ``mode``."""
        distance = validate_distance(distance_km)
        factor = self.factors.factor_of(mode)
        return round_half_away(distance * factor, EMISSION_DECIMALS)

    def estimate(self, distance_km: float, mode: TransportMode | str) -> EmissionResult:
        key = TransportMode.parse(mode)
        distance = validate_distance(distance_km)
        return EmissionResult(mode=key, distance_km=distance, emission_kg=self.emission(distance, key))

    def all_modes(self, distance_km: float) -> List[ComparisonEntry]:
        """Emission of every mode, cleanest first, with percent of the car emission.

        ``sorted`` is stable, so equal emissions keep enumeration order
        (bicycle, car, bus, truck).
        """
        distance = validate_distance(distance_km)
        car_kg = self.emission(distance, TransportMode.CAR)
        entries = []
        for mode in self.factors.modes:
            emission_kg = self.emission(distance, mode)
            entries.append(
                ComparisonEntry(
                    mode=mode,
                    emission_kg=emission_kg,
                    percent_vs_car=_ratio_percent(emission_kg, car_kg),
                )
            )
        return sorted(entries, key=lambda entry: entry.emission_kg)

    # ------------------------------------------------------------ savings --
    def savings(self, candidate_emission_kg: float, baseline_emission_kg: float) -> SavingsResult:
        """CO2 avoided by the candidate relative to the baseline; never clamped."""
        candidate = _validate_amount(candidate_emission_kg, "Candidate emission")
        baseline = _validate_amount(baseline_emission_kg, "Baseline emission")
        saved = baseline - candidate
        return SavingsResult(
            saved_kg=round_half_away(saved, EMISSION_DECIMALS),
            percent_saved=_ratio_percent(saved, baseline),
        )

    # ------------------------------------------------------------ credits --
    def carbon_credits(self, saved_kg: float) -> float:
        """Credits represented by ``saved_kg``; negative input is a debt."""
        amount = _validate_amount(saved_kg, "Saved emission")
        return round_half_away(amount / self.credit_policy.kg_per_credit, CREDIT_DECIMALS)

    def estimate_price(self, credits: float) -> PriceEstimate:
        quantity = _validate_amount(credits, "Credits")
        low = quantity * self.credit_policy.price_min
        high = quantity * self.credit_policy.price_max
        estimate = PriceEstimate(
            min=round_half_away(low, PRICE_DECIMALS),
            max=round_half_away(high, PRICE_DECIMALS),
            average=round_half_away((low + high) / 2, PRICE_DECIMALS),
        )
        if estimate.is_surplus_emission:
            logger.debug("Negative credit quantity %s priced as surplus emission", quantity)
        return estimate


__all__ = ["EmissionEngine", "round_half_away", "validate_distance"]
