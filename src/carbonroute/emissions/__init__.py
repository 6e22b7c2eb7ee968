"""Emission factors and the pure calculation engine."""

from .domain_types import (
    ComparisonEntry,
    EmissionResult,
    InvalidArgumentError,
    ModeMetadata,
    PriceEstimate,
    SavingsResult,
    TransportMode,
)
from .engine import EmissionEngine, round_half_away, validate_distance
from .factor_table import CarbonCreditPolicy, EmissionFactorTable

__all__ = [
    "CarbonCreditPolicy",
    "ComparisonEntry",
    "EmissionEngine",
    "EmissionFactorTable",
    "EmissionResult",
    "InvalidArgumentError",
    "ModeMetadata",
    "PriceEstimate",
    "SavingsResult",
    "TransportMode",
    "round_half_away",
    "validate_distance",
]
