"""CO2 emission and carbon-credit estimates for trips between known cities."""

from .emissions import (
    CarbonCreditPolicy,
    EmissionEngine,
    EmissionFactorTable,
    InvalidArgumentError,
    TransportMode,
)
from .estimator import EstimatorSettings, TripEstimator, build_estimator
from .routes import RouteCatalog

__all__ = [
    "CarbonCreditPolicy",
    "EmissionEngine",
    "EmissionFactorTable",
    "EstimatorSettings",
    "InvalidArgumentError",
    "RouteCatalog",
    "TransportMode",
    "TripEstimator",
    "build_estimator",
]
