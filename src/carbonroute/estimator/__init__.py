"""Trip estimation service, settings loader and CLI rendering."""

from .settings import EstimatorSettings, build_estimator
from .trip_estimator import DistanceLookup, DistanceNotFoundError, TripEstimate, TripEstimator

__all__ = [
    "DistanceLookup",
    "DistanceNotFoundError",
    "EstimatorSettings",
    "TripEstimate",
    "TripEstimator",
    "build_estimator",
]
