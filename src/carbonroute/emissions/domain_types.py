"""Value types shared by the emission model, engine and estimator."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Dict


class InvalidArgumentError(ValueError):
    """Raised when a caller passes a distance or mode the engine cannot use."""


class TransportMode(str, Enum):
    """Closed set of transport modes, declared in comparison tie-break order."""

    BICYCLE = "bicycle"
    CAR = "car"
    BUS = "bus"
    TRUCK = "truck"

    @classmethod
    def parse(cls, value: object) -> "TransportMode":
        """Accept a member or a free-text identifier (trimmed, case-insensitive)."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            raise InvalidArgumentError(f"Transport mode must be a string, got {type(value).__name__}")
        token = value.strip().lower()
        try:
            return cls(token)
        except ValueError as exc:
            choices = ", ".join(mode.value for mode in cls)
            raise InvalidArgumentError(
                f"Unknown transport mode {value!r}; expected one of: {choices}"
            ) from exc

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.value


@dataclass(frozen=True)
class ModeMetadata:
    """Display-only attributes of a transport mode."""

    label: str
    icon: str = ""
    color: str = ""


@dataclass(frozen=True)
class EmissionResult:
    mode: TransportMode
    distance_km: float
    emission_kg: float

    def to_dict(self) -> Dict[str, object]:
        return {"mode": self.mode.value, "distance_km": self.distance_km, "emission_kg": self.emission_kg}


@dataclass(frozen=True)
class ComparisonEntry:
    """Emission of one mode expressed against the car baseline (car = 100%)."""

    mode: TransportMode
    emission_kg: float
    percent_vs_car: float

    def to_dict(self) -> Dict[str, object]:
        return {
            "mode": self.mode.value,
            "emission_kg": self.emission_kg,
            "percent_vs_car": self.percent_vs_car,
        }


@dataclass(frozen=True)
class SavingsResult:
    """CO2 avoided relative to a baseline; negative when the candidate is dirtier."""

    saved_kg: float
    percent_saved: float

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)


@dataclass(frozen=True)
class PriceEstimate:
    min: float
    max: float
    average: float

    @property
    def is_surplus_emission(self) -> bool:
        """True when the price reflects a debt (more CO2 than the baseline)."""
        return self.average < 0

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)


__all__ = [
    "ComparisonEntry",
    "EmissionResult",
    "InvalidArgumentError",
    "ModeMetadata",
    "PriceEstimate",
    "SavingsResult",
    "TransportMode",
]
