"""Emission factors, display metadata and carbon-credit pricing constants."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional

from .domain_types import InvalidArgumentError, ModeMetadata, TransportMode

logger = logging.getLogger(__name__)

# kg CO2 emitted per km travelled.
DEFAULT_EMISSION_FACTORS: Dict[TransportMode, float] = {
    TransportMode.BICYCLE: 0.0,
    TransportMode.CAR: 0.12,
    TransportMode.BUS: 0.089,
    TransportMode.TRUCK: 0.96,
}

DEFAULT_MODE_METADATA: Dict[TransportMode, ModeMetadata] = {
    TransportMode.BICYCLE: ModeMetadata(label="Bicicleta", icon="🚲", color="#10b981"),
    TransportMode.CAR: ModeMetadata(label="Carro", icon="🚗", color="#3b82f6"),
    TransportMode.BUS: ModeMetadata(label="Ônibus", icon="🚌", color="#f59e0b"),
    TransportMode.TRUCK: ModeMetadata(label="Caminhão", icon="🚚", color="#ef4444"),
}

DEFAULT_KG_PER_CREDIT = 1000.0
DEFAULT_PRICE_MIN = 50.0
DEFAULT_PRICE_MAX = 150.0
DEFAULT_CURRENCY = "BRL"


def _coerce_factor(value: object, mode: TransportMode) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f"Emission factor for {mode.value} must be numeric, got {value!r}")
    factor = float(value)
    if not math.isfinite(factor) or factor < 0:
        raise ValueError(f"Emission factor for {mode.value} must be a finite non-negative number")
    return factor


@dataclass(frozen=True)
class EmissionFactorTable:
    """Read-only lookup of kg CO2/km and display metadata per transport mode."""

    factors: Mapping[TransportMode, float] = field(
        default_factory=lambda: dict(DEFAULT_EMISSION_FACTORS)
    )
    metadata: Mapping[TransportMode, ModeMetadata] = field(
        default_factory=lambda: dict(DEFAULT_MODE_METADATA)
    )

    def __post_init__(self) -> None:
        factors: Dict[TransportMode, float] = {}
        for raw_mode, value in self.factors.items():
            mode = _parse_config_mode(raw_mode)
            factors[mode] = _coerce_factor(value, mode)
        missing = [mode.value for mode in TransportMode if mode not in factors]
        if missing:
            raise ValueError(f"Emission factor table is missing modes: {', '.join(missing)}")
        metadata = {_parse_config_mode(mode): meta for mode, meta in self.metadata.items()}
        object.__setattr__(self, "factors", MappingProxyType(factors))
        object.__setattr__(self, "metadata", MappingProxyType(metadata))

    def __hash__(self) -> int:
        return hash((frozenset(self.factors.items()), frozenset(self.metadata.items())))

    @property
    def modes(self) -> List[TransportMode]:
        """Modes in enumeration order."""
        return list(TransportMode)

    def factor_of(self, mode: TransportMode | str) -> float:
        return self.factors[TransportMode.parse(mode)]

    def metadata_of(self, mode: TransportMode | str) -> ModeMetadata:
        key = TransportMode.parse(mode)
        meta = self.metadata.get(key)
        if meta is None:
            return ModeMetadata(label=key.value.capitalize())
        return meta

    @classmethod
    def from_mapping(
        cls,
        factors: Optional[Mapping[str, object]] = None,
        modes: Optional[Mapping[str, Mapping[str, object]]] = None,
    ) -> "EmissionFactorTable":
        """Overlay configured factors/metadata on the built-in defaults.

        Only the four known modes may be configured; anything else is an error
        rather than a silent extension of the closed set.
        """
        merged_factors: Dict[TransportMode, float] = dict(DEFAULT_EMISSION_FACTORS)
        if factors is not None:
            if not isinstance(factors, Mapping):
                raise TypeError("'emission_factors' must be a mapping of mode to kg CO2/km")
            for raw_mode, value in factors.items():
                mode = _parse_config_mode(raw_mode)
                merged_factors[mode] = _coerce_factor(value, mode)

        merged_meta: Dict[TransportMode, ModeMetadata] = dict(DEFAULT_MODE_METADATA)
        if modes is not None:
            if not isinstance(modes, Mapping):
                raise TypeError("'modes' must be a mapping of mode to display attributes")
            for raw_mode, block in modes.items():
                mode = _parse_config_mode(raw_mode)
                if not isinstance(block, Mapping):
                    raise TypeError(f"Display attributes for {mode.value} must be a mapping")
                base = merged_meta[mode]
                merged_meta[mode] = ModeMetadata(
                    label=str(block.get("label", base.label)),
                    icon=str(block.get("icon", base.icon)),
                    color=str(block.get("color", base.color)),
                )

        if merged_factors[TransportMode.CAR] == 0:
            logger.warning("Car emission factor is zero; percentages vs car will all be 0")
        return cls(factors=merged_factors, metadata=merged_meta)

    def to_mapping(self) -> Dict[str, object]:
        return {
            "emission_factors": {mode.value: float(self.factors[mode]) for mode in TransportMode},
            "modes": {
                mode.value: {"label": meta.label, "icon": meta.icon, "color": meta.color}
                for mode, meta in ((m, self.metadata_of(m)) for m in TransportMode)
            },
        }


@dataclass(frozen=True)
class CarbonCreditPolicy:
    """How many kg one credit represents and the market price band per credit."""

    kg_per_credit: float = DEFAULT_KG_PER_CREDIT
    price_min: float = DEFAULT_PRICE_MIN
    price_max: float = DEFAULT_PRICE_MAX
    currency: str = DEFAULT_CURRENCY

    def __post_init__(self) -> None:
        for label in ("kg_per_credit", "price_min", "price_max"):
            if not math.isfinite(getattr(self, label)):
                raise ValueError(f"{label} must be a finite number")
        if not self.kg_per_credit > 0:
            raise ValueError("kg_per_credit must be positive")
        if self.price_min < 0 or self.price_max < 0:
            raise ValueError("Carbon credit prices must be non-negative")
        if self.price_min > self.price_max:
            raise ValueError("price_min cannot exceed price_max")

    @classmethod
    def from_mapping(cls, data: Optional[Mapping[str, object]]) -> "CarbonCreditPolicy":
        if data is None:
            return cls()
        if not isinstance(data, Mapping):
            raise TypeError("'carbon_credit' must be a mapping")
        return cls(
            kg_per_credit=float(data.get("kg_per_credit", DEFAULT_KG_PER_CREDIT)),
            price_min=float(data.get("price_min", DEFAULT_PRICE_MIN)),
            price_max=float(data.get("price_max", DEFAULT_PRICE_MAX)),
            currency=str(data.get("currency", DEFAULT_CURRENCY)).strip().upper(),
        )

    def to_mapping(self) -> Dict[str, object]:
        return {
            "kg_per_credit": float(self.kg_per_credit),
            "price_min": float(self.price_min),
            "price_max": float(self.price_max),
            "currency": self.currency,
        }


def _parse_config_mode(raw: object) -> TransportMode:
    try:
        return TransportMode.parse(raw)
    except InvalidArgumentError as exc:
        raise ValueError(f"Unsupported transport mode in configuration: {raw!r}") from exc


__all__ = [
    "CarbonCreditPolicy",
    "DEFAULT_EMISSION_FACTORS",
    "DEFAULT_MODE_METADATA",
    "EmissionFactorTable",
]
