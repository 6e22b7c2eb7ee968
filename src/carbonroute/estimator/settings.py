from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Mapping, Optional

import yaml

from carbonroute.emissions.domain_types import InvalidArgumentError, TransportMode
from carbonroute.emissions.engine import EmissionEngine
from carbonroute.emissions.factor_table import CarbonCreditPolicy, EmissionFactorTable
from carbonroute.routes.route_catalog import RouteCatalog

from .trip_estimator import TripEstimator

logger = logging.getLogger(__name__)


@dataclass
class EstimatorSettings:
    """Static configuration supplied at process start and never mutated afterwards."""

    factor_table: EmissionFactorTable = field(default_factory=EmissionFactorTable)
    credit_policy: CarbonCreditPolicy = field(default_factory=CarbonCreditPolicy)
    baseline_mode: TransportMode = TransportMode.CAR
    routes_csv: Optional[Path] = None
    version: str | None = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, object], base_dir: str | Path | None = None) -> "EstimatorSettings":
        if not isinstance(data, Mapping):
            raise TypeError("Estimator settings must be a mapping at the top level")
        unknown = set(data) - {"version", "baseline_mode", "emission_factors", "modes", "carbon_credit", "routes_csv"}
        if unknown:
            logger.warning("Ignoring unknown settings keys: %s", ", ".join(sorted(map(str, unknown))))

        table = EmissionFactorTable.from_mapping(
            factors=data.get("emission_factors"),
            modes=data.get("modes"),
        )
        policy = CarbonCreditPolicy.from_mapping(data.get("carbon_credit"))
        try:
            baseline = TransportMode.parse(data.get("baseline_mode", TransportMode.CAR.value))
        except InvalidArgumentError as exc:
            raise ValueError(str(exc)) from exc

        routes_csv = None
        raw_routes = data.get("routes_csv")
        if raw_routes:
            routes_csv = Path(str(raw_routes))
            if base_dir is not None and not routes_csv.is_absolute():
                routes_csv = Path(base_dir) / routes_csv

        version = data.get("version")
        return cls(
            factor_table=table,
            credit_policy=policy,
            baseline_mode=baseline,
            routes_csv=routes_csv,
            version=str(version) if version is not None else None,
        )

    @classmethod
    def from_yaml(cls, path: str | Path) -> "EstimatorSettings":
        config_path = Path(path)
        if not config_path.exists():
            raise FileNotFoundError(f"Estimator settings YAML not found at {config_path}")
        with config_path.open("r", encoding="utf-8") as handle:
            data = yaml.safe_load(handle) or {}
        settings = cls.from_mapping(data, base_dir=config_path.parent)
        logger.info("Loaded estimator settings from %s", config_path)
        return settings

    def to_yaml(self, path: str | Path) -> None:
        output: Dict[str, object] = {}
        if self.version is not None:
            output["version"] = self.version
        output["baseline_mode"] = self.baseline_mode.value
        output.update(self.factor_table.to_mapping())
        output["carbon_credit"] = self.credit_policy.to_mapping()
        if self.routes_csv is not None:
            output["routes_csv"] = str(self.routes_csv)
        dest = Path(path)
        dest.parent.mkdir(parents=True, exist_ok=True)
        with dest.open("w", encoding="utf-8") as handle:
            yaml.safe_dump(output, handle, sort_keys=True, allow_unicode=True)

    def load_catalog(self) -> RouteCatalog:
        if self.routes_csv is None:
            return RouteCatalog.default()
        return RouteCatalog.from_csv(self.routes_csv)


def build_estimator(settings: EstimatorSettings | None = None) -> TripEstimator:
    """Wire catalog, factor table, engine and estimator from ``settings``."""
    settings = settings or EstimatorSettings()
    engine = EmissionEngine(
        settings.factor_table,
        settings.credit_policy,
        baseline_mode=settings.baseline_mode,
    )
    return TripEstimator(settings.load_catalog(), engine)


__all__ = ["EstimatorSettings", "build_estimator"]
