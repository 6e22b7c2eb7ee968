"""Static city-pair distance table used to autofill trip distances."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple

import pandas as pd

logger = logging.getLogger(__name__)

DEFAULT_ROUTES_CSV = Path(__file__).resolve().parent / "data" / "br_routes.csv"
ROUTE_COLUMNS = ["origin", "destination", "distance_km"]


def _normalize_city(value: object) -> str:
    if value is None or (isinstance(value, float) and pd.isna(value)):
        return ""
    return str(value).strip().lower()


def _pair_key(city_a: str, city_b: str) -> Tuple[str, str]:
    a = _normalize_city(city_a)
    b = _normalize_city(city_b)
    return (a, b) if a <= b else (b, a)


@dataclass(frozen=True)
class Route:
    """Unordered pair of cities with a known road distance."""

    origin: str
    destination: str
    distance_km: float

    def __post_init__(self) -> None:
        if not str(self.origin).strip() or not str(self.destination).strip():
            raise ValueError("Routes require non-empty origin and destination names")
        distance = float(self.distance_km)
        if not math.isfinite(distance) or distance <= 0:
            raise ValueError(
                f"Route {self.origin!r} -> {self.destination!r} must have a positive distance"
            )
        object.__setattr__(self, "distance_km", distance)

    def connects(self, city_a: str, city_b: str) -> bool:
        return _pair_key(self.origin, self.destination) == _pair_key(city_a, city_b)


@dataclass(frozen=True)
class RouteCatalog:
    """Closed lookup table; pairs absent from it are reported as ``None``."""

    routes: Tuple[Route, ...] = ()
    _index: Dict[Tuple[str, str], float] = field(
        default_factory=dict, init=False, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        object.__setattr__(self, "routes", tuple(self.routes))
        index: Dict[Tuple[str, str], float] = {}
        for route in self.routes:
            key = _pair_key(route.origin, route.destination)
            if key in index:
                # First record wins.
                logger.warning(
                    "Duplicate route %s <-> %s ignored (kept %.0f km, dropped %.0f km)",
                    route.origin,
                    route.destination,
                    index[key],
                    route.distance_km,
                )
                continue
            index[key] = route.distance_km
        object.__setattr__(self, "_index", index)

    def __len__(self) -> int:
        return len(self.routes)

    def list_cities(self) -> List[str]:
        """Every route endpoint, de-duplicated and sorted."""
        cities = set()
        for route in self.routes:
            cities.add(route.origin)
            cities.add(route.destination)
        return sorted(cities)

    def find_distance(self, city_a: str, city_b: str) -> Optional[float]:
        """Distance in km between two cities in either direction, or ``None``."""
        distance = self._index.get(_pair_key(city_a, city_b))
        if distance is None:
            logger.debug("No catalog distance between %r and %r", city_a, city_b)
        return distance

    @classmethod
    def from_records(cls, records: Iterable[Tuple[str, str, float]]) -> "RouteCatalog":
        return cls(
            routes=tuple(
                Route(origin=str(origin).strip(), destination=str(destination).strip(), distance_km=distance)
                for origin, destination, distance in records
            )
        )

    @classmethod
    def from_csv(cls, path: str | Path) -> "RouteCatalog":
        csv_path = Path(path)
        if not csv_path.exists():
            raise FileNotFoundError(f"Route CSV not found at {csv_path}")
        df = pd.read_csv(csv_path, encoding="utf-8", keep_default_na=False, na_values=[""])
        missing = [column for column in ROUTE_COLUMNS if column not in df.columns]
        if missing:
            raise ValueError(f"Route CSV {csv_path} is missing columns: {', '.join(missing)}")
        routes: List[Route] = []
        for row in df[ROUTE_COLUMNS].itertuples(index=False):
            origin = str(row.origin).strip() if not pd.isna(row.origin) else ""
            destination = str(row.destination).strip() if not pd.isna(row.destination) else ""
            routes.append(Route(origin=origin, destination=destination, distance_km=row.distance_km))
        logger.info("Loaded %d routes from %s", len(routes), csv_path)
        return cls(routes=tuple(routes))

    @classmethod
    def default(cls) -> "RouteCatalog":
        """Catalog of Brazilian city pairs bundled with the package."""
        return cls.from_csv(DEFAULT_ROUTES_CSV)

    def to_dataframe(self) -> pd.DataFrame:
        rows = [
            {"origin": r.origin, "destination": r.destination, "distance_km": r.distance_km}
            for r in self.routes
        ]
        return pd.DataFrame(rows, columns=ROUTE_COLUMNS)


__all__ = ["DEFAULT_ROUTES_CSV", "Route", "RouteCatalog"]
