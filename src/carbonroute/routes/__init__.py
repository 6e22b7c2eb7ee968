"""Route catalog exports."""

from .route_catalog import DEFAULT_ROUTES_CSV, Route, RouteCatalog

__all__ = ["DEFAULT_ROUTES_CSV", "Route", "RouteCatalog"]
