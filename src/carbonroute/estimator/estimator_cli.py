"""Estimate trip CO2 emissions and carbon-credit cost from the command line."""

from __future__ import annotations

import argparse
import logging
from typing import Sequence

from rich.console import Console

from carbonroute.emissions.domain_types import InvalidArgumentError, TransportMode

from .report import comparison_to_dataframe, print_estimate, write_comparison_csv
from .settings import EstimatorSettings, build_estimator
from .trip_estimator import DistanceNotFoundError, TripEstimator

logger = logging.getLogger(__name__)


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--config",
        default=None,
        help="Optional YAML settings overriding emission factors, credit prices or the route CSV.",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Verbosity for the CLI logger.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("cities", help="List every city known to the route catalog.")

    distance = subparsers.add_parser("distance", help="Look up the catalog distance between two cities.")
    distance.add_argument("origin")
    distance.add_argument("destination")

    estimate = subparsers.add_parser("estimate", help="Estimate emissions for a trip.")
    estimate.add_argument("--origin", required=True)
    estimate.add_argument("--destination", required=True)
    estimate.add_argument(
        "--mode",
        required=True,
        choices=[mode.value for mode in TransportMode],
        help="Transport mode used for the trip.",
    )
    estimate.add_argument(
        "--distance",
        type=float,
        default=None,
        help="Manual distance in km; skips the catalog lookup.",
    )
    estimate.add_argument(
        "--output-csv",
        default=None,
        help="Optional destination CSV for the mode comparison.",
    )
    return parser.parse_args(argv)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s | %(levelname)s | %(message)s",
    )


def _load_estimator(config_path: str | None) -> tuple[TripEstimator, EstimatorSettings]:
    settings = EstimatorSettings.from_yaml(config_path) if config_path else EstimatorSettings()
    return build_estimator(settings), settings


def _run_cities(console: Console, estimator: TripEstimator) -> int:
    for city in estimator.catalog.list_cities():
        console.print(city, highlight=False)
    return 0


def _run_distance(console: Console, estimator: TripEstimator, args: argparse.Namespace) -> int:
    lookup = estimator.resolve_distance(args.origin, args.destination)
    if not lookup.found:
        console.print(
            f"[red]Distance not found between {lookup.origin} and {lookup.destination}; "
            "you can enter it manually with --distance.[/red]"
        )
        return 1
    console.print(f"{lookup.origin} → {lookup.destination}: [bold]{lookup.distance_km:,.0f} km[/bold]")
    return 0


def _run_estimate(
    console: Console,
    estimator: TripEstimator,
    settings: EstimatorSettings,
    args: argparse.Namespace,
) -> int:
    estimate = estimator.estimate(args.origin, args.destination, args.mode, distance_km=args.distance)
    print_estimate(console, estimate, settings.factor_table)
    if args.output_csv:
        dataframe = comparison_to_dataframe(estimate.comparison, settings.factor_table)
        write_comparison_csv(args.output_csv, dataframe)
        logger.info("Wrote comparison CSV with %d rows to %s", len(dataframe), args.output_csv)
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    configure_logging(args.log_level)
    console = Console()
    try:
        estimator, settings = _load_estimator(args.config)
    except (FileNotFoundError, ValueError, TypeError) as exc:
        raise SystemExit(f"Invalid configuration: {exc}") from exc

    try:
        if args.command == "cities":
            return _run_cities(console, estimator)
        if args.command == "distance":
            return _run_distance(console, estimator, args)
        return _run_estimate(console, estimator, settings, args)
    except DistanceNotFoundError as exc:
        raise SystemExit(f"{exc}. Pass --distance to estimate anyway.") from exc
    except InvalidArgumentError as exc:
        raise SystemExit(str(exc)) from exc


if __name__ == "__main__":
    raise SystemExit(main())
