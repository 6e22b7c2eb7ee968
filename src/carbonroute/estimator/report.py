"""Rendering helpers that turn estimator results into rich tables and DataFrames."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Sequence

import pandas as pd
from rich.console import Console
from rich.table import Table

from carbonroute.emissions.domain_types import ComparisonEntry
from carbonroute.emissions.factor_table import EmissionFactorTable

from .trip_estimator import TripEstimate

COMPARISON_COLUMNS = ["mode", "label", "emission_kg", "percent_vs_car"]
BAR_CELLS = 20


def comparison_band(percent_vs_car: float) -> str:
    """Colour band for a mode's share of the car emission."""
    if percent_vs_car > 100:
        return "red"
    if percent_vs_car > 75:
        return "dark_orange"
    if percent_vs_car > 25:
        return "yellow"
    return "green"


def bar_width(emission_kg: float, max_emission_kg: float) -> float:
    """Bar length as a percentage of the dirtiest mode (0 when all emit nothing)."""
    if max_emission_kg == 0:
        return 0.0
    return emission_kg / max_emission_kg * 100.0


def comparison_to_dataframe(
    entries: Iterable[ComparisonEntry], factor_table: EmissionFactorTable | None = None
) -> pd.DataFrame:
    table = factor_table or EmissionFactorTable()
    rows = [
        {
            "mode": entry.mode.value,
            "label": table.metadata_of(entry.mode).label,
            "emission_kg": entry.emission_kg,
            "percent_vs_car": entry.percent_vs_car,
        }
        for entry in entries
    ]
    return pd.DataFrame(rows, columns=COMPARISON_COLUMNS)


def write_comparison_csv(path: str | Path, dataframe: pd.DataFrame) -> None:
    output_path = Path(path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    dataframe.to_csv(output_path, index=False)


def _fmt(value: float, decimals: int = 2) -> str:
    return f"{value:,.{decimals}f}"


def _money(value: float, currency: str) -> str:
    return f"{currency} {_fmt(value)}"


def build_result_table(estimate: TripEstimate, factor_table: EmissionFactorTable) -> Table:
    meta = factor_table.metadata_of(estimate.mode)
    table = Table(title="CO2 Emission Result", show_header=True, header_style="bold cyan")
    table.add_column("Metric", style="bold")
    table.add_column("Value", justify="right", style="green")
    table.add_row("Route", f"{estimate.origin} → {estimate.destination}")
    table.add_row("Distance", f"{_fmt(estimate.distance_km, 0)} km ({estimate.distance_source})")
    table.add_row("Transport mode", f"{meta.icon} {meta.label}".strip())
    table.add_row("CO2 emission", f"{_fmt(estimate.emission_kg)} kg", style="bold yellow")
    if not estimate.is_baseline:
        baseline_label = factor_table.metadata_of(estimate.baseline_mode).label
        table.add_row(
            f"Savings vs {baseline_label}",
            f"{_fmt(estimate.savings.saved_kg)} kg ({_fmt(estimate.savings.percent_saved)}%)",
        )
    return table


def build_comparison_table(
    entries: Sequence[ComparisonEntry],
    factor_table: EmissionFactorTable,
    selected: str | None = None,
) -> Table:
    max_emission = max((entry.emission_kg for entry in entries), default=0.0)
    table = Table(title="Transport Mode Comparison", show_header=True, header_style="bold cyan")
    table.add_column("Mode", style="bold")
    table.add_column("Emission (kg CO2)", justify="right")
    table.add_column("vs. Car", justify="right")
    table.add_column("", width=BAR_CELLS)
    for entry in entries:
        meta = factor_table.metadata_of(entry.mode)
        band = comparison_band(entry.percent_vs_car)
        cells = round(bar_width(entry.emission_kg, max_emission) / 100 * BAR_CELLS)
        label = f"{meta.icon} {meta.label}".strip()
        if selected is not None and entry.mode.value == selected:
            label += " [bold magenta](selected)[/bold magenta]"
        table.add_row(
            label,
            _fmt(entry.emission_kg),
            f"{_fmt(entry.percent_vs_car, 0)}%",
            f"[{band}]{'█' * cells}[/{band}]",
        )
    return table


def build_credits_table(estimate: TripEstimate) -> Table:
    title = "Carbon Compensation"
    if estimate.is_surplus_emission:
        title += " (surplus emission vs baseline)"
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("Metric", style="bold")
    table.add_column("Value", justify="right", style="green")
    table.add_row("Credits", _fmt(estimate.credits, 4))
    table.add_row("Estimated cost", _money(estimate.price.average, estimate.currency))
    table.add_row(
        "Range",
        f"{_money(estimate.price.min, estimate.currency)} - {_money(estimate.price.max, estimate.currency)}",
    )
    return table


def print_estimate(console: Console, estimate: TripEstimate, factor_table: EmissionFactorTable) -> None:
    console.print(build_result_table(estimate, factor_table))
    console.print(build_comparison_table(estimate.comparison, factor_table, selected=estimate.mode.value))
    console.print(build_credits_table(estimate))
    if estimate.is_surplus_emission:
        console.print(
            "[yellow]This trip is a surplus emission: the selected mode emits more than the "
            "baseline, so negative credits represent CO2 that would need offsetting.[/yellow]"
        )


__all__ = [
    "bar_width",
    "build_comparison_table",
    "build_credits_table",
    "build_result_table",
    "comparison_band",
    "comparison_to_dataframe",
    "print_estimate",
    "write_comparison_csv",
]
