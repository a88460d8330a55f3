"""Shared helpers for CLI modules: settings loading and result rendering."""

from __future__ import annotations

from typing import Any

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from mirth_exporter.config import Settings
from mirth_exporter.metrics import CollectionResult

console = Console()


def load_settings(**overrides: Any) -> Settings:
    """Load settings from the environment, applying non-None CLI overrides."""
    overrides = {k: v for k, v in overrides.items() if v is not None}
    try:
        return Settings(**overrides)
    except ValidationError as e:
        console.print("[red]Invalid configuration:[/red]")
        for error in e.errors():
            field = ".".join(str(part) for part in error["loc"]) or "settings"
            console.print(f"  • {field.upper()}: {error['msg']}")
        raise typer.Exit(1)


def result_as_dict(result: CollectionResult) -> dict[str, Any]:
    """JSON-friendly view of a collection result."""
    return {
        "available": result.available,
        "version": result.version_label,
        "duration_seconds": round(result.duration_seconds, 6),
        "observations": [
            {
                "metric": o.metric_name,
                "kind": o.kind.value,
                "labels": dict(o.labels),
                "value": o.value,
            }
            for o in result.observations
        ],
    }


def observations_table(result: CollectionResult, namespace: str) -> Table:
    """Display observations in a table."""
    table = Table(title=f"Mirth {result.version_label or 'unknown version'}")
    table.add_column("Metric", style="cyan")
    table.add_column("Labels")
    table.add_column("Value", justify="right", style="bold")

    for observation in result.observations:
        labels = ", ".join(f'{k}="{v}"' for k, v in observation.labels.items())
        table.add_row(
            f"{namespace}_{observation.metric_name}",
            labels,
            f"{observation.value:g}",
        )
    return table
