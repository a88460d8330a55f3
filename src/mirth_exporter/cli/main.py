"""Mirth exporter CLI - Main entry point."""

from __future__ import annotations

import json
from typing import Optional

import typer
import uvicorn

from mirth_exporter import __version__
from mirth_exporter.api_clients import MirthClient
from mirth_exporter.cli.helpers import (
    console,
    load_settings,
    observations_table,
    result_as_dict,
)
from mirth_exporter.config import configure_logging
from mirth_exporter.metrics import MirthCollector, default_registry
from mirth_exporter.utils import parse_listen_address

app = typer.Typer(
    name="mirth-exporter",
    help="Prometheus exporter for Mirth Connect channel statistics",
    add_completion=False,
)


@app.command()
def serve(
    listen_address: Optional[str] = typer.Option(
        None,
        "--web.listen-address",
        help="Address to listen on for telemetry [env: LISTEN_ADDRESS, default :9141]",
    ),
    metrics_path: Optional[str] = typer.Option(
        None,
        "--web.telemetry-path",
        help="Path under which to expose metrics [env: METRICS_PATH, default /metrics]",
    ),
):
    """Serve metrics over HTTP, querying Mirth on every scrape."""
    from mirth_exporter.api import create_app

    settings = load_settings(listen_address=listen_address, metrics_path=metrics_path)
    try:
        host, port = parse_listen_address(settings.listen_address)
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    uvicorn.run(
        create_app(settings),
        host=host,
        port=port,
        log_level=settings.log_level.lower(),
    )


@app.command()
def scrape(
    json_output: bool = typer.Option(
        False,
        "--json", "-j",
        help="Output results as JSON",
    ),
):
    """Run a single collection cycle and print the observations."""
    settings = load_settings()
    configure_logging(
        level=settings.log_level,
        format=settings.log_format,
        sanitize_logs=settings.sanitize_logs,
    )
    registry = default_registry()

    with MirthClient.from_settings(settings) as client:
        result = MirthCollector(client, registry).run_cycle()

    if json_output:
        print(json.dumps(result_as_dict(result), indent=2))
    elif result.available:
        console.print(observations_table(result, registry.namespace))
        console.print(f"[dim]Collected in {result.duration_seconds:.3f}s[/dim]")
    else:
        console.print(f"[red]Mirth at {settings.mirth_endpoint} is not available[/red]")

    if not result.available:
        raise typer.Exit(1)


@app.command()
def version():
    """Show the exporter version."""
    console.print(f"mirth-exporter {__version__}")


def main():
    app()


if __name__ == "__main__":
    main()
