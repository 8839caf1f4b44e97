from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import typer

from cli.client import ApiClient
from cli.config import SOURCES, CLIConfig, load_config
from cli.render import render_heatmap, render_prediction, render_statistics


@dataclass
class CLIState:
    config: CLIConfig
    client: ApiClient


app = typer.Typer(
    help="Utilities for querying the sensor analytics service.",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def _get_state(ctx: typer.Context) -> CLIState:
    state = ctx.obj
    if not isinstance(state, CLIState):
        raise typer.Exit(code=1, message="CLI state is uninitialized.")
    return state


def _resolve_source(state: CLIState) -> str:
    chosen = state.config.source
    if chosen not in SOURCES:
        raise typer.BadParameter(f"Source must be one of: {', '.join(SOURCES)}.")
    return chosen


@app.callback()
def main(
    ctx: typer.Context,
    base_url: Optional[str] = typer.Option(
        None,
        "--base-url",
        "-b",
        help="Analytics API base URL (defaults to API_BASE_URL env or http://localhost:8000).",
    ),
    timeout: Optional[float] = typer.Option(
        None,
        "--timeout",
        help="HTTP timeout in seconds.",
    ),
    source: Optional[str] = typer.Option(
        None,
        "--source",
        "-s",
        help="Where readings come from: csv or firebase.",
    ),
) -> None:
    """Entry point for the CLI."""
    config = load_config(base_url=base_url, timeout=timeout, source=source)
    client = ApiClient(config)
    ctx.obj = CLIState(config=config, client=client)
    ctx.call_on_close(client.close)


@app.command("stats")
def stats_command(
    ctx: typer.Context,
    complete_only: bool = typer.Option(
        False,
        "--complete-only/--all",
        help="Only use time-slices reported by every device (firebase source).",
    ),
) -> None:
    """Summarize every metric over the available readings."""
    state = _get_state(ctx)
    source = _resolve_source(state)
    readings = state.client.get_readings(source, filter_complete=complete_only)
    statistics = state.client.get_statistics(readings)
    render_statistics(statistics, record_count=len(readings))


@app.command("predict")
def predict_command(
    ctx: typer.Context,
    target_time: str = typer.Argument(..., help="Time of day formatted HH-MM-SS."),
) -> None:
    """Predict the temperature at a time of day."""
    state = _get_state(ctx)
    readings = state.client.get_readings(_resolve_source(state))
    payload = state.client.predict(readings, target_time)
    render_prediction(payload)


@app.command("heatmap")
def heatmap_command(
    ctx: typer.Context,
    time: str = typer.Argument(..., help="Time bucket of the slice, e.g. 12-00-00."),
    resolution: Optional[int] = typer.Option(
        None,
        "--resolution",
        "-r",
        min=1,
        help="Grid cells per side (server default when omitted).",
    ),
) -> None:
    """Interpolate one time-slice and summarize the resulting grid."""
    state = _get_state(ctx)
    readings = state.client.get_readings(_resolve_source(state))
    payload = state.client.heatmap(readings, time, resolution=resolution)
    render_heatmap(payload)
