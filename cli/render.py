from __future__ import annotations

from typing import Any, Dict, Iterable, List

import typer


def echo_heading(text: str) -> None:
    typer.secho(text, bold=True)


def echo_key_values(pairs: Iterable[tuple[str, Any]]) -> None:
    for key, value in pairs:
        typer.echo(f"{key}: {value}")


def render_statistics(statistics: List[Dict[str, Any]], record_count: int) -> None:
    echo_heading(f"Statistics ({record_count} records)")
    if not statistics:
        typer.echo("No statistics available.")
        return
    for stat in statistics:
        typer.echo()
        typer.secho(stat.get("metric", "?"), fg=typer.colors.CYAN)
        echo_key_values(
            [
                ("average", stat.get("average")),
                ("min_value", f"{stat.get('min_value')} at {stat.get('time_at_min')}"),
                ("max_value", f"{stat.get('max_value')} at {stat.get('time_at_max')}"),
                ("variance", stat.get("variance")),
                ("std_deviation", stat.get("std_deviation")),
            ]
        )


def render_prediction(payload: Dict[str, Any]) -> None:
    echo_heading("Temperature Prediction")
    echo_key_values(
        [
            ("target_time", payload.get("target_time")),
            ("prediction", payload.get("prediction")),
        ]
    )


def render_heatmap(payload: Dict[str, Any]) -> None:
    echo_heading("Heatmap")
    points = payload.get("points") or []
    echo_key_values(
        [
            ("time", payload.get("time")),
            ("resolution", payload.get("resolution")),
            ("power", payload.get("power")),
            ("min_temperature", payload.get("min_temperature")),
            ("max_temperature", payload.get("max_temperature")),
            ("point_count", len(points)),
        ]
    )
    sensors = payload.get("sensors") or []
    if sensors:
        typer.echo("sensors:")
        for sensor in sensors:
            typer.echo(
                f"  - {sensor.get('device_id')}: {sensor.get('temperature')} "
                f"({sensor.get('latitude')}, {sensor.get('longitude')})"
            )
