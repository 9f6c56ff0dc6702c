from __future__ import annotations

import json
from typing import Any, Dict, Iterable, Mapping

import typer

_VERDICT_COLORS = {
    "ultra precise": typer.colors.GREEN,
    "very precise": typer.colors.GREEN,
    "precise": typer.colors.YELLOW,
    "keep": typer.colors.GREEN,
    "discard": typer.colors.RED,
}


def echo_heading(text: str) -> None:
    typer.secho(text, bold=True)


def echo_key_values(pairs: Iterable[tuple[str, Any]]) -> None:
    for key, value in pairs:
        typer.echo(f"{key}: {value}")


def render_json(results: Mapping[str, str]) -> None:
    typer.echo(json.dumps(dict(results), indent=2))


def render_results(results: Mapping[str, str]) -> None:
    echo_heading("Sensor Verdicts")
    if not results:
        typer.echo("No sensors with readings found.")
        return
    width = max(len(name) for name in results)
    for name, verdict in results.items():
        typer.echo(f"  {name.ljust(width)}  ", nl=False)
        typer.secho(verdict, fg=_VERDICT_COLORS.get(verdict))


def render_response(payload: Dict[str, Any]) -> None:
    render_results(payload.get("results") or {})
    typer.echo()
    echo_key_values(
        [
            ("sensor_count", payload.get("sensor_count")),
            ("processing_ms", payload.get("processing_ms")),
        ]
    )
