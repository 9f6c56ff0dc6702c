from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import typer

from cli.client import ApiClient
from cli.config import CLIConfig, load_config
from cli.render import render_json, render_response, render_results
from services.errors import LogEvaluationError
from services.log_evaluator import build_default_evaluator
from settings import get_settings


@dataclass
class CLIState:
    config: CLIConfig
    client: ApiClient


app = typer.Typer(
    help="Evaluate home sensor logs against their reference environment.",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def _get_state(ctx: typer.Context) -> CLIState:
    state = ctx.obj
    if not isinstance(state, CLIState):
        raise typer.Exit(code=1, message="CLI state is uninitialized.")
    return state


@app.callback()
def main(
    ctx: typer.Context,
    base_url: Optional[str] = typer.Option(
        None,
        "--base-url",
        "-b",
        help="Evaluator API base URL (defaults to API_BASE_URL env or http://localhost:8000).",
    ),
    timeout: Optional[float] = typer.Option(
        None,
        "--timeout",
        help="Seconds to wait for the API to respond.",
    ),
) -> None:
    """Entry point for the CLI."""
    config = load_config(base_url=base_url, timeout=timeout)
    client = ApiClient(config)
    ctx.obj = CLIState(config=config, client=client)
    ctx.call_on_close(client.close)


@app.command("evaluate")
def evaluate_command(
    file: Path = typer.Argument(..., exists=True, dir_okay=False, readable=True, help="Path to the sensor log."),
    as_json: bool = typer.Option(False, "--json", help="Print the verdicts as a JSON object."),
) -> None:
    """Evaluate a local sensor log without contacting the API."""
    encoding = get_settings().log_encoding
    try:
        text = file.read_text(encoding=encoding)
    except UnicodeDecodeError as exc:
        typer.secho(f"{file} is not valid {encoding} text.", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from exc

    try:
        results = build_default_evaluator().evaluate_log(text)
    except LogEvaluationError as exc:
        typer.secho(f"Could not evaluate {file}: {exc}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from exc

    if as_json:
        render_json(results)
    else:
        render_results(results)


@app.command("submit")
def submit_command(
    ctx: typer.Context,
    file: Path = typer.Argument(..., exists=True, dir_okay=False, readable=True, help="Path to the sensor log."),
    as_json: bool = typer.Option(False, "--json", help="Print the verdicts as a JSON object."),
) -> None:
    """Upload a sensor log to the evaluation API and show the verdicts."""
    state = _get_state(ctx)
    if as_json:
        render_json(state.client.submit_log(file)["results"])
        return

    typer.echo(f"Submitting {file} to {state.config.base_url} ...")
    payload = state.client.submit_log(file)
    typer.echo()
    render_response(payload)
