# src/pdasim/cli.py
"""pdasim Command Line Interface.

Entry point for the pdasim CLI tool.
"""

from __future__ import annotations

import json
import random
import sys
from pathlib import Path
from typing import Literal

import typer
from pydantic import ValidationError

from pdasim import __version__
from pdasim.contracts.errors import TableValidationError
from pdasim.contracts.results import EvaluationResult
from pdasim.core.config import PdaSettings, load_settings
from pdasim.core.table import TransitionTable, load_table_file
from pdasim.engine.processor import PdaEngine

__all__ = ["app"]

# Exit codes for `run`
EXIT_ACCEPTED = 0
EXIT_REJECTED = 1
EXIT_INVALID_INPUT = 2

app = typer.Typer(
    name="pdasim",
    help="pdasim: pushdown automaton simulation with out-of-order token admission.",
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"pdasim version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    version: bool | None = typer.Option(
        None,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose/debug logging.",
    ),
    json_logs: bool = typer.Option(
        False,
        "--json-logs",
        help="Output structured JSON logs (for machine processing).",
    ),
) -> None:
    """pdasim: pushdown automaton simulation."""
    from pdasim.core.logging import configure_logging

    # Commands that load a settings file reconfigure logging; these flags still win
    ctx.ensure_object(dict).update(verbose=verbose, json_logs=json_logs)
    configure_logging(json_output=json_logs, level="DEBUG" if verbose else "WARNING")


def _format_validation_error(
    title: str,
    message: str,
    hint: str | None = None,
    details: list[str] | None = None,
) -> None:
    """Display a formatted validation error with optional hint and details."""
    from rich.console import Console
    from rich.panel import Panel
    from rich.text import Text

    console = Console(stderr=True)

    content = Text()
    content.append(message, style="white")

    if details:
        content.append("\n\n")
        for detail in details:
            content.append(f"  • {detail}\n", style="dim")

    if hint:
        content.append("\n")
        content.append("Hint: ", style="yellow bold")
        content.append(hint, style="yellow")

    console.print(Panel(content, title=f"[red bold]{title}[/]", border_style="red", expand=False))


def _load_table_or_exit(table_path: Path, exit_code: int) -> TransitionTable:
    try:
        return load_table_file(table_path)
    except FileNotFoundError:
        _format_validation_error(
            title="File Not Found",
            message=f"Transition table file does not exist: {table_path}",
            hint="Check the path and ensure the file exists.",
        )
        raise typer.Exit(exit_code) from None
    except TableValidationError as e:
        _format_validation_error(
            title="Invalid Transition Table",
            message=e.message,
            details=e.errors,
            hint="Check states, alphabets, start_state, eos and every transition.",
        )
        raise typer.Exit(exit_code) from None


def _load_settings_or_exit(settings_path: Path) -> PdaSettings:
    try:
        return load_settings(settings_path)
    except FileNotFoundError:
        _format_validation_error(
            title="File Not Found",
            message=f"Settings file does not exist: {settings_path}",
            hint="Check the path and ensure the file exists.",
        )
        raise typer.Exit(EXIT_INVALID_INPUT) from None
    except ValidationError as e:
        details = [f"{'.'.join(str(x) for x in error['loc'])}: {error['msg']}" for error in e.errors()]
        _format_validation_error(
            title="Configuration Validation Failed",
            message=f"Invalid settings in {settings_path.name}",
            details=details,
            hint="Check field names, types, and required values.",
        )
        raise typer.Exit(EXIT_INVALID_INPUT) from None


def _print_result(result: EvaluationResult, arrival_order: list[int] | None) -> None:
    verdict = "ACCEPTED" if result.accepted else "REJECTED"
    color = typer.colors.GREEN if result.accepted else typer.colors.RED

    typer.echo(f"Input: {' '.join(result.tokens) if result.tokens else '(empty)'}")
    if arrival_order is not None:
        typer.echo(f"Arrival order: {arrival_order}")
    typer.secho(f"Result: {verdict}", fg=color, bold=True)
    typer.echo(f"State path: {' -> '.join(result.transitions_taken)}")
    typer.echo(f"Final state: {result.final_state}, stack: {list(result.stack)}")
    if result.error is not None:
        typer.secho(f"Stopped: {result.error.message}", fg=typer.colors.YELLOW)


@app.command()
def run(
    ctx: typer.Context,
    table: str = typer.Option(
        ...,
        "--table",
        "-t",
        help="Path to transition table file (YAML or JSON).",
    ),
    tokens: str | None = typer.Option(
        None,
        "--tokens",
        help='Whitespace-separated input tokens, e.g. "a a b b".',
    ),
    input_file: str | None = typer.Option(
        None,
        "--input",
        "-i",
        help="Read input tokens from this file (default: stdin).",
    ),
    shuffle_seed: int | None = typer.Option(
        None,
        "--shuffle-seed",
        help="Present tokens in a random order derived from this seed.",
    ),
    settings: str | None = typer.Option(
        None,
        "--settings",
        "-s",
        help="Path to settings YAML file.",
    ),
    output_format: Literal["console", "json"] = typer.Option(
        "console",
        "--format",
        "-f",
        help="Output format: 'console' (human-readable) or 'json' (structured JSON).",
    ),
) -> None:
    """Evaluate an input token stream against a transition table."""
    pda_settings = PdaSettings()
    if settings is not None:
        pda_settings = _load_settings_or_exit(Path(settings).expanduser())
        from pdasim.core.logging import configure_from_settings

        flags = ctx.ensure_object(dict)
        configure_from_settings(
            pda_settings.logging,
            verbose=flags.get("verbose", False),
            json_logs=flags.get("json_logs", False),
        )

    pda_table = _load_table_or_exit(Path(table).expanduser(), EXIT_INVALID_INPUT)

    if tokens is not None and input_file is not None:
        typer.secho("Error: use either --tokens or --input, not both.", fg=typer.colors.RED, err=True)
        raise typer.Exit(EXIT_INVALID_INPUT)
    if tokens is not None:
        raw_input = tokens
    elif input_file is not None:
        input_path = Path(input_file).expanduser()
        if not input_path.exists():
            typer.secho(f"Error: input file not found: {input_path}", fg=typer.colors.RED, err=True)
            raise typer.Exit(EXIT_INVALID_INPUT)
        raw_input = input_path.read_text(encoding="utf-8")
    else:
        raw_input = sys.stdin.read()

    token_list = raw_input.split()
    arrival_order: list[int] | None = None
    if shuffle_seed is not None:
        arrival_order = list(range(len(token_list)))
        random.Random(shuffle_seed).shuffle(arrival_order)

    engine = PdaEngine(pda_table, max_input_length=pda_settings.engine.max_input_length)
    result = engine.evaluate(token_list, arrival_order=arrival_order)

    if output_format == "json":
        payload = result.to_dict()
        payload["arrival_order"] = arrival_order
        typer.echo(json.dumps(payload, indent=2))
    else:
        _print_result(result, arrival_order)

    raise typer.Exit(EXIT_ACCEPTED if result.accepted else EXIT_REJECTED)


@app.command()
def validate(
    table: str = typer.Option(
        ...,
        "--table",
        "-t",
        help="Path to transition table file (YAML or JSON).",
    ),
) -> None:
    """Validate a transition table without running it."""
    table_path = Path(table).expanduser()
    pda_table = _load_table_or_exit(table_path, 1)

    summary = pda_table.summary()
    typer.secho(f"✓ {table_path.name} is valid", fg=typer.colors.GREEN, bold=True)
    typer.echo(f"  Name: {summary['name']}")
    typer.echo(f"  States: {', '.join(summary['states'])} (start: {summary['start_state']})")
    typer.echo(f"  Accepting: {', '.join(summary['accepting_states'])}")
    typer.echo(f"  Input alphabet: {', '.join(summary['input_alphabet'])}")
    typer.echo(f"  Stack alphabet: {', '.join(summary['stack_alphabet'])} (eos: {summary['eos']})")
    typer.echo(f"  Rules: {len(summary['transitions'])}")


if __name__ == "__main__":
    app()
