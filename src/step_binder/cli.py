"""Command line interface for step-binder."""

import json
import logging
import math
from pathlib import Path
from typing import Any

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from step_binder.cli_modules.utils.param_parsing import build_step_callable
from step_binder.core.binding.engine import BindingEngine
from step_binder.core.binding.placeholders import extract_placeholders
from step_binder.core.binding.result_types import BindingResult
from step_binder.core.config.config_loader import load_config
from step_binder.exceptions import StepBinderError


def _parse_examples(examples: tuple[str, ...]) -> dict[str, str]:
    values: dict[str, str] = {}
    for example in examples:
        name, sep, value = example.partition("=")
        if not sep or not name:
            raise click.BadParameter(
                f"expected NAME=VALUE, got {example!r}", param_hint="--example"
            )
        values[name] = value
    return values


def _json_value(value: Any) -> Any:
    """Render non-finite floats as text so the payload stays strict JSON."""
    if isinstance(value, float) and not math.isfinite(value):
        return str(value)
    return value


def _display_result(result: BindingResult, param_names: list[str]) -> None:
    """Render a binding result as a rich table."""
    console = Console()
    console.print(f"[bold]{escape(result.step)}[/bold]")
    if result.has_projections:
        console.print(f"Projections: {escape(', '.join(result.projections))}")

    table = Table(show_header=True, header_style="bold")
    table.add_column("#", justify="right")
    table.add_column("Parameter")
    table.add_column("Value")
    table.add_column("Type")
    for index, (name, value) in enumerate(
        zip(param_names, result.arguments, strict=True)
    ):
        table.add_row(
            str(index),
            name,
            "[dim]None[/dim]" if value is None else escape(repr(value)),
            type(value).__name__,
        )
    console.print(table)


@click.group()
@click.version_option(package_name="step-binder")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def cli(verbose: bool) -> None:
    """step-binder - bind BDD steps to typed step-definition arguments."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@cli.command()
@click.option("--kind", default="Given", show_default=True, help="Step keyword")
@click.option("--step", "step_text", required=True, help="Literal step text")
@click.option("--pattern", default=None, help="Pattern declared on the step")
@click.option(
    "--param",
    "params",
    multiple=True,
    help="Parameter as NAME:TYPE[:MARKER=VALUE], e.g. count:int:assigned=count",
)
@click.option(
    "--example",
    "examples",
    multiple=True,
    help="Projection value as NAME=VALUE (repeatable)",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Config file (defaults to .step-binder.yaml)",
)
@click.option("--json", "as_json", is_flag=True, help="Print the result as JSON")
def bind(
    kind: str,
    step_text: str,
    pattern: str | None,
    params: tuple[str, ...],
    examples: tuple[str, ...],
    config_path: Path | None,
    as_json: bool,
) -> None:
    """Bind a step to a parameter list and show the resolved arguments."""
    try:
        engine = BindingEngine(load_config(config_path))
        method = build_step_callable(list(params))
        result = engine.build(
            kind, step_text, method, _parse_examples(examples), pattern
        )
    except click.BadParameter as e:
        raise click.ClickException(e.format_message()) from e
    except StepBinderError as e:
        raise click.ClickException(str(e)) from e

    param_names = [spec.name for spec in engine.parameters_of(method)]
    if as_json:
        payload: dict[str, Any] = result.to_dict()
        payload.pop("method")
        payload["arguments"] = [_json_value(value) for value in result.arguments]
        payload["parameters"] = param_names
        click.echo(json.dumps(payload, indent=2, allow_nan=False))
        return

    _display_result(result, param_names)


@cli.command()
@click.argument("text")
def placeholders(text: str) -> None:
    """List the <name> placeholders in TEXT, in order of appearance."""
    for name in extract_placeholders(text):
        click.echo(name)


if __name__ == "__main__":
    cli()
