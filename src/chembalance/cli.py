"""Command-line entrypoints for chembalance."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Annotated, Any, Dict

import typer

from chembalance.balancer import balance_string
from chembalance.config import BalancerConfig, load_config
from chembalance.elements import PeriodicTable
from chembalance.errors import ConfigError, ParseError
from chembalance.formula import parse_or_raise
from chembalance.models import Compound
from chembalance.solver import matrix_to_string
from chembalance.trace import Trace

app = typer.Typer(add_completion=False)

EXAMPLES = [
    "H2 + O2 -> H2O",
    "CH4 + O2 -> CO2 + H2O",
    "C6H12O6 + O2 -> CO2 + H2O",
    "Fe + O2 -> Fe2O3",
    "NH3 + O2 -> NO + H2O",
    "C2H6 + O2 -> CO2 + H2O",
    "Al + HCl -> AlCl3 + H2",
    "CaCO3 + HCl -> CaCl2 + CO2 + H2O",
    "Na + H2O -> NaOH + H2",
    "Mg + N2 -> Mg3N2",
]


@app.callback()
def main(
    log_level: Annotated[
        str, typer.Option(help="Logging level (DEBUG, INFO, WARNING, ...).")
    ] = "WARNING",
) -> None:
    """Balance chemical equations."""
    logging.basicConfig(
        level=log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _load(config_file: Path | None) -> BalancerConfig:
    if config_file is None:
        return BalancerConfig()
    try:
        return load_config(config_file)
    except ConfigError as e:
        typer.echo(f"Invalid configuration: {e}", err=True)
        raise typer.Exit(code=2)


def _trace_payload(trace: Trace) -> Dict[str, Any]:
    return {
        "notes": trace.notes,
        "steps": [
            {
                "operation": step.operation,
                "description": step.description,
                "matrix": step.matrix.tolist() if step.matrix is not None else None,
            }
            for step in trace.steps
        ],
    }


@app.command("balance")
def balance_command(
    equation: Annotated[str, typer.Argument(help='Equation such as "H2 + O2 -> H2O".')],
    steps: Annotated[bool, typer.Option(help="Show the elimination steps.")] = False,
    as_json: Annotated[bool, typer.Option("--json", help="Print the result as JSON.")] = False,
    config_file: Annotated[
        Path | None, typer.Option("--config", help="Path to JSON configuration file.")
    ] = None,
) -> None:
    """Balance one equation."""
    config = _load(config_file)
    trace = Trace(snapshots=config.record_trace)
    parsed, result = balance_string(equation, config=config, trace=trace)

    if as_json:
        payload = result.to_dict()
        if steps:
            payload["trace"] = _trace_payload(trace)
        typer.echo(json.dumps(payload, indent=2, ensure_ascii=False))
    else:
        if steps:
            for note in trace.notes:
                typer.echo(note)
            for index, step in enumerate(trace.steps, start=1):
                typer.echo(f"Step {index} [{step.operation}]: {step.description}")
                if step.matrix is not None:
                    typer.echo(matrix_to_string(step.matrix))
            typer.echo("")

        if result.success and parsed is not None:
            typer.echo(f"Balanced: {parsed.to_display_string()}")
            typer.echo("Coefficients: " + ", ".join(str(c) for c in result.coefficients))
            if result.imprecise:
                typer.echo("Warning: coefficients were approximated.")
        else:
            typer.echo(f"Balancing failed ({result.status.value}): {result.message}", err=True)

    if not result.success:
        raise typer.Exit(code=1)


@app.command("parse")
def parse_command(
    formula: Annotated[str, typer.Argument(help="Formula such as Ca(OH)2.")],
) -> None:
    """Show element counts and molar mass of a formula."""
    try:
        counts = parse_or_raise(formula)
    except ParseError as e:
        typer.echo(f"Parse error: {e}", err=True)
        raise typer.Exit(code=1)

    compound = Compound.from_formula(formula, PeriodicTable.standard())
    payload = {
        "formula": compound.formula,
        "elements": counts,
        "molar_mass": round(compound.molar_mass, 3),
        "valid": compound.valid,
    }
    if compound.error:
        payload["error"] = compound.error
    typer.echo(json.dumps(payload, indent=2))


@app.command("examples")
def examples_command() -> None:
    """List example equations."""
    for index, example in enumerate(EXAMPLES, start=1):
        typer.echo(f"{index}. {example}")


if __name__ == "__main__":
    app()
