"""ctrlplane-core CLI.

Inspection helpers for wire payloads: `ctrlplane-core normalize|identity|value FILE`.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import typer

from ctrlplane_core.contracts.errors import CtrlplaneModelError
from ctrlplane_core.model.filter_codec import decode, encode, identity as filter_identity
from ctrlplane_core.model.value_codec import from_dynamic

app = typer.Typer(add_completion=False, no_args_is_help=True)


@app.callback()
def main() -> None:
    """ctrlplane-core CLI."""
    return


def _load_json(path: Path) -> Any:
    if not path.exists():
        typer.echo(f"File not found: {path}")
        raise typer.Exit(1)
    try:
        return json.loads(path.read_text())
    except json.JSONDecodeError as e:
        typer.echo(f"Invalid JSON in {path}: {e}")
        raise typer.Exit(1)


@app.command()
def normalize(
    path: Path = typer.Argument(..., help="JSON file holding a wire filter"),
) -> None:
    """Decode and re-encode a wire filter, printing the normalized form."""
    raw = _load_json(path)
    try:
        wire = encode(decode(raw))
    except CtrlplaneModelError as e:
        typer.echo(f"Error: {e}")
        raise typer.Exit(1)
    typer.echo(json.dumps(wire, indent=2))


@app.command()
def identity(
    path: Path = typer.Argument(..., help="JSON file holding a wire filter"),
) -> None:
    """Print the registry identity of a wire filter."""
    raw = _load_json(path)
    try:
        typer.echo(filter_identity(decode(raw)))
    except CtrlplaneModelError as e:
        typer.echo(f"Error: {e}")
        raise typer.Exit(1)


@app.command()
def value(
    path: Path = typer.Argument(..., help="JSON file holding a variable value"),
) -> None:
    """Print the tagged literal/reference form of a JSON value."""
    raw = _load_json(path)
    try:
        tagged = from_dynamic(raw)
    except CtrlplaneModelError as e:
        typer.echo(f"Error: {e}")
        raise typer.Exit(1)
    typer.echo(tagged.model_dump_json(indent=2, exclude_none=True))
