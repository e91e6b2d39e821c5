"""vibeguard check -- validate a generated component file."""

from __future__ import annotations

import json
from pathlib import Path

import click

from vibeguard.cli.formatting import format_error, format_report, get_console
from vibeguard.engine.preamble import preamble_fields
from vibeguard.validation import validate


@click.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--policy",
    "policy_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="JSON file with a validation policy.",
)
@click.option("--allow", multiple=True, help="Additional allowed import (repeatable).")
@click.option("--json", "as_json", is_flag=True, help="Print the report as JSON.")
def check(path: Path, policy_path: Path | None, allow: tuple[str, ...], as_json: bool) -> None:
    """Validate PATH and exit with status 1 if it has errors."""
    from vibeguard.cli import _load_policy

    console = get_console()
    try:
        policy = _load_policy(policy_path, allow)
        source = path.read_text(encoding="utf-8")
    except Exception as e:
        format_error(str(e), console)
        raise SystemExit(1) from None

    report = validate(source, policy)
    if as_json:
        click.echo(json.dumps(report.to_dict(), indent=2))
    else:
        title = preamble_fields(source).get("title")
        format_report(report, console, path=str(path), title=title)
    if not report.is_valid:
        raise SystemExit(1)
