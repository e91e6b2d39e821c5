"""vibeguard fix -- apply deterministic repairs to a component file."""

from __future__ import annotations

from pathlib import Path

import click

from vibeguard.autofix import autofix, strip_typescript
from vibeguard.cli.formatting import format_error, format_fixes, get_console
from vibeguard.models.fixes import AutoFixResult


@click.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--write", "-w", is_flag=True, help="Write the fixed source back to PATH.")
@click.option(
    "--check",
    "check_only",
    is_flag=True,
    help="Only report; exit with status 1 if fixes would be applied.",
)
@click.option(
    "--strip-types",
    is_flag=True,
    help="Also erase TypeScript syntax, as the pipeline does before compiling.",
)
def fix(path: Path, write: bool, check_only: bool, strip_types: bool) -> None:
    """Auto-fix PATH and print the result (or write it with --write)."""
    console = get_console()
    try:
        source = path.read_text(encoding="utf-8")
    except OSError as e:
        format_error(str(e), console)
        raise SystemExit(1) from None

    result = autofix(source)
    if strip_types:
        erased = strip_typescript(result.code)
        if erased != result.code:
            result = AutoFixResult(code=erased, fixes=(*result.fixes, "Erased TypeScript syntax"))
    format_fixes(result, console)
    if check_only:
        if result.fixes:
            raise SystemExit(1)
        return
    if write:
        if result.fixes:
            path.write_text(result.code, encoding="utf-8")
            console.print(f"Wrote {path}", highlight=False)
        return
    click.echo()
    click.echo(result.code, nl=not result.code.endswith("\n"))
