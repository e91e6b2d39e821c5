"""Vibeguard CLI -- check and repair generated component files.

This module is NEVER imported from vibeguard/__init__.py.
It is only loaded via the ``vibeguard`` entry point defined in pyproject.toml.
"""

from __future__ import annotations

import logging
from pathlib import Path

try:
    import click
except ImportError:
    raise ImportError(
        "CLI dependencies not installed. Install with: pip install vibeguard[cli]"
    ) from None

from vibeguard._version import __version__
from vibeguard.models.config import ValidationPolicy


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
@click.version_option(__version__, prog_name="vibeguard")
def cli(verbose: bool) -> None:
    """Vibeguard: validate and repair LLM-generated UI components."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")


def _load_policy(policy_path: Path | None, allow: tuple[str, ...]) -> ValidationPolicy:
    """Build the validation policy from an optional JSON file plus --allow entries."""
    if policy_path is not None:
        policy = ValidationPolicy.model_validate_json(policy_path.read_text(encoding="utf-8"))
    else:
        policy = ValidationPolicy()
    if allow:
        policy = policy.with_allowed(*allow)
    return policy


# Register subcommands after cli group is defined
from vibeguard.cli.commands.check import check  # noqa: E402
from vibeguard.cli.commands.fix import fix  # noqa: E402

cli.add_command(check)
cli.add_command(fix)
