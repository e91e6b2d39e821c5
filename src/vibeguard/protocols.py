"""Collaborator protocols for the self-healing pipeline.

The pipeline never talks to a model or a bundler directly; it is handed
objects satisfying these protocols. Both are read-only from the
pipeline's point of view and must be safe to call from whichever thread
runs the pipeline.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Protocol, runtime_checkable

from vibeguard.models.catalog import ProviderSelection


@runtime_checkable
class Generator(Protocol):
    """Turns instruction text into raw artifact source.

    Timeouts and transport retries are the generator's responsibility.
    Exceptions propagate out of the pipeline unchanged.
    """

    def generate(self, instruction: str) -> str:
        """Return artifact source for ``instruction``."""
        ...


@dataclass(frozen=True)
class CompileOutput:
    """What a compiler returns for an accepted artifact."""

    artifact: str
    metadata: dict[str, Any] = field(default_factory=dict)


@runtime_checkable
class Compiler(Protocol):
    """Compiles validated source into an executable artifact.

    Any exception raised means "compile failed"; its message is fed back
    to the generator. ``vibeguard.exceptions.CompileError`` is available
    for compilers that want a dedicated type.
    """

    def compile(self, source: str, working_directory: Path | None) -> CompileOutput:
        """Compile ``source`` relative to ``working_directory``."""
        ...


GeneratorFactory = Callable[[ProviderSelection], Generator]
