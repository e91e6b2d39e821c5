"""Attempt trail and pipeline outcome models.

Attempts are created fresh per pipeline run, handed to the run's
``on_attempt`` callback, and returned in the outcome. Nothing here is
persisted.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any, Union


class Stage(str, enum.Enum):
    """Pipeline stage an attempt belongs to."""

    VALIDATION = "validation"
    COMPILE = "compile"


class Outcome(str, enum.Enum):
    """Whether an attempt was accepted by its stage."""

    ACCEPTED = "accepted"
    REJECTED = "rejected"


@dataclass(frozen=True)
class Attempt:
    """One pass through a stage.

    Attributes:
        stage: Stage that judged the candidate.
        index: 0 for the first pass of the stage, then the retry number.
        outcome: ACCEPTED or REJECTED.
        findings: Error messages (validation) or the compiler diagnostic.
        fixes: Auto-fix records applied to the candidate before judging.
        warnings: Non-blocking validation warnings.
    """

    stage: Stage
    index: int
    outcome: Outcome
    findings: tuple[str, ...] = ()
    fixes: tuple[str, ...] = ()
    warnings: tuple[str, ...] = ()

    @property
    def accepted(self) -> bool:
        return self.outcome == Outcome.ACCEPTED


@dataclass(frozen=True)
class PipelineSuccess:
    """A compiled artifact together with how it was obtained.

    Attributes:
        artifact: Compiler output.
        metadata: Metadata reported by the compiler.
        source: The validated source that was compiled.
        attempts: Chronological attempt trail.
        warnings: Validation warnings of the accepted source.
    """

    artifact: str
    metadata: dict[str, Any] = field(default_factory=dict)
    source: str = ""
    attempts: tuple[Attempt, ...] = ()
    warnings: tuple[str, ...] = ()

    @property
    def healed(self) -> bool:
        """True when at least one attempt was rejected before success."""
        return any(not a.accepted for a in self.attempts)


@dataclass(frozen=True)
class PipelineFailure:
    """Terminal failure, as a value."""

    exhausted_stage: Stage
    last_errors: tuple[str, ...] = ()
    errors: tuple[str, ...] = ()
    attempts: tuple[Attempt, ...] = ()


PipelineOutcome = Union[PipelineSuccess, PipelineFailure]
