"""Regeneration feedback strategies.

A strategy turns the base instruction plus the errors of a rejected
attempt into the next instruction. Strategies form an ordered list; the
pipeline picks the one matching the retry number and keeps using the
last one once the list runs out, so the retry cap and the number of
strategies can change independently.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Sequence

from vibeguard.models.attempts import Stage
from vibeguard.prompts.feedback import (
    build_compile_fix_prompt,
    build_minimal_prompt,
    build_validation_fix_prompt,
)


@dataclass(frozen=True)
class FeedbackContext:
    """Input to a feedback strategy.

    Attributes:
        stage: Stage that rejected the previous attempt.
        retry: 1-based retry number within the stage.
        instruction: The base instruction of the run.
        errors: Error messages that caused the rejection.
    """

    stage: Stage
    retry: int
    instruction: str
    errors: tuple[str, ...]


FeedbackStrategy = Callable[[FeedbackContext], str]


def targeted_fix(ctx: FeedbackContext) -> str:
    """Repeat the instruction with the exact errors and a fix checklist."""
    if ctx.stage == Stage.COMPILE:
        return build_compile_fix_prompt(ctx.instruction, ctx.errors)
    return build_validation_fix_prompt(ctx.instruction, ctx.errors)


def minimal_version(ctx: FeedbackContext) -> str:
    """Ask for the simplest possible component instead."""
    return build_minimal_prompt(ctx.instruction, ctx.errors)


DEFAULT_STRATEGIES: tuple[FeedbackStrategy, ...] = (targeted_fix, minimal_version)


def select_strategy(strategies: Sequence[FeedbackStrategy], retry: int) -> FeedbackStrategy:
    """Strategy for 1-based ``retry``; the last one repeats past the end."""
    if not strategies:
        raise ValueError("At least one feedback strategy is required")
    if retry < 1:
        raise ValueError(f"retry must be >= 1, got {retry}")
    return strategies[min(retry, len(strategies)) - 1]
