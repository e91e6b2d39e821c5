"""Vibeguard exception hierarchy.

All vibeguard-specific exceptions inherit from VibeguardError.
The validator and auto-fixer never raise; only the orchestrator, the
generation layer, and compilers raise these.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

if TYPE_CHECKING:
    from vibeguard.models.attempts import Attempt, PipelineFailure, Stage


class VibeguardError(Exception):
    """Base exception for all vibeguard errors."""


class CompileError(VibeguardError):
    """Raised by a compiler when an artifact cannot be compiled.

    Compilers may raise any exception; this one exists so that they can
    attach a diagnostic without inventing their own type.
    """

    def __init__(self, message: str, *, diagnostic: str | None = None) -> None:
        self.diagnostic = diagnostic
        super().__init__(message)


class PipelineError(VibeguardError):
    """Terminal failure of a self-healing pipeline run.

    Attributes:
        stage: The stage whose failure ended the run.
        last_errors: Error messages from the final rejected attempt.
        errors: Every error message accumulated during the stage, in order.
        attempts: The complete attempt trail of the run.
    """

    def __init__(
        self,
        message: str,
        *,
        stage: Stage,
        last_errors: Sequence[str],
        errors: Sequence[str] | None = None,
        attempts: Sequence[Attempt] = (),
    ) -> None:
        self.stage = stage
        self.last_errors = list(last_errors)
        self.errors = list(errors) if errors is not None else list(last_errors)
        self.attempts = list(attempts)
        super().__init__(message)

    @property
    def outcome(self) -> PipelineFailure:
        """The failure as a PipelineFailure value."""
        from vibeguard.models.attempts import PipelineFailure

        return PipelineFailure(
            exhausted_stage=self.stage,
            last_errors=tuple(self.last_errors),
            errors=tuple(self.errors),
            attempts=tuple(self.attempts),
        )


class RetryExhaustedError(PipelineError):
    """Raised when a stage's retry budget is consumed without success."""

    def __init__(
        self,
        stage: Stage,
        last_errors: Sequence[str],
        *,
        errors: Sequence[str] | None = None,
        attempts: Sequence[Attempt] = (),
        retries: int = 0,
    ) -> None:
        self.retries = retries
        listed = list(errors) if errors is not None else list(last_errors)
        detail = "; ".join(listed) if listed else "no diagnostics"
        super().__init__(
            f"{stage.value.capitalize()} failed after {retries} "
            f"{'retry' if retries == 1 else 'retries'}: {detail}",
            stage=stage,
            last_errors=last_errors,
            errors=errors,
            attempts=attempts,
        )


class RegenerationRejectedError(PipelineError):
    """Raised when a compile-triggered regeneration fails validation.

    A regenerated artifact must validate before it is compiled again;
    there is no validation retry inside the compile loop.
    """

    def __init__(
        self,
        stage: Stage,
        last_errors: Sequence[str],
        *,
        attempts: Sequence[Attempt] = (),
    ) -> None:
        super().__init__(
            "Regenerated code failed validation: " + "; ".join(last_errors),
            stage=stage,
            last_errors=last_errors,
            attempts=attempts,
        )
