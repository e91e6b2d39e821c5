"""Tests for attempt records, pipeline outcomes, and pipeline errors."""

from __future__ import annotations

from vibeguard.exceptions import (
    PipelineError,
    RegenerationRejectedError,
    RetryExhaustedError,
    VibeguardError,
)
from vibeguard.models.attempts import (
    Attempt,
    Outcome,
    PipelineFailure,
    PipelineSuccess,
    Stage,
)


class TestAttempts:
    def test_accepted(self):
        assert Attempt(Stage.VALIDATION, 0, Outcome.ACCEPTED).accepted
        assert not Attempt(Stage.COMPILE, 1, Outcome.REJECTED).accepted

    def test_healed(self):
        first_try = PipelineSuccess(
            artifact="a",
            attempts=(
                Attempt(Stage.VALIDATION, 0, Outcome.ACCEPTED),
                Attempt(Stage.COMPILE, 0, Outcome.ACCEPTED),
            ),
        )
        assert not first_try.healed
        healed = PipelineSuccess(
            artifact="a",
            attempts=(
                Attempt(Stage.VALIDATION, 0, Outcome.REJECTED, findings=("x",)),
                Attempt(Stage.VALIDATION, 1, Outcome.ACCEPTED),
            ),
        )
        assert healed.healed


class TestPipelineErrors:
    def test_hierarchy(self):
        assert issubclass(PipelineError, VibeguardError)
        assert issubclass(RetryExhaustedError, PipelineError)
        assert issubclass(RegenerationRejectedError, PipelineError)

    def test_retry_exhausted_message_lists_all_errors(self):
        err = RetryExhaustedError(
            Stage.VALIDATION, ["b"], errors=["a", "b"], retries=1
        )
        assert str(err) == "Validation failed after 1 retry: a; b"
        assert err.last_errors == ["b"]
        assert err.errors == ["a", "b"]

    def test_outcome(self):
        attempt = Attempt(Stage.COMPILE, 0, Outcome.REJECTED, findings=("boom",))
        err = RetryExhaustedError(Stage.COMPILE, ["boom"], attempts=[attempt], retries=0)
        assert err.outcome == PipelineFailure(
            exhausted_stage=Stage.COMPILE,
            last_errors=("boom",),
            errors=("boom",),
            attempts=(attempt,),
        )

    def test_regeneration_rejected(self):
        err = RegenerationRejectedError(Stage.COMPILE, ["Use of eval() is forbidden"])
        assert err.stage == Stage.COMPILE
        assert "eval()" in str(err)
