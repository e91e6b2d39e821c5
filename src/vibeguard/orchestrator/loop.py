"""Self-healing generation pipeline.

Drives one request through two bounded stages:

    GENERATE -> AUTOFIX -> VALIDATE -> accept | regenerate with feedback | fail
    COMPILE  -> done | regenerate with feedback (-> AUTOFIX -> VALIDATE) | fail

Each stage has its own retry budget (see PipelineConfig), so a run makes
at most ``1 + validation cap + compile cap`` generator calls. All per-run
state lives in a ``_Run`` object created by ``run()``; a pipeline can be
shared by concurrent callers.
"""

from __future__ import annotations

import logging

from vibeguard.autofix import autofix, strip_typescript
from vibeguard.engine.preamble import ensure_preamble
from vibeguard.exceptions import (
    PipelineError,
    RegenerationRejectedError,
    RetryExhaustedError,
)
from vibeguard.models.attempts import (
    Attempt,
    Outcome,
    PipelineOutcome,
    PipelineSuccess,
    Stage,
)
from vibeguard.models.catalog import GenerationRequest
from vibeguard.models.findings import ValidationReport
from vibeguard.models.fixes import AutoFixResult
from vibeguard.orchestrator.config import PipelineConfig
from vibeguard.orchestrator.strategies import FeedbackContext, select_strategy
from vibeguard.prompts.generation import compose_instruction, sanitize_instruction
from vibeguard.protocols import Compiler, Generator, GeneratorFactory
from vibeguard.validation import validate

logger = logging.getLogger(__name__)


class SelfHealingPipeline:
    """Generate, repair, validate and compile a component with bounded retries.

    Exactly one of ``generator`` and ``generator_factory`` must be given.
    With a factory, the generator is built per run from the request's
    provider selection.

    Usage::

        pipeline = SelfHealingPipeline(generator=gen, compiler=bundler)
        result = pipeline.run(GenerationRequest(instruction="A pricing table"))
        print(result.artifact)
    """

    def __init__(
        self,
        *,
        compiler: Compiler,
        generator: Generator | None = None,
        generator_factory: GeneratorFactory | None = None,
        config: PipelineConfig | None = None,
    ) -> None:
        if (generator is None) == (generator_factory is None):
            raise ValueError("Pass exactly one of generator= or generator_factory=")
        self._compiler = compiler
        self._generator = generator
        self._generator_factory = generator_factory
        self._config = config or PipelineConfig()

    @property
    def config(self) -> PipelineConfig:
        return self._config

    def run(self, request: GenerationRequest) -> PipelineSuccess:
        """Run the pipeline for one request.

        Raises:
            RetryExhaustedError: A stage used up its retry budget.
            ValueError: The instruction is empty once sanitized.
            RegenerationRejectedError: A regeneration after a compile
                failure did not pass validation.
        """
        generator = self._generator
        if generator is None:
            generator = self._generator_factory(request.provider)
        return _Run(request, generator, self._compiler, self._config).execute()

    def run_outcome(self, request: GenerationRequest) -> PipelineOutcome:
        """Like ``run()``, but terminal failures are returned as values.

        Generator and configuration errors still propagate.
        """
        try:
            return self.run(request)
        except PipelineError as exc:
            return exc.outcome


class _Run:
    """State of a single pipeline run."""

    def __init__(
        self,
        request: GenerationRequest,
        generator: Generator,
        compiler: Compiler,
        config: PipelineConfig,
    ) -> None:
        self.request = request
        self.generator = generator
        self.compiler = compiler
        self.config = config
        self.instruction = compose_instruction(request)
        self.attempts: list[Attempt] = []

    def execute(self) -> PipelineSuccess:
        logger.info("Generating component")
        source, report = self.validation_stage()
        return self.compile_stage(source, report)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def record(self, attempt: Attempt) -> None:
        self.attempts.append(attempt)
        if self.config.on_attempt is not None:
            self.config.on_attempt(attempt)

    def feedback(self, stage: Stage, retry: int, errors: list[str]) -> str:
        strategy = select_strategy(self.config.strategies, retry)
        return strategy(FeedbackContext(
            stage=stage,
            retry=retry,
            instruction=self.instruction,
            errors=tuple(errors),
        ))

    def generate_checked(self, instruction: str) -> tuple[AutoFixResult, ValidationReport]:
        """Generate, auto-fix, validate, and record the validation attempt."""
        fixed = autofix(self.generator.generate(instruction))
        if fixed.fixes:
            logger.info(
                "Auto-fixer applied %d fix(es): %s",
                len(fixed.fixes), "; ".join(fixed.fixes),
            )
        report = validate(fixed.code, self.request.policy)
        index = sum(1 for a in self.attempts if a.stage == Stage.VALIDATION)
        self.record(Attempt(
            stage=Stage.VALIDATION,
            index=index,
            outcome=Outcome.ACCEPTED if report.is_valid else Outcome.REJECTED,
            findings=tuple(report.errors),
            fixes=fixed.fixes,
            warnings=tuple(report.warnings),
        ))
        if report.warnings:
            logger.warning("Validation warnings: %s", "; ".join(report.warnings))
        return fixed, report

    def prepare(self, source: str) -> str:
        """Source as handed to the compiler."""
        if self.config.ensure_preamble:
            source = ensure_preamble(source, sanitize_instruction(self.request.instruction))
        if self.config.transpile_typescript:
            source = strip_typescript(source)
            logger.info("Erased TypeScript syntax before compiling")
        return source

    # ------------------------------------------------------------------
    # Stages
    # ------------------------------------------------------------------

    def validation_stage(self) -> tuple[str, ValidationReport]:
        cap = self.config.validation_retry_cap
        accumulated: list[str] = []
        instruction = self.instruction
        retry = 0
        while True:
            fixed, report = self.generate_checked(instruction)
            if report.is_valid:
                if retry:
                    logger.info("Validation passed after %d retry(ies)", retry)
                return fixed.code, report

            accumulated.extend(report.errors)
            logger.warning(
                "Validation attempt %d rejected: %s", retry, "; ".join(report.errors)
            )
            if retry >= cap:
                raise RetryExhaustedError(
                    Stage.VALIDATION,
                    report.errors,
                    errors=accumulated,
                    attempts=self.attempts,
                    retries=retry,
                )
            retry += 1
            instruction = self.feedback(Stage.VALIDATION, retry, report.errors)

    def compile_stage(self, source: str, report: ValidationReport) -> PipelineSuccess:
        cap = self.config.compile_retry_cap
        accumulated: list[str] = []
        retry = 0
        while True:
            prepared = self.prepare(source)
            try:
                output = self.compiler.compile(prepared, self.request.project_path)
            except Exception as exc:
                failure = exc
            else:
                self.record(
                    Attempt(stage=Stage.COMPILE, index=retry, outcome=Outcome.ACCEPTED)
                )
                if retry:
                    logger.info("Compilation succeeded after %d retry(ies)", retry)
                return PipelineSuccess(
                    artifact=output.artifact,
                    metadata=dict(output.metadata),
                    source=prepared,
                    attempts=tuple(self.attempts),
                    warnings=tuple(report.warnings),
                )

            message = _compile_diagnostic(failure)
            accumulated.append(message)
            logger.error("Compile attempt %d failed: %s", retry, message)
            self.record(Attempt(
                stage=Stage.COMPILE,
                index=retry,
                outcome=Outcome.REJECTED,
                findings=(message,),
            ))
            if retry >= cap:
                raise RetryExhaustedError(
                    Stage.COMPILE,
                    [message],
                    errors=accumulated,
                    attempts=self.attempts,
                    retries=retry,
                ) from failure

            retry += 1
            fixed, report = self.generate_checked(
                self.feedback(Stage.COMPILE, retry, [message])
            )
            if not report.is_valid:
                raise RegenerationRejectedError(
                    Stage.COMPILE, report.errors, attempts=self.attempts
                )
            source = fixed.code


def _compile_diagnostic(failure: BaseException) -> str:
    """Feedback text for a failed compile, preferring the attached diagnostic."""
    diagnostic = getattr(failure, "diagnostic", None)
    message = str(failure)
    if diagnostic and message and diagnostic not in message:
        return f"{message}: {diagnostic}"
    return diagnostic or message or type(failure).__name__
