"""Vibeguard: validate, repair and self-heal LLM-generated UI components.

Public API::

    from vibeguard import validate, autofix, SelfHealingPipeline, GenerationRequest

    report = validate(source)
    fixed = autofix(source)
    result = SelfHealingPipeline(generator=gen, compiler=bundler).run(
        GenerationRequest(instruction="A newsletter signup form")
    )
"""

from vibeguard._version import __version__
from vibeguard.autofix import autofix, strip_typescript
from vibeguard.engine.preamble import ensure_preamble, split_preamble
from vibeguard.exceptions import (
    CompileError,
    PipelineError,
    RegenerationRejectedError,
    RetryExhaustedError,
    VibeguardError,
)
from vibeguard.llm import ChatClient, LLMGenerator, generator_for_provider
from vibeguard.models import (
    Attempt,
    AutoFixResult,
    CatalogEntry,
    FindingCategory,
    GenerationRequest,
    Outcome,
    PipelineFailure,
    PipelineOutcome,
    PipelineSuccess,
    ProviderSelection,
    Severity,
    Stage,
    ValidationFinding,
    ValidationPolicy,
    ValidationReport,
)
from vibeguard.orchestrator import PipelineConfig, SelfHealingPipeline
from vibeguard.protocols import CompileOutput, Compiler, Generator, GeneratorFactory
from vibeguard.validation import extract_imports, validate

__all__ = [
    "__version__",
    # Core operations
    "autofix",
    "strip_typescript",
    "validate",
    "extract_imports",
    "SelfHealingPipeline",
    "PipelineConfig",
    # Preamble
    "ensure_preamble",
    "split_preamble",
    # Models
    "Attempt",
    "AutoFixResult",
    "CatalogEntry",
    "FindingCategory",
    "GenerationRequest",
    "Outcome",
    "PipelineFailure",
    "PipelineOutcome",
    "PipelineSuccess",
    "ProviderSelection",
    "Severity",
    "Stage",
    "ValidationFinding",
    "ValidationPolicy",
    "ValidationReport",
    # Collaborators
    "CompileOutput",
    "Compiler",
    "Generator",
    "GeneratorFactory",
    "ChatClient",
    "LLMGenerator",
    "generator_for_provider",
    # Exceptions
    "VibeguardError",
    "CompileError",
    "PipelineError",
    "RetryExhaustedError",
    "RegenerationRejectedError",
]
