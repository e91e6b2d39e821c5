"""Domain models: findings, fix results, attempts, policy, and requests."""

from vibeguard.models.attempts import (
    Attempt,
    Outcome,
    PipelineFailure,
    PipelineOutcome,
    PipelineSuccess,
    Stage,
)
from vibeguard.models.catalog import (
    CatalogEntry,
    GenerationRequest,
    ProviderSelection,
)
from vibeguard.models.config import ValidationPolicy
from vibeguard.models.findings import (
    FindingCategory,
    Severity,
    ValidationFinding,
    ValidationReport,
)
from vibeguard.models.fixes import AutoFixResult

__all__ = [
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
]
