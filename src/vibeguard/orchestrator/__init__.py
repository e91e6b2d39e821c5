"""Self-healing orchestration of generation, validation and compilation."""

from vibeguard.orchestrator.config import STAGE_RETRY_CEILING, PipelineConfig
from vibeguard.orchestrator.loop import SelfHealingPipeline
from vibeguard.orchestrator.strategies import (
    DEFAULT_STRATEGIES,
    FeedbackContext,
    FeedbackStrategy,
    minimal_version,
    select_strategy,
    targeted_fix,
)

__all__ = [
    "DEFAULT_STRATEGIES",
    "FeedbackContext",
    "FeedbackStrategy",
    "PipelineConfig",
    "STAGE_RETRY_CEILING",
    "SelfHealingPipeline",
    "minimal_version",
    "select_strategy",
    "targeted_fix",
]
