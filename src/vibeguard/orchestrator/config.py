"""Self-healing pipeline configuration.

Retry budgets are capped at STAGE_RETRY_CEILING regardless of the
configured value.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable

from vibeguard.orchestrator.strategies import DEFAULT_STRATEGIES, FeedbackStrategy

if TYPE_CHECKING:
    from vibeguard.models.attempts import Attempt

STAGE_RETRY_CEILING = 2


@dataclass
class PipelineConfig:
    """Configuration for SelfHealingPipeline.

    Attributes:
        enable_self_healing: When False, any rejection fails the run.
        max_retries: Validation retries (capped at STAGE_RETRY_CEILING).
        max_compile_retries: Compile retries (capped at STAGE_RETRY_CEILING).
        strategies: Ordered feedback strategies, indexed by retry number.
        ensure_preamble: Add a default front-matter block before compiling
            artifacts that have none.
        transpile_typescript: Erase TypeScript syntax before compiling, for
            generators allowed to write TypeScript.
        on_attempt: Called with every recorded Attempt, in order.
    """

    enable_self_healing: bool = True
    max_retries: int = 1
    max_compile_retries: int = 2
    strategies: tuple[FeedbackStrategy, ...] = DEFAULT_STRATEGIES
    ensure_preamble: bool = True
    transpile_typescript: bool = False
    on_attempt: Callable[[Attempt], None] | None = field(default=None, repr=False)

    def __post_init__(self) -> None:
        if self.max_retries < 0 or self.max_compile_retries < 0:
            raise ValueError("Retry budgets must be non-negative")
        if not self.strategies:
            raise ValueError("At least one feedback strategy is required")

    @property
    def validation_retry_cap(self) -> int:
        if not self.enable_self_healing:
            return 0
        return min(self.max_retries, STAGE_RETRY_CEILING)

    @property
    def compile_retry_cap(self) -> int:
        if not self.enable_self_healing:
            return 0
        return min(self.max_compile_retries, STAGE_RETRY_CEILING)
