"""Source handling shared by the validator and the auto-fixer."""

from vibeguard.engine.preamble import (
    attach_preamble,
    ensure_preamble,
    split_preamble,
)
from vibeguard.engine.tree import SourceTree

__all__ = ["SourceTree", "attach_preamble", "ensure_preamble", "split_preamble"]
