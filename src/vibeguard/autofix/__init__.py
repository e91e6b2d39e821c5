"""Deterministic repairs for generated component source."""

from vibeguard.autofix.fixer import autofix
from vibeguard.autofix.transforms import HANDLER_RENAMES, TRANSFORMS
from vibeguard.autofix.typescript import strip_typescript

__all__ = ["HANDLER_RENAMES", "TRANSFORMS", "autofix", "strip_typescript"]
